"""
Tests for cacheability metadata and the headers it produces
"""

from fastapi import Response

from sitewidgets.utils.cacheability import PERMANENT, CacheableMetadata


class TestCacheableMetadata:
    def test_add_is_deduplicated(self):
        meta = CacheableMetadata().add_tags("a", "b", "a").add_contexts("url", "url")
        assert meta.tags == ["a", "b"]
        assert meta.contexts == ["url"]

    def test_merge_keeps_lowest_max_age(self):
        merged = CacheableMetadata(max_age=300).merge(CacheableMetadata(max_age=60))
        assert merged.max_age == 60

    def test_merge_with_permanent(self):
        assert CacheableMetadata().merge(CacheableMetadata(max_age=120)).max_age == 120
        assert CacheableMetadata().merge(CacheableMetadata()).max_age == PERMANENT

    def test_merge_unions_tags_and_contexts(self):
        left = CacheableMetadata(tags=["content:1"], contexts=["url"])
        right = CacheableMetadata(tags=["content:2", "content:1"], contexts=["headers:Accept-Language"])
        merged = left.merge(right)
        assert merged.tags == ["content:1", "content:2"]
        assert merged.contexts == ["url", "headers:Accept-Language"]
        # Operands are left untouched
        assert left.tags == ["content:1"]


class TestApplyTo:
    def test_public_max_age(self):
        response = CacheableMetadata(max_age=300, tags=["content_list", "content:7"]).apply_to(Response())
        assert response.headers["Cache-Control"] == "public, max-age=300"
        assert response.headers["X-Cache-Tags"] == "content_list content:7"

    def test_uncacheable(self):
        response = CacheableMetadata(max_age=0).apply_to(Response())
        assert response.headers["Cache-Control"] == "no-cache, private"

    def test_vary_from_header_contexts(self):
        meta = CacheableMetadata(contexts=["url.query_args:q", "headers:Accept-Language"])
        response = meta.apply_to(Response())
        assert response.headers["Vary"] == "Accept-Language"
        assert response.headers["X-Cache-Contexts"] == "url.query_args:q headers:Accept-Language"
