"""
Tests for the insights search service

Parameter normalization and field extraction run on transient objects;
the search itself runs against the test database.
"""

from datetime import datetime

import pytest
from utils.mock_utils import create_test_content, create_test_content_type, create_test_contents, create_test_term

from sitewidgets.exceptions import ContentTypeNotAvailableError
from sitewidgets.models.content import Content, ContentStatus
from sitewidgets.models.taxonomy import TaxonomyTerm
from sitewidgets.services.insights_search_service import (
    InsightsSearchService,
    extract_read_time,
    extract_summary,
    extract_theme,
    format_created,
    normalize_search_params,
    page_count,
)


class TestNormalizeSearchParams:
    def test_defaults(self):
        query = normalize_search_params()
        assert (query.keyword, query.limit, query.page) == ("", 10, 0)

    @pytest.mark.parametrize("limit,expected", [("5", 5), ("5.0", 5), ("7.9", 7), ("0", 1), ("-4", 1), ("500", 50), ("abc", 10), ("", 10), ("inf", 10), ("nan", 10)])
    def test_limit_clamped(self, limit, expected):
        assert normalize_search_params(limit=limit).limit == expected

    @pytest.mark.parametrize("page,expected", [("2", 2), ("2.0", 2), ("-1", 0), ("x", 0)])
    def test_page_clamped(self, page, expected):
        assert normalize_search_params(page=page).page == expected

    def test_keyword_trimmed(self):
        assert normalize_search_params(q="  growth ").keyword == "growth"

    def test_offset(self):
        assert normalize_search_params(limit="5", page="2").offset == 10

    def test_page_count(self):
        assert page_count(12, 5) == 3
        assert page_count(0, 10) == 0


class TestExtractors:
    def test_summary_fallback_chain(self):
        content = Content(fields={"field_resumen": "<p>Resumen</p>"}, body="Body")
        assert extract_summary(content) == "Resumen"

    def test_summary_prefers_first_field(self):
        content = Content(fields={"field_summary": {"value": "Summary"}, "field_resumen": "Resumen"})
        assert extract_summary(content) == "Summary"

    def test_summary_from_body_summary(self):
        content = Content(fields={}, body_summary="<em>Short</em>", body="Long body")
        assert extract_summary(content) == "Short"

    def test_summary_truncates_body(self):
        content = Content(fields={}, body="<p>" + "a" * 400 + "</p>")
        assert extract_summary(content) == "a" * 300

    def test_summary_empty(self):
        assert extract_summary(Content(fields={})) == ""

    def test_theme_resolved(self):
        content = Content(fields={"field_tema": {"target_id": 4}})
        theme = extract_theme(content, {4: TaxonomyTerm(id=4, name="Markets")})
        assert (theme.id, theme.label) == (4, "Markets")

    def test_dangling_theme_is_empty(self):
        theme = extract_theme(Content(fields={"field_theme": 99}), {})
        assert (theme.id, theme.label) == (None, "")

    def test_dangling_theme_falls_back_to_next_field(self):
        content = Content(fields={"field_theme": 999, "field_tema": 7})
        theme = extract_theme(content, {7: TaxonomyTerm(id=7, name="Growth")})
        assert (theme.id, theme.label) == (7, "Growth")

    def test_read_time(self):
        assert extract_read_time(Content(fields={"field_tiempo_de_lectura": "5 min"})) == "5 min"
        assert extract_read_time(Content(fields={})) == ""

    def test_created_is_iso_8601_utc(self):
        content = Content(created_at=datetime(2024, 3, 1, 9, 30, 0))
        assert format_created(content) == "2024-03-01T09:30:00+00:00"


class TestInsightsSearch:
    async def test_missing_content_type(self, test_db):
        with pytest.raises(ContentTypeNotAvailableError):
            await InsightsSearchService(test_db).search(normalize_search_params())

    async def test_paginates_newest_first(self, test_db):
        await create_test_content_type(test_db)
        await create_test_contents(test_db, 12, "Growth outlook")

        envelope, _ = await InsightsSearchService(test_db).search(normalize_search_params(limit="5", page="2"))

        assert envelope.meta.total == 12
        assert envelope.meta.pages == 3
        assert [item.title for item in envelope.data] == ["Growth outlook 2", "Growth outlook 1"]

    async def test_only_published_insights(self, test_db):
        await create_test_content_type(test_db)
        await create_test_content_type(test_db, "executives")
        await create_test_content(test_db, "Published")
        await create_test_content(test_db, "Draft", status=ContentStatus.DRAFT)
        await create_test_content(test_db, "Other bundle", bundle="executives")

        envelope, _ = await InsightsSearchService(test_db).search(normalize_search_params())
        assert [item.title for item in envelope.data] == ["Published"]

    async def test_keyword_matches_body_case_insensitively(self, test_db):
        await create_test_content_type(test_db)
        await create_test_content(test_db, "Quarterly letter", body="Notes on GROWTH in emerging markets")
        await create_test_content(test_db, "Rates update", body="Nothing relevant")

        envelope, _ = await InsightsSearchService(test_db).search(normalize_search_params(q="growth"))
        assert [item.title for item in envelope.data] == ["Quarterly letter"]

    async def test_body_not_searched_without_body_field(self, test_db):
        await create_test_content_type(test_db, fields=["field_summary"])
        await create_test_content(test_db, "Quarterly letter", body="growth")

        envelope, _ = await InsightsSearchService(test_db).search(normalize_search_params(q="growth"))
        assert envelope.meta.total == 0

    async def test_wildcards_are_literal(self, test_db):
        await create_test_content_type(test_db)
        await create_test_content(test_db, "Returns of 100%")
        await create_test_content(test_db, "Returns of 100 basis points")

        envelope, _ = await InsightsSearchService(test_db).search(normalize_search_params(q="100%"))
        assert [item.title for item in envelope.data] == ["Returns of 100%"]

    async def test_cache_tags(self, test_db):
        await create_test_content_type(test_db)
        term = await create_test_term(test_db, "Markets")
        content = await create_test_content(test_db, "Tagged", fields={"field_theme": term.id})

        envelope, cacheability = await InsightsSearchService(test_db).search(normalize_search_params())

        assert envelope.data[0].theme.label == "Markets"
        assert f"content:{content.id}" in cacheability.tags
        assert f"taxonomy_term:{term.id}" in cacheability.tags
        assert "content_list" in cacheability.tags

    async def test_dangling_theme_resolves_legacy_field(self, test_db):
        await create_test_content_type(test_db)
        term = await create_test_term(test_db, "Growth")
        await create_test_content(test_db, "Legacy", fields={"field_theme": term.id + 100, "field_tema": term.id})

        envelope, _ = await InsightsSearchService(test_db).search(normalize_search_params())

        assert (envelope.data[0].theme.id, envelope.data[0].theme.label) == (term.id, "Growth")
