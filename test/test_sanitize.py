"""
Tests for input sanitization utilities
"""

from sitewidgets.utils.sanitize import CV_TAGS, sanitize_filename, sanitize_html, sanitize_url, strip_markup


class TestHtmlSanitization:
    def test_strips_script_tags_keeps_text(self):
        clean = sanitize_html("<script>alert('xss')</script><strong>Bold</strong>")
        assert "<script>" not in clean
        assert "<strong>Bold</strong>" in clean

    def test_custom_tag_allow_list(self):
        clean = sanitize_html("<h3>Career</h3><img src=x onerror=alert(1)>", tags=CV_TAGS)
        assert "<h3>Career</h3>" in clean
        assert "<img" not in clean

    def test_drops_javascript_links(self):
        clean = sanitize_html('<a href="javascript:alert(1)">x</a>')
        assert "javascript:" not in clean

    def test_handles_none_and_blank(self):
        assert sanitize_html(None) == ""
        assert sanitize_html("   ") == ""


class TestStripMarkup:
    def test_removes_tags_and_decodes_entities(self):
        assert strip_markup("<p>Fish &amp; <em>chips</em></p>") == "Fish & chips"

    def test_empty(self):
        assert strip_markup(None) == ""
        assert strip_markup("") == ""


class TestUrlSanitization:
    def test_allows_http_https_mailto(self):
        assert sanitize_url("https://example.com/a") == "https://example.com/a"
        assert sanitize_url("http://example.com") == "http://example.com"
        assert sanitize_url("mailto:ir@example.com") == "mailto:ir@example.com"

    def test_allows_relative_paths_and_fragments(self):
        assert sanitize_url("/insights") == "/insights"
        assert sanitize_url("#contact") == "#contact"
        assert sanitize_url("images/map.png") == "images/map.png"

    def test_blocks_dangerous_schemes(self):
        assert sanitize_url("javascript:alert(1)") == ""
        assert sanitize_url("data:text/html;base64,AAAA") == ""

    def test_requires_host_for_http(self):
        assert sanitize_url("https:///nohost") == ""

    def test_non_string_values(self):
        assert sanitize_url(None) == ""
        assert sanitize_url(42) == ""


class TestFilenameSanitization:
    def test_prevents_directory_traversal(self):
        clean = sanitize_filename("../../etc/passwd")
        assert "/" not in clean

    def test_empty_name(self):
        assert sanitize_filename("") == "unnamed"
