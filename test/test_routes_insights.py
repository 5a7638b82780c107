"""
Tests for the insights search endpoint
"""

from utils.mock_utils import create_test_content, create_test_content_type, create_test_contents, create_test_user

SEARCH_URL = "/api/v1/insights/search"


class TestInsightsSearchRoute:
    async def test_missing_content_type_returns_404(self, client):
        response = await client.get(SEARCH_URL)
        assert response.status_code == 404
        assert response.json() == {"error": 'The "insights" content type is not available.'}

    async def test_growth_listing_first_page(self, client, test_db):
        await create_test_content_type(test_db)
        await create_test_contents(test_db, 12, "Growth outlook", body="Long-term growth")
        await create_test_content(test_db, "Rates update", body="Nothing relevant")

        response = await client.get(SEARCH_URL, params={"q": "growth", "limit": "5"})

        assert response.status_code == 200
        data = response.json()
        assert data["meta"] == {"query": "growth", "limit": 5, "page": 0, "total": 12, "pages": 3}
        assert len(data["data"]) == 5
        assert data["data"][0]["title"] == "Growth outlook 12"

    async def test_item_shape(self, client, test_db):
        await create_test_content_type(test_db)
        author = await create_test_user(test_db)
        await create_test_content(
            test_db,
            "Market letter",
            body="<p>Body text</p>",
            author_id=author.id,
            slug="market-letter",
            fields={"field_summary": "<b>Short</b> summary", "field_read_time": "4 min"},
        )

        item = (await client.get(SEARCH_URL)).json()["data"][0]

        assert item["summary"] == "Short summary"
        assert item["author"] == "Ana Author"
        assert item["created"] == "2024-01-01T12:00:00+00:00"
        assert item["url"] == "http://localhost:8000/insights/market-letter"
        assert item["theme"] == {"id": None, "label": ""}
        assert item["read_time"] == "4 min"

    async def test_bad_paging_values_are_clamped(self, client, test_db):
        await create_test_content_type(test_db)

        response = await client.get(SEARCH_URL, params={"limit": "999", "page": "-3"})

        assert response.status_code == 200
        meta = response.json()["meta"]
        assert (meta["limit"], meta["page"], meta["total"], meta["pages"]) == (50, 0, 0, 0)

    async def test_non_numeric_limit_uses_default(self, client, test_db):
        await create_test_content_type(test_db)
        response = await client.get(SEARCH_URL, params={"limit": "ten"})
        assert response.json()["meta"]["limit"] == 10

    async def test_cache_headers(self, client, test_db):
        await create_test_content_type(test_db)
        content = await create_test_content(test_db, "Cached")

        response = await client.get(SEARCH_URL)

        assert response.headers["Cache-Control"] == "public, max-age=300"
        tags = response.headers["X-Cache-Tags"].split()
        assert "content_list" in tags
        assert f"content:{content.id}" in tags
        assert "url.query_args:q" in response.headers["X-Cache-Contexts"].split()
