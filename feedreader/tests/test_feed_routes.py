"""
Tests for feed routes.
"""

from unittest.mock import AsyncMock, patch

import aiohttp

from feedreader.config import state


def _serve(fetcher, body):
    """Stub retrieval so every request returns ``body``."""
    return patch.object(fetcher, "_get_text", new=AsyncMock(return_value=body))


def _fail(fetcher, message="connection refused"):
    return patch.object(
        fetcher, "_get_text", new=AsyncMock(side_effect=aiohttp.ClientError(message))
    )


class TestListFeeds:
    """Tests for GET /feeds endpoint."""

    def test_list_feeds_empty(self, client):
        """Should return empty list when no feeds."""
        response = client.get("/feeds")
        assert response.status_code == 200
        assert response.json() == []

    def test_list_feeds_has_required_fields(self, client_with_data):
        """Each feed should have required fields."""
        client, data = client_with_data
        feeds = client.get("/feeds").json()
        assert len(feeds) == 1
        feed = feeds[0]
        assert feed["id"] == data["feed_id"]
        assert feed["url"] == "https://example.com/feed.xml"
        assert feed["title"] == "Test Feed"
        assert feed["description"] == "A feed for tests"
        assert feed["category"] == "Test"
        assert "last_fetched" in feed

    def test_list_feeds_includes_counts(self, client_with_data):
        """Feed should include article and unread counts."""
        client, data = client_with_data
        feed = client.get("/feeds").json()[0]
        assert feed["article_count"] == 2
        assert feed["unread_count"] == 1


class TestAddFeed:
    """Tests for POST /feeds endpoint."""

    def test_add_feed(self, client, fetcher, rss_document):
        """Should subscribe and store the feed's current items."""
        with _serve(fetcher, rss_document):
            response = client.post("/feeds", json={"url": "https://blog.example.com/rss"})

        assert response.status_code == 200
        feed = response.json()
        assert feed["title"] == "Example Blog"
        assert feed["description"] == "Posts about things & stuff"
        assert feed["article_count"] == 2
        assert feed["unread_count"] == 2
        assert feed["last_fetched"] is not None
        assert feed["fetch_error"] is None

    def test_add_feed_custom_title_and_category(self, client, fetcher, atom_document):
        with _serve(fetcher, atom_document):
            response = client.post("/feeds", json={
                "url": "https://atom.example.org/feed.xml",
                "title": "My Atom",
                "category": "Reading",
            })

        assert response.status_code == 200
        assert response.json()["title"] == "My Atom"
        assert response.json()["category"] == "Reading"

    def test_add_feed_from_web_page(self, client, fetcher, rss_document):
        """A site URL is resolved to the feed it advertises."""
        page = (
            '<html><head><link rel="alternate" type="application/rss+xml" '
            'href="/rss.xml"></head></html>'
        )
        get = AsyncMock(side_effect=[page, rss_document])

        with patch.object(fetcher, "_get_text", new=get):
            response = client.post("/feeds", json={"url": "https://blog.example.com/"})

        assert response.status_code == 200
        assert response.json()["url"] == "https://blog.example.com/rss.xml"

    def test_add_feed_unreachable(self, client, fetcher):
        """Should reject a feed that can't be retrieved."""
        with _fail(fetcher):
            response = client.post("/feeds", json={"url": "https://down.example/rss"})

        assert response.status_code == 400
        assert "connection refused" in response.json()["detail"]
        assert client.get("/feeds").json() == []

    def test_add_feed_already_subscribed(self, client_with_data):
        client, data = client_with_data
        response = client.post("/feeds", json={"url": "https://EXAMPLE.com/feed.xml"})
        assert response.status_code == 409

    def test_add_feed_missing_url(self, client):
        """Should require URL."""
        response = client.post("/feeds", json={})
        assert response.status_code == 422


class TestPreviewFeed:
    """Tests for GET /feeds/preview endpoint."""

    def test_preview_returns_parsed_items(self, client, fetcher, rss_document):
        with _serve(fetcher, rss_document):
            response = client.get("/feeds/preview", params={"url": "https://blog.example.com/rss"})

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Example Blog"
        assert [i["title"] for i in data["items"]] == ["First post", "Second post"]
        assert data["items"][0]["author"] == "Jane Doe"
        assert data["items"][1]["pub_date"] == "2025-01-07T08:30:00Z"

    def test_preview_stores_nothing(self, client, fetcher, rss_document):
        with _serve(fetcher, rss_document):
            client.get("/feeds/preview", params={"url": "https://blog.example.com/rss"})

        assert client.get("/feeds").json() == []
        assert client.get("/articles").json() == []

    def test_preview_unreachable(self, client, fetcher):
        with _fail(fetcher):
            response = client.get("/feeds/preview", params={"url": "https://down.example/rss"})
        assert response.status_code == 502

    def test_preview_requires_url(self, client):
        assert client.get("/feeds/preview").status_code == 422


class TestDeleteFeed:
    """Tests for DELETE /feeds/{feed_id} endpoint."""

    def test_delete_feed(self, client_with_data):
        """Should delete a feed and its articles."""
        client, data = client_with_data
        response = client.delete(f"/feeds/{data['feed_id']}")
        assert response.status_code == 200
        assert response.json()["success"] is True

        assert client.get("/feeds").json() == []
        assert client.get("/articles").json() == []

    def test_delete_feed_not_found(self, client):
        """Should return 404 for non-existent feed."""
        response = client.delete("/feeds/99999")
        assert response.status_code == 404


class TestUpdateFeed:
    """Tests for PUT /feeds/{feed_id} endpoint."""

    def test_update_feed_title(self, client_with_data):
        client, data = client_with_data
        response = client.put(f"/feeds/{data['feed_id']}", json={"title": "Updated"})
        assert response.status_code == 200
        assert response.json()["title"] == "Updated"
        assert response.json()["category"] == "Test"

    def test_update_feed_category(self, client_with_data):
        client, data = client_with_data
        response = client.put(f"/feeds/{data['feed_id']}", json={"category": "New Category"})
        assert response.status_code == 200
        assert response.json()["category"] == "New Category"

    def test_clear_category(self, client_with_data):
        """An empty category removes it."""
        client, data = client_with_data
        response = client.put(f"/feeds/{data['feed_id']}", json={"category": ""})
        assert response.json()["category"] is None

    def test_update_feed_not_found(self, client):
        response = client.put("/feeds/99999", json={"title": "Test"})
        assert response.status_code == 404


class TestRefreshFeed:
    """Tests for POST /feeds/{feed_id}/refresh endpoint."""

    def test_refresh_single_feed(self, client_with_data, fetcher, rss_document):
        """New items are added next to the existing ones."""
        client, data = client_with_data
        with _serve(fetcher, rss_document):
            response = client.post(f"/feeds/{data['feed_id']}/refresh")

        assert response.status_code == 200
        assert response.json() == {"success": True, "count": 2}
        assert len(client.get("/articles").json()) == 4

    def test_refresh_is_idempotent(self, client_with_data, fetcher, rss_document):
        client, data = client_with_data
        with _serve(fetcher, rss_document):
            client.post(f"/feeds/{data['feed_id']}/refresh")
            client.post(f"/feeds/{data['feed_id']}/refresh")

        assert len(client.get("/articles").json()) == 4

    def test_refresh_failure_recorded(self, client_with_data, fetcher):
        client, data = client_with_data
        with _fail(fetcher, "server exploded"):
            response = client.post(f"/feeds/{data['feed_id']}/refresh")

        assert response.status_code == 502
        feed = client.get("/feeds").json()[0]
        assert "server exploded" in feed["fetch_error"]
        # Existing articles are untouched
        assert feed["article_count"] == 2

    def test_refresh_updates_description_keeps_title(self, client_with_data, fetcher, rss_document):
        """The stored description follows the feed; a custom title stays."""
        client, data = client_with_data
        with _serve(fetcher, rss_document):
            client.post(f"/feeds/{data['feed_id']}/refresh")

        feed = client.get("/feeds").json()[0]
        assert feed["description"] == "Posts about things & stuff"
        assert feed["title"] == "Test Feed"

    def test_refresh_keeps_description_when_feed_has_none(self, client_with_data, fetcher):
        client, data = client_with_data
        bare = "<rss><channel><title>T</title></channel></rss>"
        with _serve(fetcher, bare):
            client.post(f"/feeds/{data['feed_id']}/refresh")

        assert client.get("/feeds").json()[0]["description"] == "A feed for tests"

    def test_refresh_feed_not_found(self, client):
        response = client.post("/feeds/99999/refresh")
        assert response.status_code == 404


class TestRefreshAll:
    """Tests for POST /feeds/refresh endpoint."""

    def test_refresh_all_isolates_failures(self, client_with_data, fetcher, atom_document):
        client, data = client_with_data
        broken_id = state.db.add_feed("https://broken.example/rss", "Broken")

        async def fake_get(session, url):
            if "broken" in url:
                raise aiohttp.ClientError("boom")
            return atom_document

        with patch.object(fetcher, "_get_text", new=AsyncMock(side_effect=fake_get)):
            response = client.post("/feeds/refresh")

        assert response.status_code == 200
        result = response.json()
        assert result["total"] == 2
        assert result["updated"] == 1
        assert result["failed"] == 1

        by_id = {r["feed_id"]: r for r in result["results"]}
        assert by_id[data["feed_id"]]["success"] is True
        assert by_id[data["feed_id"]]["count"] == 2
        assert by_id[broken_id]["success"] is False
        assert "boom" in by_id[broken_id]["error"]

        feeds = {f["id"]: f for f in client.get("/feeds").json()}
        assert feeds[data["feed_id"]]["description"] == "An Atom feed"

    def test_refresh_all_no_feeds(self, client):
        response = client.post("/feeds/refresh")
        assert response.status_code == 200
        assert response.json() == {"total": 0, "updated": 0, "failed": 0, "results": []}

    def test_refresh_already_running(self, client):
        state.refresh_in_progress = True
        try:
            response = client.post("/feeds/refresh")
        finally:
            state.refresh_in_progress = False
        assert response.status_code == 409

    def test_refresh_flag_reset_after_run(self, client):
        client.post("/feeds/refresh")
        assert client.get("/status").json()["refresh_in_progress"] is False


class TestOPMLExport:
    """Tests for GET /feeds/export-opml endpoint."""

    def test_export_opml_empty(self, client):
        response = client.get("/feeds/export-opml")
        assert response.status_code == 200
        assert response.json()["feed_count"] == 0

    def test_export_opml_with_feeds(self, client_with_data):
        client, data = client_with_data
        result = client.get("/feeds/export-opml").json()
        assert result["feed_count"] == 1
        assert result["opml"].startswith("<?xml")
        assert 'xmlUrl="https://example.com/feed.xml"' in result["opml"]
        assert 'text="Test"' in result["opml"]


class TestOPMLImport:
    """Tests for POST /feeds/import-opml endpoint."""

    OPML = """<?xml version="1.0" encoding="UTF-8"?>
    <opml version="2.0">
        <head><title>Test</title></head>
        <body>
            <outline text="Blogs">
                <outline type="rss" text="Good" xmlUrl="https://good.example/rss"/>
                <outline type="rss" text="Bad" xmlUrl="https://bad.example/rss"/>
            </outline>
            <outline type="rss" text="Existing" xmlUrl="https://example.com/feed.xml"/>
        </body>
    </opml>"""

    def test_import_opml(self, client_with_data, fetcher, rss_document):
        client, data = client_with_data

        async def fake_get(session, url):
            if "bad" in url:
                raise aiohttp.ClientError("unreachable")
            return rss_document

        with patch.object(fetcher, "_get_text", new=AsyncMock(side_effect=fake_get)):
            response = client.post("/feeds/import-opml", json={"opml_content": self.OPML})

        assert response.status_code == 200
        result = response.json()
        assert result["total"] == 3
        assert result["imported"] == 1
        assert result["skipped"] == 1
        assert result["failed"] == 1

        feeds = {f["url"]: f for f in client.get("/feeds").json()}
        assert feeds["https://good.example/rss"]["title"] == "Good"
        assert feeds["https://good.example/rss"]["category"] == "Blogs"
        assert feeds["https://good.example/rss"]["article_count"] == 2
        assert "https://bad.example/rss" not in feeds

    def test_import_opml_invalid_xml(self, client):
        response = client.post("/feeds/import-opml", json={"opml_content": "not valid xml"})
        assert response.status_code == 400

    def test_import_opml_empty_feeds(self, client):
        opml = "<opml version='2.0'><head><title>Test</title></head><body></body></opml>"
        response = client.post("/feeds/import-opml", json={"opml_content": opml})
        assert response.status_code == 400
        assert "No feeds found" in response.json()["detail"]

    def test_import_opml_missing_content(self, client):
        response = client.post("/feeds/import-opml", json={})
        assert response.status_code == 422
