"""
Pytest fixtures for feed reader tests.
"""

import os
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from feedreader.config import state
from feedreader.database import Database
from feedreader.feeds import FeedFetcher
from feedreader.parser import FeedItem
from feedreader.server import app


RSS_DOCUMENT = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
     xmlns:content="http://purl.org/rss/1.0/modules/content/"
     xmlns:dc="http://purl.org/dc/elements/1.1/">
  <channel>
    <title>Example Blog</title>
    <link>https://blog.example.com/</link>
    <description>Posts about <![CDATA[things & stuff]]></description>
    <item>
      <title>First post</title>
      <link>https://blog.example.com/posts/first</link>
      <description>Short</description>
      <content:encoded><![CDATA[<p>Full body with <img src="/images/a.png"> and <a href="//cdn.example.com/x">cdn</a></p>]]></content:encoded>
      <pubDate>Mon, 06 Jan 2025 10:00:00 GMT</pubDate>
      <dc:creator>Jane Doe</dc:creator>
    </item>
    <item>
      <title>Second post</title>
      <link>https://blog.example.com/posts/second</link>
      <description>&lt;p&gt;Escaped &amp;amp; encoded&lt;/p&gt;</description>
      <dc:date>2025-01-07T08:30:00Z</dc:date>
      <author>editor@example.com</author>
    </item>
  </channel>
</rss>
"""

ATOM_DOCUMENT = """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Example Atom</title>
  <subtitle>An Atom feed</subtitle>
  <link rel="self" href="https://atom.example.org/feed.xml"/>
  <updated>2025-01-08T00:00:00Z</updated>
  <entry>
    <title>Atom entry one</title>
    <link rel="alternate" type="text/html" href="https://atom.example.org/2025/one"/>
    <id>urn:uuid:1225c695-cfb8-4ebb-aaaa-80da344efa6a</id>
    <published>2025-01-08T09:00:00Z</published>
    <updated>2025-01-08T10:00:00Z</updated>
    <author><name>Alice</name></author>
    <summary>Summary one</summary>
    <content type="html">&lt;p&gt;Entry &lt;a href="/about"&gt;one&lt;/a&gt;&lt;/p&gt;</content>
  </entry>
  <entry>
    <title>Atom entry two</title>
    <id>https://atom.example.org/2025/two</id>
    <updated>2025-01-09T10:00:00Z</updated>
    <summary>Only a summary</summary>
  </entry>
</feed>
"""


@pytest.fixture
def rss_document():
    return RSS_DOCUMENT


@pytest.fixture
def atom_document():
    return ATOM_DOCUMENT


@pytest.fixture
def temp_db_path():
    """Create a temporary database file path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        yield Path(f.name)
    # Cleanup
    if os.path.exists(f.name):
        os.unlink(f.name)


@pytest.fixture
def test_db(temp_db_path):
    """Create a test database instance."""
    db = Database(temp_db_path)
    yield db


@pytest.fixture
def fetcher():
    """Fetcher that skips URL safety checks (network is always stubbed)."""
    return FeedFetcher(timeout=5, validate_urls=False)


@pytest.fixture
def client(temp_db_path, fetcher):
    """Create a test client with an isolated database."""
    original_db = state.db
    original_fetcher = state.fetcher

    state.db = Database(temp_db_path)
    state.fetcher = fetcher

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    state.db = original_db
    state.fetcher = original_fetcher


@pytest.fixture
def client_with_data(temp_db_path, fetcher):
    """Test client with some sample data pre-populated."""
    original_db = state.db
    original_fetcher = state.fetcher

    test_db = Database(temp_db_path)
    state.db = test_db
    state.fetcher = fetcher

    feed_id = test_db.add_feed(
        url="https://example.com/feed.xml",
        title="Test Feed",
        description="A feed for tests",
        category="Test"
    )

    test_db.upsert_articles(feed_id, [
        FeedItem(
            title="Test Article 1",
            link="https://example.com/article1",
            content="<p>This is the content of test article 1.</p>",
            content_snippet="This is the content of test article 1....",
            pub_date="Mon, 06 Jan 2025 10:00:00 GMT",
            author="Tester",
        ),
        FeedItem(
            title="Test Article 2",
            link="https://example.com/article2",
            content="<p>This is the content of test article 2.</p>",
            content_snippet="This is the content of test article 2....",
            pub_date="Tue, 07 Jan 2025 10:00:00 GMT",
        ),
    ])
    articles = test_db.get_articles(feed_id=feed_id)

    # Mark the older one as read
    test_db.mark_read(articles[1].id, True)

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client, {
            "feed_id": feed_id,
            "article_ids": [a.id for a in articles],
        }

    state.db = original_db
    state.fetcher = original_fetcher
