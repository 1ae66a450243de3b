"""
Database models - dataclasses for database entities.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class DBArticle:
    id: str
    feed_id: int
    title: str
    link: str
    content: str
    content_snippet: str
    pub_date: str  # Raw date string from the feed
    published_at: datetime | None  # Parsed from pub_date, for ordering only
    author: str | None
    is_read: bool
    created_at: datetime


@dataclass
class DBFeed:
    id: int
    url: str
    title: str
    description: str
    category: str | None
    last_fetched: datetime | None
    fetch_error: str | None = None
    article_count: int = 0
    unread_count: int = 0
