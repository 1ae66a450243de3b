"""
Database row converters - convert SQLite rows to dataclasses.
"""

import sqlite3
from datetime import datetime

from .models import DBArticle, DBFeed


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _safe_count(row: sqlite3.Row, col: str) -> int:
    # Aggregate columns are only present in some queries
    try:
        return row[col] or 0
    except (IndexError, KeyError):
        return 0


def row_to_article(row: sqlite3.Row) -> DBArticle:
    """Convert a database row to a DBArticle."""
    return DBArticle(
        id=row["id"],
        feed_id=row["feed_id"],
        title=row["title"],
        link=row["link"],
        content=row["content"],
        content_snippet=row["content_snippet"],
        pub_date=row["pub_date"],
        published_at=_parse_timestamp(row["published_at"]),
        author=row["author"],
        is_read=bool(row["is_read"]),
        created_at=_parse_timestamp(row["created_at"]) or datetime.now(),
    )


def row_to_feed(row: sqlite3.Row) -> DBFeed:
    """Convert a database row to a DBFeed."""
    return DBFeed(
        id=row["id"],
        url=row["url"],
        title=row["title"],
        description=row["description"] or "",
        category=row["category"],
        last_fetched=_parse_timestamp(row["last_fetched"]),
        fetch_error=row["fetch_error"],
        article_count=_safe_count(row, "article_count"),
        unread_count=_safe_count(row, "unread_count"),
    )
