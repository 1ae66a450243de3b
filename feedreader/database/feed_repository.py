"""
Feed repository - CRUD operations for feeds.
"""

from datetime import datetime

from .connection import DatabaseConnection
from .converters import row_to_feed
from .models import DBFeed

_FEED_WITH_COUNTS = """
    SELECT f.*,
           COUNT(a.id) as article_count,
           COUNT(CASE WHEN a.is_read = 0 THEN 1 END) as unread_count
    FROM feeds f
    LEFT JOIN articles a ON f.id = a.feed_id
"""


class FeedRepository:
    """Repository for feed operations."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def add(
        self,
        url: str,
        title: str,
        description: str = "",
        category: str | None = None
    ) -> int:
        """Add a new feed. Returns feed ID."""
        with self._db.conn() as conn:
            cursor = conn.execute(
                "INSERT INTO feeds (url, title, description, category) VALUES (?, ?, ?, ?)",
                (url, title, description, category)
            )
            return cursor.lastrowid

    def get(self, feed_id: int) -> DBFeed | None:
        """Get single feed by ID with article counts."""
        with self._db.conn() as conn:
            row = conn.execute(
                _FEED_WITH_COUNTS + " WHERE f.id = ? GROUP BY f.id",
                (feed_id,)
            ).fetchone()
            return row_to_feed(row) if row else None

    def get_by_url(self, url: str) -> DBFeed | None:
        """Get single feed by URL (case-insensitive)."""
        with self._db.conn() as conn:
            row = conn.execute(
                _FEED_WITH_COUNTS + " WHERE lower(f.url) = lower(?) GROUP BY f.id",
                (url,)
            ).fetchone()
            return row_to_feed(row) if row else None

    def get_all(self) -> list[DBFeed]:
        """Get all feeds with article counts, newest subscription first."""
        with self._db.conn() as conn:
            rows = conn.execute(
                _FEED_WITH_COUNTS + " GROUP BY f.id ORDER BY f.created_at DESC, f.id DESC"
            ).fetchall()
            return [row_to_feed(row) for row in rows]

    def update(
        self,
        feed_id: int,
        title: str | None = None,
        description: str | None = None,
        category: str | None = None,
        clear_category: bool = False
    ):
        """Update feed details. Use clear_category=True to remove category."""
        with self._db.conn() as conn:
            if title is not None:
                conn.execute("UPDATE feeds SET title = ? WHERE id = ?", (title, feed_id))
            if description is not None:
                conn.execute(
                    "UPDATE feeds SET description = ? WHERE id = ?", (description, feed_id)
                )
            if clear_category:
                conn.execute("UPDATE feeds SET category = NULL WHERE id = ?", (feed_id,))
            elif category is not None:
                conn.execute("UPDATE feeds SET category = ? WHERE id = ?", (category, feed_id))

    def update_fetched(self, feed_id: int, error: str | None = None):
        """Update feed's last fetched timestamp and fetch error."""
        with self._db.conn() as conn:
            conn.execute(
                "UPDATE feeds SET last_fetched = ?, fetch_error = ? WHERE id = ?",
                (datetime.now().isoformat(), error, feed_id)
            )

    def delete(self, feed_id: int):
        """Delete feed and (by cascade) its articles."""
        with self._db.conn() as conn:
            conn.execute("DELETE FROM feeds WHERE id = ?", (feed_id,))
