"""
Article repository - upsert and read operations for articles.
"""

from datetime import datetime
from typing import Iterable

from ..dates import parse_pub_date
from ..identity import article_id
from ..parser import FeedItem
from .connection import DatabaseConnection
from .converters import row_to_article
from .models import DBArticle


class ArticleRepository:
    """Repository for article operations."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def upsert_many(self, feed_id: int, items: Iterable[FeedItem]) -> int:
        """
        Insert or replace a feed's items, keyed by derived article id.

        Items without a link have no stable identity and are skipped.
        Read state and creation time of existing rows are preserved.

        Returns:
            Number of distinct articles written
        """
        rows: dict[str, tuple] = {}
        for item in items:
            if not item.link:
                continue
            published_at = parse_pub_date(item.pub_date)
            aid = article_id(feed_id, item.link)
            rows[aid] = (
                aid, feed_id, item.title, item.link, item.content,
                item.content_snippet, item.pub_date,
                published_at.isoformat() if published_at else None,
                item.author,
            )

        if not rows:
            return 0

        with self._db.conn() as conn:
            conn.executemany(
                """INSERT INTO articles
                   (id, feed_id, title, link, content, content_snippet,
                    pub_date, published_at, author)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                   ON CONFLICT(id) DO UPDATE SET
                       title = excluded.title,
                       link = excluded.link,
                       content = excluded.content,
                       content_snippet = excluded.content_snippet,
                       pub_date = excluded.pub_date,
                       published_at = excluded.published_at,
                       author = excluded.author,
                       updated_at = CURRENT_TIMESTAMP""",
                list(rows.values())
            )
        return len(rows)

    def get(self, article_id: str) -> DBArticle | None:
        """Get single article by ID."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM articles WHERE id = ?", (article_id,)
            ).fetchone()
            return row_to_article(row) if row else None

    def get_many(
        self,
        feed_id: int | None = None,
        unread_only: bool = False,
        limit: int = 100,
        offset: int = 0
    ) -> list[DBArticle]:
        """Get articles with optional filters, newest first."""
        query = "SELECT * FROM articles WHERE 1=1"
        params: list = []

        if feed_id is not None:
            query += " AND feed_id = ?"
            params.append(feed_id)
        if unread_only:
            query += " AND is_read = 0"

        query += " ORDER BY published_at DESC NULLS LAST, created_at DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        with self._db.conn() as conn:
            rows = conn.execute(query, params).fetchall()
            return [row_to_article(row) for row in rows]

    def count(self, feed_id: int | None = None) -> int:
        """Count stored articles, optionally for one feed."""
        with self._db.conn() as conn:
            if feed_id is None:
                row = conn.execute("SELECT COUNT(*) FROM articles").fetchone()
            else:
                row = conn.execute(
                    "SELECT COUNT(*) FROM articles WHERE feed_id = ?", (feed_id,)
                ).fetchone()
            return row[0]

    def mark_read(self, article_id: str, is_read: bool = True):
        """Mark article as read/unread."""
        with self._db.conn() as conn:
            read_at = datetime.now().isoformat() if is_read else None
            conn.execute(
                "UPDATE articles SET is_read = ?, read_at = ? WHERE id = ?",
                (is_read, read_at, article_id)
            )
