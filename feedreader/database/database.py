"""
Database facade - provides unified access to all repositories.
"""

from pathlib import Path
from typing import Iterable

from ..parser import FeedItem
from .connection import DatabaseConnection
from .article_repository import ArticleRepository
from .feed_repository import FeedRepository
from .models import DBArticle, DBFeed


class Database:
    """
    Unified database access facade.

    Delegates to the feed and article repositories.
    """

    def __init__(self, db_path: Path):
        self._connection = DatabaseConnection(db_path)

        # Initialize repositories
        self.articles = ArticleRepository(self._connection)
        self.feeds = FeedRepository(self._connection)

    # ─────────────────────────────────────────────────────────────
    # Feed operations (delegated to FeedRepository)
    # ─────────────────────────────────────────────────────────────

    def add_feed(
        self,
        url: str,
        title: str,
        description: str = "",
        category: str | None = None
    ) -> int:
        return self.feeds.add(url, title, description, category)

    def get_feed(self, feed_id: int) -> DBFeed | None:
        return self.feeds.get(feed_id)

    def get_feed_by_url(self, url: str) -> DBFeed | None:
        return self.feeds.get_by_url(url)

    def get_feeds(self) -> list[DBFeed]:
        return self.feeds.get_all()

    def update_feed(
        self,
        feed_id: int,
        title: str | None = None,
        description: str | None = None,
        category: str | None = None,
        clear_category: bool = False
    ):
        return self.feeds.update(feed_id, title, description, category, clear_category)

    def update_feed_fetched(self, feed_id: int, error: str | None = None):
        return self.feeds.update_fetched(feed_id, error)

    def delete_feed(self, feed_id: int):
        return self.feeds.delete(feed_id)

    # ─────────────────────────────────────────────────────────────
    # Article operations (delegated to ArticleRepository)
    # ─────────────────────────────────────────────────────────────

    def upsert_articles(self, feed_id: int, items: Iterable[FeedItem]) -> int:
        return self.articles.upsert_many(feed_id, items)

    def get_articles(
        self,
        feed_id: int | None = None,
        unread_only: bool = False,
        limit: int = 100,
        offset: int = 0
    ) -> list[DBArticle]:
        return self.articles.get_many(feed_id, unread_only, limit, offset)

    def get_article(self, article_id: str) -> DBArticle | None:
        return self.articles.get(article_id)

    def count_articles(self, feed_id: int | None = None) -> int:
        return self.articles.count(feed_id)

    def mark_read(self, article_id: str, is_read: bool = True):
        return self.articles.mark_read(article_id, is_read)
