"""
SQLite storage for feeds and their article snapshots.

Articles are keyed by a derived id, so storing the same feed document
again updates rows in place.
"""

from .connection import DatabaseConnection
from .models import DBArticle, DBFeed
from .article_repository import ArticleRepository
from .feed_repository import FeedRepository
from .database import Database

__all__ = [
    "Database",
    "DatabaseConnection",
    "DBArticle",
    "DBFeed",
    "ArticleRepository",
    "FeedRepository",
]
