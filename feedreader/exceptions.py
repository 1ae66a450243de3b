"""
Error types and HTTP exception helpers.

Provides the typed retrieval failure reported per feed, plus helpers to
reduce boilerplate for common 404 errors in route handlers.
"""

from typing import TypeVar

from fastapi import HTTPException

T = TypeVar("T")


class FeedReaderError(Exception):
    """Base class for feed reader errors."""

    pass


class FeedFetchError(FeedReaderError):
    """
    Raised when every retrieval strategy for a feed has failed.

    Attributes:
        url: The feed URL that could not be retrieved
        errors: One message per strategy that was attempted
    """

    def __init__(self, url: str, errors: list[str] | None = None):
        self.url = url
        self.errors = list(errors or [])
        detail = "; ".join(self.errors) if self.errors else "no retrieval strategy succeeded"
        super().__init__(f"Failed to fetch feed {url}: {detail}")


def require_resource(resource: T | None, detail: str = "Resource not found") -> T:
    """
    Raise 404 if resource is None, otherwise return the resource.

    Usage:
        feed = require_resource(db.get_feed(feed_id), "Feed not found")
    """
    if resource is None:
        raise HTTPException(status_code=404, detail=detail)
    return resource


def require_article(article: T | None) -> T:
    """Raise 404 if article is None."""
    return require_resource(article, "Article not found")


def require_feed(feed: T | None) -> T:
    """Raise 404 if feed is None."""
    return require_resource(feed, "Feed not found")
