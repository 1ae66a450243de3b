"""
Pydantic models for API request/response validation.
"""

from pydantic import BaseModel

from .database import DBArticle, DBFeed
from .parser import FeedData, FeedItem


# ─────────────────────────────────────────────────────────────
# Article Schemas
# ─────────────────────────────────────────────────────────────

class ArticleResponse(BaseModel):
    """Article for list view."""
    id: str
    feed_id: int
    title: str
    link: str
    content_snippet: str
    pub_date: str
    published_at: str | None
    author: str | None = None
    is_read: bool

    @classmethod
    def from_db(cls, article: DBArticle) -> "ArticleResponse":
        return cls(
            id=article.id,
            feed_id=article.feed_id,
            title=article.title,
            link=article.link,
            content_snippet=article.content_snippet,
            pub_date=article.pub_date,
            published_at=article.published_at.isoformat() if article.published_at else None,
            author=article.author,
            is_read=article.is_read,
        )


class ArticleDetailResponse(ArticleResponse):
    """Article with full content for the reading pane."""
    content: str
    created_at: str

    @classmethod
    def from_db(cls, article: DBArticle) -> "ArticleDetailResponse":
        base = ArticleResponse.from_db(article).model_dump()
        return cls(
            **base,
            content=article.content,
            created_at=article.created_at.isoformat(),
        )


# ─────────────────────────────────────────────────────────────
# Feed Schemas
# ─────────────────────────────────────────────────────────────

class FeedResponse(BaseModel):
    """Feed for list view."""
    id: int
    url: str
    title: str
    description: str
    category: str | None
    article_count: int
    unread_count: int
    last_fetched: str | None
    fetch_error: str | None = None

    @classmethod
    def from_db(cls, feed: DBFeed) -> "FeedResponse":
        return cls(
            id=feed.id,
            url=feed.url,
            title=feed.title,
            description=feed.description,
            category=feed.category,
            article_count=feed.article_count,
            unread_count=feed.unread_count,
            last_fetched=feed.last_fetched.isoformat() if feed.last_fetched else None,
            fetch_error=feed.fetch_error
        )


class AddFeedRequest(BaseModel):
    """Request to add a new feed."""
    url: str
    title: str | None = None
    category: str | None = None


class UpdateFeedRequest(BaseModel):
    """Request to update a feed."""
    title: str | None = None
    category: str | None = None


class FeedItemResponse(BaseModel):
    """One parsed item, before it is stored."""
    title: str
    link: str
    content: str
    content_snippet: str
    pub_date: str
    author: str | None = None

    @classmethod
    def from_item(cls, item: FeedItem) -> "FeedItemResponse":
        return cls(
            title=item.title,
            link=item.link,
            content=item.content,
            content_snippet=item.content_snippet,
            pub_date=item.pub_date,
            author=item.author,
        )


class FeedDataResponse(BaseModel):
    """A parsed feed document (validation mode, nothing stored)."""
    title: str
    description: str
    items: list[FeedItemResponse]

    @classmethod
    def from_data(cls, data: FeedData) -> "FeedDataResponse":
        return cls(
            title=data.title,
            description=data.description,
            items=[FeedItemResponse.from_item(item) for item in data.items],
        )


# ─────────────────────────────────────────────────────────────
# Refresh Schemas
# ─────────────────────────────────────────────────────────────

class RefreshResult(BaseModel):
    """Result of syncing one feed."""
    feed_id: int
    url: str
    success: bool
    count: int = 0
    error: str | None = None


class RefreshAllResponse(BaseModel):
    """Result of syncing every subscribed feed."""
    total: int
    updated: int
    failed: int
    results: list[RefreshResult]


# ─────────────────────────────────────────────────────────────
# OPML Schemas
# ─────────────────────────────────────────────────────────────

class OPMLImportRequest(BaseModel):
    """Request to import feeds from OPML."""
    opml_content: str


class OPMLImportResult(BaseModel):
    """Result of importing a single feed from OPML."""
    url: str
    title: str | None
    success: bool
    error: str | None = None
    feed_id: int | None = None


class OPMLImportResponse(BaseModel):
    """Response from OPML import."""
    total: int
    imported: int
    skipped: int
    failed: int
    results: list[OPMLImportResult]


class OPMLExportResponse(BaseModel):
    """OPML document with all subscriptions."""
    opml: str
    feed_count: int
