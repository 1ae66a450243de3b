"""
Article routes: list, detail, read state.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from ..config import get_db
from ..database import Database
from ..exceptions import require_article
from ..schemas import ArticleResponse, ArticleDetailResponse

router = APIRouter(prefix="/articles", tags=["articles"])


@router.get("")
async def list_articles(
    db: Annotated[Database, Depends(get_db)],
    feed_id: int | None = None,
    unread_only: bool = False,
    limit: int = Query(default=100, ge=1, le=100),
    offset: int = Query(default=0, ge=0)
) -> list[ArticleResponse]:
    """Get stored articles, newest first, optionally for one feed."""
    articles = db.get_articles(
        feed_id=feed_id,
        unread_only=unread_only,
        limit=limit,
        offset=offset
    )
    return [ArticleResponse.from_db(a) for a in articles]


@router.get("/{article_id}")
async def get_article(
    article_id: str,
    db: Annotated[Database, Depends(get_db)]
) -> ArticleDetailResponse:
    """Get single article with full content."""
    article = require_article(db.get_article(article_id))
    return ArticleDetailResponse.from_db(article)


@router.post("/{article_id}/read")
async def mark_read(
    article_id: str,
    db: Annotated[Database, Depends(get_db)],
    is_read: bool = True
) -> dict:
    """Mark article as read/unread."""
    require_article(db.get_article(article_id))
    db.mark_read(article_id, is_read)
    return {"success": True, "is_read": is_read}
