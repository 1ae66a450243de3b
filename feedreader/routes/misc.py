"""
Miscellaneous routes: health check, stats.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from .. import __version__
from ..config import state, get_db
from ..database import Database

router = APIRouter(tags=["misc"])


@router.get("/status")
async def health_check() -> dict:
    """API health check."""
    return {
        "status": "ok",
        "version": __version__,
        "refresh_in_progress": state.refresh_in_progress
    }


@router.get("/stats")
async def get_stats(
    db: Annotated[Database, Depends(get_db)]
) -> dict:
    """Get overall statistics."""
    feeds = db.get_feeds()
    return {
        "total_feeds": len(feeds),
        "total_articles": db.count_articles(),
        "total_unread": sum(f.unread_count for f in feeds),
        "failing_feeds": sum(1 for f in feeds if f.fetch_error),
    }
