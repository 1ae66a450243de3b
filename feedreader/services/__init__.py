"""
Service layer for business logic.

Services encapsulate business logic, keeping routes as thin HTTP adapters.
Each service receives its dependencies via constructor injection.

Usage in routes:
    from ..services import FeedServiceDep

    @router.get("/feeds")
    async def list_feeds(service: FeedServiceDep):
        return service.list_feeds()
"""

from typing import Annotated

from fastapi import Depends

from ..config import get_db, get_fetcher
from ..database import Database
from ..feeds import FeedFetcher

from .feed_service import FeedService

__all__ = [
    "FeedService",
    "get_feed_service",
    "FeedServiceDep",
]


def get_feed_service(
    db: Annotated[Database, Depends(get_db)],
    fetcher: Annotated[FeedFetcher, Depends(get_fetcher)],
) -> FeedService:
    """Dependency to get FeedService instance."""
    return FeedService(db=db, fetcher=fetcher)


FeedServiceDep = Annotated[FeedService, Depends(get_feed_service)]
