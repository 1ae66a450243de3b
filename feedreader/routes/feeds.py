"""
Feed routes: management, preview, refresh, OPML import/export.
"""

from fastapi import APIRouter, HTTPException

from ..config import state
from ..schemas import (
    FeedResponse,
    AddFeedRequest,
    UpdateFeedRequest,
    FeedDataResponse,
    RefreshAllResponse,
    OPMLImportRequest,
    OPMLImportResponse,
    OPMLExportResponse,
)
from ..services import FeedServiceDep

router = APIRouter(prefix="/feeds", tags=["feeds"])


# ─────────────────────────────────────────────────────────────
# Feed Management
# ─────────────────────────────────────────────────────────────

@router.get("")
async def list_feeds(service: FeedServiceDep) -> list[FeedResponse]:
    """List all subscribed feeds."""
    return [FeedResponse.from_db(f) for f in service.list_feeds()]


@router.post("")
async def add_feed(request: AddFeedRequest, service: FeedServiceDep) -> FeedResponse:
    """Subscribe to a new feed and snapshot its current items."""
    feed = await service.subscribe(request.url, title=request.title, category=request.category)
    return FeedResponse.from_db(feed)


@router.get("/preview")
async def preview_feed(url: str, service: FeedServiceDep) -> FeedDataResponse:
    """Fetch and parse a feed without subscribing (validation mode)."""
    data = await service.preview(url)
    return FeedDataResponse.from_data(data)


# ─────────────────────────────────────────────────────────────
# Refresh
# ─────────────────────────────────────────────────────────────

@router.post("/refresh")
async def refresh_feeds(service: FeedServiceDep) -> RefreshAllResponse:
    """Sync every feed concurrently; failures are reported per feed."""
    if state.refresh_in_progress:
        raise HTTPException(status_code=409, detail="Refresh already in progress")

    state.refresh_in_progress = True
    try:
        return await service.refresh_all()
    finally:
        state.refresh_in_progress = False


@router.post("/{feed_id}/refresh")
async def refresh_feed(feed_id: int, service: FeedServiceDep) -> dict:
    """Sync a single feed."""
    count = await service.refresh_feed(feed_id)
    return {"success": True, "count": count}


# ─────────────────────────────────────────────────────────────
# OPML Import/Export
# ─────────────────────────────────────────────────────────────

@router.post("/import-opml")
async def import_opml(
    request: OPMLImportRequest,
    service: FeedServiceDep
) -> OPMLImportResponse:
    """
    Import feeds from OPML content.

    Returns detailed results for each feed.
    """
    result = await service.import_opml(request.opml_content)
    return OPMLImportResponse(**result)


@router.get("/export-opml")
async def export_opml(service: FeedServiceDep) -> OPMLExportResponse:
    """Export all feeds as OPML."""
    return OPMLExportResponse(**service.export_opml())


# ─────────────────────────────────────────────────────────────
# Single feed (dynamic paths last)
# ─────────────────────────────────────────────────────────────

@router.put("/{feed_id}")
async def update_feed(
    feed_id: int,
    request: UpdateFeedRequest,
    service: FeedServiceDep
) -> FeedResponse:
    """Update a feed's title or category."""
    feed = service.update_feed(feed_id, title=request.title, category=request.category)
    return FeedResponse.from_db(feed)


@router.delete("/{feed_id}")
async def remove_feed(feed_id: int, service: FeedServiceDep) -> dict:
    """Unsubscribe from a feed."""
    service.unsubscribe(feed_id)
    return {"success": True}
