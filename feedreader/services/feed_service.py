"""
Feed service: business logic for feed management operations.

Handles feed subscription, validation, sync (fetch -> parse -> upsert) and
OPML import/export.
"""

import logging
import sqlite3

from fastapi import HTTPException

from ..database import Database
from ..database.models import DBFeed
from ..exceptions import FeedFetchError, require_feed
from ..feeds import FeedFetcher
from ..opml import parse_opml, generate_opml, OPMLFeed
from ..parser import FeedData
from ..schemas import OPMLImportResult, RefreshAllResponse, RefreshResult

logger = logging.getLogger(__name__)

ALREADY_SUBSCRIBED = "Already subscribed"


class FeedService:
    """Service for feed-related business logic."""

    def __init__(self, db: Database, fetcher: FeedFetcher):
        self.db = db
        self.fetcher = fetcher

    # ─────────────────────────────────────────────────────────────
    # Feed Management
    # ─────────────────────────────────────────────────────────────

    def list_feeds(self) -> list[DBFeed]:
        """List all subscribed feeds."""
        return self.db.get_feeds()

    async def preview(self, url: str) -> FeedData:
        """
        Fetch and parse a feed without storing anything.

        Raises:
            HTTPException: 502 if the feed is unreachable
        """
        try:
            return await self.fetcher.fetch(url)
        except FeedFetchError as e:
            raise HTTPException(status_code=502, detail=f"Feed unreachable: {e}")

    async def subscribe(
        self,
        url: str,
        title: str | None = None,
        category: str | None = None,
    ) -> DBFeed:
        """
        Subscribe to a new feed and store its current items.

        If ``url`` is a web page rather than a feed, the feed it advertises
        is used instead.

        Args:
            url: Feed (or site) URL to subscribe to
            title: Optional custom title (uses feed title if not provided)
            category: Optional category for organization

        Returns:
            The created feed

        Raises:
            HTTPException: 400 if the URL can't be fetched, 409 if already subscribed
        """
        if self.db.get_feed_by_url(url):
            raise HTTPException(status_code=409, detail=ALREADY_SUBSCRIBED)

        try:
            url, data = await self.fetcher.fetch_or_discover(url)
        except FeedFetchError as e:
            raise HTTPException(status_code=400, detail=f"Invalid feed URL: {e}")

        try:
            feed_id = self.db.add_feed(
                url,
                title or data.title or url,
                description=data.description,
                category=category,
            )
        except sqlite3.IntegrityError:
            raise HTTPException(status_code=409, detail=ALREADY_SUBSCRIBED)

        count = self.db.upsert_articles(feed_id, data.items)
        self.db.update_feed_fetched(feed_id)
        logger.info(f"Subscribed to {url} (feed {feed_id}, {count} articles)")

        db_feed = self.db.get_feed(feed_id)
        if not db_feed:
            raise HTTPException(status_code=500, detail="Failed to retrieve feed")
        return db_feed

    def unsubscribe(self, feed_id: int) -> None:
        """
        Unsubscribe from a feed, deleting its articles.

        Raises:
            HTTPException: If feed not found
        """
        require_feed(self.db.get_feed(feed_id))
        self.db.delete_feed(feed_id)

    def update_feed(
        self,
        feed_id: int,
        title: str | None = None,
        category: str | None = None,
    ) -> DBFeed:
        """
        Update a feed's title or category.

        An empty category string clears the category; None keeps it.

        Raises:
            HTTPException: If feed not found
        """
        require_feed(self.db.get_feed(feed_id))

        clear_category = category == ""
        self.db.update_feed(
            feed_id,
            title=title,
            category=None if clear_category else category,
            clear_category=clear_category
        )

        return require_feed(self.db.get_feed(feed_id))

    # ─────────────────────────────────────────────────────────────
    # Sync
    # ─────────────────────────────────────────────────────────────

    async def refresh_feed(self, feed_id: int) -> int:
        """
        Fetch one feed and upsert its items.

        Returns:
            Number of articles written

        Raises:
            HTTPException: 404 if feed not found, 502 if it is unreachable
        """
        feed = require_feed(self.db.get_feed(feed_id))

        try:
            data = await self.fetcher.fetch(feed.url)
        except FeedFetchError as e:
            self.db.update_feed_fetched(feed_id, error=str(e))
            raise HTTPException(status_code=502, detail=f"Feed unreachable: {e}")

        count = self.db.upsert_articles(feed_id, data.items)
        self._sync_description(feed, data)
        self.db.update_feed_fetched(feed_id)
        logger.info(f"Refreshed feed {feed_id}: {count} articles")
        return count

    async def refresh_all(self) -> RefreshAllResponse:
        """
        Fetch every subscribed feed concurrently and upsert their items.

        A failing feed is recorded in its own result and never stops the
        others.
        """
        feeds = self.db.get_feeds()
        fetched = await self.fetcher.fetch_multiple([f.url for f in feeds])

        results: list[RefreshResult] = []
        for feed, outcome in zip(feeds, fetched):
            results.append(self._store_outcome(feed, outcome.data, outcome.error))

        updated = sum(1 for r in results if r.success)
        logger.info(f"Refreshed {updated}/{len(results)} feeds")
        return RefreshAllResponse(
            total=len(results),
            updated=updated,
            failed=len(results) - updated,
            results=results,
        )

    def _sync_description(self, feed: DBFeed, data: FeedData) -> None:
        # Titles can be renamed by the user; descriptions follow the feed
        if data.description and data.description != feed.description:
            self.db.update_feed(feed.id, description=data.description)

    def _store_outcome(
        self,
        feed: DBFeed,
        data: FeedData | None,
        error: str | None,
    ) -> RefreshResult:
        if data is not None:
            try:
                count = self.db.upsert_articles(feed.id, data.items)
            except sqlite3.Error as e:
                logger.exception(f"Storing articles for feed {feed.id} failed")
                error = f"Storage error: {e}"
            else:
                self._sync_description(feed, data)
                self.db.update_feed_fetched(feed.id)
                return RefreshResult(feed_id=feed.id, url=feed.url, success=True, count=count)

        logger.warning(f"Refresh of feed {feed.id} failed: {error}")
        self.db.update_feed_fetched(feed.id, error=error)
        return RefreshResult(feed_id=feed.id, url=feed.url, success=False, error=error)

    # ─────────────────────────────────────────────────────────────
    # OPML Import/Export
    # ─────────────────────────────────────────────────────────────

    async def import_opml(self, opml_content: str) -> dict:
        """
        Import feeds from OPML content.

        New feeds are fetched concurrently; each is validated, stored and
        populated independently.

        Returns:
            Dict with total, imported, skipped, failed counts and results list

        Raises:
            HTTPException: If OPML invalid or contains no feeds
        """
        try:
            opml_doc = parse_opml(opml_content)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"Invalid OPML: {e}")

        if not opml_doc.feeds:
            raise HTTPException(status_code=400, detail="No feeds found in OPML")

        existing_urls = {f.url.lower() for f in self.db.get_feeds()}

        results: list[OPMLImportResult] = []
        pending: list[OPMLFeed] = []
        for opml_feed in opml_doc.feeds:
            if opml_feed.url.lower() in existing_urls:
                results.append(OPMLImportResult(
                    url=opml_feed.url,
                    title=opml_feed.title,
                    success=False,
                    error=ALREADY_SUBSCRIBED
                ))
            else:
                existing_urls.add(opml_feed.url.lower())
                pending.append(opml_feed)

        fetched = await self.fetcher.fetch_multiple([f.url for f in pending])
        for opml_feed, outcome in zip(pending, fetched):
            results.append(self._import_outcome(opml_feed, outcome.data, outcome.error))

        imported = sum(1 for r in results if r.success)
        skipped = sum(1 for r in results if r.error == ALREADY_SUBSCRIBED)

        return {
            "total": len(opml_doc.feeds),
            "imported": imported,
            "skipped": skipped,
            "failed": len(results) - imported - skipped,
            "results": results,
        }

    def _import_outcome(
        self,
        opml_feed: OPMLFeed,
        data: FeedData | None,
        error: str | None,
    ) -> OPMLImportResult:
        if data is None:
            return OPMLImportResult(
                url=opml_feed.url, title=opml_feed.title, success=False, error=error
            )

        try:
            feed_id = self.db.add_feed(
                url=opml_feed.url,
                title=opml_feed.title or data.title,
                description=data.description,
                category=opml_feed.category
            )
            self.db.upsert_articles(feed_id, data.items)
            self.db.update_feed_fetched(feed_id)
        except sqlite3.Error as e:
            logger.exception(f"Importing {opml_feed.url} failed")
            return OPMLImportResult(
                url=opml_feed.url, title=opml_feed.title, success=False, error=str(e)
            )

        return OPMLImportResult(
            url=opml_feed.url, title=opml_feed.title, success=True, feed_id=feed_id
        )

    def export_opml(self, title: str = "Feed Reader Subscriptions") -> dict:
        """
        Export all feeds as OPML.

        Returns:
            Dict with opml content and feed_count
        """
        feeds = self.db.get_feeds()

        opml_feeds = [
            OPMLFeed(url=f.url, title=f.title, category=f.category)
            for f in feeds
        ]

        return {
            "opml": generate_opml(opml_feeds, title=title),
            "feed_count": len(feeds)
        }
