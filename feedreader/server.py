"""
Feed Reader API Server

FastAPI application providing endpoints for:
- Feed management (subscribe, preview, remove)
- Feed sync (single feed and fan-out refresh)
- Article listing and read state
- OPML import/export
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from . import __version__
from .config import config, state
from .database import Database
from .feeds import FeedFetcher
from .routes import articles_router, feeds_router, misc_router

logging.basicConfig(
    level=config.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize application resources."""
    # Skip if already initialized (e.g., by tests)
    if state.db is None:
        state.db = Database(config.DB_PATH)
    if state.fetcher is None:
        state.fetcher = FeedFetcher(
            timeout=config.FETCH_TIMEOUT,
            user_agent=config.USER_AGENT,
            strategies=config.FEED_FALLBACK_URLS,
            validate_urls=config.VALIDATE_FEED_URLS,
        )
        logger.info(
            f"Feed fetcher initialized (timeout: {config.FETCH_TIMEOUT}s, "
            f"fallback strategies: {len(config.FEED_FALLBACK_URLS)})"
        )

    yield


app = FastAPI(
    title="Feed Reader API",
    version=__version__,
    lifespan=lifespan
)

app.include_router(misc_router)
app.include_router(feeds_router)
app.include_router(articles_router)


def main():
    """Run the API with uvicorn on the configured port."""
    import uvicorn

    uvicorn.run("feedreader.server:app", host="127.0.0.1", port=config.PORT)


if __name__ == "__main__":
    main()
