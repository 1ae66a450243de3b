"""
Configuration and application state management.

Only this module reads the environment. Everything else receives its
settings explicitly from here (see server.lifespan).
"""

import os
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from fastapi import HTTPException

if TYPE_CHECKING:
    from .database import Database
    from .feeds import FeedFetcher

# Load environment variables
load_dotenv()


def _parse_bool(value: str | None, default: bool = False) -> bool:
    """Parse boolean from environment variable."""
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def _parse_list(value: str | None) -> list[str]:
    """Parse a comma-separated environment variable."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


class Config:
    """Application configuration from environment."""
    DB_PATH: Path = Path(os.getenv("DB_PATH", "./data/feeds.db"))
    PORT: int = int(os.getenv("PORT", "5005"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Feed retrieval
    FETCH_TIMEOUT: int = int(os.getenv("FETCH_TIMEOUT", "15"))  # seconds
    USER_AGENT: str = os.getenv(
        "USER_AGENT",
        "Mozilla/5.0 (compatible; FeedReader/1.0)"
    )
    # Alternate retrieval paths tried after a direct fetch fails, e.g.
    # "https://mirror.example.com/raw?url={url}"
    FEED_FALLBACK_URLS: list[str] = _parse_list(os.getenv("FEED_FALLBACK_URLS"))
    VALIDATE_FEED_URLS: bool = _parse_bool(os.getenv("VALIDATE_FEED_URLS"), default=True)


config = Config()


class AppState:
    """Shared application state."""
    db: "Database | None" = None
    fetcher: "FeedFetcher | None" = None
    refresh_in_progress: bool = False


state = AppState()


def get_db() -> "Database":
    """Dependency to get database instance."""
    if not state.db:
        raise HTTPException(status_code=500, detail="Database not initialized")
    return state.db


def get_fetcher() -> "FeedFetcher":
    """Dependency to get the feed fetcher."""
    if not state.fetcher:
        raise HTTPException(status_code=500, detail="Feed fetcher not initialized")
    return state.fetcher
