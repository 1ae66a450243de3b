"""
Feed Fetcher - Retrieve remote feeds and hand them to the parser.

Handles:
- Bounded-time retrieval with aiohttp
- Alternate retrieval paths when the direct fetch fails
- Concurrent fan-out with per-feed failure isolation
- Feed autodiscovery from HTML pages
"""

import asyncio
import logging
from dataclasses import dataclass
from urllib.parse import quote, urljoin

import aiohttp
from bs4 import BeautifulSoup

from .exceptions import FeedFetchError
from .parser import FeedData, parse_feed_document
from .url_validator import UnsafeURLError, validate_url

logger = logging.getLogger(__name__)

DIRECT_STRATEGY = "{url}"
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; FeedReader/1.0)"
FEED_ACCEPT = (
    "application/rss+xml, application/xml, application/atom+xml, "
    "text/xml;q=0.9, */*;q=0.8"
)


@dataclass
class FeedResult:
    """Outcome of fetching one feed in a batch."""
    url: str
    data: FeedData | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class FeedFetcher:
    """Fetches feeds over HTTP and parses them into FeedData."""

    def __init__(
        self,
        timeout: int = 15,
        user_agent: str | None = None,
        strategies: list[str] | None = None,
        validate_urls: bool = True,
    ):
        """
        Args:
            timeout: Total seconds allowed per HTTP request
            user_agent: User-Agent header sent to feed servers
            strategies: Alternate URL templates tried after the direct fetch,
                with "{url}" replaced by the quoted feed URL
            validate_urls: Reject URLs that point at internal networks
        """
        self.timeout = timeout
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.strategies = [DIRECT_STRATEGY, *(strategies or [])]
        self.validate_urls = validate_urls
        self.headers = {
            "User-Agent": self.user_agent,
            "Accept": FEED_ACCEPT,
        }

    async def fetch(self, url: str) -> FeedData:
        """
        Fetch and parse a feed URL.

        Raises:
            FeedFetchError: If every retrieval strategy failed
        """
        markup = await self.fetch_text(url)
        return parse_feed_document(markup)

    async def fetch_text(self, url: str) -> str:
        """
        Retrieve raw feed markup, trying each strategy in order.

        Raises:
            FeedFetchError: If every retrieval strategy failed
        """
        await self._check_url(url)

        errors: list[str] = []
        async with aiohttp.ClientSession(headers=self.headers) as session:
            for template in self.strategies:
                target = self._strategy_url(template, url)
                label = "direct" if template == DIRECT_STRATEGY else target
                try:
                    return await self._get_text(session, target)
                except asyncio.TimeoutError:
                    errors.append(f"{label}: timed out after {self.timeout}s")
                except aiohttp.ClientResponseError as e:
                    errors.append(f"{label}: HTTP {e.status} {e.message}")
                except (aiohttp.ClientError, ValueError) as e:
                    errors.append(f"{label}: {e}")
                logger.warning(f"Retrieval of {url} failed: {errors[-1]}")

        raise FeedFetchError(url, errors)

    async def fetch_multiple(self, urls: list[str]) -> list[FeedResult]:
        """
        Fetch multiple feeds concurrently.

        One feed's failure never affects the others; results are returned
        in the same order as ``urls``.
        """
        tasks = [self._fetch_safe(url) for url in urls]
        return await asyncio.gather(*tasks)

    async def _fetch_safe(self, url: str) -> FeedResult:
        """Fetch a feed, capturing any failure in the result."""
        try:
            return FeedResult(url=url, data=await self.fetch(url))
        except FeedFetchError as e:
            return FeedResult(url=url, error=str(e))
        except Exception as e:
            logger.exception(f"Unexpected error fetching {url}")
            return FeedResult(url=url, error=f"Failed to fetch feed {url}: {e}")

    async def _check_url(self, url: str) -> None:
        if not self.validate_urls:
            return
        try:
            # DNS resolution blocks, keep it off the event loop
            await asyncio.to_thread(validate_url, url)
        except UnsafeURLError as e:
            raise FeedFetchError(url, [str(e)])

    @staticmethod
    def _strategy_url(template: str, url: str) -> str:
        if template == DIRECT_STRATEGY:
            return url
        return template.replace("{url}", quote(url, safe=""))

    async def _get_text(self, session: aiohttp.ClientSession, url: str) -> str:
        """GET one URL and return its body as text."""
        async with session.get(
            url,
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        ) as resp:
            resp.raise_for_status()
            text = await resp.text(errors="replace")

        if not text.strip():
            raise ValueError("empty response body")
        return text

    async def fetch_or_discover(self, url: str) -> tuple[str, FeedData]:
        """
        Fetch a feed, following HTML autodiscovery when ``url`` is a web page.

        Returns:
            The feed URL actually used and its parsed data
        """
        markup = await self.fetch_text(url)
        data = parse_feed_document(markup)
        if data.items or data.title:
            return url, data

        discovered = self._discover_feed_from_html(markup, url)
        if not discovered or discovered == url:
            return url, data

        logger.info(f"Discovered feed {discovered} from {url}")
        return discovered, await self.fetch(discovered)

    async def discover_feed(self, url: str) -> str | None:
        """
        Find feed URL from HTML page (autodiscovery).

        Returns the discovered feed URL or None if not found.
        """
        html = await self.fetch_text(url)
        return self._discover_feed_from_html(html, url)

    def _discover_feed_from_html(self, html: str, base_url: str) -> str | None:
        """Extract feed URL from HTML content."""
        soup = BeautifulSoup(html, "html.parser")

        for link in soup.find_all("link", rel="alternate"):
            link_type = link.get("type", "")
            if "rss" in link_type or "atom" in link_type or "xml" in link_type:
                href = link.get("href")
                if href:
                    return urljoin(base_url, href)

        return None
