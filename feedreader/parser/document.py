"""
Feed document parser - RSS 2.0 and Atom 1.0 into one canonical item model.

Handles:
- Format detection without an XML parser
- Divergent tag vocabularies (content:encoded, dc:creator, dc:date, ...)
- Per-item relative URL fixing and list-view snippets

parse_feed_document() is total: any string yields a FeedData, possibly
with empty fields and no items.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum

from .tags import get_attr, get_content, get_tag, iter_attrs, iter_blocks, strip_blocks
from .text import clean, make_snippet
from .urls import fix_relative_urls

logger = logging.getLogger(__name__)

ATOM_NAMESPACE = "http://www.w3.org/2005/Atom"

# Content priority: full body before summary
RSS_CONTENT_TAGS = ("encoded", "content", "description")
ATOM_CONTENT_TAGS = ("content", "summary")

RSS_ROOTS = ("rss", "rdf")

# XML declaration, processing instructions, comments and doctype before the root
_PROLOGUE_RE = re.compile(
    r"\A(?:\ufeff|\s|<\?.*?\?>|<!--.*?-->|<!DOCTYPE[^>]*>)*",
    re.IGNORECASE | re.DOTALL,
)
_ROOT_RE = re.compile(r"<(?:[\w.-]+:)?([\w.-]+)")
_ATOM_FEED_RE = re.compile(
    r"<(?:[\w.-]+:)?feed\s[^>]*" + re.escape(ATOM_NAMESPACE),
    re.IGNORECASE,
)
_RSS_ROOT_RE = re.compile(r"<(?:[\w.-]+:)?(?:rss|rdf)[\s>]", re.IGNORECASE)


class FeedFormat(Enum):
    """Syndication format of a feed document."""
    RSS = "rss"
    ATOM = "atom"


@dataclass(frozen=True)
class FeedItem:
    """One article as extracted from markup, before it has a durable identity."""
    title: str
    link: str
    content: str
    content_snippet: str
    pub_date: str
    author: str | None = None


@dataclass(frozen=True)
class FeedData:
    """A parsed feed document at a point in time."""
    title: str
    description: str
    items: list[FeedItem] = field(default_factory=list)


def detect_format(markup: str) -> FeedFormat:
    """
    Classify a document as Atom or RSS.

    A recognised feed root (``feed``, ``rss``, ``RDF``) right after the
    prologue decides. Otherwise, as when a server prints warnings before
    the document, whichever comes first wins: a ``<feed>`` tag declaring
    the Atom namespace, or an RSS root. Everything else is treated as RSS.
    """
    if not markup:
        return FeedFormat.RSS

    prologue = _PROLOGUE_RE.match(markup)
    root = _ROOT_RE.match(markup, prologue.end() if prologue else 0)
    if root:
        name = root.group(1).lower()
        if name == "feed":
            return FeedFormat.ATOM
        if name in RSS_ROOTS:
            return FeedFormat.RSS

    atom = _ATOM_FEED_RE.search(markup)
    if not atom:
        return FeedFormat.RSS
    rss = _RSS_ROOT_RE.search(markup, 0, atom.start())
    return FeedFormat.RSS if rss else FeedFormat.ATOM


def parse_feed_document(markup: str) -> FeedData:
    """Parse raw RSS or Atom markup into FeedData."""
    markup = markup or ""
    feed_format = detect_format(markup)

    if feed_format is FeedFormat.ATOM:
        data = _parse_atom(markup)
    else:
        data = _parse_rss(markup)

    logger.debug(
        f"Parsed {feed_format.value} document: {len(data.items)} items, title={data.title!r}"
    )
    return data


def _make_item(
    title: str,
    link: str,
    content: str,
    pub_date: str,
    author: str,
) -> FeedItem:
    """Build a FeedItem, applying the per-item content fixes."""
    return FeedItem(
        title=title,
        link=link,
        content=fix_relative_urls(content, link),
        content_snippet=make_snippet(content),
        pub_date=pub_date,
        author=author or None,
    )


# ─────────────────────────────────────────────────────────────
# Atom
# ─────────────────────────────────────────────────────────────

def _parse_atom(markup: str) -> FeedData:
    # Feed-level fields live outside the entries
    header = strip_blocks(markup, "entry")

    items = [_parse_atom_entry(entry) for entry in iter_blocks(markup, "entry")]

    return FeedData(
        title=get_tag(header, "title"),
        description=get_tag(header, "subtitle"),
        items=items,
    )


def _parse_atom_entry(entry: str) -> FeedItem:
    return _make_item(
        title=get_tag(entry, "title"),
        link=_atom_entry_link(entry),
        content=get_content(entry, ATOM_CONTENT_TAGS),
        pub_date=get_tag(entry, "published") or get_tag(entry, "updated"),
        author=get_tag(entry, "name") or get_tag(entry, "author"),
    )


def _atom_entry_link(entry: str) -> str:
    """
    Pick an entry's article URL.

    Order: rel="alternate", a link without rel (alternate by default),
    a text-content <link>, then the entry <id>.
    """
    link = get_attr(entry, "link", "href", rel="alternate")
    if link:
        return link

    for attrs in iter_attrs(entry, "link"):
        if "rel" not in attrs and attrs.get("href"):
            return clean(attrs["href"])

    return get_tag(entry, "link") or get_tag(entry, "id")


# ─────────────────────────────────────────────────────────────
# RSS
# ─────────────────────────────────────────────────────────────

def _parse_rss(markup: str) -> FeedData:
    title = ""
    description = ""

    channel = next(iter_blocks(markup, "channel"), "")
    if channel:
        header = strip_blocks(channel, "item")
        title = get_tag(header, "title")
        description = get_tag(header, "description")

    # Items are enumerated over the whole document; RSS 1.0 puts them
    # outside <channel>
    items = [_parse_rss_item(item) for item in iter_blocks(markup, "item")]

    return FeedData(title=title, description=description, items=items)


def _parse_rss_item(item: str) -> FeedItem:
    return _make_item(
        title=get_tag(item, "title"),
        link=get_tag(item, "link") or _rss_permalink(item),
        content=get_content(item, RSS_CONTENT_TAGS),
        pub_date=get_tag(item, "pubDate") or get_tag(item, "date"),
        author=get_tag(item, "creator") or get_tag(item, "author"),
    )


def _rss_permalink(item: str) -> str:
    """Use <guid> as the link when it is a permalink URL."""
    guid = get_tag(item, "guid")
    if not guid.lower().startswith(("http://", "https://")):
        return ""
    if get_attr(item, "guid", "isPermaLink").lower() == "false":
        return ""
    return guid
