"""
OPML subscription lists.

Import reads every outline carrying an ``xmlUrl``; the nearest enclosing
folder outline names its category. Export writes uncategorized feeds at
the top level and one folder per category.
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from itertools import groupby
from typing import Iterator

UNTITLED_FEED = "Untitled Feed"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


@dataclass
class OPMLFeed:
    """A feed entry from an OPML file."""
    url: str
    title: str
    category: str | None = None


@dataclass
class OPMLDocument:
    """Parsed OPML document."""
    title: str | None
    feeds: list[OPMLFeed]


def _label(outline: ET.Element) -> str:
    return (outline.get("title") or outline.get("text") or "").strip()


def _walk(parent: ET.Element, category: str | None) -> Iterator[OPMLFeed]:
    for outline in parent.iterfind("outline"):
        url = (outline.get("xmlUrl") or outline.get("xmlurl") or "").strip()
        if url:
            yield OPMLFeed(url=url, title=_label(outline) or UNTITLED_FEED, category=category)
        else:
            yield from _walk(outline, _label(outline) or category)


def parse_opml(xml_content: str) -> OPMLDocument:
    """
    Read the subscriptions out of an OPML document.

    Raises:
        ValueError: If the content is not well-formed XML or not OPML
    """
    try:
        root = ET.fromstring(xml_content.strip())
    except ET.ParseError as e:
        raise ValueError(f"Invalid XML: {e}")

    if root.tag.lower() != "opml":
        raise ValueError(f"Not an OPML document (root element: {root.tag})")

    body = root.find("body")
    if body is None:
        raise ValueError("OPML document missing <body> element")

    title = (root.findtext("head/title") or "").strip() or None
    return OPMLDocument(title=title, feeds=list(_walk(body, None)))


def generate_opml(feeds: list[OPMLFeed], title: str = "Feed Subscriptions") -> str:
    """Serialize feeds to an OPML 2.0 document."""
    root = ET.Element("opml", version="2.0")
    ET.SubElement(ET.SubElement(root, "head"), "title").text = title
    body = ET.SubElement(root, "body")

    # Stable sort: uncategorized first, then folders by name, feed order kept
    ordered = sorted(feeds, key=lambda f: (f.category is not None, f.category or ""))
    for category, group in groupby(ordered, key=lambda f: f.category):
        parent = body
        if category is not None:
            parent = ET.SubElement(body, "outline", text=category, title=category)
        for feed in group:
            label = feed.title or feed.url
            ET.SubElement(parent, "outline", type="rss", text=label, title=label, xmlUrl=feed.url)

    return XML_DECLARATION + ET.tostring(root, encoding="unicode")
