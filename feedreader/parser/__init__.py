"""
Feed normalization engine.

Pure, synchronous and safe to call concurrently; nothing is cached
between calls.
"""

from .document import (
    ATOM_NAMESPACE,
    FeedData,
    FeedFormat,
    FeedItem,
    detect_format,
    parse_feed_document,
)
from .tags import get_attr, get_content, get_tag, iter_blocks
from .text import SNIPPET_LENGTH, SNIPPET_SUFFIX, clean, make_snippet, strip_markup
from .urls import fix_relative_urls, get_origin

__all__ = [
    "ATOM_NAMESPACE",
    "FeedData",
    "FeedFormat",
    "FeedItem",
    "SNIPPET_LENGTH",
    "SNIPPET_SUFFIX",
    "clean",
    "detect_format",
    "fix_relative_urls",
    "get_attr",
    "get_content",
    "get_origin",
    "get_tag",
    "iter_blocks",
    "make_snippet",
    "parse_feed_document",
    "strip_markup",
]
