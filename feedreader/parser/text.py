"""
Text normalization for values pulled out of feed markup.
"""

import re

SNIPPET_LENGTH = 150
SNIPPET_SUFFIX = "..."

_CDATA_RE = re.compile(r"<!\[CDATA\[(.*?)\]\]>", re.DOTALL)
_TAG_RE = re.compile(r"<[^>]*>")

# Single pass, so "&amp;lt;" decodes to "&lt;" and not "<"
_ENTITIES = {
    "&lt;": "<",
    "&gt;": ">",
    "&amp;": "&",
    "&quot;": '"',
    "&#39;": "'",
}
_ENTITY_RE = re.compile("|".join(re.escape(e) for e in _ENTITIES))


def clean(raw: str | None) -> str:
    """
    Strip CDATA wrappers and decode the basic named entities.

    Never raises; empty or missing input gives an empty string.
    """
    if not raw:
        return ""
    cleaned = _CDATA_RE.sub(r"\1", raw.strip())
    cleaned = _ENTITY_RE.sub(lambda m: _ENTITIES[m.group(0)], cleaned)
    return cleaned.strip()


def strip_markup(html: str | None) -> str:
    """Remove every tag from an HTML fragment."""
    if not html:
        return ""
    return _TAG_RE.sub("", html)


def make_snippet(content: str | None) -> str:
    """
    Plain-text preview used in article lists.

    The suffix is appended whether or not the text was truncated.
    """
    return strip_markup(content)[:SNIPPET_LENGTH] + SNIPPET_SUFFIX
