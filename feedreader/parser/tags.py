"""
Pattern-based element lookup over raw feed markup.

Feeds come from servers we don't control and are frequently not well-formed
XML (bare ampersands, wrong encoding declarations, stray HTML). A strict XML
parser rejects whole documents for a single bad byte, so extraction here is
deliberately done with regular expressions over the raw text: every lookup
returns the first plausible match or an empty string, and never raises.

Element names match case-insensitively and may carry any namespace alias
(``dc:creator``, ``content:encoded``, ``atom:link``).
"""

import re
from functools import lru_cache
from typing import Iterable, Iterator

from .text import clean

_PREFIX = r"(?:[\w.-]+:)?"
_ATTR_RE = re.compile(r"""([\w:.-]+)\s*=\s*(?:"([^"]*)"|'([^']*)')""")


@lru_cache(maxsize=128)
def _element_re(tag_name: str) -> re.Pattern:
    # <tag ...>inner</tag>, with the closing name matching the opening one
    # (prefix included). Self-closing declarations never match.
    return re.compile(
        rf"<({_PREFIX}{re.escape(tag_name)})(?:\s[^>]*)?(?<!/)>(.*?)</\1\s*>",
        re.IGNORECASE | re.DOTALL,
    )


@lru_cache(maxsize=128)
def _opening_re(tag_name: str) -> re.Pattern:
    return re.compile(
        rf"<{_PREFIX}{re.escape(tag_name)}(\s[^>]*)?/?>",
        re.IGNORECASE,
    )


def get_tag(fragment: str, tag_name: str) -> str:
    """Return the cleaned inner text of the first ``tag_name`` element."""
    if not fragment:
        return ""
    match = _element_re(tag_name).search(fragment)
    return clean(match.group(2)) if match else ""


def iter_attrs(fragment: str, tag_name: str) -> Iterator[dict[str, str]]:
    """
    Yield the attributes of each ``tag_name`` opening declaration.

    Attribute names are lowercased; values are returned raw.
    """
    if not fragment:
        return
    for match in _opening_re(tag_name).finditer(fragment):
        attrs: dict[str, str] = {}
        for name, double, single in _ATTR_RE.findall(match.group(1) or ""):
            attrs.setdefault(name.lower(), double or single)
        yield attrs


def get_attr(fragment: str, tag_name: str, attr_name: str, **match: str) -> str:
    """
    Return one attribute of the first matching ``tag_name`` declaration.

    Keyword arguments restrict the search to declarations whose attributes
    have those values (compared case-insensitively), e.g.
    ``get_attr(entry, "link", "href", rel="alternate")``.
    """
    attr_name = attr_name.lower()
    for attrs in iter_attrs(fragment, tag_name):
        if attr_name not in attrs:
            continue
        if all(attrs.get(k.lower(), "").lower() == v.lower() for k, v in match.items()):
            return clean(attrs[attr_name])
    return ""


def get_content(fragment: str, candidates: Iterable[str]) -> str:
    """Return the first non-empty match from an ordered list of tag names."""
    for tag_name in candidates:
        value = get_tag(fragment, tag_name)
        if value:
            return value
    return ""


def iter_blocks(markup: str, tag_name: str) -> Iterator[str]:
    """Yield the raw inner markup of every ``tag_name`` block, in order."""
    if not markup:
        return
    for match in _element_re(tag_name).finditer(markup):
        yield match.group(2)


def strip_blocks(markup: str, tag_name: str) -> str:
    """Remove every ``tag_name`` block, leaving the surrounding markup."""
    if not markup:
        return ""
    return _element_re(tag_name).sub("", markup)
