"""
Root-relative URL rewriting for HTML fragments embedded in feeds.
"""

import re
from urllib.parse import urlsplit

# src="/x" and href="/x", but not protocol-relative src="//host/x"
_ROOT_RELATIVE_RE = re.compile(r'\b(src|href)="/(?!/)')


def get_origin(url: str | None) -> str:
    """Return ``scheme://host[:port]`` for a URL, or "" if it has none."""
    if not url:
        return ""
    try:
        parts = urlsplit(url.strip())
        # Accessing .port validates it (raises ValueError when malformed)
        parts.port
    except ValueError:
        return ""
    if not parts.scheme or not parts.hostname:
        return ""
    host = parts.netloc.rpartition("@")[2]
    return f"{parts.scheme}://{host}"


def fix_relative_urls(html: str | None, base: str | None) -> str:
    """
    Make root-relative ``src``/``href`` references absolute.

    Only the origin of ``base`` is used. An unusable base leaves the HTML
    untouched; this function never raises.
    """
    if not html:
        return ""
    origin = get_origin(base)
    if not origin:
        return html
    return _ROOT_RELATIVE_RE.sub(lambda m: f'{m.group(1)}="{origin}/', html)
