"""
Deterministic article identity.

An article's id is derived from its feed and its link, so re-ingesting the
same feed document replaces rows instead of duplicating them.
"""

import hashlib


def article_id(feed_id: int | str, link: str) -> str:
    """Return the stable id for the article at ``link`` within a feed."""
    digest = hashlib.sha256(link.encode("utf-8")).hexdigest()[:32]
    return f"{feed_id}-{digest}"
