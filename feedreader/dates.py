"""
Best-effort parsing of raw feed dates.

Feeds keep their date strings verbatim; this only derives a sortable
timestamp for ordering article lists.
"""

from datetime import datetime, timezone

from dateutil import parser

# Abbreviations dateutil doesn't resolve on its own
_TZINFOS = {
    "PDT": -7 * 3600,
    "PST": -8 * 3600,
    "EDT": -4 * 3600,
    "EST": -5 * 3600,
    "CDT": -5 * 3600,
    "CST": -6 * 3600,
    "CEST": 2 * 3600,
    "CET": 1 * 3600,
    "AEST": 10 * 3600,
    "AEDT": 11 * 3600,
}


def parse_pub_date(value: str | None) -> datetime | None:
    """
    Parse an RSS/Atom date string into an aware UTC datetime.

    Returns None when the string is empty or unrecognisable. Naive
    results are assumed to be UTC.
    """
    if not value or not value.strip():
        return None

    try:
        parsed = parser.parse(value.strip(), tzinfos=_TZINFOS)
    except (ValueError, OverflowError):
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
