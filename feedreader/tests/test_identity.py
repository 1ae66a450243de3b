"""
Tests for article identity and date parsing.
"""

from datetime import timezone

from feedreader.dates import parse_pub_date
from feedreader.identity import article_id


class TestArticleId:
    """Tests for deterministic article ids."""

    def test_deterministic(self):
        assert article_id(1, "https://example.com/a") == article_id(1, "https://example.com/a")

    def test_scoped_to_feed(self):
        assert article_id(1, "https://example.com/a") != article_id(2, "https://example.com/a")

    def test_format(self):
        aid = article_id(7, "https://example.com/a")
        prefix, digest = aid.split("-", 1)
        assert prefix == "7"
        assert len(digest) == 32

    def test_links_with_long_shared_prefix(self):
        """Links differing only at the end still get distinct ids."""
        base = "https://example.com/" + "x" * 200
        assert article_id(1, base + "/one") != article_id(1, base + "/two")


class TestParsePubDate:
    """Tests for best-effort date parsing."""

    def test_rfc822(self):
        parsed = parse_pub_date("Mon, 06 Jan 2025 10:00:00 GMT")
        assert (parsed.year, parsed.month, parsed.day, parsed.hour) == (2025, 1, 6, 10)
        assert parsed.tzinfo == timezone.utc

    def test_iso8601_offset_converted_to_utc(self):
        parsed = parse_pub_date("2025-01-07T08:30:00+02:00")
        assert parsed.hour == 6
        assert parsed.tzinfo == timezone.utc

    def test_us_timezone_abbreviation(self):
        parsed = parse_pub_date("Tue, 07 Jan 2025 08:00:00 PST")
        assert parsed.hour == 16

    def test_naive_assumed_utc(self):
        parsed = parse_pub_date("2025-01-07 08:30:00")
        assert parsed.hour == 8
        assert parsed.tzinfo == timezone.utc

    def test_empty(self):
        assert parse_pub_date("") is None
        assert parse_pub_date("   ") is None
        assert parse_pub_date(None) is None

    def test_garbage(self):
        assert parse_pub_date("not a date at all") is None
