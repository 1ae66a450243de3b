"""
Feed Reader Backend

A FastAPI backend for an RSS/Atom feed reader.
Provides feed fetching, normalization, snapshot storage and article access.
"""

__version__ = "1.0.0"
