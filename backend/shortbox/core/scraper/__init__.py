"""Scraper fallback for files the knowledge base cannot place."""

from .service import (
    INVALID_KEY_ERROR,
    NO_SERIES_ERROR,
    MetadataScraper,
    is_valid_api_key,
    test_api_connection,
)
from .sources import (
    ComicVineMetadataSource,
    MarvelMetadataSource,
    MetadataSource,
    MockMetadataSource,
    SourceRecord,
)

__all__ = [
    "INVALID_KEY_ERROR",
    "NO_SERIES_ERROR",
    "ComicVineMetadataSource",
    "MarvelMetadataSource",
    "MetadataScraper",
    "MetadataSource",
    "MockMetadataSource",
    "SourceRecord",
    "is_valid_api_key",
    "test_api_connection",
]
