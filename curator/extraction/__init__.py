"""
Metadata extraction module.

Fetches Goodreads, YouTube/Vimeo and Wikipedia pages and reads canonical
URLs, titles, descriptions, images, creators and topic tags from them.
"""

from curator.extraction.errors import ExtractionError, FetchError
from curator.extraction.fetcher import PageFetcher
from curator.extraction.adapters import (
    SiteKind,
    SiteAdapter,
    BookAdapter,
    VideoAdapter,
    WikiAdapter,
    UnknownAdapter,
    classify_url,
)
from curator.extraction.cache import MetadataCache, TTLMetadataCache, NullCache
from curator.extraction.service import MetadataExtractor

__all__ = [
    "ExtractionError",
    "FetchError",
    "PageFetcher",
    "SiteKind",
    "SiteAdapter",
    "BookAdapter",
    "VideoAdapter",
    "WikiAdapter",
    "UnknownAdapter",
    "classify_url",
    "MetadataCache",
    "TTLMetadataCache",
    "NullCache",
    "MetadataExtractor",
]
