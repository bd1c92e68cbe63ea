"""
Search and discovery module.

Name and URL search, advanced filtering, random discovery and browsing.
"""

from curator.search.engine import SearchEngine, name_similarity, is_url_query
from curator.search.discovery import DiscoveryPicker
from curator.search.browse import recent_items, popular_items

__all__ = [
    "SearchEngine",
    "name_similarity",
    "is_url_query",
    "DiscoveryPicker",
    "recent_items",
    "popular_items",
]
