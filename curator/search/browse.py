"""
Browsing helpers for the front page: newest items and best-rated items.
"""

from typing import List

from curator.models.item import Item
from curator.storage.base import ItemStore


FRONT_PAGE_LIMIT = 3


def recent_items(store: ItemStore, limit: int = FRONT_PAGE_LIMIT) -> List[Item]:
    """Newest items first."""
    items = sorted(store.all_items(), key=lambda i: (i.created_at, i.id), reverse=True)
    return items[:limit]


def popular_items(store: ItemStore, limit: int = FRONT_PAGE_LIMIT) -> List[Item]:
    """Items with the highest summed quality scores; ties broken by id."""
    items = sorted(store.all_items(), key=lambda i: (-i.total_quality, i.id))
    return items[:limit]
