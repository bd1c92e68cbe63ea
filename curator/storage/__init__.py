"""
Storage module.

Item, link, topic, idea-set and people persistence via Airtable or memory.
"""

from curator.storage.base import ItemStore, StorageError
from curator.storage.memory import MemoryItemStore
from curator.storage.airtable import AirtableItemStore
from curator.storage.filters import (
    ItemFilter,
    InIdeaSets,
    ItemTypeIn,
    DurationBetween,
    QualityAtLeast,
    NameEquals,
    InvalidRangeError,
    parse_length_range,
)

__all__ = [
    "ItemStore",
    "StorageError",
    "MemoryItemStore",
    "AirtableItemStore",
    "ItemFilter",
    "InIdeaSets",
    "ItemTypeIn",
    "DurationBetween",
    "QualityAtLeast",
    "NameEquals",
    "InvalidRangeError",
    "parse_length_range",
    "get_store",
]


def get_store() -> ItemStore:
    """Airtable when configured, otherwise an in-memory store."""
    from curator.config import AIRTABLE_API_KEY, AIRTABLE_BASE_ID

    if AIRTABLE_API_KEY and AIRTABLE_BASE_ID:
        return AirtableItemStore()
    return MemoryItemStore()
