"""
Data models module.

Defines data structures for items, links, topics, idea-sets, people and
extracted page metadata.
"""

from curator.models.item import Item, Link, ItemType, QUALITY_NAMES, TIME_UNITS
from curator.models.catalog import Topic, IdeaSet, CreatorCredit, Person
from curator.models.metadata import ExtractedMetadata

__all__ = [
    "Item",
    "Link",
    "ItemType",
    "QUALITY_NAMES",
    "TIME_UNITS",
    "Topic",
    "IdeaSet",
    "CreatorCredit",
    "Person",
    "ExtractedMetadata",
]
