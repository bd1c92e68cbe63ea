"""
ExtractedMetadata: what a site adapter learned about a page.

Produced fresh per extraction and never mutated afterwards, so a cached
instance can be shared between callers.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from curator.models.catalog import Topic


@dataclass(frozen=True)
class ExtractedMetadata:
    """
    Normalized metadata for a submitted URL.

    Attributes:
        item_type: Item-type guess ("book", "video", "wiki") or None.
        canonical_url: The page's self-declared authoritative URL.
        image_url: Cover, thumbnail or preview image.
        title: Page or work title.
        description: Long-form description.
        topics: Topics that resolved by exact name in the topic store.
        creators: Creator display names (authors, channels).
        creator_bio: Short biography of the first creator.
        structured: Extra site-specific facts (isbn, page_count).
    """

    item_type: Optional[str] = None
    canonical_url: Optional[str] = None
    image_url: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    topics: Tuple[Topic, ...] = ()
    creators: Tuple[str, ...] = ()
    creator_bio: Optional[str] = None
    structured: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Freeze the collections so shared cached values stay intact
        object.__setattr__(self, "topics", tuple(self.topics))
        object.__setattr__(self, "creators", tuple(self.creators))
        object.__setattr__(self, "structured", MappingProxyType(dict(self.structured)))

    @classmethod
    def empty(cls) -> "ExtractedMetadata":
        """A record with no fields populated."""
        return cls()

    @property
    def is_empty(self) -> bool:
        return self == ExtractedMetadata.empty()

    def to_dict(self) -> dict:
        """Plain dictionary for JSON responses."""
        return {
            "item_type": self.item_type,
            "canonical_url": self.canonical_url,
            "image_url": self.image_url,
            "title": self.title,
            "description": self.description,
            "topics": [{"id": t.id, "name": t.name} for t in self.topics],
            "creators": list(self.creators),
            "creator_bio": self.creator_bio,
            "structured": dict(self.structured),
        }
