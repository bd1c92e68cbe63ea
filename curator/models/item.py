"""
Core data model for Idea Curator.

Defines the Item dataclass representing a single curated resource (a book,
a video, a wiki page) and the Link records that point at it.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional
import re
import uuid


class ItemType:
    """Known item-type identifiers."""
    BOOK = "book"
    VIDEO = "video"
    WIKI = "wiki"

    ALL = (BOOK, VIDEO, WIKI)


# The six named quality ratings, in display order
QUALITY_NAMES = (
    "inspirational",
    "educational",
    "challenging",
    "entertaining",
    "visual",
    "interactive",
)

TIME_UNITS = ("minutes", "hours")

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 150

SCORE_MIN = 0
SCORE_MAX = 5

AGE_RANGE_PATTERN = re.compile(r"^(\d{1,2})?-(\d{1,2})?$")


def is_http_url(value: str) -> bool:
    """True if value looks like an absolute http(s) URL with a host."""
    if not value:
        return False
    return re.match(r"^https?://[^/\s?#]+\S*$", value) is not None


def is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass
class Item:
    """
    A curated resource submitted by a user.

    Attributes:
        name: Display name (3-150 characters).
        item_type: Item-type identifier (e.g., "book", "video", "wiki").
        idea_set_id: The idea-set grouping this item belongs to.
        submitter_id: The user who submitted the item.
        estimated_time: How long the item takes, in time_unit.
        time_unit: "minutes" or "hours".
        *_score: Quality ratings on a 0-5 scale, None when unrated.
        image_url: Optional http(s) image.
        typical_age_range: Optional "min-max" string, either side optional.
        description: Free text.
        metadata: Opaque structured metadata (ISBN, page count, ...).
    """

    # Required fields
    name: str
    item_type: str
    idea_set_id: str
    submitter_id: str

    # Optional fields with defaults
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    estimated_time: Optional[int] = None
    time_unit: str = "minutes"
    inspirational_score: Optional[float] = None
    educational_score: Optional[float] = None
    challenging_score: Optional[float] = None
    entertaining_score: Optional[float] = None
    visual_score: Optional[float] = None
    interactive_score: Optional[float] = None
    image_url: Optional[str] = None
    typical_age_range: Optional[str] = None
    description: str = ""
    metadata: dict = field(default_factory=dict)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        """Validate fields after initialization."""
        self.validate()

    def validate(self) -> None:
        """
        Validate that required fields are present and valid.

        Raises:
            ValueError: If validation fails.
        """
        errors = []

        name = self.name.strip() if isinstance(self.name, str) else ""
        if not name:
            errors.append("name is required and cannot be empty")
        elif not (NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH):
            errors.append(
                f"name must be {NAME_MIN_LENGTH}-{NAME_MAX_LENGTH} characters, got {len(name)}"
            )

        if not self.item_type or not str(self.item_type).strip():
            errors.append("item_type is required and cannot be empty")

        if not self.idea_set_id or not str(self.idea_set_id).strip():
            errors.append("idea_set_id is required and cannot be empty")

        if not self.submitter_id or not str(self.submitter_id).strip():
            errors.append("submitter_id is required and cannot be empty")

        if self.estimated_time is not None:
            if not is_number(self.estimated_time):
                errors.append(f"estimated_time must be a number, got {self.estimated_time!r}")
            elif self.estimated_time < 0:
                errors.append(f"estimated_time cannot be negative, got {self.estimated_time}")

        if self.time_unit not in TIME_UNITS:
            errors.append(f"time_unit must be one of {TIME_UNITS}, got {self.time_unit!r}")

        for quality in QUALITY_NAMES:
            score = getattr(self, f"{quality}_score")
            if score is None:
                continue
            if not is_number(score):
                errors.append(f"{quality}_score must be a number, got {score!r}")
            elif not (SCORE_MIN <= score <= SCORE_MAX):
                errors.append(
                    f"{quality}_score must be between {SCORE_MIN} and {SCORE_MAX}, got {score}"
                )

        if self.image_url and not (isinstance(self.image_url, str) and is_http_url(self.image_url)):
            errors.append(f"image_url must be an http(s) URL, got {self.image_url}")

        if self.typical_age_range and not (
            isinstance(self.typical_age_range, str) and AGE_RANGE_PATTERN.match(self.typical_age_range)
        ):
            errors.append(f"typical_age_range must look like '8-12', got {self.typical_age_range!r}")

        if errors:
            raise ValueError(f"Item validation failed: {'; '.join(errors)}")

    @property
    def duration_minutes(self) -> Optional[int]:
        """Estimated time normalized to minutes (None when not estimated)."""
        if self.estimated_time is None:
            return None
        if self.time_unit == "hours":
            return self.estimated_time * 60
        return self.estimated_time

    def quality_score(self, quality: str) -> Optional[float]:
        """Return the score for a named quality, or None if unknown or unrated."""
        if quality not in QUALITY_NAMES:
            return None
        return getattr(self, f"{quality}_score")

    @property
    def total_quality(self) -> float:
        """Sum of all rated quality scores."""
        return sum(
            score for score in (self.quality_score(q) for q in QUALITY_NAMES)
            if score is not None
        )

    def to_dict(self) -> dict:
        """
        Convert Item to a plain dictionary for storage/serialization.

        Datetime fields are converted to ISO format strings.
        """
        data = asdict(self)
        data["created_at"] = self.created_at.isoformat()
        data["updated_at"] = self.updated_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Item":
        """Create an Item from a dictionary (e.g., from storage)."""
        data = data.copy()

        if data.get("created_at") and isinstance(data["created_at"], str):
            data["created_at"] = datetime.fromisoformat(data["created_at"])

        if data.get("updated_at") and isinstance(data["updated_at"], str):
            data["updated_at"] = datetime.fromisoformat(data["updated_at"])

        return cls(**data)

    def __str__(self) -> str:
        return f"[{self.item_type}] {self.name}"

    def __repr__(self) -> str:
        return (
            f"Item(id={self.id!r}, name={self.name!r}, "
            f"item_type={self.item_type!r}, idea_set_id={self.idea_set_id!r})"
        )


@dataclass
class Link:
    """A URL pointing at exactly one Item; the reverse index for URL search."""

    url: str
    item_id: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self) -> None:
        errors = []
        if not is_http_url(self.url):
            errors.append(f"url must be an http(s) URL, got {self.url!r}")
        if not self.item_id:
            errors.append("item_id is required")
        if errors:
            raise ValueError(f"Link validation failed: {'; '.join(errors)}")

    def to_dict(self) -> dict:
        return asdict(self)
