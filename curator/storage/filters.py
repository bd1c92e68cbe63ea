"""
Item filter predicates.

Search builds a list of these and hands it to the item store, which
combines them with AND. Each predicate can test an Item in memory
(matches) and render itself as an Airtable formula (to_formula).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple
import re

from curator.config import QUALITY_THRESHOLD
from curator.models.item import Item, QUALITY_NAMES


class InvalidRangeError(ValueError):
    """A duration range string could not be parsed."""


def airtable_string(value: str) -> str:
    """Quote a value for use inside an Airtable formula."""
    escaped = str(value).replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


class ItemFilter(ABC):
    """A single condition on items."""

    @abstractmethod
    def matches(self, item: Item) -> bool:
        pass

    @abstractmethod
    def to_formula(self) -> str:
        pass


def _any_of(field_name: str, values) -> str:
    if not values:
        return "FALSE()"
    clauses = [f"{{{field_name}}}={airtable_string(v)}" for v in sorted(values)]
    if len(clauses) == 1:
        return clauses[0]
    return f"OR({', '.join(clauses)})"


@dataclass(frozen=True)
class InIdeaSets(ItemFilter):
    """Item belongs to one of the given idea-sets."""

    idea_set_ids: FrozenSet[str]

    def matches(self, item: Item) -> bool:
        return item.idea_set_id in self.idea_set_ids

    def to_formula(self) -> str:
        return _any_of("idea_set_id", self.idea_set_ids)


@dataclass(frozen=True)
class ItemTypeIn(ItemFilter):
    """Item has one of the given item-type identifiers."""

    item_types: FrozenSet[str]

    def matches(self, item: Item) -> bool:
        return item.item_type in self.item_types

    def to_formula(self) -> str:
        return _any_of("item_type", self.item_types)


@dataclass(frozen=True)
class DurationBetween(ItemFilter):
    """
    Item's duration in minutes lies within [start, finish].

    finish=None leaves the range open at the top. Items without an
    estimate never match.
    """

    start: int
    finish: Optional[int] = None

    def matches(self, item: Item) -> bool:
        minutes = item.duration_minutes
        if minutes is None:
            return False
        if minutes < self.start:
            return False
        return self.finish is None or minutes <= self.finish

    def to_formula(self) -> str:
        minutes = "IF({time_unit}='hours', {estimated_time}*60, {estimated_time})"
        clauses = [
            # Zero counts as blank to BLANK(); string coercion keeps it
            '{estimated_time}&""!=""',
            f"{minutes}>={self.start}",
        ]
        if self.finish is not None:
            clauses.append(f"{minutes}<={self.finish}")
        return f"AND({', '.join(clauses)})"


@dataclass(frozen=True)
class QualityAtLeast(ItemFilter):
    """Item's named quality score is at least threshold."""

    quality: str
    threshold: float = QUALITY_THRESHOLD

    def __post_init__(self) -> None:
        if self.quality not in QUALITY_NAMES:
            raise ValueError(f"Unknown quality: {self.quality!r}")

    def matches(self, item: Item) -> bool:
        score = item.quality_score(self.quality)
        return score is not None and score >= self.threshold

    def to_formula(self) -> str:
        return f"{{{self.quality}_score}}>={self.threshold}"


@dataclass(frozen=True)
class NameEquals(ItemFilter):
    """Item name is exactly equal (case-sensitive)."""

    name: str

    def matches(self, item: Item) -> bool:
        return item.name == self.name

    def to_formula(self) -> str:
        return f"{{name}}={airtable_string(self.name)}"


def combine_formulas(filters) -> Optional[str]:
    """AND together the formulas of several filters (None for no filters)."""
    formulas = [f.to_formula() for f in filters]
    if not formulas:
        return None
    if len(formulas) == 1:
        return formulas[0]
    return f"AND({', '.join(formulas)})"


def parse_length_range(text: str) -> Tuple[int, Optional[int]]:
    """
    Parse a "start-finish" duration range in minutes.

    "30-60" -> (30, 60); "30" -> (30, 30); "-60" -> (0, 60); "30-" -> (30, None).

    Raises:
        InvalidRangeError: For non-numeric parts or start > finish.
    """
    text = (text or "").strip()
    if not text:
        raise InvalidRangeError("length range is empty")

    if "-" not in text:
        if not re.fullmatch(r"[0-9]+", text):
            raise InvalidRangeError(f"length range must be numeric, got {text!r}")
        value = int(text)
        return value, value

    match = re.fullmatch(r"\s*([0-9]*)\s*-\s*([0-9]*)\s*", text)
    if not match:
        raise InvalidRangeError(f"length range must look like '30-60', got {text!r}")

    start_raw, finish_raw = match.groups()
    start = int(start_raw) if start_raw else 0
    finish = int(finish_raw) if finish_raw else None

    if finish is not None and start > finish:
        raise InvalidRangeError(f"length range start exceeds finish in {text!r}")

    return start, finish
