"""
Catalog models: topics, idea-sets and the people credited on them.

Items never reference topics directly. An item belongs to one idea-set,
and the idea-set carries the topic tags and creator attributions.
"""

from dataclasses import dataclass, field, asdict
from typing import List, Optional
import uuid

from curator.models.item import is_http_url


DEFAULT_CREDIT_ROLE = "creator"


@dataclass(frozen=True)
class Topic:
    """A named subject that idea-sets are tagged with."""

    name: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("Topic validation failed: name is required")

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class CreatorCredit:
    """Attribution of a person on an idea-set (e.g., author, director)."""

    person_id: str
    role: str = DEFAULT_CREDIT_ROLE


@dataclass
class IdeaSet:
    """
    Grouping of items around one idea.

    Attributes:
        name: Display name, usually the title of the first item.
        description: Free text.
        topic_ids: Topics this idea-set is tagged with.
        creators: People credited with a role.
    """

    name: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    description: str = ""
    topic_ids: List[str] = field(default_factory=list)
    creators: List[CreatorCredit] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("IdeaSet validation failed: name is required")

    def add_topic(self, topic: Topic) -> None:
        """Tag with a topic (avoids duplicates)."""
        if topic.id not in self.topic_ids:
            self.topic_ids.append(topic.id)

    def credit(self, person_id: str, role: str = DEFAULT_CREDIT_ROLE) -> None:
        """Credit a person (avoids duplicate person/role pairs)."""
        credit = CreatorCredit(person_id=person_id, role=role)
        if credit not in self.creators:
            self.creators.append(credit)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "IdeaSet":
        data = data.copy()
        data["creators"] = [
            c if isinstance(c, CreatorCredit) else CreatorCredit(**c)
            for c in data.get("creators", [])
        ]
        return cls(**data)


@dataclass
class Person:
    """Someone credited on idea-sets: an author, a director, a channel."""

    name: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    description: str = ""
    website: Optional[str] = None
    email: Optional[str] = None
    twitter: Optional[str] = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """
        Raises:
            ValueError: If validation fails.
        """
        errors = []

        if not isinstance(self.name, str) or not self.name.strip():
            errors.append("name is required and cannot be empty")

        if self.website and not (isinstance(self.website, str) and is_http_url(self.website)):
            errors.append(f"website must be an http(s) URL, got {self.website}")

        if self.email and not (isinstance(self.email, str) and "@" in self.email):
            errors.append(f"email is not valid, got {self.email}")

        if errors:
            raise ValueError(f"Person validation failed: {'; '.join(errors)}")

    def to_dict(self) -> dict:
        return asdict(self)
