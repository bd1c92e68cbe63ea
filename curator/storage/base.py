"""
Base storage abstraction for Idea Curator.

Defines the item store interface that search, discovery and submission
query. Implementations: MemoryItemStore (in-process) and
AirtableItemStore (Airtable REST API).
"""

from abc import ABC, abstractmethod
import random
from typing import Iterable, List, Optional, Sequence, Set

from curator.models.item import Item, Link
from curator.models.catalog import Topic, IdeaSet, Person
from curator.storage.filters import ItemFilter


class StorageError(Exception):
    """The backing store could not complete a read or write."""


class ItemStore(ABC):
    """
    Abstract base class for item stores.

    Implementations must provide:
    - Item, Link, Topic, IdeaSet and Person persistence
    - Exact URL lookup through the link table
    - Conjunctive filtering with ItemFilter predicates
    - Exact-name topic lookup
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Return the name of this storage backend.

        Used for logging and debugging.
        """
        pass

    # -------------------------------------------------------------------------
    # Items and links
    # -------------------------------------------------------------------------

    @abstractmethod
    def add_item(self, item: Item) -> Item:
        pass

    @abstractmethod
    def get_item(self, item_id: str) -> Optional[Item]:
        pass

    @abstractmethod
    def update_item(self, item: Item) -> Item:
        """
        Raises:
            KeyError: If no item with that id exists.
        """
        pass

    @abstractmethod
    def add_link(self, link: Link) -> Link:
        pass

    @abstractmethod
    def items_for_url(self, url: str, limit: int) -> List[Item]:
        """Items owning a Link whose URL equals url exactly, in link order."""
        pass

    @abstractmethod
    def find_items(self, filters: Sequence[ItemFilter], limit: Optional[int] = None) -> List[Item]:
        """
        Items matching every filter, ordered by id.

        Args:
            filters: Predicates combined with AND (empty means all items).
            limit: Maximum number of items, None for no limit.
        """
        pass

    def all_items(self) -> List[Item]:
        """Every item, ordered by id."""
        return self.find_items([])

    def random_item(
        self,
        filters: Sequence[ItemFilter],
        rng: Optional[random.Random] = None,
    ) -> Optional[Item]:
        """One item chosen uniformly at random among those matching filters."""
        candidates = self.find_items(filters)
        if not candidates:
            return None
        return (rng or random).choice(candidates)

    # -------------------------------------------------------------------------
    # Topics and idea-sets
    # -------------------------------------------------------------------------

    @abstractmethod
    def add_topic(self, topic: Topic) -> Topic:
        pass

    @abstractmethod
    def find_topic_by_name(self, name: str) -> Optional[Topic]:
        """Topic whose name equals name exactly, or None."""
        pass

    @abstractmethod
    def add_idea_set(self, idea_set: IdeaSet) -> IdeaSet:
        pass

    @abstractmethod
    def get_idea_set(self, idea_set_id: str) -> Optional[IdeaSet]:
        pass

    @abstractmethod
    def idea_set_ids_for_topics(self, topic_ids: Iterable[str]) -> Set[str]:
        """Ids of idea-sets tagged with any of the given topics."""
        pass

    def topics_for_item(self, item: Item) -> List[Topic]:
        """Topics of the item's idea-set. Default: none."""
        return []

    # -------------------------------------------------------------------------
    # People
    # -------------------------------------------------------------------------

    @abstractmethod
    def add_person(self, person: Person) -> Person:
        pass

    @abstractmethod
    def get_person(self, person_id: str) -> Optional[Person]:
        pass

    @abstractmethod
    def update_person(self, person: Person) -> Person:
        """
        Raises:
            KeyError: If no person with that id exists.
        """
        pass

    @abstractmethod
    def find_person_by_name(self, name: str) -> Optional[Person]:
        pass

    def __str__(self) -> str:
        return f"ItemStore({self.name})"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
