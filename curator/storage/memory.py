"""
In-memory item store.

Used in development, in tests, and whenever Airtable is not configured.
Data lives in dicts and is lost when the process ends. Every read and
write holds one lock, so request threads see consistent snapshots.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Set
import threading

from curator.models.item import Item, Link
from curator.models.catalog import Topic, IdeaSet, Person
from curator.storage.base import ItemStore
from curator.storage.filters import ItemFilter


class MemoryItemStore(ItemStore):
    """Dict-backed ItemStore; filters are evaluated with ItemFilter.matches."""

    def __init__(self):
        self._items: Dict[str, Item] = {}
        self._links: List[Link] = []
        self._topics: Dict[str, Topic] = {}
        self._idea_sets: Dict[str, IdeaSet] = {}
        self._people: Dict[str, Person] = {}
        self._lock = threading.RLock()

    @property
    def name(self) -> str:
        return "memory"

    def add_item(self, item: Item) -> Item:
        with self._lock:
            self._items[item.id] = item
        return item

    def get_item(self, item_id: str) -> Optional[Item]:
        with self._lock:
            return self._items.get(item_id)

    def update_item(self, item: Item) -> Item:
        with self._lock:
            if item.id not in self._items:
                raise KeyError(item.id)
            item.validate()
            item.updated_at = datetime.now()
            self._items[item.id] = item
        return item

    def add_link(self, link: Link) -> Link:
        with self._lock:
            self._links.append(link)
        return link

    def items_for_url(self, url: str, limit: int) -> List[Item]:
        if limit <= 0:
            return []
        items = []
        seen = set()
        with self._lock:
            for link in self._links:
                if link.url != url or link.item_id in seen:
                    continue
                item = self._items.get(link.item_id)
                if item is not None:
                    seen.add(item.id)
                    items.append(item)
                if len(items) >= limit:
                    break
        return items

    def find_items(self, filters: Sequence[ItemFilter], limit: Optional[int] = None) -> List[Item]:
        with self._lock:
            candidates = [item for _, item in sorted(self._items.items())]
        items = [item for item in candidates if all(f.matches(item) for f in filters)]
        return items if limit is None else items[:max(limit, 0)]

    def add_topic(self, topic: Topic) -> Topic:
        with self._lock:
            self._topics[topic.id] = topic
        return topic

    def find_topic_by_name(self, name: str) -> Optional[Topic]:
        with self._lock:
            topics = sorted(self._topics.items())
        for _, topic in topics:
            if topic.name == name:
                return topic
        return None

    def add_idea_set(self, idea_set: IdeaSet) -> IdeaSet:
        with self._lock:
            self._idea_sets[idea_set.id] = idea_set
        return idea_set

    def get_idea_set(self, idea_set_id: str) -> Optional[IdeaSet]:
        with self._lock:
            return self._idea_sets.get(idea_set_id)

    def idea_set_ids_for_topics(self, topic_ids: Iterable[str]) -> Set[str]:
        wanted = set(topic_ids)
        with self._lock:
            return {
                idea_set.id for idea_set in self._idea_sets.values()
                if wanted.intersection(idea_set.topic_ids)
            }

    def topics_for_item(self, item: Item) -> List[Topic]:
        with self._lock:
            idea_set = self._idea_sets.get(item.idea_set_id)
            if idea_set is None:
                return []
            return [self._topics[t] for t in idea_set.topic_ids if t in self._topics]

    def add_person(self, person: Person) -> Person:
        with self._lock:
            self._people[person.id] = person
        return person

    def get_person(self, person_id: str) -> Optional[Person]:
        with self._lock:
            return self._people.get(person_id)

    def update_person(self, person: Person) -> Person:
        with self._lock:
            if person.id not in self._people:
                raise KeyError(person.id)
            person.validate()
            self._people[person.id] = person
        return person

    def find_person_by_name(self, name: str) -> Optional[Person]:
        with self._lock:
            people = sorted(self._people.items())
        for _, person in people:
            if person.name == name:
                return person
        return None

    def clear(self) -> None:
        """Clear all records (for testing)."""
        with self._lock:
            self._items.clear()
            self._links.clear()
            self._topics.clear()
            self._idea_sets.clear()
            self._people.clear()

    def count(self) -> int:
        """Return number of stored items (for testing)."""
        with self._lock:
            return len(self._items)
