"""
Discovery picker: suggest one random item.

The pool is narrowed by item types and by topics. When that leaves
nothing, the topic restriction is dropped and the pick is made among the
item types alone.
"""

from typing import Iterable, List, Optional, Union
import random

from curator.models.catalog import Topic
from curator.models.item import Item
from curator.storage.base import ItemStore
from curator.storage.filters import InIdeaSets, ItemFilter, ItemTypeIn


class DiscoveryPicker:
    """Uniform random selection over a filtered item pool."""

    def __init__(self, store: ItemStore, rng: Optional[random.Random] = None):
        """
        Args:
            store: Item store to draw from.
            rng: Random source; pass a seeded Random for repeatable picks.
        """
        self.store = store
        self.rng = rng or random.Random()

    def discover(
        self,
        topics: Optional[Iterable[Union[Topic, str]]] = None,
        item_type_ids: Optional[Iterable[str]] = None,
    ) -> Optional[Item]:
        """
        Pick one item at random.

        Args:
            topics: Topics (or topic ids) the item's idea-set should carry.
            item_type_ids: Allowed item types.

        Returns:
            An item, or None when no item matches even the item-type
            restriction alone.
        """
        type_filters: List[ItemFilter] = []
        if item_type_ids:
            type_filters.append(ItemTypeIn(frozenset(item_type_ids)))

        topic_ids = [t.id if isinstance(t, Topic) else t for t in (topics or [])]
        if topic_ids:
            idea_set_ids = self.store.idea_set_ids_for_topics(topic_ids)
            constrained = type_filters + [InIdeaSets(frozenset(idea_set_ids))]
            item = self.store.random_item(constrained, self.rng)
            if item is not None:
                return item

        return self.store.random_item(type_filters, self.rng)
