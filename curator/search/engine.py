"""
Search engine.

Two entry points:

- search(): URL lookup through the link table, or a fuzzy / exact name match.
- advanced_search(): conjunctive filtering by topic, item-type, duration
  range and quality, capped at ADVANCED_SEARCH_LIMIT results.

Both return results in a deterministic order for identical data.
"""

from difflib import SequenceMatcher
from typing import List, Optional

from curator.config import (
    ADVANCED_SEARCH_LIMIT,
    DEFAULT_MAX_RESULTS,
    FUZZY_MATCH_THRESHOLD,
    QUALITY_THRESHOLD,
)
from curator.models.item import Item, QUALITY_NAMES
from curator.storage.base import ItemStore
from curator.storage.filters import (
    DurationBetween,
    InIdeaSets,
    ItemFilter,
    ItemTypeIn,
    NameEquals,
    QualityAtLeast,
    parse_length_range,
)


URL_PREFIXES = ("http://", "https://")

# Score given to a name that contains the query as a plain substring
CONTAINMENT_SCORE = 0.8


def is_url_query(query: str) -> bool:
    return query.startswith(URL_PREFIXES)


def name_similarity(query: str, name: str) -> float:
    """
    Typo-tolerant similarity between a query and an item name (0.0 to 1.0).

    The query is compared case-insensitively against the whole name and
    against every run of consecutive words of the same length, so "gatsby"
    scores 1.0 against "The Great Gatsby" and about 0.8 against "Gatbsy".
    """
    q = " ".join(query.lower().split())
    n = " ".join(name.lower().split())
    if not q or not n:
        return 0.0
    if q == n:
        return 1.0

    best = SequenceMatcher(None, q, n).ratio()

    words = n.split()
    width = len(q.split())
    for i in range(max(len(words) - width + 1, 0)):
        window = " ".join(words[i:i + width])
        best = max(best, SequenceMatcher(None, q, window).ratio())

    if q in n:
        best = max(best, CONTAINMENT_SCORE)

    return best


class SearchEngine:
    """Resolves queries and filter sets against an ItemStore."""

    def __init__(
        self,
        store: ItemStore,
        fuzzy_threshold: Optional[float] = None,
        advanced_limit: Optional[int] = None,
        quality_threshold: Optional[float] = None,
    ):
        self.store = store
        self.fuzzy_threshold = fuzzy_threshold if fuzzy_threshold is not None else FUZZY_MATCH_THRESHOLD
        self.advanced_limit = advanced_limit if advanced_limit is not None else ADVANCED_SEARCH_LIMIT
        self.quality_threshold = quality_threshold if quality_threshold is not None else QUALITY_THRESHOLD

    def search(self, query: str, max_results: Optional[int] = None, fuzzy: bool = True) -> List[Item]:
        """
        Find items for a query string.

        Args:
            query: A URL (http:// or https://) or a name.
            max_results: Upper bound on the result count. Defaults to
                         config.DEFAULT_MAX_RESULTS.
            fuzzy: Typo-tolerant ranked name match when True, exact name
                   equality when False. Ignored for URL queries.

        Returns:
            At most max_results items.
        """
        if max_results is None:
            max_results = DEFAULT_MAX_RESULTS
        if max_results <= 0 or not query or not query.strip():
            return []

        if is_url_query(query):
            return self.store.items_for_url(query, max_results)[:max_results]

        if fuzzy:
            return self._fuzzy_search(query, max_results)

        return self.store.find_items([NameEquals(query)], limit=max_results)

    def _fuzzy_search(self, query: str, max_results: int) -> List[Item]:
        ranked = []
        for item in self.store.all_items():
            score = name_similarity(query, item.name)
            if score >= self.fuzzy_threshold:
                overall = SequenceMatcher(None, query.lower(), item.name.lower()).ratio()
                ranked.append((-score, -overall, item.name, item.id, item))

        ranked.sort(key=lambda entry: entry[:4])
        return [entry[-1] for entry in ranked[:max_results]]

    def build_filters(
        self,
        topic_name: Optional[str] = None,
        item_type: Optional[str] = None,
        length_range: Optional[str] = None,
        quality: Optional[str] = None,
    ) -> List[ItemFilter]:
        """
        Translate advanced-search parameters into item filters.

        An unknown topic name or quality name adds no filter at all.

        Raises:
            InvalidRangeError: If length_range is malformed.
        """
        filters: List[ItemFilter] = []

        if topic_name:
            topic = self.store.find_topic_by_name(topic_name)
            if topic is not None:
                idea_set_ids = self.store.idea_set_ids_for_topics([topic.id])
                filters.append(InIdeaSets(frozenset(idea_set_ids)))

        if item_type:
            filters.append(ItemTypeIn(frozenset([item_type])))

        if length_range:
            start, finish = parse_length_range(length_range)
            filters.append(DurationBetween(start, finish))

        if quality and quality in QUALITY_NAMES:
            filters.append(QualityAtLeast(quality, self.quality_threshold))

        return filters

    def advanced_search(
        self,
        topic_name: Optional[str] = None,
        item_type: Optional[str] = None,
        length_range: Optional[str] = None,
        quality: Optional[str] = None,
    ) -> List[Item]:
        """
        Narrow all items by every given criterion (AND).

        Returns:
            At most advanced_limit items, ordered by id.

        Raises:
            InvalidRangeError: If length_range is malformed.
        """
        filters = self.build_filters(topic_name, item_type, length_range, quality)
        return self.store.find_items(filters, limit=self.advanced_limit)
