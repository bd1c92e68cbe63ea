"""
Tests for random discovery.

Tests type and topic narrowing, the fallback that drops topics when
nothing matches, and repeatable picks with a seeded random source.
"""

import random
import pytest

from curator.models.catalog import Topic
from curator.search import DiscoveryPicker


@pytest.fixture
def picker(seeded_store):
    return DiscoveryPicker(seeded_store, rng=random.Random(42))


@pytest.fixture
def science(seeded_store):
    return seeded_store.find_topic_by_name("science")


@pytest.mark.discovery
class TestDiscover:
    """Tests for DiscoveryPicker.discover."""

    def test_no_criteria_picks_any_item(self, picker, seeded_store):
        item = picker.discover()
        assert item in seeded_store.all_items()

    def test_type_restriction(self, picker):
        for _ in range(20):
            assert picker.discover(item_type_ids=["book"]).item_type == "book"

    def test_type_and_topic(self, picker, science):
        item = picker.discover(topics=[science], item_type_ids=["video"])
        assert item.id == "item_b"

    def test_topic_ids_accepted(self, picker):
        item = picker.discover(topics=["topic_science"])
        assert item.id == "item_b"

    def test_topic_restriction(self, picker, seeded_store):
        fiction = seeded_store.find_topic_by_name("fiction")
        for _ in range(20):
            assert picker.discover(topics=[fiction]).id in ("item_a", "item_d")

    def test_falls_back_to_types_when_topics_match_nothing(self, picker, science):
        """No science books exist, so any book is suggested."""
        for _ in range(20):
            item = picker.discover(topics=[science], item_type_ids=["book"])
            assert item.item_type == "book"
            assert item.id in ("item_a", "item_d")

    def test_unused_topic_falls_back_to_all(self, picker, seeded_store):
        orphan = seeded_store.add_topic(Topic(id="topic_orphan", name="orphan"))
        assert picker.discover(topics=[orphan]) is not None

    def test_none_when_type_matches_nothing(self, picker):
        assert picker.discover(item_type_ids=["podcast"]) is None

    def test_none_on_empty_store(self, empty_store):
        assert DiscoveryPicker(empty_store).discover() is None

    def test_empty_topic_list_means_no_topic_filter(self, picker):
        assert picker.discover(topics=[], item_type_ids=["wiki"]).id == "item_c"

    def test_seeded_random_is_repeatable(self, seeded_store):
        first = [DiscoveryPicker(seeded_store, rng=random.Random(7)).discover().id for _ in range(5)]
        second = [DiscoveryPicker(seeded_store, rng=random.Random(7)).discover().id for _ in range(5)]
        assert first == second

    def test_every_candidate_reachable(self, picker):
        seen = {picker.discover().id for _ in range(200)}
        assert seen == {"item_a", "item_b", "item_c", "item_d"}
