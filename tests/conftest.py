"""
Pytest Configuration and Fixtures

This module provides:
- Timestamped result file generation (test_results/)
- Shared fixtures: seeded memory store, fake page fetcher, extractor
- Test category markers
"""

import pytest
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Dict

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tests.test_config import TEST_DATA, TEST_CATEGORIES, get_all_sample_items

from curator.extraction import FetchError, MetadataExtractor, NullCache, PageFetcher
from curator.models.catalog import IdeaSet, Person, Topic
from curator.models.item import Item, Link
from curator.storage.memory import MemoryItemStore


RESULTS_DIR = PROJECT_ROOT / "test_results"

MARKERS = {
    "config_validation": "Configuration validation tests",
    "cli_behavior": "CLI interface tests",
    "extraction": "Metadata extraction and caching tests",
    "search": "Search and advanced filter tests",
    "discovery": "Random discovery tests",
}

STATUS_SYMBOLS = {"passed": "✓", "failed": "✗", "skipped": "○"}


# =============================================================================
# RESULT COLLECTION
# =============================================================================

class TestResultCollector:
    """Groups test outcomes by the file they came from."""

    __test__ = False

    def __init__(self):
        self.start_time: datetime = None
        self.by_file: Dict[str, List[tuple]] = {}

    def add(self, nodeid: str, outcome: str, duration: float, message: str = "") -> None:
        path, _, test_name = nodeid.partition("::")
        category = Path(path).stem.replace("test_", "", 1)
        self.by_file.setdefault(category, []).append((test_name, outcome, duration, message))

    def count(self, outcome: str = None) -> int:
        return sum(
            1
            for results in self.by_file.values()
            for _, result_outcome, _, _ in results
            if outcome is None or result_outcome == outcome
        )

    def report(self) -> str:
        total = self.count()
        passed = self.count("passed")
        elapsed = (datetime.now() - self.start_time).total_seconds()

        lines = [
            "=" * 80,
            "IDEA CURATOR - TEST RESULTS REPORT",
            "=" * 80,
            f"Run Date:   {self.start_time:%Y-%m-%d %H:%M:%S}",
            f"Duration:   {elapsed:.2f} seconds",
            f"Totals:     {passed}/{total} passed, {self.count('failed')} failed, "
            f"{self.count('skipped')} skipped",
        ]

        for category, results in sorted(self.by_file.items()):
            info = TEST_CATEGORIES.get(category, {})
            lines.append("")
            lines.append("-" * 80)
            lines.append(f"{info.get('name', category)} - {info.get('description', '')}")
            for risk in info.get("protects_against", []):
                lines.append(f"  guards: {risk}")
            for test_name, outcome, duration, message in results:
                symbol = STATUS_SYMBOLS.get(outcome, "?")
                lines.append(f"  {symbol} {test_name:<64} {duration * 1000:6.0f}ms")
                if outcome == "failed":
                    lines.extend(f"      {line}" for line in message.splitlines()[-5:])

        lines.append("=" * 80)
        return "\n".join(lines)


_collector = TestResultCollector()


def pytest_configure(config):
    """Register custom markers and start the collector."""
    for marker, description in MARKERS.items():
        config.addinivalue_line("markers", f"{marker}: {description}")

    _collector.start_time = datetime.now()
    RESULTS_DIR.mkdir(exist_ok=True)


def pytest_runtest_logreport(report):
    """Record the outcome of each test call."""
    if report.when == "call":
        _collector.add(
            report.nodeid,
            report.outcome,
            report.duration,
            str(report.longrepr) if report.longrepr else "",
        )


def pytest_sessionfinish(session, exitstatus):
    """Write the report and print the totals."""
    filepath = RESULTS_DIR / f"test_results_{datetime.now():%Y%m%d_%H%M%S}.txt"
    filepath.write_text(_collector.report(), encoding="utf-8")

    print(f"\n📄 Test results saved to: {filepath}")
    print(f"Total: {_collector.count()} | Passed: {_collector.count('passed')} | "
          f"Failed: {_collector.count('failed')} | Skipped: {_collector.count('skipped')}")


# =============================================================================
# TEST DOUBLES
# =============================================================================

class FakeFetcher(PageFetcher):
    """Serves HTML from a dict and records every URL it was asked for."""

    def __init__(self, pages: Dict[str, str]):
        super().__init__()
        self.pages = dict(pages)
        self.calls: List[str] = []

    def fetch_html(self, url: str) -> str:
        self.calls.append(url)
        if url not in self.pages:
            raise FetchError(url, "404 Client Error: Not Found")
        return self.pages[url]


def build_seeded_store() -> MemoryItemStore:
    """A memory store holding the seed catalog from tests/test_config.py."""
    store = MemoryItemStore()

    for topic in TEST_DATA["topics"]:
        store.add_topic(Topic(**topic))

    for idea_set in TEST_DATA["idea_sets"]:
        store.add_idea_set(IdeaSet(**{**idea_set, "topic_ids": list(idea_set["topic_ids"])}))

    for data in get_all_sample_items():
        store.add_item(Item.from_dict(data))

    for link in TEST_DATA["links"]:
        store.add_link(Link(**link))

    for person in TEST_DATA["people"]:
        store.add_person(Person(**person))

    return store


# =============================================================================
# SHARED FIXTURES
# =============================================================================

@pytest.fixture
def empty_store():
    """An empty in-memory store."""
    return MemoryItemStore()


@pytest.fixture
def seeded_store():
    """An in-memory store holding the seed catalog."""
    return build_seeded_store()


@pytest.fixture
def fake_fetcher():
    """A page fetcher that serves the HTML fixtures."""
    return FakeFetcher(TEST_DATA["pages"])


@pytest.fixture
def extractor(seeded_store, fake_fetcher):
    """An uncached extractor over the seed catalog's topics."""
    return MetadataExtractor(
        seeded_store.find_topic_by_name,
        fetcher=fake_fetcher,
        cache=NullCache(),
    )
