"""
Tests for metadata extraction.

Tests URL classification, each site adapter against saved page fixtures,
the HTTP page fetcher, and the TTL result cache.
"""

import pytest
import threading
from unittest.mock import Mock, patch

import requests
from bs4 import BeautifulSoup

from curator.config import USER_AGENT, REQUEST_TIMEOUT
from curator.extraction import (
    BookAdapter,
    FetchError,
    MetadataExtractor,
    PageFetcher,
    SiteKind,
    TTLMetadataCache,
    UnknownAdapter,
    VideoAdapter,
    WikiAdapter,
    classify_url,
)
from curator.models.item import ItemType

from tests.test_config import EXPECTED, TEST_DATA, GOODREADS_HTML, GOODREADS_NO_ISBN_HTML


URLS = TEST_DATA["urls"]
BOOK = EXPECTED["extraction"]


def parse(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


# =============================================================================
# URL Classification
# =============================================================================

@pytest.mark.extraction
class TestClassifyUrl:
    """Tests for choosing a site adapter by domain."""

    @pytest.mark.parametrize("url,kind", [
        ("https://www.goodreads.com/book/show/4671", SiteKind.BOOK),
        ("https://www.youtube.com/watch?v=abc123", SiteKind.VIDEO),
        ("https://m.youtube.com/watch?v=abc123", SiteKind.VIDEO),
        ("https://vimeo.com/76979871", SiteKind.VIDEO),
        ("https://en.wikipedia.org/wiki/Curation", SiteKind.WIKI),
        ("https://example.com/page", SiteKind.UNKNOWN),
        ("", SiteKind.UNKNOWN),
    ])
    def test_domains(self, url, kind):
        assert classify_url(url) is kind

    def test_goodreads_takes_precedence(self):
        """A Goodreads URL mentioning another domain is still a book."""
        url = "https://www.goodreads.com/book/show/1?ref=youtube.com&via=wikipedia.org"
        assert classify_url(url) is SiteKind.BOOK

    def test_video_takes_precedence_over_wiki(self):
        url = "https://www.youtube.com/results?search_query=wikipedia.org"
        assert classify_url(url) is SiteKind.VIDEO

    def test_extractor_picks_adapter(self, extractor):
        assert isinstance(extractor.adapter_for(URLS["book"]), BookAdapter)
        assert isinstance(extractor.adapter_for(URLS["video"]), VideoAdapter)
        assert isinstance(extractor.adapter_for(URLS["wiki"]), WikiAdapter)
        assert isinstance(extractor.adapter_for(URLS["unknown"]), UnknownAdapter)

    def test_is_recognized(self, extractor):
        assert extractor.is_recognized(URLS["vimeo"])
        assert not extractor.is_recognized(URLS["unknown"])


# =============================================================================
# Book Adapter
# =============================================================================

@pytest.mark.extraction
class TestBookAdapter:
    """Tests for Goodreads book pages."""

    @pytest.fixture
    def adapter(self, seeded_store):
        return BookAdapter(seeded_store.find_topic_by_name)

    def test_basic_fields(self, adapter):
        metadata = adapter.extract(parse(GOODREADS_HTML))

        assert metadata.item_type == ItemType.BOOK
        assert metadata.title == BOOK["book_title"]
        assert metadata.canonical_url == URLS["book"]

    def test_cover_built_from_isbn(self, adapter):
        metadata = adapter.extract(parse(GOODREADS_HTML))

        assert metadata.image_url == BOOK["book_cover"]
        assert metadata.structured["isbn"] == BOOK["book_isbn"]

    def test_no_isbn_means_no_cover(self, adapter):
        metadata = adapter.extract(parse(GOODREADS_NO_ISBN_HTML))

        assert metadata.image_url is None
        assert "isbn" not in metadata.structured

    def test_page_count(self, adapter):
        assert adapter.extract(parse(GOODREADS_HTML)).structured["page_count"] == BOOK["book_page_count"]
        assert adapter.extract(parse(GOODREADS_NO_ISBN_HTML)).structured["page_count"] == 0

    def test_author_profile_url_becomes_name(self, adapter):
        metadata = adapter.extract(parse(GOODREADS_HTML))
        assert metadata.creators == (BOOK["book_author"],)

    def test_plain_author_name_kept(self, adapter):
        metadata = adapter.extract(parse(GOODREADS_NO_ISBN_HTML))
        assert metadata.creators == ("Anonymous",)

    def test_description_is_last_span(self, adapter):
        metadata = adapter.extract(parse(GOODREADS_HTML))
        assert metadata.description.endswith("supreme achievement of his career.")
        assert not metadata.description.endswith("...")

    def test_creator_bio_is_last_span(self, adapter):
        metadata = adapter.extract(parse(GOODREADS_HTML))
        assert metadata.creator_bio == "Francis Scott Key Fitzgerald was an American novelist."

    def test_missing_bio_is_none(self, adapter):
        assert adapter.extract(parse(GOODREADS_NO_ISBN_HTML)).creator_bio is None

    def test_genres_resolved_to_existing_topics(self, adapter):
        metadata = adapter.extract(parse(GOODREADS_HTML))
        assert [t.name for t in metadata.topics] == BOOK["book_topics"]

    def test_unresolved_genres_dropped(self, empty_store):
        adapter = BookAdapter(empty_store.find_topic_by_name)
        assert adapter.extract(parse(GOODREADS_HTML)).topics == ()

    def test_custom_cover_template(self, seeded_store):
        adapter = BookAdapter(seeded_store.find_topic_by_name, "https://img.example.com/{isbn}.png")
        metadata = adapter.extract(parse(GOODREADS_HTML))
        assert metadata.image_url == "https://img.example.com/9780743273565.png"


# =============================================================================
# Video, Wiki and Unknown Adapters
# =============================================================================

@pytest.mark.extraction
class TestOtherAdapters:
    """Tests for video, wiki and unknown pages."""

    def test_video_open_graph_fields(self, extractor):
        metadata = extractor.extract_opengraph_data(URLS["video"])

        assert metadata.item_type == ItemType.VIDEO
        assert metadata.title == BOOK["video_title"]
        assert metadata.canonical_url == URLS["video"]
        assert metadata.image_url == "https://i.ytimg.com/vi/abc123/hqdefault.jpg"
        assert metadata.description == "A short explainer on thrust."
        assert metadata.topics == ()

    def test_video_missing_tags_left_empty(self, extractor):
        metadata = extractor.extract_opengraph_data(URLS["vimeo"])

        assert metadata.title == "The Mountain"
        assert metadata.image_url is None
        assert metadata.description is None

    def test_wiki_title_and_canonical(self, extractor):
        metadata = extractor.extract_opengraph_data(URLS["wiki"])

        assert metadata.item_type == ItemType.WIKI
        assert metadata.title == BOOK["wiki_title"]
        assert metadata.canonical_url == URLS["wiki"]

    def test_unknown_domain_is_empty_without_fetch(self, extractor, fake_fetcher):
        metadata = extractor.extract_opengraph_data(URLS["unknown"])

        assert metadata.is_empty
        assert fake_fetcher.calls == []

    def test_fetch_failure_raises(self, extractor):
        with pytest.raises(FetchError) as exc_info:
            extractor.extract_opengraph_data(URLS["missing"])
        assert exc_info.value.url == URLS["missing"]


# =============================================================================
# Canonical URL
# =============================================================================

@pytest.mark.extraction
class TestCanonicalUrl:
    """Tests for extract_canonical_url."""

    def test_canonical_link(self, extractor):
        assert extractor.extract_canonical_url(URLS["book_short"]) == URLS["book"]

    def test_relative_og_url_resolved(self, extractor):
        assert extractor.extract_canonical_url(URLS["vimeo"]) == "https://vimeo.com/76979871"

    def test_falls_back_to_input(self, extractor):
        assert extractor.extract_canonical_url(URLS["unknown"]) == URLS["unknown"]

    def test_fetch_failure_raises(self, extractor):
        with pytest.raises(FetchError):
            extractor.extract_canonical_url(URLS["missing"])


# =============================================================================
# Page Fetcher
# =============================================================================

@pytest.mark.extraction
class TestPageFetcher:
    """Tests for the requests-based fetcher."""

    def test_fetch_sends_user_agent_and_timeout(self):
        with patch("curator.extraction.fetcher.requests.get") as mock_get:
            mock_get.return_value = Mock(text="<html><title>x</title></html>")

            html = PageFetcher().fetch_html("https://example.com")

        assert "<title>x</title>" in html
        kwargs = mock_get.call_args.kwargs
        assert kwargs["headers"]["User-Agent"] == USER_AGENT
        assert kwargs["timeout"] == REQUEST_TIMEOUT

    def test_network_error_becomes_fetch_error(self):
        with patch("curator.extraction.fetcher.requests.get") as mock_get:
            mock_get.side_effect = requests.ConnectionError("Connection refused")

            with pytest.raises(FetchError) as exc_info:
                PageFetcher().fetch_html("https://example.com")

        assert "Connection refused" in str(exc_info.value)
        assert exc_info.value.url == "https://example.com"

    def test_http_error_becomes_fetch_error(self):
        with patch("curator.extraction.fetcher.requests.get") as mock_get:
            response = Mock()
            response.raise_for_status.side_effect = requests.HTTPError("404 Client Error")
            mock_get.return_value = response

            with pytest.raises(FetchError, match="404"):
                PageFetcher().fetch_html("https://example.com/missing")

    def test_empty_body_is_an_error(self):
        with patch("curator.extraction.fetcher.requests.get") as mock_get:
            mock_get.return_value = Mock(text="   ")

            with pytest.raises(FetchError, match="empty"):
                PageFetcher().fetch_html("https://example.com")

    def test_session_is_used_when_given(self):
        session = Mock()
        session.get.return_value = Mock(text="<html></html>")

        with patch("curator.extraction.fetcher.requests.get") as mock_get:
            PageFetcher(session=session, timeout=5).fetch_page("https://example.com")

        mock_get.assert_not_called()
        assert session.get.call_args.kwargs["timeout"] == 5

    def test_fetch_page_parses(self):
        with patch("curator.extraction.fetcher.requests.get") as mock_get:
            mock_get.return_value = Mock(text="<html><head><title>Hello</title></head></html>")
            page = PageFetcher().fetch_page("https://example.com")

        assert page.find("title").get_text() == "Hello"


# =============================================================================
# Metadata Cache
# =============================================================================

class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.mark.extraction
class TestMetadataCache:
    """Tests for TTL caching of extraction results."""

    @pytest.fixture
    def clock(self):
        return FakeClock()

    @pytest.fixture
    def cached_extractor(self, seeded_store, fake_fetcher, clock):
        cache = TTLMetadataCache(ttl=EXPECTED["config"]["cache_ttl_seconds"], timer=clock)
        return MetadataExtractor(seeded_store.find_topic_by_name, fetcher=fake_fetcher, cache=cache)

    def test_second_call_served_from_cache(self, cached_extractor, fake_fetcher):
        first = cached_extractor.extract_opengraph_data(URLS["book"])
        second = cached_extractor.extract_opengraph_data(URLS["book"])

        assert first == second
        assert fake_fetcher.calls == [URLS["book"]]

    def test_cache_keyed_by_exact_url(self, cached_extractor, fake_fetcher):
        cached_extractor.extract_opengraph_data(URLS["book"])
        cached_extractor.extract_opengraph_data(URLS["book_short"])

        assert fake_fetcher.calls == [URLS["book"], URLS["book_short"]]

    def test_entry_served_until_ttl(self, cached_extractor, fake_fetcher, clock):
        cached_extractor.extract_opengraph_data(URLS["wiki"])
        clock.now = EXPECTED["config"]["cache_ttl_seconds"] - 1
        cached_extractor.extract_opengraph_data(URLS["wiki"])

        assert len(fake_fetcher.calls) == 1

    def test_entry_refreshed_after_ttl(self, cached_extractor, fake_fetcher, clock):
        cached_extractor.extract_opengraph_data(URLS["wiki"])
        clock.now = EXPECTED["config"]["cache_ttl_seconds"] + 1
        cached_extractor.extract_opengraph_data(URLS["wiki"])

        assert len(fake_fetcher.calls) == 2

    def test_failure_is_not_cached(self, seeded_store, fake_fetcher):
        cache = TTLMetadataCache()
        extractor = MetadataExtractor(seeded_store.find_topic_by_name, fetcher=fake_fetcher, cache=cache)
        page = fake_fetcher.pages.pop(URLS["wiki"])

        with pytest.raises(FetchError):
            extractor.extract_opengraph_data(URLS["wiki"])
        assert URLS["wiki"] not in cache

        fake_fetcher.pages[URLS["wiki"]] = page
        metadata = extractor.extract_opengraph_data(URLS["wiki"])

        assert metadata.title == BOOK["wiki_title"]
        assert len(fake_fetcher.calls) == 2

    def test_canonical_cached_separately(self, cached_extractor, fake_fetcher):
        cached_extractor.extract_opengraph_data(URLS["book"])
        cached_extractor.extract_canonical_url(URLS["book"])
        cached_extractor.extract_canonical_url(URLS["book"])

        assert fake_fetcher.calls == [URLS["book"], URLS["book"]]

    def test_null_cache_always_computes(self, extractor, fake_fetcher):
        extractor.extract_opengraph_data(URLS["wiki"])
        extractor.extract_opengraph_data(URLS["wiki"])

        assert len(fake_fetcher.calls) == 2

    def test_clear(self):
        cache = TTLMetadataCache()
        cache.get_or_compute("a", lambda: 1)
        assert len(cache) == 1

        cache.clear()
        assert len(cache) == 0
        assert cache.get_or_compute("a", lambda: 2) == 2

    def test_concurrent_readers_see_one_value(self):
        cache = TTLMetadataCache()
        cache.get_or_compute("key", lambda: "first")
        results = []

        def read():
            results.append(cache.get_or_compute("key", lambda: "second"))

        threads = [threading.Thread(target=read) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results == ["first"] * 8
