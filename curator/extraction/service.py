"""
Metadata extraction service.

    URL -> classify_url -> adapter -> (fetch page) -> ExtractedMetadata
                                                   -> cache (by exact URL)

Fetch failures propagate as FetchError. Nothing is cached for a failure.
"""

from typing import Optional
from urllib.parse import urljoin

from curator.extraction.adapters import (
    SiteAdapter,
    SiteKind,
    TopicLookup,
    build_adapters,
    canonical_link,
    classify_url,
    meta_content,
)
from curator.extraction.cache import MetadataCache, TTLMetadataCache
from curator.extraction.fetcher import PageFetcher
from curator.models.metadata import ExtractedMetadata


CANONICAL_KEY_PREFIX = "canonical:"


class MetadataExtractor:
    """
    Extracts page metadata for submitted URLs.

    Collaborators are injected so tests can pass a fake fetcher and a
    NullCache, and one-off tools can skip caching entirely.
    """

    name = "extractor"

    def __init__(
        self,
        find_topic: TopicLookup,
        fetcher: Optional[PageFetcher] = None,
        cache: Optional[MetadataCache] = None,
    ):
        """
        Args:
            find_topic: Exact-name topic lookup for genre resolution.
            fetcher: Page fetcher. Defaults to a new PageFetcher.
            cache: Result cache. Defaults to a 12-hour TTLMetadataCache.
        """
        self.fetcher = fetcher if fetcher is not None else PageFetcher()
        self.cache = cache if cache is not None else TTLMetadataCache()
        self._adapters = build_adapters(find_topic)

    def adapter_for(self, url: str) -> SiteAdapter:
        """The adapter that handles this URL."""
        return self._adapters[classify_url(url)]

    def extract_opengraph_data(self, url: str) -> ExtractedMetadata:
        """
        Extract metadata for a URL, served from cache within the TTL.

        Args:
            url: The URL exactly as submitted; it is also the cache key.

        Returns:
            ExtractedMetadata (empty for unrecognized domains).

        Raises:
            FetchError: If the page could not be fetched.
        """
        return self.cache.get_or_compute(url, lambda: self._extract(url))

    def extract_canonical_url(self, url: str) -> str:
        """
        Resolve the canonical URL a page declares for itself.

        Falls back to og:url, then to the input URL when the page declares
        neither.

        Raises:
            FetchError: If the page could not be fetched.
        """
        return self.cache.get_or_compute(
            CANONICAL_KEY_PREFIX + url,
            lambda: self._canonical(url),
        )

    def _extract(self, url: str) -> ExtractedMetadata:
        adapter = self.adapter_for(url)
        if not adapter.needs_page:
            return adapter.extract(None)

        page = self.fetcher.fetch_page(url)
        metadata = adapter.extract(page)
        print(
            f"[{adapter.name}] Extracted {url} "
            f"(title={metadata.title!r}, topics={len(metadata.topics)})"
        )
        return metadata

    def _canonical(self, url: str) -> str:
        page = self.fetcher.fetch_page(url)
        declared = canonical_link(page) or meta_content(page, "og:url")
        return urljoin(url, declared) if declared else url

    def is_recognized(self, url: str) -> bool:
        """True if a site adapter (other than the empty one) handles the URL."""
        return classify_url(url) is not SiteKind.UNKNOWN
