"""
Site adapters.

A closed set of adapters turns a parsed page into ExtractedMetadata:

    goodreads.com              -> BookAdapter
    youtube.com / vimeo.com    -> VideoAdapter
    wikipedia.org              -> WikiAdapter
    anything else              -> UnknownAdapter (empty record, no fetch)

classify_url() is a pure function so the choice can be tested without any
network access.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, List, Optional
import re

from bs4 import BeautifulSoup

from curator.config import COVER_IMAGE_URL_TEMPLATE
from curator.models.catalog import Topic
from curator.models.item import ItemType
from curator.models.metadata import ExtractedMetadata


TopicLookup = Callable[[str], Optional[Topic]]

GENRE_PATH_PREFIX = "/genres/"


class SiteKind(Enum):
    BOOK = "book"
    VIDEO = "video"
    WIKI = "wiki"
    UNKNOWN = "unknown"


def classify_url(url: str) -> SiteKind:
    """
    Pick the site kind for a URL by substring match, in precedence order.

    Args:
        url: The submitted URL, exactly as given.

    Returns:
        The SiteKind whose domain marker appears first in precedence.
    """
    url = url or ""
    if "goodreads.com" in url:
        return SiteKind.BOOK
    if "youtube.com" in url or "vimeo.com" in url:
        return SiteKind.VIDEO
    if "wikipedia.org" in url:
        return SiteKind.WIKI
    return SiteKind.UNKNOWN


# =============================================================================
# Tag helpers
# =============================================================================

def _clean_text(text: Optional[str]) -> Optional[str]:
    """Collapse whitespace; empty strings become None."""
    if text is None:
        return None
    text = " ".join(text.split())
    return text or None


def meta_content(page: BeautifulSoup, key: str) -> Optional[str]:
    """Content of <meta property=key> (or name=key), None when absent."""
    tag = page.find("meta", attrs={"property": key}) or page.find("meta", attrs={"name": key})
    if tag is None:
        return None
    return _clean_text(tag.get("content"))


def meta_contents(page: BeautifulSoup, key: str) -> List[str]:
    """All non-empty contents of <meta property=key>, in document order."""
    values = []
    for tag in page.find_all("meta", attrs={"property": key}):
        value = _clean_text(tag.get("content"))
        if value:
            values.append(value)
    return values


def canonical_link(page: BeautifulSoup) -> Optional[str]:
    """href of <link rel="canonical">, None when absent."""
    tag = page.find("link", rel="canonical")
    if tag is None:
        return None
    return _clean_text(tag.get("href"))


def last_span_text(page: BeautifulSoup, selector: str) -> Optional[str]:
    """Text of the last <span> inside the first element matching selector."""
    container = page.select_one(selector)
    if container is None:
        return None
    spans = container.find_all("span")
    if not spans:
        return None
    return _clean_text(spans[-1].get_text())


# =============================================================================
# Adapters
# =============================================================================

class SiteAdapter(ABC):
    """
    Abstract base class for site adapters.

    Subclasses read a parsed page and return a fully built, immutable
    ExtractedMetadata. Missing tags leave fields empty; they never raise.
    """

    # UnknownAdapter is the only adapter that does not look at a page
    needs_page = True

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier used in log lines."""
        pass

    @abstractmethod
    def extract(self, page: Optional[BeautifulSoup]) -> ExtractedMetadata:
        """Build metadata from a parsed page."""
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class BookAdapter(SiteAdapter):
    """
    Goodreads book pages.

    Reads the books:* Open Graph tags, the long description, the author
    biography, and genre links. Genres become Topics only when a topic with
    exactly that name already exists.
    """

    def __init__(
        self,
        find_topic: TopicLookup,
        cover_url_template: Optional[str] = None,
    ):
        """
        Args:
            find_topic: Exact-name topic lookup, usually ItemStore.find_topic_by_name.
            cover_url_template: Cover image URL with an {isbn} placeholder.
        """
        self.find_topic = find_topic
        self.cover_url_template = cover_url_template or COVER_IMAGE_URL_TEMPLATE

    @property
    def name(self) -> str:
        return "goodreads"

    def extract(self, page: Optional[BeautifulSoup]) -> ExtractedMetadata:
        isbn = meta_content(page, "books:isbn")

        structured = {"page_count": self._page_count(page)}
        if isbn:
            structured["isbn"] = isbn

        authors = [self._author_name(a) for a in meta_contents(page, "books:author")]

        return ExtractedMetadata(
            item_type=ItemType.BOOK,
            canonical_url=canonical_link(page),
            image_url=self.cover_url_template.format(isbn=isbn) if isbn else None,
            title=meta_content(page, "og:title"),
            description=last_span_text(page, "#description"),
            topics=self._topics(page),
            creators=[a for a in authors if a],
            creator_bio=last_span_text(page, ".bookAuthorProfile__about"),
            structured=structured,
        )

    @staticmethod
    def _page_count(page: BeautifulSoup) -> int:
        raw = meta_content(page, "books:page_count")
        try:
            return int(raw)
        except (TypeError, ValueError):
            return 0

    @staticmethod
    def _author_name(value: str) -> Optional[str]:
        """
        Goodreads publishes authors as profile URLs such as
        https://www.goodreads.com/author/show/3190.F_Scott_Fitzgerald;
        reduce those to a display name and pass plain names through.
        """
        if not value.startswith(("http://", "https://")):
            return _clean_text(value)
        slug = value.rstrip("/").rsplit("/", 1)[-1]
        slug = re.sub(r"^\d+\.", "", slug)
        return _clean_text(slug.replace("_", " "))

    def _topics(self, page: BeautifulSoup) -> List[Topic]:
        topics: List[Topic] = []
        seen = set()

        for anchor in page.select(f'a[href^="{GENRE_PATH_PREFIX}"]'):
            genre = anchor["href"][len(GENRE_PATH_PREFIX):]
            if not genre or genre in seen:
                continue
            seen.add(genre)

            topic = self.find_topic(genre)
            if topic is not None:
                topics.append(topic)

        return topics


class VideoAdapter(SiteAdapter):
    """YouTube and Vimeo pages, read from standard Open Graph tags."""

    @property
    def name(self) -> str:
        return "video"

    def extract(self, page: Optional[BeautifulSoup]) -> ExtractedMetadata:
        return ExtractedMetadata(
            item_type=ItemType.VIDEO,
            canonical_url=meta_content(page, "og:url"),
            image_url=meta_content(page, "og:image"),
            title=meta_content(page, "og:title"),
            description=meta_content(page, "og:description"),
        )


class WikiAdapter(SiteAdapter):
    """Wikipedia articles: the page title and its canonical link."""

    @property
    def name(self) -> str:
        return "wiki"

    def extract(self, page: Optional[BeautifulSoup]) -> ExtractedMetadata:
        title_tag = page.find("title")
        return ExtractedMetadata(
            item_type=ItemType.WIKI,
            canonical_url=canonical_link(page),
            title=_clean_text(title_tag.get_text()) if title_tag else None,
        )


class UnknownAdapter(SiteAdapter):
    """Unrecognized domains yield an empty record."""

    needs_page = False

    @property
    def name(self) -> str:
        return "unknown"

    def extract(self, page: Optional[BeautifulSoup] = None) -> ExtractedMetadata:
        return ExtractedMetadata.empty()


def build_adapters(find_topic: TopicLookup) -> dict:
    """One adapter instance per SiteKind."""
    return {
        SiteKind.BOOK: BookAdapter(find_topic),
        SiteKind.VIDEO: VideoAdapter(),
        SiteKind.WIKI: WikiAdapter(),
        SiteKind.UNKNOWN: UnknownAdapter(),
    }
