"""
Page fetcher.

Retrieves raw HTML with requests and parses it with BeautifulSoup. Every
failure is raised as FetchError; callers decide what to do with it.
"""

from typing import Optional
import requests
from bs4 import BeautifulSoup

from curator.config import REQUEST_TIMEOUT, USER_AGENT
from curator.extraction.errors import FetchError


class PageFetcher:
    """
    Fetches pages over HTTP.

    A polite User-Agent identifies the reader and REQUEST_TIMEOUT bounds
    every request.
    """

    name = "fetcher"

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[int] = None,
        user_agent: Optional[str] = None,
    ):
        """
        Args:
            session: Optional requests session to reuse connections.
            timeout: Seconds per request. Defaults to config.REQUEST_TIMEOUT.
            user_agent: Defaults to config.USER_AGENT.
        """
        self.session = session
        self.timeout = timeout if timeout is not None else REQUEST_TIMEOUT
        self.user_agent = user_agent if user_agent is not None else USER_AGENT

    def fetch_html(self, url: str) -> str:
        """
        Fetch a page and return its HTML text.

        Raises:
            FetchError: On network error, non-2xx status, or an empty body.
        """
        getter = self.session.get if self.session is not None else requests.get

        try:
            response = getter(
                url,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            print(f"[{self.name}] Error fetching {url}: {e}")
            raise FetchError(url, str(e)) from e

        html = response.text
        if not html or not html.strip():
            print(f"[{self.name}] Empty response from {url}")
            raise FetchError(url, "empty response body")

        return html

    def fetch_page(self, url: str) -> BeautifulSoup:
        """
        Fetch a page and parse it.

        Raises:
            FetchError: If the page cannot be fetched or parsed.
        """
        html = self.fetch_html(url)
        try:
            return BeautifulSoup(html, "html.parser")
        except Exception as e:
            print(f"[{self.name}] Error parsing HTML from {url}: {e}")
            raise FetchError(url, f"unparseable content: {e}") from e
