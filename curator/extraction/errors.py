"""
Extraction errors.

Only a total page fetch failure is an error. Tags that are missing from a
page that was fetched fine just leave the matching fields empty.
"""


class ExtractionError(Exception):
    """Base class for metadata extraction failures."""


class FetchError(ExtractionError):
    """
    A page could not be retrieved or read.

    Attributes:
        url: The URL that was being fetched.
        reason: Short human-readable cause.
    """

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")
