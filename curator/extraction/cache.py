"""
Result cache for extracted metadata.

Entries are keyed by the exact URL string and live for METADATA_CACHE_TTL
seconds (12 hours by default). Values are immutable and replaced wholesale
on expiry. A failed computation stores nothing.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional
import threading
import time

from cachetools import TTLCache

from curator.config import DEBUG, METADATA_CACHE_SIZE, METADATA_CACHE_TTL


class MetadataCache(ABC):
    """Get-or-compute cache interface."""

    name = "cache"

    @abstractmethod
    def get_or_compute(self, key: str, compute: Callable[[], Any]) -> Any:
        """
        Return the cached value for key, computing and storing it on a miss.

        Exceptions from compute propagate and leave the cache unchanged.
        """
        pass

    def clear(self) -> None:
        """Drop every entry."""


class TTLMetadataCache(MetadataCache):
    """
    In-process cache backed by cachetools.TTLCache.

    Shared between request threads. Concurrent misses on the same key may
    each compute; the last result wins.
    """

    def __init__(
        self,
        ttl: Optional[float] = None,
        maxsize: Optional[int] = None,
        timer: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            ttl: Entry lifetime in seconds. Defaults to config.METADATA_CACHE_TTL.
            maxsize: Maximum entries. Defaults to config.METADATA_CACHE_SIZE.
            timer: Clock used for expiry (injectable for tests).
        """
        self.ttl = ttl if ttl is not None else METADATA_CACHE_TTL
        self.maxsize = maxsize if maxsize is not None else METADATA_CACHE_SIZE
        self._entries = TTLCache(maxsize=self.maxsize, ttl=self.ttl, timer=timer)
        self._lock = threading.Lock()

    def get_or_compute(self, key: str, compute: Callable[[], Any]) -> Any:
        with self._lock:
            try:
                value = self._entries[key]
            except KeyError:
                pass
            else:
                if DEBUG:
                    print(f"[{self.name}] hit {key}")
                return value

        if DEBUG:
            print(f"[{self.name}] miss {key}")

        # Computed outside the lock so a slow fetch does not block other keys
        value = compute()

        with self._lock:
            self._entries[key] = value
        return value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class NullCache(MetadataCache):
    """Never stores anything; every call computes. For single-shot tools."""

    def get_or_compute(self, key: str, compute: Callable[[], Any]) -> Any:
        return compute()
