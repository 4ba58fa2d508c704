"""Bounded in-memory TTL cache for fetched video data. No Redis needed.

Entries keep insertion order. When the cache is full the oldest insert is
evicted (FIFO), no matter how recently it was read. Expired entries are
dropped lazily on lookup; there is no background sweep.

Note: Each process instance (uvicorn worker, warm function host) has its
own cache. Nothing survives a cold start.
"""

import logging
import math
import time
from typing import Any, Callable, NamedTuple

logger = logging.getLogger(__name__)


def normalize(raw_key: Any) -> str:
    """Canonical cache key: the string form with surrounding whitespace trimmed."""
    return str(raw_key).strip()


class CacheHit(NamedTuple):
    value: Any
    ttl: int  # remaining whole seconds


class TTLCache:
    def __init__(
        self,
        max_entries: int = 50,
        default_ttl_seconds: int = 300,
        clock: Callable[[], float] = time.time,
    ):
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        self.max_entries = max_entries
        self.default_ttl_seconds = default_ttl_seconds
        self._clock = clock
        self._store: dict[str, tuple[float, Any]] = {}

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def lookup(self, key: str) -> CacheHit | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        now = self._clock()
        if now >= expires_at:
            del self._store[key]
            return None
        return CacheHit(value, max(0, math.floor(expires_at - now + 0.5)))

    def store(self, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        if ttl_seconds is None:
            ttl_seconds = self.default_ttl_seconds
        # Re-inserting counts as a fresh insertion for eviction order
        self._store.pop(key, None)
        while len(self._store) >= self.max_entries:
            oldest = next(iter(self._store))
            del self._store[oldest]
            logger.debug("Evicted oldest cache entry %s", oldest)
        self._store[key] = (self._clock() + ttl_seconds, value)
