"""In-memory TTL cache for upstream responses.

Entries are never evicted. A stale entry stays in place until a later
successful fetch overwrites it, so memory grows with the number of distinct
keys for the lifetime of the process.

There is no locking and no single-flight: two concurrent cold-cache
``get_or_compute`` calls for the same key both run ``compute`` and the last
writer wins.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def epoch_seconds() -> int:
    """Current time in whole seconds since the epoch."""
    return int(time.time())


@dataclass(frozen=True)
class CacheEntry:
    """A cached value and the second it was written."""
    key: str
    value: Any
    inserted_at: int


class CacheStore:
    """Key to (value, insertion time) mapping with TTL staleness checks."""

    def __init__(self):
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> CacheEntry | None:
        """Return the entry stored under key, fresh or not."""
        return self._entries.get(key)

    @staticmethod
    def is_fresh(entry: CacheEntry, ttl_seconds: int, now: int) -> bool:
        """True while the entry's age lies in [0, ttl_seconds)."""
        return now - entry.inserted_at < ttl_seconds

    def put(self, key: str, value: Any, now: int) -> CacheEntry:
        """Store value under key, replacing any existing entry."""
        entry = CacheEntry(key=key, value=value, inserted_at=now)
        self._entries[key] = entry
        return entry

    async def get_or_compute(
        self,
        key: str,
        ttl_seconds: int,
        now: int,
        compute: Callable[[], Awaitable[Any]],
    ) -> Any:
        """
        Return the cached value for key, computing and storing it when missing or stale.

        Args:
            key: Cache key
            ttl_seconds: Maximum age of a usable entry
            now: Current time in whole seconds; also the timestamp of a new entry
            compute: Coroutine factory producing a fresh value

        Returns:
            The cached or freshly computed value

        Raises:
            Whatever ``compute`` raises. Nothing is written in that case.
        """
        entry = self._entries.get(key)
        if entry is not None and self.is_fresh(entry, ttl_seconds, now):
            logger.debug(f"Cache hit for key: {key}")
            return entry.value

        if entry is None:
            logger.debug(f"Cache miss for key: {key}")
        else:
            logger.debug(f"Cache expired for key: {key} (age {now - entry.inserted_at}s)")

        value = await compute()
        self.put(key, value, now)
        return value
