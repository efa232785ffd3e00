"""In-memory TTL cache for responses from rate-limited external APIs."""

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="cache/ttl_cache")

DEFAULT_TTL_SECONDS = 30 * 60


@dataclass
class CacheEntry:
    """Cached payload with the clock reading taken when it was stored."""
    key: str
    value: Any
    fetched_at: float

    def age(self, now: float) -> float:
        """Seconds since the entry was stored."""
        return now - self.fetched_at

    def is_fresh(self, now: float, ttl: float) -> bool:
        """Return True while the entry is younger than ``ttl`` seconds."""
        return self.age(now) < ttl


class TTLCache:
    """
    Key/value store that only serves entries younger than the TTL.

    Stale entries are left in place and simply overwritten by the next ``put``;
    there is no size bound because keys are one per region. The cache never
    fetches anything itself: a ``None`` from ``get`` tells the caller to refetch
    and ``put`` the result.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS,
                 clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize an empty cache with a TTL (seconds) and a clock."""
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        logger.debug("Initializing TTLCache", extra={"ttl_seconds": ttl_seconds})
        self.ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value if fresh, else None."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if not entry.is_fresh(self._clock(), self.ttl):
                return None
            return entry.value

    def put(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key`` stamped with the current time."""
        with self._lock:
            self._entries[key] = CacheEntry(key=key, value=value, fetched_at=self._clock())

    def entry(self, key: str) -> Optional[CacheEntry]:
        """Return the raw entry for ``key`` regardless of freshness."""
        with self._lock:
            return self._entries.get(key)

    def invalidate(self, key: str) -> None:
        """Drop a single entry if present."""
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        """Drop all entries."""
        with self._lock:
            self._entries.clear()

    def stats(self) -> dict:
        """Return entry counts and the TTL in minutes."""
        with self._lock:
            now = self._clock()
            fresh = sum(1 for e in self._entries.values() if e.is_fresh(now, self.ttl))
            return {
                "entries": len(self._entries),
                "fresh_entries": fresh,
                "ttl_minutes": self.ttl / 60,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
