from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

MISSING: Any = object()


@dataclass
class CacheEntry:
    value: Any
    expires_at: float


class ReportCache:
    """
    In-memory TTL cache with hit/miss statistics.

    Used to memoise report construction per country code. Cached values may
    be ``None`` (a country without a report), so lookups signal a miss with
    the ``MISSING`` sentinel rather than ``None``.

    Thread-safe; a value is computed outside the lock, so two concurrent
    misses on one key may both compute it and the last write wins.
    """

    DEFAULT_TTL = 300  # 5 minutes
    MAX_CACHE_ENTRIES = 1000
    CLEANUP_INTERVAL = 60

    def __init__(
        self,
        ttl: int = DEFAULT_TTL,
        max_entries: int = MAX_CACHE_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._cache: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0
        self._last_cleanup = clock()

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        expiry = self._clock() + (ttl or self.ttl)
        with self._lock:
            self._cache[key] = CacheEntry(value=value, expires_at=expiry)
            if len(self._cache) > self.max_entries:
                self._evict_oldest()

    def get(self, key: str) -> Any:
        """Return the cached value, or ``MISSING`` when absent or expired."""
        with self._lock:
            self._maybe_cleanup()

            entry = self._cache.get(key)
            if entry is None:
                self.misses += 1
                return MISSING
            if entry.expires_at <= self._clock():
                self._cache.pop(key, None)
                self.misses += 1
                return MISSING
            self.hits += 1
            return entry.value

    def get_or_create(self, key: str, factory: Callable[[], T]) -> T:
        value = self.get(key)
        if value is MISSING:
            value = factory()
            self.set(key, value)
            logger.debug("Cached report for %s", key)
        return value

    def _maybe_cleanup(self) -> None:
        """Remove expired entries if the interval elapsed (must hold lock)."""
        now = self._clock()
        if now - self._last_cleanup < self.CLEANUP_INTERVAL:
            return

        expired_keys = [k for k, v in self._cache.items() if v.expires_at <= now]
        for key in expired_keys:
            self._cache.pop(key, None)
        self._last_cleanup = now

    def _evict_oldest(self) -> None:
        """Drop the oldest 10% of entries by expiry (must hold lock)."""
        to_remove = max(1, len(self._cache) // 10)
        sorted_by_expiry = sorted(self._cache.items(), key=lambda x: x[1].expires_at)
        for key, _ in sorted_by_expiry[:to_remove]:
            self._cache.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
            self.hits = 0
            self.misses = 0
            self._last_cleanup = self._clock()

    def get_stats(self) -> Dict[str, int | float]:
        with self._lock:
            total = self.hits + self.misses
            return {
                "entries": len(self._cache),
                "hits": self.hits,
                "misses": self.misses,
                "hit_rate": round(self.hits / total, 3) if total else 0.0,
                "ttl": self.ttl,
            }
