"""
Fulcrum Cache — In-process memory backend.

LRU ordering via OrderedDict with O(1) access/eviction. Expired entries
are dropped lazily on read. Guarded by a ``threading.Lock`` so one
instance can be shared by every request handled in the process.
"""

from __future__ import annotations

import fnmatch
import logging
import threading
import time
from collections import OrderedDict
from typing import Any, List, Optional

from ..core import CacheBackend, CacheEntry, CacheStats

logger = logging.getLogger("fulcrum.cache.memory")


class MemoryBackend(CacheBackend):
    """
    In-memory cache backend with LRU eviction and TTL expiry.
    """

    __slots__ = (
        "_max_size",
        "_store",
        "_lock",
        "_stats",
        "_capacity_warning_threshold",
        "_capacity_warned",
    )

    def __init__(
        self,
        max_size: int = 10000,
        capacity_warning_threshold: float = 0.85,
    ):
        """
        Args:
            max_size: Maximum number of entries
            capacity_warning_threshold: Warn when capacity exceeds this fraction (0.0-1.0)
        """
        self._max_size = max_size
        self._capacity_warning_threshold = capacity_warning_threshold
        self._capacity_warned = False
        self._store: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()
        self._stats = CacheStats(max_size=max_size, backend="memory")

    @property
    def name(self) -> str:
        return "memory"

    def get(self, key: str) -> Optional[CacheEntry]:
        """O(1) lookup with LRU promotion."""
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._stats.misses += 1
                return None

            if entry.is_expired:
                del self._store[key]
                self._stats.misses += 1
                self._stats.evictions += 1
                return None

            entry.touch()
            self._stats.hits += 1
            self._store.move_to_end(key)
            return entry

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """O(1) insert, evicting the least recently used entry at capacity."""
        with self._lock:
            # Last writer wins
            self._store.pop(key, None)

            while len(self._store) >= self._max_size:
                self._store.popitem(last=False)
                self._stats.evictions += 1

            expires_at = None
            if ttl is not None and ttl > 0:
                expires_at = time.monotonic() + ttl

            self._store[key] = CacheEntry(key=key, value=value, expires_at=expires_at)
            self._stats.sets += 1
            self._stats.size = len(self._store)
            self._check_capacity_warning()

    def delete(self, key: str) -> bool:
        with self._lock:
            if self._store.pop(key, None) is None:
                return False
            self._stats.deletes += 1
            self._stats.size = len(self._store)
            return True

    def clear(self) -> int:
        with self._lock:
            count = len(self._store)
            self._store.clear()
            self._stats.size = 0
            return count

    def keys(self, pattern: str = "*") -> List[str]:
        with self._lock:
            candidates = list(self._store.keys())
        if pattern == "*":
            return candidates
        return [k for k in candidates if fnmatch.fnmatch(k, pattern)]

    def stats(self) -> CacheStats:
        self._stats.size = len(self._store)
        return self._stats

    def _check_capacity_warning(self) -> None:
        """Log a warning if cache is near capacity. Caller must hold lock."""
        ratio = len(self._store) / self._max_size if self._max_size > 0 else 0.0
        if ratio >= self._capacity_warning_threshold and not self._capacity_warned:
            logger.warning(
                f"Cache capacity at {ratio:.0%} ({len(self._store)}/{self._max_size})"
            )
            self._capacity_warned = True
        elif ratio < self._capacity_warning_threshold * 0.9:
            self._capacity_warned = False
