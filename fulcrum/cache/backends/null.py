"""
Fulcrum Cache — Null (no-op) backend.

Every lookup misses, so callers always fall through to the real check.
"""

from __future__ import annotations

from typing import Any, List, Optional

from ..core import CacheBackend, CacheEntry, CacheStats


class NullBackend(CacheBackend):
    """No-op cache backend — all operations are pass-through."""

    __slots__ = ("_stats",)

    def __init__(self):
        self._stats = CacheStats(backend="null")

    @property
    def name(self) -> str:
        return "null"

    def get(self, key: str) -> Optional[CacheEntry]:
        self._stats.misses += 1
        return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        self._stats.sets += 1

    def delete(self, key: str) -> bool:
        return False

    def clear(self) -> int:
        return 0

    def keys(self, pattern: str = "*") -> List[str]:
        return []

    def stats(self) -> CacheStats:
        return self._stats
