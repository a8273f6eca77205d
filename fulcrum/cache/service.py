"""
Fulcrum Cache — Cache: the API used by framework code.

Wraps a backend with key prefixing, a default TTL and statistics.
The ``*_local`` names mirror the process-scope cache calls the
dispatch core relies on; whether a backend is really process-local or
shared across processes is the backend's business.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from .core import CacheBackend, CacheStats
from .key_builder import DefaultKeyBuilder
from .faults import CacheConfigFault

logger = logging.getLogger("fulcrum.cache")


class Cache:
    """
    High-level cache facade.

    Usage::

        cache = Cache(MemoryBackend(max_size=1000))
        exists = cache.fetch_local("controller|/app/Blog.py", False)
        if exists is False:
            cache.store_local("controller|/app/Blog.py", 1, ttl=300)
    """

    __slots__ = (
        "_backend",
        "_key_builder",
        "_key_prefix",
        "_namespace",
        "_default_ttl",
    )

    def __init__(
        self,
        backend: CacheBackend,
        *,
        key_prefix: str = "fc:",
        namespace: str = "local",
        default_ttl: Optional[int] = None,
    ):
        self._backend = backend
        self._key_builder = DefaultKeyBuilder()
        self._key_prefix = key_prefix
        self._namespace = namespace
        self._default_ttl = default_ttl

    @property
    def backend(self) -> CacheBackend:
        return self._backend

    def _build_key(self, key: str) -> str:
        return self._key_builder.build(self._namespace, key, self._key_prefix)

    def fetch_local(self, key: str, default: Any = None) -> Any:
        """
        Fetch a value, returning ``default`` on miss or expiry.

        Args:
            key: Raw cache key
            default: Value returned when nothing usable is cached
        """
        entry = self._backend.get(self._build_key(key))
        if entry is None:
            logger.debug(f"Cache miss: {key}")
            return default
        return entry.value

    def store_local(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """
        Store a value for ``ttl`` seconds (the cache default when omitted).

        Concurrent writers of the same key overwrite each other; the
        last one wins.
        """
        if ttl is None:
            ttl = self._default_ttl
        self._backend.set(self._build_key(key), value, ttl=ttl)

    def delete(self, key: str) -> bool:
        return self._backend.delete(self._build_key(key))

    def clear(self) -> int:
        return self._backend.clear()

    def stats(self) -> CacheStats:
        return self._backend.stats()

    def __repr__(self) -> str:
        return f"<Cache backend={self._backend.name!r} prefix={self._key_prefix!r}>"


def create_cache(config: Any) -> Cache:
    """
    Build a Cache from configuration.

    Reads ``cache_backend``, ``cache_max_size``, ``cache_key_prefix``,
    ``redis_url`` and ``dispatch_resolve_ttl`` from ``config``.

    Raises:
        CacheConfigFault: Unknown backend name
    """
    from .backends.memory import MemoryBackend
    from .backends.null import NullBackend
    from .backends.redis import RedisBackend

    backend_name = getattr(config, "cache_backend", "memory")
    prefix = getattr(config, "cache_key_prefix", "fc:")

    if backend_name == "memory":
        backend: CacheBackend = MemoryBackend(max_size=getattr(config, "cache_max_size", 10000))
    elif backend_name == "null":
        backend = NullBackend()
    elif backend_name == "redis":
        # Redis owns the prefix so clear() stays scoped to it
        backend = RedisBackend(
            url=getattr(config, "redis_url", "redis://localhost:6379/0"),
            key_prefix=prefix,
        )
        prefix = ""
    else:
        raise CacheConfigFault(f"unknown backend '{backend_name}'")

    return Cache(
        backend,
        key_prefix=prefix,
        default_ttl=getattr(config, "dispatch_resolve_ttl", None),
    )


# Process-wide default used by the static controller utilities.
# Installed by ``Bootstrapper.bootstrap()``.
_default_cache: Optional[Cache] = None


def set_default_cache(cache: Optional[Cache]) -> None:
    """Register the process-wide default Cache (None resets it)."""
    global _default_cache
    _default_cache = cache


def get_default_cache() -> Cache:
    """Return the process-wide default Cache, creating a memory one on first use."""
    global _default_cache
    if _default_cache is None:
        from .backends.memory import MemoryBackend
        _default_cache = Cache(MemoryBackend())
    return _default_cache
