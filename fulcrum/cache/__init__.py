"""
Fulcrum Cache — small synchronous key/value cache with TTL expiry.

Used by the dispatch core to memoize controller file existence checks.

- **Backends**: Memory (LRU + TTL), Null, Redis (shared across processes)
- **Facade**: ``Cache.fetch_local`` / ``Cache.store_local``
- **Faults**: Typed cache faults in the ``cache`` domain
"""

from .core import (
    CacheBackend,
    CacheEntry,
    CacheStats,
)

from .backends.memory import MemoryBackend
from .backends.null import NullBackend
from .backends.redis import RedisBackend

from .service import Cache, create_cache, set_default_cache, get_default_cache

from .faults import (
    CacheFault,
    CacheBackendFault,
    CacheConfigFault,
)

from .key_builder import DefaultKeyBuilder

__all__ = [
    # Core
    "CacheBackend",
    "CacheEntry",
    "CacheStats",
    # Backends
    "MemoryBackend",
    "NullBackend",
    "RedisBackend",
    # Facade
    "Cache",
    "create_cache",
    "set_default_cache",
    "get_default_cache",
    # Faults
    "CacheFault",
    "CacheBackendFault",
    "CacheConfigFault",
    # Key builders
    "DefaultKeyBuilder",
]
