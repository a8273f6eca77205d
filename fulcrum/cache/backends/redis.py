"""
Fulcrum Cache — Redis backend for caches shared across processes.

Values are JSON-encoded. Read and write errors are logged and counted,
never raised: a broken cache only costs the filesystem check it was
meant to save.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, List, Optional

from ..core import CacheBackend, CacheEntry, CacheStats
from ..faults import CacheBackendFault

logger = logging.getLogger("fulcrum.cache.redis")


class RedisBackend(CacheBackend):
    """
    Redis-backed cache using redis-py.

    The connection is opened lazily on first use. A pre-built client may
    be passed in instead of a URL.
    """

    __slots__ = (
        "_url",
        "_socket_timeout",
        "_key_prefix",
        "_redis",
        "_stats",
    )

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        socket_timeout: float = 5.0,
        key_prefix: str = "fc:",
        client: Optional[Any] = None,
    ):
        self._url = url
        self._socket_timeout = socket_timeout
        self._key_prefix = key_prefix
        self._redis = client
        self._stats = CacheStats(backend="redis")

    @property
    def name(self) -> str:
        return "redis"

    @property
    def is_distributed(self) -> bool:
        return True

    def connect(self) -> Any:
        """Return the Redis client, connecting on first call."""
        if self._redis is not None:
            return self._redis

        try:
            import redis
        except ImportError:
            raise ImportError(
                "Redis backend requires 'redis' package. "
                "Install with: pip install fulcrum[redis]"
            )

        client = redis.Redis.from_url(self._url, socket_timeout=self._socket_timeout)
        try:
            client.ping()
        except redis.RedisError as e:
            raise CacheBackendFault("redis", "connect", str(e)) from e

        logger.info(f"Redis cache connected: {self._url}")
        self._redis = client
        return client

    def _full_key(self, key: str) -> str:
        return f"{self._key_prefix}{key}"

    def get(self, key: str) -> Optional[CacheEntry]:
        client = self.connect()
        full_key = self._full_key(key)
        try:
            raw = client.get(full_key)
            if raw is None:
                self._stats.misses += 1
                return None

            value = json.loads(raw)
            ttl = client.ttl(full_key)
        except Exception as e:
            logger.warning(f"Redis GET error for key '{key}': {e}")
            self._stats.errors += 1
            return None

        self._stats.hits += 1
        expires_at = None
        if ttl and ttl > 0:
            expires_at = time.monotonic() + ttl
        return CacheEntry(key=key, value=value, expires_at=expires_at)

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        client = self.connect()
        full_key = self._full_key(key)
        try:
            serialized = json.dumps(value)
            if ttl and ttl > 0:
                client.setex(full_key, ttl, serialized)
            else:
                client.set(full_key, serialized)
            self._stats.sets += 1
        except Exception as e:
            logger.warning(f"Redis SET error for key '{key}': {e}")
            self._stats.errors += 1

    def delete(self, key: str) -> bool:
        client = self.connect()
        try:
            if client.delete(self._full_key(key)):
                self._stats.deletes += 1
                return True
            return False
        except Exception as e:
            logger.warning(f"Redis DELETE error for key '{key}': {e}")
            self._stats.errors += 1
            return False

    def clear(self) -> int:
        """Delete every key carrying this backend's prefix."""
        client = self.connect()
        count = 0
        try:
            for full_key in client.scan_iter(match=f"{self._key_prefix}*", count=1000):
                count += client.delete(full_key)
        except Exception as e:
            logger.warning(f"Redis CLEAR error: {e}")
            self._stats.errors += 1
        return count

    def keys(self, pattern: str = "*") -> List[str]:
        client = self.connect()
        prefix_len = len(self._key_prefix)
        try:
            raw_keys = client.scan_iter(match=f"{self._key_prefix}{pattern}", count=1000)
            return [
                (k.decode("utf-8") if isinstance(k, bytes) else k)[prefix_len:]
                for k in raw_keys
            ]
        except Exception as e:
            logger.warning(f"Redis KEYS error: {e}")
            self._stats.errors += 1
            return []

    def stats(self) -> CacheStats:
        return self._stats
