"""
Test suite for the Fulcrum cache subsystem.

Covers:
- MemoryBackend: TTL expiry, LRU eviction, last-writer-wins, stats
- NullBackend: no-op semantics
- RedisBackend: JSON encoding, setex, error counting (fake client)
- Cache facade: fetch_local/store_local, key prefixing, default TTL
- create_cache / default cache
- DefaultKeyBuilder, CacheEntry, CacheStats
"""

import json
import threading
import time
from unittest.mock import MagicMock

import pytest

# ── Core types ───────────────────────────────────────────────────────────────
from fulcrum.cache.core import CacheEntry, CacheStats

# ── Backends ─────────────────────────────────────────────────────────────────
from fulcrum.cache.backends.memory import MemoryBackend
from fulcrum.cache.backends.null import NullBackend
from fulcrum.cache.backends.redis import RedisBackend

# ── Service ──────────────────────────────────────────────────────────────────
from fulcrum.cache.service import Cache, create_cache, get_default_cache, set_default_cache

# ── Misc ─────────────────────────────────────────────────────────────────────
from fulcrum.cache.key_builder import DefaultKeyBuilder
from fulcrum.cache.faults import CacheBackendFault, CacheConfigFault
from fulcrum.config import FulcrumConfig
from fulcrum.faults import FaultDomain


# ============================================================================
# CacheEntry / CacheStats
# ============================================================================


class TestCacheEntry:

    def test_no_expiry(self):
        entry = CacheEntry(key="k", value=1)
        assert not entry.is_expired
        assert entry.ttl_remaining is None

    def test_expired(self):
        entry = CacheEntry(key="k", value=1, expires_at=time.monotonic() - 1)
        assert entry.is_expired
        assert entry.ttl_remaining == 0.0

    def test_touch(self):
        entry = CacheEntry(key="k", value=1)
        entry.touch()
        entry.touch()
        assert entry.access_count == 2


class TestCacheStats:

    def test_hit_rate(self):
        assert CacheStats().hit_rate == 0.0
        assert CacheStats(hits=3, misses=1).hit_rate == 75.0
        assert CacheStats(hits=3, misses=1).to_dict()["hit_rate"] == 75.0

    def test_to_dict(self):
        data = CacheStats(hits=1, backend="memory").to_dict()
        assert data["hits"] == 1
        assert data["backend"] == "memory"


# ============================================================================
# MemoryBackend
# ============================================================================


class TestMemoryBackend:

    @pytest.fixture
    def backend(self):
        return MemoryBackend(max_size=3)

    def test_set_get(self, backend):
        backend.set("a", 1)
        entry = backend.get("a")

        assert entry.value == 1
        assert entry.access_count == 1

    def test_miss(self, backend):
        assert backend.get("nope") is None
        assert backend.stats().misses == 1

    def test_ttl_expiry(self, backend):
        backend.set("a", 1, ttl=10)
        assert backend._store["a"].ttl_remaining > 9

        backend._store["a"].expires_at = time.monotonic() - 1

        assert backend.get("a") is None
        stats = backend.stats()
        assert stats.evictions == 1
        assert stats.size == 0

    @pytest.mark.parametrize("ttl", [None, 0])
    def test_no_ttl_never_expires(self, backend, ttl):
        backend.set("a", 1, ttl=ttl)
        assert backend._store["a"].expires_at is None

    def test_lru_eviction(self, backend):
        backend.set("a", 1)
        backend.set("b", 2)
        backend.set("c", 3)
        backend.get("a")

        backend.set("d", 4)

        assert backend.get("b") is None
        assert backend.get("a").value == 1
        assert backend.stats().evictions == 1

    def test_last_writer_wins(self, backend):
        backend.set("a", 1)
        backend.set("a", 0)

        assert backend.get("a").value == 0
        assert backend.stats().size == 1

    def test_delete_and_clear(self, backend):
        backend.set("a", 1)
        backend.set("b", 2)

        assert backend.delete("a") is True
        assert backend.delete("a") is False
        assert backend.clear() == 1
        assert backend.keys() == []

    def test_keys_pattern(self, backend):
        backend.set("fc:local:x", 1)
        backend.set("fc:other:y", 2)

        assert backend.keys("fc:local:*") == ["fc:local:x"]

    def test_exists(self, backend):
        backend.set("a", 1)
        assert backend.exists("a")
        assert not backend.exists("b")

    def test_capacity_warning(self, caplog):
        backend = MemoryBackend(max_size=4, capacity_warning_threshold=0.5)

        with caplog.at_level("WARNING", logger="fulcrum.cache.memory"):
            for key in "abc":
                backend.set(key, 1)

        warnings = [r for r in caplog.records if "capacity" in r.getMessage()]
        assert len(warnings) == 1

    def test_concurrent_writers(self):
        backend = MemoryBackend(max_size=1000)

        def writer(value):
            for i in range(200):
                backend.set(f"k{i % 10}", value)

        threads = [threading.Thread(target=writer, args=(n,)) for n in (0, 1)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(backend.keys()) == 10
        assert all(backend.get(k).value in (0, 1) for k in backend.keys())

    def test_not_distributed(self, backend):
        assert backend.name == "memory"
        assert backend.is_distributed is False


# ============================================================================
# NullBackend
# ============================================================================


class TestNullBackend:

    def test_always_misses(self):
        backend = NullBackend()
        backend.set("a", 1)

        assert backend.get("a") is None
        assert backend.exists("a") is False
        assert backend.delete("a") is False
        assert backend.clear() == 0
        assert backend.keys() == []

        stats = backend.stats()
        assert stats.sets == 1
        assert stats.misses == 2


# ============================================================================
# RedisBackend
# ============================================================================


class TestRedisBackend:

    @pytest.fixture
    def client(self):
        client = MagicMock()
        client.get.return_value = None
        client.ttl.return_value = -1
        return client

    @pytest.fixture
    def backend(self, client):
        return RedisBackend(key_prefix="fc:", client=client)

    def test_set_with_ttl_uses_setex(self, backend, client):
        backend.set("a", 1, ttl=300)

        client.setex.assert_called_once_with("fc:a", 300, "1")
        assert backend.stats().sets == 1

    def test_set_without_ttl(self, backend, client):
        backend.set("a", {"x": [1, 2]})

        client.set.assert_called_once_with("fc:a", json.dumps({"x": [1, 2]}))

    def test_get_decodes_json(self, backend, client):
        client.get.return_value = b"1"
        client.ttl.return_value = 120

        entry = backend.get("a")

        client.get.assert_called_once_with("fc:a")
        assert entry.value == 1
        assert 0 < entry.ttl_remaining <= 120

    def test_miss(self, backend):
        assert backend.get("a") is None
        assert backend.stats().misses == 1

    def test_errors_are_counted_not_raised(self, backend, client, caplog):
        client.get.side_effect = ConnectionError("gone")
        client.set.side_effect = ConnectionError("gone")

        with caplog.at_level("WARNING", logger="fulcrum.cache.redis"):
            assert backend.get("a") is None
            backend.set("a", 1)

        assert backend.stats().errors == 2
        assert any("Redis GET error" in r.getMessage() for r in caplog.records)

    def test_clear_scoped_to_prefix(self, backend, client):
        client.scan_iter.return_value = iter([b"fc:a", b"fc:b"])
        client.delete.return_value = 1

        assert backend.clear() == 2
        client.scan_iter.assert_called_once_with(match="fc:*", count=1000)

    def test_keys_strip_prefix(self, backend, client):
        client.scan_iter.return_value = iter([b"fc:a", "fc:b"])

        assert backend.keys() == ["a", "b"]

    def test_connect_failure(self, monkeypatch):
        redis = pytest.importorskip("redis")
        fake = MagicMock()
        fake.ping.side_effect = redis.ConnectionError("refused")
        monkeypatch.setattr(redis.Redis, "from_url", MagicMock(return_value=fake))

        backend = RedisBackend(url="redis://nowhere:6379/0")

        with pytest.raises(CacheBackendFault) as exc_info:
            backend.get("a")

        assert exc_info.value.code == "CACHE_BACKEND_ERROR"
        assert exc_info.value.domain == FaultDomain.CACHE

    def test_distributed(self, backend):
        assert backend.is_distributed is True
        assert backend.name == "redis"


# ============================================================================
# Cache facade
# ============================================================================


class TestCache:

    def test_fetch_default_on_miss(self, memory_cache):
        assert memory_cache.fetch_local("missing", False) is False
        assert memory_cache.fetch_local("missing") is None

    def test_store_and_fetch(self, memory_cache):
        memory_cache.store_local("flag", 0, ttl=60)

        assert memory_cache.fetch_local("flag", False) == 0

    def test_keys_are_prefixed(self, mock_backend):
        cache = Cache(mock_backend, key_prefix="app:", namespace="local")
        cache.store_local("k", 1)

        assert list(mock_backend.store) == ["app:local:k"]

    def test_default_ttl(self, mock_backend):
        cache = Cache(mock_backend, default_ttl=30)
        cache.store_local("a", 1)
        cache.store_local("b", 1, ttl=5)

        assert mock_backend.ttls == {"fc:local:a": 30, "fc:local:b": 5}

    def test_delete_clear_stats(self, memory_cache):
        memory_cache.store_local("a", 1)

        assert memory_cache.delete("a") is True
        memory_cache.store_local("b", 1)
        assert memory_cache.clear() == 1
        assert memory_cache.stats().backend == "memory"


class TestCreateCache:

    def test_memory(self):
        cache = create_cache(FulcrumConfig(cache_max_size=5, dispatch_resolve_ttl=60))

        assert isinstance(cache.backend, MemoryBackend)
        assert cache.stats().max_size == 5

    def test_null(self):
        assert isinstance(create_cache(FulcrumConfig(cache_backend="null")).backend, NullBackend)

    def test_redis_is_lazy(self):
        cache = create_cache(FulcrumConfig(cache_backend="redis", cache_key_prefix="x:"))

        assert isinstance(cache.backend, RedisBackend)
        assert cache._key_prefix == ""

    def test_unknown_backend(self):
        config = MagicMock(cache_backend="memcached")

        with pytest.raises(CacheConfigFault):
            create_cache(config)

    def test_default_cache(self):
        default = get_default_cache()
        assert get_default_cache() is default

        replacement = Cache(NullBackend())
        set_default_cache(replacement)
        assert get_default_cache() is replacement


class TestKeyBuilder:

    def test_build(self):
        assert DefaultKeyBuilder().build("local", "k", "fc:") == "fc:local:k"

    def test_versioned(self):
        assert DefaultKeyBuilder(version=2).build("local", "k", "fc:") == "fc:v2:local:k"
