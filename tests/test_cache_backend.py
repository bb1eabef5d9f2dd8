import time

from pagecache.core.cache.memory_backend import MemoryCacheBackend
from pagecache.core.cache.noop_backend import NoOpCacheBackend
from pagecache.core.cache.types import MISSING


def test_memory_cache_ttl_expiry() -> None:
    cache = MemoryCacheBackend(max_entries=10)
    cache.set("k", {"items": [1]}, ttl_seconds=1)
    assert cache.get("k") == {"items": [1]}

    time.sleep(1.05)
    assert cache.get("k") is MISSING


def test_memory_cache_without_ttl_keeps_entries() -> None:
    cache = MemoryCacheBackend(max_entries=10)
    cache.set("k", "v", ttl_seconds=None)
    assert cache.get("k") == "v"


def test_memory_cache_lru_eviction() -> None:
    cache = MemoryCacheBackend(max_entries=2)

    cache.set("a", 1, ttl_seconds=60)
    cache.set("b", 2, ttl_seconds=60)

    # Touch 'a' so it becomes most-recently-used.
    assert cache.get("a") == 1

    # Adding 'c' should evict LRU ('b').
    cache.set("c", 3, ttl_seconds=60)

    assert cache.get("b") is MISSING
    assert cache.get("a") == 1
    assert cache.get("c") == 3


def test_none_is_a_cacheable_value() -> None:
    cache = MemoryCacheBackend(max_entries=10)
    cache.set("empty-page", None, ttl_seconds=None)

    assert cache.get("empty-page") is None
    assert "empty-page" in cache
    assert "other" not in cache


def test_non_positive_ttl_drops_the_entry() -> None:
    cache = MemoryCacheBackend(max_entries=10)
    cache.set("k", "v", ttl_seconds=None)
    cache.set("k", "v2", ttl_seconds=0)
    assert cache.get("k") is MISSING


def test_clear_reports_removed_count() -> None:
    cache = MemoryCacheBackend(max_entries=10)
    cache.set("a", 1, ttl_seconds=None)
    cache.set("b", 2, ttl_seconds=None)
    assert cache.clear() == 2
    assert len(cache) == 0


def test_noop_backend_never_stores() -> None:
    cache = NoOpCacheBackend()
    cache.set("k", "v", ttl_seconds=None)
    assert cache.get("k") is MISSING
