from __future__ import annotations

from threading import Lock

from pagecache.config import settings

from .cache import Cache
from .memory_backend import MemoryCacheBackend
from .noop_backend import NoOpCacheBackend
from .singleflight import SingleFlight
from .types import CachePolicy

_provider_lock = Lock()
_caches: dict[str, Cache] = {}


def get_cache(namespace: str | None = None) -> Cache:
    """Return the process-wide cache for ``namespace``, creating it on first use."""
    name = namespace or settings.cache_namespace
    with _provider_lock:
        existing = _caches.get(name)
        if existing is not None:
            return existing

        cache = create_cache(name)
        _caches[name] = cache
        return cache


def create_cache(
    namespace: str,
    *,
    max_entries: int | None = None,
    default_ttl_seconds: int | None = None,
) -> Cache:
    """Build a new, unshared cache; tests use this for isolation."""
    policy = CachePolicy(
        namespace=namespace,
        default_ttl_seconds=(
            settings.cache_default_ttl_seconds
            if default_ttl_seconds is None
            else default_ttl_seconds
        ),
        max_entries=max_entries or settings.cache_max_entries,
    )
    backend = (
        MemoryCacheBackend(max_entries=policy.max_entries, namespace=namespace)
        if settings.cache_enabled
        else NoOpCacheBackend()
    )
    return Cache(backend=backend, policy=policy, _singleflight=SingleFlight())


def reset_caches() -> None:
    """Drop every process-wide cache (test helper)."""
    with _provider_lock:
        _caches.clear()
