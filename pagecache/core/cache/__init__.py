from .cache import Cache
from .keys import canonical_json, hash_bytes, hash_text, serialize_key, short_hash
from .memory_backend import MemoryCacheBackend
from .noop_backend import NoOpCacheBackend
from .provider import create_cache, get_cache, reset_caches
from .singleflight import SingleFlight
from .types import MISSING, CacheBackend, CacheNamespace, CachePolicy

__all__ = [
    "MISSING",
    "Cache",
    "CacheBackend",
    "CacheNamespace",
    "CachePolicy",
    "MemoryCacheBackend",
    "NoOpCacheBackend",
    "SingleFlight",
    "canonical_json",
    "create_cache",
    "get_cache",
    "hash_bytes",
    "hash_text",
    "reset_caches",
    "serialize_key",
    "short_hash",
]
