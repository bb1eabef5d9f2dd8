"""Paginated stale-while-revalidate cache."""

from pagecache.core.cache import MISSING, Cache, create_cache, get_cache, serialize_key
from pagecache.core.swr import (
    UNSET,
    InfiniteConfig,
    InfiniteSequence,
    RevalidationContext,
    SWRClient,
    get_client,
    should_revalidate_page,
    use_infinite,
)
from pagecache.errors import (
    InvalidPageCountError,
    InvalidPageDataError,
    KeySerializationError,
    MissingFetcherError,
    PageCacheError,
)
from pagecache.logger import setup_logging

__all__ = [
    "MISSING",
    "UNSET",
    "Cache",
    "InfiniteConfig",
    "InfiniteSequence",
    "InvalidPageCountError",
    "InvalidPageDataError",
    "KeySerializationError",
    "MissingFetcherError",
    "PageCacheError",
    "RevalidationContext",
    "SWRClient",
    "create_cache",
    "get_cache",
    "get_client",
    "serialize_key",
    "setup_logging",
    "should_revalidate_page",
    "use_infinite",
]
