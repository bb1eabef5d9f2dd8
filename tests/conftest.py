"""Test fixtures and configuration."""

import asyncio
from typing import Any

import pytest

from pagecache.core.cache import stats as cache_stats
from pagecache.core.cache.cache import Cache
from pagecache.core.cache.provider import create_cache, reset_caches
from pagecache.core.swr.client import SWRClient, reset_client
from pagecache.logger import setup_logging

setup_logging(debug=True)


class PageServer:
    """Async fetcher standing in for a paginated HTTP endpoint.

    Records every call and returns ``{"key": ..., "version": n}`` where the
    version can be bumped per key to simulate server-side changes.
    """

    def __init__(self) -> None:
        self.calls: list[Any] = []
        self.versions: dict[Any, int] = {}
        self.failures: dict[Any, Exception] = {}
        self.delay = 0.0

    async def __call__(self, *args: Any) -> dict[str, Any]:
        key = args[0] if len(args) == 1 else args
        self.calls.append(key)
        await asyncio.sleep(self.delay)
        if key in self.failures:
            raise self.failures[key]
        return {"key": key, "version": self.versions.get(key, 0)}

    def reset(self) -> None:
        self.calls.clear()


@pytest.fixture(autouse=True)
def _isolate_process_state():
    cache_stats.reset()
    reset_caches()
    reset_client()
    yield
    reset_caches()
    reset_client()


@pytest.fixture
def cache() -> Cache:
    return create_cache("test")


@pytest.fixture
def server() -> PageServer:
    return PageServer()


@pytest.fixture
def client(cache: Cache, server: PageServer) -> SWRClient:
    return SWRClient(cache, fetcher=server)
