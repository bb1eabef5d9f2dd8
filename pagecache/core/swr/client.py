"""Keyed stale-while-revalidate values.

``SWRClient`` owns the composite values (one per key) that paginated
sequences are built on:

- ``revalidate`` runs a fetcher for a key, with concurrent calls for the same
  key sharing one in-flight run;
- ``load`` serves the cached value immediately and refreshes it in the
  background, or fetches when nothing is cached;
- ``mutate`` replaces the value locally and optionally revalidates it;
- ``subscribe`` registers listeners notified whenever a key's value, error
  or validating state changes.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import Any, TypeAlias

from pagecache.core.cache.cache import Cache
from pagecache.core.cache.keys import short_hash
from pagecache.core.cache.provider import get_cache
from pagecache.core.cache.types import MISSING
from pagecache.logger import get_logger

from .types import UNSET, Fetcher, Listener

logger = get_logger(__name__)

Revalidator: TypeAlias = Callable[[], Awaitable[Any]]


class SWRClient:
    def __init__(self, cache: Cache, *, fetcher: Fetcher | None = None) -> None:
        self.cache = cache
        self.fetcher = fetcher
        self._errors: dict[str, BaseException] = {}
        self._validating: set[str] = set()
        self._listeners: dict[str, list[Listener]] = {}
        self._background: set[asyncio.Task[Any]] = set()

    def get(self, key: str) -> Any:
        """Current value for ``key``, or ``None`` if nothing is cached."""
        value = self.cache.get(key)
        return None if value is MISSING else value

    def error(self, key: str) -> BaseException | None:
        return self._errors.get(key)

    def is_validating(self, key: str) -> bool:
        return key in self._validating

    def subscribe(self, key: str, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for ``key``; returns an unsubscribe callable."""
        listeners = self._listeners.setdefault(key, [])
        listeners.append(listener)

        def unsubscribe() -> None:
            current = self._listeners.get(key)
            if current and listener in current:
                current.remove(listener)
                if not current:
                    del self._listeners[key]

        return unsubscribe

    async def revalidate(self, key: str, revalidator: Revalidator) -> Any:
        """Refresh ``key`` by running ``revalidator``.

        Concurrent calls for the same key join the run already in flight.
        A failure is recorded as the key's error, the previous value is kept,
        and the exception is re-raised to every caller.
        """

        async def _run() -> Any:
            self._validating.add(key)
            self._notify(key)
            try:
                value = await revalidator()
            except Exception as exc:
                self._errors[key] = exc
                logger.warning(
                    "revalidate_failed",
                    key_hash=short_hash(key),
                    error_type=type(exc).__name__,
                )
                raise
            else:
                self._errors.pop(key, None)
                self.cache.set(key, value)
                return value
            finally:
                self._validating.discard(key)
                self._notify(key)

        return await self.cache.coalesce(key, _run)

    async def load(self, key: str, revalidator: Revalidator) -> Any:
        """Serve the cached value and refresh it in the background.

        With nothing cached, wait for the fetch instead.
        """
        cached = self.cache.get(key)
        if cached is MISSING:
            return await self.revalidate(key, revalidator)

        task = asyncio.ensure_future(self._revalidate_in_background(key, revalidator))
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return cached

    async def mutate(
        self,
        key: str,
        data: Any = UNSET,
        *,
        should_revalidate: bool = True,
        revalidator: Revalidator | None = None,
    ) -> Any:
        """Replace the value for ``key`` and optionally revalidate it.

        ``data`` may be a value or an updater called with the current value
        (sync or async); an updater returning ``None`` leaves the value
        untouched. Without ``data`` only the revalidation happens.

        The revalidation is never merged into a run already in flight: that
        run read its inputs before this mutation, so it is awaited and a
        fresh run follows.
        """
        if data is not UNSET and callable(data):
            data = data(self.get(key))
            if inspect.isawaitable(data):
                data = await data
            if data is None:
                data = UNSET

        if data is not UNSET:
            self.cache.set(key, data)
            self._errors.pop(key, None)
            self._notify(key)

        if should_revalidate and revalidator is not None:
            await self.cache.wait_in_flight(key)
            return await self.revalidate(key, revalidator)
        return self.get(key)

    async def wait_idle(self) -> None:
        """Wait for background revalidations started by ``load``."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    async def _revalidate_in_background(self, key: str, revalidator: Revalidator) -> None:
        try:
            await self.revalidate(key, revalidator)
        except Exception:
            # Already recorded as the key's error and logged by revalidate().
            return

    def _notify(self, key: str) -> None:
        for listener in list(self._listeners.get(key, ())):
            listener(key)


_client: SWRClient | None = None


def get_client() -> SWRClient:
    """Get or create the process-wide client on the default cache."""
    global _client
    if _client is None:
        _client = SWRClient(get_cache())
    return _client


def reset_client() -> None:
    """Forget the process-wide client (test helper)."""
    global _client
    _client = None
