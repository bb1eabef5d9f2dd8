"""Paginated, incrementally growable sequences on top of ``SWRClient``.

A sequence is described by a key loader ``get_key(index, previous_page)``.
Page 0's serialized key is the sequence identity; it names three slots:

- ``many@<key0>``: the assembled list of pages (the composite value);
- ``size@<key0>``: how many pages are requested, kept across instances;
- ``context@<key0>``: the pending revalidation request left by ``mutate``.

Each page is also cached under its own key, so a run only refetches the
pages ``should_revalidate_page`` selects and reuses the rest.
"""

from __future__ import annotations

import inspect
import time
from collections.abc import Callable
from typing import Any, TypeAlias

from pagecache.core.cache import stats as cache_stats
from pagecache.core.cache.keys import serialize_key, short_hash
from pagecache.core.cache.types import MISSING
from pagecache.errors import InvalidPageCountError, InvalidPageDataError, MissingFetcherError
from pagecache.logger import get_logger, log_sequence_run

from .client import SWRClient, get_client
from .policy import should_revalidate_page
from .types import UNSET, Fetcher, InfiniteConfig, KeyLoader, RevalidationContext

logger = get_logger(__name__)

SizeListener: TypeAlias = Callable[["InfiniteSequence"], None]


class InfiniteSequence:
    def __init__(
        self,
        get_key: KeyLoader,
        fetcher: Fetcher | None = None,
        config: InfiniteConfig | None = None,
        *,
        client: SWRClient,
    ) -> None:
        self._get_key = get_key
        self._client = client
        self._cache = client.cache
        self._fetcher = fetcher if fetcher is not None else client.fetcher
        self.config = config or InfiniteConfig()

        # Pending revalidation requests, by context slot. Written by mutate(),
        # read and removed by the next fetch run for that slot.
        self._pending: dict[str, RevalidationContext] = {}
        self._listeners: list[SizeListener] = []
        self._unsubscribe: Callable[[], None] | None = None

        self._first_page_key = self._derive_first_page_key()
        self._page_count = self._restore_page_count(fallback=self.config.initial_size)
        self._watch_composite()

    # -- identity ---------------------------------------------------------

    @property
    def first_page_key(self) -> str | None:
        return self._first_page_key

    @property
    def key(self) -> str | None:
        """Composite key of the whole sequence, ``None`` while not ready."""
        return self._slot("many")

    @property
    def context_key(self) -> str | None:
        return self._slot("context")

    @property
    def size_key(self) -> str | None:
        return self._slot("size")

    def refresh_identity(self) -> bool:
        """Re-derive page 0's key; returns True when the identity changed.

        On a change the page count goes back to ``initial_size``, unless
        ``persist_size`` is set, in which case a count persisted for the new
        identity is restored (the current count is kept when there is none).
        Entries cached under the old identity are left in place.
        """
        first_page_key = self._derive_first_page_key()
        if first_page_key == self._first_page_key:
            return False

        self._first_page_key = first_page_key
        if self.config.persist_size:
            self._page_count = self._restore_page_count(fallback=self._page_count)
        else:
            self._page_count = self.config.initial_size
        self._watch_composite()
        logger.debug(
            "sequence_identity_changed",
            sequence=self._label(),
            size=self._page_count,
        )
        return True

    # -- state ------------------------------------------------------------

    @property
    def size(self) -> int:
        return self._page_count

    @property
    def data(self) -> list[Any] | None:
        key = self.key
        return None if key is None else self._client.get(key)

    @property
    def error(self) -> BaseException | None:
        key = self.key
        return None if key is None else self._client.error(key)

    @property
    def is_validating(self) -> bool:
        key = self.key
        return key is not None and self._client.is_validating(key)

    @property
    def pending_revalidation(self) -> RevalidationContext | None:
        context_key = self.context_key
        return None if context_key is None else self._pending.get(context_key)

    def subscribe(self, listener: SizeListener) -> Callable[[], None]:
        """Call ``listener(self)`` whenever size, data, error or loading state changes."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._listeners.clear()

    # -- operations -------------------------------------------------------

    async def load(self) -> list[Any] | None:
        """Return cached pages right away and refresh them in the background."""
        self.refresh_identity()
        key = self.key
        if key is None:
            return None
        return await self._client.load(key, self._load_pages)

    async def revalidate(self) -> list[Any] | None:
        """Run a fetch pass now; without a pending mutation only page 0 is refetched."""
        self.refresh_identity()
        key = self.key
        if key is None:
            return None
        return await self._client.revalidate(key, self._load_pages)

    async def mutate(self, data: Any = UNSET, should_revalidate: bool = True) -> list[Any] | None:
        """Replace the sequence locally and schedule a targeted refetch.

        - with ``data`` (a list or an updater of the current list), the
          next run refetches only the pages whose cache entry differs from
          the new data at the same index, plus uncached pages;
        - without ``data``, the next run refetches every page;
        - with ``should_revalidate=False`` the new data simply replaces the
          sequence and nothing is fetched.

        ``None`` (given, or returned by an updater) is not written: the
        sequence keeps its current value, cached or not.
        """
        self.refresh_identity()
        key = self.key
        if key is None:
            return None

        replace = data is not UNSET
        if replace and callable(data):
            data = data(self.data)
            if inspect.isawaitable(data):
                data = await data
        if replace and data is not None and not isinstance(data, (list, tuple)):
            raise InvalidPageDataError(
                f"sequence data must be a list of pages, got {type(data).__name__}"
            )

        context_key = self.context_key
        if should_revalidate and context_key is not None:
            context = (
                RevalidationContext.diff_against(None if data is None else list(data))
                if replace
                else RevalidationContext.forced()
            )
            # A later request before the next run replaces this one.
            self._pending[context_key] = context

        return await self._client.mutate(
            key,
            list(data) if replace and data is not None else UNSET,
            should_revalidate=should_revalidate,
            revalidator=self._load_pages,
        )

    async def set_size(self, size: int | Callable[[int], int]) -> list[Any] | None:
        """Change how many pages are requested and fetch the newly exposed ones.

        Pages already cached are reused; subscribers see the new size before
        any data resolves.
        """
        self.refresh_identity()
        next_size = size(self._page_count) if callable(size) else size
        if isinstance(next_size, bool) or not isinstance(next_size, int) or next_size < 0:
            raise InvalidPageCountError(f"page count must be a non-negative int, got {next_size!r}")

        self._page_count = next_size
        size_key = self.size_key
        if size_key is not None:
            self._cache.set(size_key, next_size)
        self._notify()

        if self.key is None:
            return None
        return await self.mutate(lambda current: current)

    # -- fetch run --------------------------------------------------------

    async def _load_pages(self) -> list[Any]:
        context_key = self.context_key
        context = self._pending.get(context_key) if context_key is not None else None
        requested = self._page_count
        before = cache_stats.snapshot()
        started = time.perf_counter()
        fetched = 0
        pages: list[Any] = []
        error: BaseException | None = None

        try:
            previous = None
            for index in range(requested):
                page_key, page_args = serialize_key(self._get_key(index, previous))
                if page_key is None:
                    break

                page = self._cache.get(page_key)
                if should_revalidate_page(
                    index,
                    page,
                    context,
                    revalidate_all=self.config.revalidate_all,
                    compare=self.config.compare,
                ):
                    page = await self._fetch_page(page_key, page_args)
                    self._cache.set(page_key, page)
                    fetched += 1

                pages.append(page)
                previous = page
            return pages
        except Exception as exc:
            error = exc
            raise
        finally:
            # Only drop the request this run consumed; a newer one waits for the next run.
            if context is not None and self._pending.get(context_key) is context:
                del self._pending[context_key]
            log_sequence_run(
                sequence=short_hash(context_key or ""),
                requested_pages=requested,
                loaded_pages=len(pages),
                fetched_pages=fetched,
                duration_ms=(time.perf_counter() - started) * 1000.0,
                error=error,
                cache_delta=cache_stats.diff(before, cache_stats.snapshot()),
            )

    async def _fetch_page(self, page_key: str, page_args: tuple[Any, ...] | None) -> Any:
        if self._fetcher is None:
            raise MissingFetcherError("no fetcher configured for this sequence")
        if page_args is not None:
            result = self._fetcher(*page_args)
        else:
            result = self._fetcher(page_key)
        if inspect.isawaitable(result):
            result = await result
        return result

    # -- helpers ----------------------------------------------------------

    def _derive_first_page_key(self) -> str | None:
        try:
            first_page_key, _ = serialize_key(self._get_key(0, None))
        except Exception as exc:
            # Not ready: the key loader depends on something not available yet.
            logger.debug("first_page_key_not_ready", error_type=type(exc).__name__)
            return None
        return first_page_key

    def _restore_page_count(self, *, fallback: int) -> int:
        size_key = self.size_key
        if size_key is None:
            return fallback
        cached = self._cache.get(size_key)
        return fallback if cached is MISSING else cached

    def _slot(self, prefix: str) -> str | None:
        if self._first_page_key is None:
            return None
        return f"{prefix}@{self._first_page_key}"

    def _watch_composite(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        key = self.key
        if key is not None:
            self._unsubscribe = self._client.subscribe(key, lambda _key: self._notify())

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _label(self) -> str:
        return short_hash(self._first_page_key or "")


def use_infinite(
    get_key: KeyLoader,
    fetcher: Fetcher | None = None,
    config: InfiniteConfig | None = None,
    *,
    client: SWRClient | None = None,
) -> InfiniteSequence:
    """Create a paginated sequence bound to ``client`` (the process-wide one by default)."""
    return InfiniteSequence(get_key, fetcher, config, client=client or get_client())
