from __future__ import annotations

import time
from collections import OrderedDict
from dataclasses import dataclass
from threading import Lock
from typing import Any

from .logging import log_cache_event
from .types import MISSING, CacheBackend


@dataclass(frozen=True, slots=True)
class _Entry:
    value: Any
    expires_at_monotonic: float | None


class MemoryCacheBackend(CacheBackend):
    """LRU map of arbitrary values with optional per-entry expiry.

    ``get`` returns ``MISSING`` for absent or expired keys so that ``None``
    can be stored like any other page value.
    """

    def __init__(self, *, max_entries: int, namespace: str | None = None) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be > 0")
        self._max_entries = max_entries
        self._namespace = namespace
        self._lock = Lock()
        self._entries: OrderedDict[str, _Entry] = OrderedDict()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not MISSING

    def get(self, key: str) -> Any:
        now = time.monotonic()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return MISSING
            if entry.expires_at_monotonic is not None and entry.expires_at_monotonic <= now:
                self._entries.pop(key, None)
                return MISSING
            self._entries.move_to_end(key, last=True)
            return entry.value

    def set(self, key: str, value: Any, *, ttl_seconds: int | None) -> None:
        if ttl_seconds is not None and ttl_seconds <= 0:
            # Non-positive TTL means "do not keep"
            self.delete(key)
            return

        now = time.monotonic()
        expires_at = None if ttl_seconds is None else now + float(ttl_seconds)
        with self._lock:
            self._entries[key] = _Entry(value=value, expires_at_monotonic=expires_at)
            self._entries.move_to_end(key, last=True)
            expired = self._evict_expired_locked(now=now)
            evicted = self._evict_lru_locked()

        if self._namespace:
            if expired:
                log_cache_event(
                    namespace=self._namespace,
                    cache_event="evict",
                    detail=f"reason=expired count={expired}",
                )
            if evicted:
                log_cache_event(
                    namespace=self._namespace,
                    cache_event="evict",
                    detail=f"reason=lru count={evicted}",
                )

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> int:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            return count

    def _evict_expired_locked(self, *, now: float) -> int:
        # Expired entries can sit anywhere in LRU order; max_entries bounds the scan.
        expired_keys = [
            k
            for k, entry in self._entries.items()
            if entry.expires_at_monotonic is not None and entry.expires_at_monotonic <= now
        ]
        for k in expired_keys:
            self._entries.pop(k, None)
        return len(expired_keys)

    def _evict_lru_locked(self) -> int:
        evicted = 0
        while len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)
            evicted += 1
        return evicted
