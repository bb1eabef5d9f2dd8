from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .keys import SerializedKey, serialize_key
from .logging import CacheTimer, log_cache_event
from .singleflight import SingleFlight
from .types import MISSING, CacheBackend, CacheFactory, CachePolicy


@dataclass(frozen=True, slots=True)
class Cache:
    """Key/value store shared by every paginated sequence that uses it.

    Pass one instance by reference to the sequences and the client that
    should see each other's pages; a fresh instance gives an isolated cache.
    """

    backend: CacheBackend
    policy: CachePolicy
    _singleflight: SingleFlight = field(default_factory=SingleFlight)

    @property
    def namespace(self) -> str:
        return self.policy.namespace

    def get(self, key: str) -> Any:
        """Return the cached value or ``MISSING``."""
        timer = CacheTimer()
        value = self.backend.get(key)
        log_cache_event(
            namespace=self.policy.namespace,
            cache_event="miss" if value is MISSING else "hit",
            duration_ms=timer.elapsed_ms(),
        )
        return value

    def set(self, key: str, value: Any, *, ttl_seconds: int | None = None) -> None:
        ttl = self.policy.default_ttl_seconds if ttl_seconds is None else ttl_seconds
        timer = CacheTimer()
        self.backend.set(key, value, ttl_seconds=ttl)
        log_cache_event(
            namespace=self.policy.namespace,
            cache_event="set",
            duration_ms=timer.elapsed_ms(),
        )

    def delete(self, key: str) -> None:
        timer = CacheTimer()
        self.backend.delete(key)
        log_cache_event(
            namespace=self.policy.namespace,
            cache_event="delete",
            duration_ms=timer.elapsed_ms(),
        )

    def clear(self) -> int:
        count = self.backend.clear()
        log_cache_event(
            namespace=self.policy.namespace,
            cache_event="clear",
            detail=f"count={count}",
        )
        return count

    @staticmethod
    def serialize_key(descriptor: Any) -> SerializedKey:
        return serialize_key(descriptor)

    def in_flight(self, key: str) -> bool:
        return self._singleflight.in_flight(key)

    async def wait_in_flight(self, key: str) -> None:
        await self._singleflight.wait(key)

    async def coalesce(self, key: str, factory: CacheFactory) -> Any:
        """Run ``factory`` once for all concurrent callers of ``key``."""
        if self._singleflight.in_flight(key):
            log_cache_event(namespace=self.policy.namespace, cache_event="coalesced")
        return await self._singleflight.do(key, factory)

