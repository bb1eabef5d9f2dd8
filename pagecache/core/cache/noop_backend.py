from __future__ import annotations

from typing import Any

from .types import MISSING, CacheBackend


class NoOpCacheBackend(CacheBackend):
    """Backend used when caching is disabled: every page is refetched."""

    def get(self, key: str) -> Any:
        return MISSING

    def set(self, key: str, value: Any, *, ttl_seconds: int | None) -> None:
        pass

    def delete(self, key: str) -> None:
        pass

    def clear(self) -> int:
        return 0
