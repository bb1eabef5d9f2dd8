from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Final, Protocol, TypeAlias

CacheNamespace: TypeAlias = str


class _Missing:
    """Marker for an absent cache entry; ``None`` is a valid cached value."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()


class CacheBackend(Protocol):
    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any, *, ttl_seconds: int | None) -> None: ...

    def delete(self, key: str) -> None: ...

    def clear(self) -> int: ...


CacheFactory: TypeAlias = Callable[[], Awaitable[Any]]


@dataclass(frozen=True, slots=True)
class CachePolicy:
    namespace: CacheNamespace
    default_ttl_seconds: int | None
    max_entries: int
