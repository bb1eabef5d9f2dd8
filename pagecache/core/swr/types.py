from __future__ import annotations

import operator
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Final, TypeAlias

from pagecache.config import settings


class _Unset:
    """Marker for "no data argument given" (``None`` is valid mutate data)."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Final = _Unset()

KeyLoader: TypeAlias = Callable[[int, Any], Any]
Fetcher: TypeAlias = Callable[..., Awaitable[Any] | Any]
Comparator: TypeAlias = Callable[[Any, Any], bool]
Listener: TypeAlias = Callable[[str], None]


@dataclass(frozen=True, slots=True)
class RevalidationContext:
    """Instruction left by a mutation for the next fetch run of a sequence.

    Either ``force=True`` (refetch every page) or an ``original_data``
    snapshot that each cached page is compared against.
    """

    original_data: Sequence[Any] | None = None
    force: bool = False

    @classmethod
    def forced(cls) -> RevalidationContext:
        return cls(force=True)

    @classmethod
    def diff_against(cls, original_data: Sequence[Any] | None) -> RevalidationContext:
        return cls(original_data=original_data, force=False)


@dataclass(frozen=True, slots=True)
class InfiniteConfig:
    initial_size: int = field(default_factory=lambda: settings.infinite_initial_size)
    revalidate_all: bool = field(default_factory=lambda: settings.infinite_revalidate_all)
    persist_size: bool = field(default_factory=lambda: settings.infinite_persist_size)
    compare: Comparator = operator.eq

    def __post_init__(self) -> None:
        if self.initial_size < 0:
            raise ValueError("initial_size must be >= 0")
