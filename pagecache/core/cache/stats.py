"""Process-wide cache event counters.

Counts are keyed by ``(namespace, cache_event)`` and exposed as nested
``{namespace: {event: count}}`` snapshots so a caller can diff the counters
around a unit of work (see ``pagecache.logger.log_sequence_run``).
"""

from __future__ import annotations

from collections import Counter
from threading import Lock
from typing import TypeAlias

StatsSnapshot: TypeAlias = dict[str, dict[str, int]]

_COUNTER: Counter[tuple[str, str]] = Counter()
_LOCK = Lock()


def increment(*, namespace: str, cache_event: str, amount: int = 1) -> None:
    with _LOCK:
        _COUNTER[(namespace, cache_event)] += amount


def count(*, namespace: str, cache_event: str) -> int:
    with _LOCK:
        return _COUNTER[(namespace, cache_event)]


def snapshot() -> StatsSnapshot:
    with _LOCK:
        items = list(_COUNTER.items())
    out: StatsSnapshot = {}
    for (namespace, cache_event), value in items:
        out.setdefault(namespace, {})[cache_event] = value
    return out


def reset() -> None:
    """Reset all counters (test helper)."""
    with _LOCK:
        _COUNTER.clear()


def diff(before: StatsSnapshot, after: StatsSnapshot) -> StatsSnapshot:
    """Sparse ``after - before``; zero deltas are omitted."""
    out: StatsSnapshot = {}
    for namespace in sorted(before.keys() | after.keys()):
        old = before.get(namespace, {})
        new = after.get(namespace, {})
        delta = {
            cache_event: new.get(cache_event, 0) - old.get(cache_event, 0)
            for cache_event in sorted(old.keys() | new.keys())
        }
        delta = {cache_event: d for cache_event, d in delta.items() if d}
        if delta:
            out[namespace] = delta
    return out
