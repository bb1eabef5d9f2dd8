from __future__ import annotations

import time

from pagecache.logger import get_logger

from . import stats

logger = get_logger(__name__)

# Events that fire once per page read; logged at debug to keep INFO quiet.
_CHATTY_EVENTS = frozenset({"hit", "miss", "set"})


class CacheTimer:
    def __init__(self) -> None:
        self._start = time.perf_counter()

    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self._start) * 1000.0


def log_cache_event(
    *,
    namespace: str,
    cache_event: str,
    duration_ms: float | None = None,
    detail: str | None = None,
) -> None:
    # Never log keys or page data here.
    # NOTE: structlog uses `event` as the message positional arg.
    # Never pass `event=` as a kwarg to logger.* calls.
    stats.increment(namespace=namespace, cache_event=cache_event)

    payload: dict[str, object] = {"namespace": namespace, "cache_event": cache_event}
    if duration_ms is not None:
        payload["duration_ms"] = round(duration_ms, 3)
    if detail is not None:
        payload["detail"] = detail

    if cache_event in _CHATTY_EVENTS:
        logger.debug("cache", **payload)
    else:
        logger.info("cache", **payload)
