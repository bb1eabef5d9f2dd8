from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from pagecache.logger import get_logger

logger = get_logger(__name__)


class SingleFlight:
    """Share one in-flight call per key between concurrent awaiters.

    The first caller for a key starts ``factory()`` as a task; callers that
    arrive while it runs await the same task and receive the same result or
    exception. The key is released as soon as the task settles, so the next
    call after that starts a fresh run.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, asyncio.Future[Any]] = {}

    async def do(self, key: str, factory: Callable[[], Awaitable[Any]]) -> Any:
        task = self._tasks.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._tasks[key] = task
            task.add_done_callback(lambda done, key=key: self._forget(key, done))
        else:
            logger.debug("singleflight_join", in_flight=len(self._tasks))
        # A cancelled waiter must not cancel the shared run.
        return await asyncio.shield(task)

    async def wait(self, key: str) -> None:
        """Wait until the run in flight for ``key`` settles, ignoring its outcome."""
        task = self._tasks.get(key)
        if task is not None:
            await asyncio.wait([task])

    def in_flight(self, key: str) -> bool:
        return key in self._tasks

    @property
    def active(self) -> int:
        return len(self._tasks)

    def _forget(self, key: str, done: asyncio.Future[Any]) -> None:
        if self._tasks.get(key) is done:
            del self._tasks[key]
        if not done.cancelled():
            # Mark the exception retrieved even when every waiter went away.
            done.exception()
