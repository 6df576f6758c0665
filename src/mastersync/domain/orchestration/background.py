"""Fire-and-forget task pool for post-mutation side effects."""

from __future__ import annotations

import asyncio
from collections import deque
from logging import getLogger
from typing import TYPE_CHECKING

from mastersync.domain.errors import BackgroundTaskFailure

if TYPE_CHECKING:
    from collections.abc import Coroutine
    from typing import Any

log = getLogger(__name__)

MAX_RECORDED_FAILURES = 100


class BackgroundTasks:
    """Detached tasks whose failures are logged and recorded, never raised.

    The event loop keeps only weak references to tasks, so the pool holds the
    strong ones until each finishes. Only the most recent ``max_failures``
    failures are kept.
    """

    def __init__(self, max_failures: int = MAX_RECORDED_FAILURES) -> None:
        self._tasks: set[asyncio.Task[None]] = set()
        self.failures: deque[BackgroundTaskFailure] = deque(maxlen=max_failures)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def submit(self, coro: Coroutine[Any, Any, object], *, label: str) -> asyncio.Task[None]:
        task = asyncio.create_task(self._guard(coro, label), name=label)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait until no task is outstanding, including tasks spawned meanwhile."""

        while self._tasks:
            await asyncio.gather(*tuple(self._tasks))

    def take_failures(self) -> list[BackgroundTaskFailure]:
        """Return the recorded failures and forget them."""

        taken = list(self.failures)
        self.failures.clear()
        return taken

    async def _guard(self, coro: Coroutine[Any, Any, object], label: str) -> None:
        try:
            await coro
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            failure = (
                exc
                if isinstance(exc, BackgroundTaskFailure)
                else BackgroundTaskFailure(f"{label} failed: {exc}")
            )
            if failure is not exc:
                failure.__cause__ = exc
            self.failures.append(failure)
            log.error("Background task %s failed: %s", label, failure, exc_info=exc)
