"""Detached background tasks for best-effort side effects.

Side effects such as chat notifications must never fail or delay the webhook
handler that triggers them. :class:`DetachedTasks` schedules them on the
running loop, keeps a strong reference until they finish, and logs and
reports their failures itself.
"""

from __future__ import annotations

import asyncio
import typing as typ

from gitpoap_bot.logging import get_logger, log_exception

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from gitpoap_bot.reporting import ErrorReporter

logger = get_logger(__name__)


class DetachedTasks:
    """Registry of fire-and-forget tasks.

    Parameters
    ----------
    reporter
        Receives the exception of every failed task.

    """

    def __init__(self, reporter: ErrorReporter) -> None:
        """Create an empty registry."""
        self._reporter = reporter
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        """Number of tasks that have not finished yet."""
        return len(self._tasks)

    def spawn(
        self, coro: cabc.Coroutine[typ.Any, typ.Any, None], *, name: str
    ) -> asyncio.Task[None]:
        """Schedule ``coro`` without awaiting it.

        Must be called from a running event loop.
        """
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is None:
            return
        log_exception(logger, f"Detached task {task.get_name()!r} failed", exc)
        self._reporter.capture_exception(exc, context={"task": task.get_name()})

    async def drain(self) -> None:
        """Wait for every outstanding task; failures stay inside the tasks."""
        while self._tasks:
            await asyncio.gather(*tuple(self._tasks), return_exceptions=True)


__all__ = ["DetachedTasks"]
