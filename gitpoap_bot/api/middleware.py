"""ASGI lifespan middleware releasing process-wide resources.

The shared ``httpx.AsyncClient`` and the detached-task registry live for the
whole process. On shutdown, outstanding notifications are awaited before the
HTTP client's connection pool is closed.

Usage
-----
Register the middleware when creating the Falcon app::

    from gitpoap_bot.api.middleware import ProcessResourceManager

    app = falcon.asgi.App(
        middleware=[ProcessResourceManager(http_client=client, tasks=tasks)]
    )

"""

from __future__ import annotations

import typing as typ

from gitpoap_bot.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    import httpx

    from gitpoap_bot.tasks import DetachedTasks

__all__ = ["ProcessResourceManager"]

logger = get_logger(__name__)


class ProcessResourceManager:
    """Falcon lifespan middleware for the shared HTTP client and tasks.

    Parameters
    ----------
    http_client
        Client closed at shutdown.
    tasks
        Registry drained at shutdown.

    """

    def __init__(self, *, http_client: httpx.AsyncClient, tasks: DetachedTasks) -> None:
        """Store the resources to release."""
        self._http_client = http_client
        self._tasks = tasks

    async def process_startup(self, _scope: object, _event: object) -> None:
        """Log that the process accepts deliveries."""
        log_info(logger, "Webhook service started")

    async def process_shutdown(self, _scope: object, _event: object) -> None:
        """Drain detached tasks, then close the HTTP client."""
        pending = self._tasks.pending
        if pending:
            log_info(logger, "Waiting for %d background tasks before shutdown", pending)
        await self._tasks.drain()
        await self._http_client.aclose()
        log_info(logger, "Webhook service stopped")
