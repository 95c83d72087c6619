"""Liveness and readiness probe resources.

Liveness is unconditional. Readiness reports whether the webhook endpoint is
wired to handlers, so a process started without configuration never receives
deliveries.

Usage
-----
Register health endpoints on the Falcon app::

    from gitpoap_bot.api.health.resources import HealthResource, ReadyResource

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(webhooks_enabled=True))

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = ["HealthResource", "ReadyResource"]


class HealthResource:
    """Liveness probe returning ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health requests."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe.

    Responds 200 ``{"status": "ready"}`` when webhook handling is enabled and
    503 ``{"status": "unconfigured"}`` otherwise.

    """

    def __init__(self, *, webhooks_enabled: bool) -> None:
        """Record whether the webhook route is registered."""
        self._webhooks_enabled = webhooks_enabled

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /ready requests.

        Parameters
        ----------
        _req
            Falcon request (unused).
        resp
            Falcon response populated with readiness status.

        """
        if self._webhooks_enabled:
            resp.media = {"status": "ready"}
            resp.status = HTTPStatus.OK
            return
        resp.media = {"status": "unconfigured"}
        resp.status = HTTPStatus.SERVICE_UNAVAILABLE
