"""Application factory for the GitPOAP bot Falcon ASGI application.

This module provides ``create_app()`` which builds the Falcon ASGI
application with health endpoints and, when handler dependencies are
available, the GitHub webhook endpoint.

Usage
-----
Create a health-only app (no configuration)::

    app = create_app()

Create a full app that processes deliveries::

    from gitpoap_bot.api.app import AppDependencies, create_app

    deps = AppDependencies(
        dispatcher=WebhookDispatcher.from_dependencies(handler_deps),
        webhook_secret=config.webhook_secret,
        http_client=handler_deps.http_client,
        tasks=handler_deps.tasks,
    )
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from gitpoap_bot.api.errors import (
    InvalidInputError,
    InvalidSignatureError,
    handle_invalid_input,
    handle_invalid_signature,
)
from gitpoap_bot.api.health.resources import HealthResource, ReadyResource

if typ.TYPE_CHECKING:
    import httpx

    from gitpoap_bot.handlers import WebhookDispatcher
    from gitpoap_bot.tasks import DetachedTasks

__all__ = ["AppDependencies", "create_app"]

WEBHOOK_ROUTE = "/webhooks"


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Attributes
    ----------
    dispatcher
        Routes deliveries to handlers. Without it only health endpoints are
        registered.
    webhook_secret
        Secret for signature verification; ``None`` disables verification.
    http_client
        Shared client closed at lifespan shutdown.
    tasks
        Detached-task registry drained at lifespan shutdown.

    """

    dispatcher: WebhookDispatcher | None = None
    webhook_secret: str | None = None
    http_client: httpx.AsyncClient | None = None
    tasks: DetachedTasks | None = None


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Optional application dependencies. When ``None`` or without a
        dispatcher, only ``/health`` and ``/ready`` are available and
        ``/ready`` reports the service as unconfigured.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    deps = dependencies or AppDependencies()
    middleware: list[object] = []
    if deps.http_client is not None and deps.tasks is not None:
        from gitpoap_bot.api.middleware import ProcessResourceManager

        middleware.append(
            ProcessResourceManager(http_client=deps.http_client, tasks=deps.tasks)
        )

    app = falcon.asgi.App(middleware=middleware)  # type: ignore[no-matching-overload]  # Falcon stubs

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(webhooks_enabled=deps.dispatcher is not None))

    if deps.dispatcher is not None:
        from gitpoap_bot.api.webhooks.resources import WebhookResource

        app.add_route(
            WEBHOOK_ROUTE,
            WebhookResource(deps.dispatcher, secret=deps.webhook_secret),
        )

    app.add_error_handler(InvalidSignatureError, handle_invalid_signature)
    app.add_error_handler(InvalidInputError, handle_invalid_input)

    return app
