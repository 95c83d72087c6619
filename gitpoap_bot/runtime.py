"""GitPOAP bot runtime entrypoint.

This module provides the ASGI application factory used by Granian. It
delegates to :func:`gitpoap_bot.api.app.create_app` while keeping the
``gitpoap_bot.runtime:create_app`` entrypoint stable.

When the bot configuration loads from the environment, the app processes
webhook deliveries. Otherwise it starts in health-only mode and ``/ready``
reports the service as unconfigured.

Server settings come from environment variables:

- ``GITPOAP_BOT_HOST``: Bind address (default ``0.0.0.0``)
- ``GITPOAP_BOT_PORT``: Listen port (default ``3000``)
- ``GITPOAP_BOT_LOG_LEVEL``: Log level (default ``INFO``)

Run the service directly with ``python -m gitpoap_bot.runtime``.
"""

from __future__ import annotations

import os
import typing as typ

from gitpoap_bot.config import BotConfig
from gitpoap_bot.errors import BotConfigError
from gitpoap_bot.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["create_app", "main"]

logger = get_logger(__name__)

_MIN_PORT = 1
_MAX_PORT = 65535
_DEFAULT_PORT = "3000"


def _parse_port(port_str: str) -> int:
    """Parse and validate a port number string.

    Raises
    ------
    SystemExit
        If port_str is not a valid integer in range 1-65535.

    """
    try:
        port = int(port_str)
        if not (_MIN_PORT <= port <= _MAX_PORT):
            msg = f"port {port} outside valid range {_MIN_PORT}-{_MAX_PORT}"
            raise ValueError(msg)  # noqa: TRY301 - unify conversion and range errors
    except ValueError as exc:
        log_error(
            logger,
            "Invalid GITPOAP_BOT_PORT value: %r (must be %d-%d): %s",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
            exc,
        )
        raise SystemExit(1) from exc
    return port


def create_app() -> falcon.asgi.App:
    """Create the Falcon ASGI application from the environment.

    Returns
    -------
    falcon.asgi.App
        App with ``POST /webhooks`` when configuration is complete, else a
        health-only app.

    """
    from gitpoap_bot.api.app import create_app as _create_api_app

    try:
        config = BotConfig.from_env()
    except BotConfigError as exc:
        log_error(logger, "Webhook handling disabled, configuration invalid: %s", exc)
        return _create_api_app()

    from gitpoap_bot.api.factory import build_app_dependencies

    if config.webhook_secret is None:
        log_warning(logger, "WEBHOOK_SECRET is unset; deliveries are not verified")
    return _create_api_app(build_app_dependencies(config))


def main() -> None:
    """Start the webhook service using Granian.

    Reads ``GITPOAP_BOT_HOST``, ``GITPOAP_BOT_PORT`` and
    ``GITPOAP_BOT_LOG_LEVEL`` from the environment and starts the ASGI server.
    """
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("GITPOAP_BOT_HOST", "0.0.0.0")  # noqa: S104 - bind all interfaces for container
    port = _parse_port(os.environ.get("GITPOAP_BOT_PORT", _DEFAULT_PORT))
    log_level_str = os.environ.get("GITPOAP_BOT_LOG_LEVEL", "INFO")

    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid GITPOAP_BOT_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    log_info(
        logger,
        "Starting gitpoap-bot on %s:%d (log_level=%s)",
        host,
        port,
        normalized_level,
    )

    server = Granian(
        "gitpoap_bot.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
