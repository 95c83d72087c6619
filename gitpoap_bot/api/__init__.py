"""GitPOAP bot HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application that receives GitHub webhook deliveries.

Usage
-----
Create and run the application::

    from gitpoap_bot.api import create_app

    app = create_app()              # health-only mode
    app = create_app(dependencies)  # webhook processing enabled

Public API
----------
create_app
    Application factory that registers health endpoints and, when a
    dispatcher is provided, ``POST /webhooks``.
"""

from gitpoap_bot.api.app import create_app

__all__ = ["create_app"]
