"""Factory wiring handler dependencies from configuration.

Usage
-----
Build the dependencies for the API layer::

    from gitpoap_bot.api.factory import build_app_dependencies

    deps = build_app_dependencies(BotConfig.from_env())

"""

from __future__ import annotations

import typing as typ

import httpx

from gitpoap_bot.api.app import AppDependencies
from gitpoap_bot.github import GitHubAppAuth
from gitpoap_bot.handlers import HandlerDependencies, WebhookDispatcher
from gitpoap_bot.notifications import MentionNotifier, NullNotifier, SlackNotifier
from gitpoap_bot.reporting import init_error_reporting
from gitpoap_bot.tasks import DetachedTasks

if typ.TYPE_CHECKING:
    from gitpoap_bot.config import BotConfig

__all__ = ["build_app_dependencies", "build_handler_dependencies"]

USER_AGENT = "gitpoap-bot/0.1"


def build_handler_dependencies(config: BotConfig) -> HandlerDependencies:
    """Assemble the process-wide collaborators shared by both handlers.

    Error reporting is initialised here, once per process.
    """
    reporter = init_error_reporting(config)
    http_client = httpx.AsyncClient(
        timeout=config.http_timeout_s,
        headers={"User-Agent": USER_AGENT},
    )
    notifier: MentionNotifier
    if config.slack_webhook_url is not None:
        notifier = SlackNotifier(http_client, webhook_url=config.slack_webhook_url)
    else:
        notifier = NullNotifier()

    return HandlerDependencies(
        config=config,
        http_client=http_client,
        app_auth=GitHubAppAuth(
            config.app_id,
            config.private_key,
            http_client=http_client,
            api_url=config.github_api_url,
        ),
        reporter=reporter,
        notifier=notifier,
        tasks=DetachedTasks(reporter),
    )


def build_app_dependencies(config: BotConfig) -> AppDependencies:
    """Return Falcon app dependencies with the webhook route enabled."""
    handler_deps = build_handler_dependencies(config)
    return AppDependencies(
        dispatcher=WebhookDispatcher.from_dependencies(handler_deps),
        webhook_secret=config.webhook_secret,
        http_client=handler_deps.http_client,
        tasks=handler_deps.tasks,
    )
