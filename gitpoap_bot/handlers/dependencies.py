"""Collaborators shared by the webhook handlers."""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

import httpx
import msgspec

from gitpoap_bot.claims import ClaimsAPIClient
from gitpoap_bot.github import (
    GitHubAPIError,
    GitHubConfigError,
    GitHubResponseShapeError,
    GitHubRestClient,
)
from gitpoap_bot.handlers.observability import HandlerEventLogger

if typ.TYPE_CHECKING:
    from gitpoap_bot.config import BotConfig
    from gitpoap_bot.events import Installation
    from gitpoap_bot.github import AppTokenProvider
    from gitpoap_bot.notifications import MentionNotifier
    from gitpoap_bot.reporting import ErrorReporter
    from gitpoap_bot.tasks import DetachedTasks


class HandlerOutcome(enum.StrEnum):
    """Terminal state of one handler invocation."""

    COMMENTED = "commented"
    SKIPPED = "skipped"
    FAILED = "failed"


# Failures of external capabilities; caught at the top of each handler so a
# single delivery can never take the process down.
HANDLER_FAILURES: tuple[type[Exception], ...] = (
    httpx.HTTPError,
    msgspec.DecodeError,
    GitHubAPIError,
    GitHubConfigError,
    GitHubResponseShapeError,
)


@dc.dataclass(frozen=True, slots=True)
class HandlerDependencies:
    """Process-wide collaborators injected into every handler.

    Attributes
    ----------
    config
        Bot configuration.
    http_client
        Shared async HTTP client; credentials are passed per request.
    app_auth
        Mints App JWTs and installation tokens.
    reporter
        Error-reporting port.
    notifier
        Team-chat notifier for mention-triggered claims.
    tasks
        Registry for detached side effects.
    event_logger
        Structured lifecycle logging.

    """

    config: BotConfig
    http_client: httpx.AsyncClient
    app_auth: AppTokenProvider
    reporter: ErrorReporter
    notifier: MentionNotifier
    tasks: DetachedTasks
    event_logger: HandlerEventLogger = dc.field(default_factory=HandlerEventLogger)

    def claims_client(self) -> ClaimsAPIClient:
        """Return a claims API client bound to ``API_URL``."""
        return ClaimsAPIClient(self.http_client, api_url=self.config.claims_api_url)

    async def github_client(
        self, installation: Installation | None
    ) -> GitHubRestClient:
        """Return a REST client authenticated as ``installation``.

        Raises
        ------
        GitHubConfigError
            If the delivery carries no installation.

        """
        if installation is None:
            raise GitHubConfigError.missing_installation()
        token = await self.app_auth.installation_token(installation.id)
        return GitHubRestClient(
            self.http_client, token=token, api_url=self.config.github_api_url
        )


__all__ = ["HANDLER_FAILURES", "HandlerDependencies", "HandlerOutcome"]
