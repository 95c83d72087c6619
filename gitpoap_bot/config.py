"""Process configuration for the GitPOAP bot.

All settings are read once at startup from environment variables.

Usage
-----
Load configuration from the environment:

>>> import os
>>> os.environ["API_URL"] = "https://api.gitpoap.io"
>>> config = BotConfig.from_env()  # doctest: +SKIP
>>> config.claims_api_url
'https://api.gitpoap.io'

"""

from __future__ import annotations

import dataclasses as dc
import os
from pathlib import Path

from gitpoap_bot.errors import BotConfigError

DEFAULT_BOT_HANDLE = "gitpoap-bot"
DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_ENVIRONMENT = "production"
DEFAULT_HTTP_TIMEOUT_S = 10.0
DEVELOPMENT_ENVIRONMENT = "development"


def _env(name: str) -> str:
    return os.environ.get(name, "").strip()


def _require(name: str) -> str:
    value = _env(name)
    if not value:
        raise BotConfigError.missing(name)
    return value


def _parse_positive_float(name: str, default: float) -> float:
    raw = _env(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise BotConfigError.invalid(name, raw, "must be a number") from exc
    if value <= 0:
        raise BotConfigError.invalid(name, raw, "must be positive")
    return value


def _load_private_key() -> str:
    """Return the App PEM from ``PRIVATE_KEY`` or ``PRIVATE_KEY_PATH``."""
    inline = _env("PRIVATE_KEY")
    if inline:
        # Single-line env values carry escaped newlines.
        key = inline.replace("\\n", "\n")
    else:
        path = _env("PRIVATE_KEY_PATH")
        if not path:
            raise BotConfigError.missing("PRIVATE_KEY or PRIVATE_KEY_PATH")
        try:
            key = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise BotConfigError.invalid("PRIVATE_KEY_PATH", path, str(exc)) from exc

    key = key.strip()
    if not key.startswith("-----BEGIN") or "PRIVATE KEY" not in key:
        raise BotConfigError.invalid("PRIVATE_KEY", "<redacted>", "not a PEM key")
    return key


@dc.dataclass(frozen=True, slots=True)
class BotConfig:
    """Runtime settings for the webhook handlers.

    Attributes
    ----------
    claims_api_url
        Base URL of the GitPOAP claims API (``API_URL``).
    app_id
        GitHub App id used as the JWT issuer (``APP_ID``).
    private_key
        GitHub App PEM private key.
    webhook_secret
        Shared secret for ``X-Hub-Signature-256`` verification. ``None``
        disables verification.
    github_api_url
        GitHub REST API base URL.
    bot_handle
        Login the bot answers to in comments, without the ``@``.
    slack_webhook_url
        Slack incoming webhook for mention notifications, or ``None``.
    sentry_dsn
        Error-reporting DSN, or ``None``.
    environment
        Runtime environment name (``GITPOAP_BOT_ENV``).
    http_timeout_s
        Timeout applied to every outbound HTTP request.

    """

    claims_api_url: str
    app_id: str
    private_key: str = dc.field(repr=False)
    webhook_secret: str | None = dc.field(default=None, repr=False)
    github_api_url: str = DEFAULT_GITHUB_API_URL
    bot_handle: str = DEFAULT_BOT_HANDLE
    slack_webhook_url: str | None = dc.field(default=None, repr=False)
    sentry_dsn: str | None = dc.field(default=None, repr=False)
    environment: str = DEFAULT_ENVIRONMENT
    http_timeout_s: float = DEFAULT_HTTP_TIMEOUT_S

    @property
    def is_development(self) -> bool:
        """Return whether the bot runs in the development environment."""
        return self.environment == DEVELOPMENT_ENVIRONMENT

    @classmethod
    def from_env(cls) -> BotConfig:
        """Build configuration from environment variables.

        Raises
        ------
        BotConfigError
            If a required variable is missing or a value is malformed.

        """
        bot_handle = _env("GITPOAP_BOT_HANDLE").lstrip("@") or DEFAULT_BOT_HANDLE
        return cls(
            claims_api_url=_require("API_URL").rstrip("/"),
            app_id=_require("APP_ID"),
            private_key=_load_private_key(),
            webhook_secret=_env("WEBHOOK_SECRET") or None,
            github_api_url=(
                _env("GITHUB_API_URL") or DEFAULT_GITHUB_API_URL
            ).rstrip("/"),
            bot_handle=bot_handle,
            slack_webhook_url=_env("SLACK_WEBHOOK_URL") or None,
            sentry_dsn=_env("SENTRY_DSN") or None,
            environment=_env("GITPOAP_BOT_ENV") or DEFAULT_ENVIRONMENT,
            http_timeout_s=_parse_positive_float(
                "GITPOAP_BOT_HTTP_TIMEOUT_S", DEFAULT_HTTP_TIMEOUT_S
            ),
        )


__all__ = ["DEFAULT_BOT_HANDLE", "BotConfig"]
