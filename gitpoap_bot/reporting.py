"""Error-reporting port and its adapters.

Handlers receive an :class:`ErrorReporter` instead of touching a global
error-tracking SDK. :func:`init_error_reporting` is called once at startup;
reporters have no teardown.

Usage
-----
>>> reporter = init_error_reporting(config)
>>> reporter.capture_message(
...     "Owner of 'widgets' repository is empty",
...     context={"repo": "widgets", "owner": ""},
... )

"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from gitpoap_bot.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from gitpoap_bot.config import BotConfig

logger = get_logger(__name__)

# Longest string value attached to a report.
MAX_VALUE_LENGTH = 500

DiagnosticContext = cabc.Mapping[str, object]


def _truncate(value: object) -> str:
    text = str(value)
    if len(text) <= MAX_VALUE_LENGTH:
        return text
    return text[: MAX_VALUE_LENGTH - 3] + "..."


def render_context(context: DiagnosticContext) -> str:
    """Return ``key=value`` pairs for log lines, values truncated."""
    return " ".join(f"{key}={_truncate(value)!r}" for key, value in context.items())


@typ.runtime_checkable
class ErrorReporter(typ.Protocol):
    """Forward failures with diagnostic context for later triage."""

    def capture_message(self, message: str, *, context: DiagnosticContext) -> None:
        """Report an error condition that raised no exception."""
        ...

    def capture_exception(
        self, exc: BaseException, *, context: DiagnosticContext
    ) -> None:
        """Report an exception caught at a handler boundary."""
        ...


class LoggingErrorReporter:
    """Reporter used when no error-tracking DSN is configured.

    The handlers already log every failure, so this adapter only records that
    the report was not forwarded anywhere.
    """

    def capture_message(self, message: str, *, context: DiagnosticContext) -> None:
        """Log the report at INFO; the failure itself is logged by the caller."""
        log_info(
            logger,
            "Error report (not forwarded): %s %s",
            message,
            render_context(context),
        )

    def capture_exception(
        self, exc: BaseException, *, context: DiagnosticContext
    ) -> None:
        """Log the report at INFO; the traceback is logged by the caller."""
        log_info(
            logger,
            "Exception report (not forwarded): %s %s",
            type(exc).__name__,
            render_context(context),
        )


class SentryErrorReporter:
    """Reporter backed by ``sentry_sdk``.

    Each report uses an isolated scope so extras from one delivery never leak
    into another delivery's events.
    """

    def __init__(self, sdk: typ.Any) -> None:  # noqa: ANN401 - sentry_sdk module
        """Wrap an initialised ``sentry_sdk`` module."""
        self._sdk = sdk

    def capture_message(self, message: str, *, context: DiagnosticContext) -> None:
        """Send ``message`` at error level with ``context`` as extras."""
        with self._sdk.new_scope() as scope:
            for key, value in context.items():
                scope.set_extra(key, _truncate(value))
            self._sdk.capture_message(message, level="error")

    def capture_exception(
        self, exc: BaseException, *, context: DiagnosticContext
    ) -> None:
        """Send ``exc`` with ``context`` as extras."""
        with self._sdk.new_scope() as scope:
            for key, value in context.items():
                scope.set_extra(key, _truncate(value))
            self._sdk.capture_exception(exc)


def init_error_reporting(config: BotConfig) -> ErrorReporter:
    """Initialise error reporting once for the process.

    Sentry is enabled only when ``SENTRY_DSN`` is set and the bot does not run
    in the development environment.
    """
    if config.sentry_dsn is None or config.is_development:
        log_info(
            logger,
            "Error reporting forwards nothing (dsn_configured=%s environment=%s)",
            config.sentry_dsn is not None,
            config.environment,
        )
        return LoggingErrorReporter()

    import sentry_sdk

    sentry_sdk.init(
        dsn=config.sentry_dsn,
        environment=config.environment,
        traces_sample_rate=1.0,
        attach_stacktrace=True,
        max_value_length=MAX_VALUE_LENGTH,
    )
    log_info(
        logger, "Sentry error reporting enabled (environment=%s)", config.environment
    )
    return SentryErrorReporter(sentry_sdk)


__all__ = [
    "DiagnosticContext",
    "ErrorReporter",
    "LoggingErrorReporter",
    "SentryErrorReporter",
    "init_error_reporting",
    "render_context",
]
