"""Structured log events emitted by the webhook handlers.

Usage
-----
>>> event_logger = HandlerEventLogger()
>>> event_logger.log_skipped(
...     handler="merge", target="acme/widgets/pulls/42", reason="not merged"
... )

"""

from __future__ import annotations

import enum

from gitpoap_bot.logging import (
    get_logger,
    log_error,
    log_exception,
    log_info,
    log_warning,
)

logger = get_logger(__name__)


class HandlerEventType(enum.StrEnum):
    """Event identifiers prefixed to handler log lines."""

    EVENT_RECEIVED = "event.received"
    EVENT_SKIPPED = "event.skipped"
    EVENT_FAILED = "event.failed"
    CLAIMS_REQUESTED = "claims.requested"
    CLAIMS_NOT_FOUND = "claims.not_found"
    CLAIMS_CREATED = "claims.created"
    COMMENT_POSTED = "comment.posted"


class HandlerEventLogger:
    """Emit handler lifecycle events via femtologging."""

    def log_received(self, *, handler: str, target: str, url: str) -> None:
        """Log that a handler started work on a delivery."""
        log_info(
            logger,
            "[%s] handler=%s target=%s url=%s",
            HandlerEventType.EVENT_RECEIVED,
            handler,
            target,
            url,
        )

    def log_skipped(self, *, handler: str, target: str, reason: str) -> None:
        """Log an expected early return at INFO."""
        log_info(
            logger,
            "[%s] handler=%s target=%s reason=%s",
            HandlerEventType.EVENT_SKIPPED,
            handler,
            target,
            reason,
        )

    def log_claims_requested(self, *, handler: str, target: str, body: str) -> None:
        """Log the request body sent to the claims API."""
        log_info(
            logger,
            "[%s] handler=%s target=%s body=%s",
            HandlerEventType.CLAIMS_REQUESTED,
            handler,
            target,
            body,
        )

    def log_claims_not_found(
        self, *, handler: str, target: str, response_text: str, body: str
    ) -> None:
        """Log a 404 from the claims API; this is an expected outcome."""
        log_warning(
            logger,
            "[%s] handler=%s target=%s status=404 response=%s body=%s",
            HandlerEventType.CLAIMS_NOT_FOUND,
            handler,
            target,
            response_text,
            body,
        )

    def log_claims_created(self, *, handler: str, target: str, count: int) -> None:
        """Log how many claims the API created."""
        log_info(
            logger,
            "[%s] handler=%s target=%s new_claims=%d",
            HandlerEventType.CLAIMS_CREATED,
            handler,
            target,
            count,
        )

    def log_comment_posted(self, *, handler: str, target: str, url: str) -> None:
        """Log the URL of the reply comment."""
        log_info(
            logger,
            "[%s] handler=%s target=%s comment_url=%s",
            HandlerEventType.COMMENT_POSTED,
            handler,
            target,
            url,
        )

    def log_failed(self, *, handler: str, target: str, message: str) -> None:
        """Log an error condition that raised no exception."""
        log_error(
            logger,
            "[%s] handler=%s target=%s error=%s",
            HandlerEventType.EVENT_FAILED,
            handler,
            target,
            message,
        )

    def log_exception(self, *, handler: str, target: str, exc: BaseException) -> None:
        """Log an exception caught at the handler boundary with its traceback."""
        log_exception(
            logger,
            f"[{HandlerEventType.EVENT_FAILED}] handler={handler} target={target} "
            f"error_type={type(exc).__name__} error_message={exc}",
            exc,
        )


__all__ = ["HandlerEventLogger", "HandlerEventType"]
