"""Unit tests for handler lifecycle logging."""

from __future__ import annotations

import pytest

from gitpoap_bot.handlers import HandlerEventLogger, HandlerEventType
from tests.helpers.femtologging_capture import capture_femto_logs, is_warning

_LOGGER = "gitpoap_bot.handlers.observability"
_TARGET = "acme/widgets/pulls/42"


class TestHandlerEventLogger:
    """Tests for ``HandlerEventLogger`` structured log events."""

    @pytest.fixture
    def event_logger(self) -> HandlerEventLogger:
        """Return a fresh handler event logger."""
        return HandlerEventLogger()

    def test_skipped_is_info(self, event_logger: HandlerEventLogger) -> None:
        """Expected early returns are logged at INFO with their reason."""
        with capture_femto_logs(_LOGGER) as capture:
            event_logger.log_skipped(
                handler="merge", target=_TARGET, reason="closed without merging"
            )
            record = capture.wait_for(
                lambda r: HandlerEventType.EVENT_SKIPPED in r.message
            )
        assert record.level == "INFO"
        assert "handler=merge" in record.message
        assert f"target={_TARGET}" in record.message
        assert "closed without merging" in record.message

    def test_claims_not_found_is_warning(
        self, event_logger: HandlerEventLogger
    ) -> None:
        """A claims 404 is logged as a warning with the request body."""
        with capture_femto_logs(_LOGGER) as capture:
            event_logger.log_claims_not_found(
                handler="merge",
                target=_TARGET,
                response_text="Not found",
                body='{"pullRequest":{}}',
            )
            record = capture.wait_for(
                lambda r: HandlerEventType.CLAIMS_NOT_FOUND in r.message
            )
        assert is_warning(record.level)
        assert "status=404" in record.message
        assert '{"pullRequest":{}}' in record.message

    def test_claims_created_counts(self, event_logger: HandlerEventLogger) -> None:
        """Created claims are counted in the log line."""
        with capture_femto_logs(_LOGGER) as capture:
            event_logger.log_claims_created(handler="merge", target=_TARGET, count=3)
            record = capture.wait_for(
                lambda r: HandlerEventType.CLAIMS_CREATED in r.message
            )
        assert "new_claims=3" in record.message

    def test_failed_is_error(self, event_logger: HandlerEventLogger) -> None:
        """Error conditions without an exception are logged at ERROR."""
        with capture_femto_logs(_LOGGER) as capture:
            event_logger.log_failed(
                handler="mention", target=_TARGET, message="Owner is empty"
            )
            record = capture.wait_for(
                lambda r: HandlerEventType.EVENT_FAILED in r.message
            )
        assert record.level == "ERROR"
        assert "error=Owner is empty" in record.message

    def test_exception_carries_traceback(
        self, event_logger: HandlerEventLogger
    ) -> None:
        """Caught exceptions are logged with type, message and exc_info."""
        with capture_femto_logs(_LOGGER) as capture:
            event_logger.log_exception(
                handler="mention", target=_TARGET, exc=RuntimeError("boom")
            )
            record = capture.wait_for(
                lambda r: HandlerEventType.EVENT_FAILED in r.message
            )
        assert record.level == "ERROR"
        assert "error_type=RuntimeError" in record.message
        assert "error_message=boom" in record.message
        assert record.exc_info is not None
