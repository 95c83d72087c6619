"""Unit tests for the femtologging helpers."""

from __future__ import annotations

import pytest

from gitpoap_bot.logging import (
    format_log_message,
    get_logger,
    log_exception,
    log_info,
    log_warning,
    normalize_log_level,
)
from tests.helpers.femtologging_capture import capture_femto_logs, is_warning


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("info", ("INFO", False)),
        (" debug ", ("DEBUG", False)),
        ("WARN", ("WARN", False)),
        ("warning", ("WARNING", False)),
        ("", ("INFO", True)),
        (None, ("INFO", True)),
        ("verbose", ("INFO", True)),
    ],
)
def test_normalize_log_level(raw: str | None, expected: tuple[str, bool]) -> None:
    """Known levels are upper-cased; others fall back to INFO."""
    assert normalize_log_level(raw) == expected


def test_format_without_args_keeps_percent_signs() -> None:
    """Templates without arguments are returned verbatim."""
    assert format_log_message("100% done") == "100% done"
    assert format_log_message("%s of %d", "two", 3) == "two of 3"


def test_helpers_emit_formatted_records() -> None:
    """Helpers interpolate arguments and pick the right level."""
    logger = get_logger("gitpoap_bot.tests.logging")
    with capture_femto_logs("gitpoap_bot.tests.logging") as capture:
        log_info(logger, "delivery %s ok", "abc")
        log_warning(logger, "lookup of @%s failed", "ghost")
        log_exception(logger, "handler failed", RuntimeError("boom"))

        info = capture.wait_for(lambda r: r.message == "delivery abc ok")
        warning = capture.wait_for(lambda r: "ghost" in r.message)
        error = capture.wait_for(lambda r: r.message == "handler failed")

    assert info.level == "INFO"
    assert is_warning(warning.level)
    assert error.level == "ERROR"
    assert error.exc_info is not None
