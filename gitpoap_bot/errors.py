"""Exceptions raised by the bot outside the HTTP layer."""

from __future__ import annotations


class BotConfigError(RuntimeError):
    """Raised when process configuration is missing or malformed."""

    @classmethod
    def missing(cls, name: str) -> BotConfigError:
        """Return an error for a required variable that is unset."""
        return cls(f"{name} is required")

    @classmethod
    def invalid(cls, name: str, value: str, reason: str) -> BotConfigError:
        """Return an error for a variable with an unusable value."""
        return cls(f"{name}={value!r} {reason}")


class NotificationError(RuntimeError):
    """Raised when a team-chat notification cannot be delivered."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int) -> NotificationError:
        """Return an error for a non-2xx webhook response."""
        return cls(f"Slack webhook HTTP {status_code}", status_code=status_code)
