"""GitHub REST and App authentication errors."""

from __future__ import annotations


class GitHubAPIError(RuntimeError):
    """Raised when GitHub returns an error response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, method: str, path: str, status_code: int) -> GitHubAPIError:
        """Return an error for a non-2xx REST response."""
        return cls(
            f"GitHub REST {method} {path} returned HTTP {status_code}",
            status_code=status_code,
        )

    @property
    def is_not_found(self) -> bool:
        """Return whether GitHub answered 404."""
        return self.status_code == 404  # noqa: PLR2004


class GitHubResponseShapeError(RuntimeError):
    """Raised when a GitHub response lacks a field the bot relies on."""

    @classmethod
    def missing(cls, field: str) -> GitHubResponseShapeError:
        """Return an error for a missing response field."""
        return cls(f"GitHub response missing expected field: {field}")


class GitHubConfigError(RuntimeError):
    """Raised when GitHub App credentials are unusable."""

    @classmethod
    def missing_installation(cls) -> GitHubConfigError:
        """Return an error for deliveries without an installation id."""
        return cls("webhook delivery has no installation id")

    @classmethod
    def invalid_private_key(cls, reason: str) -> GitHubConfigError:
        """Return an error when the App private key cannot sign a JWT."""
        return cls(f"GitHub App private key cannot sign JWTs: {reason}")
