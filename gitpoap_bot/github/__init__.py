"""GitHub REST client and App credential primitives."""

from __future__ import annotations

from .auth import AppTokenProvider, GitHubAppAuth, github_headers
from .client import (
    PRIVILEGED_PERMISSIONS,
    GitHubRestClient,
    RepositoryPermissions,
    UserLookup,
)
from .errors import GitHubAPIError, GitHubConfigError, GitHubResponseShapeError

__all__ = [
    "PRIVILEGED_PERMISSIONS",
    "AppTokenProvider",
    "GitHubAPIError",
    "GitHubAppAuth",
    "GitHubConfigError",
    "GitHubResponseShapeError",
    "GitHubRestClient",
    "RepositoryPermissions",
    "UserLookup",
    "github_headers",
]
