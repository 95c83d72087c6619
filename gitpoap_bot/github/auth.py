"""GitHub App authentication: App JWTs and installation access tokens.

Both credentials are minted fresh for every webhook delivery. Nothing is
cached between invocations.
"""

from __future__ import annotations

import collections.abc as cabc
import time
import typing as typ

import httpx
import jwt
import msgspec

from .errors import GitHubAPIError, GitHubConfigError, GitHubResponseShapeError

# GitHub rejects App JWTs that live longer than ten minutes; back-date iat to
# absorb clock drift.
_JWT_BACKDATE_S = 60
_JWT_LIFETIME_S = 9 * 60
_JWT_ALGORITHM = "RS256"
_HTTP_ERROR_STATUS_THRESHOLD = 400

GITHUB_API_VERSION = "2022-11-28"


def github_headers(token: str) -> dict[str, str]:
    """Return the standard REST headers for a bearer ``token``."""
    return {
        "Accept": "application/vnd.github+json",
        "Authorization": f"Bearer {token}",
        "X-GitHub-Api-Version": GITHUB_API_VERSION,
    }


class _InstallationToken(msgspec.Struct):
    token: str = ""


class AppTokenProvider(typ.Protocol):
    """Source of App-level and installation-level GitHub credentials."""

    def app_jwt(self) -> str:
        """Return a short-lived JWT signed with the App private key."""
        ...

    async def installation_token(self, installation_id: int) -> str:
        """Return an access token scoped to one App installation."""
        ...


class GitHubAppAuth:
    """Mint GitHub App credentials with PyJWT and the REST API.

    Parameters
    ----------
    app_id
        Numeric App id, used as the JWT ``iss`` claim.
    private_key
        PEM encoded RSA private key of the App.
    http_client
        Shared client used for the installation token exchange.
    api_url
        GitHub REST base URL.
    clock
        Returns the current UNIX time; injectable for tests.

    """

    def __init__(  # noqa: PLR0913
        self,
        app_id: str,
        private_key: str,
        *,
        http_client: httpx.AsyncClient,
        api_url: str = "https://api.github.com",
        clock: cabc.Callable[[], float] = time.time,
    ) -> None:
        """Store credentials and the HTTP client."""
        self._app_id = app_id
        self._private_key = private_key
        self._client = http_client
        self._api_url = api_url.rstrip("/")
        self._clock = clock

    def app_jwt(self) -> str:
        """Return a freshly signed App JWT.

        Raises
        ------
        GitHubConfigError
            If the private key cannot be used for RS256 signing.

        """
        now = int(self._clock())
        payload = {
            "iat": now - _JWT_BACKDATE_S,
            "exp": now + _JWT_LIFETIME_S,
            "iss": self._app_id,
        }
        try:
            return jwt.encode(payload, self._private_key, algorithm=_JWT_ALGORITHM)
        except (jwt.PyJWTError, ValueError, TypeError) as exc:
            raise GitHubConfigError.invalid_private_key(str(exc)) from exc

    async def installation_token(self, installation_id: int) -> str:
        """Exchange a new App JWT for an installation access token.

        Raises
        ------
        GitHubAPIError
            If GitHub rejects the exchange.
        GitHubResponseShapeError
            If the response carries no token.

        """
        path = f"/app/installations/{installation_id}/access_tokens"
        response = await self._client.post(
            f"{self._api_url}{path}",
            headers=github_headers(self.app_jwt()),
        )
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise GitHubAPIError.http_error("POST", path, response.status_code)

        decoded = msgspec.json.decode(response.content, type=_InstallationToken)
        if not decoded.token:
            raise GitHubResponseShapeError.missing("token")
        return decoded.token


__all__ = ["AppTokenProvider", "GitHubAppAuth", "github_headers"]
