"""GitHub REST client covering the calls the webhook handlers make."""

from __future__ import annotations

import typing as typ
import urllib.parse

import httpx
import msgspec

from .auth import github_headers
from .errors import GitHubAPIError, GitHubResponseShapeError

_HTTP_ERROR_STATUS_THRESHOLD = 400

# Collaborator permissions that allow triggering claims via mention.
PRIVILEGED_PERMISSIONS: tuple[str, ...] = ("admin", "maintain", "push")


class UserLookup(typ.Protocol):
    """Resolve a GitHub login to its numeric account id."""

    async def get_user_id(self, login: str) -> int:
        """Return the id for ``login``; raise ``GitHubAPIError`` on failure."""
        ...


class RepositoryPermissions(msgspec.Struct, frozen=True):
    """Capability flags GitHub reports for a collaborator."""

    admin: bool = False
    maintain: bool = False
    push: bool = False
    triage: bool = False
    pull: bool = False

    def allows_claim_creation(self) -> bool:
        """Return whether any privileged permission is granted."""
        return any(getattr(self, name) for name in PRIVILEGED_PERMISSIONS)


class _PermissionUser(msgspec.Struct):
    permissions: RepositoryPermissions | None = None


class _CollaboratorPermission(msgspec.Struct):
    permission: str | None = None
    user: _PermissionUser | None = None


class _User(msgspec.Struct):
    id: int | None = None


class _IssueComment(msgspec.Struct):
    html_url: str = ""


class GitHubRestClient:
    """Installation-authenticated GitHub REST client.

    One instance is built per webhook delivery around the shared
    ``httpx.AsyncClient``; the token never outlives the delivery.

    Parameters
    ----------
    http_client
        Shared async HTTP client.
    token
        Installation access token for the delivery's installation.
    api_url
        GitHub REST base URL.

    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        token: str,
        api_url: str = "https://api.github.com",
    ) -> None:
        """Bind the client to one installation token."""
        self._client = http_client
        self._headers = github_headers(token)
        self._api_url = api_url.rstrip("/")

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, typ.Any] | None = None,
    ) -> httpx.Response:
        response = await self._client.request(
            method,
            f"{self._api_url}{path}",
            headers=self._headers,
            json=json,
        )
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise GitHubAPIError.http_error(method, path, response.status_code)
        return response

    async def get_user_id(self, login: str) -> int:
        """Return the numeric id of the account named ``login``."""
        response = await self._request("GET", f"/users/{_quote(login)}")
        user = msgspec.json.decode(response.content, type=_User)
        if user.id is None:
            raise GitHubResponseShapeError.missing("id")
        return user.id

    async def get_collaborator_permissions(
        self, owner: str, repo: str, username: str
    ) -> RepositoryPermissions | None:
        """Return ``username``'s permission flags on ``owner/repo``.

        ``None`` means GitHub did not report any permission set.
        """
        path = (
            f"/repos/{_quote(owner)}/{_quote(repo)}"
            f"/collaborators/{_quote(username)}/permission"
        )
        response = await self._request("GET", path)
        decoded = msgspec.json.decode(response.content, type=_CollaboratorPermission)
        if decoded.user is None:
            return None
        return decoded.user.permissions

    async def create_issue_comment(
        self, owner: str, repo: str, number: int, body: str
    ) -> str:
        """Post ``body`` on issue or pull request ``number``; return its URL."""
        path = f"/repos/{_quote(owner)}/{_quote(repo)}/issues/{number}/comments"
        response = await self._request("POST", path, json={"body": body})
        return msgspec.json.decode(response.content, type=_IssueComment).html_url


def _quote(segment: str) -> str:
    return urllib.parse.quote(segment, safe="")


__all__ = [
    "PRIVILEGED_PERMISSIONS",
    "GitHubRestClient",
    "RepositoryPermissions",
    "UserLookup",
]
