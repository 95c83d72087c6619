"""Wire models for the GitPOAP claims API.

A claim-creation request is either pull-request scoped or issue scoped. The
two variants share a body shape apart from the number field, and the API
tells them apart by the wrapping key (``pullRequest`` or ``issue``).
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import msgspec


class PullRequestClaim(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Claims earned through a pull request.

    Attributes
    ----------
    organization
        Repository owner login.
    repo
        Repository name.
    pull_request_number
        Number of the merged or commented pull request.
    contributor_github_ids
        Numeric GitHub ids of the recipients.
    was_earned_by_mention
        ``True`` when a privileged user tagged the recipients via the bot.

    """

    organization: str
    repo: str
    pull_request_number: int
    contributor_github_ids: tuple[int, ...]
    was_earned_by_mention: bool


class IssueClaim(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Claims earned on a plain issue thread."""

    organization: str
    repo: str
    issue_number: int
    contributor_github_ids: tuple[int, ...]
    was_earned_by_mention: bool


ClaimCreationRequest = PullRequestClaim | IssueClaim


def _envelope(request: ClaimCreationRequest) -> dict[str, ClaimCreationRequest]:
    """Wrap ``request`` under the key the claims API expects for its variant."""
    match request:
        case PullRequestClaim():
            return {"pullRequest": request}
        case IssueClaim():
            return {"issue": request}
        case _:
            typ.assert_never(request)


def encode_request(request: ClaimCreationRequest) -> bytes:
    """Serialise ``request`` to the JSON body of the create-claims call."""
    return msgspec.json.encode(_envelope(request))


def describe_target(request: ClaimCreationRequest) -> str:
    """Return ``owner/repo/pulls/N`` or ``owner/repo/issues/N`` for logs."""
    match request:
        case PullRequestClaim():
            number = request.pull_request_number
            return f"{request.organization}/{request.repo}/pulls/{number}"
        case IssueClaim():
            number = request.issue_number
            return f"{request.organization}/{request.repo}/issues/{number}"
        case _:
            typ.assert_never(request)


class ClaimCreationResponse(msgspec.Struct, frozen=True, rename="camel"):
    """Body of a successful create-claims call.

    Claims are opaque mappings passed through to comment rendering.
    """

    new_claims: list[dict[str, typ.Any]]


@dc.dataclass(frozen=True, slots=True)
class ClaimsAPIResult:
    """Outcome of a single create-claims call.

    Attributes
    ----------
    status_code
        HTTP status returned by the claims API.
    text
        Raw response body, kept for diagnostics on failures.
    response
        Decoded body when ``status_code`` is 200, else ``None``.

    """

    status_code: int
    text: str
    response: ClaimCreationResponse | None = None

    @property
    def new_claims(self) -> list[dict[str, typ.Any]]:
        """Return the created claims, empty for unsuccessful calls."""
        if self.response is None:
            return []
        return self.response.new_claims
