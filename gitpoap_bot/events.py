"""Typed views of the GitHub webhook payloads the bot consumes.

Only the fields read by the handlers are modelled; msgspec ignores the rest
of the (very large) GitHub payloads.
"""

from __future__ import annotations

import re

import msgspec

BOT_ACCOUNT_TYPE = "Bot"


class Account(msgspec.Struct, kw_only=True, frozen=True):
    """GitHub user, organisation or bot account."""

    id: int
    login: str = ""
    type: str = "User"

    @property
    def is_bot(self) -> bool:
        """Return whether GitHub marks the account as a bot."""
        return self.type == BOT_ACCOUNT_TYPE


class RepositoryOwner(msgspec.Struct, kw_only=True, frozen=True):
    """Owner block of a repository payload; ``login`` can be null."""

    login: str | None = None


class Repository(msgspec.Struct, kw_only=True, frozen=True):
    """Repository the delivery belongs to."""

    name: str
    owner: RepositoryOwner = msgspec.field(default_factory=RepositoryOwner)

    @property
    def owner_login(self) -> str:
        """Return the owner login, empty when GitHub sent none."""
        return self.owner.login or ""


class Installation(msgspec.Struct, kw_only=True, frozen=True):
    """GitHub App installation that received the delivery."""

    id: int


class PullRequest(msgspec.Struct, kw_only=True, frozen=True):
    """Pull request fields read by the merge handler."""

    number: int
    user: Account
    merged: bool = False
    html_url: str = ""


class PullRequestEvent(msgspec.Struct, kw_only=True, frozen=True):
    """``pull_request`` delivery."""

    action: str
    number: int
    pull_request: PullRequest
    repository: Repository
    sender: Account
    installation: Installation | None = None

    @property
    def is_merge(self) -> bool:
        """Return whether this is a close that merged the pull request."""
        return self.action == "closed" and self.pull_request.merged


class Issue(msgspec.Struct, kw_only=True, frozen=True):
    """Issue (or pull request viewed as an issue) carrying a comment."""

    number: int
    html_url: str | None = None


class Comment(msgspec.Struct, kw_only=True, frozen=True):
    """Newly created comment."""

    body: str = ""
    html_url: str = ""


class IssueCommentEvent(msgspec.Struct, kw_only=True, frozen=True):
    """``issue_comment`` delivery."""

    action: str
    issue: Issue
    comment: Comment
    repository: Repository
    sender: Account
    installation: Installation | None = None

    @property
    def is_pull_request(self) -> bool:
        """Return whether the commented issue is a pull request.

        GitHub delivers PR conversation comments as ``issue_comment`` events;
        the issue's HTML URL then points at ``/pull/<number>``.
        """
        if not self.issue.html_url:
            return False
        pattern = rf"/pull/{self.issue.number}\b"
        return re.search(pattern, self.issue.html_url) is not None


class DeliveryHeader(msgspec.Struct, kw_only=True, frozen=True):
    """Minimal view used to route a delivery before full decoding."""

    action: str = ""


def decode_pull_request_event(raw: bytes) -> PullRequestEvent:
    """Decode a ``pull_request`` delivery body."""
    return msgspec.json.decode(raw, type=PullRequestEvent)


def decode_issue_comment_event(raw: bytes) -> IssueCommentEvent:
    """Decode an ``issue_comment`` delivery body."""
    return msgspec.json.decode(raw, type=IssueCommentEvent)


def decode_action(raw: bytes) -> str:
    """Return the ``action`` field of any delivery body."""
    return msgspec.json.decode(raw, type=DeliveryHeader).action
