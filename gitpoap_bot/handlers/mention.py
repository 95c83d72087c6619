"""Create claims for users tagged alongside the bot in a comment.

Only collaborators with admin, maintain or push access can award claims this
way. Comments on pull requests create pull-request claims; comments on plain
issues create issue claims.
"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

from gitpoap_bot.claims import (
    ClaimCreationRequest,
    IssueClaim,
    PullRequestClaim,
    describe_target,
    encode_request,
)
from gitpoap_bot.comments import generate_issue_comment
from gitpoap_bot.github.errors import GitHubAPIError
from gitpoap_bot.handlers.dependencies import HANDLER_FAILURES, HandlerOutcome
from gitpoap_bot.parsing import extract_mentions, parse_comment

if typ.TYPE_CHECKING:
    from gitpoap_bot.events import IssueCommentEvent
    from gitpoap_bot.github import GitHubRestClient
    from gitpoap_bot.handlers.dependencies import HandlerDependencies

_HANDLER = "mention"


def _diagnostic_context(event: IssueCommentEvent) -> dict[str, object]:
    return {
        "repo": event.repository.name,
        "owner": event.repository.owner_login,
        "sender": event.sender.login,
        "comment": event.comment.body,
        "issue_number": event.issue.number,
        "link": event.issue.html_url,
    }


def _target(event: IssueCommentEvent) -> str:
    kind = "pulls" if event.is_pull_request else "issues"
    return (
        f"{event.repository.owner_login}/{event.repository.name}"
        f"/{kind}/{event.issue.number}"
    )


def build_claim_request(
    event: IssueCommentEvent, contributor_ids: tuple[int, ...]
) -> ClaimCreationRequest:
    """Return the claim request variant matching the commented thread."""
    owner = event.repository.owner_login
    repo = event.repository.name
    if event.is_pull_request:
        return PullRequestClaim(
            organization=owner,
            repo=repo,
            pull_request_number=event.issue.number,
            contributor_github_ids=contributor_ids,
            was_earned_by_mention=True,
        )
    return IssueClaim(
        organization=owner,
        repo=repo,
        issue_number=event.issue.number,
        contributor_github_ids=contributor_ids,
        was_earned_by_mention=True,
    )


class MentionHandler:
    """Handle ``issue_comment.created`` deliveries.

    Parameters
    ----------
    dependencies
        Shared handler collaborators.

    """

    def __init__(self, dependencies: HandlerDependencies) -> None:
        """Bind the handler to its collaborators."""
        self._deps = dependencies
        self._events = dependencies.event_logger
        self._bot_handle = dependencies.config.bot_handle

    async def handle(self, event: IssueCommentEvent) -> HandlerOutcome:
        """Process one delivery; never raises for external failures."""
        try:
            return await self._process(event)
        except HANDLER_FAILURES as exc:
            self._events.log_exception(handler=_HANDLER, target=_target(event), exc=exc)
            self._deps.reporter.capture_exception(
                exc, context=_diagnostic_context(event)
            )
            return HandlerOutcome.FAILED

    def _skip(self, event: IssueCommentEvent, reason: str) -> HandlerOutcome:
        self._events.log_skipped(handler=_HANDLER, target=_target(event), reason=reason)
        return HandlerOutcome.SKIPPED

    async def _process(self, event: IssueCommentEvent) -> HandlerOutcome:
        body = event.comment.body
        # Most comments never mention the bot; skip them before minting a token.
        bot_key = self._bot_handle.casefold()
        if not any(h.casefold() == bot_key for h in extract_mentions(body)):
            return self._skip(event, f"comment does not tag @{self._bot_handle}")

        github = await self._deps.github_client(event.installation)
        parsed = await parse_comment(body, github, bot_handle=self._bot_handle)
        if not parsed.is_bot_mentioned:
            return self._skip(event, f"comment does not tag @{self._bot_handle}")

        owner = event.repository.owner_login
        repo = event.repository.name
        if not owner:
            message = f"Owner of '{repo}' repository is empty"
            self._events.log_failed(
                handler=_HANDLER, target=_target(event), message=message
            )
            self._deps.reporter.capture_message(
                message, context=_diagnostic_context(event)
            )
            return HandlerOutcome.FAILED

        sender = event.sender.login
        try:
            permissions = await github.get_collaborator_permissions(
                owner, repo, sender
            )
        except GitHubAPIError as exc:
            if not exc.is_not_found:
                raise
            return self._skip(event, f"{sender} is not a collaborator on {repo}")
        if permissions is None or not permissions.allows_claim_creation():
            return self._skip(
                event, f"{sender} lacks admin, maintain or push permission"
            )

        if not parsed.contributor_ids:
            return self._skip(event, f"{sender} did not tag any resolvable users")

        request = build_claim_request(event, parsed.contributor_ids)
        return await self._request_claims(event, github, request)

    async def _request_claims(
        self,
        event: IssueCommentEvent,
        github: GitHubRestClient,
        request: ClaimCreationRequest,
    ) -> HandlerOutcome:
        target = describe_target(request)
        body = encode_request(request).decode()
        self._events.log_claims_requested(handler=_HANDLER, target=target, body=body)

        result = await self._deps.claims_client().create_claims(
            request, token=self._deps.app_auth.app_jwt()
        )
        if result.status_code != HTTPStatus.OK:
            message = (
                "An issue occurred when attempting to create new claims "
                f"(response code: {result.status_code}): {result.text}"
            )
            self._events.log_failed(
                handler=_HANDLER, target=target, message=f"{message} - {body}"
            )
            self._deps.reporter.capture_message(
                message, context={**_diagnostic_context(event), "body": body}
            )
            return HandlerOutcome.FAILED

        claims = result.new_claims
        if not claims:
            return self._skip(
                event,
                f"no new claims were created by tagging @{self._bot_handle}",
            )

        self._events.log_claims_created(
            handler=_HANDLER, target=target, count=len(claims)
        )
        link = event.issue.html_url or event.comment.html_url
        self._deps.tasks.spawn(
            self._deps.notifier.notify_bot_mentioned(
                comment=event.comment.body,
                sender=event.sender.login,
                html_url=link,
                repo=event.repository.name,
            ),
            name=f"notify-mention:{target}",
        )

        url = await github.create_issue_comment(
            request.organization,
            request.repo,
            event.issue.number,
            generate_issue_comment(claims),
        )
        self._events.log_comment_posted(handler=_HANDLER, target=target, url=url)
        return HandlerOutcome.COMMENTED


__all__ = ["MentionHandler", "build_claim_request"]
