"""Create claims for the author of a merged pull request.

The handler runs for every ``pull_request`` ``closed`` delivery and walks a
linear set of gates: the pull request must be merged, its author must not be a
bot, and the repository owner must be known. Passing all three, it asks the
claims API to create claims for the author and, when any were created, posts a
congratulation comment on the pull request.
"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

from gitpoap_bot.claims import PullRequestClaim, describe_target, encode_request
from gitpoap_bot.comments import generate_comment
from gitpoap_bot.handlers.dependencies import HANDLER_FAILURES, HandlerOutcome

if typ.TYPE_CHECKING:
    from gitpoap_bot.events import PullRequestEvent
    from gitpoap_bot.handlers.dependencies import HandlerDependencies

_HANDLER = "merge"


def _diagnostic_context(event: PullRequestEvent) -> dict[str, object]:
    return {
        "repo": event.repository.name,
        "owner": event.repository.owner_login,
        "pull_request_number": event.number,
        "sender_id": event.pull_request.user.id,
    }


def _target(event: PullRequestEvent) -> str:
    repo = event.repository
    return f"{repo.owner_login}/{repo.name}/pulls/{event.number}"


class MergeHandler:
    """Handle ``pull_request.closed`` deliveries.

    Parameters
    ----------
    dependencies
        Shared handler collaborators.

    """

    def __init__(self, dependencies: HandlerDependencies) -> None:
        """Bind the handler to its collaborators."""
        self._deps = dependencies
        self._events = dependencies.event_logger

    async def handle(self, event: PullRequestEvent) -> HandlerOutcome:
        """Process one delivery; never raises for external failures."""
        try:
            return await self._process(event)
        except HANDLER_FAILURES as exc:
            self._events.log_exception(handler=_HANDLER, target=_target(event), exc=exc)
            self._deps.reporter.capture_exception(
                exc, context=_diagnostic_context(event)
            )
            return HandlerOutcome.FAILED

    async def _process(self, event: PullRequestEvent) -> HandlerOutcome:
        target = _target(event)
        if not event.is_merge:
            self._events.log_skipped(
                handler=_HANDLER, target=target, reason="closed without merging"
            )
            return HandlerOutcome.SKIPPED

        owner = event.repository.owner_login
        repo = event.repository.name
        author = event.pull_request.user
        self._events.log_received(
            handler=_HANDLER,
            target=target,
            url=f"https://github.com/{owner}/{repo}/pull/{event.number}",
        )

        if author.is_bot:
            self._events.log_skipped(
                handler=_HANDLER,
                target=target,
                reason=f"pull request opened by bot {author.login!r}",
            )
            return HandlerOutcome.SKIPPED

        if not owner:
            message = f"Owner of '{repo}' repository is empty"
            self._events.log_failed(handler=_HANDLER, target=target, message=message)
            self._deps.reporter.capture_message(
                message, context=_diagnostic_context(event)
            )
            return HandlerOutcome.FAILED

        return await self._request_claims(
            event,
            PullRequestClaim(
                organization=owner,
                repo=repo,
                pull_request_number=event.number,
                contributor_github_ids=(author.id,),
                was_earned_by_mention=False,
            ),
        )

    async def _request_claims(
        self, event: PullRequestEvent, request: PullRequestClaim
    ) -> HandlerOutcome:
        target = describe_target(request)
        body = encode_request(request).decode()
        self._events.log_claims_requested(handler=_HANDLER, target=target, body=body)

        result = await self._deps.claims_client().create_claims(
            request, token=self._deps.app_auth.app_jwt()
        )

        if result.status_code == HTTPStatus.NOT_FOUND:
            self._events.log_claims_not_found(
                handler=_HANDLER, target=target, response_text=result.text, body=body
            )
            return HandlerOutcome.SKIPPED

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
            self._events.log_skipped(
                handler=_HANDLER,
                target=target,
                reason="no new claims were created by this pull request",
            )
            return HandlerOutcome.SKIPPED

        self._events.log_claims_created(
            handler=_HANDLER, target=target, count=len(claims)
        )
        github = await self._deps.github_client(event.installation)
        url = await github.create_issue_comment(
            request.organization,
            request.repo,
            request.pull_request_number,
            generate_comment(claims),
        )
        self._events.log_comment_posted(handler=_HANDLER, target=target, url=url)
        return HandlerOutcome.COMMENTED


__all__ = ["MergeHandler"]
