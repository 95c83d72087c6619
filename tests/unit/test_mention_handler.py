"""Unit tests for the bot-mention comment handler."""

from __future__ import annotations

import typing as typ

import pytest

from gitpoap_bot.claims import IssueClaim, PullRequestClaim
from gitpoap_bot.errors import NotificationError
from gitpoap_bot.events import decode_issue_comment_event
from gitpoap_bot.github.errors import GitHubAPIError
from gitpoap_bot.handlers import HandlerOutcome, MentionHandler, build_claim_request
from tests.helpers.fake_services import READ_PERMISSIONS
from tests.helpers.github_events import claim, encode, issue_comment_payload

if typ.TYPE_CHECKING:
    from gitpoap_bot.handlers import HandlerDependencies
    from tests.helpers.fake_services import (
        FakeAppAuth,
        FakeServices,
        RecordingReporter,
    )


def _event(**payload: typ.Any):  # noqa: ANN202, ANN401
    return decode_issue_comment_event(encode(issue_comment_payload(**payload)))


async def _handle(
    deps: HandlerDependencies, **payload: typ.Any  # noqa: ANN401
) -> HandlerOutcome:
    return await MentionHandler(deps).handle(_event(**payload))


@pytest.fixture
def alice_and_bob(services: FakeServices) -> FakeServices:
    """Register two resolvable contributors."""
    services.add_user("alice", 10)
    services.add_user("bob", 20)
    return services


@pytest.mark.asyncio
async def test_mention_on_issue_creates_issue_claims(
    deps: HandlerDependencies, alice_and_bob: FakeServices
) -> None:
    """A privileged maintainer tagging two users on an issue creates claims."""
    services = alice_and_bob
    services.claims_body = {
        "newClaims": [
            claim(claim_id=1, handle="alice"),
            claim(claim_id=2, handle="bob"),
        ]
    }

    outcome = await _handle(deps, body="@gitpoap-bot @alice @bob")
    await deps.tasks.drain()

    assert outcome is HandlerOutcome.COMMENTED
    (claims_call,) = services.claims_requests
    assert claims_call.json() == {
        "issue": {
            "organization": "acme",
            "repo": "widgets",
            "issueNumber": 5,
            "contributorGithubIds": [10, 20],
            "wasEarnedByMention": True,
        }
    }
    (comment,) = services.comments
    assert comment.path == "/api/repos/acme/widgets/issues/5/comments"
    assert comment.json()["body"].startswith("Woohoo, @alice, @bob!")
    (slack,) = services.slack_messages
    text = slack.json()["text"]
    assert "maintainer" in text
    assert "https://github.com/acme/widgets/issues/5" in text


@pytest.mark.asyncio
async def test_mention_on_pull_request_creates_pull_request_claims(
    deps: HandlerDependencies, alice_and_bob: FakeServices
) -> None:
    """Comments on PR threads use the pull request variant."""
    services = alice_and_bob
    services.claims_body = {"newClaims": [claim(claim_id=1, handle="alice")]}

    outcome = await _handle(
        deps, body="@gitpoap-bot @alice", number=8, is_pull_request=True
    )

    assert outcome is HandlerOutcome.COMMENTED
    (claims_call,) = services.claims_requests
    assert claims_call.json() == {
        "pullRequest": {
            "organization": "acme",
            "repo": "widgets",
            "pullRequestNumber": 8,
            "contributorGithubIds": [10],
            "wasEarnedByMention": True,
        }
    }
    (comment,) = services.comments
    assert comment.path == "/api/repos/acme/widgets/issues/8/comments"


@pytest.mark.asyncio
async def test_comment_without_bot_mention_makes_no_calls(
    deps: HandlerDependencies, alice_and_bob: FakeServices
) -> None:
    """Ordinary comments are skipped before any credential is minted."""
    outcome = await _handle(deps, body="thanks @alice and @bob!")

    assert outcome is HandlerOutcome.SKIPPED
    assert alice_and_bob.requests == []
    assert typ.cast("FakeAppAuth", deps.app_auth).installation_requests == []


@pytest.mark.asyncio
async def test_read_only_sender_is_ignored(
    deps: HandlerDependencies, alice_and_bob: FakeServices
) -> None:
    """Users without admin, maintain or push access cannot award claims."""
    services = alice_and_bob
    services.permissions["maintainer"] = READ_PERMISSIONS

    outcome = await _handle(deps, body="@gitpoap-bot @alice")

    assert outcome is HandlerOutcome.SKIPPED
    assert len(services.permission_checks) == 1
    assert services.claims_requests == []
    assert services.comments == []


@pytest.mark.asyncio
async def test_missing_permission_set_is_ignored(
    deps: HandlerDependencies, alice_and_bob: FakeServices
) -> None:
    """A permission response without flags counts as unprivileged."""
    alice_and_bob.permissions["maintainer"] = None

    outcome = await _handle(deps, body="@gitpoap-bot @alice")

    assert outcome is HandlerOutcome.SKIPPED
    assert alice_and_bob.claims_requests == []


@pytest.mark.asyncio
async def test_bot_only_mention_creates_nothing(
    deps: HandlerDependencies, services: FakeServices
) -> None:
    """Tagging the bot without contributors ends before the claims API."""
    outcome = await _handle(deps, body="@gitpoap-bot")

    assert outcome is HandlerOutcome.SKIPPED
    assert services.user_lookups == []
    assert services.claims_requests == []


@pytest.mark.asyncio
async def test_unresolvable_handles_are_dropped(
    deps: HandlerDependencies, alice_and_bob: FakeServices
) -> None:
    """Unknown and erroring handles are skipped; the rest proceed."""
    services = alice_and_bob
    services.user_errors["carol"] = 500
    services.claims_body = {"newClaims": [claim(claim_id=1, handle="alice")]}

    outcome = await _handle(deps, body="@gitpoap-bot @ghost @carol @alice")

    assert outcome is HandlerOutcome.COMMENTED
    assert services.claims_requests[0].json()["issue"]["contributorGithubIds"] == [10]
    assert len(services.user_lookups) == 3


@pytest.mark.asyncio
async def test_no_resolvable_handles_creates_nothing(
    deps: HandlerDependencies, services: FakeServices
) -> None:
    """When every tagged user fails to resolve no claims are requested."""
    outcome = await _handle(deps, body="@gitpoap-bot @ghost")

    assert outcome is HandlerOutcome.SKIPPED
    assert services.claims_requests == []


@pytest.mark.asyncio
async def test_slow_lookup_drops_only_that_handle(
    deps: HandlerDependencies, alice_and_bob: FakeServices
) -> None:
    """A timed-out user lookup does not cost the other contributors."""
    services = alice_and_bob
    services.slow_users.add("alice")
    services.claims_body = {"newClaims": [claim(claim_id=2, handle="bob")]}

    outcome = await _handle(deps, body="@gitpoap-bot @alice @bob")

    assert outcome is HandlerOutcome.COMMENTED
    assert services.claims_requests[0].json()["issue"]["contributorGithubIds"] == [20]


@pytest.mark.asyncio
async def test_non_collaborator_sender_is_ignored(
    deps: HandlerDependencies,
    alice_and_bob: FakeServices,
    reporter: RecordingReporter,
) -> None:
    """A 404 from the permission lookup means the sender has no access."""
    alice_and_bob.permission_errors["maintainer"] = 404

    outcome = await _handle(deps, body="@gitpoap-bot @alice")

    assert outcome is HandlerOutcome.SKIPPED
    assert alice_and_bob.claims_requests == []
    assert reporter.exceptions == []


@pytest.mark.asyncio
async def test_permission_lookup_error_fails_run(
    deps: HandlerDependencies,
    alice_and_bob: FakeServices,
    reporter: RecordingReporter,
) -> None:
    """Other permission lookup errors are reported as failures."""
    alice_and_bob.permission_errors["maintainer"] = 502

    outcome = await _handle(deps, body="@gitpoap-bot @alice")

    assert outcome is HandlerOutcome.FAILED
    assert alice_and_bob.claims_requests == []
    (exc, _) = reporter.exceptions[0]
    assert isinstance(exc, GitHubAPIError)
    assert exc.status_code == 502


@pytest.mark.asyncio
async def test_empty_owner_is_reported(
    deps: HandlerDependencies,
    alice_and_bob: FakeServices,
    reporter: RecordingReporter,
) -> None:
    """A missing owner login is reported with the comment context."""
    outcome = await _handle(deps, body="@gitpoap-bot @alice", owner=None)

    assert outcome is HandlerOutcome.FAILED
    assert alice_and_bob.permission_checks == []
    (message, context) = reporter.messages[0]
    assert message == "Owner of 'widgets' repository is empty"
    assert context["sender"] == "maintainer"
    assert context["comment"] == "@gitpoap-bot @alice"
    assert context["issue_number"] == 5


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [404, 500])
async def test_claims_errors_are_reported(
    deps: HandlerDependencies,
    alice_and_bob: FakeServices,
    reporter: RecordingReporter,
    status: int,
) -> None:
    """Every non-200 claims response is reported and nothing is posted."""
    alice_and_bob.claims_status = status
    alice_and_bob.claims_body = "nope"

    outcome = await _handle(deps, body="@gitpoap-bot @alice")

    assert outcome is HandlerOutcome.FAILED
    assert alice_and_bob.comments == []
    assert alice_and_bob.slack_messages == []
    (message, context) = reporter.messages[0]
    assert f"response code: {status}" in message
    assert "body" in context


@pytest.mark.asyncio
async def test_no_new_claims_posts_nothing(
    deps: HandlerDependencies, alice_and_bob: FakeServices
) -> None:
    """An empty ``newClaims`` list neither notifies nor comments."""
    outcome = await _handle(deps, body="@gitpoap-bot @alice")
    await deps.tasks.drain()

    assert outcome is HandlerOutcome.SKIPPED
    assert alice_and_bob.comments == []
    assert alice_and_bob.slack_messages == []


@pytest.mark.asyncio
async def test_notification_failure_does_not_block_comment(
    deps: HandlerDependencies,
    alice_and_bob: FakeServices,
    reporter: RecordingReporter,
) -> None:
    """A Slack error is reported from the detached task only."""
    services = alice_and_bob
    services.slack_status = 500
    services.claims_body = {"newClaims": [claim(claim_id=1, handle="alice")]}

    outcome = await _handle(deps, body="@gitpoap-bot @alice")
    await deps.tasks.drain()

    assert outcome is HandlerOutcome.COMMENTED
    assert len(services.comments) == 1
    (exc, context) = reporter.exceptions[0]
    assert isinstance(exc, NotificationError)
    assert context["task"] == "notify-mention:acme/widgets/issues/5"


@pytest.mark.asyncio
async def test_github_outage_fails_run(
    deps: HandlerDependencies,
    services: FakeServices,
    reporter: RecordingReporter,
) -> None:
    """Transport failures during lookups fail the run and are reported."""
    services.github_down = True

    outcome = await _handle(deps, body="@gitpoap-bot @alice")

    assert outcome is HandlerOutcome.FAILED
    assert services.claims_requests == []
    (_, context) = reporter.exceptions[0]
    assert context["repo"] == "widgets"


@pytest.mark.asyncio
async def test_missing_installation_fails_run(
    deps: HandlerDependencies,
    services: FakeServices,
    reporter: RecordingReporter,
) -> None:
    """Deliveries without an installation cannot authenticate."""
    outcome = await _handle(deps, body="@gitpoap-bot @alice", installation_id=None)

    assert outcome is HandlerOutcome.FAILED
    assert services.requests == []
    assert len(reporter.exceptions) == 1


class TestBuildClaimRequest:
    """Tests for choosing the claim request variant."""

    def test_issue_thread(self) -> None:
        """Plain issues map to issue claims."""
        request = build_claim_request(_event(body="", number=3), (1, 2))
        assert request == IssueClaim(
            organization="acme",
            repo="widgets",
            issue_number=3,
            contributor_github_ids=(1, 2),
            was_earned_by_mention=True,
        )

    def test_pull_request_thread(self) -> None:
        """PR threads map to pull request claims."""
        request = build_claim_request(
            _event(body="", number=3, is_pull_request=True), (1,)
        )
        assert request == PullRequestClaim(
            organization="acme",
            repo="widgets",
            pull_request_number=3,
            contributor_github_ids=(1,),
            was_earned_by_mention=True,
        )
