"""Team-chat notifications for mention-triggered claims."""

from __future__ import annotations

import typing as typ

import httpx

from gitpoap_bot.errors import NotificationError
from gitpoap_bot.logging import get_logger, log_info

logger = get_logger(__name__)

_HTTP_ERROR_STATUS_THRESHOLD = 400
# Slack truncates long messages; quoted comments are clipped well before that.
_MAX_QUOTED_COMMENT = 1000


class MentionNotifier(typ.Protocol):
    """Announce that the bot created claims after being tagged."""

    async def notify_bot_mentioned(
        self, *, comment: str, sender: str, html_url: str, repo: str
    ) -> None:
        """Deliver the notification or raise ``NotificationError``."""
        ...


def format_mention_message(
    *, comment: str, sender: str, html_url: str, repo: str
) -> str:
    """Return the Slack ``mrkdwn`` text for a bot mention."""
    quoted = comment.strip()
    if len(quoted) > _MAX_QUOTED_COMMENT:
        quoted = quoted[: _MAX_QUOTED_COMMENT - 3] + "..."
    quote_block = "\n".join(f"> {line}" for line in quoted.splitlines()) or "> "
    return (
        f":robot_face: *{sender}* mentioned the bot in *{repo}* and new claims "
        f"were created.\n<{html_url}|View the thread>\n{quote_block}"
    )


class SlackNotifier:
    """Post notifications to a Slack incoming webhook.

    Parameters
    ----------
    http_client
        Shared async HTTP client.
    webhook_url
        Slack incoming webhook URL.

    """

    def __init__(self, http_client: httpx.AsyncClient, *, webhook_url: str) -> None:
        """Bind the notifier to one incoming webhook."""
        self._client = http_client
        self._webhook_url = webhook_url

    async def notify_bot_mentioned(
        self, *, comment: str, sender: str, html_url: str, repo: str
    ) -> None:
        """Post the mention message to Slack.

        Raises
        ------
        NotificationError
            If Slack answers with a non-2xx status.

        """
        text = format_mention_message(
            comment=comment, sender=sender, html_url=html_url, repo=repo
        )
        response = await self._client.post(self._webhook_url, json={"text": text})
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise NotificationError.http_error(response.status_code)
        log_info(
            logger, "Sent Slack notification for mention in %s by %s", repo, sender
        )


class NullNotifier:
    """Notifier used when ``SLACK_WEBHOOK_URL`` is not configured."""

    async def notify_bot_mentioned(
        self, *, comment: str, sender: str, html_url: str, repo: str
    ) -> None:
        """Log that the notification was not sent."""
        del comment
        log_info(
            logger,
            "Slack notifications disabled; not announcing mention by %s in %s (%s)",
            sender,
            repo,
            html_url,
        )


__all__ = [
    "MentionNotifier",
    "NullNotifier",
    "SlackNotifier",
    "format_mention_message",
]
