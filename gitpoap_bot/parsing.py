"""Detect bot mentions and tagged contributors in comment text.

A comment such as ``"@gitpoap-bot @alice @bob"`` asks the bot to create
claims for ``alice`` and ``bob``. Parsing happens in two steps:
:func:`extract_mentions` finds ``@handle`` tokens without any I/O, then
:func:`parse_comment` resolves every non-bot handle to a numeric GitHub id.
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

import httpx

from gitpoap_bot.github.errors import GitHubAPIError, GitHubResponseShapeError
from gitpoap_bot.logging import get_logger, log_warning

if typ.TYPE_CHECKING:
    from gitpoap_bot.github.client import UserLookup

logger = get_logger(__name__)

# GitHub logins: 1-39 alphanumerics or hyphens, no leading hyphen. The "@"
# must not follow a word character, "@" or "/" so e-mail addresses and
# paths are not treated as mentions.
_MENTION_RE = re.compile(
    r"(?<![\w@/])@([A-Za-z0-9](?:[A-Za-z0-9]|-(?=[A-Za-z0-9])){0,38})(?!\w)"
)


@dc.dataclass(frozen=True, slots=True)
class CommentParseResult:
    """Outcome of parsing one comment.

    Attributes
    ----------
    is_bot_mentioned
        ``True`` when the comment tags the bot handle.
    contributor_ids
        Ids of the other tagged users in first-occurrence order, without
        duplicates.

    """

    is_bot_mentioned: bool
    contributor_ids: tuple[int, ...] = ()


def extract_mentions(text: str) -> list[str]:
    """Return the distinct ``@`` handles in ``text`` in first-occurrence order.

    Handles are returned as written; duplicates are detected
    case-insensitively because GitHub logins are case-insensitive.
    """
    seen: set[str] = set()
    handles: list[str] = []
    for match in _MENTION_RE.finditer(text):
        handle = match.group(1)
        key = handle.casefold()
        if key in seen:
            continue
        seen.add(key)
        handles.append(handle)
    return handles


async def parse_comment(
    text: str, lookup: UserLookup, *, bot_handle: str
) -> CommentParseResult:
    """Parse ``text`` and resolve tagged handles through ``lookup``.

    A lookup that fails for one handle drops only that handle: an error
    response, a response without an id, or a timeout. Connection failures
    propagate, and so does a timeout when every lookup timed out.

    Parameters
    ----------
    text
        Raw comment body.
    lookup
        Resolves a login to its numeric GitHub id.
    bot_handle
        The bot's own login, without ``@``.

    Returns
    -------
    CommentParseResult
        Mention flag and resolved contributor ids.

    """
    bot_key = bot_handle.lstrip("@").casefold()
    is_bot_mentioned = False
    contributor_ids: list[int] = []
    attempted = 0
    timeouts: list[httpx.TimeoutException] = []

    for handle in extract_mentions(text):
        if handle.casefold() == bot_key:
            is_bot_mentioned = True
            continue
        attempted += 1
        try:
            user_id = await lookup.get_user_id(handle)
        except GitHubAPIError as exc:
            log_warning(
                logger,
                "Skipping mention @%s: user lookup failed (status=%s)",
                handle,
                exc.status_code,
            )
            continue
        except GitHubResponseShapeError as exc:
            log_warning(logger, "Skipping mention @%s: %s", handle, exc)
            continue
        except httpx.TimeoutException as exc:
            log_warning(logger, "Skipping mention @%s: user lookup timed out", handle)
            timeouts.append(exc)
            continue
        if user_id not in contributor_ids:
            contributor_ids.append(user_id)

    if timeouts and len(timeouts) == attempted:
        raise timeouts[-1]

    return CommentParseResult(
        is_bot_mentioned=is_bot_mentioned,
        contributor_ids=tuple(contributor_ids),
    )


__all__ = ["CommentParseResult", "extract_mentions", "parse_comment"]
