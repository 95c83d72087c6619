"""Route raw webhook deliveries to the matching handler."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from gitpoap_bot.events import (
    decode_action,
    decode_issue_comment_event,
    decode_pull_request_event,
)
from gitpoap_bot.handlers.mention import MentionHandler
from gitpoap_bot.handlers.merge import MergeHandler

if typ.TYPE_CHECKING:
    from gitpoap_bot.handlers.dependencies import HandlerDependencies, HandlerOutcome


@dc.dataclass(frozen=True, slots=True)
class DispatchResult:
    """What happened to one delivery.

    ``outcome`` is ``None`` when no handler subscribes to the event/action.
    """

    event: str
    action: str
    outcome: HandlerOutcome | None = None

    @property
    def handled(self) -> bool:
        """Return whether a handler processed the delivery."""
        return self.outcome is not None


class WebhookDispatcher:
    """Decode deliveries and hand them to the merge or mention handler.

    Parameters
    ----------
    merge_handler
        Handler for ``pull_request`` ``closed`` deliveries.
    mention_handler
        Handler for ``issue_comment`` ``created`` deliveries.

    """

    def __init__(
        self, *, merge_handler: MergeHandler, mention_handler: MentionHandler
    ) -> None:
        """Register the two handlers."""
        self._merge = merge_handler
        self._mention = mention_handler

    @classmethod
    def from_dependencies(cls, dependencies: HandlerDependencies) -> WebhookDispatcher:
        """Build both handlers around shared ``dependencies``."""
        return cls(
            merge_handler=MergeHandler(dependencies),
            mention_handler=MentionHandler(dependencies),
        )

    async def dispatch(self, event: str, raw: bytes) -> DispatchResult:
        """Handle ``raw`` as a delivery of GitHub event ``event``.

        Raises
        ------
        msgspec.DecodeError
            If the body is not JSON or lacks fields the handler needs.

        """
        action = decode_action(raw)
        match (event, action):
            case ("pull_request", "closed"):
                outcome = await self._merge.handle(decode_pull_request_event(raw))
            case ("issue_comment", "created"):
                outcome = await self._mention.handle(decode_issue_comment_event(raw))
            case _:
                return DispatchResult(event=event, action=action)
        return DispatchResult(event=event, action=action, outcome=outcome)


__all__ = ["DispatchResult", "WebhookDispatcher"]
