"""Webhook handlers that turn GitHub events into GitPOAP claims.

Public API
----------
MergeHandler
    Creates claims for the author of a merged pull request.
MentionHandler
    Creates claims for users tagged next to the bot by a privileged commenter.
WebhookDispatcher
    Routes raw deliveries to the matching handler.
"""

from __future__ import annotations

from .dependencies import HANDLER_FAILURES, HandlerDependencies, HandlerOutcome
from .dispatch import DispatchResult, WebhookDispatcher
from .merge import MergeHandler
from .mention import MentionHandler, build_claim_request
from .observability import HandlerEventLogger, HandlerEventType

__all__ = [
    "HANDLER_FAILURES",
    "DispatchResult",
    "HandlerDependencies",
    "HandlerEventLogger",
    "HandlerEventType",
    "HandlerOutcome",
    "MentionHandler",
    "MergeHandler",
    "WebhookDispatcher",
    "build_claim_request",
]
