"""Falcon resource receiving GitHub webhook deliveries.

Usage
-----
Register the resource on the Falcon app::

    from gitpoap_bot.api.webhooks.resources import WebhookResource

    app.add_route("/webhooks", WebhookResource(dispatcher, secret=secret))

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

import msgspec

from gitpoap_bot.api.errors import InvalidInputError
from gitpoap_bot.api.webhooks.signature import SIGNATURE_HEADER, verify_signature
from gitpoap_bot.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from gitpoap_bot.handlers import WebhookDispatcher

__all__ = ["WebhookResource"]

logger = get_logger(__name__)

EVENT_HEADER = "X-GitHub-Event"
DELIVERY_HEADER = "X-GitHub-Delivery"


class WebhookResource:
    """Verify, decode and dispatch one delivery per POST.

    Parameters
    ----------
    dispatcher
        Routes deliveries to the merge and mention handlers.
    secret
        Webhook secret; ``None`` accepts unsigned deliveries.

    """

    def __init__(self, dispatcher: WebhookDispatcher, *, secret: str | None) -> None:
        """Initialize the resource with its dispatcher and secret."""
        self._dispatcher = dispatcher
        self._secret = secret

    async def on_post(self, req: Request, resp: Response) -> None:
        """Handle POST /webhooks.

        Responds 200 with the handler outcome, or 202 when no handler
        subscribes to the event.

        Raises
        ------
        InvalidSignatureError
            If signature verification is enabled and fails.
        InvalidInputError
            If the event header is missing or the body cannot be decoded.

        """
        raw = await req.stream.read()
        if self._secret is not None:
            verify_signature(self._secret, raw, req.get_header(SIGNATURE_HEADER))

        event = req.get_header(EVENT_HEADER)
        if not event:
            raise InvalidInputError("header is required", field=EVENT_HEADER)
        delivery = req.get_header(DELIVERY_HEADER) or "unknown"

        try:
            result = await self._dispatcher.dispatch(event, raw)
        except msgspec.DecodeError as exc:
            raise InvalidInputError(str(exc), field="body") from exc

        if not result.handled:
            log_info(
                logger,
                "Ignoring delivery %s for %s.%s",
                delivery,
                result.event,
                result.action,
            )
            resp.status = HTTPStatus.ACCEPTED
            resp.media = {"status": "ignored"}
            return

        log_info(
            logger,
            "Delivery %s for %s.%s finished: %s",
            delivery,
            result.event,
            result.action,
            result.outcome,
        )
        resp.status = HTTPStatus.OK
        resp.media = {"status": str(result.outcome)}
