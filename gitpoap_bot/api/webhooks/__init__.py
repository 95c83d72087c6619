"""GitHub webhook endpoint and signature verification.

Usage
-----
Import the resource for route registration::

    from gitpoap_bot.api.webhooks import WebhookResource
"""

from gitpoap_bot.api.webhooks.resources import WebhookResource
from gitpoap_bot.api.webhooks.signature import sign_payload, verify_signature

__all__ = ["WebhookResource", "sign_payload", "verify_signature"]
