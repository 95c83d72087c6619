"""GitHub webhook signature verification."""

from __future__ import annotations

import hashlib
import hmac

from gitpoap_bot.api.errors import InvalidSignatureError

SIGNATURE_HEADER = "X-Hub-Signature-256"
_PREFIX = "sha256="


def sign_payload(secret: str, body: bytes) -> str:
    """Return the ``sha256=<hex>`` signature GitHub sends for ``body``."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"{_PREFIX}{digest}"


def verify_signature(secret: str, body: bytes, header: str | None) -> None:
    """Check ``header`` against the HMAC of ``body``.

    Raises
    ------
    InvalidSignatureError
        If the header is absent or does not match.

    """
    if not header:
        raise InvalidSignatureError.missing()
    if not hmac.compare_digest(sign_payload(secret, body), header.strip()):
        raise InvalidSignatureError.mismatch()


__all__ = ["SIGNATURE_HEADER", "sign_payload", "verify_signature"]
