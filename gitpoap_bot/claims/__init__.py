"""Claims API models and client."""

from __future__ import annotations

from .client import CLAIMS_CREATE_PATH, ClaimsAPIClient
from .models import (
    ClaimCreationRequest,
    ClaimCreationResponse,
    ClaimsAPIResult,
    IssueClaim,
    PullRequestClaim,
    describe_target,
    encode_request,
)

__all__ = [
    "CLAIMS_CREATE_PATH",
    "ClaimCreationRequest",
    "ClaimCreationResponse",
    "ClaimsAPIClient",
    "ClaimsAPIResult",
    "IssueClaim",
    "PullRequestClaim",
    "describe_target",
    "encode_request",
]
