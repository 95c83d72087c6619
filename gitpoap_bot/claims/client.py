"""HTTP client for the GitPOAP claims API."""

from __future__ import annotations

from http import HTTPStatus

import httpx
import msgspec

from .models import (
    ClaimCreationRequest,
    ClaimCreationResponse,
    ClaimsAPIResult,
    encode_request,
)

CLAIMS_CREATE_PATH = "/claims/gitpoap-bot/create"


class ClaimsAPIClient:
    """Submit claim-creation requests to ``{API_URL}/claims/gitpoap-bot/create``.

    Every call is a single attempt. Non-200 statuses are returned to the
    caller for branching; transport failures propagate as ``httpx`` errors.

    Parameters
    ----------
    http_client
        Shared async HTTP client.
    api_url
        Claims API base URL.

    """

    def __init__(self, http_client: httpx.AsyncClient, *, api_url: str) -> None:
        """Bind the client to the claims API base URL."""
        self._client = http_client
        self._endpoint = f"{api_url.rstrip('/')}{CLAIMS_CREATE_PATH}"

    async def create_claims(
        self, request: ClaimCreationRequest, *, token: str
    ) -> ClaimsAPIResult:
        """Request new claims for ``request``, authenticated with an App JWT.

        Raises
        ------
        httpx.HTTPError
            If the request cannot be sent.
        msgspec.DecodeError
            If a 200 response body is not a valid ``{newClaims: [...]}``.

        """
        response = await self._client.post(
            self._endpoint,
            content=encode_request(request),
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
                "Authorization": f"Bearer {token}",
            },
        )
        if response.status_code != HTTPStatus.OK:
            return ClaimsAPIResult(status_code=response.status_code, text=response.text)

        decoded = msgspec.json.decode(response.content, type=ClaimCreationResponse)
        return ClaimsAPIResult(
            status_code=response.status_code,
            text=response.text,
            response=decoded,
        )
