"""Shared outbound POST for the provider clients.

One attempt per call, bounded by the client's timeout. A non-2xx response or
a transport failure becomes an ``UpstreamError`` carrying the provider's
diagnostic text; there is no retry.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import httpx

from relay.errors import UpstreamError

logger = logging.getLogger(__name__)


async def post(
    client: httpx.AsyncClient,
    url: str,
    *,
    failure_message: str,
    token: str,
    json: dict[str, Any] | None = None,
    data: dict[str, Any] | None = None,
    extract_details: Callable[[httpx.Response], str] | None = None,
) -> dict[str, Any]:
    """POST to a provider endpoint and return its decoded JSON body.

    Args:
        client: The app-wide ``httpx.AsyncClient``.
        url: Absolute endpoint URL.
        failure_message: ``error`` text surfaced to the caller on failure.
        token: Bearer token for the provider.
        json: JSON body (Retell).
        data: Form body (Stripe).
        extract_details: Pulls the diagnostic out of an error response;
            defaults to the raw response text.

    Raises:
        UpstreamError: non-2xx status, transport failure or a non-JSON body.
    """
    try:
        response = await client.post(
            url,
            json=json,
            data=data,
            headers={"Authorization": f"Bearer {token}"},
        )
    except httpx.HTTPError as e:
        logger.error("Request to %s failed: %s", url, type(e).__name__)
        raise UpstreamError(failure_message, details=str(e) or type(e).__name__) from e

    if not response.is_success:
        details = extract_details(response) if extract_details else response.text
        logger.error("%s returned HTTP %d: %s", url, response.status_code, details)
        raise UpstreamError(failure_message, details=details)

    try:
        body = response.json()
    except ValueError as e:
        raise UpstreamError(failure_message, details="Provider returned a non-JSON body") from e
    if not isinstance(body, dict):
        raise UpstreamError(failure_message, details="Provider returned an unexpected body")
    return body
