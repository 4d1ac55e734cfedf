"""Stripe REST client: subscription checkout sessions.

Stripe's API takes form-encoded bodies with bracketed keys for nested
values (``line_items[0][price]``); ``_encode_checkout`` builds that shape.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from fastapi import Depends, Request

from relay.clients.http import post
from relay.config import Settings, get_settings

logger = logging.getLogger(__name__)


def _stripe_error_message(response: httpx.Response) -> str:
    """Stripe errors look like {"error": {"message": ...}}; fall back to raw text."""
    try:
        body = response.json()
    except ValueError:
        return response.text
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return error["message"]
    return response.text


def _encode_checkout(
    price_id: str,
    origin: str,
    email: Optional[Any],
    user_id: Optional[Any],
    plan_name: Optional[Any],
) -> dict[str, Any]:
    origin = origin.rstrip("/")
    form: dict[str, Any] = {
        "payment_method_types[0]": "card",
        "line_items[0][price]": price_id,
        "line_items[0][quantity]": 1,
        "mode": "subscription",
        "success_url": f"{origin}/dashboard?session_id={{CHECKOUT_SESSION_ID}}",
        "cancel_url": f"{origin}/subscribe",
    }
    if email:
        form["customer_email"] = email
    if user_id:
        form["metadata[userId]"] = user_id
    if plan_name:
        form["metadata[planName]"] = plan_name
    return form


class StripeClient:
    def __init__(self, http: httpx.AsyncClient, settings: Settings) -> None:
        self._http = http
        self._settings = settings

    async def create_checkout_session(
        self,
        price_id: str,
        origin: str,
        email: Optional[Any] = None,
        user_id: Optional[Any] = None,
        plan_name: Optional[Any] = None,
    ) -> str:
        """Create a card subscription checkout for one unit of ``price_id``.

        ``success_url`` and ``cancel_url`` point back at ``origin``. Returns
        the Stripe session id.
        """
        url = f"{self._settings.stripe_api_base.rstrip('/')}/v1/checkout/sessions"
        data = await post(
            self._http,
            url,
            failure_message="Failed to create checkout session",
            token=self._settings.stripe_secret_key.get_secret_value(),
            data=_encode_checkout(price_id, origin, email, user_id, plan_name),
            extract_details=_stripe_error_message,
        )
        session_id = data.get("id")
        logger.info("Checkout session created: %s (plan=%s user=%s)", session_id, plan_name, user_id)
        return session_id


def get_stripe(request: Request, settings: Settings = Depends(get_settings)) -> StripeClient:
    return StripeClient(request.app.state.http, settings)
