"""Checkout route: creates a Stripe subscription checkout session."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from relay.clients.stripe import StripeClient, get_stripe
from relay.config import Settings, get_settings
from relay.schemas import CheckoutSessionRequest, parse_request

router = APIRouter(prefix="/api", tags=["checkout"])


@router.post("/create-checkout-session")
async def create_checkout_session(
    request: Request,
    settings: Settings = Depends(get_settings),
    stripe: StripeClient = Depends(get_stripe),
):
    body = await parse_request(CheckoutSessionRequest, request)
    # Redirect URLs go back to whichever front-end made the request
    origin = request.headers.get("origin") or settings.public_origin
    session_id = await stripe.create_checkout_session(
        body.priceId,
        origin,
        email=body.userEmail,
        user_id=body.userId,
        plan_name=body.planName,
    )
    return {"sessionId": session_id}
