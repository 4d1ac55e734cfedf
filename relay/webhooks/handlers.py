"""Webhook HTTP handler — FastAPI route for inbound Stripe events.

The handler:
1. Reads the raw body (the signature covers these exact bytes)
2. Verifies the Stripe-Signature header against the configured secret
3. Decodes the verified bytes into a WebhookEvent
4. Dispatches by event type
5. Returns 200 {"received": true}

Signature failures return 400 before anything is decoded or dispatched.
Handler failures are logged separately and still acknowledged.
"""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from relay.config import Settings, get_settings
from relay.errors import AuthenticationError
from relay.webhooks.dispatcher import EventDispatcher, _log_field
from relay.webhooks.verification import SIGNATURE_HEADER, construct_event

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["webhooks"])


def _log_webhook(event_type: str, event_id: str, status: str) -> None:
    """Audit log for webhook activity."""
    logger.info(
        "WEBHOOK_AUDIT type=%s id=%s status=%s", _log_field(event_type), _log_field(event_id), status
    )


def get_dispatcher(request: Request) -> EventDispatcher:
    return request.app.state.dispatcher


@router.post("/stripe-webhook")
async def stripe_webhook(
    request: Request,
    settings: Settings = Depends(get_settings),
    dispatcher: EventDispatcher = Depends(get_dispatcher),
):
    """Receive Stripe webhooks (signature-verified)."""
    start = time.time()
    body = await request.body()

    try:
        event = construct_event(
            body,
            request.headers.get(SIGNATURE_HEADER),
            settings.stripe_webhook_secret.get_secret_value(),
            tolerance=settings.webhook_tolerance,
        )
    except AuthenticationError as e:
        logger.warning("Webhook signature verification failed: %s", e.message)
        _log_webhook("unknown", "unknown", "signature_failed")
        raise AuthenticationError(f"Webhook Error: {e.message}") from e

    result = dispatcher.dispatch(event)
    _log_webhook(event.type, event.id, "dispatched" if result.ok else "handler_failed")

    elapsed_ms = (time.time() - start) * 1000
    logger.debug("Webhook processed in %.1fms: %s via %s", elapsed_ms, event.type, result.handler)

    return JSONResponse({"received": True})
