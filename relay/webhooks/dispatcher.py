"""Webhook event dispatcher — routes verified Stripe events to handlers.

``EVENT_HANDLERS`` is the closed map from event type to handler. Types not in
the map go to ``handle_unrecognized``, which records the type and returns;
Stripe adds event types over time and those must never fail a delivery.

Handlers only log (no persistence), so a redelivered event is harmless.
A handler that raises is logged as a handler failure and the delivery is
still acknowledged.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from relay.webhooks.events import WebhookEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[WebhookEvent], None]

# Maximum length of a payload value echoed into a log line
_MAX_FIELD_LENGTH = 200


def _log_field(value: Any) -> str:
    """Render a payload value for a single log line."""
    if value is None:
        return ""
    s = re.sub(r"\s+", " ", str(value)).strip()
    if len(s) > _MAX_FIELD_LENGTH:
        s = s[:_MAX_FIELD_LENGTH] + "..."
    return s


def _redact_email(email: Optional[str]) -> str:
    """Show only the domain of a customer email."""
    email = _log_field(email)
    if "@" in email:
        return "***@" + email.split("@", 1)[1]
    return email


def handle_checkout_completed(event: WebhookEvent) -> None:
    session = event.object
    metadata = session.get("metadata") or {}
    logger.info(
        "Payment successful: session=%s customer=%s user=%s plan=%s",
        _log_field(session.get("id")),
        _redact_email(session.get("customer_email") or (session.get("customer_details") or {}).get("email")),
        _log_field(metadata.get("userId")),
        _log_field(metadata.get("planName")),
    )


def handle_invoice_payment_succeeded(event: WebhookEvent) -> None:
    invoice = event.object
    logger.info(
        "Subscription payment succeeded: invoice=%s subscription=%s",
        _log_field(invoice.get("id")),
        _log_field(invoice.get("subscription")),
    )


def handle_subscription_deleted(event: WebhookEvent) -> None:
    subscription = event.object
    logger.info(
        "Subscription cancelled: subscription=%s customer=%s",
        _log_field(subscription.get("id")),
        _log_field(subscription.get("customer")),
    )


def handle_unrecognized(event: WebhookEvent) -> None:
    logger.info("Unhandled event type %s (id=%s)", _log_field(event.type), _log_field(event.id))


EVENT_HANDLERS: Mapping[str, EventHandler] = {
    "checkout.session.completed": handle_checkout_completed,
    "invoice.payment_succeeded": handle_invoice_payment_succeeded,
    "customer.subscription.deleted": handle_subscription_deleted,
}


@dataclass(frozen=True)
class DispatchResult:
    """What happened to one event."""

    event_type: str
    handler: str
    ok: bool


class EventDispatcher:
    """Routes an event to exactly one handler: its mapped one or the default."""

    def __init__(
        self,
        handlers: Optional[Mapping[str, EventHandler]] = None,
        default: EventHandler = handle_unrecognized,
    ) -> None:
        self._handlers = dict(EVENT_HANDLERS if handlers is None else handlers)
        self._default = default

    def handler_for(self, event_type: str) -> EventHandler:
        return self._handlers.get(event_type, self._default)

    def dispatch(self, event: WebhookEvent) -> DispatchResult:
        """Run the handler for ``event``. Never raises."""
        handler = self.handler_for(event.type)
        name = getattr(handler, "__name__", repr(handler))
        try:
            handler(event)
        except Exception:
            logger.exception(
                "WEBHOOK_HANDLER_ERROR type=%s id=%s handler=%s",
                _log_field(event.type),
                _log_field(event.id),
                name,
            )
            return DispatchResult(event_type=event.type, handler=name, ok=False)
        return DispatchResult(event_type=event.type, handler=name, ok=True)
