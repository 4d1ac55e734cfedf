"""Stripe webhook signature verification (v1 scheme).

Security contract:
- Verification runs on the raw request bytes exactly as received; callers
  must not decode or re-serialize the body first (a str or dict is rejected)
- Comparisons use hmac.compare_digest() (constant-time)
- Empty secret -> verification always fails (fail-closed)
- Timestamp tolerance: 300s by default, past or future, to limit replay
- Pure function of (payload, header, secret, now): no replay-window state
- Failure reasons never include the secret
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
import time
from typing import Optional

from relay.errors import AuthenticationError, ValidationError
from relay.webhooks.events import WebhookEvent

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 300

SIGNATURE_HEADER = "stripe-signature"

_SCHEME = "v1"


def compute_signature(payload: bytes, secret: str, timestamp: int) -> str:
    """HMAC-SHA256 over ``"{timestamp}." + payload``, hex encoded."""
    signed_payload = f"{timestamp}.".encode("utf-8") + payload
    return hmac.new(secret.encode("utf-8"), signed_payload, hashlib.sha256).hexdigest()


def generate_signature_header(
    payload: bytes, secret: str, timestamp: Optional[int] = None
) -> str:
    """Build a Stripe-Signature header value for ``payload``.

    Used by tests and local tooling to produce deliveries this module accepts.
    """
    ts = int(time.time()) if timestamp is None else timestamp
    return f"t={ts},{_SCHEME}={compute_signature(payload, secret, ts)}"


def _parse_header(header: str) -> tuple[int, list[str]]:
    """Split ``t=<ts>,v1=<sig>[,v1=<sig>...]`` into (timestamp, v1 signatures)."""
    timestamp_str: Optional[str] = None
    signatures: list[str] = []
    for item in header.split(","):
        kv = item.strip().split("=", 1)
        if len(kv) != 2:
            continue
        key, value = kv
        if key == "t":
            timestamp_str = value
        elif key == _SCHEME:
            signatures.append(value)

    if not timestamp_str:
        raise AuthenticationError("Unable to extract timestamp and signatures from header")
    try:
        timestamp = int(timestamp_str)
    except ValueError:
        raise AuthenticationError("Unable to extract timestamp and signatures from header") from None
    if not signatures:
        raise AuthenticationError(f"No signatures found with expected scheme {_SCHEME}")
    return timestamp, signatures


def verify_header(
    payload: bytes,
    header: Optional[str],
    secret: str,
    tolerance: int = DEFAULT_TOLERANCE,
    now: Optional[float] = None,
) -> None:
    """Check that ``header`` is a valid signature of ``payload`` under ``secret``.

    Args:
        payload: Raw request body bytes.
        header: Value of the Stripe-Signature header.
        secret: Webhook signing secret.
        tolerance: Maximum age (or clock skew) of the timestamp in seconds.
            Zero or negative disables the check.
        now: Current unix time; defaults to ``time.time()``.

    Raises:
        AuthenticationError: with the failure reason.
    """
    if not isinstance(payload, (bytes, bytearray)):
        raise AuthenticationError("Webhook payload must be the raw request body bytes")
    if not secret:
        logger.warning("STRIPE_WEBHOOK_SECRET not set, rejecting webhook")
        raise AuthenticationError("Webhook signing secret is not configured")
    if not header:
        raise AuthenticationError("Missing Stripe-Signature header")

    timestamp, signatures = _parse_header(header)

    expected = compute_signature(bytes(payload), secret, timestamp)
    if not any(sig.isascii() and hmac.compare_digest(expected, sig) for sig in signatures):
        raise AuthenticationError("No signatures found matching the expected signature for payload")

    current = time.time() if now is None else now
    try:
        skew = abs(current - timestamp)
    except OverflowError:
        skew = float("inf")
    if tolerance > 0 and skew > tolerance:
        raise AuthenticationError(f"Timestamp outside the tolerance zone ({timestamp})")


def construct_event(
    payload: bytes,
    header: Optional[str],
    secret: str,
    tolerance: int = DEFAULT_TOLERANCE,
    now: Optional[float] = None,
) -> WebhookEvent:
    """Verify a delivery and decode it into a ``WebhookEvent``.

    Raises:
        AuthenticationError: signature missing, malformed, mismatched or expired.
        ValidationError: verified body is not a JSON object with a string ``type``.
    """
    verify_header(payload, header, secret, tolerance=tolerance, now=now)

    try:
        data = json.loads(bytes(payload).decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValidationError("Webhook Error: Invalid payload") from e
    if not isinstance(data, dict) or not isinstance(data.get("type"), str):
        raise ValidationError("Webhook Error: Event has no type")
    return WebhookEvent.from_dict(data)
