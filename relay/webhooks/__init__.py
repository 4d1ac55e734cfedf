"""Inbound Stripe webhooks.

Each delivery is signature-verified against the raw body, decoded, and
dispatched by event type.
"""
