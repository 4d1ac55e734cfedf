"""Savana relay: forwards front-end requests to Retell AI and Stripe and
receives Stripe webhooks."""

__version__ = "0.1.0"
