"""Outbound provider clients (Retell AI, Stripe)."""
