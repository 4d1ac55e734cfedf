"""Relay endpoints that forward to the providers."""
