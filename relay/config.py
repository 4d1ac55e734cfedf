"""Relay configuration.

Built once at startup from the environment (and an optional ``.env`` file)
and stored on ``app.state``. The instance is frozen; handlers read it through
the ``get_settings`` dependency and never mutate it.
"""

from __future__ import annotations

from fastapi import Request
from pydantic import SecretStr
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Environment-driven settings for the relay."""

    # Stripe
    stripe_secret_key: SecretStr = SecretStr("")
    stripe_webhook_secret: SecretStr = SecretStr("")
    stripe_api_base: str = "https://api.stripe.com"
    webhook_tolerance: int = 300  # seconds

    # Retell AI
    retell_api_key: SecretStr = SecretStr("")
    retell_agent_id: str = ""
    retell_llm_id: str = ""
    retell_phone_number: str = ""
    retell_api_base: str = "https://api.retellai.com"

    # HTTP surface
    cors_origins: list[str] = ["http://localhost:5173", "http://0.0.0.0:5173"]
    public_origin: str = "http://localhost:5173"
    http_timeout: float = 30.0
    host: str = "0.0.0.0"
    port: int = 3001
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore", "frozen": True}


def get_settings(request: Request) -> Settings:
    """FastAPI dependency: the settings the app was built with."""
    return request.app.state.settings
