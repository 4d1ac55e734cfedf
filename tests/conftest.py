"""Shared fixtures for the relay test suite.

Provider traffic never leaves the process: ``create_app`` receives an
``httpx.MockTransport`` backed by ``FakeProvider``, which records every
outbound request and answers from canned responses keyed by URL path.
"""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from relay.app import create_app
from relay.config import Settings
from relay.webhooks.verification import generate_signature_header

WEBHOOK_SECRET = "whsec_test_secret"


class FakeProvider:
    """Stands in for Retell and Stripe behind the shared httpx client."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[str, tuple[int, Any, str | None]] = {}
        self._errors: dict[str, Exception] = {}

    def respond(
        self, path: str, status_code: int = 200, json: Any = None, text: str | None = None
    ) -> None:
        self._routes[path] = (status_code, json, text)

    def fail(self, path: str, exc: Exception) -> None:
        self._errors[path] = exc

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path in self._errors:
            raise self._errors[path]
        if path not in self._routes:
            return httpx.Response(404, text=f"no canned response for {path}")
        status_code, body, text = self._routes[path]
        if text is not None:
            return httpx.Response(status_code, text=text)
        return httpx.Response(status_code, json=body)

    def last_json(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        _env_file=None,
        stripe_secret_key="sk_test_123",
        stripe_webhook_secret=WEBHOOK_SECRET,
        retell_api_key="retell-test-key",
        retell_agent_id="agent_123",
        retell_llm_id="llm_456",
        retell_phone_number="+15550001111",
        cors_origins=["http://localhost:5173"],
        public_origin="http://localhost:5173",
    )


@pytest.fixture()
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture()
def app(settings, provider):
    return create_app(settings, transport=httpx.MockTransport(provider.handler))


@pytest.fixture()
def client(app):
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture()
def sign():
    """Factory: Stripe-Signature header for a body under the test secret."""

    def _sign(body: bytes, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
        return generate_signature_header(body, secret, timestamp)

    return _sign
