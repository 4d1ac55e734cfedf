"""FastAPI application factory.

``create_app`` wires one frozen ``Settings`` instance, one shared
``httpx.AsyncClient`` (bounded timeout, closed on shutdown), the webhook
dispatcher, CORS, the error handlers and every route.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from relay.config import Settings
from relay.errors import install_error_handlers
from relay.routers import chat, checkout, health, voice
from relay.webhooks import handlers as webhook_handlers
from relay.webhooks.dispatcher import EventDispatcher

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    dispatcher: Optional[EventDispatcher] = None,
) -> FastAPI:
    """Build the relay app.

    Args:
        settings: Configuration; read from the environment when omitted.
        transport: httpx transport for outbound provider calls (tests pass
            an ``httpx.MockTransport``).
        dispatcher: Webhook event dispatcher; the default handler map when omitted.
    """
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with httpx.AsyncClient(
            timeout=settings.http_timeout, transport=transport
        ) as client:
            app.state.http = client
            logger.info("Relay started (timeout=%.1fs)", settings.http_timeout)
            yield
        logger.info("Relay stopped")

    app = FastAPI(title="Savana Relay", lifespan=lifespan)
    app.state.settings = settings
    app.state.dispatcher = dispatcher or EventDispatcher()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app)

    app.include_router(health.router)
    app.include_router(voice.router)
    app.include_router(chat.router)
    app.include_router(checkout.router)
    app.include_router(webhook_handlers.router)
    return app
