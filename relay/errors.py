"""Relay error taxonomy and the FastAPI handlers that render it.

Every failure leaves a handler as one of four kinds:

- ValidationError: client sent a body missing a required field -> 400
- AuthenticationError: webhook signature missing/invalid/expired -> 400
- UpstreamError: provider call did not succeed -> 500 with provider text
- InternalError: anything else -> 500 with a generic message

Responses are always ``{"error": ..., "details"?: ...}``. Nothing is retried.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class RelayError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(RelayError):
    """A required request field is missing or empty."""

    status_code = 400


class AuthenticationError(RelayError):
    """Webhook signature verification failed.

    ``message`` holds the failure reason. It never contains the secret.
    """

    status_code = 400


class UpstreamError(RelayError):
    """The forwarded provider call did not return success."""

    status_code = 500


class InternalError(RelayError):
    """Unexpected failure. Detail goes to the server log only."""

    status_code = 500

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message)


async def _relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    if isinstance(exc, ValidationError):
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(exc.to_body(), status_code=exc.status_code)


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    err = ValidationError("Invalid request body", details=_describe_errors(exc.errors()))
    return await _relay_error_handler(request, err)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(InternalError().to_body(), status_code=500)


def _describe_errors(errors: Any) -> list[str]:
    """Flatten pydantic error dicts to ``"field: message"`` strings."""
    described = []
    for err in errors:
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        described.append(f"{loc}: {err.get('msg', 'invalid')}" if loc else err.get("msg", "invalid"))
    return described


def install_error_handlers(app: FastAPI) -> None:
    """Register the exception handlers that enforce the error taxonomy."""
    app.add_exception_handler(RelayError, _relay_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
