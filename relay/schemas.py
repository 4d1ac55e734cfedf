"""Request body schemas for the relay endpoints.

Each model declares the fields the front-end sends (camelCase, as on the
wire). Required fields must be present and non-empty; ``parse_body`` turns a
schema failure into a ``ValidationError`` carrying the endpoint's message so
no outbound call is made.
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Optional, TypeVar, Union

import pydantic
from fastapi import Request
from pydantic import BaseModel, Field

from relay.errors import ValidationError

RequiredStr = Annotated[str, Field(min_length=1)]

# forwarded to the provider as sent
Passthrough = Optional[Union[str, int, float]]

M = TypeVar("M", bound="RelayRequest")


class RelayRequest(BaseModel):
    """Base for relay request bodies."""

    missing_message: ClassVar[str] = "Missing required field"

    model_config = {"extra": "ignore"}


class VoiceCallRequest(RelayRequest):
    missing_message: ClassVar[str] = "User phone number is required"

    userPhone: RequiredStr
    userId: Passthrough = None


class ChatRequest(RelayRequest):
    missing_message: ClassVar[str] = "Message and user phone are required"

    message: RequiredStr
    userPhone: RequiredStr
    userId: Passthrough = None
    sessionId: Passthrough = None


class CheckoutSessionRequest(RelayRequest):
    missing_message: ClassVar[str] = "Price id is required"

    priceId: RequiredStr
    userId: Passthrough = None
    userEmail: Passthrough = None
    planName: Passthrough = None


def parse_body(model: type[M], data: Any) -> M:
    """Validate a decoded JSON body against ``model``.

    Raises:
        ValidationError: body is not an object, a required field is
            missing, empty or not a string (the endpoint's message), or an
            optional field holds a structured value ("Invalid request body").
    """
    if not isinstance(data, dict):
        raise ValidationError(model.missing_message, details=["body: expected a JSON object"])
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        errors = e.errors()
        details = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in errors]
        required = {name for name, field in model.model_fields.items() if field.is_required()}
        if any(err["loc"] and err["loc"][0] in required for err in errors):
            raise ValidationError(model.missing_message, details=details) from e
        raise ValidationError("Invalid request body", details=details) from e


async def parse_request(model: type[M], request: Request) -> M:
    """Decode and validate a request's JSON body. Empty or non-JSON bodies fail validation."""
    try:
        data = await request.json()
    except ValueError:
        data = None
    return parse_body(model, data)
