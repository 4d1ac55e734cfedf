"""Verified Stripe event."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class WebhookEvent:
    """An event whose signature has been checked. Lives for one request."""

    id: str
    type: str
    data: dict[str, Any] = field(default_factory=dict)
    created: Optional[int] = None
    livemode: bool = False

    @property
    def object(self) -> dict[str, Any]:
        """The provider object the event is about (``data.object``)."""
        obj = self.data.get("object")
        return obj if isinstance(obj, dict) else {}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> WebhookEvent:
        data = payload.get("data")
        return cls(
            id=str(payload.get("id") or ""),
            type=payload["type"],
            data=data if isinstance(data, dict) else {},
            created=payload.get("created"),
            livemode=bool(payload.get("livemode", False)),
        )
