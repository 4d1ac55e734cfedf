"""Retell AI client: outbound phone calls and chat completions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx
from fastapi import Depends, Request

from relay.clients.http import post
from relay.config import Settings, get_settings

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "I apologize, but I couldn't process your message. Please try again."


@dataclass(frozen=True)
class ChatReply:
    text: str
    session_id: Optional[str]


class RetellClient:
    """Thin wrapper over the two Retell endpoints the relay forwards to."""

    def __init__(self, http: httpx.AsyncClient, settings: Settings) -> None:
        self._http = http
        self._settings = settings

    @property
    def _token(self) -> str:
        return self._settings.retell_api_key.get_secret_value()

    def _url(self, path: str) -> str:
        return f"{self._settings.retell_api_base.rstrip('/')}/{path}"

    async def create_phone_call(self, to_number: str, user_id: Optional[Any]) -> str:
        """Start an agent call to ``to_number``. Returns the provider call id."""
        payload = {
            "from_number": self._settings.retell_phone_number,
            "to_number": to_number,
            "agent_id": self._settings.retell_agent_id,
            "metadata": {"user_id": user_id, "phone": _strip_plus(to_number)},
        }
        data = await post(
            self._http,
            self._url("create-phone-call"),
            failure_message="Failed to initiate call with Retell AI",
            token=self._token,
            json=payload,
        )
        call_id = data.get("call_id")
        logger.info("Voice call initiated: call_id=%s user=%s", call_id, user_id)
        return call_id

    async def chat(
        self,
        message: str,
        phone: str,
        user_id: Optional[Any] = None,
        session_id: Optional[Any] = None,
    ) -> ChatReply:
        """Send one user turn to the configured LLM and return its reply."""
        payload = {
            "llm_id": self._settings.retell_llm_id,
            "messages": [{"role": "user", "content": message}],
            "metadata": {
                "user_id": user_id,
                "phone": _strip_plus(phone),
                "session_id": session_id,
            },
        }
        data = await post(
            self._http,
            self._url("chat-completion"),
            failure_message="Failed to get response from Savana",
            token=self._token,
            json=payload,
        )
        return ChatReply(text=_first_choice(data) or FALLBACK_REPLY, session_id=data.get("session_id"))


def get_retell(request: Request, settings: Settings = Depends(get_settings)) -> RetellClient:
    return RetellClient(request.app.state.http, settings)


def _strip_plus(phone: str) -> str:
    # metadata carries the number without its leading "+"
    return phone.replace("+", "", 1)


def _first_choice(data: dict) -> Optional[str]:
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0] if isinstance(choices[0], dict) else {}
    message = first.get("message") or {}
    return message.get("content") if isinstance(message, dict) else None
