"""Chat route: relays one user message to the Retell AI agent."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from relay.clients.retell import RetellClient, get_retell
from relay.schemas import ChatRequest, parse_request

router = APIRouter(prefix="/api", tags=["chat"])


@router.post("/chat")
async def chat(request: Request, retell: RetellClient = Depends(get_retell)):
    body = await parse_request(ChatRequest, request)
    reply = await retell.chat(
        body.message,
        body.userPhone,
        user_id=body.userId,
        session_id=body.sessionId,
    )
    return {"success": True, "response": reply.text, "sessionId": reply.session_id}
