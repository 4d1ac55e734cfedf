"""Voice call route: starts an outbound Retell AI call."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from relay.clients.retell import RetellClient, get_retell
from relay.schemas import VoiceCallRequest, parse_request

router = APIRouter(prefix="/api", tags=["voice"])


@router.post("/voice-call")
async def voice_call(request: Request, retell: RetellClient = Depends(get_retell)):
    body = await parse_request(VoiceCallRequest, request)
    call_id = await retell.create_phone_call(body.userPhone, body.userId)
    return {
        "success": True,
        "callId": call_id,
        "message": "Voice call initiated successfully",
    }
