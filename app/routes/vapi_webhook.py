"""
Vapi Webhook Route

Description:
This module receives Vapi server messages and translates them into the same named
events the browser SDK emits, so sessions progress even when the browser relay is
not connected. While a browser relay is attached it is the only source of transcript
and speech events; the webhook then only forwards call-start and call-end, which are
idempotent. Messages for calls no live session owns are acknowledged and ignored.

Translation:
- status-update (in-progress) -> call-start
- status-update (ended), end-of-call-report -> call-end
- transcript -> message
- speech-update (started/stopped) -> speech-start / speech-end
- hang -> error

Dependencies:
- fastapi: For creating the FastAPI application and defining routes.
- loguru: For logging information about the webhook traffic.

Author: @kcaparas1630

"""
import os
from typing import Any, Dict, List, Optional, Tuple
from fastapi import APIRouter, Depends, Request
from loguru import logger
from app.constants.session_constants import CALL_END, CALL_START, ERROR, MESSAGE, SPEECH_END, SPEECH_START
from app.errors.exceptions import Unauthorized
from app.services.session_controller.session_registry import SessionRegistry, get_session_registry

# Lifecycle events both sources may deliver
RELAY_SHARED_EVENTS = (CALL_START, CALL_END)

router = APIRouter(
    prefix="/api/vapi",
    tags=["vapi-webhook"],
    responses={404: {"description": "Not found"}}
)


def translate_server_message(message: Dict[str, Any]) -> List[Tuple[str, Optional[Dict[str, Any]]]]:
    """
    Map one Vapi server message onto voice-agent events.

    Returns:
        List of (event, payload) pairs; empty for message types sessions do not track.
    """
    message_type = message.get("type")

    if message_type == "status-update":
        status = message.get("status")
        if status == "in-progress":
            return [(CALL_START, None)]
        if status == "ended":
            return [(CALL_END, None)]
        return []
    if message_type == "end-of-call-report":
        return [(CALL_END, None)]
    if message_type == "transcript":
        return [(MESSAGE, {
            "type": "transcript",
            "role": message.get("role"),
            "transcriptType": message.get("transcriptType"),
            "transcript": message.get("transcript", ""),
        })]
    if message_type == "speech-update":
        status = message.get("status")
        if status == "started":
            return [(SPEECH_START, None)]
        if status == "stopped":
            return [(SPEECH_END, None)]
        return []
    if message_type == "hang":
        return [(ERROR, {"message": "Assistant did not respond"})]
    return []


def verify_webhook_secret(request: Request) -> None:
    secret = os.getenv("VAPI_WEBHOOK_SECRET")
    if secret and request.headers.get("x-vapi-secret") != secret:
        raise Unauthorized("Invalid webhook secret")


@router.post("/webhook", dependencies=[Depends(verify_webhook_secret)])
async def vapi_webhook(request: Request, registry: SessionRegistry = Depends(get_session_registry)):
    body = await request.json()
    message = body.get("message") if isinstance(body, dict) else None
    if not isinstance(message, dict):
        logger.warning("Ignoring webhook payload without a message object")
        return {"received": True}
    call = message.get("call")
    call_id = call.get("id") if isinstance(call, dict) else None

    controller = registry.get_by_call_id(call_id) if call_id else None
    if controller is None:
        logger.debug(f"Ignoring {message.get('type')} for unknown call {call_id}")
        return {"received": True}

    for event, data in translate_server_message(message):
        if controller.has_relay and event not in RELAY_SHARED_EVENTS:
            logger.debug(f"Skipping webhook {event} for session {controller.session_id}, browser relay attached")
            continue
        await controller.dispatch(event, data)

    return {"received": True}
