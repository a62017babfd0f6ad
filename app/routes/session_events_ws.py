"""
WebSocket route for voice-agent event relay

Description:
This module defines the WebSocket the browser holds open while a session is on
screen. The browser forwards every voice-agent SDK event over it; the server answers
each one with the session snapshot and pushes navigation instructions as soon as the
session asks for them. Closing the socket means the client navigated away, so the
session is destroyed.

Arguments:
- websocket: WebSocket connection object
- session_id: Session the events belong to

Dependencies:
- fastapi: For handling WebSocket connections.
- pydantic: For validating incoming events.
- loguru: For logging connection lifecycle and errors.

Author: @kcaparas1630

"""
import time
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError
from loguru import logger
from app.errors.exceptions import SessionNotFound
from app.schemas.session.interview_session import VoiceAgentEvent
from app.schemas.websocket.websocket_message import WebSocketMessage
from app.services.auth.firebase_auth import get_websocket_user_uid
from app.services.session_controller.session_controller import SessionController
from app.services.session_controller.session_registry import SessionRegistry, get_session_registry

router = APIRouter(
    prefix="/api/sessions",
    tags=["interview-sessions"],
    responses={404: {"description": "Not found"}}
)


async def send_websocket_message(websocket: WebSocket, message_type: str, content):
    """Send a WebSocket message with consistent formatting."""
    await websocket.send_json(WebSocketMessage(
        type=message_type,
        content=content,
        timestamp=str(int(time.time() * 1000))
    ).model_dump(mode="json"))


async def send_state(websocket: WebSocket, controller: SessionController):
    await send_websocket_message(websocket, "state", controller.snapshot().model_dump(mode="json"))


@router.websocket("/{session_id}/ws")
async def session_events_endpoint(
    websocket: WebSocket,
    session_id: str,
    uid: str = Depends(get_websocket_user_uid),
    registry: SessionRegistry = Depends(get_session_registry),
):
    await websocket.accept()
    try:
        controller = registry.get(session_id, uid)
    except SessionNotFound as e:
        await send_websocket_message(websocket, "error", e.detail)
        await websocket.close(code=1008, reason="Session not found")
        return

    async def on_navigate(route: str):
        await send_websocket_message(websocket, "navigate", route)

    controller.navigator.subscribe(on_navigate)
    controller.attach_relay()
    try:
        await send_state(websocket, controller)
        while True:
            raw = await websocket.receive_text()
            try:
                event = VoiceAgentEvent.model_validate_json(raw)
            except ValidationError as e:
                logger.warning(f"Invalid event on session {session_id}: {e.errors()[:1]}")
                await send_websocket_message(websocket, "error", "Invalid event format")
                continue

            await controller.dispatch(event.event, event.data)
            await send_state(websocket, controller)
    except WebSocketDisconnect:
        logger.info(f"WebSocket for session {session_id} closed")
    except Exception as e:
        logger.exception(f"Unhandled exception in session {session_id} websocket")
        #1011 = internal error
        await websocket.close(code=1011, reason=str(e)[:123])
        raise
    finally:
        controller.navigator.unsubscribe(on_navigate)
        controller.release_relay()
        registry.remove(session_id)
