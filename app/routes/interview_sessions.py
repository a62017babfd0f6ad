"""
Interview Sessions API Routes

Description:
This module defines the REST routes for the voice interview session lifecycle:
creating a session, starting the call, relaying voice-agent events, disconnecting,
reading the session snapshot and destroying the session when the client navigates
away.

Returns:
- SessionSnapshot for every route except DELETE.

Dependencies:
- fastapi: For creating the FastAPI application and defining routes.
- app.services.session_controller.session_registry: For the live session controllers.
- app.services.auth.firebase_auth: For resolving the caller.
- loguru: For logging information about the request.

Author: @kcaparas1630

"""
from fastapi import APIRouter, Depends, Request, Response
from loguru import logger
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT
from app.core.route_limiters import limiter
from app.schemas.session.interview_session import CreateSessionRequest, SessionSnapshot, VoiceAgentEvent
from app.services.auth.firebase_auth import get_current_user_uid
from app.services.session_controller.session_registry import SessionRegistry, get_session_registry

router = APIRouter(
    prefix="/api/sessions",
    tags=["interview-sessions"],
    responses={404: {"description": "Not found"}}
)


@router.post("", response_model=SessionSnapshot, status_code=HTTP_201_CREATED)
async def create_session(
    body: CreateSessionRequest,
    uid: str = Depends(get_current_user_uid),
    registry: SessionRegistry = Depends(get_session_registry),
):
    controller = registry.create(uid, body)
    return controller.snapshot()


@router.get("/{session_id}", response_model=SessionSnapshot)
async def get_session(
    session_id: str,
    uid: str = Depends(get_current_user_uid),
    registry: SessionRegistry = Depends(get_session_registry),
):
    return registry.get(session_id, uid).snapshot()


@router.post("/{session_id}/start", response_model=SessionSnapshot)
@limiter.limit("10/minute")
async def start_session(
    request: Request,
    session_id: str,
    uid: str = Depends(get_current_user_uid),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """
    Request parameter is required for rate limiting.
    """
    controller = registry.get(session_id, uid)
    await controller.start()
    return controller.snapshot()


@router.post("/{session_id}/events", response_model=SessionSnapshot)
async def relay_event(
    session_id: str,
    body: VoiceAgentEvent,
    uid: str = Depends(get_current_user_uid),
    registry: SessionRegistry = Depends(get_session_registry),
):
    controller = registry.get(session_id, uid)
    await controller.dispatch(body.event, body.data)
    return controller.snapshot()


@router.post("/{session_id}/disconnect", response_model=SessionSnapshot)
async def disconnect_session(
    session_id: str,
    uid: str = Depends(get_current_user_uid),
    registry: SessionRegistry = Depends(get_session_registry),
):
    controller = registry.get(session_id, uid)
    await controller.disconnect()
    return controller.snapshot()


@router.delete("/{session_id}", status_code=HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: str,
    uid: str = Depends(get_current_user_uid),
    registry: SessionRegistry = Depends(get_session_registry),
):
    registry.get(session_id, uid)
    registry.remove(session_id)
    logger.info(f"Session {session_id} removed by client")
    return Response(status_code=HTTP_204_NO_CONTENT)
