"""
Session Registry Module

In-memory store of the live session controllers, keyed by session id. Each
controller is owned by exactly one user and is dropped when the client navigates
away, or once it has sat FINISHED for longer than the grace period
(SESSION_FINISHED_TTL_SECONDS, default 300) without a browser relay attached. Calls
are also indexed by the voice agent's call id so webhook events can
find their session.

Dependencies:
- loguru: For logging operations.
- app.errors.exceptions: For SessionNotFound.

Author: @kcaparas1630
"""

import os
import time
import uuid
from typing import Callable, Dict, Optional
from loguru import logger
from app.core.voice_agent_client import VapiClient
from app.errors.exceptions import SessionNotFound
from app.schemas.session.interview_session import CreateSessionRequest
from app.services.credit_gate.credit_gate_service import CreditGate, credit_gate
from app.services.feedback.feedback_service import FeedbackService, feedback_service
from app.services.session_controller.session_controller import SessionController


class SessionRegistry:
    def __init__(
        self,
        credit_gate: CreditGate = credit_gate,
        feedback_service: FeedbackService = feedback_service,
        voice_agent_factory: Callable[[], VapiClient] = VapiClient,
        finished_ttl: Optional[float] = None,
    ):
        self.credit_gate = credit_gate
        self.feedback_service = feedback_service
        self.voice_agent_factory = voice_agent_factory
        self._sessions: Dict[str, SessionController] = {}
        if finished_ttl is None:
            finished_ttl = float(os.getenv("SESSION_FINISHED_TTL_SECONDS", "300"))
        self.finished_ttl = finished_ttl

    def create(self, user_id: str, request: CreateSessionRequest) -> SessionController:
        self.prune_finished()
        session_id = str(uuid.uuid4())
        controller = SessionController(
            session_id=session_id,
            user_id=user_id,
            request=request,
            voice_agent=self.voice_agent_factory(),
            credit_gate=self.credit_gate,
            feedback_service=self.feedback_service,
        )
        controller.load_credits()
        self._sessions[session_id] = controller
        logger.info(f"Created session {session_id} for user {user_id}")
        return controller

    def get(self, session_id: str, user_id: Optional[str] = None) -> SessionController:
        """
        Look up a session, optionally checking its owner.

        Raises:
            SessionNotFound: If no such session exists or it belongs to another user.
        """
        self.prune_finished()
        controller = self._sessions.get(session_id)
        if controller is None or (user_id is not None and controller.user_id != user_id):
            raise SessionNotFound(session_id)
        return controller

    def get_by_call_id(self, call_id: str) -> Optional[SessionController]:
        for controller in self._sessions.values():
            if controller.voice_agent.call_id == call_id:
                return controller
        return None

    def remove(self, session_id: str) -> None:
        controller = self._sessions.pop(session_id, None)
        if controller is not None:
            controller.detach()
            logger.info(f"Destroyed session {session_id}")

    def prune_finished(self) -> int:
        """Destroy sessions that finished more than finished_ttl seconds ago and have no relay."""
        now = time.monotonic()
        expired = [
            session_id for session_id, controller in self._sessions.items()
            if controller.finished_at is not None
            and not controller.has_relay
            and now - controller.finished_at >= self.finished_ttl
        ]
        for session_id in expired:
            self.remove(session_id)
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)


session_registry = SessionRegistry()


def get_session_registry() -> SessionRegistry:
    """FastAPI dependency returning the process-wide registry."""
    return session_registry
