"""
Session Controller Module

This module owns the lifecycle of one voice interview session:

    INACTIVE -> CONNECTING -> ACTIVE -> FINISHED

start() spends a credit through the credit gate and starts the voice call. Events
from the voice agent move the session forward and fill the transcript. Reaching
FINISHED, whether by the agent's call-end event or by an explicit disconnect,
happens once per session. It sends the client to the dashboard for "generate"
sessions; every other session submits its transcript for feedback and sends the
client to the feedback page, falling back to the dashboard when submission fails.

Every external call is made once. Failures are logged, never retried.

Dependencies:
- loguru: For logging operations.
- app.core.voice_agent_client: For the voice agent handle.
- app.services.credit_gate.credit_gate_service: For credit checks and charges.
- app.services.feedback.feedback_service: For transcript submission.
- app.services.session_controller.navigator: For client route transitions.

Author: @kcaparas1630
"""

import os
import time
from typing import Any, Dict, List, Optional
from loguru import logger
from pydantic import ValidationError
from app.constants.interviewer import INTERVIEWER
from app.constants.session_constants import (
    CALL_END,
    CALL_START,
    DASHBOARD_ROUTE,
    ERROR,
    GENERATE_SESSION_TYPE,
    MESSAGE,
    SPEECH_END,
    SPEECH_START,
    feedback_route,
)
from app.core.voice_agent_client import VapiClient
from app.errors.exceptions import CreditUpdateError, InternalServerError, SessionAlreadyStarted, VoiceAgentError
from app.schemas.feedback.feedback_schemas import CreateFeedbackRequest
from app.schemas.session.call_status import CallStatus
from app.schemas.session.interview_session import CreateSessionRequest, SessionSnapshot
from app.schemas.session.transcript_turn import TRANSCRIPT_ROLES, TranscriptTurn
from app.services.credit_gate.credit_gate_service import CreditGate
from app.services.feedback.feedback_service import FeedbackService
from app.services.session_controller.navigator import Navigator


def format_questions(questions: Optional[List[str]]) -> str:
    """Render the question list as one "- question" line each."""
    if not questions:
        return ""
    return "\n".join(f"- {question}" for question in questions)


class SessionController:
    """
    State machine for a single voice interview session.

    Attributes:
        session_id (str): Registry key of this session.
        user_id (str): Owner of the session and of the credits it spends.
        call_status (CallStatus): Current lifecycle state.
        messages (List[TranscriptTurn]): Final transcript turns in arrival order.
        last_message (str): Content of the most recent transcript turn.
        is_speaking (bool): Whether the assistant is currently speaking.
        credits (Optional[int]): Last known credit balance.
    """

    def __init__(
        self,
        session_id: str,
        user_id: str,
        request: CreateSessionRequest,
        voice_agent: VapiClient,
        credit_gate: CreditGate,
        feedback_service: FeedbackService,
        navigator: Optional[Navigator] = None,
        workflow_id: Optional[str] = None,
    ):
        self.session_id = session_id
        self.user_id = user_id
        self.user_name = request.user_name
        self.interview_id = request.interview_id
        self.feedback_id = request.feedback_id
        self.type = request.type
        self.questions = request.questions
        self.voice_agent = voice_agent
        self.credit_gate = credit_gate
        self.feedback_service = feedback_service
        self.navigator = navigator or Navigator()
        self.workflow_id = workflow_id if workflow_id is not None else os.getenv("VAPI_WORKFLOW_ID")

        self.call_status = CallStatus.INACTIVE
        self.messages: List[TranscriptTurn] = []
        self.last_message = ""
        self.is_speaking = False
        self.credits: Optional[int] = None
        self.finished_at: Optional[float] = None
        self.relay_count = 0

        self._handlers = {
            CALL_START: self._on_call_start,
            CALL_END: self._on_call_end,
            MESSAGE: self._on_message,
            SPEECH_START: self._on_speech_start,
            SPEECH_END: self._on_speech_end,
            ERROR: self._on_error,
        }
        for event, handler in self._handlers.items():
            self.voice_agent.on(event, handler)

    @property
    def is_generate(self) -> bool:
        return self.type == GENERATE_SESSION_TYPE

    def load_credits(self) -> Optional[int]:
        """Load the balance shown before the call starts. Read failures leave it unknown."""
        try:
            self.credits = self.credit_gate.get_balance(self.user_id)
        except CreditUpdateError as e:
            logger.error(f"Failed to fetch credits: {e.detail}")
        return self.credits

    async def start(self) -> None:
        """
        Spend a credit and start the voice call.

        Raises:
            SessionAlreadyStarted: If the session left INACTIVE already.
            InsufficientCredits: If the user has no credits left.
            CreditUpdateError: If the credit or experience update failed.
            VoiceAgentError: If the voice call could not be created.
        """
        if self.call_status != CallStatus.INACTIVE:
            raise SessionAlreadyStarted(self.session_id)
        if self.is_generate and not self.workflow_id:
            raise InternalServerError("VAPI_WORKFLOW_ID is not configured.")

        balance = self.credit_gate.authorize(self.user_id)
        self.credits = self.credit_gate.charge_session(self.user_id, balance)
        self.call_status = CallStatus.CONNECTING
        logger.info(f"Session {self.session_id} connecting ({self.type})")

        if self.is_generate:
            await self.voice_agent.start(self.workflow_id, {
                "username": self.user_name,
                "userid": self.user_id,
            })
        else:
            await self.voice_agent.start(INTERVIEWER, {
                "questions": format_questions(self.questions),
            })

        if self.call_status == CallStatus.FINISHED:
            # Disconnected while the call was being created
            logger.info(f"Session {self.session_id} finished during call setup, ending call {self.voice_agent.call_id}")
            try:
                await self.voice_agent.stop()
            except VoiceAgentError as e:
                logger.error(f"Failed to stop voice call for session {self.session_id}: {e.detail}")

    async def disconnect(self) -> None:
        """End the session from the client side."""
        if not self._mark_finished():
            return
        try:
            await self.voice_agent.stop()
        except VoiceAgentError as e:
            logger.error(f"Failed to stop voice call for session {self.session_id}: {e.detail}")
        await self._handle_finished()

    async def dispatch(self, event: str, data: Optional[Dict[str, Any]] = None) -> None:
        """Feed one relayed voice-agent event through the subscribed handlers."""
        if data is None:
            await self.voice_agent.emit(event)
        else:
            await self.voice_agent.emit(event, data)

    @property
    def has_relay(self) -> bool:
        """Whether a browser relay is forwarding the SDK events for this session."""
        return self.relay_count > 0

    def attach_relay(self) -> None:
        self.relay_count += 1

    def release_relay(self) -> None:
        self.relay_count = max(0, self.relay_count - 1)

    def detach(self) -> None:
        """Unsubscribe from the voice agent. Called when the session is destroyed."""
        for event, handler in self._handlers.items():
            self.voice_agent.off(event, handler)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            session_id=self.session_id,
            user_id=self.user_id,
            type=self.type,
            interview_id=self.interview_id,
            call_status=self.call_status,
            messages=list(self.messages),
            last_message=self.last_message,
            is_speaking=self.is_speaking,
            credits=self.credits,
            redirect_to=self.navigator.current,
            call_id=self.voice_agent.call_id,
            web_call_url=self.voice_agent.web_call_url,
        )

    # Voice agent event handlers

    async def _on_call_start(self, *_: Any) -> None:
        if self.call_status != CallStatus.CONNECTING:
            logger.warning(f"Ignoring call-start for session {self.session_id} in state {self.call_status.value}")
            return
        self.call_status = CallStatus.ACTIVE
        logger.info(f"Session {self.session_id} active")

    async def _on_call_end(self, *_: Any) -> None:
        if self._mark_finished():
            await self._handle_finished()

    async def _on_message(self, message: Optional[Dict[str, Any]] = None) -> None:
        if not message:
            return
        if message.get("type") != "transcript" or message.get("transcriptType") != "final":
            return
        if message.get("role") not in TRANSCRIPT_ROLES:
            logger.warning(f"Dropping transcript with unknown role: {message.get('role')}")
            return
        try:
            turn = TranscriptTurn(role=message.get("role"), content=message.get("transcript", ""))
        except ValidationError as e:
            logger.warning(f"Dropping malformed transcript in session {self.session_id}: {e.errors()[:1]}")
            return
        self.messages.append(turn)
        self.last_message = turn.content

    async def _on_speech_start(self, *_: Any) -> None:
        logger.debug("speech start")
        self.is_speaking = True

    async def _on_speech_end(self, *_: Any) -> None:
        logger.debug("speech end")
        self.is_speaking = False

    async def _on_error(self, error: Any = None) -> None:
        logger.error(f"Voice agent error in session {self.session_id}: {error}")

    # Terminal state

    def _mark_finished(self) -> bool:
        if self.call_status == CallStatus.FINISHED:
            return False
        self.call_status = CallStatus.FINISHED
        self.finished_at = time.monotonic()
        logger.info(f"Session {self.session_id} finished with {len(self.messages)} transcript turns")
        return True

    async def _handle_finished(self) -> None:
        if self.is_generate:
            await self.navigator.push(DASHBOARD_ROUTE)
            return

        await self.navigator.push(feedback_route(self.interview_id))
        result = await self.feedback_service.create_feedback(CreateFeedbackRequest(
            interview_id=self.interview_id,
            user_id=self.user_id,
            transcript=list(self.messages),
            feedback_id=self.feedback_id,
        ))
        if result.success and result.feedback_id:
            self.feedback_id = result.feedback_id
        else:
            logger.error(f"Error saving feedback for session {self.session_id}")
            await self.navigator.push(DASHBOARD_ROUTE)
