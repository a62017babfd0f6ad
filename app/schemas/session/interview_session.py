"""
Description:
Request and response schemas for the interview session endpoints: session creation,
voice-agent event relay, and the session snapshot returned to the client.

Dependencies:
- pydantic: Used for data validation and settings management.
- typing: For type annotations.

Author: @kcaparas1630
"""
from pydantic import BaseModel, Field, model_validator
from typing import Optional, List, Dict, Any, Literal
from app.schemas.session.call_status import CallStatus
from app.schemas.session.transcript_turn import TranscriptTurn
from app.constants.session_constants import GENERATE_SESSION_TYPE


class CreateSessionRequest(BaseModel):
    """Parameters the client renders the agent with."""
    user_name: str = Field(..., alias="userName", description="Name passed to the workflow as 'username'")
    interview_id: Optional[str] = Field(None, alias="interviewId", description="Interview the session evaluates")
    feedback_id: Optional[str] = Field(None, alias="feedbackId", description="Existing feedback record to overwrite")
    type: str = Field(..., description="'generate' for practice/onboarding calls, anything else for interviews")
    questions: Optional[List[str]] = Field(None, description="Questions for the interviewer assistant")

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def require_interview_for_feedback(self):
        if self.type != GENERATE_SESSION_TYPE and not self.interview_id:
            raise ValueError("interviewId is required for interview sessions")
        return self


class VoiceAgentEvent(BaseModel):
    """One event emitted by the voice-agent SDK and relayed by the client."""
    event: Literal["call-start", "call-end", "message", "speech-start", "speech-end", "error"]
    data: Optional[Dict[str, Any]] = Field(default=None, description="Event payload, e.g. the transcript message")


class SessionSnapshot(BaseModel):
    """Current state of a session as seen by the client."""
    session_id: str
    user_id: str
    type: str
    interview_id: Optional[str] = None
    call_status: CallStatus
    messages: List[TranscriptTurn] = Field(default_factory=list)
    last_message: str = ""
    is_speaking: bool = False
    credits: Optional[int] = None
    redirect_to: Optional[str] = Field(None, description="Latest route the client was told to navigate to")
    call_id: Optional[str] = None
    web_call_url: Optional[str] = None
