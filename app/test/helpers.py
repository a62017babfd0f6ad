"""
Test doubles and helpers shared across the test modules.

Author: @kcaparas1630
"""

from typing import Any, Dict, List, Optional, Union
from app.database import SessionLocal
from app.core.voice_agent_client import VapiClient
from app.errors.exceptions import VoiceAgentError
from app.models.user_models import Profile, User
from app.schemas.feedback.feedback_schemas import CreateFeedbackRequest, CreateFeedbackResult


class FakeVoiceAgent(VapiClient):
    """VapiClient that records start/stop instead of calling the API."""

    def __init__(self, fail_start: bool = False, fail_stop: bool = False):
        super().__init__(api_key="test-key", base_url="https://vapi.test")
        self.fail_start = fail_start
        self.fail_stop = fail_stop
        self.started: List[tuple] = []
        self.stop_calls = 0

    async def start(self, assistant_or_workflow: Union[str, Dict[str, Any]], variable_values: Dict[str, Any]) -> Dict[str, Any]:
        if self.fail_start:
            raise VoiceAgentError("Voice agent is unreachable")
        self.started.append((assistant_or_workflow, variable_values))
        self.call_id = f"call-{len(self.started)}"
        self.web_call_url = f"https://calls.test/{self.call_id}"
        self.control_url = f"https://control.test/{self.call_id}"
        return {"id": self.call_id}

    async def stop(self) -> None:
        self.stop_calls += 1
        if self.fail_stop:
            raise VoiceAgentError("Voice agent is unreachable")


class FakeFeedbackService:
    """Records feedback submissions and answers with a fixed result."""

    def __init__(self, success: bool = True, feedback_id: Optional[str] = "feedback-1"):
        self.success = success
        self.feedback_id = feedback_id
        self.requests: List[CreateFeedbackRequest] = []

    async def create_feedback(self, request: CreateFeedbackRequest) -> CreateFeedbackResult:
        self.requests.append(request)
        if self.success:
            return CreateFeedbackResult(success=True, feedback_id=self.feedback_id)
        return CreateFeedbackResult(success=False)


def read_user(user_id: str):
    """Return (credits, experience) as stored."""
    with SessionLocal() as db:
        user = db.get(User, user_id)
        profile = db.get(Profile, user_id)
        return (user.credits if user else None, profile.experience if profile else None)
