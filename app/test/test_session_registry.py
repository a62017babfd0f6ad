"""
Test Session Registry Module

Tests lookup by owner and call id, and eviction of finished sessions once their
grace period has passed.

Dependencies:
- pytest: For testing framework
- app.services.session_controller.session_registry: The module being tested

Author: @kcaparas1630
"""

import pytest
from app.errors.exceptions import SessionNotFound
from app.schemas.session.interview_session import CreateSessionRequest
from app.services.credit_gate.credit_gate_service import CreditGate
from app.services.session_controller.session_registry import SessionRegistry
from app.test.helpers import FakeFeedbackService, FakeVoiceAgent


def build_registry(finished_ttl=300.0):
    return SessionRegistry(
        credit_gate=CreditGate(),
        feedback_service=FakeFeedbackService(),
        voice_agent_factory=FakeVoiceAgent,
        finished_ttl=finished_ttl,
    )


def interview_request():
    return CreateSessionRequest(user_name="Ada", interview_id="interview-1", type="interview")


class TestLookup:

    def test_get_checks_owner(self, make_user):
        registry = build_registry()
        controller = registry.create(make_user(), interview_request())

        assert registry.get(controller.session_id, "user-1") is controller
        with pytest.raises(SessionNotFound):
            registry.get(controller.session_id, "someone-else")

    @pytest.mark.asyncio
    async def test_get_by_call_id(self, make_user):
        registry = build_registry()
        controller = registry.create(make_user(), interview_request())
        await controller.start()

        assert registry.get_by_call_id("call-1") is controller
        assert registry.get_by_call_id("call-2") is None


class TestEviction:

    @pytest.mark.asyncio
    async def test_finished_session_is_evicted_after_grace_period(self, make_user):
        registry = build_registry(finished_ttl=0)
        user_id = make_user()
        finished = registry.create(user_id, interview_request())
        await finished.disconnect()

        live = registry.create(user_id, interview_request())

        assert len(registry) == 1
        assert registry.get(live.session_id) is live
        with pytest.raises(SessionNotFound):
            registry.get(finished.session_id)

    @pytest.mark.asyncio
    async def test_finished_session_is_kept_within_grace_period(self, make_user):
        registry = build_registry(finished_ttl=300)
        controller = registry.create(make_user(), interview_request())
        await controller.disconnect()

        assert registry.get(controller.session_id) is controller

    @pytest.mark.asyncio
    async def test_session_with_relay_attached_is_not_evicted(self, make_user):
        registry = build_registry(finished_ttl=0)
        controller = registry.create(make_user(), interview_request())
        controller.attach_relay()
        await controller.disconnect()

        assert registry.prune_finished() == 0
        controller.release_relay()
        assert registry.prune_finished() == 1
        assert len(registry) == 0

    def test_unfinished_sessions_are_never_evicted(self, make_user):
        registry = build_registry(finished_ttl=0)
        registry.create(make_user(), interview_request())

        assert registry.prune_finished() == 0
        assert len(registry) == 1

    def test_grace_period_defaults_from_environment(self, monkeypatch):
        monkeypatch.setenv("SESSION_FINISHED_TTL_SECONDS", "42")
        registry = SessionRegistry(credit_gate=CreditGate(), feedback_service=FakeFeedbackService(), voice_agent_factory=FakeVoiceAgent)
        assert registry.finished_ttl == 42.0
