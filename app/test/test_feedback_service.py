"""
Test Feedback Service Module

Tests feedback generation against a stubbed chat completion client, persistence of
the evaluation, and the read paths used by the feedback view.

Dependencies:
- pytest: For testing framework
- app.services.feedback.feedback_service: The module being tested

Author: @kcaparas1630
"""

import json
import pytest
from types import SimpleNamespace
from app.schemas.feedback.feedback_schemas import CreateFeedbackRequest
from app.schemas.session.transcript_turn import TranscriptTurn
from app.services.feedback.feedback_service import FeedbackService, format_transcript

EVALUATION = {
    "totalScore": 72,
    "categoryScores": [
        {"name": "Communication Skills", "score": 80, "comment": "Clear answers."},
        {"name": "Technical Knowledge", "score": 65, "comment": "Shaky on indexing."},
    ],
    "strengths": ["Structured answers"],
    "areasForImprovement": ["Database fundamentals"],
    "finalAssessment": "Solid junior candidate.",
}


class StubCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def stub_client(content=None, error=None):
    completions = StubCompletions(content, error)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


TRANSCRIPT = [
    TranscriptTurn(role="assistant", content="Tell me about a hard bug."),
    TranscriptTurn(role="user", content="A race in our cache."),
]


def test_format_transcript():
    assert format_transcript(TRANSCRIPT) == "- assistant: Tell me about a hard bug.\n- user: A race in our cache.\n"
    assert format_transcript([]) == ""


class TestCreateFeedback:

    @pytest.mark.asyncio
    async def test_creates_and_reads_feedback(self, make_user, make_interview):
        user_id = make_user()
        interview_id = make_interview(user_id)
        client, completions = stub_client(json.dumps(EVALUATION))
        service = FeedbackService(client=client)

        result = await service.create_feedback(CreateFeedbackRequest(
            interview_id=interview_id, user_id=user_id, transcript=TRANSCRIPT,
        ))

        assert result.success is True
        assert result.feedback_id
        prompt = completions.calls[0]["messages"][1]["content"]
        assert "- user: A race in our cache." in prompt

        stored = service.get_feedback_by_interview_id(interview_id, user_id)
        assert stored.id == result.feedback_id
        assert stored.total_score == 72
        assert stored.category_scores[1].name == "Technical Knowledge"
        assert stored.areas_for_improvement == ["Database fundamentals"]

    @pytest.mark.asyncio
    async def test_existing_feedback_id_is_overwritten(self, make_user, make_interview):
        user_id = make_user()
        interview_id = make_interview(user_id)
        client, _ = stub_client(json.dumps(EVALUATION))
        service = FeedbackService(client=client)
        first = await service.create_feedback(CreateFeedbackRequest(
            interview_id=interview_id, user_id=user_id, transcript=TRANSCRIPT,
        ))

        service._client, _ = stub_client(json.dumps({**EVALUATION, "totalScore": 90}))
        second = await service.create_feedback(CreateFeedbackRequest(
            interview_id=interview_id, user_id=user_id, transcript=TRANSCRIPT, feedback_id=first.feedback_id,
        ))

        assert second.feedback_id == first.feedback_id
        assert service.get_feedback_by_interview_id(interview_id, user_id).total_score == 90

    @pytest.mark.asyncio
    async def test_fenced_json_is_accepted(self, make_user, make_interview):
        user_id = make_user()
        interview_id = make_interview(user_id)
        client, _ = stub_client("```json\n" + json.dumps(EVALUATION) + "\n```")

        result = await FeedbackService(client=client).create_feedback(CreateFeedbackRequest(
            interview_id=interview_id, user_id=user_id, transcript=TRANSCRIPT,
        ))

        assert result.success is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content,error", [
        ("not json at all", None),
        ("", None),
        (json.dumps({**EVALUATION, "totalScore": 250}), None),
        (None, RuntimeError("upstream timeout")),
    ])
    async def test_failures_report_unsuccessful_result(self, make_user, make_interview, content, error):
        user_id = make_user()
        interview_id = make_interview(user_id)
        client, _ = stub_client(content, error)
        service = FeedbackService(client=client)

        result = await service.create_feedback(CreateFeedbackRequest(
            interview_id=interview_id, user_id=user_id, transcript=TRANSCRIPT,
        ))

        assert result.success is False
        assert result.feedback_id is None
        assert service.get_feedback_by_interview_id(interview_id, user_id) is None


class TestReads:

    def test_missing_interview_returns_none(self):
        assert FeedbackService(client=object()).get_interview_by_id("missing") is None

    def test_interview_is_returned(self, make_user, make_interview):
        user_id = make_user()
        interview_id = make_interview(user_id, questions=["Q1", "Q2"])

        interview = FeedbackService(client=object()).get_interview_by_id(interview_id)

        assert interview.id == interview_id
        assert interview.questions == ["Q1", "Q2"]
