"""
Feedback Service Module

This module turns a finished interview transcript into a stored feedback record and
serves stored records back to the feedback view.

Feedback generation is a single request/response to an OpenAI-compatible chat
completion that must return a JSON evaluation. The evaluation is validated, then
written to the feedback table, overwriting an existing record when the caller passes
its id. Failures are logged and reported as an unsuccessful result; they never
propagate to the caller.

Dependencies:
- openai: For the chat completion call.
- pydantic: For validating the model output.
- sqlalchemy: For persisting and reading feedback and interviews.
- loguru: For logging operations.
- app.core.ai_client_manager: For the dedicated feedback client.

Author: @kcaparas1630
"""

import os
import time
from typing import Callable, List, Optional
from openai import AsyncOpenAI
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session
from loguru import logger
from app.core.ai_client_manager import get_feedback_client
from app.database import SessionLocal
from app.models.user_models import Feedback, Interview
from app.schemas.session.transcript_turn import TranscriptTurn
from app.schemas.feedback.feedback_schemas import (
    CreateFeedbackRequest,
    CreateFeedbackResult,
    FeedbackEvaluation,
    FeedbackRecord,
    InterviewRecord,
)

FEEDBACK_SYSTEM_PROMPT = (
    "You are a professional interviewer analyzing a mock interview. "
    "Your task is to evaluate the candidate based on structured categories. "
    "Return ONLY valid JSON."
)

FEEDBACK_PROMPT_TEMPLATE = """You are an AI interviewer analyzing a mock interview. Your task is to evaluate the candidate based on structured categories. Be thorough and detailed in your analysis. Don't be lenient with the candidate. If there are mistakes or areas for improvement, point them out.

Transcript:
{transcript}

Please score the candidate from 0 to 100 in the following areas. Do not add categories other than the ones provided:
- **Communication Skills**: Clarity, articulation, structured responses.
- **Technical Knowledge**: Understanding of key concepts for the role.
- **Problem-Solving**: Ability to analyze problems and propose solutions.
- **Cultural & Role Fit**: Alignment with company values and job role.
- **Confidence & Clarity**: Confidence in responses, engagement, and clarity.

Return JSON with this exact structure:
{{"totalScore": <0-100>, "categoryScores": [{{"name": "<category>", "score": <0-100>, "comment": "<text>"}}], "strengths": ["<text>"], "areasForImprovement": ["<text>"], "finalAssessment": "<text>"}}"""


def format_transcript(transcript: List[TranscriptTurn]) -> str:
    """Render transcript turns as one "- role: content" line each."""
    return "".join(f"- {turn.role}: {turn.content}\n" for turn in transcript)


def _strip_code_fences(content: str) -> str:
    content = content.strip()
    if content.startswith("```"):
        content = content.split("\n", 1)[1] if "\n" in content else ""
        if content.rstrip().endswith("```"):
            content = content.rstrip()[:-3]
    return content.strip()


class FeedbackService:
    """
    Generates, stores and reads interview feedback.

    Attributes:
        model (str): Chat completion model used for evaluation.
        session_factory (Callable[[], Session]): Opens a database session per operation.
    """

    def __init__(self, client: Optional[AsyncOpenAI] = None, session_factory: Callable[[], Session] = SessionLocal):
        self._client = client
        self.session_factory = session_factory
        self.model = os.getenv("FEEDBACK_MODEL", "gpt-4o-mini")

    @property
    def client(self) -> AsyncOpenAI:
        # Resolved on first use so the module imports without an API key
        if self._client is None:
            self._client = get_feedback_client()
        return self._client

    async def generate_evaluation(self, transcript: List[TranscriptTurn]) -> FeedbackEvaluation:
        """
        Ask the language model to evaluate a transcript.

        Raises:
            ValueError: If the model returns empty or invalid JSON.
        """
        prompt = FEEDBACK_PROMPT_TEMPLATE.format(transcript=format_transcript(transcript))

        llm_start = time.time()
        response = await self.client.chat.completions.create(
            model=self.model,
            temperature=0.2,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": FEEDBACK_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
        )
        logger.info(f"Feedback LLM call completed in {time.time() - llm_start:.3f}s")

        content = response.choices[0].message.content
        if not content or not content.strip():
            raise ValueError("Empty evaluation received from API")

        try:
            return FeedbackEvaluation.model_validate_json(_strip_code_fences(content))
        except ValidationError as e:
            logger.error(f"Invalid evaluation content: {content[:200]}")
            raise ValueError(f"Invalid evaluation returned by model: {e}") from e

    async def create_feedback(self, request: CreateFeedbackRequest) -> CreateFeedbackResult:
        """
        Generate and persist feedback for a finished interview.

        Returns:
            CreateFeedbackResult: success with the stored feedback id, or success=False.
        """
        try:
            evaluation = await self.generate_evaluation(request.transcript)
            feedback_id = self._save_feedback(request, evaluation)
            logger.info(f"Saved feedback {feedback_id} for interview {request.interview_id}")
            return CreateFeedbackResult(success=True, feedback_id=feedback_id)
        except Exception as e:
            logger.error(f"Error saving feedback for interview {request.interview_id}: {e}")
            return CreateFeedbackResult(success=False)

    def _save_feedback(self, request: CreateFeedbackRequest, evaluation: FeedbackEvaluation) -> str:
        values = {
            "interview_id": request.interview_id,
            "user_id": request.user_id,
            "total_score": evaluation.total_score,
            "category_scores": [score.model_dump() for score in evaluation.category_scores],
            "strengths": evaluation.strengths,
            "areas_for_improvement": evaluation.areas_for_improvement,
            "final_assessment": evaluation.final_assessment,
        }
        with self.session_factory() as db:
            feedback = db.get(Feedback, request.feedback_id) if request.feedback_id else None
            if feedback is None:
                feedback = Feedback(id=request.feedback_id, **values) if request.feedback_id else Feedback(**values)
                db.add(feedback)
            else:
                for key, value in values.items():
                    setattr(feedback, key, value)
            db.commit()
            return feedback.id

    def get_interview_by_id(self, interview_id: str) -> Optional[InterviewRecord]:
        with self.session_factory() as db:
            interview = db.get(Interview, interview_id)
            return InterviewRecord.model_validate(interview) if interview else None

    def get_feedback_by_interview_id(self, interview_id: str, user_id: str) -> Optional[FeedbackRecord]:
        """Latest feedback the user has for an interview, if any."""
        with self.session_factory() as db:
            feedback = db.execute(
                select(Feedback)
                .where(Feedback.interview_id == interview_id, Feedback.user_id == user_id)
                .order_by(Feedback.created_at.desc())
                .limit(1)
            ).scalar_one_or_none()
            return FeedbackRecord.model_validate(feedback) if feedback else None


feedback_service = FeedbackService()
