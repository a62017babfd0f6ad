"""
Description:
This module defines the schemas for feedback generation and the feedback view:
the createFeedback request/result pair, the structured evaluation the language
model must return, and the stored record rendered to the client.

Dependencies:
- pydantic: For data validation and settings management.
- typing: For type annotations.

Author: @kcaparas1630
"""
from pydantic import BaseModel, Field
from typing import List, Optional, Literal
from datetime import datetime
from app.schemas.session.transcript_turn import TranscriptTurn

CategoryName = Literal[
    "Communication Skills",
    "Technical Knowledge",
    "Problem-Solving",
    "Cultural & Role Fit",
    "Confidence & Clarity",
]


class CreateFeedbackRequest(BaseModel):
    interview_id: str = Field(..., alias="interviewId")
    user_id: str = Field(..., alias="userId")
    transcript: List[TranscriptTurn] = Field(default_factory=list)
    feedback_id: Optional[str] = Field(None, alias="feedbackId")

    model_config = {"populate_by_name": True}


class CreateFeedbackResult(BaseModel):
    success: bool
    feedback_id: Optional[str] = Field(None, serialization_alias="feedbackId")


class CategoryScore(BaseModel):
    name: CategoryName
    score: int = Field(ge=0, le=100)
    comment: str = ""


class FeedbackEvaluation(BaseModel):
    """Structured evaluation the language model must return."""
    total_score: int = Field(ge=0, le=100, alias="totalScore")
    category_scores: List[CategoryScore] = Field(default_factory=list, alias="categoryScores")
    strengths: List[str] = Field(default_factory=list)
    areas_for_improvement: List[str] = Field(default_factory=list, alias="areasForImprovement")
    final_assessment: str = Field(default="", alias="finalAssessment")

    model_config = {"populate_by_name": True}


class FeedbackRecord(BaseModel):
    id: str
    interview_id: str
    user_id: str
    total_score: int
    category_scores: List[CategoryScore] = Field(default_factory=list)
    strengths: List[str] = Field(default_factory=list)
    areas_for_improvement: List[str] = Field(default_factory=list)
    final_assessment: str = ""
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class InterviewRecord(BaseModel):
    id: str
    user_id: str
    role: str
    level: str
    interview_type: str
    techstack: List[str] = Field(default_factory=list)
    questions: List[str] = Field(default_factory=list)
    finalized: bool = True
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class FeedbackViewResponse(BaseModel):
    interview: InterviewRecord
    feedback: Optional[FeedbackRecord] = None
