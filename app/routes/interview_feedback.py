"""
Interview Feedback API Routes

Description:
This module defines the routes for generating feedback from a finished interview
transcript and for the feedback view.

- POST /api/feedback generates and stores feedback. It always answers 200 with a
  success flag; failures are logged, never surfaced.
- GET /api/interviews/{interview_id}/feedback returns the interview with the caller's
  stored feedback, or redirects to the dashboard when the interview does not exist.

Dependencies:
- fastapi: For creating the FastAPI application and defining routes.
- app.services.feedback.feedback_service: For generating and reading feedback.
- app.services.auth.firebase_auth: For resolving the caller.
- loguru: For logging information about the request and any errors that occur.

Author: @kcaparas1630

"""
from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse
from loguru import logger
from app.constants.session_constants import DASHBOARD_ROUTE
from app.errors.exceptions import Unauthorized
from app.schemas.feedback.feedback_schemas import CreateFeedbackRequest, CreateFeedbackResult, FeedbackViewResponse
from app.services.auth.firebase_auth import get_current_user_uid
from app.services.feedback.feedback_service import FeedbackService, feedback_service

router = APIRouter(
    prefix="/api",
    tags=["interview-feedback"],
    responses={404: {"description": "Not found"}}
)


def get_feedback_service() -> FeedbackService:
    return feedback_service


@router.post("/feedback", response_model=CreateFeedbackResult, response_model_by_alias=True)
async def create_feedback(
    request: CreateFeedbackRequest,
    uid: str = Depends(get_current_user_uid),
    service: FeedbackService = Depends(get_feedback_service),
):
    """
    Generate feedback for a finished interview transcript.
    """
    if request.user_id != uid:
        raise Unauthorized("Cannot create feedback for another user")
    return await service.create_feedback(request)


@router.get("/interviews/{interview_id}/feedback", response_model=FeedbackViewResponse)
async def feedback_view(
    interview_id: str,
    uid: str = Depends(get_current_user_uid),
    service: FeedbackService = Depends(get_feedback_service),
):
    """
    Fetch the interview and its feedback, redirecting to the dashboard if it does not exist.
    """
    interview = service.get_interview_by_id(interview_id)
    if interview is None:
        logger.info(f"Interview {interview_id} not found, redirecting to {DASHBOARD_ROUTE}")
        return RedirectResponse(url=DASHBOARD_ROUTE)

    feedback = service.get_feedback_by_interview_id(interview_id, uid)
    return FeedbackViewResponse(interview=interview, feedback=feedback)
