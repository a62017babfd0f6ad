"""
Description:
This module contains the constants shared by the credit gate, the session controller
and the feedback view: credit accounting amounts, client route paths and the
voice-agent event names.

Author: @kcaparas1630

"""

# Credit accounting applied on every accepted session start
SESSION_CREDIT_COST = 1
SESSION_EXPERIENCE_REWARD = 20

# Client-side routes the service instructs the browser to navigate to
DASHBOARD_ROUTE = "/dashboard"
CREDITS_ROUTE = "/dashboard/credits"
FEEDBACK_ROUTE_TEMPLATE = "/dashboard/interview/{interview_id}/feedback"

# Session type for practice/onboarding calls that never produce feedback
GENERATE_SESSION_TYPE = "generate"


def feedback_route(interview_id: str) -> str:
    return FEEDBACK_ROUTE_TEMPLATE.format(interview_id=interview_id)


# Voice-agent event names
CALL_START = "call-start"
CALL_END = "call-end"
MESSAGE = "message"
SPEECH_START = "speech-start"
SPEECH_END = "speech-end"
ERROR = "error"

VOICE_AGENT_EVENTS = (CALL_START, CALL_END, MESSAGE, SPEECH_START, SPEECH_END, ERROR)
