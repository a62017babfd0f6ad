from fastapi import HTTPException
from starlette.status import (
    HTTP_401_UNAUTHORIZED,
    HTTP_402_PAYMENT_REQUIRED,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_502_BAD_GATEWAY,
)

class NotFound(HTTPException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=HTTP_404_NOT_FOUND, detail=detail)

class InternalServerError(HTTPException):
    def __init__(self, detail: str = "Internal server error"):
        super().__init__(status_code=HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)

class Unauthorized(HTTPException):
    def __init__(self, detail: str = "Unauthorized access"):
        super().__init__(status_code=HTTP_401_UNAUTHORIZED, detail=detail)

class DuplicateRecordError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(
            status_code=HTTP_409_CONFLICT,
            detail=detail
        )
class InsufficientCredits(HTTPException):
    def __init__(self, detail: str = "You're out of credits."):
        super().__init__(status_code=HTTP_402_PAYMENT_REQUIRED, detail=detail)
class CreditUpdateError(InternalServerError):
    def __init__(self, detail: str = "Failed to update credits."):
        super().__init__(detail=detail)
class SessionNotFound(NotFound):
    def __init__(self, session_id: str = None):
        detail = f"Session {session_id} not found." if session_id else "Session not found."
        super().__init__(detail=detail)
class SessionAlreadyStarted(DuplicateRecordError):
    def __init__(self, session_id: str = None):
        detail = f"Session {session_id} has already been started." if session_id else "Session has already been started."
        super().__init__(detail=detail)
class VoiceAgentError(HTTPException):
    def __init__(self, detail: str = "Voice agent request failed"):
        super().__init__(status_code=HTTP_502_BAD_GATEWAY, detail=detail)
