"""Firebase Authentication Service Module

This module verifies Firebase ID tokens and resolves the caller's UID. Users and
profiles are keyed by that UID, so the credit gate, the session endpoints and the
feedback view all identify the caller through get_current_user_uid.

The Firebase app is initialized on first verification, so importing this module
does not require the credentials file to be present.

Dependencies:
- firebase_admin: For Firebase ID token verification.
- fastapi: For the request object used by the dependency.
- loguru: For logging operations.
- app.errors.exceptions: For Unauthorized.

Author: @kcaparas1630
"""

import os
import threading
from typing import Optional, Tuple
import firebase_admin
from firebase_admin import auth, credentials
from fastapi import Request, WebSocket, WebSocketException
from starlette.status import WS_1008_POLICY_VIOLATION
from loguru import logger
from app.errors.exceptions import Unauthorized

_init_lock = threading.Lock()


def _get_firebase_app() -> firebase_admin.App:
    """Initialize the default Firebase app once, from FIREBASE_CREDENTIALS_PATH."""
    with _init_lock:
        try:
            return firebase_admin.get_app()
        except ValueError:
            pass

        file_path = os.getenv("FIREBASE_CREDENTIALS_PATH")
        # Check if credentials exists
        if not file_path or not os.path.exists(file_path):
            logger.error(f"Firebase credentials file not found at {file_path}")
            raise FileNotFoundError(f"Firebase credentials file not found at {file_path}")

        cred = credentials.Certificate(file_path)
        return firebase_admin.initialize_app(cred)


def verify_id_token(id_token: str) -> Tuple[Optional[dict], Optional[str]]:
    """Verify Firebase ID token and extract user information.

    Args:
        id_token (str): Firebase ID token to verify

    Returns:
        tuple: (decoded_token, uid) if valid, (None, None) if invalid

    Note:
        Checks if token is revoked using check_revoked=True parameter
    """
    app = _get_firebase_app()
    try:
        decoded_token = auth.verify_id_token(id_token, app=app, check_revoked=True)
        return decoded_token, decoded_token["uid"]
    except (auth.InvalidIdTokenError, auth.ExpiredIdTokenError, auth.RevokedIdTokenError) as e:
        logger.warning(f"Rejected Firebase ID token: {e}")
        return None, None


def get_current_user_uid(request: Request) -> str:
    """Extract and verify Firebase ID token from request headers.

    Args:
        request (Request): FastAPI request object containing headers

    Returns:
        str: Firebase UID of the authenticated user

    Raises:
        Unauthorized: If authorization header is missing, invalid, or token is expired

    Example:
        @router.get("/credits")
        async def credits(uid: str = Depends(get_current_user_uid)):
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise Unauthorized("Missing or invalid authorization header")

    token = auth_header.split(" ", 1)[1]
    _, uid = verify_id_token(token)
    if not uid:
        raise Unauthorized("Invalid or expired token")

    return uid


def get_websocket_user_uid(websocket: WebSocket) -> str:
    """Resolve the caller of a WebSocket from its ?token= query parameter.

    Browsers cannot set headers on WebSocket upgrades, so the ID token travels in
    the query string instead.

    Raises:
        WebSocketException: Policy violation (1008) if the token is missing, invalid, or expired
    """
    token = websocket.query_params.get("token")
    if not token:
        raise WebSocketException(code=WS_1008_POLICY_VIOLATION, reason="Missing token query parameter")

    _, uid = verify_id_token(token)
    if not uid:
        raise WebSocketException(code=WS_1008_POLICY_VIOLATION, reason="Invalid or expired token")

    return uid
