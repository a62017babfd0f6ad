"""
Credits API Route

Description:
This module defines the route the client calls on load to fetch the caller's credit
balance, which decides whether the start control is enabled and whether the
out-of-credits banner is shown.

Returns:
- An instance of CreditBalanceResponse.

Dependencies:
- fastapi: For creating the FastAPI application and defining routes.
- app.services.credit_gate.credit_gate_service: For reading the balance.
- app.services.auth.firebase_auth: For resolving the caller.
- loguru: For logging information about the request.

Author: @kcaparas1630

"""
from fastapi import APIRouter, Depends, Request
from loguru import logger
from app.core.route_limiters import limiter
from app.constants.session_constants import CREDITS_ROUTE
from app.schemas.credits.credit_balance import CreditBalanceResponse
from app.services.auth.firebase_auth import get_current_user_uid
from app.services.credit_gate.credit_gate_service import CreditGate, credit_gate

router = APIRouter(
    prefix="/api",
    tags=["credits"],
    responses={404: {"description": "Not found"}}
)


def get_credit_gate() -> CreditGate:
    return credit_gate


@router.get("/credits", response_model=CreditBalanceResponse)
@limiter.limit("30/minute")
async def get_credits(
    request: Request,
    uid: str = Depends(get_current_user_uid),
    gate: CreditGate = Depends(get_credit_gate),
):
    """
    Request parameter is required for rate limiting.
    """
    credits = gate.get_balance(uid)
    logger.info(f"Credits fetched for user {uid}: {credits}")
    return CreditBalanceResponse(
        credits=credits,
        out_of_credits=credits is None or credits <= 0,
        credits_route=CREDITS_ROUTE,
    )
