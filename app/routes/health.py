"""
Health check endpoint for the application.

Description:
This module defines a FastAPI route for checking the health status of the service
and reporting how many voice sessions are currently live.

Arguments:
- request: An instance of Request, required for rate limiting.

Returns:
- A JSON response such as {"status": "ok", "active_sessions": 2}.

Dependencies:
- fastapi: For creating the FastAPI application and defining routes.
- app.core.route_limiters: For rate limiting functionality.
- app.schemas.health_response: For defining the response model.
- loguru: For logging information about the health check endpoint.

Author: @kcaparas1630

"""
from fastapi import APIRouter, Depends, Request
from app.core.route_limiters import limiter
from app.schemas.health_response import HealthResponse
from app.services.session_controller.session_registry import SessionRegistry, get_session_registry
from loguru import logger

router = APIRouter(
    prefix="/api",
    tags=["health"],
    responses={404: {"description": "Not found"}}
)

@router.get("/health", response_model=HealthResponse)
@limiter.limit("10/minute")  # Custom limit for this endpoint
async def health(request: Request, registry: SessionRegistry = Depends(get_session_registry)):
    """
    Request parameter is required for rate limiting.
    """
    logger.info("Health check endpoint called")
    return HealthResponse(status="ok", active_sessions=len(registry))
