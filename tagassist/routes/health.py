"""
Health check route for the TagAssist backend.

This endpoint is PUBLIC and provides a simple status check for load
balancers, monitoring, and deployment verification.
"""

from fastapi import APIRouter

from tagassist.schemas.health import HealthResponse
from tagassist.utils.logging import get_logger

logger = get_logger(__name__)

# Create router with no prefix (mounted at root level in main.py)
router = APIRouter()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint",
    status_code=200,
    tags=["system"],
)
async def health_check() -> HealthResponse:
    """
    Public health check endpoint.

    Example response:
        {
            "status": "ok",
            "service": "tagassist-backend"
        }
    """
    logger.debug("Health check endpoint called")

    return HealthResponse(status="ok")
