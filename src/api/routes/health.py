"""
Health check and monitoring endpoints.
"""
from datetime import datetime
from fastapi import APIRouter
from ..models import HealthResponse
from ..config import settings
from config.settings import gmail_config, supabase_config


router = APIRouter(prefix="/health", tags=["health"])


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check endpoint",
    description="Check if the API is running and which integrations are configured",
    responses={
        200: {"description": "Service is healthy"}
    }
)
async def health_check() -> HealthResponse:
    """
    Health check endpoint for monitoring.

    Returns:
        Health status information
    """
    return HealthResponse(
        status="healthy",
        timestamp=datetime.utcnow(),
        version=settings.app_version,
        dependencies={
            "gmail_oauth": "configured" if gmail_config.is_configured() else "missing",
            "supabase": "configured" if supabase_config.url else "missing",
        }
    )
