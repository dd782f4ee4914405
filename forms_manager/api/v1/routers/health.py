"""Health check endpoint."""

from fastapi import APIRouter, Depends, status

from forms_manager.api.v1.schemas import HealthResponse
from forms_manager.core.config import Settings, get_settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK, response_model=HealthResponse)
async def liveness_check(settings: Settings = Depends(get_settings)):
    """Liveness only; does not touch the database."""
    return HealthResponse(status="healthy", version=settings.app_version)
