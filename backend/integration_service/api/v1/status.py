"""Service status endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter

from integration_service.core.config import settings
from integration_service.core.constants import SERVICE_NAME, SERVICE_VERSION

router = APIRouter(tags=["Status"])


@router.get("/status")
async def get_status() -> dict[str, str]:
    """Service name, version and the generation model in use."""
    return {
        "service": SERVICE_NAME,
        "status": "UP",
        "version": SERVICE_VERSION,
        "model": settings.OLLAMA_MODEL,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
