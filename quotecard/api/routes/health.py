"""
Health Routes
=============

Root endpoint describing the service. Doubles as the health check.
"""

from fastapi import APIRouter

from quotecard.config.settings import get_settings
from quotecard.models.schemas import ServiceDescriptor

router = APIRouter(tags=["Health"])


@router.get("/", response_model=ServiceDescriptor)
async def root() -> ServiceDescriptor:
    """Service descriptor with status, version and endpoint list."""
    settings = get_settings()
    return ServiceDescriptor(
        status="ok",
        message=settings.app_name,
        endpoints={
            "health": "GET /",
            "generate": "POST /api/generate-tweet",
        },
        version=settings.app_version,
    )
