"""Health check endpoint."""

from fastapi import APIRouter

from src.api.response import success_response
from src.services.catalog_service import is_catalog_expansion_enabled

router = APIRouter(tags=["System"])


@router.get("/health")
async def health_check() -> dict:
    """Return system health status and whether catalog expansion is on."""
    return success_response(
        {"status": "ok", "catalogExpansion": is_catalog_expansion_enabled()}
    )
