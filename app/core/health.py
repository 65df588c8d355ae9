"""Health check endpoints."""

from typing import Literal

from fastapi import APIRouter, Depends
from google.cloud import firestore
from pydantic import BaseModel

from app.core.config import Settings, get_settings
from app.core.firestore import get_firestore_client, ping_firestore
from app.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: Literal["ok", "degraded", "unhealthy"]
    database: Literal["connected", "disconnected"] | None = None


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check endpoint.

    Returns:
        Health status response.
    """
    logger.debug("health.check_started")
    return HealthResponse(status="ok")


@router.get("/health/ready", response_model=HealthResponse)
async def readiness_check(
    client: firestore.AsyncClient = Depends(get_firestore_client),
    settings: Settings = Depends(get_settings),
) -> HealthResponse:
    """Readiness check including Firestore connectivity.

    Args:
        client: Firestore client dependency.
        settings: Application settings.

    Returns:
        Health status with database state.
    """
    logger.debug("health.readiness_check_started")

    if await ping_firestore(client, settings.sales_collection):
        logger.info("health.database_connected")
        return HealthResponse(status="ok", database="connected")

    return HealthResponse(status="unhealthy", database="disconnected")
