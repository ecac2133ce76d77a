"""System-level routes such as health checks."""

from __future__ import annotations

import logging

from fastapi import APIRouter
from pymongo.errors import PyMongoError

from src.config import settings
from src.services.storage.mongo import DatabaseDependency, ping

logger = logging.getLogger(__name__)

router = APIRouter(tags=["system"])


@router.get("/")
async def read_root() -> dict[str, str]:
    """Banner endpoint used by smoke tests."""

    return {"message": "Auto parts catalog API running"}


@router.get("/health")
async def health_check(database: DatabaseDependency) -> dict[str, str]:
    """Health check endpoint with MongoDB connectivity check."""

    try:
        await ping(database)
        mongo_status = "connected"
    except PyMongoError as exc:
        logger.warning("Health check could not reach MongoDB: %s", exc)
        mongo_status = "disconnected"

    return {
        "status": "healthy",
        "mongo": mongo_status,
        "environment": settings.ENVIRONMENT,
    }
