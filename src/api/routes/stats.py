"""Dashboard statistics over the product catalog."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from pymongo.errors import PyMongoError

from src.models.stats import CatalogStats
from src.services.catalog.product_store import ProductStoreDependency

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get(
    "",
    response_model=CatalogStats,
    summary="Count active, in-stock, out-of-stock and featured products",
)
async def catalog_stats(store: ProductStoreDependency) -> CatalogStats:
    """Recomputed on every call; the counts are not taken from one snapshot."""
    try:
        return await store.stats()
    except PyMongoError as exc:
        logger.error("Fetch statistics error: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch statistics",
        ) from exc
