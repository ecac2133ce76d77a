"""Routes for part brands."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request, status
from pymongo.errors import PyMongoError

from src.api.submission import invalid_payload, read_submission
from src.models.brand import Brand
from src.services.catalog.brand_store import BrandStoreDependency
from src.services.catalog.errors import PayloadValidationError
from src.services.catalog.forms import build_brand_fields
from src.services.storage.uploads import UploadStorageDependency

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/brands", tags=["brands"])


@router.get("", response_model=list[Brand], summary="List active brands")
async def list_brands(store: BrandStoreDependency) -> list[Brand]:
    try:
        return await store.list_active()
    except PyMongoError as exc:
        logger.error("Fetch brands error: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch brands",
        ) from exc


@router.post(
    "",
    response_model=Brand,
    status_code=status.HTTP_201_CREATED,
    summary="Create a brand with an optional logo upload",
)
async def create_brand(
    request: Request,
    store: BrandStoreDependency,
    uploads: UploadStorageDependency,
) -> Brand:
    """Create a brand from a multipart form or a JSON body."""
    payload, logos = await read_submission(request, "logo", max_files=1)

    try:
        fields = build_brand_fields(payload)
    except PayloadValidationError as exc:
        raise invalid_payload("Failed to create brand", exc) from exc

    if logos:
        fields["logo"] = await uploads.save(logos[0])

    try:
        return await store.create(fields)
    except PyMongoError as exc:
        logger.error("Create brand error: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create brand",
        ) from exc
