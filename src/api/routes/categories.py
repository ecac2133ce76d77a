"""Routes for the category taxonomy."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request, status
from pymongo.errors import PyMongoError

from src.api.submission import invalid_payload, read_submission
from src.models.category import Category
from src.services.catalog.category_store import CategoryStoreDependency
from src.services.catalog.errors import PayloadValidationError
from src.services.catalog.forms import build_category

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=list[Category], summary="List active categories")
async def list_categories(store: CategoryStoreDependency) -> list[Category]:
    try:
        return await store.list_active()
    except PyMongoError as exc:
        logger.error("Fetch categories error: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch categories",
        ) from exc


@router.post(
    "",
    response_model=Category,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
)
async def create_category(
    request: Request, store: CategoryStoreDependency
) -> Category:
    """Insert a category; a duplicate name is reported as a plain 500."""
    payload, _ = await read_submission(request, "files", max_files=0)
    try:
        category = build_category(payload)
    except PayloadValidationError as exc:
        raise invalid_payload("Failed to create category", exc) from exc

    try:
        return await store.create(category)
    except PyMongoError as exc:
        logger.error("Create category error: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create category",
        ) from exc
