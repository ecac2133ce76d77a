"""Routes for browsing and managing catalog products."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Query, Request, status
from pymongo.errors import PyMongoError

from src.api.submission import invalid_payload, read_submission
from src.config import settings
from src.models.product import DeletionResponse, Pagination, Product, ProductPage
from src.services.catalog.errors import PayloadValidationError, ProductNotFoundError
from src.services.catalog.forms import build_product_fields
from src.services.catalog.product_store import ProductStoreDependency
from src.services.catalog.query import ProductQuery, page_count
from src.services.events.notifier import (
    PRODUCT_CREATED,
    PRODUCT_DELETED,
    PRODUCT_UPDATED,
    EventNotifier,
    NotifierDependency,
)
from src.services.storage.uploads import UploadStorageDependency

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["products"])

PRODUCT_NOT_FOUND = "Product not found"


async def _publish(notifier: EventNotifier, event: str, payload: Any) -> None:
    try:
        await notifier.publish(event, payload)
    except Exception as exc:
        logger.warning("Failed to publish %s event: %s", event, exc)


@router.get(
    "",
    response_model=ProductPage,
    summary="List active products with filters, sorting and pagination",
)
async def list_products(
    store: ProductStoreDependency,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    category: str | None = None,
    subcategory: str | None = None,
    brand: str | None = None,
    min_price: float | None = Query(None, alias="minPrice"),
    max_price: float | None = Query(None, alias="maxPrice"),
    product_status: str | None = Query(None, alias="status"),
    featured: str | None = None,
    search: str | None = None,
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
) -> ProductPage:
    query = ProductQuery(
        page=page,
        limit=limit,
        category=category,
        subcategory=subcategory,
        brand=brand,
        status=product_status,
        min_price=min_price,
        max_price=max_price,
        featured=featured,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )

    try:
        products, total = await store.list_page(query)
    except PyMongoError as exc:
        logger.error("Fetch products error: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch products",
        ) from exc

    return ProductPage(
        products=products,
        pagination=Pagination(
            current=query.page,
            pages=page_count(total, query.limit),
            total=total,
        ),
    )


@router.get("/{product_id}", response_model=Product, summary="Fetch one product")
async def get_product(product_id: str, store: ProductStoreDependency) -> Product:
    try:
        return await store.get(product_id)
    except ProductNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND
        ) from exc
    except PyMongoError as exc:
        logger.error("Fetch product %s error: %s", product_id, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch product",
        ) from exc


@router.post(
    "",
    response_model=Product,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product, optionally uploading up to five images",
)
async def create_product(
    request: Request,
    store: ProductStoreDependency,
    uploads: UploadStorageDependency,
    notifier: NotifierDependency,
) -> Product:
    """Create a product from a multipart form.

    ``specifications``, ``tags`` and ``compatibility`` may be JSON-encoded
    strings. Files sent under ``images`` are stored before the product is
    written; the first one becomes the primary image. A failed insert leaves
    the stored files in place.
    """
    payload, files = await read_submission(
        request, "images", settings.MAX_PRODUCT_IMAGES
    )
    try:
        fields = build_product_fields(payload)
    except PayloadValidationError as exc:
        raise invalid_payload("Failed to create product", exc) from exc

    image_paths = await uploads.save_all(files)

    try:
        product = await store.create(fields, image_paths)
    except PyMongoError as exc:
        logger.error("Create product error: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Failed to create product", "details": str(exc)},
        ) from exc

    await _publish(
        notifier, PRODUCT_CREATED, product.model_dump(mode="json", by_alias=True)
    )
    return product


@router.put(
    "/{product_id}",
    response_model=Product,
    summary="Update a product, replacing its images when new ones are uploaded",
)
async def update_product(
    product_id: str,
    request: Request,
    store: ProductStoreDependency,
    uploads: UploadStorageDependency,
    notifier: NotifierDependency,
) -> Product:
    """Apply a product form to an existing product.

    The rating changes only when the form carries one. Uploaded files replace
    ``image`` and ``images`` entirely.
    """
    payload, files = await read_submission(
        request, "images", settings.MAX_PRODUCT_IMAGES
    )
    try:
        changes = build_product_fields(payload, partial=True)
    except PayloadValidationError as exc:
        raise invalid_payload("Failed to update product", exc) from exc

    if files:
        image_paths = await uploads.save_all(files)
        changes["image"] = image_paths[0]
        changes["images"] = image_paths

    try:
        product = await store.update(product_id, changes)
    except ProductNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND
        ) from exc
    except PyMongoError as exc:
        logger.error("Update product error: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Failed to update product", "details": str(exc)},
        ) from exc

    await _publish(
        notifier, PRODUCT_UPDATED, product.model_dump(mode="json", by_alias=True)
    )
    return product


@router.delete(
    "/{product_id}",
    response_model=DeletionResponse,
    summary="Permanently delete a product",
)
async def delete_product(
    product_id: str,
    store: ProductStoreDependency,
    notifier: NotifierDependency,
) -> DeletionResponse:
    try:
        await store.delete(product_id)
    except ProductNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND
        ) from exc
    except PyMongoError as exc:
        logger.error("Delete product error: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete product",
        ) from exc

    await _publish(notifier, PRODUCT_DELETED, product_id)
    return DeletionResponse(message="Product deleted")
