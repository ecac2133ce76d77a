"""MongoDB-backed product persistence."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from typing import Annotated, Any

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument

from src.models.product import Product
from src.models.stats import CatalogStats, CategoryCount
from src.services.catalog.errors import ProductNotFoundError
from src.services.catalog.query import ProductQuery, build_product_filter, build_sort
from src.services.storage.mongo import (
    PRODUCTS_COLLECTION,
    DatabaseDependency,
    parse_object_id,
    serialize_document,
    utcnow,
)

logger = logging.getLogger(__name__)

_ACTIVE = {"isActive": True}
_TICK = timedelta(milliseconds=1)


def _to_product(document: dict[str, Any]) -> Product:
    return Product.model_validate(serialize_document(document))


def _next_timestamp(previous: datetime | None) -> datetime:
    """Current time, kept at least one millisecond past ``previous``."""
    now = utcnow()
    if previous is None:
        return now
    if previous.tzinfo is None:
        previous = previous.replace(tzinfo=UTC)
    return max(now, previous + _TICK)


class ProductStore:
    """Product CRUD, listing and aggregate counts over one collection."""

    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self._collection = collection

    async def list_page(self, query: ProductQuery) -> tuple[list[Product], int]:
        """Return one page of matching products and the total match count."""
        filters = build_product_filter(query)
        cursor = (
            self._collection.find(filters)
            .sort(build_sort(query))
            .skip(query.skip)
            .limit(query.limit)
        )
        documents = await cursor.to_list(length=query.limit)
        total = await self._collection.count_documents(filters)
        return [_to_product(document) for document in documents], total

    async def get(self, product_id: str) -> Product:
        object_id = parse_object_id(product_id)
        document = None
        if object_id is not None:
            document = await self._collection.find_one({"_id": object_id})
        if document is None:
            raise ProductNotFoundError(product_id)
        return _to_product(document)

    async def create(self, fields: dict[str, Any], images: Sequence[str]) -> Product:
        """Insert a product; the first image path becomes the primary one."""
        now = utcnow()
        document = {
            **fields,
            "image": images[0] if images else "",
            "images": list(images),
            "createdAt": now,
            "updatedAt": now,
        }
        result = await self._collection.insert_one(document)
        document["_id"] = result.inserted_id
        logger.info("Created product %s", result.inserted_id)
        return _to_product(document)

    async def update(self, product_id: str, changes: dict[str, Any]) -> Product:
        """Apply ``changes`` and refresh ``updatedAt``; returns the new state."""
        object_id = parse_object_id(product_id)
        if object_id is None:
            raise ProductNotFoundError(product_id)
        current = await self._collection.find_one({"_id": object_id}, {"updatedAt": 1})
        if current is None:
            raise ProductNotFoundError(product_id)
        updated_at = _next_timestamp(current.get("updatedAt"))
        document = await self._collection.find_one_and_update(
            {"_id": object_id},
            {"$set": {**changes, "updatedAt": updated_at}},
            return_document=ReturnDocument.AFTER,
        )
        if document is None:
            raise ProductNotFoundError(product_id)
        logger.info("Updated product %s", product_id)
        return _to_product(document)

    async def delete(self, product_id: str) -> None:
        """Remove the product document permanently."""
        object_id = parse_object_id(product_id)
        if object_id is None:
            raise ProductNotFoundError(product_id)
        result = await self._collection.delete_one({"_id": object_id})
        if result.deleted_count == 0:
            raise ProductNotFoundError(product_id)
        logger.info("Deleted product %s", product_id)

    async def stats(self) -> CatalogStats:
        """Independent counts over active products; no snapshot across them."""
        total_products = await self._collection.count_documents(_ACTIVE)
        in_stock = await self._collection.count_documents(
            {"status": "In Stock", **_ACTIVE}
        )
        out_of_stock = await self._collection.count_documents(
            {"status": "Out of Stock", **_ACTIVE}
        )
        featured = await self._collection.count_documents(
            {"featured": True, **_ACTIVE}
        )
        groups = await self._collection.aggregate(
            [
                {"$match": _ACTIVE},
                {"$group": {"_id": "$category", "count": {"$sum": 1}}},
                {"$sort": {"count": -1, "_id": 1}},
            ]
        ).to_list(length=None)

        return CatalogStats(
            total_products=total_products,
            in_stock=in_stock,
            out_of_stock=out_of_stock,
            featured=featured,
            category_stats=[
                CategoryCount(category=group["_id"], count=group["count"])
                for group in groups
            ],
        )


def get_product_store(database: DatabaseDependency) -> ProductStore:
    return ProductStore(database[PRODUCTS_COLLECTION])


ProductStoreDependency = Annotated[ProductStore, Depends(get_product_store)]
