"""MongoDB-backed brand persistence."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorCollection

from src.models.brand import Brand
from src.services.storage.mongo import (
    BRANDS_COLLECTION,
    DatabaseDependency,
    serialize_document,
    utcnow,
)


class BrandStore:
    """Create and list brands; names are unique at the index level."""

    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self._collection = collection

    async def list_active(self) -> list[Brand]:
        documents = await self._collection.find({"isActive": True}).to_list(
            length=None
        )
        return [Brand.model_validate(serialize_document(doc)) for doc in documents]

    async def create(self, fields: dict[str, Any]) -> Brand:
        """Insert validated brand fields stamped with ``createdAt``."""
        document = {**fields, "createdAt": utcnow()}
        result = await self._collection.insert_one(document)
        document["_id"] = result.inserted_id
        return Brand.model_validate(serialize_document(document))


def get_brand_store(database: DatabaseDependency) -> BrandStore:
    return BrandStore(database[BRANDS_COLLECTION])


BrandStoreDependency = Annotated[BrandStore, Depends(get_brand_store)]
