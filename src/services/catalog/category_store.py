"""MongoDB-backed category persistence."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorCollection

from src.models.category import Category, CategoryCreate
from src.services.storage.mongo import (
    CATEGORIES_COLLECTION,
    DatabaseDependency,
    serialize_document,
    utcnow,
)


class CategoryStore:
    """Create and list categories; names are unique at the index level."""

    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self._collection = collection

    async def list_active(self) -> list[Category]:
        documents = await self._collection.find({"isActive": True}).to_list(
            length=None
        )
        return [Category.model_validate(serialize_document(doc)) for doc in documents]

    async def create(self, payload: CategoryCreate) -> Category:
        document = {**payload.model_dump(by_alias=True), "createdAt": utcnow()}
        result = await self._collection.insert_one(document)
        document["_id"] = result.inserted_id
        return Category.model_validate(serialize_document(document))


def get_category_store(database: DatabaseDependency) -> CategoryStore:
    return CategoryStore(database[CATEGORIES_COLLECTION])


CategoryStoreDependency = Annotated[CategoryStore, Depends(get_category_store)]
