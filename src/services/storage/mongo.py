"""MongoDB client factory and document helpers."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Annotated, Any

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from starlette.requests import HTTPConnection

from src.config import settings

logger = logging.getLogger(__name__)

PRODUCTS_COLLECTION = "products"
CATEGORIES_COLLECTION = "categories"
BRANDS_COLLECTION = "brands"


def create_mongo_client(uri: str | None = None) -> AsyncIOMotorClient:
    """Factory function to create the MongoDB client."""
    return AsyncIOMotorClient(
        uri or settings.MONGO_URI,
        serverSelectionTimeoutMS=settings.MONGO_SERVER_SELECTION_TIMEOUT_MS,
        tz_aware=True,
    )


async def ping(database: AsyncIOMotorDatabase) -> None:
    """Round-trip to the server; raises a PyMongoError when unreachable."""
    await database.command("ping")


async def ensure_indexes(database: AsyncIOMotorDatabase) -> None:
    """Create the unique name indexes and the default listing index."""
    await database[CATEGORIES_COLLECTION].create_index("name", unique=True)
    await database[BRANDS_COLLECTION].create_index("name", unique=True)
    await database[PRODUCTS_COLLECTION].create_index(
        [("isActive", ASCENDING), ("createdAt", DESCENDING)]
    )
    logger.debug("MongoDB indexes ensured", extra={"database": database.name})


def serialize_document(document: dict[str, Any]) -> dict[str, Any]:
    """Replace the ObjectId ``_id`` with a string ``id``."""
    data = dict(document)
    object_id = data.pop("_id", None)
    if object_id is not None:
        data["id"] = str(object_id)
    return data


def parse_object_id(value: str) -> ObjectId | None:
    """Return the ObjectId for ``value`` or None when it is malformed."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def utcnow() -> datetime:
    """Current UTC time at the millisecond precision BSON dates keep."""
    now = datetime.now(UTC)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def get_database(connection: HTTPConnection) -> AsyncIOMotorDatabase:
    """FastAPI dependency returning the database opened by the lifespan."""
    return connection.app.state.database


DatabaseDependency = Annotated[AsyncIOMotorDatabase, Depends(get_database)]
