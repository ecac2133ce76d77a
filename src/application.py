"""FastAPI application factory and bootstrap helpers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pymongo.errors import PyMongoError
from redis.exceptions import RedisError

from src.api.routes import include_api_routes
from src.config import settings
from src.services.catalog.seeding import seed_default_categories
from src.services.events.notifier import EventNotifier, WebSocketBroadcaster
from src.services.events.redis_relay import (
    RedisEventNotifier,
    RedisEventRelay,
    create_redis_client,
)
from src.services.storage.mongo import (
    CATEGORIES_COLLECTION,
    create_mongo_client,
    ensure_indexes,
    ping,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Connect to MongoDB, seed defaults and wire the event broadcaster."""

    client = create_mongo_client()
    database = client[settings.MONGO_DB_NAME]
    try:
        await ping(database)
    except PyMongoError:
        logger.critical("MongoDB connection error, exiting", exc_info=True)
        client.close()
        raise SystemExit(1)
    logger.info("MongoDB connected", extra={"database": settings.MONGO_DB_NAME})

    try:
        await ensure_indexes(database)
    except PyMongoError:
        logger.exception("Failed creating MongoDB indexes")
    await seed_default_categories(database[CATEGORIES_COLLECTION])

    broadcaster = WebSocketBroadcaster()
    notifier: EventNotifier = broadcaster
    redis_client = None
    relay_task: asyncio.Task | None = None
    if settings.redis_enabled:
        redis_client = create_redis_client(settings.REDIS_URL)
        notifier = RedisEventNotifier(redis_client, settings.EVENTS_CHANNEL)
        relay = RedisEventRelay(
            redis_client,
            settings.EVENTS_CHANNEL,
            broadcaster,
            retry_delay=settings.EVENT_RELAY_RETRY_SECONDS,
        )
        relay_task = asyncio.create_task(relay.run_forever())

    app.state.database = database
    app.state.broadcaster = broadcaster
    app.state.notifier = notifier

    try:
        yield
    finally:
        if relay_task is not None:
            relay_task.cancel()
            try:
                await relay_task
            except asyncio.CancelledError:
                pass
            except Exception:
                logger.exception("Redis event relay stopped with an error")
        if redis_client is not None:
            try:
                await redis_client.aclose()
            except RedisError:
                logger.exception("Failed closing the Redis client")
        client.close()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Auto Parts Catalog",
        description="Product, category and brand catalog with live updates",
        version="1.0.0",
        lifespan=lifespan,
    )

    _configure_cors(app)
    _mount_uploads(app)
    include_api_routes(app)

    return app


def _configure_cors(app: FastAPI) -> None:
    """Allow broad access in non-production environments."""

    if settings.is_production:
        return

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _mount_uploads(app: FastAPI) -> None:
    """Serve uploaded images under the public uploads prefix."""

    uploads_directory = Path(settings.UPLOADS_DIR)
    uploads_directory.mkdir(parents=True, exist_ok=True)
    app.mount(
        settings.UPLOADS_URL_PREFIX,
        StaticFiles(directory=uploads_directory),
        name="uploads",
    )
