"""Tests for application startup, shutdown and the uploads mount."""

from pathlib import Path

import pytest
from fakeredis import aioredis as fakeredis
from fastapi import FastAPI
from mongomock_motor import AsyncMongoMockClient
from pymongo.errors import OperationFailure, ServerSelectionTimeoutError

from src.application import lifespan
from src.config import settings
from src.services.catalog.seeding import DEFAULT_CATEGORIES
from src.services.events.redis_relay import RedisEventNotifier, RedisEventRelay
from src.services.storage.mongo import CATEGORIES_COLLECTION


class _BrokenCollection:
    async def create_index(self, *args, **kwargs):
        raise OperationFailure("not authorized")

    async def count_documents(self, *args, **kwargs):
        raise OperationFailure("not authorized")


class _BrokenDatabase:
    name = "autoparts"

    def __getitem__(self, name: str) -> _BrokenCollection:
        return _BrokenCollection()


class _StubMongoClient:
    def __init__(self, database) -> None:
        self.database = database
        self.closed = False

    def __getitem__(self, name: str):
        return self.database

    def close(self) -> None:
        self.closed = True


async def _reachable(database) -> None:
    return None


async def _unreachable(database) -> None:
    raise ServerSelectionTimeoutError("No servers found yet")


@pytest.fixture()
def without_redis(monkeypatch):
    monkeypatch.setattr(settings, "REDIS_URL", None)


@pytest.mark.asyncio
async def test_startup_exits_when_mongo_is_unreachable(monkeypatch, without_redis):
    mongo = _StubMongoClient(_BrokenDatabase())
    monkeypatch.setattr("src.application.create_mongo_client", lambda: mongo)
    monkeypatch.setattr("src.application.ping", _unreachable)

    with pytest.raises(SystemExit) as excinfo:
        async with lifespan(FastAPI()):
            pass

    assert excinfo.value.code == 1
    assert mongo.closed


@pytest.mark.asyncio
async def test_startup_survives_index_and_seeding_failures(monkeypatch, without_redis):
    mongo = _StubMongoClient(_BrokenDatabase())
    monkeypatch.setattr("src.application.create_mongo_client", lambda: mongo)
    monkeypatch.setattr("src.application.ping", _reachable)
    app = FastAPI()

    async with lifespan(app):
        assert app.state.database is mongo.database
        assert app.state.notifier is app.state.broadcaster

    assert mongo.closed


@pytest.mark.asyncio
async def test_startup_seeds_default_categories(monkeypatch, without_redis):
    database = AsyncMongoMockClient()["autoparts_startup"]
    monkeypatch.setattr(
        "src.application.create_mongo_client", lambda: _StubMongoClient(database)
    )
    monkeypatch.setattr("src.application.ping", _reachable)

    async with lifespan(FastAPI()):
        seeded = await database[CATEGORIES_COLLECTION].count_documents({})

    assert seeded == len(DEFAULT_CATEGORIES) == 11


@pytest.mark.asyncio
async def test_shutdown_tolerates_a_failed_event_relay(monkeypatch):
    database = AsyncMongoMockClient()["autoparts_relay"]
    redis_client = fakeredis.FakeRedis(decode_responses=True)

    async def _crash(self) -> None:
        raise RuntimeError("relay crashed")

    monkeypatch.setattr(settings, "REDIS_URL", "redis://cache:6379/0")
    monkeypatch.setattr(
        "src.application.create_mongo_client", lambda: _StubMongoClient(database)
    )
    monkeypatch.setattr("src.application.ping", _reachable)
    monkeypatch.setattr("src.application.create_redis_client", lambda url: redis_client)
    monkeypatch.setattr(RedisEventRelay, "run_forever", _crash)
    app = FastAPI()

    async with lifespan(app):
        assert isinstance(app.state.notifier, RedisEventNotifier)


@pytest.mark.asyncio
async def test_uploads_are_served_from_the_static_mount(client):
    uploads_directory = Path(settings.UPLOADS_DIR)
    uploads_directory.mkdir(parents=True, exist_ok=True)
    (uploads_directory / "1700000000000-rotor.jpg").write_bytes(b"rotor-bytes")

    response = await client.get("/uploads/1700000000000-rotor.jpg")
    missing = await client.get("/uploads/absent.jpg")

    assert response.status_code == 200
    assert response.content == b"rotor-bytes"
    assert missing.status_code == 404
