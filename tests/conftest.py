"""Pytest configuration and fixtures for the catalog service."""

import os
import tempfile
import uuid
from pathlib import Path

os.environ.setdefault("UPLOADS_DIR", tempfile.mkdtemp(prefix="catalog-uploads-"))

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from src.services.events.notifier import EventNotifier, get_event_notifier
from src.services.storage.mongo import (
    PRODUCTS_COLLECTION,
    ensure_indexes,
    get_database,
    utcnow,
)
from src.services.storage.uploads import UploadStorage, get_upload_storage


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "asyncio: marks tests as async tests")


class RecordingNotifier(EventNotifier):
    """Notifier stub that keeps every published event."""

    def __init__(self) -> None:
        self.events: list[tuple[str, object]] = []

    async def publish(self, event: str, payload: object) -> None:
        self.events.append((event, payload))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]


@pytest_asyncio.fixture()
async def database():
    """Provide an in-memory MongoDB database for each test."""
    from src.main import app

    client = AsyncMongoMockClient()
    db = client[f"catalog_{uuid.uuid4().hex}"]
    await ensure_indexes(db)
    app.dependency_overrides[get_database] = lambda: db
    try:
        yield db
    finally:
        app.dependency_overrides.pop(get_database, None)


@pytest.fixture()
def notifier():
    """Record product events instead of broadcasting them."""
    from src.main import app

    recorder = RecordingNotifier()
    app.dependency_overrides[get_event_notifier] = lambda: recorder
    yield recorder
    app.dependency_overrides.pop(get_event_notifier, None)


@pytest.fixture()
def upload_storage(tmp_path: Path):
    """Write uploads into a per-test temporary directory."""
    from src.main import app

    storage = UploadStorage(tmp_path, "/uploads")
    app.dependency_overrides[get_upload_storage] = lambda: storage
    yield storage
    app.dependency_overrides.pop(get_upload_storage, None)


@pytest.fixture()
def make_product(database):
    """Insert a product document directly, bypassing the API."""

    async def _make(**overrides) -> str:
        now = utcnow()
        document = {
            "name": "Ceramic Brake Pad Set",
            "category": "Braking System",
            "subcategory": "Brake Pads",
            "brand": "Brembo",
            "model": "",
            "year": None,
            "price": 59.99,
            "originalPrice": None,
            "status": "In Stock",
            "rating": 4.5,
            "reviews": 12,
            "image": "",
            "images": [],
            "badge": "",
            "description": "Low-dust ceramic compound",
            "specifications": {"compatibility": []},
            "stock": 20,
            "discount": 0,
            "tags": [],
            "featured": False,
            "isActive": True,
            "createdAt": now,
            "updatedAt": now,
        }
        document.update(overrides)
        result = await database[PRODUCTS_COLLECTION].insert_one(document)
        return str(result.inserted_id)

    return _make


@pytest_asyncio.fixture()
async def client(database, notifier, upload_storage):
    """Return an HTTPX async client pointing at the FastAPI app."""
    from src.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
    ) as test_client:
        yield test_client
