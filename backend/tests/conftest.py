"""
Showcase API: Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── fake_store: In-memory stand-in for the Store (no MongoDB needed)
    ├── mock_mailer: AsyncMock Mailer (no SMTP relay needed)
    ├── temp_storage: Temporary uploads directory
    ├── sample_image_bytes: Small binary payload for upload tests
    └── test_client: HTTPX AsyncClient wired to the app with the fakes above

The ASGI transport does not run the lifespan, so the real Store is never
connected during tests; routes reach the fake through dependency overrides.
"""

import os
import tempfile
from copy import deepcopy
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock

# Settings are read at import time; point them at throwaway locations first
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="showcase_test_uploads_")
os.environ["MONGO_URI"] = "mongodb://localhost:1"
os.environ["DB_NAME"] = "showcase_test"
os.environ["GMAIL_USER"] = "team@example.com"
os.environ["GMAIL_PASS"] = "test-pass-not-real"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient

from showcase.database import get_store
from showcase.exceptions import StoreUnavailableError
from showcase.services.mail_service import Mailer, get_mailer


# ══════════════════════════════════════════════════════════════════════════
# In-Memory Store
# ══════════════════════════════════════════════════════════════════════════


class FakeCursor:
    def __init__(self, documents: List[Dict[str, Any]]):
        self._documents = documents

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        return self._documents if length is None else self._documents[:length]


class FakeCollection:
    """
    The slice of AsyncCollection the record service uses, backed by a dict.

    Matches driver behaviour the API depends on: insert_one sets `_id` on
    the passed document, and update_one counts only real changes
    (an empty $set is acknowledged and modifies nothing).
    """

    def __init__(self):
        self.documents: Dict[ObjectId, Dict[str, Any]] = {}

    async def insert_one(self, document: Dict[str, Any]):
        if not isinstance(document, dict):
            raise TypeError("document must be an instance of dict")
        document.setdefault("_id", ObjectId())
        self.documents[document["_id"]] = deepcopy(document)
        return SimpleNamespace(inserted_id=document["_id"])

    def find(self) -> FakeCursor:
        return FakeCursor([deepcopy(doc) for doc in self.documents.values()])

    async def find_one(self, filter: Dict[str, Any]):
        document = self.documents.get(filter["_id"])
        return deepcopy(document) if document is not None else None

    async def update_one(self, filter: Dict[str, Any], update: Dict[str, Any]):
        changes = update["$set"]
        document = self.documents.get(filter["_id"])
        if document is None:
            return SimpleNamespace(matched_count=0, modified_count=0)
        modified = any(document.get(k) != v for k, v in changes.items())
        document.update(deepcopy(changes))
        return SimpleNamespace(matched_count=1, modified_count=1 if modified else 0)

    async def delete_one(self, filter: Dict[str, Any]):
        removed = self.documents.pop(filter["_id"], None)
        return SimpleNamespace(deleted_count=1 if removed is not None else 0)


class FakeStore:
    """Duck-typed Store: named FakeCollections created on first use."""

    def __init__(self, ready: bool = True):
        self.ready = ready
        self.collections: Dict[str, FakeCollection] = {}

    @property
    def is_ready(self) -> bool:
        return self.ready

    async def ping(self) -> bool:
        return self.ready

    def collection(self, name: str) -> FakeCollection:
        if not self.ready:
            raise StoreUnavailableError(context={"collection": name})
        return self.collections.setdefault(name, FakeCollection())


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def offline_store():
    """A store whose startup connection failed."""
    return FakeStore(ready=False)


@pytest.fixture
def mock_mailer():
    """
    Mailer with send_contact_reply replaced by an AsyncMock.

    Usage:
        mock_mailer.send_contact_reply.side_effect = MailDeliveryError("refused")
    """
    mailer = Mailer(
        hostname="smtp.example.com",
        port=465,
        username="team@example.com",
        password="secret",
    )
    mailer.send_contact_reply = AsyncMock(return_value=None)
    return mailer


@pytest.fixture
def temp_storage(tmp_path):
    storage_dir = tmp_path / "uploads"
    storage_dir.mkdir()
    return str(storage_dir)


@pytest.fixture
def sample_image_bytes():
    """Minimal PNG signature plus arbitrary bytes, including non-UTF-8 ones."""
    return b"\x89PNG\r\n\x1a\n" + bytes(range(256))


@pytest_asyncio.fixture
async def test_client(fake_store, mock_mailer):
    """
    HTTPX AsyncClient talking to the FastAPI app in-process.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from showcase.main import app

    app.dependency_overrides[get_store] = lambda: fake_store
    app.dependency_overrides[get_mailer] = lambda: mock_mailer
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()
