"""
Showcase API: Document Store Client
======================================

What:  The shared MongoDB client, its readiness flag, and the FastAPI dependency.
How:   One `Store` is built by the app factory and kept on `app.state.store`.
       The lifespan handler calls `connect()` once at startup and `close()`
       at shutdown. Route handlers receive it through `get_store`.
Who:   Used by the CRUD router factory and the health check.
When:  Connected at startup; shared by every request for the life of the process.

Readiness:
    A failed startup connection is logged and the process keeps serving.
    From then on `collection()` raises StoreUnavailableError right away, so
    CRUD requests answer {"success": false, "error": "Database not connected"}
    instead of blocking on the driver's server-selection timeout.

Concurrency:
    AsyncMongoClient is safe to share between coroutines. There is no locking
    around individual records: concurrent writes to the same document
    interleave however the server orders them.
"""

import logging
from typing import Optional

from fastapi import Request
from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase

from showcase.config import Settings
from showcase.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


class Store:
    """
    Process-wide handle on the document database.

    Attributes:
        uri:      MongoDB connection string
        db_name:  Database holding every collection
        client:   AsyncMongoClient, set by connect() (None before)
        db:       Database handle, set only after a successful ping
    """

    def __init__(
        self,
        uri: str,
        db_name: str,
        server_selection_timeout_ms: int = 5000,
    ):
        self.uri = uri
        self.db_name = db_name
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self.client: Optional[AsyncMongoClient] = None
        self.db: Optional[AsyncDatabase] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "Store":
        return cls(
            uri=settings.mongo_uri,
            db_name=settings.db_name,
            server_selection_timeout_ms=settings.mongo_server_selection_timeout_ms,
        )

    @property
    def is_ready(self) -> bool:
        """True once connect() has reached the server."""
        return self.db is not None

    async def connect(self) -> bool:
        """
        Create the client and verify the server answers a ping.

        Returns:
            True on success. On any failure the error is logged, the store
            stays not-ready, and False is returned; nothing is raised.
        """
        try:
            self.client = AsyncMongoClient(
                self.uri,
                serverSelectionTimeoutMS=self.server_selection_timeout_ms,
            )
            await self.client.admin.command("ping")
            self.db = self.client[self.db_name]
            logger.info("MongoDB connected (database=%s)", self.db_name)
            return True
        except Exception as e:
            self.db = None
            logger.error("MongoDB connection failed: %s", str(e))
            return False

    async def ping(self) -> bool:
        """Lightweight liveness probe used by GET /health."""
        if self.client is None or self.db is None:
            return False
        try:
            await self.client.admin.command("ping")
            return True
        except Exception as e:
            logger.warning("MongoDB ping failed: %s", str(e))
            return False

    def collection(self, name: str) -> AsyncCollection:
        """
        Return the named collection.

        Raises:
            StoreUnavailableError: the startup connection never succeeded
        """
        if self.db is None:
            raise StoreUnavailableError(context={"collection": name})
        return self.db[name]

    async def close(self) -> None:
        """Close the client's pooled connections (application shutdown)."""
        if self.client is not None:
            await self.client.close()
            logger.info("MongoDB connection closed")
        self.client = None
        self.db = None


# ── Dependency ────────────────────────────────────────────────────────────
def get_store(request: Request) -> Store:
    """
    FastAPI dependency returning the application's shared Store.

    Example usage in a route:
        @router.get("")
        async def list_records(store: Store = Depends(get_store)):
            ...
    """
    return request.app.state.store
