import asyncio
import logging

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from app.core.config import Settings
from app.core.errors import StoreUnavailableError
from app.services.waitlist_store import WaitlistStore, ensure_indexes

logger = logging.getLogger(__name__)


# ── Connection ────────────────────────────────────────────────────────────────
class MongoConnection:
    """
    Owns at most one Mongo client for the process.

    connect() is idempotent: the first successful call caches the client and
    ensures indexes, later calls reuse it. A failed attempt caches nothing,
    so the next call retries.
    """

    def __init__(
        self,
        uri: str,
        db_name: str,
        collection_name: str,
        timeout_ms: int = 5000,
        client_factory=AsyncIOMotorClient,
    ):
        self.uri = uri
        self.db_name = db_name
        self.collection_name = collection_name
        self.timeout_ms = timeout_ms
        self._client_factory = client_factory
        self._client = None
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoConnection":
        return cls(
            uri=settings.MONGODB_URI,
            db_name=settings.MONGODB_DB_NAME,
            collection_name=settings.MONGODB_COLLECTION,
            timeout_ms=settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
        )

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    @property
    def collection(self):
        if self._client is None:
            raise StoreUnavailableError()
        return self._client[self.db_name][self.collection_name]

    async def connect(self):
        if self._client is not None:
            return self._client
        async with self._lock:
            if self._client is not None:
                return self._client
            client = self._client_factory(
                self.uri,
                serverSelectionTimeoutMS=self.timeout_ms,
                tz_aware=True,
            )
            try:
                await client.admin.command("ping")
                logger.info("Connected to MongoDB (%s)", self.db_name)
                await ensure_indexes(client[self.db_name][self.collection_name])
                logger.info("Waitlist indexes ensured")
            except PyMongoError as exc:
                client.close()
                logger.error("MongoDB connection error: %s", exc)
                raise StoreUnavailableError() from exc
            self._client = client
            return client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("MongoDB connection closed")


# ── FastAPI dependencies ──────────────────────────────────────────────────────
def get_connection(request: Request) -> MongoConnection:
    return request.app.state.mongo


async def get_store(request: Request) -> WaitlistStore:
    connection: MongoConnection = request.app.state.mongo
    if request.app.state.lazy_connect:
        await connection.connect()
    return WaitlistStore(connection.collection)
