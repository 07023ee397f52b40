from __future__ import annotations

import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo.errors import PyMongoError
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    wait_exponential,
)

from app.core.config import settings

logger = logging.getLogger(__name__)


class DatabaseManager:
    """MongoDB connection manager backing the preview cache.

    Built once in the app lifespan and handed to the repositories; nothing
    else holds a reference to the Motor client.

    Lifecycle::

        db = DatabaseManager()
        await db.connect()     # call once at startup
        ...
        await db.disconnect()  # call once at shutdown
    """

    def __init__(self) -> None:
        self._client: AsyncIOMotorClient | None = None

    async def connect(self) -> None:
        """Open the Motor client and verify connectivity with a ping.

        The ping is retried with exponential backoff so the service can start
        alongside a MongoDB container that is still booting.
        """
        self._client = AsyncIOMotorClient(
            settings.mongo_uri,
            maxPoolSize=settings.mongo_max_pool_size,
        )
        await self._ping()
        logger.info("Connected to MongoDB at %s.", settings.mongo_uri)

    @retry(
        retry=retry_if_exception_type(PyMongoError),
        stop=lambda rs: rs.attempt_number >= settings.mongo_connect_retries + 1,
        wait=wait_exponential(multiplier=0.5, min=0.5, max=10),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _ping(self) -> None:
        await self._client.admin.command("ping")

    async def disconnect(self) -> None:
        """Close the Motor client and release all pooled connections."""
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("Disconnected from MongoDB.")

    def get_collection(self, name: str) -> AsyncIOMotorCollection:
        """Return a Motor collection by name from the configured database."""
        if self._client is None:
            raise RuntimeError(
                "DatabaseManager is not connected. Call connect() first."
            )
        return self._client[settings.mongo_db][name]
