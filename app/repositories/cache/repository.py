from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import DuplicateKeyError, PyMongoError

from app.core.collections import CollectionNames
from app.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class CacheStoreError(RuntimeError):
    """Raised when the cache store cannot be read or written.

    Not logged here; the caller that handles it logs it once.
    """


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # Motor returns naive datetimes unless the client is tz_aware.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class CacheRepository(BaseRepository):
    """String key-value store with per-entry expiry on the ``preview_cache`` collection.

    Each entry is stored as ``{key, value, expires_at}``.  MongoDB's TTL
    monitor deletes expired documents in the background, but it only runs
    about once a minute, so ``get`` also treats an entry whose ``expires_at``
    has passed as absent.
    """

    COLLECTION_NAME = CollectionNames.PREVIEW_CACHE

    def __init__(
        self,
        collection: AsyncIOMotorCollection,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        super().__init__(collection)
        self._clock = clock

    async def ensure_indexes(self) -> None:
        await self._col.create_index("key", unique=True)
        await self._col.create_index("expires_at", expireAfterSeconds=0)

    async def get(self, key: str) -> str | None:
        """Return the value stored under *key*, or ``None`` if absent or expired.

        Raises:
            CacheStoreError: the store could not be reached.
        """
        try:
            entry = await self._col.find_one({"key": key})
        except PyMongoError as exc:
            raise CacheStoreError(f"Cache read error: {exc}") from exc

        if entry is None:
            return None
        if _as_utc(entry["expires_at"]) <= self._clock():
            return None
        return entry["value"]

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store *value* under *key* for *ttl_seconds*, replacing any previous entry.

        Concurrent writers on the same key are not coordinated; the last
        write wins.  A ``DuplicateKeyError`` means another upsert inserted
        the key first, so the write is retried as a plain update.

        Raises:
            CacheStoreError: the store could not be reached.
        """
        update = {
            "$set": {
                "value": value,
                "expires_at": self._clock() + timedelta(seconds=ttl_seconds),
            }
        }
        try:
            await self._col.update_one({"key": key}, update, upsert=True)
        except DuplicateKeyError:
            logger.debug("Concurrent insert for key=%s; retrying as update", key)
            try:
                await self._col.update_one({"key": key}, update)
            except PyMongoError as exc:
                raise CacheStoreError(f"Cache write error: {exc}") from exc
        except PyMongoError as exc:
            raise CacheStoreError(f"Cache write error: {exc}") from exc
