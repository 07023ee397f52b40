from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from app.core.collections import CollectionNames
from app.main import app


class FakeClock:
    """Manually advanced UTC clock for expiry tests."""

    def __init__(self) -> None:
        self.now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache_collection():
    """Empty in-memory ``preview_cache`` collection."""
    return AsyncMongoMockClient()["test_link_preview"][CollectionNames.PREVIEW_CACHE]


@pytest.fixture
def client():
    """TestClient with the MongoDB side of the lifespan fully mocked."""
    with (
        patch(
            "app.core.database.DatabaseManager.connect",
            new_callable=AsyncMock,
        ),
        patch(
            "app.core.database.DatabaseManager.disconnect",
            new_callable=AsyncMock,
        ),
        patch(
            "app.core.database.DatabaseManager.get_collection",
            return_value=MagicMock(),
        ),
        patch(
            "app.repositories.cache.repository.CacheRepository.ensure_indexes",
            new_callable=AsyncMock,
        ),
    ):
        with TestClient(app) as c:
            yield c
