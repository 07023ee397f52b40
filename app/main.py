from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.api.router import router
from app.core.config import settings
from app.core.database import DatabaseManager
from app.repositories.cache.repository import CacheRepository
from app.services.preview.service import PreviewService
from app.workers.fetcher import PageFetcher, build_http_client


def _configure_logging() -> None:
    """Configure the ``app`` logger namespace.

    ``logging.basicConfig`` is a no-op when the root logger already has
    handlers (uvicorn installs its own before our lifespan runs), so the
    ``app`` namespace gets its own handler with ``propagate = False``.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s")
    )
    app_log = logging.getLogger("app")
    app_log.setLevel(level)
    if not app_log.handlers:
        app_log.addHandler(handler)
    app_log.propagate = False


_configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # ── Startup ──────────────────────────────────────────────────────
    db = DatabaseManager()
    await db.connect()
    cache = CacheRepository.from_db(db)
    await cache.ensure_indexes()
    http_client = build_http_client()
    app.state.preview_service = PreviewService(cache, PageFetcher(http_client))
    yield
    # ── Shutdown ─────────────────────────────────────────────────────
    await http_client.aclose()
    await db.disconnect()


app = FastAPI(
    title="Link Preview",
    description="Fetches Open Graph metadata for a URL and caches it for an hour.",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(router)


@app.get("/health", tags=["health"])
async def health() -> dict[str, str]:
    return {"status": "ok"}
