from __future__ import annotations

import logging

from pydantic import ValidationError

from app.core.config import settings
from app.models.preview.record import MetadataRecord
from app.repositories.cache.repository import CacheRepository, CacheStoreError
from app.services.preview.errors import (
    CacheCorruptError,
    CacheUnavailableError,
    FetchFailedError,
)
from app.services.preview.extractor import extract_metadata
from app.workers.fetcher import FetchError, PageFetcher

logger = logging.getLogger(__name__)


class PreviewService:
    """Cache-aside lookup of Open Graph metadata keyed by the requested URL."""

    def __init__(
        self,
        cache: CacheRepository,
        fetcher: PageFetcher,
        ttl_seconds: int | None = None,
    ) -> None:
        self._cache = cache
        self._fetcher = fetcher
        self._ttl_seconds = (
            settings.cache_ttl_seconds if ttl_seconds is None else ttl_seconds
        )

    async def resolve(self, url: str) -> MetadataRecord:
        """Return the metadata for *url*, fetching the page only on a cache miss.

        A store that cannot be read fails the request rather than falling
        back to a live fetch, and an undecodable cached value is reported
        rather than re-fetched.  Writing the fresh record back is
        best-effort: a failed write is logged and the record still returned.

        Raises:
            CacheUnavailableError: the cache store could not be read.
            CacheCorruptError: the cached value is not a valid record.
            FetchFailedError: the page could not be fetched or parsed.
        """
        try:
            cached = await self._cache.get(url)
        except CacheStoreError as exc:
            raise CacheUnavailableError(url, exc) from exc

        if cached is not None:
            logger.debug("Cache hit for %s", url)
            try:
                return MetadataRecord.from_json(cached)
            except ValidationError as exc:
                raise CacheCorruptError(url, exc) from exc

        logger.info("Cache miss for %s", url)
        try:
            doc = await self._fetcher.fetch(url)
        except FetchError as exc:
            raise FetchFailedError(url, exc) from exc

        record = extract_metadata(doc)
        try:
            await self._cache.set(url, record.to_json(), self._ttl_seconds)
        except CacheStoreError as exc:
            logger.warning("Cache write skipped for %s: %s", url, exc)
        return record
