from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.models.common import ErrorResponse
from app.models.preview.record import MetadataRecord
from app.services.preview.errors import (
    CacheUnavailableError,
    FetchFailedError,
    ResolveError,
)
from app.services.preview.service import PreviewService
from app.workers.fetcher import NetworkError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/preview", tags=["preview"])


# ---------------------------------------------------------------------------
# Dependency
# ---------------------------------------------------------------------------


def _get_service(request: Request) -> PreviewService:
    """FastAPI dependency returning the ``PreviewService`` built at startup."""
    return request.app.state.preview_service


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


def _status_for(exc: ResolveError) -> int:
    if isinstance(exc, FetchFailedError):
        if isinstance(exc.cause, NetworkError) and exc.cause.timed_out:
            return 504
        return 502
    if isinstance(exc, CacheUnavailableError):
        return 503
    # CacheCorruptError and anything unforeseen
    return 500


# ---------------------------------------------------------------------------
# GET /preview
# ---------------------------------------------------------------------------


@router.get(
    "",
    response_model=MetadataRecord,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    },
    summary="Open Graph preview for a URL",
)
async def get_preview(
    url: str = "",
    service: PreviewService = Depends(_get_service),
) -> MetadataRecord | JSONResponse:
    """Return the Open Graph title, description, image and url of *url*.

    Results are cached for an hour; only a cache miss fetches the page.

    - **200** - metadata resolved (missing properties are empty strings)
    - **400** - ``url`` query parameter missing or empty
    - **500** - cached entry could not be decoded
    - **502** - page could not be fetched, returned a non-2xx status or was not HTML
    - **503** - cache store unreachable
    - **504** - page fetch timed out

    With ``LEGACY_ERROR_RESPONSES`` enabled every resolution error is
    answered with **200** and an empty record instead.
    """
    if not url.strip():
        return _error_response(400, "url is required")

    logger.info("Preview requested for %s", url)
    try:
        return await service.resolve(url)
    except ResolveError as exc:
        if settings.legacy_error_responses:
            logger.error("Preview failed for %s: %s", url, exc)
            return MetadataRecord()
        status_code = _status_for(exc)
        logger.warning("Preview failed for %s (%d): %s", url, status_code, exc)
        return _error_response(status_code, str(exc))
