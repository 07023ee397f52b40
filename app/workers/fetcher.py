"""Async page fetcher.

Downloads a single page and parses it into a BeautifulSoup document.

``httpx.AsyncClient`` is meant to be long-lived and reused, so the app
builds one in its lifespan (see ``build_http_client``) and passes it to
``PageFetcher``.  Each fetch is one GET: no retries, and redirects follow
the client default.
"""

from __future__ import annotations

import logging

import httpx
from bs4 import BeautifulSoup, ParserRejectedMarkup

from app.core.config import settings

logger = logging.getLogger(__name__)


def build_http_client() -> httpx.AsyncClient:
    """Create the AsyncClient shared by every fetch."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout),
        follow_redirects=True,
        verify=settings.http_verify_ssl,
        headers={"User-Agent": settings.http_user_agent},
    )


class FetchError(Exception):
    """Raised when a page cannot be fetched or parsed."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(message)
        self.url = url


class NetworkError(FetchError):
    """DNS, connection, TLS or timeout failure before a response arrived."""

    def __init__(self, url: str, cause: Exception) -> None:
        super().__init__(url, f"Request to '{url}' failed: {cause}")
        self.timed_out = isinstance(cause, httpx.TimeoutException)


class BadStatusError(FetchError):
    """The server answered with a non-2xx status."""

    def __init__(self, url: str, status_code: int, reason: str) -> None:
        super().__init__(url, f"'{url}' returned status {status_code} {reason}")
        self.status_code = status_code
        self.reason = reason


class ParseError(FetchError):
    """The response body could not be parsed as HTML."""

    def __init__(self, url: str, cause: Exception) -> None:
        super().__init__(url, f"Failed to parse HTML from '{url}': {cause}")


class PageFetcher:
    """Fetches pages over a shared ``httpx.AsyncClient``."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def fetch(self, url: str) -> BeautifulSoup:
        """GET *url* and return the parsed document.

        The response is streamed inside ``async with`` so the connection is
        released on every exit path, including a bad status.

        Raises:
            NetworkError: the request could not be completed.
            BadStatusError: the response status is outside 200-299.
            ParseError: the body was rejected by the HTML parser.
        """
        try:
            async with self._client.stream("GET", url) as response:
                if not response.is_success:
                    raise BadStatusError(
                        url, response.status_code, response.reason_phrase
                    )
                body = await response.aread()
                charset = response.charset_encoding
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            raise NetworkError(url, exc) from exc

        logger.debug("Fetched %s (%d bytes)", url, len(body))
        # Raw bytes let bs4 honour <meta charset> when the header has none.
        try:
            return BeautifulSoup(body, "html.parser", from_encoding=charset)
        except ParserRejectedMarkup as exc:
            raise ParseError(url, exc) from exc
