from __future__ import annotations


class ResolveError(Exception):
    """Base class for failures while resolving a preview.

    ``cause`` holds the underlying exception, which is also chained as
    ``__cause__`` by the raiser.
    """

    operation = "resolve preview"

    def __init__(self, url: str, cause: Exception) -> None:
        super().__init__(f"Failed to {self.operation} for {url}: {cause}")
        self.url = url
        self.cause = cause


class CacheUnavailableError(ResolveError):
    operation = "read cache"


class CacheCorruptError(ResolveError):
    operation = "decode cached metadata"


class FetchFailedError(ResolveError):
    operation = "fetch page"
