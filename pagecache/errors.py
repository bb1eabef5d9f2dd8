"""Error types raised by the paginated cache.

Fetcher failures are never wrapped: they propagate unchanged so callers can
handle their own transport errors. The classes here cover failures that
originate in this package.
"""

from __future__ import annotations


class PageCacheError(Exception):
    """Base class for errors raised by pagecache, with a stable error code."""

    code = "pagecache_error"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def to_payload(self) -> dict[str, str]:
        return {"detail": self.detail, "code": self.code}


class KeySerializationError(PageCacheError):
    """A page key descriptor could not be turned into a canonical key."""

    code = "key_serialization_failed"


class MissingFetcherError(PageCacheError):
    """A fetch run started without a fetcher configured."""

    code = "missing_fetcher"


class InvalidPageCountError(PageCacheError, ValueError):
    """A page count that is not a non-negative integer was requested."""

    code = "invalid_page_count"


class InvalidPageDataError(PageCacheError, TypeError):
    """Sequence data handed to ``mutate`` was not a list of pages."""

    code = "invalid_page_data"
