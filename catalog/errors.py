"""Exception hierarchy shared by the search core and its collaborators.

Not-found outcomes are *values* (see :class:`catalog.search.models.NotFoundReason`),
never exceptions.  The classes below cover malformed input and failures of
the remote source.
"""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for every error raised by this package."""


class InvalidTargetError(CatalogError, ValueError):
    """The label to look up is empty or blank."""


class TransportError(CatalogError):
    """A request failed in a way that may succeed on retry (timeout, reset)."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"{url}: {message}")
        self.url = url


class PageFetchError(CatalogError):
    """A listing page could not be fetched, but the failure may be transient.

    The locator treats such a page as nonexistent (after one retry inside a
    binary-search window) and flags the outcome as uncertain.
    """

    def __init__(self, page_number: int, message: str) -> None:
        super().__init__(f"page {page_number}: {message}")
        self.page_number = page_number


class FatalFetchError(CatalogError):
    """The remote source is unreachable; searching any further is pointless."""


class DetailFetchError(CatalogError):
    """The detail page of a confirmed match could not be fetched."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"{url}: {message}")
        self.url = url


class CatalogOrderError(CatalogError):
    """A listing page is not sorted ascending by label."""

    def __init__(self, page_number: int) -> None:
        super().__init__(f"page {page_number} is not sorted by label")
        self.page_number = page_number


class SearchCancelled(CatalogError):
    """The caller asked the search to stop between two fetches."""
