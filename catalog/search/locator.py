"""Find the listing page whose alphabetical range holds a target label.

The catalog is only reachable one page at a time and its page count is
unknown, so ``locate`` brackets the target with an exponential probe
(pages 2, 4, 8, …) and then binary-searches inside the bracket.  The cost is
``O(log p)`` page fetches where ``p`` is the target's page.

``locate`` performs no I/O itself: every page comes from the injected
``fetch_page`` callable, which must return ``PageInfo(exists=False)`` for
pages past the end and raise :class:`~catalog.errors.PageFetchError` for
failures that may be transient.
"""

from __future__ import annotations

import threading
from typing import Callable

from catalog.errors import (
    CatalogOrderError,
    InvalidTargetError,
    PageFetchError,
    SearchCancelled,
)
from catalog.search.models import LocateResult, NotFoundReason, PageInfo, SearchState

FetchPage = Callable[[int], PageInfo]

DEFAULT_MAX_PAGE_EXPONENT = 10


class _Locator:
    """Per-call search context; never shared between calls."""

    def __init__(
        self,
        target: str,
        fetch_page: FetchPage,
        cancel_event: threading.Event | None,
        verify_order: bool,
    ) -> None:
        self.target = target
        self._fetch_page = fetch_page
        self._cancel_event = cancel_event
        self._verify_order = verify_order
        self.result = LocateResult(found=False)

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def fetch(self, page_number: int, retries: int = 0) -> PageInfo:
        """Fetch *page_number*, treating a failed fetch as a missing page."""
        for attempt in range(retries + 1):
            if self._cancel_event is not None and self._cancel_event.is_set():
                raise SearchCancelled(f"search for {self.target!r} cancelled")
            self.result.pages_fetched.append(page_number)
            try:
                info = self._fetch_page(page_number)
            except PageFetchError:
                if attempt < retries:
                    continue
                if page_number not in self.result.failed_pages:
                    self.result.failed_pages.append(page_number)
                return PageInfo.missing(page_number)

            if not info.exists or not info.entries:
                return PageInfo.missing(page_number)
            if self._verify_order and not info.is_sorted():
                raise CatalogOrderError(page_number)
            return info

        return PageInfo.missing(page_number)  # pragma: no cover

    # ------------------------------------------------------------------
    # Outcomes
    # ------------------------------------------------------------------

    def holds_target(self, info: PageInfo) -> bool:
        return info.exact_match(self.target) is not None or info.contains(self.target)

    def not_found(self, reason: NotFoundReason) -> LocateResult:
        self.result.found = False
        self.result.reason = reason
        return self.result

    def refine(self, info: PageInfo) -> LocateResult:
        """Pick the entry on the candidate page: exact label, then substring."""
        entry = info.exact_match(self.target) or info.partial_match(self.target)
        if entry is None:
            self.result.page_number = info.page_number
            return self.not_found(NotFoundReason.NO_MATCH_ON_CANDIDATE_PAGE)
        self.result.found = True
        self.result.page_number = info.page_number
        self.result.entry = entry
        return self.result

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def run(self, max_page_exponent: int) -> LocateResult:
        anchor = self.fetch(1)
        if not anchor.exists:
            return self.not_found(NotFoundReason.EMPTY_CATALOG)
        if self.holds_target(anchor):
            return self.refine(anchor)
        if anchor.precedes(self.target):
            # Nothing sorts before page 1.
            return self.not_found(NotFoundReason.BEFORE_START)

        state = SearchState()
        for exponent in range(1, max_page_exponent + 1):
            state.probe_exponent = exponent
            page_number = 2 ** exponent
            info = self.fetch(page_number)
            if not info.exists:
                # Missing or failed probe pages stay in the window.
                state.high_page = page_number
                break
            if self.holds_target(info):
                return self.refine(info)
            if info.precedes(self.target):
                state.high_page = page_number - 1
                break
            state.last_valid_page = page_number
        else:
            return self.not_found(NotFoundReason.EXPONENT_LIMIT)

        # Pages <= last_valid_page sort before the target; pages > high_page
        # sort after it or were reported missing.
        state.low_page = state.last_valid_page + 1
        while state.low_page <= state.high_page:
            mid = (state.low_page + state.high_page) // 2
            info = self.fetch(mid, retries=1)
            if not info.exists:
                state.high_page = mid - 1
            elif self.holds_target(info):
                return self.refine(info)
            elif info.precedes(self.target):
                state.high_page = mid - 1
            else:
                state.low_page = mid + 1

        return self.not_found(NotFoundReason.RANGE_EXHAUSTED)


def locate(
    target: str,
    fetch_page: FetchPage,
    max_page_exponent: int = DEFAULT_MAX_PAGE_EXPONENT,
    *,
    cancel_event: threading.Event | None = None,
    verify_order: bool = False,
) -> LocateResult:
    """Locate the page and entry for *target* in an ordered, paginated catalog.

    Args:
        target: Label to look for; compared case-insensitively.
        fetch_page: Callable returning the :class:`PageInfo` of a 1-based page.
        max_page_exponent: Highest exponent ``e`` probed (page ``2**e``).
        cancel_event: Checked before every fetch; when set the search stops
            with :class:`~catalog.errors.SearchCancelled`.
        verify_order: Raise :class:`~catalog.errors.CatalogOrderError` when a
            fetched page is not sorted by label.

    Returns:
        A :class:`LocateResult`.  Not-found outcomes are values, not errors.

    Raises:
        InvalidTargetError: If *target* is empty or blank (no fetch is made).
        FatalFetchError: Propagated unchanged from *fetch_page*.
    """
    if not target or not target.strip():
        raise InvalidTargetError("target label must not be blank")
    if max_page_exponent < 0:
        raise ValueError("max_page_exponent must be >= 0")

    locator = _Locator(target.strip(), fetch_page, cancel_event, verify_order)
    return locator.run(max_page_exponent)
