"""High-level runner for a single catalog lookup.

``run_lookup`` is the single public function in this module.  It wires
together a fresh :class:`CatalogSession`, the locator, the detail fetcher and
the extractor, printing a stage-tagged progress log to stdout so the CLI (and
the API) can follow along.  Every outcome, including failures, comes back as
a :class:`LookupResult`.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Literal

from catalog.config import settings
from catalog.errors import (
    CatalogOrderError,
    DetailFetchError,
    FatalFetchError,
    InvalidTargetError,
    SearchCancelled,
)
from catalog.scraper.detail import DetailFetcher
from catalog.scraper.fetcher import CatalogSession
from catalog.scraper.listing import CatalogPageSource
from catalog.search.extractor import extract, extract_text_fields
from catalog.search.locator import locate
from catalog.search.models import DEFAULT_SCHEMA, FieldSchema, Record

LookupStatus = Literal["found", "not_found", "error"]


@dataclass
class LookupResult:
    """Tagged outcome of :func:`run_lookup`."""

    name: str
    status: LookupStatus
    page_number: int | None = None
    matched_label: str | None = None
    detail_url: str | None = None
    records: list[Record] = field(default_factory=list)
    reason: str | None = None
    uncertain: bool = False
    error: str | None = None
    pages_fetched: list[int] = field(default_factory=list)
    failed_pages: list[int] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def found(self) -> bool:
        return self.status == "found"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status,
            "found": self.found,
            "page_number": self.page_number,
            "matched_label": self.matched_label,
            "detail_url": self.detail_url,
            "records": [r.to_dict() for r in self.records],
            "reason": self.reason,
            "uncertain": self.uncertain,
            "error": self.error,
            "pages_fetched": list(self.pages_fetched),
            "failed_pages": list(self.failed_pages),
            "elapsed_seconds": self.elapsed_seconds,
        }


def run_lookup(
    name: str,
    *,
    max_page_exponent: int | None = None,
    schema: FieldSchema = DEFAULT_SCHEMA,
    cancel_event: threading.Event | None = None,
    session_factory: Callable[[], CatalogSession] = CatalogSession,
) -> LookupResult:
    """Find *name* in the catalog and extract its detail records.

    Opens its own session for the duration of the lookup and closes it on
    exit (success or error).

    Args:
        name: Catalog label to look up (e.g. ``"notepad.exe"``).
        max_page_exponent: Probe limit; defaults to ``settings.max_page_exponent``.
        schema: Field schema handed to the table extractor.
        cancel_event: Set it from another thread to stop between fetches.
        session_factory: Builds the session; tests inject fakes here.

    Raises:
        InvalidTargetError: If *name* is blank (nothing is fetched).
    """
    if not name or not name.strip():
        raise InvalidTargetError("name must not be blank")
    name = name.strip()
    exponent = settings.max_page_exponent if max_page_exponent is None else max_page_exponent

    started = time.monotonic()
    result = LookupResult(name=name, status="not_found")
    print(f"[LOOKUP] Searching for {name!r} (max page 2^{exponent}) …")

    with session_factory() as session:
        try:
            located = locate(
                name,
                CatalogPageSource(session, name),
                exponent,
                cancel_event=cancel_event,
                verify_order=settings.verify_order,
            )
        except (FatalFetchError, CatalogOrderError, SearchCancelled) as exc:
            print(f"[LOOKUP] ✗ {type(exc).__name__}: {exc}")
            result.status = "error"
            result.error = str(exc)
            result.elapsed_seconds = round(time.monotonic() - started, 2)
            return result

        result.pages_fetched = located.pages_fetched
        result.failed_pages = located.failed_pages
        result.page_number = located.page_number

        if not located.found:
            result.reason = located.reason.value if located.reason else None
            result.uncertain = located.uncertain
            suffix = f" (uncertain: pages {located.failed_pages} failed)" if located.uncertain else ""
            print(
                f"[LOOKUP] Not found: {result.reason} after "
                f"{len(located.pages_fetched)} fetch(es){suffix}."
            )
            result.elapsed_seconds = round(time.monotonic() - started, 2)
            return result

        entry = located.entry
        result.matched_label = entry.label
        result.detail_url = entry.link
        print(
            f"[LOOKUP] ✓ {entry.label!r} on page {located.page_number} "
            f"({len(located.pages_fetched)} fetch(es))."
        )

        try:
            detail = DetailFetcher(session).fetch(entry)
        except DetailFetchError as exc:
            print(f"[DETAIL] ✗ {exc}")
            result.status = "error"
            result.error = str(exc)
            result.elapsed_seconds = round(time.monotonic() - started, 2)
            return result

        result.detail_url = detail.url
        records = extract(detail.html, schema)
        if not records:
            print("[DETAIL] No recognizable table, falling back to page text.")
            fallback = extract_text_fields(detail.html, schema)
            records = [fallback] if fallback is not None else []
        print(f"[DETAIL] {len(records)} record(s) extracted from {detail.url}")

        result.status = "found"
        result.records = records
        result.elapsed_seconds = round(time.monotonic() - started, 2)
        return result

