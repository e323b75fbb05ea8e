"""Utilities for rendering lookup results in the CLI."""

from __future__ import annotations

from typing import List

from catalog.runner import LookupResult
from catalog.search.models import PageInfo, Record

_HEADINGS = {
    "filePath": "Path",
    "product": "Product Name",
    "vendor": "Vendor",
}


def render_records(records: List[Record], max_width: int = 60) -> str:
    """Render records as an ASCII table, one row per record.

    Args:
        records: Extracted records (all sharing one field set).
        max_width: Cells longer than this are truncated with an ellipsis.

    Returns:
        The table as a string, or a short notice when there is nothing to show.
    """
    if not records:
        return "(no records)"

    names = list(records[0])
    headings = [_HEADINGS.get(n, n) for n in names]

    def clip(text: str) -> str:
        return text if len(text) <= max_width else text[: max_width - 1] + "…"

    rows = [[clip(r.get(n, r.absent)) for n in names] for r in records]
    widths = [
        max(len(headings[i]), *(len(row[i]) for row in rows))
        for i in range(len(names))
    ]

    def line(cells: List[str]) -> str:
        return "| " + " | ".join(c.ljust(w) for c, w in zip(cells, widths)) + " |"

    rule = "+-" + "-+-".join("-" * w for w in widths) + "-+"
    out = [rule, line(headings), rule]
    out.extend(line(row) for row in rows)
    out.append(rule)
    return "\n".join(out)


def render_summary(result: LookupResult) -> str:
    """One block of ``key : value`` lines describing a lookup outcome."""
    lines = [f"Name     : {result.name}", f"Status   : {result.status}"]
    if result.found:
        lines.append(f"Match    : {result.matched_label} (page {result.page_number})")
        lines.append(f"URL      : {result.detail_url}")
        lines.append(f"Records  : {len(result.records)}")
    elif result.status == "not_found":
        reason = result.reason or "unknown"
        if result.uncertain:
            reason += f"  [uncertain: pages {result.failed_pages} failed to load]"
        lines.append(f"Reason   : {reason}")
    else:
        lines.append(f"Error    : {result.error}")
    lines.append(f"Fetches  : {len(result.pages_fetched)}  {result.pages_fetched}")
    lines.append(f"Time     : {result.elapsed_seconds:.2f}s")
    return "\n".join(lines)


def render_page(info: PageInfo) -> str:
    """Render a listing page's range and entries."""
    if not info.exists:
        return f"Page {info.page_number}: no entries (page does not exist)"
    lines = [f"Page {info.page_number}: {info.first!r} … {info.last!r}  ({len(info.entries)} entries)"]
    for entry in info.entries:
        lines.append(f"  {entry.label}  →  {entry.link}")
    return "\n".join(lines)
