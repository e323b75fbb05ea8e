"""Lookup endpoints.

Routes
------
GET /lookup?name=<label>&max_exponent=10   Locate + extract (JSON)
GET /search?name=<label>                   Redirect to the first listing page
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import RedirectResponse, JSONResponse
from pydantic import BaseModel

from catalog.runner import run_lookup
from catalog.scraper.listing import listing_url

router = APIRouter()


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------

class LookupResponse(BaseModel):
    name: str
    status: str
    found: bool
    page_number: Optional[int]
    matched_label: Optional[str]
    detail_url: Optional[str]
    records: list[dict[str, str]]
    reason: Optional[str]
    uncertain: bool
    error: Optional[str]
    pages_fetched: list[int]
    failed_pages: list[int]
    elapsed_seconds: float


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _requested_name(name: Optional[str], process: Optional[str]) -> str:
    """Accept ``name`` or the legacy ``process`` query parameter."""
    value = (name or process or "").strip()
    if not value:
        raise HTTPException(status_code=400, detail="Missing ?name= query parameter")
    return value


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/lookup", response_model=LookupResponse)
def lookup(
    name: Optional[str] = None,
    process: Optional[str] = None,
    max_exponent: Optional[int] = Query(None, ge=0, le=20),
) -> Any:
    """Locate *name* in the catalog and return its extracted records.

    Not-found outcomes are ordinary ``200`` responses with ``found: false``
    and a ``reason``.  Fetch failures return ``502`` with the same body so
    clients can tell an error from a miss.
    """
    target = _requested_name(name, process)
    result = run_lookup(target, max_page_exponent=max_exponent)
    body = result.to_dict()
    if result.status == "error":
        return JSONResponse(status_code=502, content=body)
    return body


@router.get("/search")
def search(name: Optional[str] = None, process: Optional[str] = None) -> RedirectResponse:
    """Redirect to the catalog's first listing page for the name's first letter."""
    target = _requested_name(name, process)
    url = listing_url(target[0])
    print(f"[API] Redirecting for {target!r} -> {url}")
    return RedirectResponse(url)
