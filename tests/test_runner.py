"""Tests for ``run_lookup`` — the end-to-end locate → fetch → extract flow.

A ``FakeSession`` stands in for :class:`CatalogSession`: it serves canned
``RawPage`` objects (or raises canned errors) keyed by URL, so the real page
source, locator, detail fetcher and extractor all run unmodified.
"""

from __future__ import annotations

import threading

import pytest

from catalog.config import settings
from catalog.errors import FatalFetchError, InvalidTargetError, TransportError
from catalog.runner import LookupResult, run_lookup
from catalog.scraper.listing import listing_url
from catalog.scraper.models import RawPage

_BASE = "https://catalog.test/file.php"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class FakeSession:
    def __init__(self, responses: dict[str, object]) -> None:
        self.responses = responses
        self.requested: list[str] = []
        self.closed = False

    def __enter__(self) -> FakeSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.closed = True

    def get(self, url: str) -> RawPage:
        self.requested.append(url)
        response = self.responses.get(url)
        if isinstance(response, Exception):
            raise response
        if response is None:
            return RawPage(url=url, html="", status_code=404)
        return RawPage(url=url, html=str(response), status_code=200)


def _listing(*labels: str) -> str:
    links = "".join(f'<a href="/process/{l}.html">{l}</a>' for l in labels)
    return f"<html><body><a href='/'>Home</a>{links}</body></html>"


_DETAIL_TABLE = r"""
<html><body><table>
  <tr><th>Path</th><th>Product Name</th><th>Vendor</th></tr>
  <tr><td>C:\Windows\notepad.exe</td><td>Notepad</td><td>Microsoft</td></tr>
</table></body></html>
"""

_DETAIL_TEXT = r"""
<html><body><main>
  <p>Usually located in C:\Tools\NVIDIA\nvtray.exe</p>
  <p>Product Name: NVIDIA Tray</p>
</main></body></html>
"""


@pytest.fixture(autouse=True)
def catalog_settings(monkeypatch):
    monkeypatch.setattr(settings, "catalog_base_url", _BASE)
    monkeypatch.setattr(settings, "catalog_start_param", "start")
    monkeypatch.setattr(settings, "catalog_page_param", "page")
    monkeypatch.setattr(settings, "entry_suffixes", (".exe",))
    monkeypatch.setattr(settings, "exclude_words", ("processchecker",))
    monkeypatch.setattr(settings, "max_page_exponent", 10)
    monkeypatch.setattr(settings, "verify_order", False)


@pytest.fixture
def n_catalog() -> dict[str, object]:
    """Five listing pages for names starting with "n"."""
    pages = [
        ("nab.exe", "nac.exe"),
        ("nad.exe", "nae.exe"),
        ("naf.exe", "notepad.exe"),
        ("nox.exe", "nvtray.exe"),
        ("nwa.exe", "nzz.exe"),
    ]
    responses: dict[str, object] = {
        listing_url("n", i): _listing(*labels) for i, labels in enumerate(pages, start=1)
    }
    responses["https://catalog.test/process/notepad.exe.html"] = _DETAIL_TABLE
    responses["https://catalog.test/process/nvtray.exe.html"] = _DETAIL_TEXT
    return responses


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestRunLookup:
    def test_found_with_table_records(self, n_catalog) -> None:
        session = FakeSession(n_catalog)
        result = run_lookup("notepad.exe", session_factory=lambda: session)

        assert isinstance(result, LookupResult)
        assert result.status == "found"
        assert result.found is True
        assert result.page_number == 3
        assert result.matched_label == "notepad.exe"
        assert result.detail_url == "https://catalog.test/process/notepad.exe.html"
        assert [r.to_dict() for r in result.records] == [
            {"filePath": r"C:\Windows\notepad.exe", "product": "Notepad", "vendor": "Microsoft"}
        ]
        assert result.pages_fetched[0] == 1
        assert session.closed is True

    def test_falls_back_to_page_text(self, n_catalog, monkeypatch) -> None:
        monkeypatch.setattr("catalog.search.extractor.trafilatura.extract", lambda *a, **k: None)
        result = run_lookup("NVTRAY.EXE", session_factory=lambda: FakeSession(n_catalog))

        assert result.status == "found"
        assert result.page_number == 4
        assert len(result.records) == 1
        assert result.records[0]["filePath"] == r"C:\Tools\NVIDIA\nvtray.exe"
        assert result.records[0]["product"] == "NVIDIA Tray"

    def test_not_found_before_start(self, n_catalog) -> None:
        session = FakeSession(n_catalog)
        result = run_lookup("naa.exe", session_factory=lambda: session)

        assert result.status == "not_found"
        assert result.reason == "before-start"
        assert result.uncertain is False
        assert session.requested == [listing_url("n", 1)]

    def test_not_found_past_end(self, n_catalog) -> None:
        result = run_lookup("nzzz.exe", session_factory=lambda: FakeSession(n_catalog))

        assert result.status == "not_found"
        assert result.reason == "range-exhausted"
        assert result.records == []

    def test_uncertain_not_found_is_reported(self, n_catalog) -> None:
        n_catalog[listing_url("n", 4)] = TransportError(listing_url("n", 4), "timed out")
        result = run_lookup("nvtray.exe", session_factory=lambda: FakeSession(n_catalog))

        assert result.status == "not_found"
        assert result.uncertain is True
        assert 4 in result.failed_pages

    def test_fatal_listing_error_is_an_error(self, n_catalog) -> None:
        n_catalog[listing_url("n", 1)] = FatalFetchError("network unreachable")
        result = run_lookup("notepad.exe", session_factory=lambda: FakeSession(n_catalog))

        assert result.status == "error"
        assert "unreachable" in result.error

    def test_detail_failure_is_an_error(self, n_catalog) -> None:
        del n_catalog["https://catalog.test/process/notepad.exe.html"]
        result = run_lookup("notepad.exe", session_factory=lambda: FakeSession(n_catalog))

        assert result.status == "error"
        assert result.matched_label == "notepad.exe"
        assert "HTTP 404" in result.error

    def test_cancelled_lookup_is_an_error(self, n_catalog) -> None:
        event = threading.Event()
        event.set()
        result = run_lookup("notepad.exe", cancel_event=event, session_factory=lambda: FakeSession(n_catalog))

        assert result.status == "error"
        assert result.pages_fetched == []

    def test_blank_name_raises(self) -> None:
        with pytest.raises(InvalidTargetError):
            run_lookup("  ", session_factory=lambda: FakeSession({}))

    def test_to_dict_is_json_ready(self, n_catalog) -> None:
        result = run_lookup("notepad.exe", session_factory=lambda: FakeSession(n_catalog))
        data = result.to_dict()

        assert data["found"] is True
        assert data["records"][0]["product"] == "Notepad"
        assert isinstance(data["elapsed_seconds"], float)
