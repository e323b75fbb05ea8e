"""Tests for the ``lookup``, ``page`` and ``config`` CLI commands."""

import json
from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from catalog.errors import PageFetchError
from catalog.runner import LookupResult
from catalog.search.models import Entry, PageInfo, Record
from cli.main import app
from cli.rendering import render_records

runner = CliRunner()


def _found() -> LookupResult:
    return LookupResult(
        name="notepad.exe",
        status="found",
        page_number=3,
        matched_label="notepad.exe",
        detail_url="https://catalog.test/process/notepad.exe.html",
        records=[Record({"filePath": r"C:\Windows\notepad.exe", "product": "Notepad", "vendor": "Microsoft"})],
        pages_fetched=[1, 2, 4, 3],
    )


def test_lookup_found():
    with patch("cli.main.run_lookup", return_value=_found()) as mock_run:
        result = runner.invoke(app, ["lookup", "notepad.exe"])

    assert result.exit_code == 0
    assert "notepad.exe (page 3)" in result.output
    assert "Product Name" in result.output
    assert r"C:\Windows\notepad.exe" in result.output
    mock_run.assert_called_once_with("notepad.exe", max_page_exponent=None)


def test_lookup_json():
    with patch("cli.main.run_lookup", return_value=_found()):
        result = runner.invoke(app, ["lookup", "notepad.exe", "--json", "--max-exponent", "4"])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["matched_label"] == "notepad.exe"
    assert data["records"][0]["vendor"] == "Microsoft"


def test_lookup_not_found_exit_code():
    missing = LookupResult(
        name="zzz.exe", status="not_found", reason="range-exhausted",
        uncertain=True, failed_pages=[8],
    )
    with patch("cli.main.run_lookup", return_value=missing):
        result = runner.invoke(app, ["lookup", "zzz.exe"])

    assert result.exit_code == 1
    assert "range-exhausted" in result.output
    assert "uncertain" in result.output


def test_lookup_error_exit_code():
    failed = LookupResult(name="a.exe", status="error", error="network unreachable")
    with patch("cli.main.run_lookup", return_value=failed):
        result = runner.invoke(app, ["lookup", "a.exe"])

    assert result.exit_code == 2
    assert "network unreachable" in result.output


def test_lookup_blank_name():
    result = runner.invoke(app, ["lookup", "   "])
    assert result.exit_code == 2


def test_page_command():
    info = PageInfo(
        page_number=2,
        exists=True,
        entries=[Entry("nab.exe", "https://catalog.test/nab"), Entry("nac.exe", "https://catalog.test/nac")],
    )
    source = MagicMock()
    source.fetch_page.return_value = info
    source.url_for.return_value = "https://catalog.test/file.php?start=n&page=2"

    with patch("cli.main.CatalogSession"), patch("cli.main.CatalogPageSource", return_value=source):
        result = runner.invoke(app, ["page", "nab.exe", "--page", "2"])

    assert result.exit_code == 0
    assert "'nab.exe' … 'nac.exe'" in result.output
    source.fetch_page.assert_called_once_with(2)


def test_page_command_fetch_error():
    source = MagicMock()
    source.fetch_page.side_effect = PageFetchError(2, "timed out")
    source.url_for.return_value = "https://catalog.test/file.php?start=n&page=2"

    with patch("cli.main.CatalogSession"), patch("cli.main.CatalogPageSource", return_value=source):
        result = runner.invoke(app, ["page", "nab.exe", "--page", "2"])

    assert result.exit_code == 2


def test_config_command():
    result = runner.invoke(app, ["config"])
    assert result.exit_code == 0
    assert "max_page_exponent" in result.output


def test_render_records_table():
    records = [
        Record({"filePath": r"C:\a.exe", "product": "A", "vendor": "Not found"}),
        Record({"filePath": r"C:\Program Files\b.exe", "product": "B", "vendor": "Acme"}),
    ]
    table = render_records(records).splitlines()

    assert table[0].startswith("+-")
    assert "Path" in table[1] and "Vendor" in table[1]
    assert len(table) == 6
    assert len({len(line) for line in table}) == 1


def test_render_records_empty():
    assert render_records([]) == "(no records)"
