"""Detail-page extraction: turns a detail page into :class:`Record` rows.

``extract`` infers the column layout of the first table that carries a
recognizable header row.  ``extract_text_fields`` is the looser fallback for
pages with no such table: it reads the page as plain text and picks fields
out with regular expressions.
"""

from __future__ import annotations

import re
from typing import Optional, Union

import trafilatura
from bs4 import BeautifulSoup, Tag

from catalog.search.models import DEFAULT_SCHEMA, FieldSchema, Record

Document = Union[str, BeautifulSoup]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _soup(document: Document) -> BeautifulSoup:
    if isinstance(document, BeautifulSoup):
        return document
    return BeautifulSoup(document, "html.parser")


def _cell_text(cell: Tag) -> str:
    return cell.get_text(" ", strip=True)


def _is_header_row(texts: list[str], schema: FieldSchema) -> bool:
    keywords = schema.keywords
    return any(kw in text.lower() for text in texts for kw in keywords)


def _column_map(texts: list[str], schema: FieldSchema) -> dict[str, int]:
    """Map each schema field to the index of the header cell naming it.

    Keywords are tried in order and a cell is claimed by one field at most,
    so ``"Product Name"`` is not also taken as a vendor column.
    """
    lowered = [t.lower() for t in texts]
    claimed: set[int] = set()
    columns: dict[str, int] = {}
    for name, keywords in schema.fields.items():
        for kw in keywords:
            kw = kw.lower()
            index = next(
                (i for i, text in enumerate(lowered) if i not in claimed and kw in text),
                None,
            )
            if index is not None:
                columns[name] = index
                claimed.add(index)
                break
    return columns


def _build_record(cells: list[Tag], columns: dict[str, int], schema: FieldSchema) -> Record:
    values: dict[str, str] = {}
    for name in schema.fields:
        index = columns.get(name)
        text = _cell_text(cells[index]) if index is not None and index < len(cells) else ""
        values[name] = text or schema.absent
    return Record(values=values, absent=schema.absent)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract(document: Document, schema: FieldSchema = DEFAULT_SCHEMA) -> list[Record]:
    """Return one :class:`Record` per data row of the first recognizable table.

    A header row is the first row whose cell text contains any schema
    keyword.  Every later row of the same table is a data row; rows without
    ``<td>`` cells and rows whose primary field is empty are skipped.  Only
    the first table with a header row is read.  A page with no such table
    yields ``[]``.
    """
    soup = _soup(document)
    for table in soup.find_all("table"):
        rows = table.find_all("tr")
        for position, row in enumerate(rows):
            texts = [_cell_text(c) for c in row.find_all(["th", "td"])]
            if not _is_header_row(texts, schema):
                continue
            columns = _column_map(texts, schema)
            if not columns:
                continue

            records: list[Record] = []
            for data_row in rows[position + 1:]:
                cells = data_row.find_all("td")
                if not cells:
                    continue
                record = _build_record(cells, columns, schema)
                if record.is_absent(schema.primary):
                    continue
                records.append(record)
            return records
    return []


# ---------------------------------------------------------------------------
# Unstructured fallback
# ---------------------------------------------------------------------------

_PATH_RE = re.compile(r"[A-Za-z]:\\[^\s<>\"']+")
_EXE_RE = re.compile(r"[A-Za-z0-9_\- \\/]+\.exe", re.IGNORECASE)
_PRODUCT_RE = re.compile(r"product\s*name\s*[:\-]\s*(.+)", re.IGNORECASE)
_VENDOR_RE = re.compile(r"(?:company|vendor)\s*[:\-]\s*(.+)", re.IGNORECASE)


def _bs4_text(html: str) -> str:
    """Readable text using BeautifulSoup ``<main>``/``<article>`` heuristics."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "nav", "footer", "header"]):
        tag.decompose()
    container = soup.find("main") or soup.find("article") or soup.body or soup
    return container.get_text(separator="\n", strip=True)


def page_text(html: str) -> str:
    """Return the readable text of *html*, one line per block.

    Tries ``trafilatura`` first and falls back to the BeautifulSoup heuristic
    when it returns nothing.
    """
    text: Optional[str] = trafilatura.extract(
        html,
        include_links=False,
        include_images=False,
        include_tables=True,
        no_fallback=False,
    )
    return text or _bs4_text(html)


def extract_text_fields(html: str, schema: FieldSchema = DEFAULT_SCHEMA) -> Optional[Record]:
    """Pull a file path, product name and vendor out of free-form page text.

    Only the default field names are recognized.  Returns ``None`` when the
    page text holds neither a Windows-style path nor an ``.exe`` name.
    """
    text = page_text(html)
    path_match = _PATH_RE.search(text) or _EXE_RE.search(text)
    if path_match is None:
        return None

    found = {"filePath": path_match.group(0).strip()}
    for line in text.splitlines():
        line = line.strip()
        if "product" not in found:
            m = _PRODUCT_RE.search(line)
            if m:
                found["product"] = m.group(1).strip()
        if "vendor" not in found:
            m = _VENDOR_RE.search(line)
            if m:
                found["vendor"] = m.group(1).strip()

    values = {name: found.get(name) or schema.absent for name in schema.fields}
    return Record(values=values, absent=schema.absent)
