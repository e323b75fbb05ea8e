"""Search core — ordered-catalog locator and detail-table extractor."""

from catalog.search.extractor import extract, extract_text_fields
from catalog.search.locator import locate
from catalog.search.models import (
    DEFAULT_SCHEMA,
    Entry,
    FieldSchema,
    LocateResult,
    NotFoundReason,
    PageInfo,
    Record,
)

__all__ = [
    "locate",
    "extract",
    "extract_text_fields",
    "Entry",
    "PageInfo",
    "LocateResult",
    "NotFoundReason",
    "FieldSchema",
    "Record",
    "DEFAULT_SCHEMA",
]
