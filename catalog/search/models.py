"""Data models for the locator and the extractor.

Plain dataclasses, recomputed on every fetch and owned by the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Mapping


def normalise_label(label: str) -> str:
    """Return the comparison key for a catalog label (case-insensitive)."""
    return label.strip().lower()


@dataclass(frozen=True)
class Entry:
    """One catalog item listed on a page."""

    label: str
    link: str

    @property
    def key(self) -> str:
        return normalise_label(self.label)


@dataclass
class PageInfo:
    """A fetched listing page.  ``exists`` is false when no entry qualified."""

    page_number: int
    exists: bool
    entries: list[Entry] = field(default_factory=list)

    @classmethod
    def missing(cls, page_number: int) -> PageInfo:
        return cls(page_number=page_number, exists=False, entries=[])

    @property
    def first(self) -> str | None:
        """Lower-cased label of the first entry, or ``None`` for a missing page."""
        return self.entries[0].key if self.entries else None

    @property
    def last(self) -> str | None:
        return self.entries[-1].key if self.entries else None

    def contains(self, target: str) -> bool:
        """Range containment: ``first <= target <= last`` (inclusive)."""
        if not self.exists or not self.entries:
            return False
        key = normalise_label(target)
        return self.first <= key <= self.last  # type: ignore[operator]

    def precedes(self, target: str) -> bool:
        """True when *target* sorts strictly before this page's first label."""
        return bool(self.entries) and normalise_label(target) < self.first  # type: ignore[operator]

    def exact_match(self, target: str) -> Entry | None:
        key = normalise_label(target)
        for entry in self.entries:
            if entry.key == key:
                return entry
        return None

    def partial_match(self, target: str) -> Entry | None:
        """First entry whose label contains *target* as a substring."""
        key = normalise_label(target)
        for entry in self.entries:
            if key in entry.key:
                return entry
        return None

    def is_sorted(self) -> bool:
        keys = [e.key for e in self.entries]
        return all(a <= b for a, b in zip(keys, keys[1:]))


@dataclass
class SearchState:
    """Ephemeral bookkeeping for one call to ``locate``."""

    low_page: int = 1
    high_page: int = 1
    last_valid_page: int = 1
    probe_exponent: int = 0


class NotFoundReason(str, Enum):
    EMPTY_CATALOG = "empty-catalog"
    BEFORE_START = "before-start"
    RANGE_EXHAUSTED = "range-exhausted"
    NO_MATCH_ON_CANDIDATE_PAGE = "no-match-on-candidate-page"
    EXPONENT_LIMIT = "exponent-limit"


@dataclass
class LocateResult:
    """Outcome of ``locate``: either a page + entry or a not-found reason.

    ``pages_fetched`` lists every page number requested from the page source,
    in order (retries included).  ``failed_pages`` lists pages whose fetch
    failed and were treated as nonexistent; a not-found result with failures
    is *uncertain*.
    """

    found: bool
    page_number: int | None = None
    entry: Entry | None = None
    reason: NotFoundReason | None = None
    pages_fetched: list[int] = field(default_factory=list)
    failed_pages: list[int] = field(default_factory=list)

    @property
    def uncertain(self) -> bool:
        return not self.found and bool(self.failed_pages)


# ---------------------------------------------------------------------------
# Extractor models
# ---------------------------------------------------------------------------

ABSENT = "Not found"


@dataclass(frozen=True)
class FieldSchema:
    """Field name → header keywords consulted when mapping table columns.

    Fields keep their declaration order; the first keyword that matches a
    header cell wins.  ``primary`` names the field a row must carry to be
    kept.
    """

    fields: Mapping[str, tuple[str, ...]]
    primary: str
    absent: str = ABSENT

    def __post_init__(self) -> None:
        if self.primary not in self.fields:
            raise ValueError(f"primary field {self.primary!r} is not in the schema")

    @property
    def keywords(self) -> list[str]:
        return [kw.lower() for kws in self.fields.values() for kw in kws]


DEFAULT_SCHEMA = FieldSchema(
    fields={
        "filePath": ("path",),
        "product": ("product name", "product"),
        "vendor": ("vendor", "company"),
    },
    primary="filePath",
)


@dataclass
class Record:
    """One extracted row.  Missing values hold the schema's absent-marker."""

    values: dict[str, str]
    absent: str = ABSENT

    def __getitem__(self, name: str) -> str:
        return self.values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)

    def is_absent(self, name: str) -> bool:
        value = self.values.get(name, self.absent)
        return not value or value == self.absent

    def to_dict(self) -> dict[str, str]:
        return dict(self.values)
