"""Data models for the scraper layer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class RawPage:
    """The raw response for a single URL fetch."""

    url: str
    html: str
    status_code: int

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300
