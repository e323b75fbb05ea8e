"""Centralised settings for the catalog locator.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_list(name: str, default: str) -> tuple[str, ...]:
    """Split a comma-separated environment variable into lower-cased items."""
    raw = os.environ.get(name, default)
    return tuple(item.strip().lower() for item in raw.split(",") if item.strip())


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Catalog listing
    # ------------------------------------------------------------------
    catalog_base_url: str = field(
        default_factory=lambda: os.environ.get(
            "CATALOG_BASE_URL", "https://processchecker.com/file.php"
        )
    )
    catalog_start_param: str = field(
        default_factory=lambda: os.environ.get("CATALOG_START_PARAM", "start")
    )
    catalog_page_param: str = field(
        default_factory=lambda: os.environ.get("CATALOG_PAGE_PARAM", "page")
    )
    entry_suffixes: tuple[str, ...] = field(
        default_factory=lambda: _env_list("CATALOG_ENTRY_SUFFIXES", ".exe")
    )
    exclude_words: tuple[str, ...] = field(
        default_factory=lambda: _env_list("CATALOG_EXCLUDE_WORDS", "processchecker")
    )

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    max_page_exponent: int = field(
        default_factory=lambda: int(os.environ.get("MAX_PAGE_EXPONENT", "10"))
    )
    verify_order: bool = field(
        default_factory=lambda: _env_flag("VERIFY_ORDER", "false")
    )

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "15.0"))
    )
    rate_limit_delay: float = field(
        default_factory=lambda: float(os.environ.get("RATE_LIMIT_DELAY", "0.0"))
    )
    use_browser: bool = field(
        default_factory=lambda: _env_flag("USE_BROWSER", "false")
    )
    browser_headless: bool = field(
        default_factory=lambda: _env_flag("BROWSER_HEADLESS", "true")
    )


# Module-level singleton, import this everywhere:
#   from catalog.config import settings
settings = Settings()
