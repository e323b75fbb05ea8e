"""HTTP fetcher with optional Playwright rendering for JS-built pages.

A :class:`CatalogSession` owns one ``httpx.Client`` (and, lazily, one headless
Chromium page) for the lifetime of a single lookup.  Concurrent lookups each
open their own session so navigation state is never shared.

Transport failures are translated at this boundary:

* ``httpx.ConnectError`` / browser "disconnected" errors → :class:`FatalFetchError`
* timeouts and other transport errors → :class:`TransportError`

Non-2xx responses are *not* errors here; callers inspect ``RawPage.status_code``.
"""

from __future__ import annotations

import re
import time
from typing import Any

import httpx

from catalog.config import settings
from catalog.errors import FatalFetchError, TransportError
from catalog.scraper.models import RawPage

# ---------------------------------------------------------------------------
# SPA / JS-rendered page detection heuristics
# ---------------------------------------------------------------------------
_SPA_PATTERNS = [
    re.compile(r'<div[^>]+id=["\'](?:root|app)["\']', re.IGNORECASE),
    re.compile(r"window\.__NEXT_DATA__", re.IGNORECASE),
    re.compile(r"ng-version=", re.IGNORECASE),
    re.compile(r"data-reactroot", re.IGNORECASE),
]

_DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/122.0.0.0 Safari/537.36"
    )
}

# Browser network errors after which no further page can be reached.
_FATAL_BROWSER_ERRORS = ("ERR_INTERNET_DISCONNECTED", "ERR_NAME_NOT_RESOLVED")


def _is_spa(html: str) -> bool:
    """Return ``True`` if *html* looks like a JavaScript SPA that needs rendering."""
    for pattern in _SPA_PATTERNS:
        if pattern.search(html):
            return True
    # Very little visible text relative to total HTML size.
    no_scripts = re.sub(r"<(script|style)[^>]*>.*?</(script|style)>", "", html, flags=re.IGNORECASE | re.DOTALL)
    stripped = re.sub(r"<[^>]+>", "", no_scripts).strip()
    if len(html) > 2000 and len(stripped) < 200:
        return True
    return False


class CatalogSession:
    """A caller-owned fetch session.  Use as a context manager."""

    def __init__(
        self,
        *,
        timeout: float | None = None,
        use_browser: bool | None = None,
        headless: bool | None = None,
        rate_limit_delay: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.timeout = settings.request_timeout if timeout is None else timeout
        self.use_browser = settings.use_browser if use_browser is None else use_browser
        self.headless = settings.browser_headless if headless is None else headless
        self.rate_limit_delay = (
            settings.rate_limit_delay if rate_limit_delay is None else rate_limit_delay
        )
        self._client = client or httpx.Client(
            headers=_DEFAULT_HEADERS,
            timeout=self.timeout,
            follow_redirects=True,
        )
        self._playwright: Any = None
        self._browser: Any = None
        self._page: Any = None

    def __enter__(self) -> CatalogSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()
        if self._browser is not None:
            self._browser.close()
            self._browser = None
            self._page = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def get(self, url: str) -> RawPage:
        """Fetch *url* and return a :class:`RawPage` whatever its status code.

        Raises:
            FatalFetchError: If the host cannot be reached at all.
            TransportError: On timeouts and other transport failures.
        """
        if self.rate_limit_delay > 0:
            time.sleep(self.rate_limit_delay)

        if self.use_browser:
            return self._fetch_with_playwright(url)

        try:
            response = self._client.get(url)
        except httpx.ConnectError as exc:
            raise FatalFetchError(f"{url}: {exc}") from exc
        except httpx.TransportError as exc:
            raise TransportError(url, str(exc) or type(exc).__name__) from exc

        raw = RawPage(url=str(response.url), html=response.text, status_code=response.status_code)
        if raw.ok and _is_spa(raw.html):
            raw = self._fetch_with_playwright(url)
        return raw

    def _fetch_with_playwright(self, url: str) -> RawPage:
        """Render *url* in the session's headless Chromium page.

        Playwright is imported lazily so callers that never need a browser do
        not need one installed.
        """
        from playwright.sync_api import Error as PlaywrightError  # noqa: PLC0415
        from playwright.sync_api import TimeoutError as PlaywrightTimeoutError  # noqa: PLC0415

        page = self._browser_page()
        try:
            response = page.goto(
                url,
                timeout=int(self.timeout * 1000),
                wait_until="domcontentloaded",
            )
        except PlaywrightTimeoutError as exc:
            raise TransportError(url, "navigation timed out") from exc
        except PlaywrightError as exc:
            if any(code in str(exc) for code in _FATAL_BROWSER_ERRORS):
                raise FatalFetchError(f"{url}: {exc}") from exc
            raise TransportError(url, str(exc)) from exc

        status = response.status if response is not None else 200
        return RawPage(url=page.url, html=page.content(), status_code=status)

    def _browser_page(self) -> Any:
        if self._page is None:
            from playwright.sync_api import sync_playwright  # noqa: PLC0415

            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(headless=self.headless)
            self._page = self._browser.new_context().new_page()
        return self._page
