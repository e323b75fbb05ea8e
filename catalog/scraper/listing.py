"""Page source: turns a catalog listing page into a :class:`PageInfo`.

Listing URLs follow the pattern ``<base>?start=<letter>`` for page 1 and
``<base>?start=<letter>&page=<n>`` afterwards, where ``<letter>`` is the
first character of the label being looked up.
"""

from __future__ import annotations

from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup

from catalog.config import settings
from catalog.errors import PageFetchError, TransportError
from catalog.scraper.fetcher import CatalogSession
from catalog.search.models import Entry, PageInfo

# Status codes that mean "there is no such page" rather than "try again".
_MISSING_STATUSES = {404, 410}


def listing_url(
    letter: str,
    page_number: int = 1,
    *,
    base_url: str | None = None,
    start_param: str | None = None,
    page_param: str | None = None,
) -> str:
    """Return the URL of listing page *page_number* for names starting with *letter*."""
    url = httpx.URL(base_url or settings.catalog_base_url).copy_set_param(
        start_param or settings.catalog_start_param, letter.lower()
    )
    if page_number > 1:
        url = url.copy_set_param(page_param or settings.catalog_page_param, page_number)
    return str(url)


def parse_entries(
    html: str,
    page_url: str,
    *,
    suffixes: tuple[str, ...] | None = None,
    exclude_words: tuple[str, ...] | None = None,
) -> list[Entry]:
    """Return the qualifying catalog entries linked from *html*, in page order.

    An anchor qualifies when its text ends with one of *suffixes* and contains
    none of *exclude_words*.  Links are made absolute against *page_url*.
    """
    suffixes = settings.entry_suffixes if suffixes is None else suffixes
    exclude_words = settings.exclude_words if exclude_words is None else exclude_words

    soup = BeautifulSoup(html, "html.parser")
    entries: list[Entry] = []
    for anchor in soup.find_all("a", href=True):
        label = anchor.get_text(strip=True)
        if not label:
            continue
        lowered = label.lower()
        if suffixes and not lowered.endswith(suffixes):
            continue
        if any(word in lowered for word in exclude_words):
            continue
        entries.append(Entry(label=label, link=urljoin(page_url, anchor["href"])))
    return entries


class CatalogPageSource:
    """Callable page source bound to one session and one starting letter.

    Instances are passed to :func:`catalog.search.locate` as ``fetch_page``.
    """

    def __init__(self, session: CatalogSession, name: str) -> None:
        if not name or not name.strip():
            raise ValueError("name must not be blank")
        self.session = session
        self.letter = name.strip()[0].lower()

    def url_for(self, page_number: int) -> str:
        return listing_url(self.letter, page_number)

    def __call__(self, page_number: int) -> PageInfo:
        return self.fetch_page(page_number)

    def fetch_page(self, page_number: int) -> PageInfo:
        """Fetch and parse one listing page.

        Raises:
            PageFetchError: On transport failures and server errors.
            FatalFetchError: If the catalog host cannot be reached.
        """
        url = self.url_for(page_number)
        try:
            raw = self.session.get(url)
        except TransportError as exc:
            print(f"[PAGE] {page_number} ✗ {exc}")
            raise PageFetchError(page_number, str(exc)) from exc

        if raw.status_code in _MISSING_STATUSES:
            print(f"[PAGE] {page_number} → HTTP {raw.status_code}, no such page.")
            return PageInfo.missing(page_number)
        if not raw.ok:
            print(f"[PAGE] {page_number} ✗ HTTP {raw.status_code}")
            raise PageFetchError(page_number, f"HTTP {raw.status_code}")

        entries = parse_entries(raw.html, raw.url)
        if not entries:
            print(f"[PAGE] {page_number} → no entries.")
            return PageInfo.missing(page_number)

        info = PageInfo(page_number=page_number, exists=True, entries=entries)
        print(f"[PAGE] {page_number} → {info.first!r} … {info.last!r} ({len(entries)} entries)")
        return info
