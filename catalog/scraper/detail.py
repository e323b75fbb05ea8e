"""Detail fetcher: dereferences a matched entry's link."""

from __future__ import annotations

from catalog.errors import DetailFetchError, FatalFetchError, TransportError
from catalog.scraper.fetcher import CatalogSession
from catalog.scraper.models import RawPage
from catalog.search.models import Entry


class DetailFetcher:
    """Fetch detail pages through the lookup's own session.

    Any failure here is fatal to the lookup: the match is already confirmed,
    so it is reported as an error rather than "not found".
    """

    def __init__(self, session: CatalogSession) -> None:
        self.session = session

    def fetch(self, entry: Entry) -> RawPage:
        url = entry.link
        try:
            raw = self.session.get(url)
        except (TransportError, FatalFetchError) as exc:
            raise DetailFetchError(url, str(exc)) from exc
        if not raw.ok:
            raise DetailFetchError(url, f"HTTP {raw.status_code}")
        return raw
