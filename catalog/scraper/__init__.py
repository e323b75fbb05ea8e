"""Scraper package — catalog session, listing page source and detail fetcher."""

from catalog.scraper.detail import DetailFetcher
from catalog.scraper.fetcher import CatalogSession
from catalog.scraper.listing import CatalogPageSource, listing_url, parse_entries
from catalog.scraper.models import RawPage

__all__ = [
    "CatalogSession",
    "CatalogPageSource",
    "DetailFetcher",
    "RawPage",
    "listing_url",
    "parse_entries",
]
