"""Scraper package — listing/detail fetch & field extraction."""

from catalog.scraper.detail import parse_detail, parse_detail_html
from catalog.scraper.errors import (
    CrawlError,
    MalformedError,
    PageMalformedError,
    TransportError,
    UrlInvalidError,
)
from catalog.scraper.fetcher import fetch_html, make_client
from catalog.scraper.fields import extract_info_fields
from catalog.scraper.listing import discover_last_page, fetch_listing_page
from catalog.scraper.models import CatalogRecord, RawPage, ScrapeOutcome

__all__ = [
    "fetch_html",
    "make_client",
    "parse_detail",
    "parse_detail_html",
    "extract_info_fields",
    "fetch_listing_page",
    "discover_last_page",
    "CatalogRecord",
    "RawPage",
    "ScrapeOutcome",
    "CrawlError",
    "TransportError",
    "MalformedError",
    "PageMalformedError",
    "UrlInvalidError",
]
