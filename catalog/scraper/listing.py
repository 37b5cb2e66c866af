"""Listing pages: item links per page, and the crawl's last page number."""

from __future__ import annotations

import re

import httpx
from bs4 import BeautifulSoup

from catalog.scraper.errors import CrawlError, PageMalformedError
from catalog.scraper.fetcher import fetch_html

# Second anchor of each row: the first one links to the category.
_LINK_SELECTOR = "td.coll-1 a:nth-child(2)"
_LAST_PAGE_SELECTOR = ".pagination li.last a"

# Greedy: captures the last "/<digits>/" group of the href.
_PAGE_NUMBER_RE = re.compile(r".*/(\d+)/")


def listing_url(base_url: str, uploader: str, page: int) -> str:
    """Return ``{base}/{uploader}-torrents/{page}/``."""
    return f"{base_url.rstrip('/')}/{uploader}-torrents/{page}/"


def parse_listing_html(html: str) -> list[str]:
    """Return the item hrefs of a listing page in document order.

    A page without matching rows yields ``[]``.
    """
    soup = BeautifulSoup(html, "html.parser")
    return [
        anchor["href"]
        for anchor in soup.select(_LINK_SELECTOR)
        if anchor.get("href")
    ]


def parse_last_page(html: str) -> int | None:
    """Return the page index of the "last page" pagination link, if any."""
    soup = BeautifulSoup(html, "html.parser")
    anchor = soup.select_one(_LAST_PAGE_SELECTOR)
    if anchor is None:
        return None
    match = _PAGE_NUMBER_RE.match(anchor.get("href", ""))
    if match is None:
        return None
    return int(match.group(1))


def fetch_listing_page(
    client: httpx.Client, page: int, base_url: str, uploader: str
) -> list[str]:
    """Fetch listing *page* and return its item links.

    Raises:
        PageMalformedError: If the page cannot be fetched.
    """
    url = listing_url(base_url, uploader, page)
    try:
        raw = fetch_html(client, url)
    except CrawlError as exc:
        raise PageMalformedError(page, str(exc)) from exc
    return parse_listing_html(raw.html)


def discover_last_page(client: httpx.Client, base_url: str, uploader: str) -> int:
    """Fetch listing page 1 and return the highest page number it links to.

    Raises:
        PageMalformedError: ``page == 1`` if the page cannot be fetched or
            has no usable "last page" link.
    """
    url = listing_url(base_url, uploader, 1)
    try:
        raw = fetch_html(client, url)
    except CrawlError as exc:
        raise PageMalformedError(1, str(exc)) from exc

    last_page = parse_last_page(raw.html)
    if last_page is None:
        raise PageMalformedError(1, "no last-page link in pagination")
    return last_page
