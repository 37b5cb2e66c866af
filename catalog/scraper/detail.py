"""Detail page parser: one item link in, one :class:`CatalogRecord` out.

Every region of the page is located independently; the first one that is
missing aborts the item with a :class:`MalformedError` naming the region.
"""

from __future__ import annotations

import re

import httpx
from bs4 import BeautifulSoup, Tag

from catalog.scraper.errors import MalformedError, UrlInvalidError
from catalog.scraper.fetcher import fetch_html
from catalog.scraper.fields import extract_info_fields, parse_tags, parse_version
from catalog.scraper.models import CatalogRecord

# ---------------------------------------------------------------------------
# Selectors
# ---------------------------------------------------------------------------
_NAME_SELECTOR = "#description p.align-center strong"
_SUBTITLE_SELECTOR = "#description p.align-center span"
_HASH_SELECTOR = ".infohash-box span"
_SIZE_SELECTOR = ".box-info .list li span"
_INFO_SELECTOR = "#description p"

_INFO_HEADINGS = ("Info", "Description")

# Greedy: captures the last "/<digits>/" group of the URL.
_ORIGIN_ID_RE = re.compile(r".*/(\d+)/")
_HASH_RE = re.compile(r"^[0-9A-Fa-f]{40}$")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _first_text(element: Tag | None) -> str | None:
    """Return the first text node under *element*, or ``None``."""
    if element is None:
        return None
    return next(element.strings, None)


def _nth_text(soup: BeautifulSoup, selector: str, index: int) -> str | None:
    matches = soup.select(selector)
    if len(matches) <= index:
        return None
    return _first_text(matches[index])


def _find_info_block(soup: BeautifulSoup) -> Tag | None:
    """Return the first description paragraph headed by an info marker.

    Paragraphs are skipped while every ``<strong>`` heading in them has text
    containing neither ``"Info"`` nor ``"Description"``.  A paragraph with no
    headings is skipped; one with an empty heading ends the search.
    """
    for paragraph in soup.select(_INFO_SELECTOR):
        for heading in paragraph.find_all("strong"):
            text = _first_text(heading)
            if text is None or any(marker in text for marker in _INFO_HEADINGS):
                return paragraph
    return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def resolve_item_url(link: str, base_url: str) -> str:
    """Join *link* onto *base_url* and return an absolute http(s) URL.

    Raises:
        UrlInvalidError: If the result is not an absolute http(s) URL.
    """
    try:
        url = httpx.URL(base_url).join(link)
    except (httpx.InvalidURL, ValueError, TypeError) as exc:
        raise UrlInvalidError(base_url, link) from exc

    if url.scheme not in ("http", "https") or not url.host:
        raise UrlInvalidError(base_url, link)
    return str(url)


def parse_origin_id(url: str) -> int:
    """Return the numeric id found right before the URL's final path segment.

    Raises:
        MalformedError: ``field == "id"`` when the URL carries no such id.
    """
    match = _ORIGIN_ID_RE.match(url)
    if match is None:
        raise MalformedError(url, "id")
    return int(match.group(1))


def normalize_hash(raw: str, url: str) -> str:
    """Validate a 40-character hex info-hash and return it upper-cased."""
    value = raw.strip()
    if not _HASH_RE.match(value):
        raise MalformedError(url, "hash")
    return value.upper()


def parse_detail_html(
    html: str,
    url: str,
    *,
    uploader: str = "",
    validate_hash: bool = True,
) -> CatalogRecord:
    """Build a :class:`CatalogRecord` from the detail page *html* at *url*.

    Raises:
        MalformedError: Naming the first region (``id``, ``name``,
            ``subtitle``, ``hash``, ``size``, ``info`` or ``items list``)
            that could not be scraped.
    """
    origin_id = parse_origin_id(url)
    soup = BeautifulSoup(html, "html.parser")

    name = _first_text(soup.select_one(_NAME_SELECTOR))
    if name is None:
        raise MalformedError(url, "name")
    name = name.removesuffix(" ")

    subtitle = _nth_text(soup, _SUBTITLE_SELECTOR, 1)
    if subtitle is None:
        raise MalformedError(url, "subtitle")

    content_hash = _first_text(soup.select_one(_HASH_SELECTOR))
    if content_hash is None:
        raise MalformedError(url, "hash")
    if validate_hash:
        content_hash = normalize_hash(content_hash, url)

    size = _nth_text(soup, _SIZE_SELECTOR, 3)
    if size is None:
        raise MalformedError(url, "size")

    info_block = _find_info_block(soup)
    if info_block is None:
        raise MalformedError(url, "info")
    info = extract_info_fields(info_block.strings, uploader=uploader, url=url)

    return CatalogRecord(
        origin_id=origin_id,
        url=url,
        content_hash=content_hash,
        name=name,
        version=parse_version(subtitle),
        size=size,
        description=info.description,
        tags=parse_tags(subtitle, uploader),
        genres=info.genres,
        languages=info.languages,
    )


def parse_detail(
    client: httpx.Client,
    link: str,
    base_url: str,
    *,
    uploader: str = "",
    validate_hash: bool = True,
) -> CatalogRecord:
    """Resolve *link*, fetch the detail page and parse it.

    The origin id is checked before any request is made.

    Raises:
        UrlInvalidError: If *link* cannot be resolved against *base_url*.
        MalformedError: If the URL or the page lacks a required region.
        TransportError: If the request fails.
    """
    url = resolve_item_url(link, base_url)
    parse_origin_id(url)
    raw = fetch_html(client, url)
    return parse_detail_html(
        raw.html, url, uploader=uploader, validate_hash=validate_hash
    )
