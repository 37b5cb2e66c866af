"""HTTP fetching for listing and detail pages.

A single :class:`httpx.Client` is shared by every worker thread of a crawl so
connections to the index site are pooled.  No retries happen here; a failed
request surfaces as :class:`~catalog.scraper.errors.TransportError` and the
caller decides what to do with it.
"""

from __future__ import annotations

import httpx

from catalog.config import settings
from catalog.scraper.errors import TransportError
from catalog.scraper.models import RawPage

_DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}


def make_client(timeout: float | None = None) -> httpx.Client:
    """Return a client configured for the index site.

    *timeout* applies to every individual request; defaults to
    ``settings.request_timeout``.
    """
    return httpx.Client(
        headers=_DEFAULT_HEADERS,
        timeout=settings.request_timeout if timeout is None else timeout,
        follow_redirects=True,
    )


def fetch_html(client: httpx.Client, url: str) -> RawPage:
    """GET *url* with *client* and return a :class:`RawPage`.

    Raises:
        TransportError: On any network error, timeout, or 4xx/5xx status.
    """
    try:
        response = client.get(url)
        response.raise_for_status()
    except httpx.HTTPError as exc:
        raise TransportError(url, str(exc) or type(exc).__name__) from exc

    return RawPage(url=url, html=response.text, status_code=response.status_code)
