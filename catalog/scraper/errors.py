"""Typed failures raised by the scraper and carried by failing outcomes."""

from __future__ import annotations

from typing import Any


class CrawlError(Exception):
    """Base class for every failure the crawler knows how to report."""

    kind = "crawl"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "message": str(self)}


class TransportError(CrawlError):
    """The HTTP request failed: connection error, timeout or 4xx/5xx status."""

    kind = "transport"

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"request to {url} failed: {reason}")
        self.url = url
        self.reason = reason

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "url": self.url}


class MalformedError(CrawlError):
    """A required region of a detail page could not be located or parsed."""

    kind = "malformed"

    def __init__(self, url: str, field: str) -> None:
        super().__init__(f"failed to scrape {field} from {url or '<document>'}")
        self.url = url
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "url": self.url, "field": self.field}


class PageMalformedError(CrawlError):
    """A listing page could not be fetched or lacked the expected structure."""

    kind = "page_malformed"

    def __init__(self, page: int, reason: str = "unexpected page structure") -> None:
        super().__init__(f"listing page {page}: {reason}")
        self.page = page
        self.reason = reason

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "page": self.page}


class UrlInvalidError(CrawlError):
    """An absolute item URL could not be built from the base URL and a link."""

    kind = "url_invalid"

    def __init__(self, base_url: str, link: str) -> None:
        super().__init__(f"cannot resolve {link!r} against {base_url!r}")
        self.base_url = base_url
        self.link = link

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "base_url": self.base_url, "link": self.link}
