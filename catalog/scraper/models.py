"""Data models for the scraper pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

from catalog.scraper.errors import CrawlError

T = TypeVar("T")


@dataclass
class RawPage:
    """The raw HTTP response for a single URL fetch."""

    url: str
    html: str
    status_code: int


@dataclass(frozen=True)
class CatalogRecord:
    """One scraped software entry, built in one go from a detail page."""

    origin_id: int
    url: str
    content_hash: str
    name: str
    version: Optional[str]
    size: str
    description: str
    tags: frozenset[str] = field(default_factory=frozenset)
    genres: frozenset[str] = field(default_factory=frozenset)
    languages: frozenset[str] = field(default_factory=frozenset)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation; sets become sorted lists."""
        return {
            "origin_id": self.origin_id,
            "url": self.url,
            "content_hash": self.content_hash,
            "name": self.name,
            "version": self.version,
            "size": self.size,
            "description": self.description,
            "tags": sorted(self.tags),
            "genres": sorted(self.genres),
            "languages": sorted(self.languages),
        }


@dataclass(frozen=True)
class ScrapeOutcome(Generic[T]):
    """Result of one page or item fetch: exactly one of *value* / *error*.

    ``source`` is the URL (or page label) the outcome belongs to and ``page``
    the listing page it was discovered on, when known.
    """

    source: str
    value: Optional[T] = None
    error: Optional[CrawlError] = None
    page: Optional[int] = None

    @classmethod
    def success(cls, value: T, *, source: str, page: int | None = None) -> "ScrapeOutcome[T]":
        return cls(source=source, value=value, page=page)

    @classmethod
    def failure(
        cls, error: CrawlError, *, source: str, page: int | None = None
    ) -> "ScrapeOutcome[T]":
        return cls(source=source, error=error, page=page)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
