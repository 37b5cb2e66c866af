"""Turning a stream of outcomes into a catalog ready for the store.

The crawl emits records out of order and may see the same upload twice; the
catalog store downstream expects one record per content hash, ordered by
origin id.  :func:`collect` does that reduction, and :class:`CatalogSink`
is the boundary the store sits behind.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from catalog.scraper.models import CatalogRecord, ScrapeOutcome


@dataclass
class CrawlReport:
    records: list[CatalogRecord] = field(default_factory=list)
    failures: list[ScrapeOutcome] = field(default_factory=list)

    def summary(self) -> dict[str, int]:
        """Count records and failures, failures broken down by error kind."""
        counts = Counter(f"failed_{o.error.kind}" for o in self.failures if o.error)
        return {"records": len(self.records), "failures": len(self.failures), **counts}


def collect(outcomes: Iterable[ScrapeOutcome]) -> CrawlReport:
    """Split *outcomes* into deduplicated records and failures.

    Records sharing a ``content_hash`` collapse to the one with the highest
    ``origin_id`` (the newest upload); the result is sorted by ``origin_id``.
    """
    by_hash: dict[str, CatalogRecord] = {}
    failures: list[ScrapeOutcome] = []

    for outcome in outcomes:
        if not outcome.ok:
            failures.append(outcome)
            continue
        record: CatalogRecord = outcome.value
        key = record.content_hash.lower()
        current = by_hash.get(key)
        if current is None or record.origin_id > current.origin_id:
            by_hash[key] = record

    records = sorted(by_hash.values(), key=lambda r: r.origin_id)
    return CrawlReport(records=records, failures=failures)


# ---------------------------------------------------------------------------
# Sinks
# ---------------------------------------------------------------------------

class CatalogSink(ABC):
    """Destination for finished records (the catalog store boundary)."""

    @abstractmethod
    def write(self, record: CatalogRecord) -> None:
        """Persist one record.  Merge/upsert semantics belong to the sink."""

    def close(self) -> None:
        """Release any resources held by the sink."""

    def __enter__(self) -> "CatalogSink":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


class JsonlCatalogSink(CatalogSink):
    """Write one JSON object per line to *path* (truncating it)."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self.path.open("w", encoding="utf-8")

    def write(self, record: CatalogRecord) -> None:
        self._fh.write(json.dumps(record.to_dict(), ensure_ascii=False) + "\n")

    def close(self) -> None:
        if not self._fh.closed:
            self._fh.close()


def write_jsonl(records: Iterable[CatalogRecord], path: str | Path) -> Path:
    """Write *records* to a JSONL file at *path* and return the path."""
    with JsonlCatalogSink(path) as sink:
        for record in records:
            sink.write(record)
    return Path(path)
