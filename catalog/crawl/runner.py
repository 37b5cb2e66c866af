"""High-level runner for a full catalog crawl.

``run_crawl`` wires the crawler, the outcome collector and the JSONL sink
together so the CLI only has to pass options through.  Progress lines are
printed by the crawler itself.
"""

from __future__ import annotations

from pathlib import Path

from catalog.config import settings
from catalog.crawl.catalog import CrawlReport, collect, write_jsonl
from catalog.crawl.pipeline import CatalogCrawler


def run_crawl(
    *,
    start_page: int = 1,
    page_count: int | None = None,
    out_path: str | Path | None = None,
    page_buffer_factor: int | None = None,
    item_buffer_factor: int | None = None,
) -> tuple[CrawlReport, Path]:
    """Crawl the catalog and write the deduplicated records as JSONL.

    Args:
        start_page: First listing page to fetch.
        page_count: Number of pages to crawl; ``None`` crawls up to the
            last page found by pagination discovery.
        out_path: Destination file; defaults to
            ``settings.default_output_path``.
        page_buffer_factor: Overrides ``settings.page_buffer_factor``.
        item_buffer_factor: Overrides ``settings.item_buffer_factor``.

    Returns:
        The :class:`CrawlReport` and the path the records were written to.

    Raises:
        PageMalformedError: If pagination discovery fails.
        ValueError: On invalid configuration.
    """
    if out_path is None:
        settings.ensure_output_dir()
        out_path = settings.default_output_path

    with CatalogCrawler(
        page_buffer_factor=page_buffer_factor,
        item_buffer_factor=item_buffer_factor,
    ) as crawler:
        report = collect(crawler.crawl(start_page=start_page, page_count=page_count))

    path = write_jsonl(report.records, out_path)
    print(f"[DONE] {len(report.records)} unique record(s) written to {path}")
    return report, path
