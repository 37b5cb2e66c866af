"""Crawl package — bounded two-stage pipeline and catalog collection."""

from catalog.crawl.catalog import CatalogSink, CrawlReport, JsonlCatalogSink, collect, write_jsonl
from catalog.crawl.pipeline import CatalogCrawler
from catalog.crawl.runner import run_crawl

__all__ = [
    "CatalogCrawler",
    "CatalogSink",
    "CrawlReport",
    "JsonlCatalogSink",
    "collect",
    "run_crawl",
    "write_jsonl",
]
