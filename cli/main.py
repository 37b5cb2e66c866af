"""Catalog CLI — entry-point for crawler operations.

Usage:
    python cli/main.py --help

Sub-commands map to the crawler stages:
    pages  → pagination discovery
    page   → one listing page
    item   → one detail page
    crawl  → the full pipeline, written to JSONL
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from catalog.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json
from typing import Optional

import typer

from catalog.config import settings
from catalog.crawl.runner import run_crawl
from catalog.scraper import (
    CrawlError,
    discover_last_page,
    fetch_listing_page,
    make_client,
    parse_detail,
)

app = typer.Typer(
    name="catalog",
    help="Crawl an uploader's torrent listing into a structured catalog.",
    no_args_is_help=True,
)


@app.command("pages")
def pages_cmd() -> None:
    """Print the last listing page number for the configured uploader."""
    typer.echo(f"[pages] Discovering pages for {settings.uploader!r} …")
    try:
        with make_client() as client:
            last_page = discover_last_page(client, settings.base_url, settings.uploader)
    except CrawlError as exc:
        typer.echo(f"[pages] ✗ {exc}")
        raise typer.Exit(1)
    typer.echo(f"[pages] Last page: {last_page}")


@app.command("page")
def page_cmd(
    number: int = typer.Argument(..., min=1, help="Listing page number."),
) -> None:
    """List the item links found on one listing page."""
    try:
        with make_client() as client:
            links = fetch_listing_page(client, number, settings.base_url, settings.uploader)
    except CrawlError as exc:
        typer.echo(f"[page] ✗ {exc}")
        raise typer.Exit(1)

    if not links:
        typer.echo(f"[page] No links on page {number}.")
        return
    for link in links:
        typer.echo(f"  {link}")


@app.command("item")
def item_cmd(
    link: str = typer.Argument(..., help="Item link, relative to the base URL."),
) -> None:
    """Scrape one detail page and print the record as JSON."""
    try:
        with make_client() as client:
            record = parse_detail(
                client,
                link,
                settings.base_url,
                uploader=settings.uploader,
                validate_hash=settings.validate_hash,
            )
    except CrawlError as exc:
        typer.echo(f"[item] ✗ {exc}")
        raise typer.Exit(1)
    typer.echo(json.dumps(record.to_dict(), indent=2, ensure_ascii=False))


@app.command("crawl")
def crawl_cmd(
    start_page: int = typer.Option(1, "--start-page", min=1, help="First listing page."),
    pages: Optional[int] = typer.Option(
        None, "--pages", min=0, help="Pages to crawl (default: up to the last page)."
    ),
    out: Optional[Path] = typer.Option(None, "--out", help="JSONL output file."),
    page_buffer: Optional[int] = typer.Option(
        None, "--page-buffer", help="Max listing pages fetched at once."
    ),
    item_buffer: Optional[int] = typer.Option(
        None, "--item-buffer", help="Max detail pages fetched at once."
    ),
) -> None:
    """Crawl listing and detail pages and write the catalog as JSONL."""
    try:
        report, path = run_crawl(
            start_page=start_page,
            page_count=pages,
            out_path=out,
            page_buffer_factor=page_buffer,
            item_buffer_factor=item_buffer,
        )
    except (CrawlError, ValueError) as exc:
        typer.echo(f"[crawl] ✗ {exc}")
        raise typer.Exit(1)

    summary = report.summary()
    typer.echo(f"[crawl] Records  : {summary.pop('records')}")
    typer.echo(f"[crawl] Failures : {summary.pop('failures')}")
    for kind, count in sorted(summary.items()):
        typer.echo(f"[crawl]   {kind}: {count}")
    typer.echo(f"[crawl] Output   : {path}")


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
