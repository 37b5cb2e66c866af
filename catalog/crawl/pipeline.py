"""Two-stage bounded crawl: listing pages first, then their items.

Listing pages and detail pages are fetched on two separate thread pools so
their concurrency can be tuned independently — a listing page holds many
items, so item fetches vastly outnumber page fetches.  Results are merged as
they complete and handed to the caller one :class:`ScrapeOutcome` at a time;
nothing a single page or item does can stop the crawl.
"""

from __future__ import annotations

import itertools
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Iterator

import httpx

from catalog.config import settings
from catalog.scraper.detail import parse_detail, resolve_item_url
from catalog.scraper.errors import CrawlError, UrlInvalidError
from catalog.scraper.fetcher import make_client
from catalog.scraper.listing import discover_last_page, fetch_listing_page, listing_url
from catalog.scraper.models import CatalogRecord, ScrapeOutcome


def _check_positive(name: str, value: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value < 1:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    return value


def _check_base_url(base_url: str) -> str:
    try:
        url = httpx.URL(base_url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise ValueError(f"invalid base URL {base_url!r}") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise ValueError(f"base URL must be an absolute http(s) URL, got {base_url!r}")
    return base_url.rstrip("/")


class CatalogCrawler:
    """Crawl every listing page of one uploader and parse each item found.

    Unset arguments fall back to :data:`catalog.config.settings`.  Pass an
    existing *client* to share it (the crawler then leaves it open);
    otherwise the crawler owns one and closes it in :meth:`close`.

    Raises:
        ValueError: On an unusable base URL or a non-positive buffer factor.
    """

    def __init__(
        self,
        base_url: str | None = None,
        uploader: str | None = None,
        *,
        page_buffer_factor: int | None = None,
        item_buffer_factor: int | None = None,
        timeout: float | None = None,
        validate_hash: bool | None = None,
        empty_page_warning: int | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.base_url = _check_base_url(settings.base_url if base_url is None else base_url)
        self.uploader = settings.uploader if uploader is None else uploader
        self.page_buffer_factor = _check_positive(
            "page_buffer_factor",
            settings.page_buffer_factor if page_buffer_factor is None else page_buffer_factor,
        )
        self.item_buffer_factor = _check_positive(
            "item_buffer_factor",
            settings.item_buffer_factor if item_buffer_factor is None else item_buffer_factor,
        )
        self.validate_hash = settings.validate_hash if validate_hash is None else validate_hash
        self.empty_page_warning = (
            settings.empty_page_warning if empty_page_warning is None else empty_page_warning
        )
        self._owns_client = client is None
        self._client = make_client(timeout) if client is None else client

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def close(self) -> None:
        if self._owns_client and not self._client.is_closed:
            self._client.close()

    def __enter__(self) -> "CatalogCrawler":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def discover_page_count(self) -> int:
        """Return the number of the last listing page.

        Raises:
            PageMalformedError: If page 1 has no usable pagination control.
        """
        print(f"[PAGES] Discovering listing pages for {self.uploader!r} …")
        last_page = discover_last_page(self._client, self.base_url, self.uploader)
        print(f"[PAGES] ✓ Last page is {last_page}.")
        return last_page

    def crawl(
        self, start_page: int = 1, page_count: int | None = None
    ) -> Iterator[ScrapeOutcome]:
        """Return an iterator over one outcome per listing item.

        With *page_count* ``None`` the last page is discovered first, before
        anything else is fetched; a discovery failure is raised from this
        call.  Outcomes arrive in completion order.  Closing the iterator
        early cancels every fetch that has not started yet.
        """
        _check_positive("start_page", start_page)
        if page_count is None:
            page_count = max(self.discover_page_count() - start_page + 1, 0)
        elif page_count < 0:
            raise ValueError(f"page_count must not be negative, got {page_count!r}")
        return self._run(start_page, page_count)

    # ------------------------------------------------------------------
    # Workers
    # ------------------------------------------------------------------
    def _fetch_page(self, page: int) -> ScrapeOutcome[list[str]]:
        url = listing_url(self.base_url, self.uploader, page)
        try:
            links = fetch_listing_page(self._client, page, self.base_url, self.uploader)
        except CrawlError as exc:
            print(f"[LISTING] ✗ Page {page}: {exc}")
            return ScrapeOutcome.failure(exc, source=url, page=page)
        print(f"[LISTING] ✓ Page {page}: {len(links)} link(s).")
        return ScrapeOutcome.success(links, source=url, page=page)

    def _scrape_item(self, link: str, page: int) -> ScrapeOutcome[CatalogRecord]:
        try:
            record = parse_detail(
                self._client,
                link,
                self.base_url,
                uploader=self.uploader,
                validate_hash=self.validate_hash,
            )
        except CrawlError as exc:
            print(f"[ITEM] ✗ {link}: {exc}")
            try:
                source = resolve_item_url(link, self.base_url)
            except UrlInvalidError:
                source = link
            return ScrapeOutcome.failure(exc, source=source, page=page)
        print(f"[ITEM] ✓ {record.name} ({record.version or 'no version'})")
        return ScrapeOutcome.success(record, source=record.url, page=page)

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------
    def _submit_pages(
        self,
        pool: ThreadPoolExecutor,
        pages: Iterator[int],
        in_flight: dict[Future, int],
    ) -> None:
        """Keep up to ``page_buffer_factor`` listing fetches in flight."""
        while len(in_flight) < self.page_buffer_factor:
            page = next(pages, None)
            if page is None:
                return
            in_flight[pool.submit(self._fetch_page, page)] = page

    def _run(self, start_page: int, page_count: int) -> Iterator[ScrapeOutcome]:
        print(f"[CRAWL] Crawling {page_count} page(s) starting at page {start_page} …")
        pages = itertools.islice(itertools.count(start_page), page_count)
        page_pool = ThreadPoolExecutor(
            max_workers=self.page_buffer_factor, thread_name_prefix="catalog-page"
        )
        item_pool = ThreadPoolExecutor(
            max_workers=self.item_buffer_factor, thread_name_prefix="catalog-item"
        )
        page_futures: dict[Future, int] = {}
        item_futures: set[Future] = set()
        empty_streak = 0
        records = failures = 0

        try:
            self._submit_pages(page_pool, pages, page_futures)
            while page_futures or item_futures:
                done, _ = wait([*page_futures, *item_futures], return_when=FIRST_COMPLETED)
                for future in done:
                    if future in page_futures:
                        page = page_futures.pop(future)
                        self._submit_pages(page_pool, pages, page_futures)
                        outcome = future.result()
                        if not outcome.ok:
                            failures += 1
                            yield outcome
                            continue

                        links = outcome.value or []
                        if links:
                            empty_streak = 0
                        else:
                            empty_streak += 1
                            if empty_streak == self.empty_page_warning:
                                print(
                                    f"[CRAWL] ⚠ {empty_streak} listing pages in a row had no "
                                    f"links (latest: page {page}); the page layout may have changed."
                                )
                        for link in links:
                            item_futures.add(item_pool.submit(self._scrape_item, link, page))
                    else:
                        item_futures.discard(future)
                        outcome = future.result()
                        if outcome.ok:
                            records += 1
                        else:
                            failures += 1
                        yield outcome
        finally:
            for future in (*page_futures, *item_futures):
                future.cancel()
            page_pool.shutdown(wait=False, cancel_futures=True)
            item_pool.shutdown(wait=False, cancel_futures=True)

        print(f"[CRAWL] Done: {records} record(s), {failures} failure(s).")
