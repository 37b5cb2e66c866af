"""Tests for the scraper — fetching, listing pages and detail pages.

Mocking strategy:
- ``respx`` patches ``httpx`` at the transport layer so no real network calls
  are made during fetch tests.
- Parsing is exercised directly against HTML built by the ``detail_html`` /
  ``listing_html`` fixtures in ``conftest.py``.
"""

from __future__ import annotations

import httpx
import pytest
import respx

from catalog.scraper.detail import (
    normalize_hash,
    parse_detail,
    parse_detail_html,
    parse_origin_id,
    resolve_item_url,
)
from catalog.scraper.errors import (
    MalformedError,
    PageMalformedError,
    TransportError,
    UrlInvalidError,
)
from catalog.scraper.fetcher import fetch_html, make_client
from catalog.scraper.listing import (
    discover_last_page,
    fetch_listing_page,
    listing_url,
    parse_last_page,
    parse_listing_html,
)
from catalog.scraper.models import CatalogRecord, RawPage


_BASE = "https://1337x.to"
_UPLOADER = "johncena141"
_ITEM_LINK = "/torrent/4973380/Invisible-Inc-b281021-ENG-GOG-GNU-Linux-Native-johncena141/"
_ITEM_URL = _BASE + _ITEM_LINK


# ---------------------------------------------------------------------------
# fetch_html
# ---------------------------------------------------------------------------

class TestFetchHtml:
    def test_successful_fetch_returns_raw_page(self) -> None:
        with respx.mock:
            respx.get("https://1337x.to/page").mock(
                return_value=httpx.Response(200, text="<html>ok</html>")
            )
            with make_client() as client:
                raw = fetch_html(client, "https://1337x.to/page")

        assert isinstance(raw, RawPage)
        assert raw.status_code == 200
        assert raw.html == "<html>ok</html>"

    def test_http_error_becomes_transport_error(self) -> None:
        with respx.mock:
            respx.get("https://1337x.to/missing").mock(
                return_value=httpx.Response(404, text="Not Found")
            )
            with make_client() as client:
                with pytest.raises(TransportError) as exc_info:
                    fetch_html(client, "https://1337x.to/missing")

        assert exc_info.value.url == "https://1337x.to/missing"
        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)

    def test_timeout_becomes_transport_error(self) -> None:
        with respx.mock:
            respx.get("https://1337x.to/slow").mock(side_effect=httpx.ReadTimeout)
            with make_client(timeout=0.1) as client:
                with pytest.raises(TransportError):
                    fetch_html(client, "https://1337x.to/slow")


# ---------------------------------------------------------------------------
# Listing pages
# ---------------------------------------------------------------------------

class TestListing:
    def test_listing_url_format(self) -> None:
        assert listing_url(_BASE + "/", _UPLOADER, 3) == "https://1337x.to/johncena141-torrents/3/"

    def test_parse_links_in_document_order(self, listing_html) -> None:
        links = ["/torrent/3/c/", "/torrent/1/a/", "/torrent/2/b/"]
        assert parse_listing_html(listing_html(links)) == links

    def test_empty_listing_is_not_an_error(self, listing_html) -> None:
        assert parse_listing_html(listing_html([])) == []

    def test_unrelated_html_yields_no_links(self) -> None:
        assert parse_listing_html("<html><body><a href='/x'>x</a></body></html>") == []

    def test_fetch_listing_page(self, listing_html) -> None:
        with respx.mock:
            respx.get("https://1337x.to/johncena141-torrents/2/").mock(
                return_value=httpx.Response(200, text=listing_html(["/torrent/9/i/"]))
            )
            with make_client() as client:
                links = fetch_listing_page(client, 2, _BASE, _UPLOADER)

        assert links == ["/torrent/9/i/"]

    def test_fetch_failure_is_page_malformed(self) -> None:
        with respx.mock:
            respx.get("https://1337x.to/johncena141-torrents/5/").mock(
                return_value=httpx.Response(503)
            )
            with make_client() as client:
                with pytest.raises(PageMalformedError) as exc_info:
                    fetch_listing_page(client, 5, _BASE, _UPLOADER)

        assert exc_info.value.page == 5
        assert isinstance(exc_info.value.__cause__, TransportError)


class TestPaginationDiscovery:
    def test_parse_last_page(self, listing_html) -> None:
        assert parse_last_page(listing_html([], last_page=42)) == 42

    def test_missing_pager(self, listing_html) -> None:
        assert parse_last_page(listing_html(["/torrent/1/a/"])) is None

    def test_non_numeric_href(self) -> None:
        html = '<div class="pagination"><ul><li class="last"><a href="/next">Last</a></li></ul></div>'
        assert parse_last_page(html) is None

    def test_discover_last_page(self, listing_html) -> None:
        with respx.mock:
            respx.get("https://1337x.to/johncena141-torrents/1/").mock(
                return_value=httpx.Response(200, text=listing_html([], last_page=42))
            )
            with make_client() as client:
                assert discover_last_page(client, _BASE, _UPLOADER) == 42

    def test_discover_without_pager_fails_on_page_one(self, listing_html) -> None:
        with respx.mock:
            respx.get("https://1337x.to/johncena141-torrents/1/").mock(
                return_value=httpx.Response(200, text=listing_html(["/torrent/1/a/"]))
            )
            with make_client() as client:
                with pytest.raises(PageMalformedError) as exc_info:
                    discover_last_page(client, _BASE, _UPLOADER)

        assert exc_info.value.page == 1

    def test_discover_transport_failure(self) -> None:
        with respx.mock:
            respx.get("https://1337x.to/johncena141-torrents/1/").mock(
                side_effect=httpx.ConnectError
            )
            with make_client() as client:
                with pytest.raises(PageMalformedError):
                    discover_last_page(client, _BASE, _UPLOADER)


# ---------------------------------------------------------------------------
# Detail page helpers
# ---------------------------------------------------------------------------

class TestDetailHelpers:
    def test_resolve_relative_link(self) -> None:
        assert resolve_item_url(_ITEM_LINK, _BASE) == _ITEM_URL

    def test_resolve_without_absolute_base(self) -> None:
        with pytest.raises(UrlInvalidError):
            resolve_item_url(_ITEM_LINK, "1337x.to")

    def test_origin_id(self) -> None:
        assert parse_origin_id(_ITEM_URL) == 4973380

    def test_origin_id_missing(self) -> None:
        with pytest.raises(MalformedError) as exc_info:
            parse_origin_id("https://1337x.to/torrent/abc/name/")
        assert exc_info.value.field == "id"

    def test_normalize_hash_uppercases(self) -> None:
        assert normalize_hash(" " + "a" * 40 + "\n", _ITEM_URL) == "A" * 40

    @pytest.mark.parametrize("value", ["", "abc", "g" * 40, "a" * 41])
    def test_normalize_hash_rejects(self, value: str) -> None:
        with pytest.raises(MalformedError) as exc_info:
            normalize_hash(value, _ITEM_URL)
        assert exc_info.value.field == "hash"


# ---------------------------------------------------------------------------
# parse_detail_html
# ---------------------------------------------------------------------------

class TestParseDetailHtml:
    def test_full_record(self, detail_html) -> None:
        record = parse_detail_html(detail_html(), _ITEM_URL, uploader=_UPLOADER)

        assert isinstance(record, CatalogRecord)
        assert record.origin_id == 4973380
        assert record.url == _ITEM_URL
        assert record.name == "Invisible Inc"
        assert record.version == "b281021"
        assert record.tags == {"Native", "ENG", "GOG"}
        assert record.content_hash == "0123456789ABCDEF0123456789ABCDEF01234567"
        assert record.size == "1.2 GB"
        assert record.genres == {"Strategy", "Stealth"}
        assert record.languages == {"English", "French"}
        assert record.description == "Sneak into corporate vaults."

    def test_bracketed_subtitle_has_no_version(self, detail_html) -> None:
        html = detail_html(subtitle="[Wine] v1.0")
        record = parse_detail_html(html, _ITEM_URL, uploader=_UPLOADER)
        assert record.version is None
        assert record.tags == {"Wine"}

    def test_leading_spaced_tag_has_no_version(self, detail_html) -> None:
        html = detail_html(subtitle="[GNU/Linux Wine] [johncena141] [ENG]")
        record = parse_detail_html(html, _ITEM_URL, uploader=_UPLOADER)
        assert record.version is None
        assert record.tags == {"Wine", "ENG"}

    def test_empty_heading_ends_info_search(self, detail_html) -> None:
        info = "<p><strong></strong>Genre: Puzzle\n<br>Description<br>Body</p>"
        record = parse_detail_html(detail_html(info=info), _ITEM_URL)
        assert record.genres == {"Puzzle"}
        assert record.description == "Body"

    def test_hash_kept_verbatim_without_validation(self, detail_html) -> None:
        record = parse_detail_html(
            detail_html(infohash="not-a-hash"), _ITEM_URL, validate_hash=False
        )
        assert record.content_hash == "not-a-hash"

    def test_description_heading_also_marks_info_block(self, detail_html) -> None:
        info = "<p><strong>Description</strong><br>Genre: Puzzle\n<br> Text</p>"
        record = parse_detail_html(detail_html(info=info), _ITEM_URL)
        # The heading itself switches to description mode.
        assert record.genres == frozenset()
        assert record.description == "Genre: Puzzle\nText"

    @pytest.mark.parametrize(
        ("missing", "field"),
        [
            ({"name": None}, "name"),
            ({"subtitle": None}, "subtitle"),
            ({"infohash": None}, "hash"),
            ({"infohash": "deadbeef"}, "hash"),
            ({"size": None}, "size"),
            ({"info": None}, "info"),
        ],
    )
    def test_missing_region_names_field(self, detail_html, missing, field) -> None:
        with pytest.raises(MalformedError) as exc_info:
            parse_detail_html(detail_html(**missing), _ITEM_URL)
        assert exc_info.value.field == field
        assert exc_info.value.url == _ITEM_URL

    def test_to_dict_is_json_ready(self, detail_html) -> None:
        data = parse_detail_html(detail_html(), _ITEM_URL, uploader=_UPLOADER).to_dict()
        assert data["tags"] == ["ENG", "GOG", "Native"]
        assert data["version"] == "b281021"


# ---------------------------------------------------------------------------
# parse_detail (fetch + parse)
# ---------------------------------------------------------------------------

class TestParseDetail:
    def test_fetches_and_parses(self, detail_html) -> None:
        with respx.mock:
            route = respx.get(_ITEM_URL).mock(
                return_value=httpx.Response(200, text=detail_html())
            )
            with make_client() as client:
                record = parse_detail(client, _ITEM_LINK, _BASE, uploader=_UPLOADER)

        assert route.called
        assert record.name == "Invisible Inc"

    def test_transport_failure(self) -> None:
        with respx.mock:
            respx.get(_ITEM_URL).mock(return_value=httpx.Response(500))
            with make_client() as client:
                with pytest.raises(TransportError):
                    parse_detail(client, _ITEM_LINK, _BASE)

    def test_missing_id_fails_before_fetching(self) -> None:
        # No routes: any request would fail the test with a respx assertion.
        with respx.mock:
            with make_client() as client:
                with pytest.raises(MalformedError) as exc_info:
                    parse_detail(client, "/torrent/no-id/", _BASE)
        assert exc_info.value.field == "id"
