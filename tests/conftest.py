"""Shared HTML builders for listing and detail pages.

The markup mirrors the parts of the index site the scraper reads: the
``.box-info`` size list and info-hash box, the ``#description`` block with
its centred title/subtitle paragraph and the "Game Info" paragraph, the
``td.coll-1`` listing rows and the ``.pagination`` control.
"""

from __future__ import annotations

from typing import Callable, Optional

import pytest

BASE_URL = "https://1337x.to"
UPLOADER = "johncena141"
HASH = "0123456789abcdef0123456789abcdef01234567"
SUBTITLE = "b281021 [johncena141] [GNU/Linux Native] [ENG] [GOG]"
INFO = (
    "<p><strong>Game Info</strong><br>"
    "Genre: Strategy, Stealth\n<br>"
    "Language: English, French\n<br>"
    "<strong>Description</strong><br>"
    "Sneak into <br> corporate vaults.</p>"
)


def build_detail_html(
    *,
    name: Optional[str] = "Invisible Inc ",
    subtitle: Optional[str] = SUBTITLE,
    infohash: Optional[str] = HASH,
    size: Optional[str] = "1.2 GB",
    info: Optional[str] = INFO,
) -> str:
    """Return a detail page; pass ``None`` to leave a region out."""
    name_html = f"<strong>{name}</strong><br>" if name is not None else ""
    subtitle_html = "<span>GNU/Linux</span>"
    if subtitle is not None:
        subtitle_html += f" <span>{subtitle}</span>"
    hash_html = (
        '<div class="infohash-box"><p><strong>Infohash :</strong> '
        f"<span>{infohash}</span></p></div>"
        if infohash is not None
        else ""
    )
    sizes = ["Games", "PC Game", "English"] + ([size] if size is not None else [])
    size_html = "".join(
        f"<li><strong>Field {i}</strong> <span>{value}</span></li>"
        for i, value in enumerate(sizes)
    )
    return (
        "<html><head><title>detail</title></head><body>"
        f'<div class="box-info"><ul class="list">{size_html}</ul>{hash_html}</div>'
        '<div id="description">'
        f'<p class="align-center">{name_html}{subtitle_html}</p>'
        '<p><strong>Links</strong> <a href="https://example.com">Homepage</a></p>'
        f"{info or ''}"
        "</div></body></html>"
    )


def build_listing_html(links: list[str], last_page: Optional[int] = None) -> str:
    """Return a listing page with one row per link and an optional pager."""
    rows = "".join(
        '<tr><td class="coll-1 name">'
        '<a href="/sub/10/0/" class="icon"><i class="flaticon-games"></i></a>'
        f'<a href="{link}">{link}</a></td>'
        '<td class="coll-4 size">1.2 GB</td></tr>'
        for link in links
    )
    pager = ""
    if last_page is not None:
        pager = (
            '<div class="pagination"><ul>'
            f'<li class="active"><a href="/{UPLOADER}-torrents/1/">1</a></li>'
            f'<li class="last"><a href="/{UPLOADER}-torrents/{last_page}/">Last</a></li>'
            "</ul></div>"
        )
    return (
        "<html><body>"
        f'<table class="table-list"><tbody>{rows}</tbody></table>'
        f"{pager}</body></html>"
    )


@pytest.fixture
def detail_html() -> Callable[..., str]:
    return build_detail_html


@pytest.fixture
def listing_html() -> Callable[..., str]:
    return build_listing_html
