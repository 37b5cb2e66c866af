"""Field extraction from the unlabeled text of a detail page.

The info block of a detail page is a run of sibling text nodes such as::

    "Game Info", "Genre: Strategy, Stealth\\n", "Language: English\\n",
    "Description", "Sneak into ", "corporate vaults."

Nothing in the markup says which node is which, so :func:`extract_info_fields`
walks them in document order and classifies each one by marker substring,
remembering whether the description marker has been passed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable

from catalog.scraper.errors import MalformedError

GENRE_MARKER = "Genre:"
LANGUAGE_MARKER = "Language:"
DESCRIPTION_MARKER = "Description"

_TAG_RE = re.compile(r"\[(.*?)\]")

# Literal renames applied to tags, genres and languages.
_RENAMES = {
    "GNU/Linux Wine": "Wine",
    "GNU/Linux Native": "Native",
}


@dataclass(frozen=True)
class InfoFields:
    """What :func:`extract_info_fields` recovers from one info block."""

    description: str = ""
    genres: frozenset[str] = field(default_factory=frozenset)
    languages: frozenset[str] = field(default_factory=frozenset)


def normalize_labels(labels: Iterable[str], uploader: str) -> frozenset[str]:
    """Drop the uploader's own tag and apply the literal renames."""
    return frozenset(
        _RENAMES.get(label, label) for label in labels if label and label != uploader
    )


def parse_items(fragment: str, *, url: str = "") -> list[str]:
    """Parse ``"Label: a, b, c\\n"`` into ``["a", "b", "c"]``.

    Everything after the first colon is taken; one leading space and one
    trailing newline are trimmed, then the rest is split on commas with one
    leading space trimmed from each piece.  Empty pieces are dropped.

    Raises:
        MalformedError: ``field == "items list"`` when there is no colon.
    """
    _, sep, rest = fragment.partition(":")
    if not sep:
        raise MalformedError(url, "items list")

    rest = rest.removeprefix(" ").removesuffix("\n")
    pieces = (piece.removeprefix(" ") for piece in rest.split(","))
    return [piece for piece in pieces if piece]


def parse_tags(subtitle: str, uploader: str) -> frozenset[str]:
    """Return every ``[...]`` group of *subtitle*, filtered and renamed."""
    return normalize_labels(_TAG_RE.findall(subtitle), uploader)


def parse_version(subtitle: str) -> str | None:
    """Return the first whitespace-delimited token of *subtitle*.

    ``None`` when the subtitle opens with a ``[tag]``; tags may contain
    spaces (``[GNU/Linux Wine]``), so the check runs before splitting.
    """
    stripped = subtitle.lstrip()
    if not stripped or _TAG_RE.match(stripped):
        return None
    return stripped.split(None, 1)[0]


def extract_info_fields(
    fragments: Iterable[str], *, uploader: str = "", url: str = ""
) -> InfoFields:
    """Classify the info block *fragments* into description, genres, languages.

    Once a fragment containing ``"Description"`` has been seen, every later
    fragment is description text (with a single leading space removed).
    Before that, ``"Genre:"`` and ``"Language:"`` fragments are parsed as
    comma-separated lists and anything else is ignored.
    """
    in_description = False
    description: list[str] = []
    genres: list[str] = []
    languages: list[str] = []

    for fragment in fragments:
        if in_description:
            description.append(fragment.removeprefix(" "))
        elif GENRE_MARKER in fragment:
            genres = parse_items(fragment, url=url)
        elif LANGUAGE_MARKER in fragment:
            languages = parse_items(fragment, url=url)
        elif DESCRIPTION_MARKER in fragment:
            in_description = True

    return InfoFields(
        description="".join(description),
        genres=normalize_labels(genres, uploader),
        languages=normalize_labels(languages, uploader),
    )
