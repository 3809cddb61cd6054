#!/usr/bin/env python3
"""
wikilink.py
-----------
Wikilink recognizer and rename rewriter.

Scans wikitext for ``[[target]]`` and ``[[target|alias]]`` links whose
target is a given title and rewrites them to point at a new title.
Matching is done by a small hand-written scanner over the link grammar
rather than a regular expression built from the title:

    "[[" · padding* · title · padding* · ( "|" · alias )? · "]]"

where padding is space, tab or form feed, and alias is one or more
characters other than ``[`` and ``]``. A link never spans a nested
``[[``: the alias stops at the first bracket and must be followed by
``]]``.

Rewrite rules per matched link:
    - alias equal to the new title: collapse to ``[[new]]``
    - any other alias: keep it verbatim, ``[[new|alias]]``
    - bare link, keep_alias: ``[[new|old]]`` so readers see the same text
    - bare link, no keep_alias: ``[[new]]``

Usage:
    from relink.wiki.wikilink import rewrite_links

    text, changed = rewrite_links("See [[Old]].", "Old", "New", keep_alias=True)
    # text == "See [[New|Old]].", changed is True
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass
from typing import Iterator, List, NamedTuple, Optional


# ==================== Grammar ====================

LINK_OPEN = "[["
LINK_CLOSE = "]]"
ALIAS_SEPARATOR = "|"
PADDING_CHARS = " \t\f"
BRACKET_CHARS = "[]"


# ==================== Data Classes ====================

@dataclass(frozen=True)
class WikiLinkOccurrence:
    """
    A matched wikilink inside a document.

    Attributes:
        target: Link target as written (equal to the searched title)
        alias: Display text after the pipe, or None for a bare link
        start: Offset of the opening ``[[``
        end: Offset just past the closing ``]]``
    """

    target: str
    alias: Optional[str]
    start: int
    end: int


class RewriteResult(NamedTuple):
    """Rewritten text and whether it differs from the input."""

    text: str
    changed: bool


# ==================== Scanner ====================

def _skip_padding(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] in PADDING_CHARS:
        pos += 1
    return pos


def _match_alias(text: str, pos: int) -> Optional[int]:
    """
    Match ``alias]]`` starting at ``pos``.

    Returns:
        Offset of the closing ``]]``, or None if there is no valid alias
    """
    end = pos
    while end < len(text) and text[end] not in BRACKET_CHARS:
        end += 1
    if end == pos or not text.startswith(LINK_CLOSE, end):
        return None
    return end


def _match_link(text: str, pos: int, title: str) -> Optional[WikiLinkOccurrence]:
    """
    Try to match a link to ``title`` whose ``[[`` starts at ``pos``.

    Leading padding is consumed greedily and given back one character at
    a time, so titles that themselves start with padding still match.

    Args:
        text: Document text
        pos: Offset of a ``[[``
        title: Target title to match

    Returns:
        WikiLinkOccurrence or None
    """
    inner = pos + len(LINK_OPEN)
    padded = _skip_padding(text, inner)

    for start in range(padded, inner - 1, -1):
        if not text.startswith(title, start):
            continue
        after = _skip_padding(text, start + len(title))

        if text.startswith(LINK_CLOSE, after):
            return WikiLinkOccurrence(title, None, pos, after + len(LINK_CLOSE))

        if text.startswith(ALIAS_SEPARATOR, after):
            alias_start = after + len(ALIAS_SEPARATOR)
            close = _match_alias(text, alias_start)
            if close is not None:
                return WikiLinkOccurrence(
                    title, text[alias_start:close], pos, close + len(LINK_CLOSE)
                )
    return None


def find_links(text: str, title: str) -> Iterator[WikiLinkOccurrence]:
    """
    Yield every link to ``title`` in ``text``, left to right.

    Matches never overlap. When a ``[[`` does not start a matching link
    the scan resumes one character later, so ``[[[Foo]]`` still finds
    ``[[Foo]]``.

    Args:
        text: Document text
        title: Target title

    Yields:
        WikiLinkOccurrence for each match
    """
    if not title:
        return
    pos = text.find(LINK_OPEN)
    while pos != -1:
        occurrence = _match_link(text, pos, title)
        if occurrence is not None:
            yield occurrence
            pos = text.find(LINK_OPEN, occurrence.end)
        else:
            pos = text.find(LINK_OPEN, pos + 1)


# ==================== Rewriter ====================

def format_link(target: str, alias: Optional[str] = None) -> str:
    """Render a wikilink, with ``|alias`` when alias is non-empty."""
    if alias:
        return f"{LINK_OPEN}{target}{ALIAS_SEPARATOR}{alias}{LINK_CLOSE}"
    return f"{LINK_OPEN}{target}{LINK_CLOSE}"


def rewrite_occurrence(
    occurrence: WikiLinkOccurrence,
    old_title: str,
    new_title: str,
    keep_alias: bool,
) -> str:
    """
    Build the replacement markup for one matched link.

    Args:
        occurrence: Matched link to ``old_title``
        old_title: Title being renamed
        new_title: Replacement title
        keep_alias: Inject ``old_title`` as alias into bare links

    Returns:
        Replacement wikilink markup
    """
    if occurrence.alias is not None:
        if occurrence.alias == new_title:
            return format_link(new_title)
        return format_link(new_title, occurrence.alias)
    if keep_alias:
        return format_link(new_title, old_title)
    return format_link(new_title)


def rewrite_links(
    text: str,
    old_title: str,
    new_title: str,
    keep_alias: bool,
) -> RewriteResult:
    """
    Rewrite every link to ``old_title`` so it points at ``new_title``.

    Pure function: the same inputs always produce the same output.
    Applying it again to its own output is a no-op as long as the two
    titles differ, since no link to ``old_title`` remains.

    Args:
        text: Document text
        old_title: Title being renamed
        new_title: Replacement title
        keep_alias: Inject ``old_title`` as alias into bare links

    Returns:
        RewriteResult(text, changed)
    """
    pieces: List[str] = []
    cursor = 0
    for occurrence in find_links(text, old_title):
        pieces.append(text[cursor:occurrence.start])
        pieces.append(rewrite_occurrence(occurrence, old_title, new_title, keep_alias))
        cursor = occurrence.end

    if cursor == 0:
        return RewriteResult(text, False)

    pieces.append(text[cursor:])
    new_text = "".join(pieces)
    return RewriteResult(new_text, new_text != text)
