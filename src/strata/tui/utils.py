"""Text metrics: grapheme segmentation, display width and width-bounded prefixes.

Widths are terminal cell counts: most characters take one cell, East Asian
wide characters and emoji take two, combining marks and control characters
take none.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import Iterable, Iterator

import grapheme
import wcwidth as _wcwidth

__all__ = [
    "Prefix",
    "graphemes",
    "grapheme_width",
    "visible_width",
    "prefix",
    "simple_prefix",
    "simple_suffix",
    "truncate_to_width",
]

# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


# ---------------------------------------------------------------------------
# Graphemes
# ---------------------------------------------------------------------------


def graphemes(text: str) -> Iterator[str]:
    """Iterate over the user-perceived characters of *text*."""
    return grapheme.graphemes(text)


def grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster.

    1. Control characters and lone combining marks -> 0
    2. Emoji sequences (VS16, ZWJ, skin tones, flags) -> 2
    3. Otherwise wcwidth of the first codepoint.
    """
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D):
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    first = g[0]
    if ord(first) >= 0x1F000:
        return 2
    if unicodedata.category(first).startswith("M") or unicodedata.category(first) == "Cf":
        return 0
    return max(_wcwidth.wcwidth(first), 0)


def visible_width(text: str) -> int:
    """Total display width of *text*."""
    if not text:
        return 0
    if text.isascii() and text.isprintable():
        return len(text)
    cached = _width_cache.get(text)
    if cached is not None:
        return cached
    return _cache_width(text, sum(grapheme_width(g) for g in graphemes(text)))


# ---------------------------------------------------------------------------
# Prefix fitting
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Prefix:
    """Length (in code points) and display width of a fitted prefix."""

    length: int
    width: int


def prefix(tokens: Iterable[str], available_width: int, delimiter: str = "") -> Prefix:
    """Longest run of whole *tokens* fitting in *available_width* cells.

    *delimiter* is counted between consecutive tokens, so the result
    describes a prefix of ``delimiter.join(tokens)`` that never breaks
    inside a token.
    """
    delimiter_width = visible_width(delimiter)
    current_width = 0
    length = 0
    count = 0
    for token in tokens:
        extra = visible_width(token) + (delimiter_width if count else 0)
        if current_width + extra > available_width:
            break
        current_width += extra
        length += len(token) + (len(delimiter) if count else 0)
        count += 1
    return Prefix(length=length, width=current_width)


def simple_prefix(text: str, width: int) -> Prefix:
    """Prefix of *text* fitting in *width* cells, breaking between any graphemes."""
    return prefix(graphemes(text), width)


def simple_suffix(text: str, width: int) -> Prefix:
    """Suffix of *text* fitting in *width* cells, breaking between any graphemes."""
    return prefix(reversed(list(graphemes(text))), width)


def truncate_to_width(text: str, max_width: int, ellipsis: str = "...") -> str:
    """Cut *text* to *max_width* cells, appending *ellipsis* when it was cut."""
    if max_width <= 0:
        return ""
    if visible_width(text) <= max_width:
        return text
    target = max_width - visible_width(ellipsis)
    if target <= 0:
        return ellipsis[: simple_prefix(ellipsis, max_width).length]
    return text[: simple_prefix(text, target).length] + ellipsis
