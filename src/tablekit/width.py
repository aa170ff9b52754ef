"""Display-width measurement for table cells.

Measures how many terminal columns a piece of text occupies: ANSI escape
sequences are ignored, text is measured per grapheme cluster (wide and emoji
clusters take two columns, combining marks none) and tabs advance to the next
tab stop.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Iterator

import grapheme
import wcwidth as _wcwidth

from tablekit.env import DEFAULT_TAB_WIDTH
from tablekit.types import WrapMode

ELLIPSIS = "…"
BREAK_MARKER = "↩"

# ---------------------------------------------------------------------------
# Regex patterns for ANSI / OSC / APC sequences
# ---------------------------------------------------------------------------

_STRIP_RE = re.compile(
    r"\x1b\[[0-9;]*[mGKHJ]"        # CSI
    r"|\x1b\]8;;[^\x07]*\x07"       # OSC 8
    r"|\x1b_[^\x07\x1b]*(?:\x07|\x1b\\)"  # APC
)

_WIDTH_CACHE_MAX = 512


def strip_ansi(text: str) -> str:
    return _STRIP_RE.sub("", text)


def _is_plain_ascii(text: str) -> bool:
    for ch in text:
        cp = ord(ch)
        if cp < 0x20 or cp > 0x7E:
            return False
    return True


def iter_units(text: str) -> Iterator[tuple[bool, str]]:
    """Yield ``(is_code, piece)`` pairs: ANSI codes whole, text per grapheme."""
    pos = 0
    for match in _STRIP_RE.finditer(text):
        if match.start() > pos:
            for g in grapheme.graphemes(text[pos : match.start()]):
                yield False, g
        yield True, match.group(0)
        pos = match.end()
    if pos < len(text):
        for g in grapheme.graphemes(text[pos:]):
            yield False, g


# ---------------------------------------------------------------------------
# Grapheme width
# ---------------------------------------------------------------------------


def _grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster.

    Rules:
    1. Zero-width characters (control, combining marks, etc.) -> 0
    2. Emoji (multi-codepoint, contains VS16 U+FE0F, ZWJ sequences, etc.) -> 2
    3. Otherwise delegate to wcwidth for the first meaningful codepoint.
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
        if cp == 0xFE0F:  # VS16
            return 2
        if cp == 0x200D:  # ZWJ
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF:  # Skin tone modifiers
            return 2
        if 0x1F1E6 <= cp <= 0x1F1FF:  # Regional indicators
            return 2

    first_cp = ord(g[0])
    if first_cp >= 0x1F000:
        return 2

    cat = unicodedata.category(g[0])
    if cat.startswith("M") or cat == "Cf":
        return 0

    return max(_wcwidth.wcwidth(g[0]), 0)


# ---------------------------------------------------------------------------
# WidthMeasurer
# ---------------------------------------------------------------------------


class WidthMeasurer:
    """Measures display widths with a fixed tab stop and ambiguous-width policy."""

    def __init__(self, tab_width: int = DEFAULT_TAB_WIDTH, east_asian: bool = False) -> None:
        if tab_width < 1:
            raise ValueError(f"tab_width must be >= 1, got {tab_width}")
        self.tab_width = tab_width
        self.east_asian = east_asian
        self._cache: dict[str, int] = {}

    def _cache_width(self, key: str, value: int) -> int:
        if len(self._cache) >= _WIDTH_CACHE_MAX:
            self._cache.clear()
        self._cache[key] = value
        return value

    def grapheme_width(self, g: str) -> int:
        if self.east_asian and len(g) == 1 and unicodedata.east_asian_width(g) == "A":
            return 2
        return _grapheme_width(g)

    def tab_advance(self, col: int) -> int:
        """Columns a tab occupies when it starts at column *col*."""
        return self.tab_width - col % self.tab_width

    def display_width(self, text: str) -> int:
        """Visible width of *text*; multi-line text measures as its widest line."""
        if not text:
            return 0
        if "\n" in text:
            return max(self._line_width(line) for line in text.split("\n"))
        return self._line_width(text)

    def _line_width(self, line: str) -> int:
        stripped = _STRIP_RE.sub("", line)
        if not stripped:
            return 0

        if _is_plain_ascii(stripped):
            return len(stripped)

        cached = self._cache.get(stripped)
        if cached is not None:
            return cached

        total = 0
        for g in grapheme.graphemes(stripped):
            if g == "\t":
                total += self.tab_advance(total)
            else:
                total += self.grapheme_width(g)
        return self._cache_width(stripped, total)

    def minimum_width(self, text: str, mode: WrapMode) -> int:
        """Smallest column width that renders *text* without losing content."""
        if mode == "truncate":
            width = self.display_width(text)
            if width <= 1:
                return width
            return 1 + self.display_width(ELLIPSIS)
        if mode in ("normal", "break"):
            longest = 0
            for line in self.expand_tabs(text).split("\n"):
                for word in line.split():
                    longest = max(longest, self._line_width(word))
            return longest
        return self.display_width(text)

    def expand_tabs(self, text: str) -> str:
        """Replace tabs with spaces up to the next tab stop, line by line."""
        if "\t" not in text:
            return text
        out: list[str] = []
        for n, line in enumerate(text.split("\n")):
            if n:
                out.append("\n")
            col = 0
            for is_code, piece in iter_units(line):
                if is_code:
                    out.append(piece)
                elif piece == "\t":
                    advance = self.tab_advance(col)
                    out.append(" " * advance)
                    col += advance
                else:
                    out.append(piece)
                    col += self.grapheme_width(piece)
        return "".join(out)

    def take_columns(self, text: str, max_cols: int, start_col: int = 0) -> str:
        """Return the longest prefix of *text* that fits within *max_cols* columns.

        ANSI codes are preserved and the text is cut at grapheme boundaries.
        *start_col* is the column the text starts at, for tab stops.
        """
        result: list[str] = []
        cols = 0
        for is_code, piece in iter_units(text):
            if is_code:
                result.append(piece)
                continue
            if piece == "\t":
                w = self.tab_advance(start_col + cols)
            else:
                w = self.grapheme_width(piece)
            if cols + w > max_cols:
                break
            result.append(piece)
            cols += w
        return "".join(result)


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------

_measurers: dict[int, WidthMeasurer] = {}


def get_measurer(tab_width: int = DEFAULT_TAB_WIDTH) -> WidthMeasurer:
    """Return a shared measurer for *tab_width* (no East Asian widths)."""
    measurer = _measurers.get(tab_width)
    if measurer is None:
        measurer = WidthMeasurer(tab_width)
        _measurers[tab_width] = measurer
    return measurer


def display_width(text: str, tab_width: int = DEFAULT_TAB_WIDTH) -> int:
    """Calculate the visible terminal width of *text*."""
    return get_measurer(tab_width).display_width(text)
