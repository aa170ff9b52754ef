"""Re-flow cell text against a column width.

Four modes are supported:

* ``none``     -- split on newlines only, no width constraint.
* ``normal``   -- greedy word wrap; over-long words are hard-broken.
* ``truncate`` -- one line per segment, cut with an ellipsis when too wide.
* ``break``    -- like ``normal`` but a word that does not fit is split at the
  end of the current line and marked with a break marker.

Every mode returns at least one line, so rows keep a consistent height.
"""

from __future__ import annotations

from tablekit.env import DEFAULT_TAB_WIDTH
from tablekit.types import WRAP_MODES, WrapMode
from tablekit.width import BREAK_MARKER, ELLIPSIS, WidthMeasurer, get_measurer, iter_units


def _split_words(line: str, trim_tab: bool) -> list[str]:
    if trim_tab:
        return line.split()
    # Raw tabs stay inside their word
    return [w for w in line.split(" ") if w]


def _first_unit(text: str) -> str:
    """Leading ANSI codes plus the first grapheme of *text*."""
    out: list[str] = []
    for is_code, piece in iter_units(text):
        out.append(piece)
        if not is_code:
            break
    return "".join(out)


class Wrapper:
    """Wraps text into display lines using a :class:`WidthMeasurer`."""

    def __init__(self, measurer: WidthMeasurer | None = None) -> None:
        self._measurer = measurer or get_measurer()

    @property
    def measurer(self) -> WidthMeasurer:
        return self._measurer

    def wrap(
        self,
        text: str,
        width: int,
        mode: WrapMode = "normal",
        trim_tab: bool = True,
    ) -> list[str]:
        """Wrap *text* to *width* columns.

        A *width* of 0 or less means unconstrained. Newline-delimited segments
        are wrapped independently and concatenated in order.
        """
        if mode not in WRAP_MODES:
            raise ValueError(f"Unknown wrap mode: {mode}")
        if not text:
            return [""]
        if trim_tab:
            text = self._measurer.expand_tabs(text)

        segments = text.split("\n")
        if width <= 0 or mode == "none":
            return segments

        result: list[str] = []
        for segment in segments:
            if mode == "truncate":
                result.append(self.truncate(segment, width))
            else:
                result.extend(self._wrap_words(segment, width, mode == "break", trim_tab))
        return result

    def truncate(self, line: str, width: int) -> str:
        """Cut *line* so that it plus an ellipsis fits in *width* columns.

        Lines that already fit come back untouched.
        """
        m = self._measurer
        if m.display_width(line) <= width:
            return line
        marker_width = m.display_width(ELLIPSIS)
        if width < marker_width:
            return m.take_columns(line, width)
        return m.take_columns(line, width - marker_width) + ELLIPSIS

    def _wrap_words(self, line: str, width: int, mark: bool, trim_tab: bool) -> list[str]:
        m = self._measurer
        words = _split_words(line, trim_tab)
        if not words:
            return [""]

        # Break markers need at least one column of content beside them
        mark = mark and width >= 2

        lines: list[str] = []
        current = ""
        current_width = 0

        for word in words:
            word_width = m.display_width(word)
            gap = 1 if current else 0

            if current_width + gap + word_width <= width:
                current = f"{current} {word}" if current else word
                current_width += gap + word_width
                continue

            if mark and current:
                room = width - current_width - gap
                if room >= 2:
                    head = m.take_columns(word, room - 1)
                    if head:
                        lines.append(f"{current} {head}{BREAK_MARKER}")
                        word = word[len(head):]
                        word_width = m.display_width(word)
                        current, current_width = "", 0

            if current:
                lines.append(current)
                current, current_width = "", 0

            while word_width > width:
                piece_width = width - 1 if mark else width
                head = m.take_columns(word, piece_width)
                if head:
                    lines.append(head + BREAK_MARKER if mark else head)
                else:
                    # A wide grapheme with no room left for the marker
                    head = m.take_columns(word, width) or _first_unit(word)
                    lines.append(head)
                word = word[len(head):]
                word_width = m.display_width(word)

            current, current_width = word, word_width

        lines.append(current)
        return lines


def wrap(
    text: str,
    width: int,
    mode: WrapMode = "normal",
    tab_width: int = DEFAULT_TAB_WIDTH,
) -> list[str]:
    """Wrap *text* with a shared measurer for *tab_width*."""
    return Wrapper(get_measurer(tab_width)).wrap(text, width, mode)
