"""Box-drawing text renderer.

Draws cells between vertical bars with horizontal rules between sections,
in Unicode box-drawing glyphs or plain ASCII::

    ┌───────┬─────┐
    │ NAME  │ AGE │
    ├───────┼─────┤
    │ Alice │ 30  │
    └───────┴─────┘

Junction glyphs are picked from the arms that meet at each point, so rules
open up under vertical merges and close over horizontal ones.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Literal, TextIO

from tablekit.renderers.base import cell_padding_width, render_cell, span_of
from tablekit.types import CellContext, Formatting, RuleContext
from tablekit.width import WidthMeasurer, get_measurer


BorderStyle = Literal["unicode", "ascii"]

Cells = dict[int, CellContext]


@dataclass(frozen=True)
class Glyphs:
    horizontal: str
    vertical: str
    # Keyed by (up, down, left, right) arms
    junctions: dict[tuple[bool, bool, bool, bool], str]


def _ascii_junctions() -> dict[tuple[bool, bool, bool, bool], str]:
    table: dict[tuple[bool, bool, bool, bool], str] = {}
    for key in range(16):
        up, down, left, right = (bool(key & bit) for bit in (8, 4, 2, 1))
        if left or right:
            table[(up, down, left, right)] = "+" if up or down else "-"
        elif up or down:
            table[(up, down, left, right)] = "|"
        else:
            table[(up, down, left, right)] = " "
    return table


UNICODE = Glyphs(
    horizontal="─",
    vertical="│",
    junctions={
        (False, False, False, False): " ",
        (False, False, False, True): "─",
        (False, False, True, False): "─",
        (False, False, True, True): "─",
        (False, True, False, False): "│",
        (False, True, False, True): "┌",
        (False, True, True, False): "┐",
        (False, True, True, True): "┬",
        (True, False, False, False): "│",
        (True, False, False, True): "└",
        (True, False, True, False): "┘",
        (True, False, True, True): "┴",
        (True, True, False, False): "│",
        (True, True, False, True): "├",
        (True, True, True, False): "┤",
        (True, True, True, True): "┼",
    },
)

ASCII = Glyphs(horizontal="-", vertical="|", junctions=_ascii_junctions())

STYLES: dict[str, Glyphs] = {"unicode": UNICODE, "ascii": ASCII}


def _covered(cells: Cells | None, col: int) -> bool:
    if cells is None:
        return False
    cell = cells.get(col)
    return cell is not None and cell.merge.covered


def _continues(cells: Cells | None, col: int) -> bool:
    if cells is None:
        return False
    cell = cells.get(col)
    return cell is not None and cell.merge.continues_down


class BorderRenderer:
    """Writes a bordered text table to *out*."""

    def __init__(
        self,
        out: TextIO | None = None,
        style: BorderStyle = "unicode",
        between_rows: bool = False,
        between_columns: bool = True,
        borders: bool = True,
        measurer: WidthMeasurer | None = None,
    ) -> None:
        if style not in STYLES:
            raise ValueError(f"Unknown border style: {style}")
        self._out = out if out is not None else sys.stdout
        self._glyphs = STYLES[style]
        self._between_rows = between_rows
        self._between_columns = between_columns
        self._borders = borders
        self._measurer = measurer or get_measurer()

    @property
    def separator_width(self) -> int:
        return 1 if self._between_columns else 0

    @property
    def frame_width(self) -> int:
        return 2 if self._borders else 0

    def begin(self) -> None:
        pass

    def end(self) -> None:
        self._out.flush()

    def header_line(self, cells: list[str], ctx: Formatting) -> None:
        self._line(ctx)

    def body_line(self, cells: list[str], ctx: Formatting) -> None:
        self._line(ctx)

    def footer_line(self, cells: list[str], ctx: Formatting) -> None:
        self._line(ctx)

    def _write(self, line: str) -> None:
        self._out.write(line + "\n")

    def _line(self, ctx: Formatting) -> None:
        row = ctx.row
        count = len(row.widths)
        vertical = self._glyphs.vertical
        parts: list[str] = [vertical] if self._borders else []

        col = 0
        while col < count:
            cell = row.current.get(col) or CellContext(width=row.widths[col])
            parts.append(render_cell(cell, self._measurer))
            col += span_of(cell)
            if col < count and self._between_columns:
                parts.append(vertical)

        if self._borders:
            parts.append(vertical)
        self._write("".join(parts))

    def rule(self, ctx: RuleContext) -> None:
        if ctx.kind in ("top", "bottom") and not self._borders:
            return
        if ctx.kind == "row" and not self._between_rows:
            return
        self._write(self._rule_line(ctx))

    def _slot(self, ctx: RuleContext, col: int) -> int:
        cells = ctx.above if ctx.above is not None else ctx.below
        cell = cells.get(col) if cells is not None else None
        if cell is None:
            return ctx.widths[col] + 2
        return ctx.widths[col] + cell_padding_width(cell, self._measurer)

    def _rule_line(self, ctx: RuleContext) -> str:
        glyphs = self._glyphs
        above, below = ctx.above, ctx.below
        count = len(ctx.widths)

        # A segment stays open where a row-spanning merge crosses the rule
        drawn = [not (ctx.kind == "row" and _continues(above, col)) for col in range(count)]

        def junction(col: int) -> str:
            """Glyph at the boundary before column *col* (``col == count`` is the right edge)."""
            left = col > 0 and drawn[col - 1]
            right = col < count and drawn[col]
            edge = col in (0, count)
            up = above is not None and (edge or not _covered(above, col))
            down = below is not None and (edge or not _covered(below, col))
            return glyphs.junctions[(up, down, left, right)]

        parts: list[str] = [junction(0)] if self._borders else []
        for col in range(count):
            fill = glyphs.horizontal if drawn[col] else " "
            parts.append(fill * self._slot(ctx, col))
            if col < count - 1 and self._between_columns:
                parts.append(junction(col + 1))
        if self._borders:
            parts.append(junction(count))
        return "".join(parts)
