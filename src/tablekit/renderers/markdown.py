"""GitHub-flavored Markdown table renderer."""

from __future__ import annotations

import sys
from dataclasses import replace
from typing import TextIO

from tablekit.renderers.base import cell_padding_width, fit
from tablekit.types import Align, CellContext, Formatting, RuleContext
from tablekit.width import WidthMeasurer, get_measurer


def escape_cell(text: str) -> str:
    """Escape pipes so cell text cannot close the cell early."""
    return text.replace("|", "\\|")


def alignment_marker(align: Align, width: int) -> str:
    """Delimiter-row segment such as ``:---:`` for *align*, *width* columns wide."""
    width = max(width, 3)
    if align == "center":
        return ":" + "-" * (width - 2) + ":"
    if align == "right":
        return "-" * (width - 1) + ":"
    if align == "left":
        return ":" + "-" * (width - 1)
    return "-" * width


class MarkdownRenderer:
    """Writes a pipe table.

    Markdown has no spans: merged cells render blank after their first
    occurrence and rules other than the header delimiter row are dropped.
    Footer rows are written as ordinary body rows. A wrapped row is joined
    back into one table row, its display lines separated by a space.
    """

    separator_width = 1
    frame_width = 2

    def __init__(self, out: TextIO | None = None, measurer: WidthMeasurer | None = None) -> None:
        self._out = out if out is not None else sys.stdout
        self._measurer = measurer or get_measurer()
        self._header_seen = False
        self._pending: dict[int, list[str]] = {}

    def begin(self) -> None:
        self._header_seen = False
        self._pending = {}

    def end(self) -> None:
        self._out.flush()

    def header_line(self, cells: list[str], ctx: Formatting) -> None:
        self._header_seen = True
        row = self._collect(ctx)
        if row is not None:
            self._write_row(row, ctx.row.widths)

    def body_line(self, cells: list[str], ctx: Formatting) -> None:
        row = self._collect(ctx)
        if row is None:
            return
        if not self._header_seen:
            # Pipe tables need a header: emit an empty one
            self._header_seen = True
            blank = {
                col: CellContext(padding=cell.padding, width=ctx.row.widths[col], align=cell.align)
                for col, cell in ctx.row.current.items()
            }
            self._write_row(blank, ctx.row.widths)
            self._write_delimiter(blank, ctx.row.widths)
        self._write_row(row, ctx.row.widths)

    def footer_line(self, cells: list[str], ctx: Formatting) -> None:
        self.body_line(cells, ctx)

    def rule(self, ctx: RuleContext) -> None:
        if ctx.kind == "header" and ctx.above is not None:
            self._write_delimiter(ctx.above, ctx.widths)

    def _collect(self, ctx: Formatting) -> dict[int, CellContext] | None:
        """Buffer one display line; return the joined row on its last line."""
        for col, cell in ctx.row.current.items():
            text = cell.data.strip()
            if text:
                self._pending.setdefault(col, []).append(text)
        if not ctx.is_last_line:
            return None
        joined = {
            col: replace(cell, data=" ".join(self._pending.get(col, [])))
            for col, cell in ctx.row.current.items()
        }
        self._pending = {}
        return joined

    def _write_row(self, cells: dict[int, CellContext], widths: dict[int, int]) -> None:
        parts = []
        for col in range(len(widths)):
            cell = cells.get(col) or CellContext(width=widths[col])
            # Merged cells collapse to their first column
            text = "" if cell.merge.covered else escape_cell(cell.data)
            parts.append(
                cell.padding.left + fit(text, widths[col], cell.align, self._measurer) + cell.padding.right
            )
        self._out.write("|" + "|".join(parts) + "|\n")

    def _write_delimiter(self, cells: dict[int, CellContext], widths: dict[int, int]) -> None:
        parts = []
        for col in range(len(widths)):
            cell = cells.get(col) or CellContext(width=widths[col])
            parts.append(alignment_marker(cell.align, widths[col] + cell_padding_width(cell, self._measurer)))
        self._out.write("|" + "|".join(parts) + "|\n")
