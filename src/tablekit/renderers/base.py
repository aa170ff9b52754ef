"""Renderer interface and cell layout helpers shared by renderers."""

from __future__ import annotations

from typing import Protocol

from tablekit.types import Align, CellContext, Formatting, RuleContext
from tablekit.width import WidthMeasurer


class Renderer(Protocol):
    """Interface for table backends.

    The driver calls ``begin()``, then interleaves ``rule()`` and the
    ``*_line()`` methods from top to bottom, then ``end()``. Every context
    carries fully resolved widths and merge states.
    """

    @property
    def separator_width(self) -> int: ...

    @property
    def frame_width(self) -> int: ...

    def begin(self) -> None: ...

    def header_line(self, cells: list[str], ctx: Formatting) -> None: ...

    def body_line(self, cells: list[str], ctx: Formatting) -> None: ...

    def footer_line(self, cells: list[str], ctx: Formatting) -> None: ...

    def rule(self, ctx: RuleContext) -> None: ...

    def end(self) -> None: ...


def fit(text: str, width: int, align: Align, measurer: WidthMeasurer) -> str:
    """Pad *text* with spaces to *width* columns according to *align*."""
    gap = width - measurer.display_width(text)
    if gap <= 0:
        return text
    if align == "right":
        return " " * gap + text
    if align == "center":
        left = gap // 2
        return " " * left + text + " " * (gap - left)
    return text + " " * gap


def cell_padding_width(cell: CellContext, measurer: WidthMeasurer) -> int:
    return measurer.display_width(cell.padding.left) + measurer.display_width(cell.padding.right)


def render_cell(cell: CellContext, measurer: WidthMeasurer) -> str:
    """Cell text with its padding, aligned inside the cell width."""
    return cell.padding.left + fit(cell.data, cell.width, cell.align, measurer) + cell.padding.right


def span_of(cell: CellContext) -> int:
    """Number of grid columns *cell* occupies on its line."""
    h = cell.merge.horizontal
    if h.present and h.start:
        return h.span
    return 1
