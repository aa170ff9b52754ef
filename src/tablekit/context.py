"""Per-line formatting contexts.

After widths, wrapping and merges are resolved, every physical output line
gets a :class:`~tablekit.types.Formatting` describing its cells and the cells
of the lines directly above and below it. Renderers draw from these alone.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from tablekit.types import (
    Align,
    CellContext,
    Formatting,
    Location,
    MergeState,
    Padding,
    Position,
    RowContext,
    RuleContext,
    RuleKind,
)


@dataclass
class PreparedCell:
    """A cell after wrapping: its display lines plus resolved layout settings."""

    lines: list[str] = field(default_factory=lambda: [""])
    align: Align = "left"
    padding: Padding = field(default_factory=Padding)
    merge: MergeState = field(default_factory=MergeState)
    # Set for horizontal merge starts, which span several columns
    width: int | None = None


@dataclass
class PreparedRow:
    cells: list[PreparedCell]

    @property
    def height(self) -> int:
        return max((len(cell.lines) for cell in self.cells), default=1)


@dataclass
class PreparedSection:
    position: Position
    rows: list[PreparedRow]


def location_of(index: int, count: int) -> Location:
    """Boundary class of row *index* in a section of *count* rows."""
    if index == 0:
        return "first"
    if index == count - 1:
        return "last"
    return "middle"


class FormattingContextBuilder:
    """Builds one :class:`Formatting` per display line, header to footer."""

    def build(
        self,
        sections: Sequence[PreparedSection],
        widths: dict[int, int],
        has_footer: bool | None = None,
    ) -> list[Formatting]:
        if has_footer is None:
            has_footer = any(s.position == "footer" and s.rows for s in sections)
        widths = dict(widths)

        lines: list[tuple[Position, Location, int, int, dict[int, CellContext]]] = []
        for section in sections:
            count = len(section.rows)
            for index, row in enumerate(section.rows):
                location = location_of(index, count)
                height = row.height
                for line_index in range(height):
                    current = {
                        col: self._cell_context(cell, line_index, widths.get(col, 0))
                        for col, cell in enumerate(row.cells)
                    }
                    lines.append((section.position, location, line_index, height, current))

        result: list[Formatting] = []
        for i, (position, location, line_index, height, current) in enumerate(lines):
            previous = lines[i - 1][4] if i > 0 else None
            following = lines[i + 1][4] if i + 1 < len(lines) else None
            row = RowContext(
                position=position,
                location=location,
                current=current,
                previous=previous,
                next=following,
                widths=widths,
            )
            result.append(
                Formatting(row=row, line_index=line_index, line_count=height, has_footer=has_footer)
            )
        return result

    def _cell_context(self, cell: PreparedCell, line_index: int, width: int) -> CellContext:
        data = cell.lines[line_index] if line_index < len(cell.lines) else ""
        return CellContext(
            data=data,
            align=cell.align,
            padding=cell.padding,
            width=cell.width if cell.width is not None else width,
            merge=cell.merge,
        )

    def rule(
        self,
        kind: RuleKind,
        widths: dict[int, int],
        above: Formatting | None = None,
        below: Formatting | None = None,
    ) -> RuleContext:
        """Context for a rule drawn between *above* and *below*."""
        return RuleContext(
            kind=kind,
            widths=widths,
            above=above.row.current if above is not None else None,
            below=below.row.current if below is not None else None,
        )
