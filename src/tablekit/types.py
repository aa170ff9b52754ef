"""Core type definitions shared by the layout engine and the renderers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, get_args

WrapMode = Literal["none", "normal", "truncate", "break"]
MergeMode = Literal["none", "horizontal", "vertical", "hierarchical", "both"]
Align = Literal["left", "right", "center", "none"]
Position = Literal["header", "row", "footer"]
Location = Literal["first", "middle", "last"]
RuleKind = Literal["top", "header", "row", "footer", "bottom"]

WRAP_MODES: tuple[str, ...] = get_args(WrapMode)
MERGE_MODES: tuple[str, ...] = get_args(MergeMode)
ALIGNMENTS: tuple[str, ...] = get_args(Align)
POSITIONS: tuple[str, ...] = get_args(Position)


@dataclass(frozen=True)
class Padding:
    """Pad strings around a cell.

    ``left``/``right`` are printed beside the content on every line.
    A non-empty ``top``/``bottom`` adds a fill line above/below each row.
    """

    left: str = " "
    right: str = " "
    top: str = ""
    bottom: str = ""


@dataclass
class MergeStateOption:
    present: bool = False
    span: int = 0
    start: bool = False
    end: bool = False


@dataclass
class MergeState:
    """How one cell participates in merges, per direction."""

    vertical: MergeStateOption = field(default_factory=MergeStateOption)
    horizontal: MergeStateOption = field(default_factory=MergeStateOption)
    hierarchical: MergeStateOption = field(default_factory=MergeStateOption)

    @property
    def down(self) -> MergeStateOption:
        """The row-spanning option in effect: vertical, else hierarchical."""
        if self.vertical.present:
            return self.vertical
        return self.hierarchical

    @property
    def continues_down(self) -> bool:
        """True when the cell below belongs to the same row-spanning group."""
        down = self.down
        return down.present and not down.end

    @property
    def covered(self) -> bool:
        """True when another cell of a horizontal group owns this column."""
        return self.horizontal.present and not self.horizontal.start


@dataclass
class CellContext:
    data: str = ""
    align: Align = "left"
    padding: Padding = field(default_factory=Padding)
    width: int = 0
    merge: MergeState = field(default_factory=MergeState)


@dataclass
class RowContext:
    """One display line's cells plus the cells of the lines around it."""

    position: Position
    location: Location
    current: dict[int, CellContext]
    previous: dict[int, CellContext] | None
    next: dict[int, CellContext] | None
    widths: dict[int, int]


@dataclass
class Formatting:
    """Everything a renderer needs to draw one physical line."""

    row: RowContext
    line_index: int = 0
    line_count: int = 1
    has_footer: bool = False

    @property
    def is_sub_row(self) -> bool:
        return self.line_index > 0

    @property
    def is_last_line(self) -> bool:
        return self.line_index == self.line_count - 1


@dataclass
class RuleContext:
    """Context for a horizontal rule between two display lines."""

    kind: RuleKind
    widths: dict[int, int]
    above: dict[int, CellContext] | None = None
    below: dict[int, CellContext] | None = None
