"""Layout pipeline shared by the batch and streaming drivers.

Given processed cell text, the engine resolves widths and merges, wraps cells
into display lines, builds per-line contexts and drives a renderer through
them. Drivers own accumulation and sequencing; the engine owns geometry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from tablekit.cells import title
from tablekit.config import TableConfig
from tablekit.context import (
    FormattingContextBuilder,
    PreparedCell,
    PreparedRow,
    PreparedSection,
)
from tablekit.merge import MergeResolver
from tablekit.renderers.base import Renderer
from tablekit.types import Formatting, MergeMode, Padding, Position, RuleKind
from tablekit.width import WidthMeasurer
from tablekit.widths import ColumnWidthResolver
from tablekit.wrap import Wrapper

logger = logging.getLogger(__name__)


@dataclass
class Layout:
    """Result of one layout pass: widths, prepared sections and display lines."""

    widths: dict[int, int]
    sections: list[PreparedSection] = field(default_factory=list)
    lines: list[Formatting] = field(default_factory=list)

    @property
    def num_columns(self) -> int:
        return len(self.widths)


class LayoutEngine:
    def __init__(
        self,
        config: TableConfig,
        renderer: Renderer,
        measurer: WidthMeasurer | None = None,
    ) -> None:
        self.config = config
        self.renderer = renderer
        self.measurer = measurer or WidthMeasurer(config.tab_width, config.east_asian)
        self.wrapper = Wrapper(self.measurer)
        self.resolver = ColumnWidthResolver(self.measurer)
        self.merger = MergeResolver()
        self.builder = FormattingContextBuilder()

    # --- Cell text ---

    def process(self, cells: Sequence[str], position: Position) -> list[str]:
        """Apply filters, trimming and header auto-format to one row of cell text."""
        out = self.config.section(position).apply_filters(list(cells))
        if self.config.trim_space:
            out = [cell.strip() for cell in out]
        if self.config.section(position).formatting.auto_format:
            out = [title(cell) for cell in out]
        return out

    # --- Geometry ---

    def padding_cost(self, padding: Padding) -> int:
        return self.measurer.display_width(padding.left) + self.measurer.display_width(padding.right)

    def slot_padding(self, positions: Iterable[Position], num_columns: int) -> dict[int, int]:
        """Horizontal padding cost per column: the widest over *positions*."""
        positions = list(positions) or ["row"]
        return {
            col: max(self.padding_cost(self.config.section(p).padding_for(col)) for p in positions)
            for col in range(num_columns)
        }

    def resolve_widths(
        self,
        rows: Sequence[Sequence[str]],
        num_columns: int,
        slots: dict[int, int],
        positions: Sequence[Position] | None = None,
    ) -> dict[int, int]:
        """Resolve widths; *positions*, parallel to *rows*, selects section caps."""
        caps = None
        if positions is not None:
            caps = [self.section_caps(p, num_columns) for p in positions]
        return self.resolver.resolve(
            rows,
            overrides=self.config.column_widths,
            padding=slots,
            separator_width=self.renderer.separator_width,
            max_total_width=self.config.max_width,
            frame_width=self.renderer.frame_width,
            num_columns=num_columns,
            caps=caps,
        )

    def section_caps(self, position: Position, num_columns: int) -> dict[int, int]:
        cfg = self.config.section(position)
        return {col: cfg.max_width_for(col) for col in range(num_columns)}

    def empty_columns(self, rows: Sequence[Sequence[str]], num_columns: int) -> set[int]:
        """Columns with no text in any of *rows*."""
        if not rows:
            return set()
        return {
            col
            for col in range(num_columns)
            if all(col >= len(row) or not row[col] for row in rows)
        }

    def span_width(self, col: int, span: int, widths: dict[int, int], slots: dict[int, int]) -> int:
        """Content width of a horizontal group starting at *col*."""
        cols = range(col, col + span)
        inner = sum(slots[k] for k in cols[1:])
        return sum(widths[k] for k in cols) + inner + self.renderer.separator_width * (span - 1)

    def _fill(self, pattern: str, width: int) -> str:
        if not pattern:
            return ""
        unit = max(self.measurer.display_width(pattern), 1)
        return self.measurer.take_columns(pattern * (width // unit + 1), width)

    def _normalize(self, padding: Padding, slot: int) -> Padding:
        """Widen the right pad so every section uses the same column slot."""
        missing = slot - self.padding_cost(padding)
        if missing <= 0:
            return padding
        return Padding(padding.left, padding.right + " " * missing, padding.top, padding.bottom)

    def prepare_section(
        self,
        position: Position,
        rows: Sequence[Sequence[str]],
        widths: dict[int, int],
        slots: dict[int, int],
        merge: MergeMode | None = None,
    ) -> PreparedSection:
        """Resolve merges and wrap every cell of one section."""
        cfg = self.config.section(position)
        mode = merge if merge is not None else cfg.formatting.merge
        num_columns = len(widths)
        states = self.merger.resolve(rows, mode)

        prepared: list[PreparedRow] = []
        for r, row in enumerate(rows):
            cells: list[PreparedCell] = []
            for col in range(num_columns):
                state = states[r][col]
                padding = self._normalize(cfg.padding_for(col), slots[col])
                text = row[col] if col < len(row) else ""
                width: int | None = None
                if state.horizontal.present and state.horizontal.start:
                    width = self.span_width(col, state.horizontal.span, widths, slots)
                if state.covered or (state.down.present and not state.down.start):
                    lines = [""]
                else:
                    target = width if width is not None else widths[col]
                    lines = self.wrapper.wrap(text, target, cfg.formatting.wrap, self.config.trim_tab)
                cells.append(
                    PreparedCell(
                        lines=lines,
                        align=cfg.align_for(col),
                        padding=padding,
                        merge=state,
                        width=width,
                    )
                )
            prepared.append(self._finish_row(cells, widths))
        logger.debug("Prepared %s section: %d rows, merge=%s", position, len(prepared), mode)
        return PreparedSection(position=position, rows=prepared)

    def _finish_row(self, cells: list[PreparedCell], widths: dict[int, int]) -> PreparedRow:
        height = max((len(cell.lines) for cell in cells), default=1)
        has_top = any(cell.padding.top for cell in cells)
        has_bottom = any(cell.padding.bottom for cell in cells)
        for col, cell in enumerate(cells):
            cell.lines.extend([""] * (height - len(cell.lines)))
            blank = cell.merge.covered or (cell.merge.down.present and not cell.merge.down.start)
            width = cell.width if cell.width is not None else widths[col]
            if has_top:
                cell.lines.insert(0, "" if blank else self._fill(cell.padding.top, width))
            if has_bottom:
                cell.lines.append("" if blank else self._fill(cell.padding.bottom, width))
        return PreparedRow(cells=cells)

    # --- Rendering ---

    def rule_kind(self, last: Formatting | None, ctx: Formatting) -> RuleKind | None:
        """Rule drawn between the display lines *last* and *ctx*, if any."""
        if last is None:
            return "top"
        if last.row.position != ctx.row.position:
            return "header" if last.row.position == "header" else "footer"
        if ctx.line_index == 0:
            return "row"
        return None

    def emit(
        self,
        lines: Iterable[Formatting],
        widths: dict[int, int],
        last: Formatting | None = None,
    ) -> Formatting | None:
        """Write *lines* with the rules between them; return the last line written."""
        for ctx in lines:
            kind = self.rule_kind(last, ctx)
            if kind is not None:
                self.renderer.rule(self.builder.rule(kind, widths, last, ctx))
            cells = [ctx.row.current[col].data for col in sorted(ctx.row.current)]
            if ctx.row.position == "header":
                self.renderer.header_line(cells, ctx)
            elif ctx.row.position == "footer":
                self.renderer.footer_line(cells, ctx)
            else:
                self.renderer.body_line(cells, ctx)
            last = ctx
        return last

    def close_rule(self, last: Formatting | None, widths: dict[int, int]) -> None:
        if last is not None:
            self.renderer.rule(self.builder.rule("bottom", widths, last, None))
