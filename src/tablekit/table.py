"""Batch table driver.

Accumulates a header, body rows and a footer, then lays the whole table out
in one pass and writes it through a renderer::

    table = Table()
    table.header("name", "age")
    table.append(["Alice", 30])
    table.render()
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Iterable, TextIO

from tablekit.cells import Stringer, row_args, to_row
from tablekit.config import TableConfig, drop_columns, validate_config
from tablekit.engine import Layout, LayoutEngine
from tablekit.errors import ShapeError
from tablekit.renderers.base import Renderer
from tablekit.renderers.border import BorderRenderer
from tablekit.types import Position
from tablekit.width import WidthMeasurer

logger = logging.getLogger(__name__)


class Table:
    def __init__(
        self,
        out: TextIO | None = None,
        renderer: Renderer | None = None,
        config: TableConfig | None = None,
        stringer: Stringer | None = None,
    ) -> None:
        self.config = config if config is not None else TableConfig()
        validate_config(self.config)
        measurer = WidthMeasurer(self.config.tab_width, self.config.east_asian)
        if renderer is None:
            renderer = BorderRenderer(out if out is not None else sys.stdout, measurer=measurer)
        self._engine = LayoutEngine(self.config, renderer, measurer)
        self._stringer = stringer
        self._header: list[str] = []
        self._rows: list[list[str]] = []
        self._footer: list[str] = []

    @property
    def renderer(self) -> Renderer:
        return self._engine.renderer

    # --- Accumulation ---

    def _established_columns(self) -> int | None:
        if self._header:
            return len(self._header)
        if self._rows:
            return len(self._rows[0])
        if self.config.column_widths:
            return max(self.config.column_widths) + 1
        return None

    def _check_shape(self, cells: list[str]) -> None:
        if not self.config.strict:
            return
        columns = self._established_columns()
        if columns is not None and len(cells) > columns:
            raise ShapeError(len(cells), columns)

    def header(self, *cells: Any) -> None:
        row = to_row(row_args(cells))
        if self._rows and self.config.strict and len(row) > len(self._rows[0]):
            raise ShapeError(len(row), len(self._rows[0]))
        self._header = row

    def append(self, row: Any) -> None:
        cells = to_row(row, self._stringer)
        self._check_shape(cells)
        self._rows.append(cells)

    def bulk(self, rows: Iterable[Any]) -> None:
        for row in rows:
            self.append(row)

    def footer(self, *cells: Any) -> None:
        row = to_row(row_args(cells))
        self._check_shape(row)
        self._footer = row

    def reset(self) -> None:
        """Drop all accumulated rows, keeping the configuration."""
        self._header = []
        self._rows = []
        self._footer = []

    # --- Layout ---

    def _sections(self) -> list[tuple[Position, list[list[str]]]]:
        engine = self._engine
        sections: list[tuple[Position, list[list[str]]]] = []
        if self._header:
            sections.append(("header", [engine.process(self._header, "header")]))
        if self._rows:
            sections.append(("row", [engine.process(row, "row") for row in self._rows]))
        if self._footer:
            sections.append(("footer", [engine.process(self._footer, "footer")]))
        return sections

    def layout(self) -> Layout:
        """Run the layout pipeline without writing anything."""
        validate_config(self.config)
        engine = self._engine
        sections = self._sections()
        num_columns = max((len(row) for _, rows in sections for row in rows), default=0)
        if num_columns == 0:
            return Layout(widths={})

        for _, rows in sections:
            for row in rows:
                row.extend([""] * (num_columns - len(row)))

        if self.config.auto_hide:
            body = [row for position, rows in sections if position == "row" for row in rows]
            hidden = engine.empty_columns(body, num_columns)
            if hidden:
                logger.debug("Hiding empty columns: %s", sorted(hidden))
                for _, rows in sections:
                    rows[:] = [[c for col, c in enumerate(row) if col not in hidden] for row in rows]
                engine = LayoutEngine(
                    drop_columns(self.config, hidden, num_columns), engine.renderer, engine.measurer
                )
                num_columns -= len(hidden)
                if num_columns == 0:
                    return Layout(widths={})

        slots = engine.slot_padding((position for position, _ in sections), num_columns)
        all_rows = [row for _, rows in sections for row in rows]
        positions = [position for position, rows in sections for _ in rows]
        widths = engine.resolve_widths(all_rows, num_columns, slots, positions)

        prepared = [engine.prepare_section(position, rows, widths, slots) for position, rows in sections]
        lines = engine.builder.build(prepared, widths, has_footer=bool(self._footer))
        logger.debug("Laid out %d columns into %d lines", num_columns, len(lines))
        return Layout(widths=widths, sections=prepared, lines=lines)

    def render(self) -> None:
        """Lay out the table and write it through the renderer."""
        layout = self.layout()
        engine = self._engine
        engine.renderer.begin()
        last = engine.emit(layout.lines, layout.widths)
        engine.close_rule(last, layout.widths)
        engine.renderer.end()
