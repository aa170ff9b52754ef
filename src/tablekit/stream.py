"""Streaming table driver.

Rows are written as soon as they arrive. Column widths are fixed by the
first header or row, so later rows can only be wrapped into them, never
widen them::

    stream = StreamTable(config=TableConfig(max_width=60))
    stream.start()
    stream.header("id", "message")
    for event in events:
        stream.append([event.id, event.message])
    stream.close()
"""

from __future__ import annotations

import copy
import logging
import sys
from typing import Any, Literal, TextIO

from tablekit.cells import Stringer, row_args, to_row
from tablekit.config import TableConfig, validate_config
from tablekit.context import location_of
from tablekit.engine import LayoutEngine
from tablekit.errors import ConfigError, ShapeError, StreamStateError
from tablekit.renderers.base import Renderer
from tablekit.renderers.border import BorderRenderer
from tablekit.types import POSITIONS, WRAP_MODES, Formatting, MergeMode, Position, WrapMode
from tablekit.width import WidthMeasurer

logger = logging.getLogger(__name__)

StreamState = Literal["idle", "started", "closed"]

# Row-spanning merges need rows that have not arrived yet
_UNSUPPORTED_MERGES = ("vertical", "hierarchical")


class StreamTable:
    def __init__(
        self,
        out: TextIO | None = None,
        renderer: Renderer | None = None,
        config: TableConfig | None = None,
        stringer: Stringer | None = None,
    ) -> None:
        # The setters below reconfigure the stream, never the caller's config
        self.config = copy.deepcopy(config) if config is not None else TableConfig()
        validate_config(self.config)
        measurer = WidthMeasurer(self.config.tab_width, self.config.east_asian)
        if renderer is None:
            renderer = BorderRenderer(out if out is not None else sys.stdout, measurer=measurer)
        self._engine = LayoutEngine(self.config, renderer, measurer)
        self._stringer = stringer
        self._state: StreamState = "idle"
        self._reset_pass()

    def _reset_pass(self) -> None:
        self._widths: dict[int, int] | None = None
        self._slots: dict[int, int] = {}
        self._last: Formatting | None = None
        self._rows_written = 0
        self._header_written = False
        self._footer: list[str] | None = None

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def widths(self) -> dict[int, int] | None:
        """Committed column widths, or ``None`` before the first unit."""
        return dict(self._widths) if self._widths is not None else None

    # --- Configuration ---

    def _ensure_configurable(self, what: str) -> None:
        if self._state == "started":
            raise StreamStateError(f"Cannot change {what} while the stream is started")

    def set_column_widths(self, widths: dict[int, int]) -> None:
        self._ensure_configurable("column widths")
        for col, width in widths.items():
            if width < 1:
                raise ConfigError(f"Column {col} width must be >= 1, got {width}")
        self.config.column_widths = dict(widths)

    def set_max_width(self, width: int) -> None:
        self._ensure_configurable("the maximum width")
        if width < 0:
            raise ConfigError(f"Maximum width must be >= 0, got {width}")
        self.config.max_width = width

    def set_wrap(self, mode: WrapMode, position: Position | None = None) -> None:
        """Set the wrap mode of one section, or of every section."""
        self._ensure_configurable("the wrap mode")
        if mode not in WRAP_MODES:
            raise ConfigError(f"Unknown wrap mode: {mode!r}")
        for p in (position,) if position is not None else POSITIONS:
            self.config.section(p).formatting.wrap = mode

    # --- Lifecycle ---

    def start(self) -> None:
        if self._state == "started":
            raise StreamStateError("Stream is already started")
        validate_config(self.config)
        for position in POSITIONS:
            mode = self.config.section(position).formatting.merge
            if mode in _UNSUPPORTED_MERGES:
                logger.warning("%s merge is not supported while streaming; ignoring it", mode)
        if self.config.auto_hide:
            logger.warning("auto_hide needs every row up front and is ignored while streaming")
        self._reset_pass()
        self._state = "started"
        self._engine.renderer.begin()

    def close(self) -> None:
        """Write the buffered footer and the closing rule, then end the renderer."""
        self._ensure_started("close")
        engine = self._engine
        if self._footer is not None:
            self._write("footer", self._footer)
        if self._widths is not None:
            engine.close_rule(self._last, self._widths)
        engine.renderer.end()
        self._state = "closed"
        logger.debug("Stream closed after %d rows", self._rows_written)

    def _ensure_started(self, action: str) -> None:
        if self._state == "idle":
            raise StreamStateError(f"Cannot {action}: the stream is not started")
        if self._state == "closed":
            raise StreamStateError(f"Cannot {action}: the stream is closed")

    # --- Units ---

    def header(self, *cells: Any) -> None:
        self._ensure_started("write a header")
        if self._header_written or self._rows_written:
            raise StreamStateError("The header must be written before any row")
        self._write("header", to_row(row_args(cells)))
        self._header_written = True

    def append(self, row: Any) -> None:
        self._ensure_started("append a row")
        self._write("row", to_row(row, self._stringer))
        self._rows_written += 1

    def footer(self, *cells: Any) -> None:
        """Buffer the footer; it is written by :meth:`close`."""
        self._ensure_started("set a footer")
        row = to_row(row_args(cells))
        if self._widths is not None and len(row) > len(self._widths):
            raise ShapeError(len(row), len(self._widths))
        self._footer = row

    # --- Internals ---

    def _commit_widths(self, cells: list[str], position: Position) -> dict[int, int]:
        engine = self._engine
        cfg = self.config
        num_columns = len(cells)
        if cfg.column_widths:
            num_columns = max(num_columns, max(cfg.column_widths) + 1)
        self._slots = engine.slot_padding(POSITIONS, num_columns)

        if not cfg.column_widths and cfg.max_width > 0:
            widths = self._spread(num_columns)
        else:
            widths = engine.resolve_widths([cells], num_columns, self._slots, [position])
        logger.debug("Stream widths committed from the first %s: %s", position, widths)
        return widths

    def _spread(self, num_columns: int) -> dict[int, int]:
        """Share the maximum width evenly, earlier columns taking the remainder."""
        renderer = self._engine.renderer
        overhead = sum(self._slots.values()) + renderer.frame_width
        overhead += renderer.separator_width * (num_columns - 1)
        available = self.config.max_width - overhead
        if available < num_columns:
            raise ConfigError(
                f"Maximum width is too small: {num_columns} columns need at least "
                f"{overhead + num_columns}"
            )
        base, extra = divmod(available, num_columns)
        return {col: base + (1 if col < extra else 0) for col in range(num_columns)}

    def _merge_mode(self, position: Position) -> MergeMode:
        mode = self.config.section(position).formatting.merge
        if mode in _UNSUPPORTED_MERGES:
            return "none"
        if mode == "both":
            return "horizontal"
        return mode

    def _write(self, position: Position, raw: list[str]) -> None:
        engine = self._engine
        cells = engine.process(raw, position)

        widths = self._widths
        if widths is None:
            widths = self._commit_widths(cells, position)
        elif len(cells) > len(widths):
            raise ShapeError(len(cells), len(widths))
        cells.extend([""] * (len(widths) - len(cells)))

        section = engine.prepare_section(
            position, [cells], widths, self._slots, merge=self._merge_mode(position)
        )
        lines = engine.builder.build([section], widths, has_footer=self._footer is not None)
        if position == "row":
            # The last row of a stream is unknown until close
            location = location_of(self._rows_written, self._rows_written + 2)
            for ctx in lines:
                ctx.row.location = location
        if lines and self._last is not None:
            lines[0].row.previous = self._last.row.current
            self._last.row.next = lines[0].row.current

        self._widths = widths
        self._last = engine.emit(lines, widths, self._last)
