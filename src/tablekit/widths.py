"""Column width resolution.

Turns raw cell content, explicit overrides and a global width cap into one
authoritative width per column. Widths are content widths: padding and
separators are accounted for but not included.
"""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

from tablekit.errors import ConfigError
from tablekit.width import WidthMeasurer, get_measurer

logger = logging.getLogger(__name__)

DEFAULT_PADDING_WIDTH = 2

PaddingWidths = int | Mapping[int, int] | None


def padding_width(padding: PaddingWidths, col: int) -> int:
    """Horizontal padding cost of column *col*."""
    if padding is None:
        return DEFAULT_PADDING_WIDTH
    if isinstance(padding, int):
        return padding
    return padding.get(col, DEFAULT_PADDING_WIDTH)


def column_count(rows: Sequence[Sequence[str]], overrides: Mapping[int, int] | None = None) -> int:
    """Widest row length, or one past the highest overridden column."""
    count = max((len(row) for row in rows), default=0)
    if overrides:
        count = max(count, max(overrides) + 1)
    return count


class ColumnWidthResolver:
    """Computes the width vector for one render pass."""

    def __init__(self, measurer: WidthMeasurer | None = None) -> None:
        self._measurer = measurer or get_measurer()

    def natural_widths(
        self,
        rows: Sequence[Sequence[str]],
        num_columns: int | None = None,
        caps: Sequence[Mapping[int, int]] | None = None,
    ) -> dict[int, int]:
        """Widest content per column, never below 1.

        Rows shorter than the column count behave as if padded with empty
        cells; cells beyond *num_columns* are ignored. *caps*, parallel to
        *rows*, limits how far each row may widen a column (0 is no limit).
        """
        if num_columns is None:
            num_columns = column_count(rows)
        widths = {col: 1 for col in range(num_columns)}
        for r, row in enumerate(rows):
            row_caps = caps[r] if caps is not None else {}
            for col, cell in enumerate(row[:num_columns]):
                w = self._measurer.display_width(cell)
                cap = row_caps.get(col, 0)
                if cap > 0:
                    w = min(w, cap)
                if w > widths[col]:
                    widths[col] = w
        return widths

    def total_width(
        self,
        widths: Mapping[int, int],
        padding: PaddingWidths = None,
        separator_width: int = 0,
        frame_width: int = 0,
    ) -> int:
        """Full line width for *widths* including padding, separators and frame."""
        if not widths:
            return frame_width
        total = sum(widths.values())
        total += sum(padding_width(padding, col) for col in widths)
        total += separator_width * (len(widths) - 1)
        return total + frame_width

    def resolve(
        self,
        rows: Sequence[Sequence[str]],
        overrides: Mapping[int, int] | None = None,
        padding: PaddingWidths = None,
        separator_width: int = 0,
        max_total_width: int = 0,
        frame_width: int = 0,
        num_columns: int | None = None,
        caps: Sequence[Mapping[int, int]] | None = None,
    ) -> dict[int, int]:
        """Resolve the width of every column.

        Explicit *overrides* win over natural widths and are never scaled.
        When *max_total_width* is positive and the table would be wider, the
        remaining columns shrink proportionally to their width above 1 so the
        total equals the cap exactly.
        """
        overrides = dict(overrides or {})
        for col, width in overrides.items():
            if width < 1:
                raise ConfigError(f"Column {col} width must be >= 1, got {width}")
        if max_total_width < 0:
            raise ConfigError(f"Maximum table width must be >= 0, got {max_total_width}")

        if num_columns is None:
            num_columns = column_count(rows, overrides)

        widths = self.natural_widths(rows, num_columns, caps)
        for col, width in overrides.items():
            if col < num_columns:
                widths[col] = width

        if max_total_width > 0 and widths:
            total = self.total_width(widths, padding, separator_width, frame_width)
            if total > max_total_width:
                logger.debug(
                    "Shrinking columns: total %d exceeds maximum %d", total, max_total_width
                )
                widths = self._shrink(widths, total - max_total_width, set(overrides), total)

        logger.debug("Resolved column widths: %s", widths)
        return widths

    def _shrink(
        self,
        widths: dict[int, int],
        deficit: int,
        fixed: set[int],
        total: int,
    ) -> dict[int, int]:
        shrinkable = [col for col in sorted(widths) if col not in fixed]
        excess = {col: widths[col] - 1 for col in shrinkable}
        available = sum(excess.values())
        if deficit > available:
            raise ConfigError(
                f"Maximum width is too small: the table needs at least "
                f"{total - available} columns"
            )

        result = dict(widths)
        removed = 0
        for col in shrinkable:
            cut = deficit * excess[col] // available
            result[col] -= cut
            removed += cut

        # Leftover units come off the widest column, lowest index first
        left = deficit - removed
        while left > 0:
            col = max(
                (c for c in shrinkable if result[c] > 1),
                key=lambda c: (result[c], -c),
            )
            result[col] -= 1
            left -= 1
        return result
