"""Exceptions raised by the layout engine and its drivers."""

from __future__ import annotations


class TableError(Exception):
    """Base class for every error raised by tablekit."""


class ConfigError(TableError, ValueError):
    """Invalid configuration: bad widths, unknown modes, a cap too small to fit."""


class ShapeError(TableError, ValueError):
    """A row has more cells than the established column count."""

    def __init__(self, cells: int, columns: int) -> None:
        super().__init__(f"Row has {cells} cells but the table has {columns} columns")
        self.cells = cells
        self.columns = columns


class StreamStateError(TableError, RuntimeError):
    """A streaming call was made in a state that does not allow it."""
