"""Cell merge detection.

Decides which adjacent cells coalesce into spans. Decisions use the trimmed
pre-wrap text of each cell; empty cells never merge in any direction.

* horizontal   -- identical neighbours within a row.
* vertical     -- identical neighbours within a column.
* hierarchical -- vertical runs that only continue while every column to the
  left continues too, which gives tree-like grouping.
* both         -- horizontal first, then vertical over the horizontal groups.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from tablekit.types import MERGE_MODES, MergeMode, MergeState, MergeStateOption

logger = logging.getLogger(__name__)

Cell = str | Sequence[str]


def merge_key(cell: Cell) -> str:
    """Comparison key of a cell: its trimmed text (wrapped lines re-joined)."""
    if isinstance(cell, str):
        return cell.strip()
    return "\n".join(cell).strip()


def _runs(count: int, continues: Callable[[int], bool]) -> list[tuple[int, int]]:
    """``(start, end)`` index pairs (end exclusive) of runs longer than one.

    *continues(i)* says whether item *i* belongs to the run of item ``i - 1``.
    """
    runs: list[tuple[int, int]] = []
    start = 0
    for i in range(1, count + 1):
        if i < count and continues(i):
            continue
        if i - start > 1:
            runs.append((start, i))
        start = i
    return runs


def horizontal_groups(states: dict[int, MergeState], num_columns: int) -> list[tuple[int, int]]:
    """List ``(start, span)`` for every group of a row, singletons included."""
    groups: list[tuple[int, int]] = []
    col = 0
    while col < num_columns:
        h = states[col].horizontal if col in states else MergeStateOption()
        span = h.span if h.present and h.start else 1
        groups.append((col, span))
        col += span
    return groups


class MergeResolver:
    """Computes a :class:`MergeState` for every cell of a row matrix."""

    def resolve(self, rows: Sequence[Sequence[Cell]], mode: MergeMode) -> list[dict[int, MergeState]]:
        if mode not in MERGE_MODES:
            raise ValueError(f"Unknown merge mode: {mode}")

        num_columns = max((len(row) for row in rows), default=0)
        keys = [
            [merge_key(row[col]) if col < len(row) else "" for col in range(num_columns)]
            for row in rows
        ]
        states = [{col: MergeState() for col in range(num_columns)} for _ in keys]

        if mode in ("horizontal", "both"):
            for row_keys, row_states in zip(keys, states):
                self._horizontal(row_keys, row_states)

        if mode == "vertical":
            self._vertical(keys, states, num_columns, use_groups=False)
        elif mode == "both":
            self._vertical(keys, states, num_columns, use_groups=True)
        elif mode == "hierarchical":
            self._hierarchical(keys, states, num_columns)

        logger.debug("Resolved %s merges for %d rows", mode, len(rows))
        return states

    def _horizontal(self, keys: list[str], states: dict[int, MergeState]) -> None:
        for start, end in _runs(len(keys), lambda c: keys[c] != "" and keys[c] == keys[c - 1]):
            span = end - start
            for col in range(start, end):
                states[col].horizontal = MergeStateOption(
                    present=True, span=span, start=col == start, end=col == end - 1
                )

    def _vertical(
        self,
        keys: list[list[str]],
        states: list[dict[int, MergeState]],
        num_columns: int,
        use_groups: bool,
    ) -> None:
        # A unit is a horizontal group (or a lone cell) keyed by span and text
        units: list[dict[int, tuple[int, str]]] = []
        for row_keys, row_states in zip(keys, states):
            groups = horizontal_groups(row_states, num_columns) if use_groups else [
                (col, 1) for col in range(num_columns)
            ]
            units.append({start: (span, row_keys[start]) for start, span in groups})

        def continues(col: int) -> Callable[[int], bool]:
            def check(r: int) -> bool:
                unit = units[r].get(col)
                return unit is not None and unit[1] != "" and unit == units[r - 1].get(col)

            return check

        for col in range(num_columns):
            for start, end in _runs(len(keys), continues(col)):
                span = end - start
                width = units[start][col][0]
                for r in range(start, end):
                    for k in range(col, col + width):
                        states[r][k].vertical = MergeStateOption(
                            present=True, span=span, start=r == start, end=r == end - 1
                        )

    def _hierarchical(
        self,
        keys: list[list[str]],
        states: list[dict[int, MergeState]],
        num_columns: int,
    ) -> None:
        # cont[r][c]: cell (r, c) continues the run of (r - 1, c)
        cont = [[False] * num_columns for _ in keys]
        for r in range(1, len(keys)):
            parent = True
            for col in range(num_columns):
                same = keys[r][col] != "" and keys[r][col] == keys[r - 1][col]
                cont[r][col] = parent and same
                parent = cont[r][col]

        for col in range(num_columns):
            for start, end in _runs(len(keys), lambda r: cont[r][col]):
                span = end - start
                for r in range(start, end):
                    states[r][col].hierarchical = MergeStateOption(
                        present=True, span=span, start=r == start, end=r == end - 1
                    )
