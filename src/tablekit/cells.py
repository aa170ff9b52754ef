"""Cell ingestion: turning arbitrary values into display text."""

from __future__ import annotations

import re
from typing import Any, Callable, Protocol, Sequence, runtime_checkable

Stringer = Callable[[Any], Sequence[str]]


@runtime_checkable
class Formatter(Protocol):
    """A value that knows its own display text."""

    def format(self) -> str: ...


def to_text(value: Any) -> str:
    """Convert one cell value to its display text."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, Formatter):
        return value.format()
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def to_row(values: Any, stringer: Stringer | None = None) -> list[str]:
    """Convert a row object to a list of cell strings.

    A *stringer* handles custom row types; sequences convert element-wise and
    anything else becomes a single-cell row.
    """
    if stringer is not None and not isinstance(values, (list, tuple)):
        return [to_text(cell) for cell in stringer(values)]
    if isinstance(values, (list, tuple)):
        return [to_text(cell) for cell in values]
    return [to_text(values)]


# Boundaries: "fooBar" -> "foo|Bar", "HTTPServer" -> "HTTP|Server"
_CAMEL_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def split_camel_case(text: str) -> list[str]:
    """Split ``camelCase`` / ``PascalCase`` text into words."""
    return _CAMEL_RE.sub(" ", text).split()


def _num_or_space(ch: str) -> bool:
    return ch == " " or "0" <= ch <= "9"


def title(name: str) -> str:
    """Header auto-format: ``first_name`` / ``firstName`` -> ``FIRST NAME``.

    Dots between digits (``1.5``) are kept.
    """
    chars = list(" ".join(split_camel_case(name)))
    for i, ch in enumerate(chars):
        if ch == "_":
            chars[i] = " "
        elif ch == ".":
            before = i > 0 and not _num_or_space(chars[i - 1])
            after = i < len(chars) - 1 and not _num_or_space(chars[i + 1])
            if before or after:
                chars[i] = " "
    result = " ".join("".join(chars).split())
    if not result and name:
        return " "
    return result.upper()


def row_args(cells: tuple[Any, ...]) -> Any:
    """``header("a", "b")`` and ``header(["a", "b"])`` mean the same row."""
    if len(cells) == 1 and isinstance(cells[0], (list, tuple)):
        return cells[0]
    return list(cells)
