"""Table configuration.

Per-section cell settings (header, body rows, footer) plus table-wide width
settings. Configs round-trip through plain JSON-compatible dicts with
camelCase keys, and partial dicts merge over the defaults.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Callable

from tablekit.env import default_tab_width, detect_east_asian
from tablekit.errors import ConfigError
from tablekit.types import (
    ALIGNMENTS,
    MERGE_MODES,
    POSITIONS,
    WRAP_MODES,
    Align,
    MergeMode,
    Padding,
    Position,
    WrapMode,
)

# Whole-row filter and per-cell filter, applied before trimming
RowFilter = Callable[[list[str]], list[str]]
CellFilter = Callable[[str], str]

# --- Schema ---


@dataclass
class CellFormatting:
    """How cells of a section are aligned, wrapped and merged."""

    align: Align = "left"
    wrap: WrapMode = "normal"
    merge: MergeMode = "none"
    auto_format: bool = False


@dataclass
class CellConfig:
    formatting: CellFormatting = field(default_factory=CellFormatting)
    padding: Padding = field(default_factory=Padding)
    column_padding: dict[int, Padding] = field(default_factory=dict)
    column_aligns: dict[int, Align] = field(default_factory=dict)
    max_width: int = 0
    column_max_widths: dict[int, int] = field(default_factory=dict)
    filter: RowFilter | None = None
    column_filters: dict[int, CellFilter] = field(default_factory=dict)

    def padding_for(self, col: int) -> Padding:
        return self.column_padding.get(col, self.padding)

    def align_for(self, col: int) -> Align:
        return self.column_aligns.get(col, self.formatting.align)

    def max_width_for(self, col: int) -> int:
        """Content width cap for *col* in this section; 0 means uncapped."""
        return self.column_max_widths.get(col, self.max_width)

    def apply_filters(self, cells: list[str]) -> list[str]:
        if self.filter is not None:
            cells = list(self.filter(list(cells)))
        if self.column_filters:
            cells = [
                self.column_filters[col](cell) if col in self.column_filters else cell
                for col, cell in enumerate(cells)
            ]
        return cells


def _header_defaults() -> CellConfig:
    return CellConfig(formatting=CellFormatting(align="center", auto_format=True))


def _footer_defaults() -> CellConfig:
    return CellConfig(formatting=CellFormatting(align="right"))


@dataclass
class TableConfig:
    """Everything the layout engine reads for one table."""

    header: CellConfig = field(default_factory=_header_defaults)
    row: CellConfig = field(default_factory=CellConfig)
    footer: CellConfig = field(default_factory=_footer_defaults)
    column_widths: dict[int, int] = field(default_factory=dict)
    max_width: int = 0
    tab_width: int = field(default_factory=default_tab_width)
    east_asian: bool = field(default_factory=detect_east_asian)
    trim_space: bool = True
    trim_tab: bool = True
    strict: bool = False
    auto_hide: bool = False

    def section(self, position: Position) -> CellConfig:
        if position == "header":
            return self.header
        if position == "footer":
            return self.footer
        return self.row


# --- Validation ---


def validate_config(config: TableConfig) -> None:
    """Raise :class:`ConfigError` if *config* cannot drive a render."""
    for position in POSITIONS:
        cell = config.section(position)
        fmt = cell.formatting
        if fmt.wrap not in WRAP_MODES:
            raise ConfigError(f"Unknown wrap mode for {position}: {fmt.wrap!r}")
        if fmt.merge not in MERGE_MODES:
            raise ConfigError(f"Unknown merge mode for {position}: {fmt.merge!r}")
        for align in (fmt.align, *cell.column_aligns.values()):
            if align not in ALIGNMENTS:
                raise ConfigError(f"Unknown alignment for {position}: {align!r}")
        if cell.max_width < 0:
            raise ConfigError(f"Maximum cell width for {position} must be >= 0, got {cell.max_width}")
        for col, width in cell.column_max_widths.items():
            if col < 0 or width < 1:
                raise ConfigError(f"Invalid {position} column {col} maximum width: {width}")
    for col, width in config.column_widths.items():
        if col < 0:
            raise ConfigError(f"Column index must be >= 0, got {col}")
        if width < 1:
            raise ConfigError(f"Column {col} width must be >= 1, got {width}")
    if config.max_width < 0:
        raise ConfigError(f"Maximum width must be >= 0, got {config.max_width}")
    if config.tab_width < 1:
        raise ConfigError(f"Tab width must be >= 1, got {config.tab_width}")


# --- Column removal ---


def _remap(mapping: dict[int, Any], keep: list[int]) -> dict[int, Any]:
    return {new: mapping[old] for new, old in enumerate(keep) if old in mapping}


def drop_columns(config: TableConfig, hidden: set[int], num_columns: int) -> TableConfig:
    """Copy of *config* whose per-column settings skip the *hidden* columns.

    Column indexes after a hidden column shift left so they still match the
    remaining cells.
    """
    keep = [col for col in range(num_columns) if col not in hidden]
    result = copy.deepcopy(config)
    result.column_widths = _remap(config.column_widths, keep)
    for position in POSITIONS:
        source = config.section(position)
        target = result.section(position)
        target.column_padding = _remap(source.column_padding, keep)
        target.column_aligns = _remap(source.column_aligns, keep)
        target.column_max_widths = _remap(source.column_max_widths, keep)
        target.column_filters = _remap(source.column_filters, keep)
    return result


# --- Deep merge ---


def deep_merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge overrides into base.

    For nested dicts, merge recursively. ``None`` overrides are skipped;
    anything else replaces the base value.
    """
    result = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


# --- Serialization ---


def _padding_to_dict(padding: Padding) -> dict[str, str]:
    return {
        "left": padding.left,
        "right": padding.right,
        "top": padding.top,
        "bottom": padding.bottom,
    }


def _padding_from_dict(data: dict[str, Any]) -> Padding:
    return Padding(
        left=data.get("left", " "),
        right=data.get("right", " "),
        top=data.get("top", ""),
        bottom=data.get("bottom", ""),
    )


def _cell_to_dict(cell: CellConfig) -> dict[str, Any]:
    fmt = cell.formatting
    return {
        "align": fmt.align,
        "wrap": fmt.wrap,
        "merge": fmt.merge,
        "autoFormat": fmt.auto_format,
        "padding": _padding_to_dict(cell.padding),
        "columnPadding": {str(col): _padding_to_dict(p) for col, p in cell.column_padding.items()},
        "columnAligns": {str(col): align for col, align in cell.column_aligns.items()},
        "maxWidth": cell.max_width,
        "columnMaxWidths": {str(col): w for col, w in cell.column_max_widths.items()},
    }


def _cell_from_dict(data: dict[str, Any]) -> CellConfig:
    return CellConfig(
        formatting=CellFormatting(
            align=data.get("align", "left"),
            wrap=data.get("wrap", "normal"),
            merge=data.get("merge", "none"),
            auto_format=bool(data.get("autoFormat", False)),
        ),
        padding=_padding_from_dict(data.get("padding", {})),
        column_padding={
            int(col): _padding_from_dict(p) for col, p in data.get("columnPadding", {}).items()
        },
        column_aligns={int(col): align for col, align in data.get("columnAligns", {}).items()},
        max_width=int(data.get("maxWidth", 0)),
        column_max_widths={int(col): int(w) for col, w in data.get("columnMaxWidths", {}).items()},
    )


def config_to_dict(config: TableConfig) -> dict[str, Any]:
    """Serialize a TableConfig to a JSON-compatible dict."""
    return {
        "header": _cell_to_dict(config.header),
        "row": _cell_to_dict(config.row),
        "footer": _cell_to_dict(config.footer),
        "columnWidths": {str(col): w for col, w in config.column_widths.items()},
        "maxWidth": config.max_width,
        "tabWidth": config.tab_width,
        "eastAsian": config.east_asian,
        "trimSpace": config.trim_space,
        "trimTab": config.trim_tab,
        "strict": config.strict,
        "autoHide": config.auto_hide,
    }


def config_from_dict(data: dict[str, Any]) -> TableConfig:
    """Deserialize a TableConfig, filling missing keys from the defaults."""
    merged = deep_merge(config_to_dict(TableConfig()), data)
    config = TableConfig(
        header=_cell_from_dict(merged["header"]),
        row=_cell_from_dict(merged["row"]),
        footer=_cell_from_dict(merged["footer"]),
        column_widths={int(col): int(w) for col, w in merged["columnWidths"].items()},
        max_width=int(merged["maxWidth"]),
        tab_width=int(merged["tabWidth"]),
        east_asian=bool(merged["eastAsian"]),
        trim_space=bool(merged["trimSpace"]),
        trim_tab=bool(merged["trimTab"]),
        strict=bool(merged["strict"]),
        auto_hide=bool(merged["autoHide"]),
    )
    validate_config(config)
    return config
