"""tablekit: terminal table layout with wrapping, width control and cell merging."""

# Cell ingestion
from tablekit.cells import Formatter, Stringer, title, to_row, to_text

# Configuration
from tablekit.config import (
    CellConfig,
    CellFilter,
    CellFormatting,
    RowFilter,
    TableConfig,
    config_from_dict,
    config_to_dict,
    deep_merge,
    drop_columns,
    validate_config,
)

# Layout core
from tablekit.context import FormattingContextBuilder, PreparedCell, PreparedRow, PreparedSection
from tablekit.engine import Layout, LayoutEngine
from tablekit.env import default_tab_width, detect_east_asian

# Errors
from tablekit.errors import ConfigError, ShapeError, StreamStateError, TableError
from tablekit.merge import MergeResolver, horizontal_groups

# Renderers
from tablekit.renderers import BorderRenderer, MarkdownRenderer, Renderer

# Drivers
from tablekit.stream import StreamTable
from tablekit.table import Table

# Types
from tablekit.types import (
    Align,
    CellContext,
    Formatting,
    Location,
    MergeMode,
    MergeState,
    MergeStateOption,
    Padding,
    Position,
    RowContext,
    RuleContext,
    RuleKind,
    WrapMode,
)
from tablekit.width import BREAK_MARKER, ELLIPSIS, WidthMeasurer, display_width
from tablekit.widths import ColumnWidthResolver
from tablekit.wrap import Wrapper, wrap

__all__ = [
    # Cells
    "Formatter",
    "Stringer",
    "title",
    "to_row",
    "to_text",
    # Config
    "CellConfig",
    "CellFilter",
    "CellFormatting",
    "RowFilter",
    "TableConfig",
    "config_from_dict",
    "config_to_dict",
    "deep_merge",
    "drop_columns",
    "validate_config",
    "default_tab_width",
    "detect_east_asian",
    # Core
    "ColumnWidthResolver",
    "FormattingContextBuilder",
    "Layout",
    "LayoutEngine",
    "MergeResolver",
    "PreparedCell",
    "PreparedRow",
    "PreparedSection",
    "WidthMeasurer",
    "Wrapper",
    "display_width",
    "horizontal_groups",
    "wrap",
    "BREAK_MARKER",
    "ELLIPSIS",
    # Errors
    "ConfigError",
    "ShapeError",
    "StreamStateError",
    "TableError",
    # Renderers
    "BorderRenderer",
    "MarkdownRenderer",
    "Renderer",
    # Drivers
    "StreamTable",
    "Table",
    # Types
    "Align",
    "CellContext",
    "Formatting",
    "Location",
    "MergeMode",
    "MergeState",
    "MergeStateOption",
    "Padding",
    "Position",
    "RowContext",
    "RuleContext",
    "RuleKind",
    "WrapMode",
]
