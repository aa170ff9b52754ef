"""Table renderers."""

from tablekit.renderers.base import Renderer, fit, render_cell
from tablekit.renderers.border import ASCII, UNICODE, BorderRenderer, BorderStyle, Glyphs
from tablekit.renderers.markdown import MarkdownRenderer, alignment_marker, escape_cell

__all__ = [
    "Renderer",
    "fit",
    "render_cell",
    "ASCII",
    "UNICODE",
    "BorderRenderer",
    "BorderStyle",
    "Glyphs",
    "MarkdownRenderer",
    "alignment_marker",
    "escape_cell",
]
