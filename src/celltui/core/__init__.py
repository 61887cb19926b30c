"""Value types shared by every layer: styles, cells, rects, text width."""

from celltui.core.cell import BLANK, Cell
from celltui.core.geometry import Rect
from celltui.core.style import DEFAULT_STYLE, Color, ColorMode, Style
from celltui.core.text import graphemes, text_width, truncate

__all__ = [
    "BLANK",
    "Cell",
    "Rect",
    "DEFAULT_STYLE",
    "Color",
    "ColorMode",
    "Style",
    "graphemes",
    "text_width",
    "truncate",
]
