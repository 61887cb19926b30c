"""Declarative views, borders, and drawing with hit testing."""

from celltui.view.nodes import (
    Align,
    Bordered,
    Canvas,
    Clickable,
    Grid,
    GridCell,
    HStack,
    MouseRegion,
    Padded,
    Sized,
    Spacer,
    Text,
    Track,
    View,
    VStack,
    ZStack,
    grid,
    hstack,
    text,
    vstack,
    zstack,
)
from celltui.view.border import ASCII, DOUBLE, ROUNDED, SINGLE, THICK, BorderStyle
from celltui.view.draw import HitMap, HitRegion, render_view

__all__ = [
    "Align",
    "Bordered",
    "Canvas",
    "Clickable",
    "Grid",
    "GridCell",
    "HStack",
    "MouseRegion",
    "Padded",
    "Sized",
    "Spacer",
    "Text",
    "Track",
    "View",
    "VStack",
    "ZStack",
    "grid",
    "hstack",
    "text",
    "vstack",
    "zstack",
    "ASCII",
    "DOUBLE",
    "ROUNDED",
    "SINGLE",
    "THICK",
    "BorderStyle",
    "HitMap",
    "HitRegion",
    "render_view",
]
