"""Pure layout of view trees."""

from celltui.layout.engine import LayoutNode, distribute, flex_of, layout, measure

__all__ = ["LayoutNode", "distribute", "flex_of", "layout", "measure"]
