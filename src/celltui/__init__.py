"""
celltui: declarative terminal UI toolkit

Describe the screen as a tree of views; the runtime lays it out, draws it
into a double-buffered cell grid and writes only what changed.

Quick Start:
    >>> import celltui as tui
    >>> class Hello:
    ...     def view(self):
    ...         return tui.Bordered(tui.text("hello").bold()).title("celltui")
    ...     def handle_event(self, event):
    ...         if isinstance(event, tui.KeyEvent) and event.rune == "q":
    ...             return tui.QUIT
    >>> tui.run(Hello())

Features:
    - Raw mode, alternate screen, mouse and bracketed paste with guaranteed restore
    - Incremental input decoder for keys, modifiers, SGR mouse and paste
    - Minimal-output diff rendering with SGR pen tracking and OSC 8 hyperlinks
    - Stacks, grids, borders, padding and flex layout
    - Single-queue event loop with background commands
"""

import logging

__version__ = "0.1.0"

# Core types
from celltui.core.cell import Cell
from celltui.core.geometry import Rect
from celltui.core.style import Color, ColorMode, Style

from celltui.errors import CellTuiError, FrameStateError, NotATerminalError, RenderIOError

# Terminal and input
from celltui.terminal.device import Terminal, TerminalSize
from celltui.terminal.decoder import InputDecoder
from celltui.terminal.keys import Key, KeyEvent, MouseButton, MouseEvent, MouseEventType, PasteEvent

# Rendering
from celltui.render.frame import RenderFrame, Screen
from celltui.render.hyperlink import Hyperlink

# Views and layout
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
from celltui.layout.engine import LayoutNode, layout

# Application runtime
from celltui.app.commands import QUIT, Cmd, after, batch, emit, sequence, tick
from celltui.app.config import RuntimeConfig
from celltui.app.events import BatchEvent, ErrorEvent, QuitEvent, ResizeEvent, TickEvent
from celltui.app.runtime import Application, Runtime, run

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Version
    "__version__",
    # Core types
    "Cell",
    "Color",
    "ColorMode",
    "Rect",
    "Style",
    # Errors
    "CellTuiError",
    "FrameStateError",
    "NotATerminalError",
    "RenderIOError",
    # Terminal and input
    "Terminal",
    "TerminalSize",
    "InputDecoder",
    "Key",
    "KeyEvent",
    "MouseButton",
    "MouseEvent",
    "MouseEventType",
    "PasteEvent",
    # Rendering
    "RenderFrame",
    "Screen",
    "Hyperlink",
    # Views and layout
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
    "LayoutNode",
    "layout",
    # Runtime
    "QUIT",
    "Cmd",
    "after",
    "batch",
    "emit",
    "sequence",
    "tick",
    "RuntimeConfig",
    "BatchEvent",
    "ErrorEvent",
    "QuitEvent",
    "ResizeEvent",
    "TickEvent",
    "Application",
    "Runtime",
    "run",
]
