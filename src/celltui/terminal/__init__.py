"""Terminal device control and input decoding."""

from celltui.terminal.device import Terminal, TerminalSize
from celltui.terminal.decoder import InputDecoder
from celltui.terminal.keys import Key, KeyEvent, MouseButton, MouseEvent, MouseEventType, PasteEvent

__all__ = [
    "Terminal",
    "TerminalSize",
    "InputDecoder",
    "Key",
    "KeyEvent",
    "MouseButton",
    "MouseEvent",
    "MouseEventType",
    "PasteEvent",
]
