"""Event loop, commands and runtime configuration."""

from celltui.app.commands import QUIT, Cmd, after, batch, emit, quit, sequence, tick
from celltui.app.config import RuntimeConfig
from celltui.app.events import BatchEvent, ErrorEvent, QuitEvent, ResizeEvent, TickEvent
from celltui.app.runtime import Application, Runtime, State, run

__all__ = [
    "QUIT",
    "Cmd",
    "after",
    "batch",
    "emit",
    "quit",
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
    "State",
    "run",
]
