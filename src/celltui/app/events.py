"""Runtime events. Input events are defined in celltui.terminal.keys."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Union

from celltui.terminal.keys import KeyEvent, MouseEvent, PasteEvent


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int


@dataclass(frozen=True)
class TickEvent:
    """Periodic frame tick; ``frame`` counts ticks since the runtime started."""
    time: float = field(default_factory=time.time)
    frame: int = 0


@dataclass(frozen=True)
class QuitEvent:
    pass


@dataclass(frozen=True)
class ErrorEvent:
    """An exception raised off the loop thread; ``cause`` names where."""
    error: BaseException
    cause: str = ""


@dataclass(frozen=True)
class BatchEvent:
    """Several events delivered to the handler in order."""
    events: tuple = ()


Event = Union[
    KeyEvent,
    MouseEvent,
    PasteEvent,
    ResizeEvent,
    TickEvent,
    QuitEvent,
    ErrorEvent,
    BatchEvent,
]

__all__ = [
    "BatchEvent",
    "ErrorEvent",
    "Event",
    "KeyEvent",
    "MouseEvent",
    "PasteEvent",
    "QuitEvent",
    "ResizeEvent",
    "TickEvent",
]
