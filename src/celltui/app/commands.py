"""
Commands: deferred work whose result comes back as an event.

A command is any zero-argument callable returning an event or None. The
runtime runs commands on a worker pool and posts their results to the
event queue; ``Cmd(..., inline=True)`` runs on the loop thread instead.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from celltui.app.events import BatchEvent, QuitEvent, TickEvent


@dataclass(frozen=True)
class Cmd:
    fn: Callable[[], Any] = field(compare=False)
    inline: bool = False
    name: str = ""
    children: tuple = ()

    def __call__(self) -> Any:
        return self.fn()


QUIT = Cmd(QuitEvent, inline=True, name="quit")


def quit() -> Cmd:
    return QUIT


def emit(event: Any) -> Cmd:
    """Deliver event on the next loop iteration."""
    return Cmd(lambda: event, inline=True, name="emit")


def tick(duration: float, fn: Optional[Callable[[float], Any]] = None) -> Cmd:
    """
    Sleep for duration, then produce ``fn(now)`` (or a TickEvent).

    Re-issue the command from the handler to keep ticking.
    """
    def run() -> Any:
        time.sleep(duration)
        now = time.time()
        return fn(now) if fn is not None else TickEvent(now)
    return Cmd(run, name="tick")


def after(duration: float, fn: Callable[[], Any]) -> Cmd:
    """Run fn after a delay; its return value is the resulting event."""
    def run() -> Any:
        time.sleep(duration)
        return fn()
    return Cmd(run, name="after")


def batch(*cmds: Optional[Callable[[], Any]]) -> Optional[Cmd]:
    """Run commands concurrently; each result arrives as its own event."""
    valid = tuple(c for c in cmds if c is not None)
    if not valid:
        return None
    if len(valid) == 1 and isinstance(valid[0], Cmd):
        return valid[0]
    return Cmd(lambda: None, inline=True, name="batch", children=valid)


def sequence(*cmds: Optional[Callable[[], Any]]) -> Optional[Cmd]:
    """Run commands one after another on one worker; results arrive as a BatchEvent."""
    valid = tuple(c for c in cmds if c is not None)
    if not valid:
        return None

    def run() -> BatchEvent:
        results = []
        for cmd in valid:
            result = cmd()
            if result is not None:
                results.append(result)
        return BatchEvent(tuple(results))
    return Cmd(run, name="sequence")
