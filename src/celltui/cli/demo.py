"""Applications behind the ``demo`` and ``keys`` commands."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any

from celltui.app.commands import QUIT, emit
from celltui.app.events import ErrorEvent, ResizeEvent, TickEvent
from celltui.core.geometry import Rect
from celltui.core.style import Color, Style
from celltui.render.frame import RenderFrame
from celltui.render.hyperlink import Hyperlink
from celltui.terminal.keys import Key, KeyEvent, MouseEvent, MouseEventType
from celltui.view.border import BORDERS, DOUBLE, SINGLE
from celltui.view.nodes import (
    Align,
    Bordered,
    Canvas,
    Clickable,
    GridCell,
    MouseRegion,
    Spacer,
    Track,
    View,
    grid,
    hstack,
    text,
    vstack,
)

PROJECT_URL = "https://pypi.org/project/celltui/"


@dataclass(frozen=True)
class ClickEvent:
    """Posted by the demo's button."""


def is_quit_key(event: Any) -> bool:
    if not isinstance(event, KeyEvent):
        return False
    return event.key is Key.CTRL_C or (event.is_char and event.rune == "q" and not event.alt)


class DemoApp:
    """Layout showcase: grid, stacks, borders, a canvas and clickable buttons."""

    def __init__(self) -> None:
        self.clicks = 0
        self.ticks = 0
        self.size = (0, 0)
        self.pointer = (-1, -1)
        self.border_names = list(BORDERS)
        self.border_index = 2
        self.last_key = ""

    def handle_event(self, event: Any):
        if is_quit_key(event):
            return QUIT
        if isinstance(event, ResizeEvent):
            self.size = (event.width, event.height)
        elif isinstance(event, TickEvent):
            self.ticks = event.frame
        elif isinstance(event, KeyEvent):
            self.last_key = str(event)
            if event.key is Key.TAB:
                self.border_index = (self.border_index + 1) % len(self.border_names)
            elif event.is_char and event.rune == "+":
                return emit(ClickEvent())
        elif isinstance(event, ClickEvent):
            self.clicks += 1
        elif isinstance(event, ErrorEvent):
            return QUIT
        return None

    def on_pointer(self, event: MouseEvent) -> None:
        if event.type is not MouseEventType.WHEEL:
            self.pointer = (event.x, event.y)

    def view(self) -> View:
        border = BORDERS[self.border_names[self.border_index]]
        header = hstack(
            text(" celltui demo ").bold().reverse(),
            Spacer(),
            text(f"{self.size[0]}x{self.size[1]}  tick {self.ticks} ").dim(),
        ).height(1)

        button = Clickable(
            Bordered(text(f"clicked {self.clicks}").align(Align.CENTER)).border(DOUBLE).title("button"),
            on_click=lambda: emit(ClickEvent()),
        ).height(3)

        sidebar = Bordered(
            vstack(
                text("Tab   cycle borders"),
                text("+     count a click"),
                text("q     quit"),
                Spacer(),
                text(f"last key: {self.last_key or '-'}").fg(Color.YELLOW),
                text("celltui on PyPI").link(PROJECT_URL).underline().fg(Color.BLUE),
            ).padding(0, 1)
        ).border(border).title(self.border_names[self.border_index]).border_fg(Color.CYAN)

        body = grid(
            [Track.fr(1), Track.fr(4)],
            [Track.fixed(28), Track.fr(1)],
            GridCell(sidebar, row=0, col=0, row_span=2),
            GridCell(vstack(button, Spacer()), row=0, col=1),
            GridCell(
                MouseRegion(
                    Bordered(Canvas(self.draw_pointer)).border(SINGLE).title("canvas"),
                    on_mouse=self.on_pointer,
                ),
                row=1,
                col=1,
            ),
            gap=1,
        )
        return vstack(header, body)

    def draw_pointer(self, frame: RenderFrame, rect: Rect) -> None:
        for y in range(rect.height):
            for x in range(rect.width):
                if (x + y + self.ticks) % 8 == 0:
                    frame.set_cell(x, y, "·", Style().dim())
        # Region coordinates include the border
        px, py = self.pointer[0] - 1, self.pointer[1] - 1
        if 0 <= px < rect.width and 0 <= py < rect.height:
            frame.set_cell(px, py, "●", Style().fg(Color.BRIGHT_RED).bold())
        label = Hyperlink(PROJECT_URL, "move the mouse here")
        frame.print_hyperlink(1, 0, label)


class KeysApp:
    """Shows the most recent decoded input events."""

    def __init__(self, history: int = 200) -> None:
        self.events: deque[str] = deque(maxlen=history)

    def handle_event(self, event: Any):
        if is_quit_key(event):
            return QUIT
        if isinstance(event, (ResizeEvent, TickEvent)):
            return None
        if isinstance(event, ErrorEvent):
            return QUIT
        self.events.append(describe(event))
        return None

    def view(self) -> View:
        lines = "\n".join(reversed(self.events)) or "press keys, click or paste"
        return Bordered(text(lines)).title("input events (q or Ctrl+C to quit)")


def describe(event: Any) -> str:
    if isinstance(event, KeyEvent):
        return f"key    {event}"
    if isinstance(event, MouseEvent):
        mods = "".join(m for m, on in (("S", event.shift), ("A", event.alt), ("C", event.ctrl)) if on)
        return f"mouse  {event.type.name.lower():<7} {event.button.name.lower():<10} ({event.x},{event.y}) {mods}"
    return f"{type(event).__name__.replace('Event', '').lower():<6} {event!r}"
