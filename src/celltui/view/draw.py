"""Draw a laid-out view tree into a RenderFrame and collect hit regions."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional

from celltui.core.geometry import Rect
from celltui.core.style import DEFAULT_STYLE
from celltui.core.text import strip_ansi, text_width, truncate
from celltui.layout.engine import LayoutNode, layout
from celltui.render.frame import RenderFrame
from celltui.terminal.keys import MouseEvent, MouseEventType
from celltui.view.nodes import (
    Align,
    Bordered,
    Canvas,
    Clickable,
    MouseRegion,
    Text,
    View,
)


@dataclass(frozen=True)
class HitRegion:
    """Screen area that reacts to mouse events."""
    rect: Rect
    handler: Callable[..., Any] = field(compare=False)
    clicks_only: bool = True

    def accepts(self, event: MouseEvent) -> bool:
        if not self.rect.contains(event.x, event.y):
            return False
        return not self.clicks_only or event.type is MouseEventType.CLICK


class HitMap:
    """Hit regions of one rendered frame, in registration order."""

    def __init__(self) -> None:
        self.regions: list[HitRegion] = []

    def __len__(self) -> int:
        return len(self.regions)

    def add(self, region: HitRegion) -> None:
        self.regions.append(region)

    def find(self, event: MouseEvent) -> Optional[HitRegion]:
        """The last-registered (innermost, topmost) region accepting event."""
        for region in reversed(self.regions):
            if region.accepts(event):
                return region
        return None

    def dispatch(self, event: MouseEvent) -> list:
        """
        Run the handler of the matching region and return its Cmds.

        Click handlers take no arguments. Mouse-region handlers receive the
        event translated to region-local coordinates.
        """
        region = self.find(event)
        if region is None:
            return []
        if region.clicks_only:
            result = region.handler()
        else:
            local = replace(event, x=event.x - region.rect.x, y=event.y - region.rect.y)
            result = region.handler(local)
        return as_cmd_list(result)


def as_cmd_list(result: Any) -> list:
    """Normalize a handler's return value (None, one Cmd, or many) to a list."""
    if result is None:
        return []
    if isinstance(result, (list, tuple)):
        return [cmd for cmd in result if cmd is not None]
    return [result]


def render_view(view: View, frame: RenderFrame) -> HitMap:
    """Lay out view over the whole frame and draw it."""
    width, height = frame.size()
    root = layout(view, Rect(0, 0, width, height))
    hits = HitMap()
    _draw(root, frame, hits)
    return hits


def _draw(node: LayoutNode, frame: RenderFrame, hits: HitMap) -> None:
    view = node.view
    rect = node.rect
    if isinstance(view, Text):
        if not rect.empty:
            draw_text(frame.sub_frame(rect), view)
    elif isinstance(view, Bordered):
        draw_border(frame, rect, view)
    elif isinstance(view, Canvas):
        if not rect.empty:
            view.draw(frame.sub_frame(rect), Rect(0, 0, rect.width, rect.height))
    elif isinstance(view, (Clickable, MouseRegion)):
        visible = rect.translate(frame.origin.x, frame.origin.y).intersect(frame.clip)
        if not visible.empty:
            if isinstance(view, Clickable):
                hits.add(HitRegion(visible, view.on_click, clicks_only=True))
            else:
                hits.add(HitRegion(visible, view.on_mouse, clicks_only=False))

    for child in node.children:
        _draw(child, frame, hits)


def draw_text(frame: RenderFrame, view: Text) -> None:
    width, height = frame.size()
    for y, line in enumerate(view.lines[:height]):
        line = truncate(strip_ansi(line), width)
        slack = width - text_width(line)
        if view.alignment is Align.CENTER:
            x = slack // 2
        elif view.alignment is Align.END:
            x = slack
        else:
            x = 0
        frame.print_styled(x, y, line, view.style)


def draw_border(frame: RenderFrame, rect: Rect, view: Bordered) -> None:
    if rect.empty:
        return
    style = DEFAULT_STYLE.fg(view.border_color) if view.border_color else DEFAULT_STYLE
    glyphs = view.border_style
    if glyphs is None:
        if view.title_text:
            sub = frame.sub_frame(Rect(rect.x, rect.y, rect.width, 1))
            sub.print_styled(0, 0, truncate(strip_ansi(view.title_text), rect.width), style.bold())
        return

    x0, y0 = rect.x, rect.y
    x1, y1 = rect.right - 1, rect.bottom - 1
    for x in range(x0 + 1, x1):
        frame.set_cell(x, y0, glyphs.horizontal, style)
        frame.set_cell(x, y1, glyphs.horizontal, style)
    for y in range(y0 + 1, y1):
        frame.set_cell(x0, y, glyphs.vertical, style)
        frame.set_cell(x1, y, glyphs.vertical, style)
    frame.set_cell(x0, y0, glyphs.top_left, style)
    frame.set_cell(x1, y0, glyphs.top_right, style)
    frame.set_cell(x0, y1, glyphs.bottom_left, style)
    frame.set_cell(x1, y1, glyphs.bottom_right, style)

    if view.title_text and rect.width > 4:
        title = truncate(f" {strip_ansi(view.title_text)} ", rect.width - 4)
        frame.print_styled(x0 + 2, y0, title, style.bold())
