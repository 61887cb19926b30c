"""
Declarative view tree.

Views are immutable values rebuilt on every frame. They carry no render
state; a view's identity is its position in the tree. Modifier methods
return new values, so views can be built fluently::

    vstack(
        text("Header").bold().fg(Color.CYAN),
        Bordered(text("body")).title("Panel").flex(1),
        gap=1,
    )
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from celltui.core.style import DEFAULT_STYLE, Color, Style
from celltui.view.border import ROUNDED, BorderStyle

if TYPE_CHECKING:
    from celltui.core.geometry import Rect
    from celltui.render.frame import RenderFrame
    from celltui.terminal.keys import MouseEvent


class Align(Enum):
    """Placement on the cross axis (or of text within its line)."""
    STRETCH = auto()
    START = auto()
    CENTER = auto()
    END = auto()


class View:
    """Base of every view node. Provides the layout modifiers."""

    def padding(self, *edges: int) -> Padded:
        """
        Pad on every side, CSS style.

        ``padding(1)``, ``padding(vertical, horizontal)`` or
        ``padding(top, right, bottom, left)``.
        """
        if len(edges) == 1:
            top = right = bottom = left = edges[0]
        elif len(edges) == 2:
            top = bottom = edges[0]
            right = left = edges[1]
        elif len(edges) == 4:
            top, right, bottom, left = edges
        else:
            raise ValueError("padding takes 1, 2 or 4 values")
        return Padded(self, top, right, bottom, left)

    def width(self, cells: int) -> Sized:
        return self._sized(exact_width=cells)

    def height(self, cells: int) -> Sized:
        return self._sized(exact_height=cells)

    def min_width(self, cells: int) -> Sized:
        return self._sized(minimum_width=cells)

    def min_height(self, cells: int) -> Sized:
        return self._sized(minimum_height=cells)

    def flex(self, weight: int = 1) -> Sized:
        """Share leftover space in a stack with this weight (0 = intrinsic size)."""
        return self._sized(flex_weight=weight)

    def _sized(self, **changes: Any) -> Sized:
        if isinstance(self, Sized):
            return replace(self, **changes)
        return Sized(self, **changes)


@dataclass(frozen=True)
class Text(View):
    """One or more lines of styled text; ``\\n`` starts a new line."""
    content: str = ""
    style: Style = DEFAULT_STYLE
    alignment: Align = Align.START

    def fg(self, color: Color) -> Text:
        return replace(self, style=self.style.fg(color))

    def bg(self, color: Color) -> Text:
        return replace(self, style=self.style.bg(color))

    def bold(self, on: bool = True) -> Text:
        return replace(self, style=self.style.bold(on))

    def dim(self, on: bool = True) -> Text:
        return replace(self, style=self.style.dim(on))

    def italic(self, on: bool = True) -> Text:
        return replace(self, style=self.style.italic(on))

    def underline(self, on: bool = True) -> Text:
        return replace(self, style=self.style.underline(on))

    def reverse(self, on: bool = True) -> Text:
        return replace(self, style=self.style.reverse(on))

    def link(self, url: str) -> Text:
        return replace(self, style=self.style.link(url))

    def styled(self, style: Style) -> Text:
        return replace(self, style=style)

    def align(self, alignment: Align) -> Text:
        return replace(self, alignment=alignment)

    @property
    def lines(self) -> list[str]:
        return self.content.split('\n')


@dataclass(frozen=True)
class Spacer(View):
    """Empty space: fixed ``size`` on the main axis, or flexible when None."""
    size: Optional[int] = None


class _Container(View):
    """Modifiers shared by stacks and grids."""

    def gap(self, cells: int):
        return replace(self, spacing=cells)

    def align(self, alignment: Align):
        return replace(self, alignment=alignment)


@dataclass(frozen=True)
class VStack(_Container):
    """Children top to bottom."""
    children: tuple[View, ...] = ()
    spacing: int = 0
    alignment: Align = Align.STRETCH


@dataclass(frozen=True)
class HStack(_Container):
    """Children left to right."""
    children: tuple[View, ...] = ()
    spacing: int = 0
    alignment: Align = Align.STRETCH


@dataclass(frozen=True)
class ZStack(View):
    """Children layered in order; later children draw over earlier ones."""
    children: tuple[View, ...] = ()
    alignment: Align = Align.STRETCH

    def align(self, alignment: Align) -> ZStack:
        return replace(self, alignment=alignment)


@dataclass(frozen=True)
class Track:
    """A grid row or column: fixed ``size`` cells, or a share by ``weight``."""
    size: int = 0
    weight: int = 0

    @classmethod
    def fixed(cls, size: int) -> Track:
        return cls(size=size)

    @classmethod
    def fr(cls, weight: int = 1) -> Track:
        return cls(weight=weight)


@dataclass(frozen=True)
class GridCell:
    view: View
    row: int = 0
    col: int = 0
    row_span: int = 1
    col_span: int = 1


@dataclass(frozen=True)
class Grid(_Container):
    """Cells placed on independently sized row and column tracks."""
    rows: tuple[Track, ...] = ()
    columns: tuple[Track, ...] = ()
    cells: tuple[GridCell, ...] = ()
    spacing: int = 0
    alignment: Align = Align.STRETCH


@dataclass(frozen=True)
class Bordered(View):
    """A child framed by a one-cell border, with an optional title."""
    child: View
    title_text: str = ""
    border_style: Optional[BorderStyle] = ROUNDED
    border_color: Optional[Color] = None

    def title(self, title: str) -> Bordered:
        return replace(self, title_text=title)

    def border(self, style: Optional[BorderStyle]) -> Bordered:
        """Change the glyph set; None draws no border."""
        return replace(self, border_style=style)

    def border_fg(self, color: Color) -> Bordered:
        return replace(self, border_color=color)


@dataclass(frozen=True)
class Canvas(View):
    """Leaf drawn by a callback receiving a sub-frame and its local rect."""
    draw: Callable[[RenderFrame, Rect], None]


@dataclass(frozen=True)
class Padded(View):
    child: View
    top: int = 0
    right: int = 0
    bottom: int = 0
    left: int = 0


@dataclass(frozen=True)
class Sized(View):
    """Size constraints and flex override for a child."""
    child: View
    exact_width: Optional[int] = None
    exact_height: Optional[int] = None
    minimum_width: int = 0
    minimum_height: int = 0
    flex_weight: Optional[int] = None


@dataclass(frozen=True)
class Clickable(View):
    """Calls ``on_click()`` when a click lands inside the child; returns Cmds."""
    child: View
    on_click: Callable[[], Any] = field(compare=False)


@dataclass(frozen=True)
class MouseRegion(View):
    """Calls ``on_mouse(event)`` for every mouse event inside the child."""
    child: View
    on_mouse: Callable[[MouseEvent], Any] = field(compare=False)


ViewLike = Union[View, str]


def as_view(item: ViewLike) -> View:
    if isinstance(item, str):
        return Text(item)
    return item


def text(content: str, style: Style = DEFAULT_STYLE) -> Text:
    return Text(content, style)


def vstack(*children: ViewLike, gap: int = 0, align: Align = Align.STRETCH) -> VStack:
    return VStack(tuple(as_view(c) for c in children), gap, align)


def hstack(*children: ViewLike, gap: int = 0, align: Align = Align.STRETCH) -> HStack:
    return HStack(tuple(as_view(c) for c in children), gap, align)


def zstack(*children: ViewLike, align: Align = Align.STRETCH) -> ZStack:
    return ZStack(tuple(as_view(c) for c in children), align)


def grid(
    rows: list[Track],
    columns: list[Track],
    *cells: GridCell,
    gap: int = 0,
    align: Align = Align.STRETCH,
) -> Grid:
    return Grid(tuple(rows), tuple(columns), tuple(cells), gap, align)
