"""Double-buffered screen and the RenderFrame drawing surface."""

from __future__ import annotations

import logging
import time
from typing import Optional, TextIO

from celltui.core.cell import BLANK, SENTINEL, Cell, continuation
from celltui.core.geometry import Rect
from celltui.core.style import DEFAULT_STYLE, Style
from celltui.core.text import graphemes
from celltui.errors import FrameStateError, RenderIOError
from celltui.render.buffer import Buffer
from celltui.render.hyperlink import Hyperlink
from celltui.render.metrics import RenderMetrics
from celltui.render.pen import Pen

logger = logging.getLogger(__name__)


class Screen:
    """
    Front/back cell buffers and the diff-based flush.

    ``previous`` mirrors what the terminal currently shows and ``next`` is
    what the application is drawing. ``end_frame()`` writes only the cells
    that differ, one cursor move per contiguous run of changes, and then
    copies ``next`` into ``previous``.
    """

    def __init__(
        self,
        width: int,
        height: int,
        output: TextIO,
        metrics: Optional[RenderMetrics] = None,
    ) -> None:
        self.output = output
        self.previous = Buffer(width, height, SENTINEL)
        self.next = Buffer(width, height, BLANK)
        self.metrics = metrics if metrics is not None else RenderMetrics()
        self._frame_open = False
        self._clear_pending = False

    @property
    def width(self) -> int:
        return self.next.width

    @property
    def height(self) -> int:
        return self.next.height

    @property
    def frame_open(self) -> bool:
        return self._frame_open

    def begin_frame(self, width: Optional[int] = None, height: Optional[int] = None) -> RenderFrame:
        """
        Start drawing a frame into the next buffer.

        When the requested size differs from the current one, both buffers
        are reallocated and the whole screen is repainted on the next flush.
        """
        if self._frame_open:
            raise FrameStateError("begin_frame called while a frame is already open")
        width = self.width if width is None else width
        height = self.height if height is None else height
        if (width, height) != (self.width, self.height):
            self.resize(width, height)
        self._frame_open = True
        return RenderFrame(self, Rect(0, 0, width, height))

    def end_frame(self, frame: Optional[RenderFrame] = None) -> int:
        """Close the open frame (if any) and flush; returns bytes written."""
        if frame is not None and frame.screen is not self:
            raise FrameStateError("frame belongs to a different screen")
        self._frame_open = False
        return self.flush()

    def resize(self, width: int, height: int) -> None:
        logger.debug("resizing screen buffers %dx%d -> %dx%d", self.width, self.height, width, height)
        self.next.resize(width, height, BLANK)
        self.previous.resize(width, height, SENTINEL)
        self._clear_pending = True

    def invalidate(self) -> None:
        """Forget what the terminal shows so the next flush repaints everything."""
        self.previous.fill(SENTINEL)
        self._clear_pending = True

    def flush(self) -> int:
        """Write the difference between next and previous to the output."""
        started = time.perf_counter()
        pen = Pen()
        parts: list[str] = []
        cells = 0

        if self._clear_pending:
            parts.append('\x1b[0m\x1b[2J')

        for y in range(self.height):
            old_row = self.previous.row(y)
            new_row = self.next.row(y)
            if old_row == new_row:
                continue
            for start, end in changed_runs(old_row, new_row):
                parts.append(pen.link(''))
                parts.append(f'\x1b[{y + 1};{start + 1}H')
                for x in range(start, end):
                    cell = new_row[x]
                    if cell.is_continuation:
                        continue
                    parts.append(pen.link(cell.style.url))
                    parts.append(pen.transition(cell.style))
                    parts.append(cell.char)
                    cells += 1

        if not parts:
            self.metrics.record_skipped()
            return 0

        parts.append(pen.reset())
        out = ''.join(parts)
        try:
            self.output.write(out)
            self.output.flush()
        except OSError as exc:
            raise RenderIOError(f"failed to write frame: {exc}") from exc

        self.previous.copy_from(self.next)
        self._clear_pending = False
        nbytes = len(out.encode('utf-8'))
        self.metrics.record_frame(cells, pen.codes_emitted, nbytes, time.perf_counter() - started)
        return nbytes


def changed_runs(old_row: list[Cell], new_row: list[Cell]) -> list[tuple[int, int]]:
    """
    Half-open column ranges [start, end) where the rows differ.

    Runs are widened so a wide character is always written from its lead
    cell and never split from its continuation.
    """
    runs: list[tuple[int, int]] = []
    n = len(new_row)
    x = 0
    while x < n:
        if new_row[x] == old_row[x]:
            x += 1
            continue
        start = x
        if new_row[start].is_continuation and start > 0:
            start -= 1
        while x < n and new_row[x] != old_row[x]:
            x += 1
        if x < n and new_row[x].is_continuation:
            x += 1
        if runs and start <= runs[-1][1]:
            runs[-1] = (runs[-1][0], x)
        else:
            runs.append((start, x))
    return runs


class RenderFrame:
    """
    Drawing surface bound to a Screen's next buffer.

    Coordinates are local: (0, 0) is the top-left of the rect this frame
    was created for, at any nesting depth. Everything outside the clip
    rect is silently dropped.
    """

    def __init__(self, screen: Screen, rect: Rect, clip: Optional[Rect] = None) -> None:
        self.screen = screen
        self.origin = rect
        self.clip = rect if clip is None else clip

    def size(self) -> tuple[int, int]:
        """Logical (width, height) of this frame."""
        if self.clip.empty:
            return 0, 0
        return (
            max(0, min(self.origin.width, self.clip.right - self.origin.x)),
            max(0, min(self.origin.height, self.clip.bottom - self.origin.y)),
        )

    def get_bounds(self) -> Rect:
        """Visible area of this frame in screen coordinates."""
        return self.clip

    def sub_frame(self, rect: Rect) -> RenderFrame:
        """Frame for rect (in local coordinates), clipped to this frame."""
        absolute = rect.translate(self.origin.x, self.origin.y)
        return RenderFrame(self.screen, absolute, absolute.intersect(self.clip))

    def set_cell(self, x: int, y: int, char: str, style: Style = DEFAULT_STYLE) -> bool:
        """Place a single grapheme; returns False if it was clipped."""
        for cluster, width in graphemes(char):
            return self._put(x, y, cluster, width, style)
        return False

    def print_styled(self, x: int, y: int, text: str, style: Style = DEFAULT_STYLE) -> int:
        """
        Print text on one line without wrapping.

        Returns the number of columns advanced. Text past the right edge of
        the frame is truncated; a wide character that does not fit entirely
        is replaced by a space.
        """
        width, _ = self.size()
        col = x
        for cluster, w in graphemes(text):
            if col >= width:
                break
            if w == 2 and col + 1 >= width:
                self._put(col, y, ' ', 1, style)
                col += 1
                break
            self._put(col, y, cluster, w, style)
            col += w
        return col - x

    def fill_styled(self, x: int, y: int, width: int, height: int, char: str = ' ', style: Style = DEFAULT_STYLE) -> None:
        """Fill a rectangle with copies of one character."""
        cluster, w = next(iter(graphemes(char)), (' ', 1))
        fw, fh = self.size()
        for row in range(max(0, y), min(fh, y + height)):
            col = max(0, x)
            while col < min(fw, x + width):
                if w == 2 and col + 1 >= min(fw, x + width):
                    self._put(col, row, ' ', 1, style)
                    break
                self._put(col, row, cluster, w, style)
                col += w

    def fill(self, char: str = ' ', style: Style = DEFAULT_STYLE) -> None:
        """Fill the whole frame."""
        width, height = self.size()
        self.fill_styled(0, 0, width, height, char, style)

    def print_hyperlink(self, x: int, y: int, link: Hyperlink) -> int:
        """Print link text carrying an OSC 8 target."""
        link.validate()
        return self.print_styled(x, y, link.text, link.style.link(link.url))

    def print_hyperlink_fallback(self, x: int, y: int, link: Hyperlink) -> int:
        """Print ``text (url)`` for terminals without OSC 8 support."""
        link.validate()
        return self.print_styled(x, y, link.fallback_text(), link.style.without_link())

    def _put(self, x: int, y: int, char: str, width: int, style: Style) -> bool:
        ax, ay = self.origin.x + x, self.origin.y + y
        if not self.clip.contains(ax, ay):
            return False
        if width == 2 and not self.clip.contains(ax + 1, ay):
            char, width = ' ', 1

        buf = self.screen.next
        # Overwriting half of a wide character blanks the other half
        existing = buf.get(ax, ay)
        if existing.is_continuation and ax > 0:
            lead = buf.get(ax - 1, ay)
            buf.set(ax - 1, ay, Cell(' ', lead.style))
        if existing.width == 2 and ax + 1 < buf.width and width != 2:
            buf.set(ax + 1, ay, Cell(' ', existing.style))

        buf.set(ax, ay, Cell(char, style, width))
        if width == 2:
            after = buf.get(ax + 1, ay)
            if after.width == 2 and ax + 2 < buf.width:
                buf.set(ax + 2, ay, Cell(' ', after.style))
            buf.set(ax + 1, ay, continuation(style))
        return True
