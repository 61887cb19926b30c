"""
Pure layout: view tree + rect -> tree of allocated rects.

Layout never fails. When space runs out, flexible children get zero size
and fixed children are truncated in order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from celltui.core.geometry import Rect
from celltui.core.text import text_width
from celltui.view.nodes import (
    Align,
    Bordered,
    Canvas,
    Clickable,
    Grid,
    HStack,
    MouseRegion,
    Padded,
    Sized,
    Spacer,
    Text,
    View,
    VStack,
    ZStack,
)


@dataclass(frozen=True)
class LayoutNode:
    """A view with the rect it was given, plus its laid-out children."""
    view: View
    rect: Rect
    children: tuple[LayoutNode, ...] = field(default=())


def distribute(available: int, tracks: Sequence[tuple[int, ...]]) -> list[int]:
    """
    Split ``available`` cells among ``(fixed, weight[, minimum])`` tracks.

    Tracks with weight 0 take their fixed size first, in order, truncated
    to what is left. The rest is shared by weight; the last weighted track
    absorbs the rounding remainder, so the sizes sum to ``available``
    whenever any track is weighted. A weighted track whose share would fall
    below its minimum is pinned at the minimum (or whatever is left) and the
    others share the rest.

    >>> distribute(12, [(0, 1), (0, 4)])
    [2, 10]
    >>> distribute(10, [(0, 1, 7), (0, 1)])
    [7, 3]
    """
    sizes = [0] * len(tracks)
    remaining = max(0, available)
    weighted: list[int] = []
    for i, (fixed, weight, *_) in enumerate(tracks):
        if weight > 0:
            weighted.append(i)
            continue
        size = min(max(0, fixed), remaining)
        sizes[i] = size
        remaining -= size

    pinned = True
    while weighted and pinned:
        pinned = False
        total = sum(tracks[i][1] for i in weighted)
        for i in weighted:
            floor = _track_minimum(tracks[i])
            if floor > remaining * tracks[i][1] // total:
                sizes[i] = min(floor, remaining)
                remaining -= sizes[i]
                weighted.remove(i)
                pinned = True
                break

    if weighted and remaining:
        total = sum(tracks[i][1] for i in weighted)
        used = 0
        for i in weighted:
            share = remaining * tracks[i][1] // total
            sizes[i] = share
            used += share
        sizes[weighted[-1]] += remaining - used
    return sizes


def _track_minimum(track: Sequence[int]) -> int:
    return max(0, track[2]) if len(track) > 2 else 0


def measure(view: View) -> tuple[int, int]:
    """Intrinsic (width, height): the smallest size showing all content."""
    if isinstance(view, Text):
        lines = view.lines
        return max(text_width(line) for line in lines), len(lines)
    if isinstance(view, Spacer):
        size = view.size or 0
        return size, size
    if isinstance(view, (VStack, HStack)):
        vertical = isinstance(view, VStack)
        sizes = [measure(child) for child in view.children]
        if not sizes:
            return 0, 0
        gaps = view.spacing * (len(sizes) - 1)
        if vertical:
            return max(w for w, _ in sizes), sum(h for _, h in sizes) + gaps
        return sum(w for w, _ in sizes) + gaps, max(h for _, h in sizes)
    if isinstance(view, ZStack):
        sizes = [measure(child) for child in view.children]
        return max((w for w, _ in sizes), default=0), max((h for _, h in sizes), default=0)
    if isinstance(view, Grid):
        return (
            _track_total(view.columns, view.spacing),
            _track_total(view.rows, view.spacing),
        )
    if isinstance(view, Bordered):
        w, h = measure(view.child)
        title = text_width(view.title_text)
        if view.border_style is not None:
            return max(w, title + 2) + 2, h + 2
        if title:
            return max(w, title), h + 1
        return w, h
    if isinstance(view, Padded):
        w, h = measure(view.child)
        return w + view.left + view.right, h + view.top + view.bottom
    if isinstance(view, Sized):
        w, h = measure(view.child)
        if view.exact_width is not None:
            w = view.exact_width
        if view.exact_height is not None:
            h = view.exact_height
        return max(w, view.minimum_width), max(h, view.minimum_height)
    if isinstance(view, (Clickable, MouseRegion)):
        return measure(view.child)
    # Canvas and unknown leaves have no intrinsic size
    return 0, 0


def _track_total(tracks: Sequence, gap: int) -> int:
    if not tracks:
        return 0
    return sum(t.size for t in tracks if t.weight <= 0) + gap * (len(tracks) - 1)


def flex_of(view: View, vertical: bool) -> int:
    """Weight with which view grows along the given axis; 0 means intrinsic."""
    if isinstance(view, Sized):
        if view.flex_weight is not None:
            return max(0, view.flex_weight)
        exact = view.exact_height if vertical else view.exact_width
        if exact is not None:
            return 0
        return flex_of(view.child, vertical)
    if isinstance(view, Spacer):
        return 0 if view.size is not None else 1
    if isinstance(view, (Canvas, Grid)):
        return 1
    if isinstance(view, (VStack, HStack, ZStack)):
        return max((flex_of(child, vertical) for child in view.children), default=0)
    if isinstance(view, (Bordered, Padded, Clickable, MouseRegion)):
        return flex_of(view.child, vertical)
    return 0


def minimum_extent(view: View, vertical: bool) -> int:
    """Smallest main-axis size a flexible view asks for."""
    if isinstance(view, Sized):
        own = view.minimum_height if vertical else view.minimum_width
        return max(own, minimum_extent(view.child, vertical))
    if isinstance(view, (Clickable, MouseRegion)):
        return minimum_extent(view.child, vertical)
    if isinstance(view, ZStack):
        return max((minimum_extent(child, vertical) for child in view.children), default=0)
    return 0


def layout(view: View, rect: Rect) -> LayoutNode:
    """Assign a rect to every node of the view tree."""
    if isinstance(view, VStack):
        return LayoutNode(view, rect, _layout_stack(view, rect, vertical=True))
    if isinstance(view, HStack):
        return LayoutNode(view, rect, _layout_stack(view, rect, vertical=False))
    if isinstance(view, Grid):
        return LayoutNode(view, rect, _layout_grid(view, rect))
    if isinstance(view, ZStack):
        return LayoutNode(
            view, rect, tuple(layout(child, _align_in(child, rect, view.alignment)) for child in view.children)
        )
    if isinstance(view, Bordered):
        if view.border_style is not None:
            inner = rect.inset(1, 1, 1, 1)
        elif view.title_text:
            inner = rect.inset(1, 0, 0, 0)
        else:
            inner = rect
        return LayoutNode(view, rect, (layout(view.child, inner),))
    if isinstance(view, Padded):
        inner = rect.inset(view.top, view.right, view.bottom, view.left)
        return LayoutNode(view, rect, (layout(view.child, inner),))
    if isinstance(view, Sized):
        width = rect.width if view.exact_width is None else min(view.exact_width, rect.width)
        height = rect.height if view.exact_height is None else min(view.exact_height, rect.height)
        inner = Rect(rect.x, rect.y, width, height)
        return LayoutNode(view, rect, (layout(view.child, inner),))
    if isinstance(view, (Clickable, MouseRegion)):
        return LayoutNode(view, rect, (layout(view.child, rect),))
    return LayoutNode(view, rect)


def _layout_stack(view: VStack | HStack, rect: Rect, vertical: bool) -> tuple[LayoutNode, ...]:
    children = view.children
    if not children:
        return ()
    main = rect.height if vertical else rect.width
    cross = rect.width if vertical else rect.height
    gaps = view.spacing * (len(children) - 1)

    tracks = []
    for child in children:
        weight = flex_of(child, vertical)
        if weight > 0:
            tracks.append((0, weight, minimum_extent(child, vertical)))
        else:
            w, h = measure(child)
            tracks.append((h if vertical else w, 0))
    sizes = distribute(main - gaps, tracks)

    nodes = []
    offset = 0
    for child, size in zip(children, sizes):
        extent, start = _cross_placement(child, view.alignment, cross, vertical)
        if vertical:
            child_rect = Rect(rect.x + start, rect.y + offset, extent, size)
        else:
            child_rect = Rect(rect.x + offset, rect.y + start, size, extent)
        nodes.append(layout(child, child_rect.intersect(rect)))
        offset += size + view.spacing
    return tuple(nodes)


def _cross_placement(child: View, alignment: Align, cross: int, vertical: bool) -> tuple[int, int]:
    """(extent, offset) of a child on the stack's cross axis."""
    if alignment is Align.STRETCH:
        return cross, 0
    w, h = measure(child)
    extent = min(w if vertical else h, cross)
    if alignment is Align.CENTER:
        return extent, (cross - extent) // 2
    if alignment is Align.END:
        return extent, cross - extent
    return extent, 0


def _offsets(sizes: list[int], origin: int, gap: int) -> list[int]:
    out = []
    pos = origin
    for size in sizes:
        out.append(pos)
        pos += size + gap
    return out


def _layout_grid(view: Grid, rect: Rect) -> tuple[LayoutNode, ...]:
    rows, cols = view.rows, view.columns
    if not rows or not cols:
        return ()
    gap = view.spacing
    row_sizes = distribute(rect.height - gap * (len(rows) - 1), [(t.size, t.weight) for t in rows])
    col_sizes = distribute(rect.width - gap * (len(cols) - 1), [(t.size, t.weight) for t in cols])
    row_pos = _offsets(row_sizes, rect.y, gap)
    col_pos = _offsets(col_sizes, rect.x, gap)

    nodes = []
    for cell in view.cells:
        if not (0 <= cell.row < len(rows) and 0 <= cell.col < len(cols)):
            continue
        row_end = cell.row + max(1, min(cell.row_span, len(rows) - cell.row))
        col_end = cell.col + max(1, min(cell.col_span, len(cols) - cell.col))
        area = Rect(
            col_pos[cell.col],
            row_pos[cell.row],
            col_pos[col_end - 1] + col_sizes[col_end - 1] - col_pos[cell.col],
            row_pos[row_end - 1] + row_sizes[row_end - 1] - row_pos[cell.row],
        ).intersect(rect)
        nodes.append(layout(cell.view, _align_in(cell.view, area, view.alignment)))
    return tuple(nodes)


def _align_in(view: View, area: Rect, alignment: Align) -> Rect:
    if alignment is Align.STRETCH:
        return area
    w, h = measure(view)
    w, h = min(w, area.width), min(h, area.height)
    if alignment is Align.CENTER:
        return Rect(area.x + (area.width - w) // 2, area.y + (area.height - h) // 2, w, h)
    if alignment is Align.END:
        return Rect(area.right - w, area.bottom - h, w, h)
    return Rect(area.x, area.y, w, h)
