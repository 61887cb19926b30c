"""Tests for drawing view trees and hit testing."""

import io

from celltui.core.geometry import Rect
from celltui.core.style import Style
from celltui.render.frame import Screen
from celltui.terminal.keys import MouseButton, MouseEvent, MouseEventType
from celltui.view.draw import HitMap, HitRegion, as_cmd_list, render_view
from celltui.view.nodes import (
    Align,
    Bordered,
    Canvas,
    Clickable,
    MouseRegion,
    Spacer,
    Text,
    hstack,
    text,
    vstack,
    zstack,
)
from celltui.view.border import ASCII


def click(x: int, y: int) -> MouseEvent:
    return MouseEvent(x, y, MouseButton.LEFT, MouseEventType.CLICK)


def draw(view, width: int = 10, height: int = 3) -> tuple[Screen, HitMap]:
    screen = Screen(width, height, io.StringIO())
    hits = render_view(view, screen.begin_frame())
    return screen, hits


class TestModifiers:
    """Fluent view construction."""

    def test_text_modifiers_return_new_values(self) -> None:
        base = text("x")
        bold = base.bold()
        assert not base.style.is_bold
        assert bold.style.is_bold
        assert bold.content == "x"

    def test_sized_modifiers_merge(self) -> None:
        view = text("x").width(3).height(2).flex(2)
        assert view.child == text("x")
        assert (view.exact_width, view.exact_height, view.flex_weight) == (3, 2, 2)

    def test_strings_become_text(self) -> None:
        assert vstack("a", "b").children == (Text("a"), Text("b"))

    def test_gap_and_align(self) -> None:
        stack = hstack("a").gap(2).align(Align.END)
        assert (stack.spacing, stack.alignment) == (2, Align.END)


class TestDrawing:
    """Text, borders and canvases land in the right cells."""

    def test_text_lines(self) -> None:
        screen, _ = draw(vstack(text("hello\nworld"), Spacer()))
        assert screen.next.text()[:2] == ["hello     ", "world     "]

    def test_text_style(self) -> None:
        screen, _ = draw(text("hi").bold())
        assert screen.next.get(0, 0).style == Style().bold()

    def test_text_alignment(self) -> None:
        screen, _ = draw(vstack(text("ab").align(Align.END), text("ab").align(Align.CENTER)))
        assert screen.next.text()[:2] == ["        ab", "    ab    "]

    def test_text_truncated_at_edge(self) -> None:
        screen, _ = draw(text("0123456789abc"))
        assert screen.next.text()[0] == "0123456789"

    def test_border_with_title(self) -> None:
        screen, _ = draw(Bordered(text("x")).title("T"))
        assert screen.next.text() == ["╭─ T ────╮", "│x       │", "╰────────╯"]

    def test_ascii_border(self) -> None:
        screen, _ = draw(Bordered(text("x")).border(ASCII))
        assert screen.next.text() == ["+--------+", "|x       |", "+--------+"]

    def test_borderless_title(self) -> None:
        screen, _ = draw(Bordered(text("body")).border(None).title("Head"))
        assert screen.next.text()[:2] == ["Head      ", "body      "]
        assert screen.next.get(0, 0).style.is_bold

    def test_canvas_receives_local_rect(self) -> None:
        seen = []

        def paint(frame, rect) -> None:
            seen.append(rect)
            frame.print_styled(0, 0, "c")

        screen, _ = draw(hstack(text("ab"), Canvas(paint)))
        assert seen == [Rect(0, 0, 8, 3)]
        assert screen.next.text()[0] == "abc       "

    def test_content_is_clipped_to_its_rect(self) -> None:
        screen, _ = draw(hstack(text("abcdef").width(3), text("|")))
        assert screen.next.text()[0] == "abc|      "

    def test_escape_codes_in_text_are_not_printed(self) -> None:
        screen, _ = draw(vstack(text("\x1b[31mred\x1b[0m"), text("\x1b[1mab\x1b[0m").align(Align.END)))
        assert screen.next.text()[:2] == ["red       ", "        ab"]

    def test_escape_codes_in_title_are_not_printed(self) -> None:
        screen, _ = draw(Bordered(text("x")).title("\x1b[32mT\x1b[0m"))
        assert screen.next.text()[0] == "╭─ T ────╮"


class TestZStack:
    """Layered children."""

    def test_later_children_draw_on_top(self) -> None:
        screen, _ = draw(zstack(text("abcdef"), text("XY")))
        assert screen.next.text()[0] == "XYcdef    "

    def test_center_alignment(self) -> None:
        block = text("abcdef\nabcdef\nabcdef")
        screen, _ = draw(zstack(block, text("hi"), align=Align.CENTER))
        assert screen.next.text() == ["  abcdef  ", "  abhief  ", "  abcdef  "]

    def test_topmost_child_gets_the_click(self) -> None:
        clicked = []
        bottom = Clickable(text("a" * 10), lambda: clicked.append("bottom"))
        top = Clickable(text("top"), lambda: clicked.append("top"))
        _, hits = draw(zstack(bottom, top))
        hits.dispatch(click(5, 1))
        assert clicked == ["top"]

    def test_aligned_child_leaves_the_rest_to_lower_layers(self) -> None:
        clicked = []
        bottom = Clickable(text("a" * 10), lambda: clicked.append("bottom"))
        top = Clickable(text("top"), lambda: clicked.append("top"))
        _, hits = draw(zstack(bottom, top).align(Align.START))
        hits.dispatch(click(1, 0))
        hits.dispatch(click(5, 0))
        assert clicked == ["top", "bottom"]


class TestHitTesting:
    """Clickable and MouseRegion dispatch."""

    def test_click_inside(self) -> None:
        clicked = []
        _, hits = draw(Clickable(text("button"), lambda: clicked.append(1)))
        hits.dispatch(click(2, 0))
        assert clicked == [1]

    def test_click_outside(self) -> None:
        clicked = []
        _, hits = draw(vstack(Clickable(text("button"), lambda: clicked.append(1)), Spacer()))
        assert hits.dispatch(click(2, 2)) == []
        assert clicked == []

    def test_clickable_ignores_non_clicks(self) -> None:
        clicked = []
        _, hits = draw(Clickable(text("button"), lambda: clicked.append(1)))
        hits.dispatch(MouseEvent(1, 0, MouseButton.LEFT, MouseEventType.PRESS))
        assert clicked == []

    def test_innermost_wins(self) -> None:
        clicked = []
        inner = Clickable(text("in"), lambda: clicked.append("inner"))
        outer = Clickable(vstack(inner, Spacer()), lambda: clicked.append("outer"))
        _, hits = draw(outer)
        hits.dispatch(click(0, 0))
        hits.dispatch(click(0, 2))
        assert clicked == ["inner", "outer"]

    def test_handler_result_becomes_cmds(self) -> None:
        def cmd() -> None:
            return None

        _, hits = draw(Clickable(text("b"), lambda: cmd))
        assert hits.dispatch(click(0, 0)) == [cmd]

    def test_mouse_region_gets_local_coordinates(self) -> None:
        events = []
        region = MouseRegion(Canvas(lambda f, r: None), events.append)
        _, hits = draw(hstack(text("abc"), region))
        hits.dispatch(MouseEvent(5, 1, MouseButton.NONE, MouseEventType.MOVE))
        assert len(events) == 1
        assert (events[0].x, events[0].y) == (2, 1)
        assert events[0].type is MouseEventType.MOVE

    def test_regions_are_clipped(self) -> None:
        _, hits = draw(Bordered(Clickable(text("x" * 20), lambda: None)))
        assert hits.regions[0].rect == Rect(1, 1, 8, 1)

    def test_empty_region_not_registered(self) -> None:
        _, hits = draw(vstack(text("a"), text("b"), text("c"), Clickable(text("d"), lambda: None)))
        assert len(hits) == 0

    def test_find_prefers_last_registered(self) -> None:
        hits = HitMap()
        first = HitRegion(Rect(0, 0, 5, 5), lambda: None)
        second = HitRegion(Rect(0, 0, 5, 5), lambda: None)
        hits.add(first)
        hits.add(second)
        assert hits.find(click(1, 1)) is second


class TestCmdList:
    def test_normalization(self) -> None:
        a, b = object(), object()
        assert as_cmd_list(None) == []
        assert as_cmd_list(a) == [a]
        assert as_cmd_list([a, None, b]) == [a, b]
