"""Tests for the bundled demo applications."""

import io

from celltui.app.commands import QUIT, Cmd
from celltui.app.events import ErrorEvent, ResizeEvent, TickEvent
from celltui.cli.demo import ClickEvent, DemoApp, KeysApp, describe, is_quit_key
from celltui.render.frame import Screen
from celltui.terminal.keys import Key, KeyEvent, MouseButton, MouseEvent, MouseEventType, PasteEvent
from celltui.view.draw import render_view


def draw(app, width: int = 80, height: int = 24):
    output = io.StringIO()
    screen = Screen(width, height, output)
    frame = screen.begin_frame()
    hits = render_view(app.view(), frame)
    screen.end_frame(frame)
    return screen, hits, output.getvalue()


class TestQuitKeys:
    def test_quit_keys(self) -> None:
        assert is_quit_key(KeyEvent(key=Key.CTRL_C, rune='c', ctrl=True))
        assert is_quit_key(KeyEvent(rune='q'))
        assert not is_quit_key(KeyEvent(rune='q', alt=True))
        assert not is_quit_key(ResizeEvent(1, 1))


class TestDemoApp:
    def test_renders_header_and_panels(self) -> None:
        app = DemoApp()
        app.handle_event(ResizeEvent(80, 24))
        screen, _, written = draw(app)
        rows = screen.next.text()
        assert rows[0].startswith(" celltui demo ")
        assert "80x24" in rows[0]
        assert any("clicked 0" in row for row in rows)
        assert any("canvas" in row for row in rows)
        assert '\x1b]8;;https://pypi.org/project/celltui/' in written

    def test_small_terminal_does_not_fail(self) -> None:
        draw(DemoApp(), width=12, height=4)

    def test_button_click(self) -> None:
        app = DemoApp()
        _, hits, _ = draw(app)
        button = next(r for r in hits.regions if r.clicks_only)
        cmds = hits.dispatch(
            MouseEvent(button.rect.x + 1, button.rect.y + 1, MouseButton.LEFT, MouseEventType.CLICK)
        )
        assert len(cmds) == 1
        app.handle_event(cmds[0]())
        assert app.clicks == 1
        screen, _, _ = draw(app)
        assert any("clicked 1" in row for row in screen.next.text())

    def test_pointer_region(self) -> None:
        app = DemoApp()
        _, hits, _ = draw(app)
        region = next(r for r in hits.regions if not r.clicks_only)
        hits.dispatch(MouseEvent(region.rect.x + 3, region.rect.y + 2, MouseButton.NONE, MouseEventType.MOVE))
        assert app.pointer == (3, 2)
        screen, _, _ = draw(app)
        assert screen.next.get(region.rect.x + 3, region.rect.y + 2).char == "●"

    def test_keys(self) -> None:
        app = DemoApp()
        start = app.border_index
        assert app.handle_event(KeyEvent(key=Key.TAB)) is None
        assert app.border_index == (start + 1) % len(app.border_names)
        cmd = app.handle_event(KeyEvent(rune='+'))
        assert isinstance(cmd, Cmd)
        assert cmd() == ClickEvent()
        assert app.handle_event(KeyEvent(rune='q')) is QUIT
        assert app.last_key == "'+'"

    def test_ticks_and_errors(self) -> None:
        app = DemoApp()
        app.handle_event(TickEvent(0.0, 5))
        assert app.ticks == 5
        assert app.handle_event(ErrorEvent(EOFError(), "input reader")) is QUIT


class TestKeysApp:
    def test_history(self) -> None:
        app = KeysApp(history=2)
        app.handle_event(ResizeEvent(80, 24))
        for rune in "abc":
            app.handle_event(KeyEvent(rune=rune))
        assert list(app.events) == ["key    'b'", "key    'c'"]
        screen, _, _ = draw(app)
        rows = screen.next.text()
        assert rows[1].startswith("│key    'c'")
        assert rows[2].startswith("│key    'b'")

    def test_empty_prompt(self) -> None:
        screen, _, _ = draw(KeysApp())
        assert "press keys" in screen.next.text()[1]

    def test_describe(self) -> None:
        mouse = MouseEvent(3, 4, MouseButton.LEFT, MouseEventType.PRESS, ctrl=True)
        assert describe(mouse).startswith("mouse  press   left")
        assert describe(mouse).endswith("(3,4) C")
        assert describe(PasteEvent("hi")).startswith("paste  ")
