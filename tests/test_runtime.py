"""Tests for the event loop, command scheduling and teardown."""

import io
import threading
from dataclasses import dataclass

import pytest

from celltui.app.commands import after, batch, emit, quit, sequence
from celltui.app.config import RuntimeConfig
from celltui.app.events import ErrorEvent, QuitEvent, ResizeEvent, TickEvent
from celltui.app.runtime import Runtime, State
from celltui.render.frame import Screen
from celltui.terminal.device import Terminal
from celltui.terminal.keys import Key, KeyEvent, MouseButton, MouseEvent, MouseEventType
from celltui.view.draw import render_view
from celltui.view.nodes import Clickable, Spacer, text, vstack

NO_TICKS = RuntimeConfig(fps=0)


@dataclass(frozen=True)
class Ping:
    n: int


class Recorder:
    """App that records events and asks react() what to do."""

    def __init__(self) -> None:
        self.events = []
        self.destroyed = False

    def view(self):
        return text("hello")

    def handle_event(self, event):
        self.events.append(event)
        return self.react(event)

    def react(self, event):
        return None

    def destroy(self) -> None:
        self.destroyed = True

    def of_type(self, kind) -> list:
        return [e for e in self.events if isinstance(e, kind)]


def run_app(app, terminal: Terminal, data=None, config: RuntimeConfig = NO_TICKS) -> Runtime:
    source = io.BytesIO(data) if data is not None else None
    runtime = Runtime(app, terminal=terminal, config=config, input=source)
    runtime.run()
    return runtime


class TestLifecycle:
    """Start, stop and terminal restoration."""

    def test_ctrl_c_quits(self, terminal: Terminal, output: io.StringIO) -> None:
        class App(Recorder):
            def react(self, event):
                if isinstance(event, KeyEvent) and event.key is Key.CTRL_C:
                    return quit()

        app = App()
        runtime = run_app(app, terminal, b'ab\x03')
        keys = app.of_type(KeyEvent)
        assert [k.rune for k in keys[:2]] == ['a', 'b']
        assert keys[2].key is Key.CTRL_C
        assert runtime.state is State.STOPPED
        assert app.destroyed
        assert not terminal.raw_mode_enabled
        text_out = output.getvalue()
        assert '\x1b[?1049l' in text_out
        assert '\x1b[?25h' in text_out

    def test_first_event_is_resize(self, terminal: Terminal) -> None:
        class App(Recorder):
            def react(self, event):
                return quit()

        app = App()
        run_app(app, terminal)
        assert app.events == [ResizeEvent(80, 24)]

    def test_renders_view(self, terminal: Terminal, output: io.StringIO) -> None:
        class App(Recorder):
            def react(self, event):
                if isinstance(event, ResizeEvent):
                    return after(0.2, QuitEvent)

        runtime = run_app(App(), terminal)
        assert runtime.frames == 1
        assert runtime.screen.next.text()[0].startswith("hello")
        assert "hello" in output.getvalue()

    def test_handler_exception_restores_terminal(self, terminal: Terminal, output: io.StringIO) -> None:
        class App(Recorder):
            def react(self, event):
                raise RuntimeError("boom")

        app = App()
        with pytest.raises(RuntimeError, match="boom"):
            run_app(app, terminal)
        assert app.destroyed
        assert not terminal.raw_mode_enabled
        assert not terminal.alternate_screen_enabled
        assert output.getvalue().endswith('\x1b[?1049l')

    def test_view_exception_propagates(self, terminal: Terminal) -> None:
        class App(Recorder):
            def view(self):
                raise ValueError("bad view")

        with pytest.raises(ValueError, match="bad view"):
            run_app(App(), terminal)

    def test_stop_from_other_thread(self, terminal: Terminal) -> None:
        runtime = Runtime(Recorder(), terminal=terminal, config=NO_TICKS)
        timer = threading.Timer(0.1, runtime.stop)
        timer.start()
        try:
            runtime.run()
        finally:
            timer.cancel()
        assert runtime.state is State.STOPPED

    def test_send(self, terminal: Terminal) -> None:
        class App(Recorder):
            def react(self, event):
                if isinstance(event, Ping):
                    return quit()

        app = App()
        runtime = Runtime(app, terminal=terminal, config=NO_TICKS)
        runtime.send(Ping(7))
        runtime.run()
        assert app.of_type(Ping) == [Ping(7)]


class TestInputEnd:
    """End of input stream."""

    def test_eof_without_handler_stops(self, terminal: Terminal) -> None:
        class ViewOnly:
            def view(self):
                return text("x")

        runtime = run_app(ViewOnly(), terminal, b'')
        assert runtime.state is State.STOPPED

    def test_eof_delivered_as_error_event(self, terminal: Terminal) -> None:
        class App(Recorder):
            def react(self, event):
                if isinstance(event, ErrorEvent):
                    return quit()

        app = App()
        run_app(app, terminal, b'x')
        [error] = app.of_type(ErrorEvent)
        assert isinstance(error.error, EOFError)
        assert error.cause == "input reader"
        assert app.of_type(KeyEvent) == [KeyEvent(rune='x')]


class TestCommands:
    """Commands scheduled by handlers."""

    def test_worker_result_is_delivered(self, terminal: Terminal) -> None:
        class App(Recorder):
            def react(self, event):
                if isinstance(event, ResizeEvent):
                    return lambda: Ping(1)
                if isinstance(event, Ping):
                    return quit()

        app = App()
        run_app(app, terminal)
        assert app.of_type(Ping) == [Ping(1)]

    def test_failing_command_becomes_error_event(self, terminal: Terminal) -> None:
        def explode():
            raise KeyError("missing")

        class App(Recorder):
            def react(self, event):
                if isinstance(event, ResizeEvent):
                    return explode
                if isinstance(event, ErrorEvent):
                    return quit()

        app = App()
        run_app(app, terminal)
        [error] = app.of_type(ErrorEvent)
        assert isinstance(error.error, KeyError)
        assert error.cause == "command"

    def test_batch(self, terminal: Terminal) -> None:
        class App(Recorder):
            def react(self, event):
                if isinstance(event, ResizeEvent):
                    return batch(lambda: Ping(1), None, lambda: Ping(2))
                if len(self.of_type(Ping)) == 2:
                    return quit()

        app = App()
        run_app(app, terminal)
        assert sorted(p.n for p in app.of_type(Ping)) == [1, 2]

    def test_sequence_keeps_order(self, terminal: Terminal) -> None:
        order = []

        def step(n):
            def run():
                order.append(n)
                return Ping(n)
            return run

        class App(Recorder):
            def react(self, event):
                if isinstance(event, ResizeEvent):
                    return sequence(step(1), step(2), step(3))
                if event == Ping(3):
                    return quit()

        app = App()
        run_app(app, terminal)
        assert order == [1, 2, 3]
        assert app.of_type(Ping) == [Ping(1), Ping(2), Ping(3)]

    def test_init_and_emit(self, terminal: Terminal) -> None:
        class App(Recorder):
            def init(self):
                return [emit(Ping(0))]

            def react(self, event):
                if event == Ping(0):
                    return [emit(Ping(1))]
                if event == Ping(1):
                    return quit()

        app = App()
        run_app(app, terminal)
        assert app.of_type(Ping) == [Ping(0), Ping(1)]

    def test_quit_command_in_list_stops_immediately(self, terminal: Terminal) -> None:
        ran = []

        class App(Recorder):
            def react(self, event):
                return [quit(), lambda: ran.append(1)]

        run_app(App(), terminal)
        assert ran == []

    def test_ticks(self, terminal: Terminal) -> None:
        class App(Recorder):
            def react(self, event):
                if isinstance(event, TickEvent):
                    return quit()

        app = App()
        run_app(app, terminal, config=RuntimeConfig(fps=50))
        assert app.of_type(TickEvent)[0].frame == 1


class TestResize:
    def test_resize_reallocates_screen(self, terminal: Terminal) -> None:
        class App(Recorder):
            def react(self, event):
                if event == ResizeEvent(80, 24):
                    terminal.set_size(40, 10)
                elif event == ResizeEvent(40, 10):
                    return after(0.1, QuitEvent)

        runtime = run_app(App(), terminal)
        assert (runtime.screen.width, runtime.screen.height) == (40, 10)


class TestClickSynthesis:
    """Press and release at one cell produce a click."""

    def setup_runtime(self, terminal: Terminal):
        clicks = []

        class App(Recorder):
            def view(self):
                return vstack(Clickable(text("button"), lambda: clicks.append(1)), Spacer())

        app = App()
        runtime = Runtime(app, terminal=terminal, config=NO_TICKS)
        runtime.hits = render_view(app.view(), Screen(10, 3, io.StringIO()).begin_frame())
        return runtime, app, clicks

    def test_click_between_press_and_release(self, terminal: Terminal) -> None:
        runtime, app, clicks = self.setup_runtime(terminal)
        runtime._handle(MouseEvent(2, 0, MouseButton.LEFT, MouseEventType.PRESS))
        runtime._handle(MouseEvent(2, 0, MouseButton.NONE, MouseEventType.RELEASE))
        types = [e.type for e in app.of_type(MouseEvent)]
        assert types == [MouseEventType.PRESS, MouseEventType.CLICK, MouseEventType.RELEASE]
        assert app.of_type(MouseEvent)[1].button is MouseButton.LEFT
        assert clicks == [1]

    def test_release_elsewhere_is_not_a_click(self, terminal: Terminal) -> None:
        runtime, app, clicks = self.setup_runtime(terminal)
        runtime._handle(MouseEvent(2, 0, MouseButton.LEFT, MouseEventType.PRESS))
        runtime._handle(MouseEvent(3, 0, MouseButton.LEFT, MouseEventType.RELEASE))
        types = [e.type for e in app.of_type(MouseEvent)]
        assert types == [MouseEventType.PRESS, MouseEventType.RELEASE]
        assert clicks == []
