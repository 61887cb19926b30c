"""Tests for terminal modes, restoration and resize notification."""

import io
import os
import queue
import signal
import struct
import threading
import time

import pytest

from celltui.errors import NotATerminalError
from celltui.terminal.device import Terminal, TerminalSize


class TestConstruction:
    def test_pipe_is_not_a_terminal(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            with pytest.raises(NotATerminalError):
                Terminal(read_fd, io.StringIO())
        finally:
            os.close(read_fd)
            os.close(write_fd)

    def test_headless_size(self, terminal: Terminal) -> None:
        assert terminal.size() == TerminalSize(80, 24)
        assert terminal.is_headless
        assert terminal.input_fd == -1


class TestSession:
    """Paired enable/disable of terminal modes."""

    def test_session_enables_and_restores(self, terminal: Terminal, output: io.StringIO) -> None:
        with terminal.session(mouse=True):
            assert terminal.raw_mode_enabled
            assert terminal.alternate_screen_enabled
            assert terminal.cursor_hidden
            assert terminal.mouse_enabled
            assert terminal.bracketed_paste_enabled
            enabled = output.getvalue()

        assert enabled == (
            '\x1b[?1049h\x1b[2J\x1b[H'
            '\x1b[?25l'
            '\x1b[?1000h\x1b[?1002h\x1b[?1006h'
            '\x1b[?2004h'
        )
        disabled = output.getvalue()[len(enabled):]
        assert disabled == (
            '\x1b[?2004l'
            '\x1b[?1006l\x1b[?1002l\x1b[?1000l'
            '\x1b[0m'
            '\x1b[?25h'
            '\x1b[?1049l'
        )
        assert not terminal.raw_mode_enabled
        assert not terminal.alternate_screen_enabled
        assert not terminal.mouse_enabled

    def test_optional_modes_stay_off(self, terminal: Terminal, output: io.StringIO) -> None:
        with terminal.session(alt_screen=False, bracketed_paste=False):
            pass
        assert '\x1b[?1049' not in output.getvalue()
        assert '\x1b[?2004' not in output.getvalue()
        assert '\x1b[?1000' not in output.getvalue()

    def test_restores_on_exception(self, terminal: Terminal, output: io.StringIO) -> None:
        with pytest.raises(KeyError):
            with terminal.session():
                raise KeyError("x")
        assert not terminal.raw_mode_enabled
        assert output.getvalue().endswith('\x1b[?1049l')

    def test_restore_is_idempotent(self, terminal: Terminal, output: io.StringIO) -> None:
        with terminal.session():
            pass
        written = output.getvalue()
        terminal.restore()
        assert output.getvalue() == written + '\x1b[0m'

    def test_raw_mode_context(self, terminal: Terminal) -> None:
        with terminal.raw_mode():
            assert terminal.raw_mode_enabled
        assert not terminal.raw_mode_enabled


class TestResize:
    """Resize callbacks on a headless terminal."""

    def test_set_size_notifies(self, terminal: Terminal) -> None:
        seen = []
        terminal.on_resize(lambda w, h: seen.append((w, h)))
        terminal.set_size(100, 40)
        assert seen == [(100, 40)]
        assert terminal.size() == TerminalSize(100, 40)

    def test_same_size_is_not_reported_twice(self, terminal: Terminal) -> None:
        seen = []
        terminal.on_resize(lambda w, h: seen.append((w, h)))
        terminal.set_size(100, 40)
        terminal.set_size(100, 40)
        assert seen == [(100, 40)]

    def test_unsubscribe(self, terminal: Terminal) -> None:
        seen = []
        unsubscribe = terminal.on_resize(lambda w, h: seen.append((w, h)))
        unsubscribe()
        terminal.set_size(100, 40)
        assert seen == []

    def test_watch_and_stop(self, terminal: Terminal) -> None:
        terminal.watch_resize()
        terminal.watch_resize()
        terminal.stop_watch_resize()
        terminal.stop_watch_resize()


@pytest.mark.skipif(
    not hasattr(os, "openpty") or not hasattr(signal, "SIGWINCH"),
    reason="needs a pseudo-terminal and SIGWINCH",
)
class TestSigwinch:
    """Resize delivery through a real pseudo-terminal."""

    @staticmethod
    def set_winsize(fd: int, cols: int, rows: int) -> None:
        import fcntl
        import termios

        fcntl.ioctl(fd, termios.TIOCSWINSZ, struct.pack("HHHH", rows, cols, 0, 0))

    def test_callbacks_run_outside_the_signal_handler(self) -> None:
        master, slave = os.openpty()
        self.set_winsize(slave, 80, 24)
        terminal = Terminal(slave, io.StringIO())
        state_lock = threading.Lock()
        seen: queue.Queue = queue.Queue()

        def on_resize(width: int, height: int) -> None:
            acquired = state_lock.acquire(timeout=1)
            if acquired:
                state_lock.release()
            seen.put((width, height, threading.current_thread(), acquired))

        terminal.on_resize(on_resize)
        terminal.watch_resize()
        try:
            self.set_winsize(slave, 100, 30)
            # The main thread holds the lock while the signal arrives.
            with state_lock:
                os.kill(os.getpid(), signal.SIGWINCH)
                time.sleep(0.05)
            width, height, thread, acquired = seen.get(timeout=2)
        finally:
            terminal.stop_watch_resize()
            os.close(slave)
            os.close(master)

        assert (width, height) == (100, 30)
        assert thread is not threading.main_thread()
        assert acquired

    def test_stop_restores_previous_handler(self) -> None:
        master, slave = os.openpty()
        try:
            previous = signal.getsignal(signal.SIGWINCH)
            terminal = Terminal(slave, io.StringIO())
            terminal.watch_resize()
            assert signal.getsignal(signal.SIGWINCH) == terminal._handle_sigwinch
            terminal.stop_watch_resize()
            assert signal.getsignal(signal.SIGWINCH) == previous
            assert terminal._wakeup_fd is None
        finally:
            os.close(slave)
            os.close(master)
