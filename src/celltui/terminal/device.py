"""Low-level terminal operations - raw mode, screen modes, size and resize."""

from __future__ import annotations

import logging
import os
import signal
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, TextIO

from celltui.errors import NotATerminalError

logger = logging.getLogger(__name__)

ResizeCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class TerminalSize:
    """Terminal dimensions in cells."""
    width: int
    height: int


DEFAULT_SIZE = TerminalSize(80, 24)


class Terminal:
    """
    Terminal device abstraction for full-screen applications.

    Every enabling operation has a paired disabling one, and ``restore()``
    undoes whatever is still enabled in reverse order. Use ``session()`` (or
    the narrower ``raw_mode()`` / ``alternate_screen()``) to get the pairs
    run on every exit path.
    """

    RESIZE_POLL_INTERVAL = 0.25

    def __init__(self, input_fd: Optional[int] = None, output: Optional[TextIO] = None) -> None:
        if input_fd is None:
            try:
                input_fd = sys.stdin.fileno()
            except (AttributeError, OSError, ValueError):
                raise NotATerminalError(-1) from None
        self.input_fd = input_fd
        if not os.isatty(self.input_fd):
            raise NotATerminalError(self.input_fd)
        self.output = output if output is not None else sys.stdout
        self._fixed_size: Optional[TerminalSize] = None
        self._init_state()

    @classmethod
    def headless(cls, width: int = 80, height: int = 24, output: Optional[TextIO] = None) -> "Terminal":
        """
        Terminal with a fixed size and no input device.

        Raw mode only toggles a flag; escape sequences still go to
        ``output``. Used for tests and for piped output.
        """
        term = cls.__new__(cls)
        term.input_fd = -1
        term.output = output if output is not None else sys.stdout
        term._fixed_size = TerminalSize(width, height)
        term._init_state()
        return term

    def _init_state(self) -> None:
        self._saved_attrs: Optional[list] = None
        self.raw_mode_enabled = False
        self.alternate_screen_enabled = False
        self.cursor_hidden = False
        self.mouse_enabled = False
        self.bracketed_paste_enabled = False
        self._callbacks: list[Optional[ResizeCallback]] = []
        self._callback_lock = threading.Lock()
        self._last_size: Optional[TerminalSize] = None
        self._watching = False
        self._previous_handler: object = None
        self._stop_polling: Optional[threading.Event] = None
        self._poll_thread: Optional[threading.Thread] = None
        self._wakeup_fd: Optional[int] = None

    @property
    def is_headless(self) -> bool:
        return self._fixed_size is not None

    # -- output ----------------------------------------------------------

    def write(self, text: str) -> None:
        """Write text to the terminal and flush."""
        self.output.write(text)
        self.output.flush()

    # -- size ------------------------------------------------------------

    def size(self) -> TerminalSize:
        """Get current terminal dimensions."""
        if self._fixed_size is not None:
            return self._fixed_size
        try:
            size = os.get_terminal_size(self.output.fileno())
        except (OSError, ValueError, AttributeError):
            try:
                size = os.get_terminal_size(self.input_fd)
            except OSError:
                return DEFAULT_SIZE
        if size.columns <= 0 or size.lines <= 1:
            return DEFAULT_SIZE
        return TerminalSize(size.columns, size.lines)

    def set_size(self, width: int, height: int) -> None:
        """Change a headless terminal's size and notify resize listeners."""
        if self._fixed_size is None:
            raise RuntimeError("set_size is only available on headless terminals")
        self._fixed_size = TerminalSize(width, height)
        self._check_size()

    # -- raw mode --------------------------------------------------------

    def enable_raw_mode(self) -> None:
        """Disable canonical line buffering and echo."""
        if self.raw_mode_enabled:
            return
        if not self.is_headless:
            import termios
            import tty
            self._saved_attrs = termios.tcgetattr(self.input_fd)
            tty.setraw(self.input_fd)
        self.raw_mode_enabled = True

    def disable_raw_mode(self) -> None:
        """Restore the terminal attributes saved by enable_raw_mode."""
        if not self.raw_mode_enabled:
            return
        self.raw_mode_enabled = False
        if self._saved_attrs is not None:
            import termios
            termios.tcsetattr(self.input_fd, termios.TCSADRAIN, self._saved_attrs)
            self._saved_attrs = None

    # -- screen modes ----------------------------------------------------

    def enable_alternate_screen(self) -> None:
        """Switch to the alternate screen buffer (preserves scrollback)."""
        if not self.alternate_screen_enabled:
            self.write('\x1b[?1049h\x1b[2J\x1b[H')
            self.alternate_screen_enabled = True

    def disable_alternate_screen(self) -> None:
        if self.alternate_screen_enabled:
            self.write('\x1b[?1049l')
            self.alternate_screen_enabled = False

    def hide_cursor(self) -> None:
        """Hide the cursor."""
        self.write('\x1b[?25l')
        self.cursor_hidden = True

    def show_cursor(self) -> None:
        """Show the cursor."""
        self.write('\x1b[?25h')
        self.cursor_hidden = False

    def enable_mouse(self) -> None:
        """Report presses, releases and drags in SGR extended format."""
        if not self.mouse_enabled:
            self.write('\x1b[?1000h\x1b[?1002h\x1b[?1006h')
            self.mouse_enabled = True

    def disable_mouse(self) -> None:
        if self.mouse_enabled:
            self.write('\x1b[?1006l\x1b[?1002l\x1b[?1000l')
            self.mouse_enabled = False

    def enable_bracketed_paste(self) -> None:
        if not self.bracketed_paste_enabled:
            self.write('\x1b[?2004h')
            self.bracketed_paste_enabled = True

    def disable_bracketed_paste(self) -> None:
        if self.bracketed_paste_enabled:
            self.write('\x1b[?2004l')
            self.bracketed_paste_enabled = False

    def reset_style(self) -> None:
        """Reset all SGR attributes."""
        self.write('\x1b[0m')

    # -- resize notification ---------------------------------------------

    def on_resize(self, callback: ResizeCallback) -> Callable[[], None]:
        """
        Register a callback receiving (width, height) after each resize.

        Returns a function that unregisters the callback.
        """
        with self._callback_lock:
            self._callbacks.append(callback)
            index = len(self._callbacks) - 1

        def unsubscribe() -> None:
            with self._callback_lock:
                if index < len(self._callbacks):
                    self._callbacks[index] = None

        return unsubscribe

    def watch_resize(self) -> None:
        """
        Start delivering resize notifications.

        Uses SIGWINCH when called on the main thread of a POSIX process,
        otherwise polls the size from a background thread. The signal handler
        only wakes a watcher thread through a pipe; callbacks never run inside
        the handler.
        """
        if self._watching:
            return
        self._watching = True
        self._last_size = self.size()
        sigwinch = getattr(signal, "SIGWINCH", None)
        if (
            sigwinch is not None
            and not self.is_headless
            and threading.current_thread() is threading.main_thread()
        ):
            read_fd, write_fd = os.pipe()
            os.set_blocking(write_fd, False)
            self._wakeup_fd = write_fd
            self._stop_polling = threading.Event()
            self._poll_thread = threading.Thread(
                target=self._wait_for_wakeup, args=(read_fd, self._stop_polling),
                name="celltui-resize", daemon=True,
            )
            self._poll_thread.start()
            self._previous_handler = signal.signal(sigwinch, self._handle_sigwinch)
            logger.debug("watching resize via SIGWINCH")
            return

        self._stop_polling = threading.Event()
        self._poll_thread = threading.Thread(target=self._poll_size, name="celltui-resize", daemon=True)
        self._poll_thread.start()
        logger.debug("watching resize by polling every %.2fs", self.RESIZE_POLL_INTERVAL)

    def stop_watch_resize(self) -> None:
        """Stop resize notifications and restore any previous signal handler."""
        if not self._watching:
            return
        self._watching = False
        if self._previous_handler is not None:
            signal.signal(signal.SIGWINCH, self._previous_handler)
            self._previous_handler = None
        if self._stop_polling is not None:
            self._stop_polling.set()
            self._stop_polling = None
            self._poll_thread = None
        if self._wakeup_fd is not None:
            self._wake()
            os.close(self._wakeup_fd)
            self._wakeup_fd = None

    def _handle_sigwinch(self, signum: int, frame: object) -> None:
        self._wake()

    def _wake(self) -> None:
        fd = self._wakeup_fd
        if fd is None:
            return
        try:
            os.write(fd, b"\0")
        except BlockingIOError:
            # A full pipe already has a wakeup pending.
            pass

    def _wait_for_wakeup(self, read_fd: int, stop: threading.Event) -> None:
        try:
            while True:
                try:
                    data = os.read(read_fd, 64)
                except InterruptedError:
                    continue
                if not data or stop.is_set():
                    return
                self._check_size()
        finally:
            os.close(read_fd)

    def _poll_size(self) -> None:
        stop = self._stop_polling
        while stop is not None and not stop.wait(self.RESIZE_POLL_INTERVAL):
            self._check_size()

    def _check_size(self) -> None:
        size = self.size()
        if size == self._last_size:
            return
        self._last_size = size
        logger.debug("terminal resized to %dx%d", size.width, size.height)
        with self._callback_lock:
            callbacks = [cb for cb in self._callbacks if cb is not None]
        for callback in callbacks:
            callback(size.width, size.height)

    # -- scoped acquisition ----------------------------------------------

    def restore(self) -> None:
        """Undo every enabled mode in reverse order of setup. Idempotent."""
        self.stop_watch_resize()
        try:
            self.disable_bracketed_paste()
            self.disable_mouse()
            self.reset_style()
            if self.cursor_hidden:
                self.show_cursor()
            self.disable_alternate_screen()
        finally:
            self.disable_raw_mode()

    @contextmanager
    def raw_mode(self) -> Iterator[None]:
        """Context manager for raw terminal mode."""
        self.enable_raw_mode()
        try:
            yield
        finally:
            self.disable_raw_mode()

    @contextmanager
    def alternate_screen(self) -> Iterator[None]:
        """Use alternate screen buffer (preserves scrollback)."""
        self.enable_alternate_screen()
        try:
            yield
        finally:
            self.disable_alternate_screen()

    @contextmanager
    def session(
        self,
        alt_screen: bool = True,
        mouse: bool = False,
        bracketed_paste: bool = True,
    ) -> Iterator["Terminal"]:
        """Full TUI mode: raw input, alternate screen, hidden cursor."""
        try:
            self.enable_raw_mode()
            if alt_screen:
                self.enable_alternate_screen()
            self.hide_cursor()
            if mouse:
                self.enable_mouse()
            if bracketed_paste:
                self.enable_bracketed_paste()
            yield self
        finally:
            self.restore()
