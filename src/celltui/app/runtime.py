"""
Event loop: one consumer thread, one queue, scoped terminal teardown.

Producers (input reader, resize watcher, ticker, command workers) only
ever put events on the queue. The loop thread owns the application, the
view tree and the screen.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from enum import Enum, auto
from typing import Any, BinaryIO, Callable, Optional, Protocol, Union

from celltui.app.commands import QUIT, Cmd
from celltui.app.config import RuntimeConfig
from celltui.app.events import BatchEvent, ErrorEvent, QuitEvent, ResizeEvent, TickEvent
from celltui.render.frame import Screen
from celltui.terminal.decoder import InputDecoder
from celltui.terminal.device import Terminal
from celltui.terminal.keys import MouseEvent, MouseEventType
from celltui.view.draw import HitMap, as_cmd_list, render_view
from celltui.view.nodes import View

logger = logging.getLogger(__name__)

_STOP = object()


class State(Enum):
    IDLE = auto()
    DISPATCHING = auto()
    RENDERING = auto()
    STOPPED = auto()


class Application(Protocol):
    """
    What the runtime needs from an application.

    Only ``view()`` is required. Optional methods, looked up at run time:

    - ``handle_event(event)`` returning a Cmd, a list of Cmds, or None
    - ``init()`` returning initial Cmds
    - ``destroy()`` called once after teardown, even on failure
    """

    def view(self) -> View:
        ...


class Runtime:
    """Drives an Application: input, commands, rendering and teardown."""

    def __init__(
        self,
        app: Application,
        terminal: Optional[Terminal] = None,
        config: Optional[RuntimeConfig] = None,
        input: Union[int, BinaryIO, None] = None,
    ) -> None:
        self.app = app
        self.config = config if config is not None else RuntimeConfig()
        self.terminal = terminal if terminal is not None else Terminal()
        if input is None and self.terminal.input_fd >= 0:
            input = self.terminal.input_fd
        self.decoder: Optional[InputDecoder] = None
        if input is not None:
            self.decoder = InputDecoder(
                input,
                escape_timeout=self.config.escape_timeout,
                paste_tab_width=self.config.paste_tab_width,
            )

        self.state = State.IDLE
        self.screen: Optional[Screen] = None
        self.hits = HitMap()
        self.frames = 0
        self._size = (0, 0)
        self._queue: queue.Queue = queue.Queue()
        self._executor: Optional[ThreadPoolExecutor] = None
        self._press: Optional[MouseEvent] = None
        self._ticker_stop = threading.Event()
        self._unsubscribe_resize: Optional[Callable[[], None]] = None

    # -- thread-safe entry points ---------------------------------------

    def send(self, event: Any) -> None:
        """Post an event from any thread."""
        self._queue.put(event)

    def stop(self) -> None:
        """Ask the loop to exit after the events already queued."""
        self._queue.put(_STOP)

    # -- lifecycle -------------------------------------------------------

    def run(self) -> None:
        """
        Run until quit. Blocks the calling thread.

        Any exception from the application, the view or rendering leaves
        the terminal session first (restoring the terminal) and then
        propagates to the caller.
        """
        cfg = self.config
        logger.info("runtime starting (fps=%d, mouse=%s)", cfg.fps, cfg.mouse)
        try:
            init = getattr(self.app, "init", None)
            initial = as_cmd_list(init()) if init is not None else []
            with self.terminal.session(
                alt_screen=cfg.alt_screen,
                mouse=cfg.mouse,
                bracketed_paste=cfg.bracketed_paste,
            ):
                size = self.terminal.size()
                self._size = (size.width, size.height)
                self.screen = Screen(size.width, size.height, self.terminal.output)
                self._executor = ThreadPoolExecutor(
                    max_workers=cfg.max_workers, thread_name_prefix="celltui-cmd"
                )
                try:
                    self._queue.put(ResizeEvent(size.width, size.height))
                    self._start_producers()
                    if self._schedule_all(initial):
                        self._loop()
                finally:
                    self._ticker_stop.set()
                    if self._unsubscribe_resize is not None:
                        self._unsubscribe_resize()
                    self._executor.shutdown(wait=False)
        finally:
            self.state = State.STOPPED
            destroy = getattr(self.app, "destroy", None)
            if destroy is not None:
                destroy()
            logger.info("runtime stopped after %d frames", self.frames)

    def _start_producers(self) -> None:
        self._unsubscribe_resize = self.terminal.on_resize(
            lambda w, h: self._queue.put(ResizeEvent(w, h))
        )
        self.terminal.watch_resize()

        if self.decoder is not None:
            threading.Thread(target=self._read_input, name="celltui-input", daemon=True).start()

        interval = self.config.tick_interval
        if interval is not None:
            threading.Thread(
                target=self._tick, args=(interval,), name="celltui-ticker", daemon=True
            ).start()

    def _read_input(self) -> None:
        assert self.decoder is not None
        while True:
            try:
                event = self.decoder.read_event()
            except (EOFError, OSError) as exc:
                logger.debug("input reader stopping: %s", exc)
                self._queue.put(ErrorEvent(exc, "input reader"))
                return
            self._queue.put(event)

    def _tick(self, interval: float) -> None:
        frame = 0
        while not self._ticker_stop.wait(interval):
            frame += 1
            self._queue.put(TickEvent(time.time(), frame))

    # -- loop ------------------------------------------------------------

    def _loop(self) -> None:
        while True:
            self.state = State.IDLE
            event = self._queue.get()
            self.state = State.DISPATCHING
            if not self._handle(event):
                return
            while True:
                try:
                    event = self._queue.get_nowait()
                except queue.Empty:
                    break
                if not self._handle(event):
                    return
            self.state = State.RENDERING
            self._render()

    def _render(self) -> None:
        assert self.screen is not None
        frame = self.screen.begin_frame(*self._size)
        frame.fill(' ')
        self.hits = render_view(self.app.view(), frame)
        self.screen.end_frame(frame)
        self.frames += 1

    def _handle(self, event: Any) -> bool:
        """Process one event; False means the loop should stop."""
        if event is _STOP or isinstance(event, QuitEvent):
            return False
        if isinstance(event, BatchEvent):
            return all(self._handle(e) for e in event.events)
        if isinstance(event, ResizeEvent):
            self._size = (event.width, event.height)
        elif isinstance(event, MouseEvent):
            return self._handle_mouse(event)
        return self._deliver(event)

    def _handle_mouse(self, event: MouseEvent) -> bool:
        if event.type is MouseEventType.PRESS:
            self._press = event
        elif event.type is MouseEventType.RELEASE:
            press, self._press = self._press, None
            if press is not None and (press.x, press.y) == (event.x, event.y):
                click = replace(event, type=MouseEventType.CLICK, button=press.button)
                if not self._dispatch_mouse(click):
                    return False
        return self._dispatch_mouse(event)

    def _dispatch_mouse(self, event: MouseEvent) -> bool:
        if not self._schedule_all(self.hits.dispatch(event)):
            return False
        return self._deliver(event)

    def _deliver(self, event: Any) -> bool:
        handler = getattr(self.app, "handle_event", None)
        if handler is None:
            if isinstance(event, ErrorEvent):
                if isinstance(event.error, EOFError):
                    return False
                raise event.error
            return True
        return self._schedule_all(as_cmd_list(handler(event)))

    # -- commands --------------------------------------------------------

    def _schedule_all(self, cmds: list) -> bool:
        for cmd in cmds:
            if not self._schedule(cmd):
                return False
        return True

    def _schedule(self, cmd: Callable[[], Any]) -> bool:
        if cmd is QUIT:
            return False
        if isinstance(cmd, Cmd) and cmd.children:
            return self._schedule_all(list(cmd.children))
        if isinstance(cmd, Cmd) and cmd.inline:
            result = cmd()
            if result is not None:
                self._queue.put(result)
            return True
        assert self._executor is not None
        self._executor.submit(self._run_cmd, cmd)
        return True

    def _run_cmd(self, cmd: Callable[[], Any]) -> None:
        try:
            result = cmd()
        except Exception as exc:
            logger.warning("command %r failed", cmd, exc_info=True)
            result = ErrorEvent(exc, "command")
        if result is not None:
            self._queue.put(result)


def run(app: Application, **kwargs: Any) -> None:
    """Create a Runtime for app and run it."""
    Runtime(app, **kwargs).run()
