"""Keyboard and mouse input decoding from a raw terminal byte stream."""

from __future__ import annotations

import logging
import os
import select
import sys
from collections import deque
from typing import BinaryIO, Iterator, Optional, Union

from celltui.errors import DecodeIncomplete, UnknownSequence
from celltui.terminal.keys import (
    Key,
    KeyEvent,
    MouseButton,
    MouseEvent,
    MouseEventType,
    PasteEvent,
    ctrl_key,
)

logger = logging.getLogger(__name__)

InputEvent = Union[KeyEvent, MouseEvent, PasteEvent]

ESC = 0x1b
PASTE_END = b'\x1b[201~'


class InputDecoder:
    """
    Byte-stream state machine turning terminal input into typed events.

    ``feed()`` is the pure decoding step: it accepts any chunk of bytes and
    returns every event that is complete, keeping incomplete tails buffered,
    so the result does not depend on how input was split across reads.
    ``flush()`` resolves what is still buffered when no more bytes are
    coming (a lone ESC becomes the Escape key). ``read_event()`` layers a
    blocking pull interface over a file descriptor, using a short timeout
    to disambiguate ESC.
    """

    READ_SIZE = 4096
    MAX_SEQUENCE = 64

    SIMPLE_KEYS: dict[int, Key] = {
        0x0d: Key.ENTER,
        0x0a: Key.ENTER,
        0x09: Key.TAB,
        0x7f: Key.BACKSPACE,
        0x08: Key.BACKSPACE,
    }

    # CSI sequences identified by their final byte: ESC [ A, ESC [ 1;5 A, ...
    CSI_FINAL_KEYS: dict[str, Key] = {
        'A': Key.UP,
        'B': Key.DOWN,
        'C': Key.RIGHT,
        'D': Key.LEFT,
        'H': Key.HOME,
        'F': Key.END,
        'P': Key.F1,
        'Q': Key.F2,
        'R': Key.F3,
        'S': Key.F4,
    }

    # CSI <n> ~ sequences
    TILDE_KEYS: dict[int, Key] = {
        1: Key.HOME,
        2: Key.INSERT,
        3: Key.DELETE,
        4: Key.END,
        5: Key.PAGE_UP,
        6: Key.PAGE_DOWN,
        7: Key.HOME,
        8: Key.END,
        11: Key.F1,
        12: Key.F2,
        13: Key.F3,
        14: Key.F4,
        15: Key.F5,
        17: Key.F6,
        18: Key.F7,
        19: Key.F8,
        20: Key.F9,
        21: Key.F10,
        23: Key.F11,
        24: Key.F12,
    }

    # SS3 (application mode): ESC O <c>
    SS3_KEYS: dict[str, Key] = {
        'A': Key.UP,
        'B': Key.DOWN,
        'C': Key.RIGHT,
        'D': Key.LEFT,
        'H': Key.HOME,
        'F': Key.END,
        'P': Key.F1,
        'Q': Key.F2,
        'R': Key.F3,
        'S': Key.F4,
    }

    # CSI <code> ; <mod> u (kitty / modifyOtherKeys)
    CSI_U_KEYS: dict[int, Key] = {
        13: Key.ENTER,
        9: Key.TAB,
        27: Key.ESCAPE,
        127: Key.BACKSPACE,
    }

    MOUSE_BUTTONS: dict[int, MouseButton] = {
        0: MouseButton.LEFT,
        1: MouseButton.MIDDLE,
        2: MouseButton.RIGHT,
    }

    WHEEL_BUTTONS: dict[int, MouseButton] = {
        0: MouseButton.WHEEL_UP,
        1: MouseButton.WHEEL_DOWN,
        2: MouseButton.WHEEL_LEFT,
        3: MouseButton.WHEEL_RIGHT,
    }

    def __init__(
        self,
        source: Union[int, BinaryIO, None] = None,
        escape_timeout: float = 0.05,
        paste_tab_width: int = 0,
    ) -> None:
        self.escape_timeout = escape_timeout
        self.paste_tab_width = paste_tab_width
        self._buffer = bytearray()
        self._pending: deque[InputEvent] = deque()
        self._eof = False
        self._stream: Optional[BinaryIO] = None
        if source is None:
            self._fd: Optional[int] = sys.stdin.fileno()
        elif isinstance(source, int):
            self._fd = source
        else:
            self._fd = _fileno(source)
            if self._fd is None:
                self._stream = source

    @property
    def pending_bytes(self) -> int:
        """Number of undecoded bytes waiting for more input."""
        return len(self._buffer)

    # -- push interface -------------------------------------------------

    def feed(self, data: bytes) -> list[InputEvent]:
        """Append raw bytes and return every event they complete."""
        self._buffer += data
        return self._drain(final=False, eof=False)

    def flush(self, eof: bool = False) -> list[InputEvent]:
        """
        Resolve buffered bytes as if no further input will arrive soon.

        An open bracketed paste is kept buffered unless ``eof`` is set.
        """
        return self._drain(final=True, eof=eof)

    def _drain(self, final: bool, eof: bool) -> list[InputEvent]:
        events: list[InputEvent] = []
        while self._buffer:
            try:
                event, consumed = self._decode(self._buffer, final, eof)
            except DecodeIncomplete:
                break
            except UnknownSequence as exc:
                logger.debug("discarding input sequence %r", exc.raw)
                del self._buffer[:max(1, len(exc.raw))]
                continue
            del self._buffer[:consumed]
            events.append(event)
        return events

    # -- pull interface -------------------------------------------------

    def read_event(self) -> InputEvent:
        """
        Block until the next event is decoded.

        Raises EOFError once the stream is closed and every buffered
        event has been returned.
        """
        while True:
            if self._pending:
                return self._pending.popleft()
            if self._eof:
                raise EOFError("input stream closed")
            timeout = self.escape_timeout if self._buffer else None
            data = self._read(timeout)
            if data is None:
                self._pending.extend(self.flush())
            elif not data:
                self._eof = True
                self._pending.extend(self.flush(eof=True))
            else:
                self._pending.extend(self.feed(data))

    def events(self) -> Iterator[InputEvent]:
        """Lazy, unbounded sequence of events; ends when the stream closes."""
        while True:
            try:
                yield self.read_event()
            except EOFError:
                return

    def _read(self, timeout: Optional[float]) -> Optional[bytes]:
        """Read available bytes; None means the timeout expired first."""
        if self._stream is not None:
            read = getattr(self._stream, "read1", self._stream.read)
            return read(self.READ_SIZE)
        assert self._fd is not None
        if timeout is not None:
            ready, _, _ = select.select([self._fd], [], [], timeout)
            if not ready:
                return None
        return os.read(self._fd, self.READ_SIZE)

    # -- decoding -------------------------------------------------------

    def _decode(self, buf: bytearray, final: bool, eof: bool) -> tuple[InputEvent, int]:
        b = buf[0]
        if b == ESC:
            return self._decode_escape(buf, final, eof)
        if b < 0x20 or b == 0x7f:
            return self._control_event(b), 1
        if b < 0x80:
            return KeyEvent(rune=chr(b)), 1
        ch, end = self._decode_utf8(buf, 0, final)
        return KeyEvent(rune=ch), end

    def _control_event(self, b: int, alt: bool = False) -> KeyEvent:
        """Map a C0 control byte (or DEL) to a key event."""
        if b in self.SIMPLE_KEYS:
            return KeyEvent(key=self.SIMPLE_KEYS[b], alt=alt)
        if b == 0x00:
            return KeyEvent(key=Key.CTRL_SPACE, rune=' ', ctrl=True, alt=alt)
        if b <= 0x1a:
            letter = chr(b + 0x60)
            return KeyEvent(key=ctrl_key(letter), rune=letter, ctrl=True, alt=alt)
        # 0x1c-0x1f: Ctrl+\ Ctrl+] Ctrl+^ Ctrl+_
        return KeyEvent(rune=chr(b + 0x40), ctrl=True, alt=alt)

    def _decode_escape(self, buf: bytearray, final: bool, eof: bool) -> tuple[InputEvent, int]:
        if len(buf) == 1:
            if final:
                return KeyEvent(key=Key.ESCAPE), 1
            raise DecodeIncomplete()

        nxt = buf[1]
        if nxt == ord('['):
            return self._decode_csi(buf, final, eof)
        if nxt == ord('O'):
            return self._decode_ss3(buf, final)
        if nxt == ESC:
            # Escape pressed, then a new sequence starts at the second ESC
            return KeyEvent(key=Key.ESCAPE), 1
        if nxt < 0x20 or nxt == 0x7f:
            return self._control_event(nxt, alt=True), 2
        if nxt < 0x80:
            return KeyEvent(rune=chr(nxt), alt=True), 2
        ch, end = self._decode_utf8(buf, 1, final)
        return KeyEvent(rune=ch, alt=True), end

    def _decode_ss3(self, buf: bytearray, final: bool) -> tuple[InputEvent, int]:
        if len(buf) < 3:
            if final:
                return KeyEvent(rune='O', alt=True), 2
            raise DecodeIncomplete()
        key = self.SS3_KEYS.get(chr(buf[2]))
        if key is None:
            raise UnknownSequence(bytes(buf[:3]))
        return KeyEvent(key=key), 3

    def _decode_csi(self, buf: bytearray, final: bool, eof: bool) -> tuple[InputEvent, int]:
        # Parameter bytes 0x30-0x3F, intermediates 0x20-0x2F, final byte 0x40-0x7E
        i = 2
        while i < len(buf):
            c = buf[i]
            if 0x40 <= c <= 0x7e:
                break
            if not 0x20 <= c <= 0x3f:
                # Malformed: drop the prefix, resume decoding at the offending byte
                raise UnknownSequence(bytes(buf[:i]))
            i += 1
            if i > self.MAX_SEQUENCE:
                raise UnknownSequence(bytes(buf[:i]))
        else:
            if final:
                raise UnknownSequence(bytes(buf))
            raise DecodeIncomplete()

        end = i + 1
        params = buf[2:i].decode('ascii')
        final_char = chr(buf[i])
        if final_char == '~' and params == '200':
            return self._decode_paste(buf, end, eof)
        event = self._csi_event(params, final_char)
        if event is None:
            raise UnknownSequence(bytes(buf[:end]))
        return event, end

    def _csi_event(self, params: str, final: str) -> Optional[InputEvent]:
        if params.startswith('<'):
            if final in 'Mm':
                return self._decode_mouse(params[1:], release=(final == 'm'))
            return None
        if params[:1] in ('?', '>', '='):
            # Private replies (device attributes, keyboard flags): not keys
            return None

        nums = _parse_ints(params)
        if nums is None:
            return None
        mods = _modifiers(nums[1] if len(nums) > 1 else 1)

        if final in self.CSI_FINAL_KEYS:
            return KeyEvent(key=self.CSI_FINAL_KEYS[final], **mods)
        if final == 'Z':
            return KeyEvent(key=Key.TAB, shift=True)
        if final == '~':
            key = self.TILDE_KEYS.get(nums[0]) if nums else None
            return KeyEvent(key=key, **mods) if key else None
        if final == 'u' and nums:
            return self._csi_u_event(nums[0], mods)
        return None

    def _csi_u_event(self, code: int, mods: dict[str, bool]) -> Optional[KeyEvent]:
        key = self.CSI_U_KEYS.get(code)
        if key is not None:
            return KeyEvent(key=key, **mods)
        if code < 0x20 or code == 0x7f or code > 0x10ffff or 0xd800 <= code <= 0xdfff:
            return None
        ch = chr(code)
        if mods['ctrl'] and ch.isascii() and ch.isalpha():
            letter = ch.lower()
            return KeyEvent(key=ctrl_key(letter), rune=letter, **mods)
        return KeyEvent(rune=ch, **mods)

    def _decode_mouse(self, params: str, release: bool) -> Optional[MouseEvent]:
        """SGR extended mouse report: <button>;<x>;<y> with M (press) or m (release)."""
        try:
            code, x, y = (int(p) for p in params.split(';'))
        except ValueError:
            return None

        # 1-indexed terminal coordinates to 0-indexed cells
        x = max(0, x - 1)
        y = max(0, y - 1)
        mods = {'shift': bool(code & 4), 'alt': bool(code & 8), 'ctrl': bool(code & 16)}
        base = code & 3

        if code & 64:
            return MouseEvent(x, y, self.WHEEL_BUTTONS[base], MouseEventType.WHEEL, **mods)
        if code & 32:
            if base == 3:
                return MouseEvent(x, y, MouseButton.NONE, MouseEventType.MOVE, **mods)
            return MouseEvent(x, y, self.MOUSE_BUTTONS[base], MouseEventType.DRAG, **mods)
        button = self.MOUSE_BUTTONS.get(base, MouseButton.NONE)
        kind = MouseEventType.RELEASE if release else MouseEventType.PRESS
        return MouseEvent(x, y, button, kind, **mods)

    def _decode_paste(self, buf: bytearray, start: int, eof: bool) -> tuple[InputEvent, int]:
        end = buf.find(PASTE_END, start)
        if end < 0:
            if not eof:
                raise DecodeIncomplete()
            content, consumed = bytes(buf[start:]), len(buf)
        else:
            content, consumed = bytes(buf[start:end]), end + len(PASTE_END)
        text = content.decode('utf-8', errors='ignore')
        text = text.replace('\r\n', '\n').replace('\r', '\n')
        if self.paste_tab_width > 0:
            text = text.replace('\t', ' ' * self.paste_tab_width)
        return PasteEvent(text), consumed

    def _decode_utf8(self, buf: bytearray, start: int, final: bool) -> tuple[str, int]:
        """Decode one UTF-8 code point at buf[start]; returns (char, end offset)."""
        lead = buf[start]
        if lead & 0xe0 == 0xc0:
            size = 2
        elif lead & 0xf0 == 0xe0:
            size = 3
        elif lead & 0xf8 == 0xf0:
            size = 4
        else:
            raise UnknownSequence(bytes(buf[:start + 1]))

        end = start + 1
        while end < min(len(buf), start + size):
            if buf[end] & 0xc0 != 0x80:
                raise UnknownSequence(bytes(buf[:end]))
            end += 1
        if end - start < size:
            # Truncated code point: wait for more, or drop it at end of input
            if final:
                raise UnknownSequence(bytes(buf))
            raise DecodeIncomplete()
        try:
            return buf[start:end].decode('utf-8'), end
        except UnicodeDecodeError:
            raise UnknownSequence(bytes(buf[:end])) from None


def _fileno(stream: BinaryIO) -> Optional[int]:
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None


def _parse_ints(params: str) -> Optional[list[int]]:
    if not params:
        return []
    try:
        return [int(p) if p else 1 for p in params.split(';')]
    except ValueError:
        return None


def _modifiers(mod: int) -> dict[str, bool]:
    """xterm modifier parameter: 1 + (shift | alt << 1 | ctrl << 2)."""
    bits = max(0, mod - 1)
    return {'shift': bool(bits & 1), 'alt': bool(bits & 2), 'ctrl': bool(bits & 4)}
