"""Exception types raised by celltui."""

from __future__ import annotations


class CellTuiError(Exception):
    """Base class for all celltui errors."""


class NotATerminalError(CellTuiError, OSError):
    """The file descriptor handed to Terminal is not a TTY."""

    def __init__(self, fd: int) -> None:
        super().__init__(f"file descriptor {fd} is not a terminal")
        self.fd = fd


class RenderIOError(CellTuiError, OSError):
    """Writing a frame to the terminal failed."""


class FrameStateError(CellTuiError, RuntimeError):
    """begin_frame/end_frame called out of order."""


class DecodeIncomplete(CellTuiError):
    """
    More input bytes are needed to decode the pending sequence.

    Internal to the input decoder; never surfaced to applications.
    """


class UnknownSequence(CellTuiError):
    """
    A complete escape sequence that maps to no known key.

    Internal to the input decoder; such sequences are discarded.
    """

    def __init__(self, raw: bytes) -> None:
        super().__init__(f"unknown sequence {raw!r}")
        self.raw = raw
