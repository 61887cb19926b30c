"""Input event types produced by the decoder."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum, auto


class Key(Enum):
    """Named key constants."""
    RUNE = auto()  # Printable character; see KeyEvent.rune
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    ENTER = auto()
    ESCAPE = auto()
    TAB = auto()
    BACKSPACE = auto()
    HOME = auto()
    END = auto()
    PAGE_UP = auto()
    PAGE_DOWN = auto()
    DELETE = auto()
    INSERT = auto()
    F1 = auto()
    F2 = auto()
    F3 = auto()
    F4 = auto()
    F5 = auto()
    F6 = auto()
    F7 = auto()
    F8 = auto()
    F9 = auto()
    F10 = auto()
    F11 = auto()
    F12 = auto()
    CTRL_SPACE = auto()
    CTRL_A = auto()
    CTRL_B = auto()
    CTRL_C = auto()
    CTRL_D = auto()
    CTRL_E = auto()
    CTRL_F = auto()
    CTRL_G = auto()
    CTRL_H = auto()
    CTRL_I = auto()
    CTRL_J = auto()
    CTRL_K = auto()
    CTRL_L = auto()
    CTRL_M = auto()
    CTRL_N = auto()
    CTRL_O = auto()
    CTRL_P = auto()
    CTRL_Q = auto()
    CTRL_R = auto()
    CTRL_S = auto()
    CTRL_T = auto()
    CTRL_U = auto()
    CTRL_V = auto()
    CTRL_W = auto()
    CTRL_X = auto()
    CTRL_Y = auto()
    CTRL_Z = auto()


def ctrl_key(letter: str) -> Key:
    """Key constant for Ctrl+letter."""
    return Key[f"CTRL_{letter.upper()}"]


@dataclass(frozen=True)
class KeyEvent:
    """Represents a keyboard input event."""
    key: Key = Key.RUNE
    rune: str = ""  # Character for Key.RUNE and Ctrl+letter keys
    ctrl: bool = False
    alt: bool = False
    shift: bool = False
    time: float = field(default_factory=time.time, compare=False, repr=False)

    @property
    def is_char(self) -> bool:
        """Check if this is a plain printable character."""
        return self.key is Key.RUNE and bool(self.rune) and not self.ctrl

    def __str__(self) -> str:
        named_ctrl = self.key.name.startswith("CTRL_")
        mods = [
            name
            for name, on in (("Ctrl", self.ctrl and not named_ctrl), ("Alt", self.alt), ("Shift", self.shift))
            if on
        ]
        if self.key is Key.RUNE:
            label = repr(self.rune)
        elif named_ctrl:
            label = "Ctrl+" + self.key.name[5:].title()
        else:
            label = self.key.name.title().replace("_", "")
        return "+".join([*mods, label])


class MouseButton(Enum):
    """Which mouse button an event refers to."""
    LEFT = auto()
    MIDDLE = auto()
    RIGHT = auto()
    NONE = auto()  # Motion with no button held
    WHEEL_UP = auto()
    WHEEL_DOWN = auto()
    WHEEL_LEFT = auto()
    WHEEL_RIGHT = auto()


class MouseEventType(Enum):
    """What happened."""
    PRESS = auto()
    RELEASE = auto()
    CLICK = auto()  # Synthesized by the runtime from press + release
    DRAG = auto()
    MOVE = auto()
    WHEEL = auto()


@dataclass(frozen=True)
class MouseEvent:
    """Mouse report in 0-based cell coordinates."""
    x: int
    y: int
    button: MouseButton
    type: MouseEventType
    shift: bool = False
    alt: bool = False
    ctrl: bool = False
    time: float = field(default_factory=time.time, compare=False, repr=False)


@dataclass(frozen=True)
class PasteEvent:
    """Text delivered through bracketed paste."""
    text: str
    time: float = field(default_factory=time.time, compare=False, repr=False)
