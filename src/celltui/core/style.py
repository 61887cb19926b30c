"""Color and style values for terminal cells."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import ClassVar, Optional


class ColorMode(Enum):
    """How a Color is encoded in SGR parameters."""
    ANSI = auto()       # 30-37 / 90-97, backgrounds +10
    PALETTE = auto()    # 38;5;n
    RGB = auto()        # 38;2;r;g;b


@dataclass(frozen=True)
class Color:
    """
    A foreground or background color.

    ``value`` is the palette index for ANSI and PALETTE colors and an
    ``(r, g, b)`` tuple for RGB. The sixteen named ANSI colors are class
    attributes (``Color.RED``, ``Color.BRIGHT_CYAN``, ...).
    """
    mode: ColorMode
    value: int | tuple[int, int, int]

    BLACK: ClassVar["Color"]
    RED: ClassVar["Color"]
    GREEN: ClassVar["Color"]
    YELLOW: ClassVar["Color"]
    BLUE: ClassVar["Color"]
    MAGENTA: ClassVar["Color"]
    CYAN: ClassVar["Color"]
    WHITE: ClassVar["Color"]
    BRIGHT_BLACK: ClassVar["Color"]
    BRIGHT_RED: ClassVar["Color"]
    BRIGHT_GREEN: ClassVar["Color"]
    BRIGHT_YELLOW: ClassVar["Color"]
    BRIGHT_BLUE: ClassVar["Color"]
    BRIGHT_MAGENTA: ClassVar["Color"]
    BRIGHT_CYAN: ClassVar["Color"]
    BRIGHT_WHITE: ClassVar["Color"]

    @classmethod
    def from_index(cls, index: int) -> "Color":
        """One of the sixteen ANSI colors; 8-15 are the bright variants."""
        if not 0 <= index <= 15:
            raise ValueError(f"ANSI color index must be 0-15, got {index}")
        return cls(ColorMode.ANSI, index)

    @classmethod
    def from_256(cls, index: int) -> "Color":
        if not 0 <= index <= 255:
            raise ValueError(f"256-color index must be 0-255, got {index}")
        return cls(ColorMode.PALETTE, index)

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int) -> "Color":
        if not all(0 <= c <= 255 for c in (r, g, b)):
            raise ValueError(f"RGB values must be 0-255, got ({r}, {g}, {b})")
        return cls(ColorMode.RGB, (r, g, b))

    @classmethod
    def from_hex(cls, code: str) -> "Color":
        """Parse ``#rrggbb`` (the ``#`` is optional)."""
        digits = code.lstrip('#')
        if len(digits) != 6:
            raise ValueError(f"Hex color must have 6 digits, got {code!r}")
        return cls.from_rgb(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))

    def to_sgr_fg(self) -> str:
        return self._sgr(30)

    def to_sgr_bg(self) -> str:
        return self._sgr(40)

    def _sgr(self, base: int) -> str:
        # base is 30 for foreground, 40 for background
        if self.mode is ColorMode.ANSI:
            assert isinstance(self.value, int)
            if self.value < 8:
                return str(base + self.value)
            return str(base + 60 + self.value - 8)
        if self.mode is ColorMode.PALETTE:
            return f"{base + 8};5;{self.value}"
        assert isinstance(self.value, tuple)
        r, g, b = self.value
        return f"{base + 8};2;{r};{g};{b}"


for _index, _name in enumerate(("BLACK", "RED", "GREEN", "YELLOW", "BLUE", "MAGENTA", "CYAN", "WHITE")):
    setattr(Color, _name, Color(ColorMode.ANSI, _index))
    setattr(Color, f"BRIGHT_{_name}", Color(ColorMode.ANSI, _index + 8))
del _index, _name


# SGR "on" codes for each attribute flag, in emission order
ATTRIBUTE_CODES: tuple[tuple[str, str], ...] = (
    ("bold", "1"),
    ("dim", "2"),
    ("italic", "3"),
    ("underline", "4"),
    ("blink", "5"),
    ("reverse", "7"),
    ("strikethrough", "9"),
)


@dataclass(frozen=True)
class Style:
    """
    Immutable text style: colors, attribute flags and an optional hyperlink.

    ``None`` colors mean the terminal default. Modifier methods return
    a new Style and never mutate the receiver.
    """
    fg_color: Optional[Color] = None
    bg_color: Optional[Color] = None
    is_bold: bool = False
    is_dim: bool = False
    is_italic: bool = False
    is_underline: bool = False
    is_blink: bool = False
    is_reverse: bool = False
    is_strikethrough: bool = False
    url: str = ""

    def fg(self, color: Optional[Color]) -> "Style":
        return replace(self, fg_color=color)

    def bg(self, color: Optional[Color]) -> "Style":
        return replace(self, bg_color=color)

    def bold(self, on: bool = True) -> "Style":
        return replace(self, is_bold=on)

    def dim(self, on: bool = True) -> "Style":
        return replace(self, is_dim=on)

    def italic(self, on: bool = True) -> "Style":
        return replace(self, is_italic=on)

    def underline(self, on: bool = True) -> "Style":
        return replace(self, is_underline=on)

    def blink(self, on: bool = True) -> "Style":
        return replace(self, is_blink=on)

    def reverse(self, on: bool = True) -> "Style":
        return replace(self, is_reverse=on)

    def strikethrough(self, on: bool = True) -> "Style":
        return replace(self, is_strikethrough=on)

    def link(self, url: str) -> "Style":
        """Attach an OSC 8 hyperlink target."""
        return replace(self, url=url)

    def without_link(self) -> "Style":
        return replace(self, url="")

    def attributes(self) -> frozenset[str]:
        """Names of the attribute flags that are switched on."""
        return frozenset(name for name, _ in ATTRIBUTE_CODES if getattr(self, f"is_{name}"))

    def is_default(self) -> bool:
        """True if rendering this style needs no SGR codes at all."""
        return self.without_link() == DEFAULT_STYLE

    def sgr_params(self) -> list[str]:
        """Full SGR parameter list for this style, without a leading reset."""
        params = [code for name, code in ATTRIBUTE_CODES if getattr(self, f"is_{name}")]
        if self.fg_color is not None:
            params.append(self.fg_color.to_sgr_fg())
        if self.bg_color is not None:
            params.append(self.bg_color.to_sgr_bg())
        return params

    def sgr(self) -> str:
        """Complete escape sequence that resets and applies this style."""
        return f"\x1b[{';'.join(['0', *self.sgr_params()])}m"

    def apply(self, text: str) -> str:
        """Wrap text in this style's SGR codes (for line-oriented output)."""
        if self.is_default():
            return text
        return f"{self.sgr()}{text}\x1b[0m"


DEFAULT_STYLE = Style()
