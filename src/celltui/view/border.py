"""Box-drawing glyph sets for bordered views."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BorderStyle:
    top_left: str
    top_right: str
    bottom_left: str
    bottom_right: str
    horizontal: str
    vertical: str


SINGLE = BorderStyle('┌', '┐', '└', '┘', '─', '│')
DOUBLE = BorderStyle('╔', '╗', '╚', '╝', '═', '║')
ROUNDED = BorderStyle('╭', '╮', '╰', '╯', '─', '│')
THICK = BorderStyle('┏', '┓', '┗', '┛', '━', '┃')
ASCII = BorderStyle('+', '+', '+', '+', '-', '|')

BORDERS: dict[str, BorderStyle] = {
    "single": SINGLE,
    "double": DOUBLE,
    "rounded": ROUNDED,
    "thick": THICK,
    "ascii": ASCII,
}
