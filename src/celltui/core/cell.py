"""Cell - atomic unit of the screen grid."""

from dataclasses import dataclass

from celltui.core.style import DEFAULT_STYLE, Style


@dataclass(frozen=True, slots=True)
class Cell:
    """
    A single character cell with styling attributes.

    Holds one grapheme cluster and its display width. A wide character
    occupies two cells: the lead cell (width 2) and a continuation cell
    that carries an empty ``char`` and width 0.
    """
    char: str = ' '
    style: Style = DEFAULT_STYLE
    width: int = 1

    @property
    def is_continuation(self) -> bool:
        return self.width == 0

    def is_default(self) -> bool:
        """Check if this cell is a blank space with default styling."""
        return self.char == ' ' and self.width == 1 and self.style == DEFAULT_STYLE


BLANK = Cell()

# Never equal to anything drawn; fills the "previous" buffer to force a repaint.
SENTINEL = Cell(char='\x00', width=1)


def continuation(style: Style) -> Cell:
    """Placeholder cell covering the right half of a wide character."""
    return Cell(char='', style=style, width=0)
