"""Buffer - 2D grid of cells."""

from __future__ import annotations

from dataclasses import dataclass, field
from celltui.core.cell import BLANK, Cell


@dataclass
class Buffer:
    """
    A width x height grid of Cells plus a generation counter.

    The generation increments on every bulk change (resize, fill, copy)
    so holders can tell whether a buffer was replaced under them.
    """
    width: int
    height: int
    fill_cell: Cell = BLANK
    generation: int = 0
    _rows: list[list[Cell]] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if not self._rows:
            self._rows = self._blank_rows(self.width, self.height, self.fill_cell)

    @staticmethod
    def _blank_rows(width: int, height: int, cell: Cell) -> list[list[Cell]]:
        return [[cell] * width for _ in range(height)]

    def get(self, x: int, y: int) -> Cell:
        """Get the cell at position (x, y)."""
        return self._rows[y][x]

    def set(self, x: int, y: int, cell: Cell) -> None:
        """Set the cell at position (x, y)."""
        self._rows[y][x] = cell

    def row(self, y: int) -> list[Cell]:
        return self._rows[y]

    def fill(self, cell: Cell) -> None:
        """Overwrite every cell."""
        self._rows = self._blank_rows(self.width, self.height, cell)
        self.generation += 1

    def resize(self, width: int, height: int, cell: Cell) -> None:
        """Reallocate at a new size; contents are discarded."""
        self.width = width
        self.height = height
        self._rows = self._blank_rows(width, height, cell)
        self.generation += 1

    def copy_from(self, other: Buffer) -> None:
        """Make this buffer an exact copy of other."""
        self.width = other.width
        self.height = other.height
        self._rows = [list(r) for r in other._rows]
        self.generation += 1

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Buffer):
            return NotImplemented
        return self.width == other.width and self.height == other.height and self._rows == other._rows

    def text(self) -> list[str]:
        """Plain text of each row, for inspection and tests."""
        return [''.join(c.char for c in r) for r in self._rows]
