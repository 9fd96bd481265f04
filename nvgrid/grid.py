"""A fixed-size grid of character cells."""

from __future__ import annotations

from typing import Optional, Tuple

from nvgrid.style import Style

GridCell = Optional[Tuple[str, Optional[Style]]]


class CharacterGrid:
    """Cells stored row by row; each is None or a (text, style) pair."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._cells: list[GridCell] = [None] * (width * height)

    def _index(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"cell ({x}, {y}) outside {self.width}x{self.height} grid")
        return x + y * self.width

    def resize(self, width: int, height: int) -> None:
        """Change the size, keeping the cells of the overlapping region."""
        cells: list[GridCell] = [None] * (width * height)
        kept = min(self.width, width)
        for y in range(min(self.height, height)):
            old_start = y * self.width
            new_start = y * width
            cells[new_start:new_start + kept] = self._cells[old_start:old_start + kept]
        self.width = width
        self.height = height
        self._cells = cells

    def clear(self) -> None:
        """Empty every cell."""
        self.set_characters_all(None)

    def get_cell(self, x: int, y: int) -> GridCell:
        """Return the cell at column x, row y; IndexError if outside."""
        return self._cells[self._index(x, y)]

    def set_cell(self, x: int, y: int, value: GridCell) -> None:
        """Replace the cell at column x, row y; IndexError if outside."""
        self._cells[self._index(x, y)] = value

    def set_characters_all(self, value: GridCell) -> None:
        """Set every cell to the same value."""
        self._cells = [value] * (self.width * self.height)

    def row(self, row_index: int) -> list[GridCell]:
        """Return a copy of one row's cells; IndexError if outside."""
        if not 0 <= row_index < self.height:
            raise IndexError(f"row {row_index} outside grid of height {self.height}")
        start = row_index * self.width
        return self._cells[start:start + self.width]