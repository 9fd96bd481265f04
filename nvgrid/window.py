"""An editor grid window: holds its cells and emits draw commands."""

from __future__ import annotations

import logging
import unicodedata
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Optional

from nvgrid.batcher import DrawCommandBatcher
from nvgrid.draw_commands import (
    Cell,
    ClearWindow,
    CloseGrid,
    HideWindow,
    Position,
    ScrollRegion,
    ShowWindow,
    Viewport,
    WindowDraw,
    WindowDrawCommand,
)
from nvgrid.events import GridLineCell, WindowAnchor
from nvgrid.grid import CharacterGrid, GridCell
from nvgrid.style import Style

logger = logging.getLogger(__name__)

_ZWJ = "\u200d"


def _is_regional_indicator(ch: str) -> bool:
    return 0x1F1E6 <= ord(ch) <= 0x1F1FF


def _extends(cluster: str, ch: str) -> bool:
    if cluster.endswith(_ZWJ):
        return True
    if cluster[-1] == "\r" and ch == "\n":
        return True
    if ch == _ZWJ or unicodedata.category(ch) in ("Mn", "Me", "Mc"):
        return True
    if _is_regional_indicator(ch) and len(cluster) == 1 and _is_regional_indicator(cluster):
        return True
    code = ord(ch)
    return 0xFE00 <= code <= 0xFE0F or 0x1F3FB <= code <= 0x1F3FF or 0xE0020 <= code <= 0xE007F


def _graphemes(text: str) -> list[str]:
    """Split text into user-perceived characters."""
    clusters: list[str] = []
    for ch in text:
        if clusters and _extends(clusters[-1], ch):
            clusters[-1] += ch
        else:
            clusters.append(ch)
    return clusters


def _descending(start: int, stop: int) -> Iterable[int]:
    return reversed(range(start, stop))


@dataclass
class AnchorInfo:
    """Where a floating window is anchored, relative to another grid."""

    anchor_grid_id: int
    anchor_type: WindowAnchor
    anchor_left: float
    anchor_top: float


class Window:
    """One grid of the editor, with its position and contents."""

    def __init__(
        self,
        grid_id: int,
        width: int,
        height: int,
        anchor_info: Optional[AnchorInfo],
        grid_left: float,
        grid_top: float,
        draw_command_batcher: DrawCommandBatcher,
    ) -> None:
        self.grid_id = grid_id
        self._grid = CharacterGrid(width, height)
        self.anchor_info = anchor_info
        self._grid_left = float(grid_left)
        self._grid_top = float(grid_top)
        self._batcher = draw_command_batcher
        self._send_updated_position()

    @property
    def width(self) -> int:
        return self._grid.width

    @property
    def height(self) -> int:
        return self._grid.height

    @property
    def grid_position(self) -> tuple[float, float]:
        return (self._grid_left, self._grid_top)

    def _send(self, command: WindowDrawCommand) -> None:
        self._batcher.queue(WindowDraw(self.grid_id, command))

    def _send_updated_position(self) -> None:
        self._send(
            Position(
                grid_left=self._grid_left,
                grid_top=self._grid_top,
                width=self._grid.width,
                height=self._grid.height,
                floating=self.anchor_info is not None,
            )
        )

    def _inside(self, x: int, y: int) -> bool:
        return 0 <= x < self._grid.width and 0 <= y < self._grid.height

    def _cell(self, x: int, y: int) -> GridCell:
        return self._grid.get_cell(x, y) if self._inside(x, y) else None

    def _set_if_inside(self, x: int, y: int, value: GridCell) -> None:
        if self._inside(x, y):
            self._grid.set_cell(x, y, value)

    def get_cursor_character(self, window_left: int, window_top: int) -> tuple[str, bool]:
        """The character under the cursor and whether it is double width."""
        cell = self._cell(window_left, window_top)
        character = cell[0] if cell is not None else " "
        next_cell = self._cell(window_left + 1, window_top)
        double_width = next_cell is not None and next_cell[0] == ""
        return (character, double_width)

    def position(
        self,
        width: int,
        height: int,
        anchor_info: Optional[AnchorInfo],
        grid_left: float,
        grid_top: float,
    ) -> None:
        """Move and resize the window, then redraw it."""
        self._grid.resize(width, height)
        self.anchor_info = anchor_info
        self._grid_left = float(grid_left)
        self._grid_top = float(grid_top)
        self._send_updated_position()
        self.redraw()

    def resize(self, width: int, height: int) -> None:
        """Resize the window in place, then redraw it."""
        self._grid.resize(width, height)
        self._send_updated_position()
        self.redraw()

    def _modify_grid(
        self,
        row_index: int,
        column_pos: int,
        cell: GridLineCell,
        defined_styles: Mapping[int, Style],
        previous_style: Optional[Style],
    ) -> tuple[int, Optional[Style]]:
        if cell.highlight_id == 0:
            style = None
        elif cell.highlight_id is not None:
            style = defined_styles.get(cell.highlight_id)
        else:
            style = previous_style

        text = cell.text
        if cell.repeat is not None:
            text = text * cell.repeat

        if not text:
            self._set_if_inside(column_pos, row_index, (" ", style))
            return column_pos + 1, style

        characters = _graphemes(text)
        for offset, character in enumerate(characters):
            self._set_if_inside(column_pos + offset, row_index, (character, style))
        return column_pos + len(characters), style

    def _send_draw_command(
        self, row_index: int, line_start: int, current_start: int
    ) -> Optional[int]:
        """Draw the run of same-styled cells at current_start; return where the next starts.

        When current_start is the start of the changed span, the run is
        extended backwards too, so ligatures that began earlier are redrawn.
        """
        row = self._grid.row(row_index)
        if current_start >= len(row) or row[current_start] is None:
            return None
        style = row[current_start][1]

        def same_style(candidate: GridCell) -> bool:
            return candidate is not None and candidate[1] == style

        start = current_start
        if current_start == line_start:
            for index in _descending(0, current_start):
                if not same_style(row[index]):
                    break
                start = index

        end = current_start
        for index in range(start, self._grid.width):
            if not same_style(row[index]):
                break
            end = index

        text = "".join(cell[0] for cell in row[start:end + 1])
        self._send(
            Cell(
                text=text,
                cell_width=end - start + 1,
                window_left=start,
                window_top=row_index,
                style=style,
            )
        )
        return end + 1

    def _draw_row_from(self, row_index: int, line_start: int, stop: int) -> None:
        current_start = line_start
        while current_start < stop:
            next_start = self._send_draw_command(row_index, line_start, current_start)
            if next_start is None:
                break
            current_start = next_start

    def draw_grid_line(
        self,
        row: int,
        column_start: int,
        cells: Iterable[GridLineCell],
        defined_styles: Mapping[int, Style],
    ) -> None:
        """Write a grid_line event's cells into the grid and draw what changed."""
        if row >= self._grid.height:
            logger.warning("Draw command out of bounds")
            return
        column_pos = column_start
        previous_style: Optional[Style] = None
        for cell in cells:
            column_pos, previous_style = self._modify_grid(
                row, column_pos, cell, defined_styles, previous_style
            )
        self._draw_row_from(row, column_start, column_pos)

    def scroll_region(
        self, top: int, bot: int, left: int, right: int, rows: int, cols: int
    ) -> None:
        """Scroll a region of the grid by rows and columns and emit the scroll."""
        if rows > 0:
            y_range: Iterable[int] = range(top + rows, bot)
        else:
            y_range = _descending(top, bot + rows)

        self._send(ScrollRegion(top=top, bot=bot, left=left, right=right, rows=rows, cols=cols))

        for y in y_range:
            dest_y = y - rows
            if not 0 <= dest_y < self._grid.height:
                continue
            if cols > 0:
                x_range: Iterable[int] = range(left + cols, right)
            else:
                x_range = _descending(left, right + cols)
            for x in x_range:
                if not self._inside(x, y):
                    continue
                self._set_if_inside(x - cols, dest_y, self._grid.get_cell(x, y))

    def clear(self) -> None:
        """Empty the grid."""
        self._grid.clear()
        self._send(ClearWindow())

    def redraw(self) -> None:
        """Clear the rendered window and draw every row again."""
        self._send(ClearWindow())
        for row in range(self._grid.height):
            self._draw_row_from(row, 0, self._grid.width)

    def hide(self) -> None:
        self._send(HideWindow())

    def show(self) -> None:
        self._send(ShowWindow())

    def close(self) -> None:
        self._send(CloseGrid())

    def update_viewport(self, top_line: float, bottom_line: float) -> None:
        self._send(Viewport(top_line=top_line, bottom_line=bottom_line))