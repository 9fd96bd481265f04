"""The editor cursor and the cursor modes reported by the editor process."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass

from nvgrid.style import Color, Colors, Style


class CursorShape(enum.Enum):
    BLOCK = "block"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


def parse_cursor_shape(name: str) -> CursorShape | None:
    """Return the shape with this type name, or None if it is unknown."""
    try:
        return CursorShape(name)
    except ValueError:
        return None


@dataclass
class CursorMode:
    """Cursor appearance for one editor mode; None means not specified."""

    shape: CursorShape | None = None
    style_id: int | None = None
    cell_percentage: float | None = None
    blinkwait: int | None = None
    blinkon: int | None = None
    blinkoff: int | None = None


def _require_default(color: Color | None, name: str) -> Color:
    if color is None:
        raise ValueError(f"default {name} colour is not set")
    return color


@dataclass
class Cursor:
    """The cursor's position, shape and the character beneath it."""

    grid_position: tuple[int, int] = (0, 0)
    parent_window_id: int = 0
    shape: CursorShape = CursorShape.BLOCK
    cell_percentage: float | None = None
    blinkwait: int | None = None
    blinkon: int | None = None
    blinkoff: int | None = None
    style: Style | None = None
    enabled: bool = True
    double_width: bool = False
    character: str = " "

    def foreground(self, default_colors: Colors) -> Color:
        """The cursor's foreground; falls back to the default background."""
        if self.style is not None and self.style.colors.foreground is not None:
            return self.style.colors.foreground
        return _require_default(default_colors.background, "background")

    def background(self, default_colors: Colors) -> Color:
        """The cursor's background; falls back to the default foreground."""
        if self.style is not None and self.style.colors.background is not None:
            return self.style.colors.background
        return _require_default(default_colors.foreground, "foreground")

    def change_mode(self, cursor_mode: CursorMode, styles: Mapping[int, Style]) -> None:
        """Apply a cursor mode, looking its style up among the defined styles."""
        if cursor_mode.shape is not None:
            self.shape = cursor_mode.shape
        if cursor_mode.style_id is not None:
            self.style = styles.get(cursor_mode.style_id)
        self.cell_percentage = cursor_mode.cell_percentage
        self.blinkwait = cursor_mode.blinkwait
        self.blinkon = cursor_mode.blinkon
        self.blinkoff = cursor_mode.blinkoff