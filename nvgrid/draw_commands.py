"""Commands passed from the editor to the window that renders it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from nvgrid.cursor import Cursor
from nvgrid.events import EditorMode
from nvgrid.style import Style


def _number(value: float) -> str:
    """Format a number the way the log output shows it: 1.0 as 1, 1.5 as 1.5."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class WindowDrawCommand:
    """Base class of commands aimed at one window."""

    def __str__(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class Position(WindowDrawCommand):
    grid_left: float
    grid_top: float
    width: int
    height: int
    floating: bool

    def __str__(self) -> str:
        return f"Position {{ left: {_number(self.grid_left)}, right: {_number(self.grid_top)} }}"


@dataclass(frozen=True)
class Cell(WindowDrawCommand):
    text: str
    cell_width: int
    window_left: int
    window_top: int
    style: Optional[Style]

    def __str__(self) -> str:
        return "Cell"


@dataclass(frozen=True)
class ScrollRegion(WindowDrawCommand):
    top: int
    bot: int
    left: int
    right: int
    rows: int
    cols: int

    def __str__(self) -> str:
        return "Scroll"


@dataclass(frozen=True)
class ClearWindow(WindowDrawCommand):
    def __str__(self) -> str:
        return "Clear"


@dataclass(frozen=True)
class ShowWindow(WindowDrawCommand):
    def __str__(self) -> str:
        return "Show"


@dataclass(frozen=True)
class HideWindow(WindowDrawCommand):
    def __str__(self) -> str:
        return "Hide"


@dataclass(frozen=True)
class CloseGrid(WindowDrawCommand):
    def __str__(self) -> str:
        return "Close"


@dataclass(frozen=True)
class Viewport(WindowDrawCommand):
    top_line: float
    bottom_line: float

    def __str__(self) -> str:
        return (
            f"Viewport {{ top: {_number(self.top_line)}, "
            f"bottom: {_number(self.bottom_line)} }}"
        )


class DrawCommand:
    """Base class of the commands the editor sends to the renderer."""

    def __str__(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class CloseWindow(DrawCommand):
    grid_id: int


@dataclass(frozen=True)
class WindowDraw(DrawCommand):
    grid_id: int
    command: WindowDrawCommand

    def __str__(self) -> str:
        return f"Window {self.grid_id} {self.command}"


@dataclass(frozen=True)
class UpdateCursor(DrawCommand):
    cursor: Cursor


@dataclass(frozen=True)
class FontChanged(DrawCommand):
    font: str


@dataclass(frozen=True)
class DefaultStyleChanged(DrawCommand):
    style: Style


@dataclass(frozen=True)
class ModeChanged(DrawCommand):
    mode: EditorMode


class WindowCommand:
    """Base class of commands aimed at the operating-system window."""


@dataclass(frozen=True)
class TitleChanged(WindowCommand):
    title: str


@dataclass(frozen=True)
class SetMouseEnabled(WindowCommand):
    enabled: bool