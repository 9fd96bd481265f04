"""Turns redraw events into draw commands for the renderer."""

from __future__ import annotations

import dataclasses
import logging
import threading
from typing import Any, Optional, Protocol

from nvgrid.batcher import DrawCommandBatcher
from nvgrid.cursor import Cursor, CursorMode
from nvgrid.draw_commands import (
    CloseWindow,
    DefaultStyleChanged,
    FontChanged,
    ModeChanged,
    SetMouseEnabled,
    TitleChanged,
    UpdateCursor,
)
from nvgrid.events import (
    BusyStart,
    BusyStop,
    Clear,
    CursorGoto,
    DefaultColorsSet,
    Destroy,
    Flush,
    GridLine,
    GuiOption,
    HighlightAttributesDefine,
    MessageSetPosition,
    ModeChange,
    ModeInfoSet,
    MouseOff,
    MouseOn,
    OptionSet,
    RedrawEvent,
    Resize,
    Scroll,
    SetTitle,
    WindowAnchor,
    WindowClose,
    WindowFloatPosition,
    WindowHide,
    WindowPosition,
    WindowViewport,
)
from nvgrid.scheduler import RedrawScheduler
from nvgrid.style import Style
from nvgrid.window import AnchorInfo, Window

logger = logging.getLogger(__name__)

_BASE_GRID = 1


class _Sink(Protocol):
    def put(self, item: Any) -> None: ...


class _Source(Protocol):
    def get(self) -> Any: ...


class Editor:
    """Holds the editor's windows, cursor and styles and reacts to redraw events."""

    def __init__(
        self,
        batched_draw_command_sender: _Sink,
        window_command_sender: _Sink,
        scheduler: Optional[RedrawScheduler] = None,
    ) -> None:
        self.windows: dict[int, Window] = {}
        self.cursor = Cursor()
        self.defined_styles: dict[int, Style] = {}
        self.mode_list: list[CursorMode] = []
        self.draw_command_batcher = DrawCommandBatcher(batched_draw_command_sender)
        self.window_command_sender = window_command_sender
        self.scheduler = scheduler if scheduler is not None else RedrawScheduler()

    def handle_redraw_event(self, event: RedrawEvent) -> None:
        """Apply one decoded redraw event."""
        match event:
            case SetTitle(title=title):
                self.window_command_sender.put(TitleChanged(title))
            case ModeInfoSet(cursor_modes=cursor_modes):
                self.mode_list = list(cursor_modes)
            case OptionSet(gui_option=gui_option):
                self._set_option(gui_option)
            case ModeChange(mode=mode, mode_index=mode_index):
                if 0 <= mode_index < len(self.mode_list):
                    self.cursor.change_mode(self.mode_list[mode_index], self.defined_styles)
                self.draw_command_batcher.queue(ModeChanged(mode))
            case MouseOn():
                self.window_command_sender.put(SetMouseEnabled(True))
            case MouseOff():
                self.window_command_sender.put(SetMouseEnabled(False))
            case BusyStart():
                logger.debug("Cursor off")
                self.cursor.enabled = False
            case BusyStop():
                logger.debug("Cursor on")
                self.cursor.enabled = True
            case Flush():
                logger.debug("Image flushed")
                self._send_cursor_info()
                self.draw_command_batcher.send_batch()
                self.scheduler.queue_next_frame()
            case DefaultColorsSet(colors=colors):
                self.draw_command_batcher.queue(DefaultStyleChanged(Style(colors)))
            case HighlightAttributesDefine(id=style_id, style=style):
                self.defined_styles[style_id] = style
            case CursorGoto(grid=grid, row=row, column=column):
                self._set_cursor_position(grid, column, row)
            case Resize(grid=grid, width=width, height=height):
                self._resize_window(grid, width, height)
            case GridLine(grid=grid, row=row, column_start=column_start, cells=cells):
                window = self.windows.get(grid)
                if window is not None:
                    window.draw_grid_line(row, column_start, cells, self.defined_styles)
            case Clear(grid=grid):
                window = self.windows.get(grid)
                if window is not None:
                    window.clear()
            case Destroy(grid=grid) | WindowClose(grid=grid):
                self._close_window(grid)
            case Scroll(
                grid=grid, top=top, bottom=bottom, left=left, right=right,
                rows=rows, columns=columns,
            ):
                window = self.windows.get(grid)
                if window is not None:
                    window.scroll_region(top, bottom, left, right, rows, columns)
            case WindowPosition(
                grid=grid, start_row=start_row, start_column=start_column,
                width=width, height=height,
            ):
                self._set_window_position(grid, start_column, start_row, width, height)
            case WindowFloatPosition(
                grid=grid, anchor=anchor, anchor_grid=anchor_grid,
                anchor_row=anchor_row, anchor_column=anchor_column,
            ):
                self._set_window_float_position(
                    grid, anchor_grid, anchor, anchor_column, anchor_row
                )
            case WindowHide(grid=grid):
                window = self.windows.get(grid)
                if window is not None:
                    window.hide()
            case MessageSetPosition(grid=grid, row=row):
                self._set_message_position(grid, row)
            case WindowViewport(grid=grid, top_line=top_line, bottom_line=bottom_line):
                self._send_updated_viewport(grid, top_line, bottom_line)
            case _:
                pass

    def _close_window(self, grid: int) -> None:
        window = self.windows.pop(grid, None)
        if window is not None:
            window.close()
            self.draw_command_batcher.queue(CloseWindow(grid))

    def _new_window(
        self,
        grid: int,
        width: int,
        height: int,
        anchor_info: Optional[AnchorInfo],
        left: float,
        top: float,
    ) -> None:
        self.windows[grid] = Window(
            grid, width, height, anchor_info, left, top, self.draw_command_batcher
        )

    def _resize_window(self, grid: int, width: int, height: int) -> None:
        logger.debug("editor resize %s", grid)
        window = self.windows.get(grid)
        if window is not None:
            window.resize(width, height)
        else:
            self._new_window(grid, width, height, None, 0.0, 0.0)

    def _set_window_position(
        self, grid: int, start_left: int, start_top: int, width: int, height: int
    ) -> None:
        logger.debug("position %s", grid)
        window = self.windows.get(grid)
        if window is not None:
            window.position(width, height, None, float(start_left), float(start_top))
            window.show()
        else:
            self._new_window(grid, width, height, None, float(start_left), float(start_top))

    def _set_window_float_position(
        self,
        grid: int,
        anchor_grid: int,
        anchor_type: WindowAnchor,
        anchor_left: float,
        anchor_top: float,
    ) -> None:
        logger.debug("floating position %s", grid)
        parent_position = self._window_top_left(anchor_grid)
        window = self.windows.get(grid)
        if window is None:
            logger.error("Attempted to float window that does not exist.")
            return
        width, height = window.width, window.height
        left, top = anchor_type.modified_top_left(anchor_left, anchor_top, width, height)
        if parent_position is not None:
            left += parent_position[0]
            top += parent_position[1]
        anchor_info = AnchorInfo(anchor_grid, anchor_type, anchor_left, anchor_top)
        window.position(width, height, anchor_info, left, top)
        window.show()

    def _set_message_position(self, grid: int, grid_top: int) -> None:
        logger.debug("message position %s", grid)
        parent = self.windows.get(_BASE_GRID)
        parent_width = parent.width if parent is not None else 1
        anchor_info = AnchorInfo(_BASE_GRID, WindowAnchor.NORTH_WEST, 0.0, float(grid_top))
        window = self.windows.get(grid)
        if window is not None:
            window.position(parent_width, window.height, anchor_info, 0.0, float(grid_top))
            window.show()
        else:
            self._new_window(grid, parent_width, 1, anchor_info, 0.0, float(grid_top))

    def _window_top_left(self, grid: int) -> Optional[tuple[float, float]]:
        window = self.windows.get(grid)
        if window is None:
            return None
        anchor = window.anchor_info
        if anchor is None:
            return window.grid_position
        parent = self._window_top_left(anchor.anchor_grid_id)
        if parent is None:
            return None
        left, top = anchor.anchor_type.modified_top_left(
            anchor.anchor_left, anchor.anchor_top, window.width, window.height
        )
        return (parent[0] + left, parent[1] + top)

    def _set_cursor_position(self, grid: int, grid_left: int, grid_top: int) -> None:
        self.cursor.parent_window_id = grid
        self.cursor.grid_position = (grid_left, grid_top)

    def _send_cursor_info(self) -> None:
        grid_left, grid_top = self.cursor.grid_position
        window = self.windows.get(self.cursor.parent_window_id)
        if window is not None:
            character, double_width = window.get_cursor_character(grid_left, grid_top)
            self.cursor.character = character
            self.cursor.double_width = double_width
        else:
            self.cursor.double_width = False
            self.cursor.character = " "
        self.draw_command_batcher.queue(UpdateCursor(dataclasses.replace(self.cursor)))

    def _set_option(self, gui_option: GuiOption) -> None:
        logger.debug("Option set %r", gui_option)
        if gui_option.name == "guifont":
            self.draw_command_batcher.queue(FontChanged(gui_option.value))
            for window in self.windows.values():
                window.redraw()

    def _send_updated_viewport(self, grid: int, top_line: float, bottom_line: float) -> None:
        window = self.windows.get(grid)
        if window is not None:
            window.update_viewport(top_line, bottom_line)
        else:
            logger.warning("viewport event received before window initialized")


def start_editor(
    redraw_event_receiver: _Source,
    batched_draw_command_sender: _Sink,
    window_command_sender: _Sink,
    scheduler: Optional[RedrawScheduler] = None,
) -> threading.Thread:
    """Run an editor on its own thread until the receiver yields None."""

    def run() -> None:
        editor = Editor(batched_draw_command_sender, window_command_sender, scheduler)
        while (event := redraw_event_receiver.get()) is not None:
            editor.handle_redraw_event(event)

    thread = threading.Thread(target=run, name="editor", daemon=True)
    thread.start()
    return thread