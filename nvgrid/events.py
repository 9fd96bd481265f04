"""Decoding of the redraw notifications sent by the editor process."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from nvgrid.cursor import CursorMode, parse_cursor_shape
from nvgrid.style import Color, Colors, Style

logger = logging.getLogger(__name__)

StyledContent = List[Tuple[int, str]]

_U64_LIMIT = 1 << 64
_I64_LIMIT = 1 << 63


class ParseError(ValueError):
    """A redraw notification did not have the expected shape.

    ``kind`` names the expected type ("array", "u64", "window anchor", ...)
    and ``value`` holds what was found instead; both are None when the
    overall layout of the event was wrong.
    """

    def __init__(self, kind: str | None = None, value: Any = None) -> None:
        self.kind = kind
        self.value = value
        if kind is None:
            message = "invalid event format"
        else:
            message = f"invalid {kind} format {value!r}"
        super().__init__(message)


def _parse_array(value: Any) -> list[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    raise ParseError("array", value)


def _parse_map(value: Any) -> list[tuple[Any, Any]]:
    if isinstance(value, Mapping):
        return list(value.items())
    raise ParseError("map", value)


def _parse_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    raise ParseError("string", value)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _parse_u64(value: Any) -> int:
    if _is_int(value) and 0 <= value < _U64_LIMIT:
        return value
    raise ParseError("u64", value)


def _parse_i64(value: Any) -> int:
    if _is_int(value) and -_I64_LIMIT <= value < _I64_LIMIT:
        return value
    raise ParseError("i64", value)


def _parse_f64(value: Any) -> float:
    if isinstance(value, float):
        return value
    raise ParseError("f64", value)


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise ParseError("bool", value)


def _extract(values: list[Any], count: int) -> list[Any]:
    if len(values) != count:
        raise ParseError()
    return values


@dataclass
class GridLineCell:
    """One run of text in a grid_line event."""

    text: str
    highlight_id: Optional[int] = None
    repeat: Optional[int] = None


class MessageKind(enum.Enum):
    UNKNOWN = "unknown"
    CONFIRM = "confirm"
    CONFIRM_SUBSTITUTE = "confirm_sub"
    ERROR = "emsg"
    ECHO = "echo"
    ECHO_MESSAGE = "echomsg"
    ECHO_ERROR = "echoerr"
    LUA_ERROR = "lua_error"
    RPC_ERROR = "rpc_error"
    RETURN_PROMPT = "return_prompt"
    QUICK_FIX = "quickfix"
    SEARCH_COUNT = "search_count"
    WARNING = "wmsg"


def parse_message_kind(kind: str) -> MessageKind:
    """Map a message kind name to a MessageKind; unknown names give UNKNOWN."""
    try:
        return MessageKind(kind)
    except ValueError:
        return MessageKind.UNKNOWN


_GUI_OPTION_PARSERS: dict[str, Callable[[Any], Any]] = {
    "arabicshape": _parse_bool,
    "ambiwidth": _parse_string,
    "emoji": _parse_bool,
    "guifont": _parse_string,
    "guifontset": _parse_string,
    "guifontwide": _parse_string,
    "linespace": _parse_u64,
    "pumblend": _parse_u64,
    "showtabline": _parse_u64,
    "termguicolors": _parse_bool,
}


@dataclass(frozen=True)
class GuiOption:
    """A UI option and its value; unknown options keep the raw value."""

    name: str
    value: Any

    @property
    def known(self) -> bool:
        return self.name in _GUI_OPTION_PARSERS


class WindowAnchor(enum.Enum):
    NORTH_WEST = "NW"
    NORTH_EAST = "NE"
    SOUTH_WEST = "SW"
    SOUTH_EAST = "SE"

    def modified_top_left(
        self, grid_left: float, grid_top: float, width: int, height: int
    ) -> tuple[float, float]:
        """The top-left corner of a window of this size anchored at the point."""
        left = float(grid_left)
        top = float(grid_top)
        if self in (WindowAnchor.NORTH_EAST, WindowAnchor.SOUTH_EAST):
            left -= width
        if self in (WindowAnchor.SOUTH_WEST, WindowAnchor.SOUTH_EAST):
            top -= height
        return (left, top)


class EditorMode(enum.Enum):
    NORMAL = "normal"
    INSERT = "insert"
    VISUAL = "visual"
    CMDLINE = "cmdline_normal"
    UNKNOWN = "unknown"


def _parse_editor_mode(name: str) -> EditorMode:
    try:
        return EditorMode(name)
    except ValueError:
        return EditorMode.UNKNOWN


class RedrawEvent:
    """Base class of all decoded redraw events."""


@dataclass
class SetTitle(RedrawEvent):
    title: str


@dataclass
class ModeInfoSet(RedrawEvent):
    cursor_modes: list[CursorMode]


@dataclass
class OptionSet(RedrawEvent):
    gui_option: GuiOption


@dataclass
class ModeChange(RedrawEvent):
    mode: EditorMode
    mode_index: int
    mode_name: str = ""


@dataclass
class MouseOn(RedrawEvent):
    pass


@dataclass
class MouseOff(RedrawEvent):
    pass


@dataclass
class BusyStart(RedrawEvent):
    pass


@dataclass
class BusyStop(RedrawEvent):
    pass


@dataclass
class Flush(RedrawEvent):
    pass


@dataclass
class Resize(RedrawEvent):
    grid: int
    width: int
    height: int


@dataclass
class DefaultColorsSet(RedrawEvent):
    colors: Colors


@dataclass
class HighlightAttributesDefine(RedrawEvent):
    id: int
    style: Style


@dataclass
class GridLine(RedrawEvent):
    grid: int
    row: int
    column_start: int
    cells: list[GridLineCell] = field(default_factory=list)


@dataclass
class Clear(RedrawEvent):
    grid: int


@dataclass
class Destroy(RedrawEvent):
    grid: int


@dataclass
class CursorGoto(RedrawEvent):
    grid: int
    row: int
    column: int


@dataclass
class Scroll(RedrawEvent):
    grid: int
    top: int
    bottom: int
    left: int
    right: int
    rows: int
    columns: int


@dataclass
class WindowPosition(RedrawEvent):
    grid: int
    start_row: int
    start_column: int
    width: int
    height: int


@dataclass
class WindowFloatPosition(RedrawEvent):
    grid: int
    anchor: WindowAnchor
    anchor_grid: int
    anchor_row: float
    anchor_column: float
    focusable: bool


@dataclass
class WindowExternalPosition(RedrawEvent):
    grid: int


@dataclass
class WindowHide(RedrawEvent):
    grid: int


@dataclass
class WindowClose(RedrawEvent):
    grid: int


@dataclass
class MessageSetPosition(RedrawEvent):
    grid: int
    row: int
    scrolled: bool
    separator_character: str


@dataclass
class WindowViewport(RedrawEvent):
    grid: int
    top_line: float
    bottom_line: float
    current_line: float
    current_column: float


@dataclass
class CommandLineShow(RedrawEvent):
    content: StyledContent
    position: int
    first_character: str
    prompt: str
    indent: int
    level: int


@dataclass
class CommandLinePosition(RedrawEvent):
    position: int
    level: int


@dataclass
class CommandLineSpecialCharacter(RedrawEvent):
    character: str
    shift: bool
    level: int


@dataclass
class CommandLineHide(RedrawEvent):
    pass


@dataclass
class CommandLineBlockShow(RedrawEvent):
    lines: list[StyledContent]


@dataclass
class CommandLineBlockAppend(RedrawEvent):
    line: StyledContent


@dataclass
class CommandLineBlockHide(RedrawEvent):
    pass


@dataclass
class MessageShow(RedrawEvent):
    kind: MessageKind
    content: StyledContent
    replace_last: bool


@dataclass
class MessageClear(RedrawEvent):
    pass


@dataclass
class MessageShowMode(RedrawEvent):
    content: StyledContent


@dataclass
class MessageShowCommand(RedrawEvent):
    content: StyledContent


@dataclass
class MessageRuler(RedrawEvent):
    content: StyledContent


@dataclass
class MessageHistoryShow(RedrawEvent):
    entries: list[tuple[MessageKind, StyledContent]]


def unpack_color(packed_color: int) -> Color:
    """Turn a packed 0xRRGGBB integer into an opaque Color."""
    packed = packed_color & 0xFFFFFFFF
    r = (packed & 0x00FF0000) >> 16
    g = (packed & 0xFF00) >> 8
    b = packed & 0xFF
    return Color(r / 255.0, g / 255.0, b / 255.0, 1.0)


_COLOR_ATTRIBUTES = ("foreground", "background", "special")
_FLAG_ATTRIBUTES = ("reverse", "italic", "bold", "strikethrough", "underline", "undercurl")


def parse_style(style_map: Any) -> Style:
    """Build a Style from a highlight attribute map; unknown keys are ignored."""
    style = Style(Colors())
    for name, value in _parse_map(style_map):
        if not isinstance(name, str):
            logger.info("Invalid attribute format")
            continue
        if name in _COLOR_ATTRIBUTES and _is_int(value):
            setattr(style.colors, name, unpack_color(_parse_u64(value)))
        elif name in _FLAG_ATTRIBUTES and isinstance(value, bool):
            setattr(style, name, value)
        elif name == "blend" and _is_int(value):
            style.blend = _parse_u64(value) & 0xFF
        else:
            logger.info("Ignored style attribute: %s", name)
    return style


def _parse_set_title(args: list[Any]) -> RedrawEvent:
    (title,) = _extract(args, 1)
    return SetTitle(title=_parse_string(title))


def _parse_mode_info_set(args: list[Any]) -> RedrawEvent:
    _cursor_style_enabled, mode_info = _extract(args, 2)
    cursor_modes = []
    for mode_info_value in _parse_array(mode_info):
        mode = CursorMode()
        for name, value in _parse_map(mode_info_value):
            key = _parse_string(name)
            if key == "cursor_shape":
                mode.shape = parse_cursor_shape(_parse_string(value))
            elif key == "cell_percentage":
                mode.cell_percentage = _parse_u64(value) / 100.0
            elif key == "blinkwait":
                mode.blinkwait = _parse_u64(value)
            elif key == "blinkon":
                mode.blinkon = _parse_u64(value)
            elif key == "blinkoff":
                mode.blinkoff = _parse_u64(value)
            elif key == "attr_id":
                mode.style_id = _parse_u64(value)
        cursor_modes.append(mode)
    return ModeInfoSet(cursor_modes=cursor_modes)


def _parse_option_set(args: list[Any]) -> RedrawEvent:
    name, value = _extract(args, 2)
    name = _parse_string(name)
    parser = _GUI_OPTION_PARSERS.get(name)
    parsed = parser(value) if parser is not None else value
    return OptionSet(gui_option=GuiOption(name, parsed))


def _parse_mode_change(args: list[Any]) -> RedrawEvent:
    mode, mode_index = _extract(args, 2)
    mode_name = _parse_string(mode)
    return ModeChange(
        mode=_parse_editor_mode(mode_name),
        mode_index=_parse_u64(mode_index),
        mode_name=mode_name,
    )


def _parse_grid_resize(args: list[Any]) -> RedrawEvent:
    grid, width, height = _extract(args, 3)
    return Resize(grid=_parse_u64(grid), width=_parse_u64(width), height=_parse_u64(height))


def _parse_default_colors(args: list[Any]) -> RedrawEvent:
    foreground, background, special, _term_fg, _term_bg = _extract(args, 5)
    return DefaultColorsSet(
        colors=Colors(
            foreground=unpack_color(_parse_u64(foreground)),
            background=unpack_color(_parse_u64(background)),
            special=unpack_color(_parse_u64(special)),
        )
    )


def _parse_hl_attr_define(args: list[Any]) -> RedrawEvent:
    highlight_id, attributes, _terminal_attributes, _info = _extract(args, 4)
    style = parse_style(attributes)
    return HighlightAttributesDefine(id=_parse_u64(highlight_id), style=style)


def _parse_grid_line_cell(value: Any) -> GridLineCell:
    contents = _parse_array(value)
    if not contents:
        raise ParseError()
    highlight_id = _parse_u64(contents[1]) if len(contents) > 1 else None
    repeat = _parse_u64(contents[2]) if len(contents) > 2 else None
    return GridLineCell(text=_parse_string(contents[0]), highlight_id=highlight_id, repeat=repeat)


def _parse_grid_line(args: list[Any]) -> RedrawEvent:
    grid, row, column_start, cells = _extract(args, 4)
    return GridLine(
        grid=_parse_u64(grid),
        row=_parse_u64(row),
        column_start=_parse_u64(column_start),
        cells=[_parse_grid_line_cell(cell) for cell in _parse_array(cells)],
    )


def _parse_grid_clear(args: list[Any]) -> RedrawEvent:
    (grid,) = _extract(args, 1)
    return Clear(grid=_parse_u64(grid))


def _parse_grid_destroy(args: list[Any]) -> RedrawEvent:
    (grid,) = _extract(args, 1)
    return Destroy(grid=_parse_u64(grid))


def _parse_grid_cursor_goto(args: list[Any]) -> RedrawEvent:
    grid, row, column = _extract(args, 3)
    return CursorGoto(grid=_parse_u64(grid), row=_parse_u64(row), column=_parse_u64(column))


def _parse_grid_scroll(args: list[Any]) -> RedrawEvent:
    grid, top, bottom, left, right, rows, columns = _extract(args, 7)
    return Scroll(
        grid=_parse_u64(grid),
        top=_parse_u64(top),
        bottom=_parse_u64(bottom),
        left=_parse_u64(left),
        right=_parse_u64(right),
        rows=_parse_i64(rows),
        columns=_parse_i64(columns),
    )


def _parse_win_pos(args: list[Any]) -> RedrawEvent:
    grid, _window, start_row, start_column, width, height = _extract(args, 6)
    return WindowPosition(
        grid=_parse_u64(grid),
        start_row=_parse_u64(start_row),
        start_column=_parse_u64(start_column),
        width=_parse_u64(width),
        height=_parse_u64(height),
    )


def _parse_window_anchor(value: Any) -> WindowAnchor:
    name = _parse_string(value)
    try:
        return WindowAnchor(name)
    except ValueError:
        raise ParseError("window anchor", name) from None


def _parse_win_float_pos(args: list[Any]) -> RedrawEvent:
    grid, _window, anchor, anchor_grid, anchor_row, anchor_column, focusable = _extract(args, 7)
    return WindowFloatPosition(
        grid=_parse_u64(grid),
        anchor=_parse_window_anchor(anchor),
        anchor_grid=_parse_u64(anchor_grid),
        anchor_row=_parse_f64(anchor_row),
        anchor_column=_parse_f64(anchor_column),
        focusable=_parse_bool(focusable),
    )


def _parse_win_external_pos(args: list[Any]) -> RedrawEvent:
    grid, _window = _extract(args, 2)
    return WindowExternalPosition(grid=_parse_u64(grid))


def _parse_win_hide(args: list[Any]) -> RedrawEvent:
    (grid,) = _extract(args, 1)
    return WindowHide(grid=_parse_u64(grid))


def _parse_win_close(args: list[Any]) -> RedrawEvent:
    (grid,) = _extract(args, 1)
    return WindowClose(grid=_parse_u64(grid))


def _parse_msg_set_pos(args: list[Any]) -> RedrawEvent:
    grid, row, scrolled, separator_character = _extract(args, 4)
    return MessageSetPosition(
        grid=_parse_u64(grid),
        row=_parse_u64(row),
        scrolled=_parse_bool(scrolled),
        separator_character=_parse_string(separator_character),
    )


def _parse_win_viewport(args: list[Any]) -> RedrawEvent:
    grid, _window, top_line, bottom_line, current_line, current_column = _extract(args, 6)
    return WindowViewport(
        grid=_parse_u64(grid),
        top_line=_parse_f64(top_line),
        bottom_line=_parse_f64(bottom_line),
        current_line=_parse_f64(current_line),
        current_column=_parse_f64(current_column),
    )


def _parse_styled_content(line: Any) -> StyledContent:
    content = []
    for item in _parse_array(line):
        style_id, text = _extract(_parse_array(item), 2)
        content.append((_parse_u64(style_id), _parse_string(text)))
    return content


def _parse_cmdline_show(args: list[Any]) -> RedrawEvent:
    content, position, first_character, prompt, indent, level = _extract(args, 6)
    return CommandLineShow(
        content=_parse_styled_content(content),
        position=_parse_u64(position),
        first_character=_parse_string(first_character),
        prompt=_parse_string(prompt),
        indent=_parse_u64(indent),
        level=_parse_u64(level),
    )


def _parse_cmdline_pos(args: list[Any]) -> RedrawEvent:
    position, level = _extract(args, 2)
    return CommandLinePosition(position=_parse_u64(position), level=_parse_u64(level))


def _parse_cmdline_special_char(args: list[Any]) -> RedrawEvent:
    character, shift, level = _extract(args, 3)
    return CommandLineSpecialCharacter(
        character=_parse_string(character),
        shift=_parse_bool(shift),
        level=_parse_u64(level),
    )


def _parse_cmdline_block_show(args: list[Any]) -> RedrawEvent:
    (lines,) = _extract(args, 1)
    return CommandLineBlockShow(lines=[_parse_styled_content(line) for line in _parse_array(lines)])


def _parse_cmdline_block_append(args: list[Any]) -> RedrawEvent:
    (line,) = _extract(args, 1)
    return CommandLineBlockAppend(line=_parse_styled_content(line))


def _parse_msg_show(args: list[Any]) -> RedrawEvent:
    kind, content, replace_last = _extract(args, 3)
    return MessageShow(
        kind=parse_message_kind(_parse_string(kind)),
        content=_parse_styled_content(content),
        replace_last=_parse_bool(replace_last),
    )


def _parse_msg_showmode(args: list[Any]) -> RedrawEvent:
    (content,) = _extract(args, 1)
    return MessageShowMode(content=_parse_styled_content(content))


def _parse_msg_showcmd(args: list[Any]) -> RedrawEvent:
    (content,) = _extract(args, 1)
    return MessageShowCommand(content=_parse_styled_content(content))


def _parse_msg_ruler(args: list[Any]) -> RedrawEvent:
    (content,) = _extract(args, 1)
    return MessageRuler(content=_parse_styled_content(content))


def _parse_msg_history_entry(entry: Any) -> tuple[MessageKind, StyledContent]:
    kind, content = _extract(_parse_array(entry), 2)
    return (parse_message_kind(_parse_string(kind)), _parse_styled_content(content))


def _parse_msg_history_show(args: list[Any]) -> RedrawEvent:
    (entries,) = _extract(args, 1)
    return MessageHistoryShow(
        entries=[_parse_msg_history_entry(entry) for entry in _parse_array(entries)]
    )


_EventParser = Callable[[List[Any]], Optional[RedrawEvent]]

_PARSERS: dict[str, _EventParser] = {
    "set_title": _parse_set_title,
    "set_icon": lambda _args: None,
    "mode_info_set": _parse_mode_info_set,
    "option_set": _parse_option_set,
    "mode_change": _parse_mode_change,
    "mouse_on": lambda _args: MouseOn(),
    "mouse_off": lambda _args: MouseOff(),
    "busy_start": lambda _args: BusyStart(),
    "busy_stop": lambda _args: BusyStop(),
    "flush": lambda _args: Flush(),
    "grid_resize": _parse_grid_resize,
    "default_colors_set": _parse_default_colors,
    "hl_attr_define": _parse_hl_attr_define,
    "grid_line": _parse_grid_line,
    "grid_clear": _parse_grid_clear,
    "grid_destroy": _parse_grid_destroy,
    "grid_cursor_goto": _parse_grid_cursor_goto,
    "grid_scroll": _parse_grid_scroll,
    "win_pos": _parse_win_pos,
    "win_float_pos": _parse_win_float_pos,
    "win_external_pos": _parse_win_external_pos,
    "win_hide": _parse_win_hide,
    "win_close": _parse_win_close,
    "msg_set_pos": _parse_msg_set_pos,
    "win_viewport": _parse_win_viewport,
    "cmdline_show": _parse_cmdline_show,
    "cmdline_pos": _parse_cmdline_pos,
    "cmdline_special_char": _parse_cmdline_special_char,
    "cmdline_hide": lambda _args: CommandLineHide(),
    "cmdline_block_show": _parse_cmdline_block_show,
    "cmdline_block_append": _parse_cmdline_block_append,
    "cmdline_block_hide": lambda _args: CommandLineBlockHide(),
    "msg_show": _parse_msg_show,
    "msg_clear": lambda _args: MessageClear(),
    "msg_showmode": _parse_msg_showmode,
    "msg_showcmd": _parse_msg_showcmd,
    "msg_ruler": _parse_msg_ruler,
    "msg_history_show": _parse_msg_history_show,
}


def parse_redraw_event(event_value: Any) -> list[RedrawEvent]:
    """Decode one ``[name, args, args, ...]`` batch from a redraw notification.

    Events that are not understood are skipped; malformed ones raise ParseError.
    """
    contents = _parse_array(event_value)
    if not contents:
        raise ParseError()
    event_name = _parse_string(contents[0])
    parser = _PARSERS.get(event_name)

    parsed_events = []
    for event in contents[1:]:
        parameters = _parse_array(event)
        if parser is None:
            continue
        parsed = parser(parameters)
        if parsed is not None:
            parsed_events.append(parsed)
    return parsed_events