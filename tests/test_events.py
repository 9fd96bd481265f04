import pytest

from nvgrid.cursor import CursorShape
from nvgrid.events import (
    BusyStart,
    CommandLineShow,
    CursorGoto,
    DefaultColorsSet,
    EditorMode,
    Flush,
    GridLine,
    GridLineCell,
    GuiOption,
    HighlightAttributesDefine,
    MessageHistoryShow,
    MessageKind,
    MessageShow,
    ModeChange,
    ModeInfoSet,
    MouseOn,
    OptionSet,
    ParseError,
    Resize,
    Scroll,
    SetTitle,
    WindowAnchor,
    WindowFloatPosition,
    parse_message_kind,
    parse_redraw_event,
    parse_style,
    unpack_color,
)


def test_set_title():
    assert parse_redraw_event(["set_title", ["hello"]]) == [SetTitle(title="hello")]


def test_batch_of_several_events():
    events = parse_redraw_event(["grid_resize", [1, 80, 24], [2, 10, 5]])
    assert events == [Resize(1, 80, 24), Resize(2, 10, 5)]


def test_simple_events():
    assert parse_redraw_event(["mouse_on", []]) == [MouseOn()]
    assert parse_redraw_event(["flush", []]) == [Flush()]
    assert parse_redraw_event(["busy_start", []]) == [BusyStart()]


def test_unknown_and_ignored_events_are_skipped():
    assert parse_redraw_event(["set_icon", ["icon"]]) == []
    assert parse_redraw_event(["something_new", [1, 2]]) == []


def test_unknown_event_still_requires_array_parameters():
    with pytest.raises(ParseError):
        parse_redraw_event(["something_new", 5])


def test_wrong_argument_count():
    with pytest.raises(ParseError) as info:
        parse_redraw_event(["grid_clear", [1, 2]])
    assert str(info.value) == "invalid event format"


def test_missing_event_name():
    with pytest.raises(ParseError):
        parse_redraw_event([])


def test_not_an_array():
    with pytest.raises(ParseError) as info:
        parse_redraw_event("flush")
    assert info.value.kind == "array"
    assert str(info.value).startswith("invalid array format")


def test_invalid_u64():
    with pytest.raises(ParseError) as info:
        parse_redraw_event(["grid_clear", ["x"]])
    assert info.value.kind == "u64"
    assert info.value.value == "x"


def test_negative_is_not_u64():
    with pytest.raises(ParseError):
        parse_redraw_event(["grid_cursor_goto", [1, -1, 0]])


def test_bool_is_not_u64():
    with pytest.raises(ParseError):
        parse_redraw_event(["grid_clear", [True]])


def test_cursor_goto():
    assert parse_redraw_event(["grid_cursor_goto", [1, 4, 7]]) == [CursorGoto(1, 4, 7)]


def test_grid_scroll_accepts_negative_rows():
    events = parse_redraw_event(["grid_scroll", [1, 0, 20, 0, 80, -3, 0]])
    assert events == [Scroll(1, 0, 20, 0, 80, -3, 0)]


def test_mode_info_set():
    info = {"cursor_shape": "vertical", "cell_percentage": 25, "blinkon": 400, "attr_id": 7}
    (event,) = parse_redraw_event(["mode_info_set", [True, [info, {}]]])
    assert isinstance(event, ModeInfoSet)
    first, second = event.cursor_modes
    assert first.shape == CursorShape.VERTICAL
    assert first.cell_percentage == pytest.approx(0.25)
    assert first.blinkon == 400
    assert first.style_id == 7
    assert first.blinkoff is None
    assert second.shape is None


def test_option_set_known_and_unknown():
    events = parse_redraw_event(["option_set", ["guifont", "Mono:h12"], ["mystery", [1]]])
    assert events == [
        OptionSet(GuiOption("guifont", "Mono:h12")),
        OptionSet(GuiOption("mystery", [1])),
    ]
    assert events[0].gui_option.known
    assert not events[1].gui_option.known


def test_option_set_wrong_type():
    with pytest.raises(ParseError):
        parse_redraw_event(["option_set", ["linespace", "wide"]])


def test_mode_change():
    events = parse_redraw_event(["mode_change", ["insert", 3], ["replace", 4]])
    assert events[0] == ModeChange(EditorMode.INSERT, 3, "insert")
    assert events[1].mode == EditorMode.UNKNOWN
    assert events[1].mode_name == "replace"


def test_default_colors():
    (event,) = parse_redraw_event(["default_colors_set", [0xFFFFFF, 0x000000, 0xFF0000, 0, 0]])
    assert isinstance(event, DefaultColorsSet)
    assert event.colors.foreground == unpack_color(0xFFFFFF)
    assert event.colors.background == unpack_color(0x000000)
    assert event.colors.special == unpack_color(0xFF0000)


def test_unpack_color_components():
    color = unpack_color(0x123456)
    assert round(color.r * 255) == 0x12
    assert round(color.g * 255) == 0x34
    assert round(color.b * 255) == 0x56
    assert color.a == 1.0


def test_unpack_color_ignores_high_bits():
    assert unpack_color(0xAB123456) == unpack_color(0x123456)


def test_hl_attr_define():
    attributes = {"foreground": 0x00FF00, "bold": True, "blend": 30, "unknown": 1}
    (event,) = parse_redraw_event(["hl_attr_define", [5, attributes, {}, []]])
    assert isinstance(event, HighlightAttributesDefine)
    assert event.id == 5
    assert event.style.bold
    assert not event.style.italic
    assert event.style.blend == 30
    assert event.style.colors.foreground == unpack_color(0x00FF00)
    assert event.style.colors.background is None


def test_parse_style_ignores_mistyped_attributes():
    style = parse_style({"bold": 1, "foreground": "red"})
    assert style.bold is False
    assert style.colors.foreground is None


def test_parse_style_requires_map():
    with pytest.raises(ParseError) as info:
        parse_style([1, 2])
    assert info.value.kind == "map"


def test_grid_line():
    cells = [["a", 1, 3], ["b"], ["", 0]]
    (event,) = parse_redraw_event(["grid_line", [1, 2, 5, cells]])
    assert event == GridLine(
        1,
        2,
        5,
        [GridLineCell("a", 1, 3), GridLineCell("b", None, None), GridLineCell("", 0, None)],
    )


def test_grid_line_empty_cell():
    with pytest.raises(ParseError):
        parse_redraw_event(["grid_line", [1, 0, 0, [[]]]])


def test_win_float_pos():
    (event,) = parse_redraw_event(["win_float_pos", [3, None, "NE", 1, 2.0, 10.0, True]])
    assert event == WindowFloatPosition(3, WindowAnchor.NORTH_EAST, 1, 2.0, 10.0, True)


def test_win_float_pos_bad_anchor():
    with pytest.raises(ParseError) as info:
        parse_redraw_event(["win_float_pos", [3, None, "XX", 1, 2.0, 10.0, True]])
    assert str(info.value).startswith("invalid window anchor format")
    assert info.value.value == "XX"


def test_win_float_pos_integer_row_is_not_float():
    with pytest.raises(ParseError) as info:
        parse_redraw_event(["win_float_pos", [3, None, "NW", 1, 2, 10.0, True]])
    assert info.value.kind == "f64"


def test_cmdline_show():
    content = [[0, "echo "], [4, "'hi'"]]
    (event,) = parse_redraw_event(["cmdline_show", [content, 5, ":", "", 0, 1]])
    assert event == CommandLineShow([(0, "echo "), (4, "'hi'")], 5, ":", "", 0, 1)


def test_styled_content_must_be_pairs():
    with pytest.raises(ParseError):
        parse_redraw_event(["msg_showmode", [[[1, "a", "b"]]]])


def test_msg_show():
    events = parse_redraw_event(["msg_show", ["emsg", [[1, "E42"]], False], ["", [], True]])
    assert events[0] == MessageShow(MessageKind.ERROR, [(1, "E42")], False)
    assert events[1].kind == MessageKind.UNKNOWN
    assert events[1].replace_last is True


def test_msg_history_show():
    entries = [["echomsg", [[0, "one"]]], ["wmsg", [[2, "two"]]]]
    (event,) = parse_redraw_event(["msg_history_show", [entries]])
    assert event == MessageHistoryShow(
        [(MessageKind.ECHO_MESSAGE, [(0, "one")]), (MessageKind.WARNING, [(2, "two")])]
    )


@pytest.mark.parametrize(
    "name, kind",
    [
        ("confirm", MessageKind.CONFIRM),
        ("confirm_sub", MessageKind.CONFIRM_SUBSTITUTE),
        ("emsg", MessageKind.ERROR),
        ("echo", MessageKind.ECHO),
        ("echomsg", MessageKind.ECHO_MESSAGE),
        ("echoerr", MessageKind.ECHO_ERROR),
        ("lua_error", MessageKind.LUA_ERROR),
        ("rpc_error", MessageKind.RPC_ERROR),
        ("return_prompt", MessageKind.RETURN_PROMPT),
        ("quickfix", MessageKind.QUICK_FIX),
        ("search_count", MessageKind.SEARCH_COUNT),
        ("wmsg", MessageKind.WARNING),
        ("nonsense", MessageKind.UNKNOWN),
    ],
)
def test_parse_message_kind(name, kind):
    assert parse_message_kind(name) == kind


def test_modified_top_left():
    width, height = 4, 3
    nw = WindowAnchor.NORTH_WEST.modified_top_left(10.0, 5.0, width, height)
    ne = WindowAnchor.NORTH_EAST.modified_top_left(10.0, 5.0, width, height)
    sw = WindowAnchor.SOUTH_WEST.modified_top_left(10.0, 5.0, width, height)
    se = WindowAnchor.SOUTH_EAST.modified_top_left(10.0, 5.0, width, height)
    assert nw == (10.0, 5.0)
    assert ne[1] == nw[1] and nw[0] - ne[0] == width
    assert sw[0] == nw[0] and nw[1] - sw[1] == height
    assert se == (ne[0], sw[1])