import pytest

from nvgrid.style import Color, Colors, Style


def make_colors():
    return Colors(
        foreground=Color(0.1, 0.1, 0.1, 0.1),
        background=Color(0.2, 0.1, 0.1, 0.1),
        special=Color(0.3, 0.1, 0.1, 0.1),
    )


def make_default_colors():
    return Colors(
        foreground=Color(0.1, 0.2, 0.1, 0.1),
        background=Color(0.2, 0.2, 0.1, 0.1),
        special=Color(0.3, 0.2, 0.1, 0.1),
    )


def test_foreground():
    colors, defaults = make_colors(), make_default_colors()
    style = Style(make_colors())
    assert style.foreground(defaults) == colors.foreground
    style.colors.foreground = None
    assert style.foreground(defaults) == defaults.foreground


def test_foreground_reverse():
    colors, defaults = make_colors(), make_default_colors()
    style = Style(make_colors())
    style.reverse = True
    assert style.foreground(defaults) == colors.background
    style.colors.background = None
    assert style.foreground(defaults) == defaults.background


def test_background():
    colors, defaults = make_colors(), make_default_colors()
    style = Style(make_colors())
    assert style.background(defaults) == colors.background
    style.colors.background = None
    assert style.background(defaults) == defaults.background


def test_background_reverse():
    colors, defaults = make_colors(), make_default_colors()
    style = Style(make_colors())
    style.reverse = True
    assert style.background(defaults) == colors.foreground
    style.colors.foreground = None
    assert style.background(defaults) == defaults.foreground


def test_special():
    colors, defaults = make_colors(), make_default_colors()
    style = Style(make_colors())
    assert style.special(defaults) == colors.special
    style.colors.special = None
    assert style.special(defaults) == defaults.special


def test_new_style_has_default_attributes():
    style = Style(make_colors())
    assert (style.reverse, style.italic, style.bold) == (False, False, False)
    assert (style.strikethrough, style.underline, style.undercurl) == (False, False, False)
    assert style.blend == 0


def test_styles_compare_by_value():
    assert Style(make_colors()) == Style(make_colors())
    assert Style(make_colors(), bold=True) != Style(make_colors())


def test_missing_default_raises():
    style = Style(Colors())
    with pytest.raises(ValueError):
        style.foreground(Colors())