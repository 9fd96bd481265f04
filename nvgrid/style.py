"""Colours and highlight styles."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Color:
    """An RGBA colour with float components in the range 0 to 1."""

    r: float
    g: float
    b: float
    a: float = 1.0


@dataclass
class Colors:
    """A foreground, background and special colour, each possibly unset."""

    foreground: Color | None = None
    background: Color | None = None
    special: Color | None = None


def _pick(color: Color | None, fallback: Color | None, name: str) -> Color:
    if color is not None:
        return color
    if fallback is None:
        raise ValueError(f"default {name} colour is not set")
    return fallback


@dataclass
class Style:
    """A highlight style: colours plus text attributes."""

    colors: Colors = field(default_factory=Colors)
    reverse: bool = False
    italic: bool = False
    bold: bool = False
    strikethrough: bool = False
    underline: bool = False
    undercurl: bool = False
    blend: int = 0

    def foreground(self, default_colors: Colors) -> Color:
        """The colour text is drawn in, honouring reverse video."""
        if self.reverse:
            return _pick(self.colors.background, default_colors.background, "background")
        return _pick(self.colors.foreground, default_colors.foreground, "foreground")

    def background(self, default_colors: Colors) -> Color:
        """The colour behind the text, honouring reverse video."""
        if self.reverse:
            return _pick(self.colors.foreground, default_colors.foreground, "foreground")
        return _pick(self.colors.background, default_colors.background, "background")

    def special(self, default_colors: Colors) -> Color:
        """The colour used for underlines and undercurls."""
        return _pick(self.colors.special, default_colors.special, "special")