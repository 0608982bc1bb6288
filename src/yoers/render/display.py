"""Display-list instructions and the metrics/colours used to produce them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Union


class Color(NamedTuple):
    r: int
    g: int
    b: int

    @property
    def hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


@dataclass(frozen=True, slots=True)
class Move:
    """Set the pen position for the following instructions."""

    x: int
    y: int


@dataclass(frozen=True, slots=True)
class Char:
    """Draw ``glyph`` at the pen."""

    glyph: str
    color: Color


@dataclass(frozen=True, slots=True)
class Rect:
    """Fill a ``width`` x ``height`` rectangle anchored at the pen."""

    width: int
    height: int
    color: Color


DisplayCommand = Union[Move, Char, Rect]


@dataclass(frozen=True, slots=True)
class FontMetrics:
    """Uniform glyph advance, line spacing and caret/selection height."""

    advance: int
    line_spacing: int
    height: int

    def __post_init__(self) -> None:
        if self.advance <= 0 or self.line_spacing <= 0 or self.height <= 0:
            raise ValueError("font metrics must be positive")


@dataclass(frozen=True, slots=True)
class RenderStyle:
    background: Color
    foreground: Color
    caret: Color
    selection: Color
    caret_width: int = 2
    selection_overhang: int = 1


DEFAULT_STYLE = RenderStyle(
    background=Color(0, 43, 53),
    foreground=Color(242, 232, 255),
    caret=Color(242, 232, 255),
    selection=Color(142, 132, 155),
)

# Terminal grids: one cell per glyph, so the caret becomes a block and must not
# share the glyph colour.
CELL_METRICS = FontMetrics(advance=1, line_spacing=1, height=1)
CELL_STYLE = RenderStyle(
    background=Color(0, 43, 53),
    foreground=Color(242, 232, 255),
    caret=Color(181, 137, 0),
    selection=Color(88, 110, 117),
    caret_width=1,
    selection_overhang=0,
)

__all__ = [
    "CELL_METRICS",
    "CELL_STYLE",
    "Char",
    "Color",
    "DEFAULT_STYLE",
    "DisplayCommand",
    "FontMetrics",
    "Move",
    "Rect",
    "RenderStyle",
]
