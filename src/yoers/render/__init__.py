"""Backend-agnostic rendering: display-list types and the view renderer."""

from .display import (
    CELL_METRICS,
    CELL_STYLE,
    DEFAULT_STYLE,
    Char,
    Color,
    DisplayCommand,
    FontMetrics,
    Move,
    Rect,
    RenderStyle,
)
from .pipeline import TAB_WIDTH, ViewState, render_view

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
    "TAB_WIDTH",
    "ViewState",
    "render_view",
]
