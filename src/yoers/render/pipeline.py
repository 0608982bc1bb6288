"""Turn buffer + view state into a display list."""

from __future__ import annotations

from typing import List, Optional, Protocol

from yoers.buffer import Buffer
from yoers.runtime.telemetry import span

from .display import (
    DEFAULT_STYLE,
    Char,
    DisplayCommand,
    FontMetrics,
    Move,
    Rect,
    RenderStyle,
)

TAB_WIDTH = 4
_TERMINATORS = ("\n", "\r")


class ViewState(Protocol):
    """The three view accessors rendering depends on."""

    @property
    def index(self) -> int: ...

    @property
    def selection(self) -> Optional[range]: ...

    @property
    def first_visible_line(self) -> int: ...


def render_view(
    buffer: Buffer,
    view: ViewState,
    metrics: FontMetrics,
    *,
    viewport_height: int,
    style: RenderStyle = DEFAULT_STYLE,
) -> List[DisplayCommand]:
    """Build the display list for ``view`` over ``buffer``.

    Reads, never mutates. Lines are clipped vertically once the pen passes
    ``viewport_height``; there is no horizontal clipping, so long lines run
    off the right edge instead of wrapping.
    """

    caret = view.index
    selection = view.selection
    first_line = min(max(view.first_visible_line, 0), buffer.len_lines() - 1)
    adv = metrics.advance
    caret_rect = Rect(style.caret_width, metrics.height, style.caret)
    selection_rect = Rect(adv + style.selection_overhang, metrics.height, style.selection)

    display: List[DisplayCommand] = []
    with span(
        "render::view",
        component="render",
        metadata={"buffer": buffer.name, "first_line": first_line},
    ) as handle:
        x = 0
        y = 0
        idx = buffer.line_to_char(first_line)
        clipped = False
        for ch in buffer.chars(idx):
            if selection is not None and idx in selection and ch not in _TERMINATORS:
                display.append(Move(x, y))
                display.append(selection_rect)
            if idx == caret:
                display.append(Move(x, y))
                display.append(caret_rect)

            if ch == "\n":
                y += metrics.line_spacing
                x = 0
                if y > viewport_height:
                    clipped = True
                    break
            elif ch == "\t":
                x += adv * TAB_WIDTH
            elif ch == "\r":
                pass
            else:
                display.append(Move(x, y))
                display.append(Char(ch, style.foreground))
                x += adv
            idx += 1

        # The caret may sit one past the last character.
        if not clipped and caret == idx:
            display.append(Move(x, y))
            display.append(caret_rect)
        handle.add_metadata("commands", len(display))
    return display


__all__ = ["TAB_WIDTH", "ViewState", "render_view"]
