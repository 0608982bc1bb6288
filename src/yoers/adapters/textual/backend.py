"""Terminal backend pieces that do not need a running Textual app.

``translate_key`` turns Textual key names into core events and
``CellCanvas`` replays a display list onto a character grid rendered with
rich. ``TextualBackend`` glues both to a surface widget.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterator, List, Optional, Protocol, Sequence

from rich.style import Style
from rich.text import Text

from yoers.commands import normalize_modifiers
from yoers.render import (
    CELL_METRICS,
    CELL_STYLE,
    Char,
    Color,
    DisplayCommand,
    FontMetrics,
    Move,
    Rect,
    RenderStyle,
)
from yoers.window import Event, KeyDown, KeyUp, Resize, TextInput


def translate_key(
    key: str, character: Optional[str] = None, *, is_printable: bool = False
) -> List[Event]:
    """Map one Textual key event onto the events a windowing backend would send.

    Terminals report no separate modifier presses, so a shifted special key
    is bracketed by synthetic ``shift`` down/up events to drive selection.
    """

    parts = [part for part in key.split("+") if part] or [key]
    name = parts[-1]
    modifiers = normalize_modifiers(parts[:-1])
    if character and is_printable and "ctrl" not in modifiers and "alt" not in modifiers:
        return [TextInput(character)]
    if "shift" in modifiers:
        return [KeyDown("shift"), KeyDown(name, modifiers), KeyUp("shift")]
    return [KeyDown(name, modifiers)]


@dataclass(slots=True)
class Cell:
    glyph: str = " "
    fg: Optional[Color] = None
    bg: Optional[Color] = None


class CellCanvas:
    """Character grid that replays ``Move``/``Rect``/``Char`` with cell metrics."""

    def __init__(self, width: int, height: int, style: RenderStyle = CELL_STYLE) -> None:
        self.style = style
        self.width = max(width, 0)
        self.height = max(height, 0)
        self._cells: List[List[Cell]] = []
        self.clear()

    def resize(self, width: int, height: int) -> None:
        self.width = max(width, 0)
        self.height = max(height, 0)
        self.clear()

    def clear(self) -> None:
        self._cells = [[Cell() for _ in range(self.width)] for _ in range(self.height)]

    def cell(self, x: int, y: int) -> Optional[Cell]:
        if 0 <= y < self.height and 0 <= x < self.width:
            return self._cells[y][x]
        return None

    def replay(self, display_list: Sequence[DisplayCommand]) -> None:
        self.clear()
        x = y = 0
        for command in display_list:
            if isinstance(command, Move):
                x, y = command.x, command.y
            elif isinstance(command, Rect):
                for row in range(y, y + max(command.height, 1)):
                    for col in range(x, x + max(command.width, 1)):
                        target = self.cell(col, row)
                        if target is not None:
                            target.bg = command.color
            elif isinstance(command, Char):
                target = self.cell(x, y)
                if target is not None:
                    target.glyph = command.glyph
                    target.fg = command.color

    def lines(self) -> List[str]:
        return ["".join(cell.glyph for cell in row).rstrip() for row in self._cells]

    def to_text(self) -> Text:
        text = Text(no_wrap=True)
        for row_idx, row in enumerate(self._cells):
            if row_idx:
                text.append("\n")
            for cell in row:
                fg = cell.fg or self.style.foreground
                bg = cell.bg or self.style.background
                text.append(cell.glyph, style=Style(color=fg.hex, bgcolor=bg.hex))
        return text


class Surface(Protocol):
    def show(self, text: Text) -> None: ...


class TextualBackend:
    """Queue-fed event source plus a cell canvas presented on ``surface``."""

    metrics: FontMetrics = CELL_METRICS
    style: RenderStyle = CELL_STYLE

    def __init__(self, surface: Surface, width: int, height: int) -> None:
        self.surface = surface
        self.canvas = CellCanvas(width, height, self.style)
        self._pending: Deque[Event] = deque()

    def push(self, *events: Event) -> None:
        for event in events:
            if isinstance(event, Resize):
                self.canvas.resize(event.width, event.height)
            self._pending.append(event)

    def push_key(
        self, key: str, character: Optional[str] = None, *, is_printable: bool = False
    ) -> None:
        self.push(*translate_key(key, character, is_printable=is_printable))

    def poll_events(self) -> Iterator[Event]:
        while self._pending:
            yield self._pending.popleft()

    def present(self, display_list: Sequence[DisplayCommand]) -> None:
        self.canvas.replay(display_list)
        self.surface.show(self.canvas.to_text())


__all__ = ["Cell", "CellCanvas", "Surface", "TextualBackend", "translate_key"]
