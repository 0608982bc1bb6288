from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import pytest

from yoers.buffer import Buffer
from yoers.render import (
    DEFAULT_STYLE,
    Char,
    DisplayCommand,
    FontMetrics,
    Move,
    Rect,
    render_view,
)

UNIT = FontMetrics(advance=1, line_spacing=1, height=1)
FG = DEFAULT_STYLE.foreground
CARET = Rect(2, 1, DEFAULT_STYLE.caret)
SELECTED = Rect(2, 1, DEFAULT_STYLE.selection)


@dataclass
class FakeView:
    index: int = 0
    selection: Optional[range] = None
    first_visible_line: int = 0


def render(
    text: str,
    view: FakeView,
    *,
    metrics: FontMetrics = UNIT,
    viewport_height: int = 100,
) -> List[DisplayCommand]:
    return render_view(
        Buffer.from_text(text), view, metrics, viewport_height=viewport_height
    )


def glyphs(display: List[DisplayCommand]) -> str:
    return "".join(cmd.glyph for cmd in display if isinstance(cmd, Char))


def highlighted(display: List[DisplayCommand]) -> str:
    """Glyphs preceded by a selection rectangle since the previous glyph."""

    result = []
    marked = False
    for cmd in display:
        if isinstance(cmd, Rect) and cmd.color == DEFAULT_STYLE.selection:
            marked = True
        elif isinstance(cmd, Char):
            if marked:
                result.append(cmd.glyph)
            marked = False
    return "".join(result)


def test_caret_at_end_of_buffer_drawn_once() -> None:
    display = render("ab\ncd", FakeView(index=5))

    assert display == [
        Move(0, 0),
        Char("a", FG),
        Move(1, 0),
        Char("b", FG),
        Move(0, 1),
        Char("c", FG),
        Move(1, 1),
        Char("d", FG),
        Move(2, 1),
        CARET,
    ]


def test_caret_precedes_glyph_at_its_index() -> None:
    display = render("ab", FakeView(index=1))

    assert display == [
        Move(0, 0),
        Char("a", FG),
        Move(1, 0),
        CARET,
        Move(1, 0),
        Char("b", FG),
    ]


def test_selection_highlights_half_open_range() -> None:
    display = render("abcd", FakeView(index=0, selection=range(1, 3)))

    assert highlighted(display) == "bc"
    assert display.count(SELECTED) == 2
    assert display.count(CARET) == 1


def test_selection_skips_line_terminators() -> None:
    display = render("a\r\nb", FakeView(index=4, selection=range(0, 4)))

    assert highlighted(display) == "ab"
    assert display.count(SELECTED) == 2


def test_tab_advances_four_cells_and_carriage_return_is_invisible() -> None:
    metrics = FontMetrics(advance=8, line_spacing=16, height=15)
    display = render("\tx\r\ny", FakeView(index=0), metrics=metrics)

    assert Move(32, 0) in display
    assert Move(0, 16) in display
    assert glyphs(display) == "xy"
    assert display[:2] == [Move(0, 0), Rect(2, 15, DEFAULT_STYLE.caret)]


def test_rendering_starts_at_first_visible_line() -> None:
    display = render("l0\nl1\nl2", FakeView(index=0, first_visible_line=1))

    assert glyphs(display) == "l1l2"
    assert display[0] == Move(0, 0)
    assert CARET not in display


def test_lines_below_viewport_are_clipped_without_extra_caret() -> None:
    text = "a\nb\nc\nd"
    display = render(text, FakeView(index=len(text)), viewport_height=1)

    assert glyphs(display) == "ab"
    assert CARET not in display


def test_caret_on_last_drawn_line_break_is_drawn_once() -> None:
    display = render("a\nb\nc", FakeView(index=3), viewport_height=1)

    assert glyphs(display) == "ab"
    assert display.count(CARET) == 1


def test_long_lines_are_not_wrapped() -> None:
    display = render("x" * 500, FakeView(index=0))

    assert display[-2] == Move(499, 0)


def test_render_does_not_mutate_buffer() -> None:
    buffer = Buffer.from_text("hello\nworld")

    render_view(buffer, FakeView(index=3), UNIT, viewport_height=10)

    assert buffer.version == 0
    assert buffer.dirty is False


def test_font_metrics_must_be_positive() -> None:
    with pytest.raises(ValueError):
        FontMetrics(advance=0, line_spacing=1, height=1)
