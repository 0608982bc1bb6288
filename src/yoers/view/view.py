"""Caret, selection, scrolling and undo state of one window onto a buffer."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple

from yoers.buffer import Buffer, UndoEntry, UndoTimeline
from yoers.runtime import telemetry


class Direction(Enum):
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


class View:
    """Editing state bound to a (possibly shared) :class:`Buffer`.

    The caret and selection are plain character offsets. They are clamped to
    the buffer length whenever they are read, so an edit made through another
    view of the same buffer can never leave this one pointing past the end.
    """

    def __init__(self, buffer: Buffer, *, page_length: int = 1) -> None:
        self.buffer = buffer
        self.first_visible_line = 0
        self.page_length = max(1, page_length)
        self.undo_timeline = UndoTimeline()
        self._index = 0
        self._selection: Optional[range] = None
        self._anchor: Optional[int] = None
        self._selecting = False
        self._goal_col: Optional[int] = None
        self._synced_version = buffer.version

    # -- read side (what the renderer consumes) ------------------------------

    @property
    def index(self) -> int:
        return min(self._index, self.buffer.len_chars())

    @property
    def selection(self) -> Optional[range]:
        if self._selection is None:
            return None
        limit = self.buffer.len_chars()
        start = min(self._selection.start, limit)
        stop = min(self._selection.stop, limit)
        return range(start, stop) if start < stop else None

    @property
    def selecting(self) -> bool:
        return self._selecting

    @property
    def point(self) -> Tuple[int, int]:
        return self.buffer.index_to_point(self.index)

    def selected_text(self) -> Optional[str]:
        selection = self.selection
        if selection is None:
            return None
        return self.buffer.slice(selection.start, selection.stop)

    # -- caret movement ------------------------------------------------------

    def set_page_length(self, page_length: int) -> None:
        self.page_length = max(1, page_length)
        self._scroll_to_caret()

    def goto(self, char_idx: int, *, keep_goal: bool = False) -> None:
        self._index = min(max(char_idx, 0), self.buffer.len_chars())
        if not keep_goal:
            self._goal_col = None
        if self._selecting and self._anchor is not None:
            start, stop = sorted((self._anchor, self._index))
            self._selection = range(start, stop) if start < stop else None
        else:
            self._selection = None
            self._anchor = None
        self._scroll_to_caret()

    def move_cursor(self, direction: Direction) -> None:
        if direction is Direction.LEFT:
            self.goto(self._step_back(self.index))
        elif direction is Direction.RIGHT:
            self.goto(self._step_forward(self.index))
        elif direction is Direction.UP:
            self._move_lines(-1)
        else:
            self._move_lines(1)

    def move_page(self, direction: Direction) -> None:
        if direction not in (Direction.UP, Direction.DOWN):
            raise ValueError(f"pages move up or down, not {direction.value}")
        delta = self.page_length if direction is Direction.DOWN else -self.page_length
        last_line = self.buffer.len_lines() - 1
        self.first_visible_line = min(max(self.first_visible_line + delta, 0), last_line)
        self._move_lines(delta)

    def home(self) -> None:
        line = self.buffer.char_to_line(self.index)
        self.goto(self.buffer.line_to_char(line))

    def end(self) -> None:
        line = self.buffer.char_to_line(self.index)
        self.goto(self.buffer.line_to_last_char(line))

    def select_all(self) -> None:
        length = self.buffer.len_chars()
        self._index = length
        self._anchor = 0
        self._selection = range(0, length) if length else None
        self._goal_col = None
        self._scroll_to_caret()

    def start_selection(self) -> None:
        """Start extending the selection with caret movement.

        If the caret sits on an edge of an existing selection, the opposite
        edge becomes the anchor so the selection keeps growing.
        """

        if self._selecting:
            return
        current = self.selection
        if current is not None and self.index == current.start:
            self._anchor = current.stop
        elif current is not None and self.index == current.stop:
            self._anchor = current.start
        else:
            self._anchor = self.index
        self._selecting = True

    def end_selection(self) -> None:
        self._selecting = False

    def _move_lines(self, delta: int) -> None:
        line, col = self.buffer.index_to_point(self.index)
        if self._goal_col is None:
            self._goal_col = col
        target = self.buffer.point_to_index((line + delta, self._goal_col))
        self.goto(target, keep_goal=True)

    def _step_back(self, char_idx: int) -> int:
        if char_idx == 0:
            return 0
        if char_idx >= 2 and self.buffer.slice(char_idx - 2, char_idx) == "\r\n":
            return char_idx - 2
        return char_idx - 1

    def _step_forward(self, char_idx: int) -> int:
        length = self.buffer.len_chars()
        if char_idx >= length:
            return length
        if self.buffer.slice(char_idx, min(char_idx + 2, length)) == "\r\n":
            return char_idx + 2
        return char_idx + 1

    def _scroll_to_caret(self) -> None:
        line = self.buffer.char_to_line(self.index)
        if line < self.first_visible_line:
            self.first_visible_line = line
        elif line >= self.first_visible_line + self.page_length:
            self.first_visible_line = line - self.page_length + 1
        self.first_visible_line = min(
            self.first_visible_line, self.buffer.len_lines() - 1
        )

    # -- editing -------------------------------------------------------------

    def insert_char(self, ch: str) -> None:
        if len(ch) != 1:
            raise ValueError(f"insert_char expects one character, got {ch!r}")
        self.insert(ch)

    def insert(self, text: str) -> None:
        start, stop = self._edit_range()
        self._replace(start, stop, text, label="insert")

    def backspace(self) -> None:
        selection = self.selection
        if selection is not None:
            self._replace(selection.start, selection.stop, "", label="delete")
        elif self.index > 0:
            self._replace(self._step_back(self.index), self.index, "", label="delete")

    def delete_at_cursor(self) -> None:
        selection = self.selection
        if selection is not None:
            self._replace(selection.start, selection.stop, "", label="delete")
        elif self.index < self.buffer.len_chars():
            self._replace(self.index, self._step_forward(self.index), "", label="delete")

    def undo(self) -> bool:
        if not self._history_in_sync():
            return False
        entry = self.undo_timeline.undo()
        if entry is None:
            return False
        self._apply(entry.index, entry.inserted, entry.removed, label="undo")
        self._after_edit(entry.caret_before)
        return True

    def redo(self) -> bool:
        if not self._history_in_sync():
            return False
        entry = self.undo_timeline.redo()
        if entry is None:
            return False
        self._apply(entry.index, entry.removed, entry.inserted, label="redo")
        self._after_edit(entry.caret_after)
        return True

    def _edit_range(self) -> Tuple[int, int]:
        selection = self.selection
        if selection is None:
            return self.index, self.index
        return selection.start, selection.stop

    def _replace(self, start: int, stop: int, text: str, *, label: str) -> None:
        if not self._history_in_sync():
            self.undo_timeline.clear()
        removed = self.buffer.slice(start, stop)
        caret_before = self.index
        self._apply(start, removed, text, label=label)
        caret = start + len(text)
        self.undo_timeline.push(
            UndoEntry(
                label=label,
                index=start,
                removed=removed,
                inserted=text,
                caret_before=caret_before,
                caret_after=caret,
            ),
            coalesce=True,
        )
        self._after_edit(caret)

    def _apply(self, start: int, old: str, new: str, *, label: str) -> None:
        with self.buffer.transaction(f"view::{label}"):
            if old:
                self.buffer.remove(start, start + len(old))
            if new:
                self.buffer.insert(start, new)

    def _after_edit(self, caret: int) -> None:
        self._synced_version = self.buffer.version
        self._index = caret
        self._goal_col = None
        self._selection = None
        self._anchor = caret if self._selecting else None
        self._scroll_to_caret()

    def _history_in_sync(self) -> bool:
        if self.buffer.version == self._synced_version:
            return True
        # Offsets recorded in the timeline predate another writer's edits.
        if len(self.undo_timeline):
            telemetry.record_event(
                "view.history_dropped",
                data={"buffer": self.buffer.name, "entries": len(self.undo_timeline)},
            )
            self.undo_timeline.clear()
        self._synced_version = self.buffer.version
        return False
