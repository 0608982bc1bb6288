"""Undo/redo history for edits made through a view."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


@dataclass(slots=True)
class UndoEntry:
    """One reversible edit: ``removed`` was replaced by ``inserted`` at ``index``."""

    label: str
    index: int
    removed: str
    inserted: str
    caret_before: int
    caret_after: int

    def extends(self, other: "UndoEntry") -> bool:
        """Whether ``other`` is plain typing that continues this entry."""

        return (
            self.label == other.label == "insert"
            and not self.removed
            and not other.removed
            and other.index == self.index + len(self.inserted)
            and "\n" not in other.inserted
            and "\n" not in self.inserted
        )


class UndoTimeline:
    """Linear undo/redo history; pushing after an undo drops the redo tail."""

    def __init__(self) -> None:
        self._entries: List[UndoEntry] = []
        self._index: int = -1

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, entry: UndoEntry, *, coalesce: bool = False) -> None:
        if self._index < len(self._entries) - 1:
            self._entries = self._entries[: self._index + 1]
        if coalesce and self._entries and self._entries[-1].extends(entry):
            last = self._entries[-1]
            last.inserted += entry.inserted
            last.caret_after = entry.caret_after
            return
        self._entries.append(entry)
        self._index = len(self._entries) - 1

    def can_undo(self) -> bool:
        return self._index >= 0

    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    def undo(self) -> Optional[UndoEntry]:
        if not self.can_undo():
            return None
        entry = self._entries[self._index]
        self._index -= 1
        return entry

    def redo(self) -> Optional[UndoEntry]:
        if not self.can_redo():
            return None
        self._index += 1
        return self._entries[self._index]

    def clear(self) -> None:
        self._entries.clear()
        self._index = -1
