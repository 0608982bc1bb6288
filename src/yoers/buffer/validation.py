"""Error types and bounds checks shared by the buffer layer."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class BufferRangeError(IndexError):
    """Raised when a mutation or query names an index outside the buffer."""

    def __init__(
        self, message: str, *, index: Optional[int] = None, limit: Optional[int] = None
    ) -> None:
        super().__init__(message)
        self.index = index
        self.limit = limit


class BufferBorrowError(RuntimeError):
    """Raised when a buffer is mutated while another transaction holds it."""

    def __init__(self, message: str, *, active_label: Optional[str] = None) -> None:
        super().__init__(message)
        self.active_label = active_label


class BufferLoadError(OSError):
    """Raised when a file cannot be opened, read or decoded into a buffer."""

    def __init__(self, message: str, *, path: Path) -> None:
        super().__init__(message)
        self.path = path


def ensure_index(index: int, limit: int, *, what: str = "char index") -> int:
    """Check ``0 <= index <= limit`` (the end position is a valid target)."""

    if index < 0 or index > limit:
        raise BufferRangeError(
            f"{what} {index} out of range 0..{limit}", index=index, limit=limit
        )
    return index


def ensure_range(start: int, end: int, limit: int) -> tuple[int, int]:
    if start < 0 or end > limit or start > end:
        raise BufferRangeError(
            f"char range {start}..{end} invalid for length {limit}",
            index=start if start < 0 or start > end else end,
            limit=limit,
        )
    return start, end


__all__ = [
    "BufferBorrowError",
    "BufferLoadError",
    "BufferRangeError",
    "ensure_index",
    "ensure_range",
]
