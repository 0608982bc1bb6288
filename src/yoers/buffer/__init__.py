"""Rope-backed text buffers, exclusive-mutation transactions and undo history."""

from .buffer import Buffer, Point, Transaction
from .document import BufferDocument
from .undo import UndoEntry, UndoTimeline
from .validation import (
    BufferBorrowError,
    BufferLoadError,
    BufferRangeError,
    ensure_index,
    ensure_range,
)

__all__ = [
    "Buffer",
    "BufferDocument",
    "BufferBorrowError",
    "BufferLoadError",
    "BufferRangeError",
    "Point",
    "Transaction",
    "UndoEntry",
    "UndoTimeline",
    "ensure_index",
    "ensure_range",
]
