"""Buffer façade: rope document plus coordinates, transactions and file loading."""

from __future__ import annotations

from contextlib import AbstractContextManager, nullcontext
from pathlib import Path
from typing import ContextManager, Iterator, Optional, Tuple, Union

from yoers.runtime import telemetry

from .document import BufferDocument
from .validation import (
    BufferBorrowError,
    BufferLoadError,
    BufferRangeError,
    ensure_index,
    ensure_range,
)

Point = Tuple[int, int]  # (line, column)
PathLike = Union[str, Path]


class Buffer:
    """Mutable text of one document.

    Offsets count Unicode code points. A line ends at ``\\n``, ``\\r\\n`` or a
    lone ``\\r``, so a buffer always has one line more than it has breaks.
    Several views may share one buffer; mutation goes through
    :class:`Transaction`, which allows a single writer at a time.
    """

    def __init__(
        self,
        text: str = "",
        *,
        source_path: Optional[PathLike] = None,
        name: Optional[str] = None,
    ) -> None:
        self.document = BufferDocument.from_text(text)
        self.source_path = Path(source_path) if source_path is not None else None
        if name is None:
            name = self.source_path.name if self.source_path else "untitled"
        self.name = name
        self._transaction: Optional[Transaction] = None

    @classmethod
    def from_text(cls, text: str, *, name: Optional[str] = None) -> "Buffer":
        return cls(text, name=name)

    @classmethod
    def from_file(cls, path: PathLike) -> "Buffer":
        """Read the whole file as UTF-8, keeping its line endings verbatim."""

        file_path = Path(path)
        try:
            with open(file_path, "r", encoding="utf-8", newline="") as handle:
                text = handle.read()
        except UnicodeDecodeError as exc:
            raise BufferLoadError(
                f"cannot decode {file_path} as UTF-8: {exc.reason}", path=file_path
            ) from exc
        except OSError as exc:
            raise BufferLoadError(
                f"cannot read {file_path}: {exc.strerror or exc}", path=file_path
            ) from exc
        telemetry.record_event(
            "buffer.load", data={"path": str(file_path), "chars": len(text)}
        )
        return cls(text, source_path=file_path)

    @property
    def dirty(self) -> bool:
        return self.document.dirty

    @property
    def version(self) -> int:
        return self.document.version

    @property
    def in_transaction(self) -> bool:
        return self._transaction is not None

    def transaction(self, label: str) -> "Transaction":
        return Transaction(self, label)

    # -- mutation -----------------------------------------------------------

    def insert_char(self, char_idx: int, ch: str) -> None:
        if len(ch) != 1:
            raise ValueError(f"insert_char expects one character, got {ch!r}")
        self.insert(char_idx, ch, label="insert_char")

    def insert(self, char_idx: int, text: str, *, label: str = "insert") -> None:
        ensure_index(char_idx, self.len_chars())
        with self._mutation(label):
            self.document = self.document.insert(char_idx, text)

    def remove(self, start: int, end: int) -> None:
        """Delete the half-open character range ``[start, end)``."""

        ensure_range(start, end, self.len_chars())
        with self._mutation("remove"):
            self.document = self.document.remove(start, end)

    def _mutation(self, label: str) -> ContextManager[object]:
        if self._transaction is not None:
            return self._transaction.join()
        return Transaction(self, label)

    # -- content ------------------------------------------------------------

    def len_chars(self) -> int:
        return self.document.char_count

    def len_lines(self) -> int:
        return self.document.line_count

    def chars(self, start: int = 0) -> Iterator[str]:
        ensure_index(start, self.len_chars())
        return self.document.chars(start)

    def lines(self) -> Iterator[str]:
        for line_idx in range(self.len_lines()):
            yield self.document.get_line(line_idx)

    def line(self, line_idx: int) -> str:
        ensure_index(line_idx, self.len_lines() - 1, what="line index")
        return self.document.get_line(line_idx)

    def to_string(self) -> str:
        return self.document.text()

    def slice(self, start: int, end: int) -> str:
        ensure_range(start, end, self.len_chars())
        return self.document.slice(start, end)

    def __str__(self) -> str:
        return self.to_string()

    def __len__(self) -> int:
        return self.len_chars()

    # -- coordinates --------------------------------------------------------

    def char_to_line(self, char_idx: int) -> int:
        ensure_index(char_idx, self.len_chars())
        return self.document.char_to_line(char_idx)

    def line_to_char(self, line_idx: int) -> int:
        ensure_index(line_idx, self.len_lines(), what="line index")
        return self.document.line_to_char(line_idx)

    def line_len(self, line_idx: int) -> int:
        """Characters on the line, terminator included."""

        ensure_index(line_idx, self.len_lines() - 1, what="line index")
        return self.document.line_to_char(line_idx + 1) - self.document.line_to_char(
            line_idx
        )

    def line_len_no_eol(self, line_idx: int) -> int:
        """Characters on the line without its trailing ``\\n`` / ``\\r\\n`` / ``\\r``."""

        length = self.line_len(line_idx)
        start = self.document.line_to_char(line_idx)
        tail = self.document.slice(start + max(length - 2, 0), start + length)
        if tail.endswith("\n"):
            length -= 1
            tail = tail[:-1]
        if tail.endswith("\r"):
            length -= 1
        return length

    def line_to_last_char(self, line_idx: int) -> int:
        return self.line_to_char(line_idx) + self.line_len_no_eol(line_idx)

    def index_to_point(self, char_idx: int) -> Point:
        line = self.char_to_line(char_idx)
        return line, char_idx - self.document.line_to_char(line)

    def point_to_index(self, point: Point) -> int:
        """Clamp ``point`` onto the buffer; never raises for large or negative values."""

        line, col = point
        line = min(max(line, 0), self.len_lines() - 1)
        col = min(max(col, 0), self.line_len_no_eol(line))
        return self.document.line_to_char(line) + col


class Transaction(AbstractContextManager["Transaction"]):
    """Exclusive write access to a buffer for the duration of a ``with`` block.

    Opening a second transaction on the same buffer while one is active is a
    programming error and raises :class:`BufferBorrowError`; mutations made by
    the holder inside the block join the open transaction.
    """

    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        active = self.buffer._transaction
        if active is not None:
            raise BufferBorrowError(
                f"buffer '{self.buffer.name}' is already being mutated by "
                f"'{active.label}' (attempted '{self.label}')",
                active_label=active.label,
            )
        self.buffer._transaction = self
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component="buffer",
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def join(self) -> ContextManager[object]:
        return nullcontext(self)

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.buffer._transaction = None
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False


__all__ = ["Buffer", "BufferRangeError", "Point", "Transaction"]
