from __future__ import annotations

from pathlib import Path

import pytest

from yoers.buffer import (
    Buffer,
    BufferBorrowError,
    BufferLoadError,
    BufferRangeError,
)

SAMPLE = "text\nplops\ntoto  "


def make_buffer(text: str = SAMPLE) -> Buffer:
    return Buffer.from_text(text)


def test_len_chars_counts_code_points() -> None:
    assert make_buffer("").len_chars() == 0
    assert make_buffer("Nöel").len_chars() == 4
    assert make_buffer("Hello World\n").len_chars() == 12


def test_len_lines_counts_trailing_empty_line() -> None:
    assert make_buffer("").len_lines() == 1
    assert make_buffer("Hello World").len_lines() == 1
    assert make_buffer("Hello World\n").len_lines() == 2
    assert make_buffer(SAMPLE).len_lines() == 3


def test_remove_half_open_range() -> None:
    buffer = make_buffer("Hello World")

    buffer.remove(1, 3)

    assert buffer.to_string() == "Hlo World"


def test_insert_then_remove_restores_text() -> None:
    buffer = make_buffer()

    buffer.insert(5, "new line\n")
    assert buffer.line(1) == "new line\n"
    buffer.remove(5, 5 + len("new line\n"))

    assert buffer.to_string() == SAMPLE


def test_index_to_point() -> None:
    buffer = make_buffer()

    assert buffer.index_to_point(0) == (0, 0)
    assert buffer.index_to_point(3) == (0, 3)
    assert buffer.index_to_point(4) == (0, 4)
    assert buffer.index_to_point(5) == (1, 0)
    assert buffer.index_to_point(12) == (2, 1)
    assert buffer.index_to_point(17) == (2, 6)


def test_point_to_index_clamps_column_and_line() -> None:
    buffer = make_buffer()

    assert buffer.point_to_index((0, 3)) == 3
    assert buffer.point_to_index((0, 5)) == 4
    assert buffer.point_to_index((1, 0)) == 5
    assert buffer.point_to_index((4, 1)) == 12
    assert buffer.point_to_index((4, 6)) == 17
    assert buffer.point_to_index((-3, -8)) == 0


def test_line_to_last_char_and_line_len_no_eol() -> None:
    buffer = make_buffer()

    assert [buffer.line_to_last_char(line) for line in range(3)] == [4, 10, 17]
    assert [buffer.line_len_no_eol(line) for line in range(3)] == [4, 5, 6]
    assert [buffer.line_len(line) for line in range(3)] == [5, 6, 6]


def test_index_point_round_trip() -> None:
    buffer = make_buffer("alpha\n\nbeta gamma\nd\n")

    for idx in range(buffer.len_chars() + 1):
        assert buffer.point_to_index(buffer.index_to_point(idx)) == idx


def test_line_char_round_trip() -> None:
    buffer = make_buffer("a\nbb\n\nccc\n")

    for line in range(buffer.len_lines()):
        assert buffer.char_to_line(buffer.line_to_char(line)) == line
    assert buffer.line_to_char(buffer.len_lines()) == buffer.len_chars()


def test_crlf_and_lone_cr_each_end_one_line() -> None:
    buffer = make_buffer("ab\r\ncd\rxy\n")

    assert buffer.len_lines() == 4
    assert [buffer.line(line) for line in range(4)] == ["ab\r\n", "cd\r", "xy\n", ""]
    assert [buffer.line_len_no_eol(line) for line in range(4)] == [2, 2, 2, 0]
    assert buffer.line_to_last_char(0) == 2
    assert buffer.line_to_last_char(1) == 6
    assert buffer.point_to_index((0, 10)) == 2
    assert buffer.point_to_index((1, 10)) == 6
    # Between the \r and \n of a pair is still the line the pair ends.
    assert buffer.char_to_line(3) == 0
    assert buffer.char_to_line(4) == 1
    assert buffer.char_to_line(7) == 2


def test_len_lines_counts_every_kind_of_break() -> None:
    assert make_buffer("a\rb").len_lines() == 2
    assert make_buffer("a\r\nb").len_lines() == 2
    assert make_buffer("a\n\rb").len_lines() == 3
    assert make_buffer("\r\r\n\n").len_lines() == 4


def test_round_trip_holds_after_trailing_carriage_return() -> None:
    buffer = make_buffer("ab\r")

    assert buffer.len_lines() == 2
    assert buffer.index_to_point(3) == (1, 0)
    assert buffer.point_to_index(buffer.index_to_point(3)) == 3
    assert buffer.line_len_no_eol(0) == 2


def test_index_point_round_trip_with_mixed_line_endings() -> None:
    text = "one\r\ntwo\rthree\n\r\rfour\r"
    buffer = make_buffer(text)
    inside_pairs = {i + 1 for i in range(len(text) - 1) if text[i : i + 2] == "\r\n"}

    for idx in range(buffer.len_chars() + 1):
        if idx in inside_pairs:
            continue
        assert buffer.point_to_index(buffer.index_to_point(idx)) == idx
    for line in range(buffer.len_lines()):
        assert buffer.char_to_line(buffer.line_to_char(line)) == line
        content = buffer.slice(buffer.line_to_char(line), buffer.line_to_last_char(line))
        assert "\r" not in content and "\n" not in content


def test_remove_then_reinsert_restores_text() -> None:
    text = "Nöel\r\n日本語 text\rwith 🎉 emoji\n"
    length = len(text)
    ranges = [(0, 1), (2, 6), (4, 5), (5, 9), (10, 16), (0, length), (length, length)]

    for start, end in ranges:
        buffer = make_buffer(text)
        removed = buffer.slice(start, end)

        buffer.remove(start, end)
        buffer.insert(start, removed)

        assert buffer.to_string() == text
        assert buffer.len_lines() == 4


def test_out_of_range_edits_raise_and_leave_buffer_untouched() -> None:
    buffer = make_buffer("abc")

    with pytest.raises(BufferRangeError) as excinfo:
        buffer.insert(4, "x")
    assert excinfo.value.index == 4
    assert excinfo.value.limit == 3
    with pytest.raises(BufferRangeError):
        buffer.remove(2, 1)
    with pytest.raises(BufferRangeError):
        buffer.remove(0, 9)
    with pytest.raises(BufferRangeError):
        buffer.char_to_line(-1)
    with pytest.raises(IndexError):
        buffer.line(1)

    assert buffer.to_string() == "abc"
    assert buffer.dirty is False


def test_insert_char_requires_single_character() -> None:
    buffer = make_buffer("")

    buffer.insert_char(0, "é")

    assert buffer.to_string() == "é"
    with pytest.raises(ValueError):
        buffer.insert_char(0, "ab")


def test_mutations_mark_buffer_dirty_and_bump_version() -> None:
    buffer = make_buffer("abc")
    assert buffer.dirty is False
    assert buffer.version == 0

    buffer.insert(3, "d")
    buffer.remove(0, 1)

    assert buffer.dirty is True
    assert buffer.version == 2


def test_nested_transaction_is_rejected() -> None:
    buffer = make_buffer("abc")

    with buffer.transaction("outer"):
        buffer.insert(0, "x")
        with pytest.raises(BufferBorrowError) as excinfo:
            with buffer.transaction("inner"):
                pass
        assert excinfo.value.active_label == "outer"
        buffer.remove(0, 1)

    assert buffer.to_string() == "abc"
    assert buffer.in_transaction is False


def test_transaction_released_after_error() -> None:
    buffer = make_buffer("abc")

    with pytest.raises(KeyError):
        with buffer.transaction("boom"):
            buffer.insert(0, "x")
            raise KeyError("boom")

    assert buffer.in_transaction is False
    assert buffer.to_string() == "xabc"
    buffer.insert(0, "y")
    assert buffer.to_string() == "yxabc"


def test_from_file_keeps_line_endings(tmp_path: Path) -> None:
    path = tmp_path / "notes.txt"
    path.write_bytes("première\r\nligne\n".encode("utf-8"))

    buffer = Buffer.from_file(path)

    assert buffer.to_string() == "première\r\nligne\n"
    assert buffer.name == "notes.txt"
    assert buffer.source_path == path
    assert buffer.dirty is False
    assert buffer.line_len_no_eol(0) == 8


def test_from_file_missing(tmp_path: Path) -> None:
    path = tmp_path / "absent.txt"

    with pytest.raises(BufferLoadError) as excinfo:
        Buffer.from_file(path)

    assert isinstance(excinfo.value, OSError)
    assert isinstance(excinfo.value.__cause__, FileNotFoundError)
    assert excinfo.value.path == path


def test_from_file_rejects_invalid_utf8(tmp_path: Path) -> None:
    path = tmp_path / "binary.bin"
    path.write_bytes(b"ok\xff\xfe")

    with pytest.raises(BufferLoadError) as excinfo:
        Buffer.from_file(path)

    assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)
