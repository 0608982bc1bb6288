"""Rope storage behind buffer documents.

A line break is ``\\n``, ``\\r\\n`` or a lone ``\\r``. Each node caches its
break count as if its text stood alone, plus whether it starts with ``\\n``
and ends with ``\\r``, so a ``\\r\\n`` pair split across two leaves is
counted once where the leaves meet.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union

MAX_LEAF = 1024
_DEPTH_SLACK = 4
_BREAK = re.compile(r"\r\n|\r|\n")


def _count_breaks(text: str) -> int:
    return len(_BREAK.findall(text))


@dataclass(slots=True)
class _Leaf:
    text: str
    chars: int = field(init=False)
    breaks: int = field(init=False)
    starts_lf: bool = field(init=False)
    ends_cr: bool = field(init=False)
    depth: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        self.chars = len(self.text)
        self.breaks = _count_breaks(self.text)
        self.starts_lf = self.text.startswith("\n")
        self.ends_cr = self.text.endswith("\r")


@dataclass(slots=True)
class _Branch:
    left: "_Node"
    right: "_Node"
    chars: int = field(init=False)
    breaks: int = field(init=False)
    starts_lf: bool = field(init=False)
    ends_cr: bool = field(init=False)
    depth: int = field(init=False)

    def __post_init__(self) -> None:
        self.chars = self.left.chars + self.right.chars
        self.breaks = (
            self.left.breaks + self.right.breaks - _joined(self.left, self.right)
        )
        self.starts_lf = self.left.starts_lf
        self.ends_cr = self.right.ends_cr
        self.depth = max(self.left.depth, self.right.depth) + 1


_Node = Union[_Leaf, _Branch]


def _joined(left: _Node, right: _Node) -> int:
    """1 when ``left`` ends in ``\\r`` and ``right`` starts with ``\\n``."""

    return int(left.ends_cr and right.starts_lf)


def _chunk(text: str) -> List[_Leaf]:
    if not text:
        return [_Leaf("")]
    return [_Leaf(text[i : i + MAX_LEAF]) for i in range(0, len(text), MAX_LEAF)]


def _build(leaves: List[_Leaf], lo: int = 0, hi: Optional[int] = None) -> _Node:
    if hi is None:
        hi = len(leaves)
    if hi - lo == 1:
        return leaves[lo]
    mid = (lo + hi) // 2
    return _Branch(_build(leaves, lo, mid), _build(leaves, mid, hi))


def _join(left: Optional[_Node], right: Optional[_Node]) -> Optional[_Node]:
    if left is None or left.chars == 0:
        return right
    if right is None or right.chars == 0:
        return left
    if (
        isinstance(left, _Leaf)
        and isinstance(right, _Leaf)
        and left.chars + right.chars <= MAX_LEAF
    ):
        return _Leaf(left.text + right.text)
    return _Branch(left, right)


def _insert(node: _Node, idx: int, text: str) -> _Node:
    if isinstance(node, _Leaf):
        merged = node.text[:idx] + text + node.text[idx:]
        if len(merged) <= MAX_LEAF:
            return _Leaf(merged)
        return _build(_chunk(merged))
    if idx <= node.left.chars:
        return _Branch(_insert(node.left, idx, text), node.right)
    return _Branch(node.left, _insert(node.right, idx - node.left.chars, text))


def _remove(node: _Node, start: int, end: int) -> Optional[_Node]:
    if start <= 0 and end >= node.chars:
        return None
    if isinstance(node, _Leaf):
        return _Leaf(node.text[:start] + node.text[end:])
    split = node.left.chars
    left: Optional[_Node] = node.left
    right: Optional[_Node] = node.right
    if start < split:
        left = _remove(node.left, start, min(end, split))
    if end > split:
        right = _remove(node.right, max(start - split, 0), end - split)
    return _join(left, right)


def _iter_leaves(node: _Node) -> Iterator[_Leaf]:
    stack: List[_Node] = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, _Leaf):
            yield current
        else:
            stack.append(current.right)
            stack.append(current.left)


def _rebalance(node: _Node) -> _Node:
    estimate = node.chars // (MAX_LEAF // 2) + 1
    if node.depth <= 2 * math.ceil(math.log2(estimate + 1)) + _DEPTH_SLACK:
        return node
    merged: List[_Leaf] = []
    for leaf in _iter_leaves(node):
        if not leaf.chars:
            continue
        if merged and merged[-1].chars + leaf.chars <= MAX_LEAF:
            merged[-1] = _Leaf(merged[-1].text + leaf.text)
        else:
            merged.append(leaf)
    return _build(merged or [_Leaf("")])


def _prefix_breaks(node: _Node, idx: int) -> int:
    """Breaks in the first ``idx`` characters, read as a string of their own."""

    count = 0
    while isinstance(node, _Branch):
        if idx <= node.left.chars:
            node = node.left
        else:
            count += node.left.breaks - _joined(node.left, node.right)
            idx -= node.left.chars
            node = node.right
    return count + _count_breaks(node.text[:idx])


def _break_end(node: _Node, nth: int) -> int:
    """Offset just past the ``nth`` (1-based) break of ``node``."""

    offset = 0
    while isinstance(node, _Branch):
        left, right = node.left, node.right
        joined = _joined(left, right)
        if nth < left.breaks or (nth == left.breaks and not joined):
            node = left
        elif nth == left.breaks:
            # Left's trailing \r pairs with the \n that opens right.
            return offset + left.chars + 1
        else:
            nth -= left.breaks - joined
            offset += left.chars
            node = right
    ends = [match.end() for match in _BREAK.finditer(node.text)]
    return offset + ends[nth - 1]


@dataclass(slots=True)
class BufferDocument:
    """Persistent rope of text leaves.

    Edits never touch an existing document: ``insert`` and ``remove`` copy
    the path from the root to the affected leaves and return a new document
    with ``version + 1``. Every node caches its character and line-break
    counts, so offset/line lookups walk a single root-to-leaf path.

    Indices are trusted here; ``Buffer`` validates them before calling in.
    """

    _root: _Node = field(default_factory=lambda: _Leaf(""))
    version: int = 0
    dirty: bool = False

    @classmethod
    def from_text(cls, text: str) -> "BufferDocument":
        return cls(_root=_build(_chunk(text)))

    def insert(self, char_idx: int, text: str) -> "BufferDocument":
        root = _rebalance(_insert(self._root, char_idx, text)) if text else self._root
        return BufferDocument(_root=root, version=self.version + 1, dirty=True)

    def remove(self, start: int, end: int) -> "BufferDocument":
        root = self._root
        if start < end:
            root = _remove(root, start, end) or _Leaf("")
            root = _rebalance(root)
        return BufferDocument(_root=root, version=self.version + 1, dirty=True)

    @property
    def char_count(self) -> int:
        return self._root.chars

    @property
    def line_count(self) -> int:
        return self._root.breaks + 1

    @property
    def depth(self) -> int:
        return self._root.depth

    def char_to_line(self, char_idx: int) -> int:
        """Number of line breaks that end at or before ``char_idx``.

        An offset between the ``\\r`` and ``\\n`` of a pair still belongs to
        the line the pair terminates.
        """

        line = _prefix_breaks(self._root, char_idx)
        interior = 0 < char_idx < self._root.chars
        if interior and self.slice(char_idx - 1, char_idx + 1) == "\r\n":
            line -= 1
        return line

    def line_to_char(self, line_idx: int) -> int:
        """Offset of the first character after the ``line_idx``-th line break."""

        if line_idx <= 0:
            return 0
        if line_idx > self._root.breaks:
            return self._root.chars
        return _break_end(self._root, line_idx)

    def chunks(self, start: int = 0, end: Optional[int] = None) -> Iterator[str]:
        """Yield the text of ``[start, end)`` leaf by leaf, skipping other subtrees."""

        stop = self._root.chars if end is None else end
        if start >= stop:
            return
        stack: List[tuple[_Node, int]] = [(self._root, 0)]
        while stack:
            node, offset = stack.pop()
            if offset + node.chars <= start or offset >= stop:
                continue
            if isinstance(node, _Leaf):
                yield node.text[max(start - offset, 0) : stop - offset]
            else:
                stack.append((node.right, offset + node.left.chars))
                stack.append((node.left, offset))

    def chars(self, start: int = 0) -> Iterator[str]:
        for chunk in self.chunks(start):
            yield from chunk

    def slice(self, start: int, end: int) -> str:
        return "".join(self.chunks(start, end))

    def text(self) -> str:
        return "".join(self.chunks())

    def get_line(self, line_idx: int) -> str:
        return self.slice(self.line_to_char(line_idx), self.line_to_char(line_idx + 1))


__all__ = ["BufferDocument", "MAX_LEAF"]
