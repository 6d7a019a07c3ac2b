"""Offset to line-number translation."""

from __future__ import annotations

from bisect import bisect_right
from typing import List


class LineIndex:
    """Maps character offsets in one text to 1-based line numbers."""

    def __init__(self, text: str) -> None:
        self._newlines: List[int] = [index for index, char in enumerate(text) if char == "\n"]

    def line_of(self, offset: int) -> int:
        # newlines strictly before ``offset``, plus one
        return bisect_right(self._newlines, offset - 1) + 1

    def line_start(self, line: int) -> int:
        """Return the offset of the first character on ``line``."""
        if line <= 1:
            return 0
        return self._newlines[line - 2] + 1

    @property
    def line_count(self) -> int:
        return len(self._newlines) + 1


def split_lines(text: str) -> List[str]:
    """Split on ``\\n`` only, so line numbers agree with :class:`LineIndex`."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


__all__ = ["LineIndex", "split_lines"]
