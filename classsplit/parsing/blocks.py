"""Balanced delimiter matching.

The counter is deliberately naive: a brace inside a string literal or a
comment counts exactly like a structural one.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Optional, Pattern

OPEN_BRACE = "{"
CLOSE_BRACE = "}"


@lru_cache(maxsize=None)
def _delimiter_pattern(opener: str, closer: str) -> Pattern[str]:
    return re.compile(f"[{re.escape(opener)}{re.escape(closer)}]")


def match_block(
    text: str,
    open_offset: int,
    limit: Optional[int] = None,
    *,
    opener: str = OPEN_BRACE,
    closer: str = CLOSE_BRACE,
) -> Optional[int]:
    """Return the offset just past the delimiter closing the block opened at ``open_offset``.

    The scan starts one character after ``open_offset`` with a depth of one and
    stops before ``limit`` (or the end of ``text``). ``None`` means the block
    never balanced inside that window.
    """
    end = len(text) if limit is None else min(limit, len(text))
    depth = 1
    for match in _delimiter_pattern(opener, closer).finditer(text, open_offset + 1, end):
        if match.group() == opener:
            depth += 1
        else:
            depth -= 1
            if depth == 0:
                return match.end()
    return None


__all__ = ["CLOSE_BRACE", "OPEN_BRACE", "match_block"]
