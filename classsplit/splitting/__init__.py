"""Grouping of extracted members and rendering of partial-type files."""

from __future__ import annotations

from .grouping import group_members, round_robin, split_by_visibility
from .renderer import OutputRenderer, indent_block, make_partial_header

__all__ = [
    "OutputRenderer",
    "group_members",
    "indent_block",
    "make_partial_header",
    "round_robin",
    "split_by_visibility",
]
