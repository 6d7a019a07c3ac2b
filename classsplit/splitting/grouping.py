"""Member grouping policies."""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..models import MemberDeclaration, MemberGroup


def round_robin(members: Sequence[MemberDeclaration], count: int) -> List[MemberGroup]:
    """Deal members into ``count`` groups by index modulo ``count``, dropping empty ones."""
    if count < 1:
        raise ValueError("count must be a positive integer")
    buckets: List[List[MemberDeclaration]] = [[] for _ in range(count)]
    for position, member in enumerate(members):
        buckets[position % count].append(member)
    return [MemberGroup(tuple(bucket)) for bucket in buckets if bucket]


def split_by_visibility(members: Sequence[MemberDeclaration]) -> List[MemberGroup]:
    """Exposed members first, hidden members second; an empty side yields no group."""
    exposed = tuple(member for member in members if member.is_exposed)
    hidden = tuple(member for member in members if member.is_hidden)
    return [MemberGroup(group) for group in (exposed, hidden) if group]


def group_members(
    members: Sequence[MemberDeclaration], split_count: Optional[int] = None
) -> List[MemberGroup]:
    """Apply round-robin when a count is given, the visibility split otherwise."""
    if split_count is not None:
        return round_robin(members, split_count)
    return split_by_visibility(members)


__all__ = ["group_members", "round_robin", "split_by_visibility"]
