"""Regex detection of type and member declaration sites.

The scanner only proposes candidate sites. It has no notion of nesting and
never decides whether a site is structurally valid; that is left to the
delimiter matching in :mod:`classsplit.parsing.blocks`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, Match, Optional, Pattern, Sequence

_TYPE_MODIFIERS = (
    "public",
    "private",
    "protected",
    "internal",
    "static",
    "abstract",
    "sealed",
    "partial",
    "unsafe",
    "new",
    "readonly",
    "ref",
)
_MEMBER_MODIFIERS = (
    "public",
    "private",
    "protected",
    "internal",
    "static",
    "virtual",
    "override",
    "abstract",
)

# A site never starts in the middle of an identifier or a qualified name.
_SITE_START = r"(?<![\w.])"
_RETURN_TYPE = r"(?:\w+(?:<[^>]*>)?|\w+\[\]|\w+\?)"


def _modifier_run(modifiers: Sequence[str]) -> str:
    return r"(?:(?:" + "|".join(modifiers) + r")\s+)*"


_METHOD_SITE = re.compile(
    _SITE_START
    + _modifier_run(_MEMBER_MODIFIERS)
    + _RETURN_TYPE
    + r"\s+(?P<name>\w+)(?:<[^>]*>)?\s*\([^{};]*\)\s*\{"
)
_PROPERTY_SITE = re.compile(
    _SITE_START
    + _modifier_run(_MEMBER_MODIFIERS)
    + _RETURN_TYPE
    + r"\s+(?P<name>\w+)\s*\{\s*(?:get|set)\b"
)


def _in_line_comment(text: str, offset: int) -> bool:
    line_start = text.rfind("\n", 0, offset) + 1
    return "//" in text[line_start:offset]


def _iter_sites(pattern: Pattern[str], text: str, start: int, stop: int) -> Iterator[Match[str]]:
    """Yield matches in ``[start, stop)`` that do not begin inside a ``//`` comment.

    A match found inside a comment is discarded and the search resumes on the
    next line, so a commented-out keyword cannot swallow the real declaration
    that follows it.
    """
    pos = start
    while pos < stop:
        match = pattern.search(text, pos, stop)
        if match is None:
            return
        if _in_line_comment(text, match.start()):
            line_end = text.find("\n", match.start(), stop)
            if line_end == -1:
                return
            pos = line_end + 1
            continue
        yield match
        pos = max(match.end(), match.start() + 1)


@dataclass(frozen=True)
class TypeSite:
    """Candidate type declaration: where it starts and what it is called."""

    offset: int
    name: str
    keyword: str
    header: str


@dataclass(frozen=True)
class MemberSite:
    """Candidate method or property declaration."""

    offset: int
    name: str
    kind: str


class DeclarationScanner:
    """Finds type and member declaration sites with two independent patterns."""

    def __init__(
        self,
        type_keywords: Sequence[str] = ("class", "struct"),
        *,
        include_properties: bool = True,
    ) -> None:
        if not type_keywords:
            raise ValueError("At least one type keyword is required")
        self.type_keywords = tuple(type_keywords)
        self.include_properties = include_properties
        self._type_pattern = self._compile_type_pattern(self.type_keywords)

    @staticmethod
    def _compile_type_pattern(keywords: Sequence[str]) -> Pattern[str]:
        alternatives = "|".join(re.escape(keyword) for keyword in keywords)
        return re.compile(
            _SITE_START
            + _modifier_run(_TYPE_MODIFIERS)
            + rf"(?P<keyword>{alternatives})\s+(?P<name>\w+)(?P<tail>[^{{]*)\{{"
        )

    def type_sites(self, text: str) -> List[TypeSite]:
        """Every type-header match in ``text``, nested ones included, in source order."""
        sites: List[TypeSite] = []
        for match in _iter_sites(self._type_pattern, text, 0, len(text)):
            header = text[match.start() : match.end() - 1].strip()
            sites.append(
                TypeSite(
                    offset=match.start(),
                    name=match.group("name"),
                    keyword=match.group("keyword"),
                    header=header,
                )
            )
        return sites

    def member_sites(self, text: str, start: int = 0, end: Optional[int] = None) -> List[MemberSite]:
        """Method and property sites inside the search window ``[start, end)``, merged by offset."""
        stop = len(text) if end is None else min(end, len(text))
        found = {}
        for match in _iter_sites(_METHOD_SITE, text, start, stop):
            found.setdefault(match.start(), MemberSite(match.start(), match.group("name"), "method"))
        if self.include_properties:
            for match in _iter_sites(_PROPERTY_SITE, text, start, stop):
                found.setdefault(
                    match.start(), MemberSite(match.start(), match.group("name"), "property")
                )
        return [found[offset] for offset in sorted(found)]


__all__ = ["DeclarationScanner", "MemberSite", "TypeSite"]
