"""Rendering of one member group into a partial-type document."""

from __future__ import annotations

import re
from typing import List, Sequence

from ..models import MemberGroup, RenderedDocument, TypeDeclaration

_PARTIAL_PATTERN = re.compile(r"\bpartial\b")


def make_partial_header(header: str, keyword: str) -> str:
    """Insert ``partial`` before the first bare ``keyword`` token of ``header``."""
    if _PARTIAL_PATTERN.search(header):
        return header
    pattern = re.compile(rf"\b{re.escape(keyword)}\b")
    return pattern.sub(f"partial {keyword}", header, count=1)


def indent_block(text: str, unit: str) -> List[str]:
    """Re-indent every non-blank line of ``text`` by exactly one ``unit``."""
    result: List[str] = []
    for line in text.split("\n"):
        stripped = line.strip()
        if not stripped:
            result.append("")
        else:
            result.append(unit + line.lstrip().rstrip("\r"))
    return result


class OutputRenderer:
    """Produces the lines of a partial-type file; never touches the disk."""

    def __init__(
        self,
        *,
        indent_unit: str = "    ",
        file_pattern: str = "{type}_Part{part}{ext}",
        extension: str = ".cs",
    ) -> None:
        self.indent_unit = indent_unit
        self.file_pattern = file_pattern
        self.extension = extension

    def file_name(self, type_name: str, part: int) -> str:
        return self.file_pattern.format(type=type_name, part=part, ext=self.extension)

    def render(
        self,
        declaration: TypeDeclaration,
        directives: Sequence[str],
        group: MemberGroup,
    ) -> List[str]:
        lines: List[str] = []

        usings = list(directives) or list(declaration.using_directives)
        if usings:
            lines.extend(usings)
            lines.append("")

        if declaration.namespace.strip():
            lines.append(f"namespace {declaration.namespace};")
            lines.append("")

        lines.append(make_partial_header(declaration.header, declaration.keyword))
        lines.append("{")

        for position, member in enumerate(group):
            lines.extend(indent_block(member.full_text, self.indent_unit))
            if position < len(group) - 1:
                lines.append("")

        lines.append("}")
        return lines

    def render_document(
        self,
        declaration: TypeDeclaration,
        directives: Sequence[str],
        group: MemberGroup,
        part: int,
    ) -> RenderedDocument:
        return RenderedDocument(
            type_name=declaration.name,
            part=part,
            file_name=self.file_name(declaration.name, part),
            lines=tuple(self.render(declaration, directives, group)),
        )


__all__ = ["OutputRenderer", "indent_block", "make_partial_header"]
