"""Structural extraction: namespace, using directives and types with their members.

Works purely lexically. Type sites come from :class:`DeclarationScanner`,
boundaries from :func:`match_block`, and line numbers from
:class:`LineIndex`. A site whose braces cannot be resolved is dropped with a
recorded :class:`ExtractionWarning` and the pass carries on with the next one.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from ..logging import get_logger
from ..models import (
    DEFAULT_VISIBILITY,
    VISIBILITY_KEYWORDS,
    ExtractionResult,
    ExtractionWarning,
    MemberDeclaration,
    SourceFile,
    TypeDeclaration,
)
from .blocks import OPEN_BRACE, match_block
from .lines import LineIndex, split_lines
from .scanner import DeclarationScanner, MemberSite, TypeSite

_NAMESPACE_PATTERN = re.compile(r"\bnamespace\s+([^;\s{]+)")
_VISIBILITY_PATTERNS = tuple(
    (keyword, re.compile(rf"\b{keyword}\b")) for keyword in VISIBILITY_KEYWORDS
)
_EXPOSED_PATTERN = re.compile(r"\bpublic\b")


def extract_namespace(text: str) -> str:
    """Return the first declared namespace, or an empty string."""
    match = _NAMESPACE_PATTERN.search(text)
    return match.group(1).strip() if match else ""


def extract_using_directives(lines: Sequence[str]) -> List[str]:
    """Collect the contiguous block of ``using ...;`` lines at the top of the file.

    Blank lines and ``//`` comments are skipped; any other line ends the block.
    """
    directives: List[str] = []
    for line in lines:
        stripped = line.strip()
        if stripped.startswith("using ") and stripped.endswith(";"):
            directives.append(line)
        elif stripped and not stripped.startswith("//"):
            break
    return directives


def classify_visibility(header: str) -> str:
    """Pick the first of public/private/protected present as a token, else internal."""
    for keyword, pattern in _VISIBILITY_PATTERNS:
        if pattern.search(header):
            return keyword
    return DEFAULT_VISIBILITY


def is_exposed(signature: str) -> bool:
    return _EXPOSED_PATTERN.search(signature) is not None


class StructuralExtractor:
    """Builds the namespace -> types -> members model for one source text."""

    def __init__(
        self,
        scanner: DeclarationScanner | None = None,
        *,
        include_constructors: bool = True,
    ) -> None:
        self.scanner = scanner or DeclarationScanner()
        self.include_constructors = include_constructors
        self.logger = get_logger("extractor")

    def extract(
        self,
        text: str,
        lines: Optional[Sequence[str]] = None,
        *,
        path: Path | None = None,
    ) -> ExtractionResult:
        """Extract every resolvable type from ``text``.

        ``lines`` should be the same content split into lines; it is derived
        from ``text`` when omitted. Types are returned in the order their
        header matched, which for nested types means outer before inner.
        """
        line_list = tuple(lines) if lines is not None else tuple(split_lines(text))
        index = LineIndex(text)
        warnings: List[ExtractionWarning] = []

        namespace = extract_namespace(text)
        directives = tuple(extract_using_directives(line_list))
        self.logger.debug(
            "Namespace: %s; %d using directives", namespace or "(none)", len(directives)
        )

        sites = self.scanner.type_sites(text)
        self.logger.debug("Found %d type declaration sites", len(sites))

        types: List[TypeDeclaration] = []
        for site in sites:
            declaration = self._extract_type(
                text, line_list, index, site, namespace, warnings, sites
            )
            if declaration is not None:
                types.append(declaration)
                self.logger.debug(
                    "Parsed type %s (lines %d-%d, %d members)",
                    declaration.name,
                    declaration.start_line,
                    declaration.end_line,
                    len(declaration.members),
                )

        source = SourceFile(
            text=text,
            lines=line_list,
            namespace=namespace,
            using_directives=directives,
            types=tuple(types),
            path=path,
        )
        return ExtractionResult(source=source, warnings=tuple(warnings))

    def _extract_type(
        self,
        text: str,
        lines: Sequence[str],
        index: LineIndex,
        site: TypeSite,
        namespace: str,
        warnings: List[ExtractionWarning],
        all_sites: Sequence[TypeSite] = (),
    ) -> Optional[TypeDeclaration]:
        open_offset = text.find(OPEN_BRACE, site.offset)
        if open_offset == -1:
            warnings.append(
                _warning(
                    "missing_delimiter",
                    f"No opening brace found for type {site.name}",
                    site.offset,
                    index,
                    site.name,
                )
            )
            return None

        close_offset = match_block(text, open_offset)
        if close_offset is None:
            warnings.append(
                _warning(
                    "unmatched_type",
                    f"Unmatched braces for type {site.name}",
                    site.offset,
                    index,
                    site.name,
                )
            )
            return None

        header = text[site.offset : open_offset].strip()
        # The body window excludes the type's own closing brace.
        body_end = close_offset - 1
        nested = _nested_spans(text, all_sites, open_offset, body_end)
        members = self._extract_members(
            text, lines, index, site, open_offset, body_end, warnings, nested
        )

        return TypeDeclaration(
            name=site.name,
            namespace=namespace,
            visibility=classify_visibility(header),
            header=header,
            keyword=site.keyword,
            members=tuple(members),
            start_line=index.line_of(site.offset),
            end_line=index.line_of(body_end),
        )

    def _extract_members(
        self,
        text: str,
        lines: Sequence[str],
        index: LineIndex,
        owner: TypeSite,
        window_start: int,
        window_end: int,
        warnings: List[ExtractionWarning],
        nested: Sequence[Tuple[int, int]] = (),
    ) -> List[MemberDeclaration]:
        members: List[MemberDeclaration] = []
        resume_at = window_start
        for site in self.scanner.member_sites(text, window_start, window_end):
            if site.offset < resume_at:
                # statement-level match inside a member we already carved
                continue
            if any(start <= site.offset < end for start, end in nested):
                self.logger.debug(
                    "Skipping %s.%s: belongs to a nested type", owner.name, site.name
                )
                continue
            if not self.include_constructors and site.name == owner.name:
                self.logger.debug("Skipping constructor %s.%s", owner.name, site.name)
                continue

            brace = text.find(OPEN_BRACE, site.offset, window_end)
            if brace == -1:
                warnings.append(
                    _warning(
                        "member_outside_type",
                        f"Body of {owner.name}.{site.name} starts outside the type",
                        site.offset,
                        index,
                        site.name,
                    )
                )
                continue

            body_close = match_block(text, brace, window_end)
            if body_close is None:
                warnings.append(
                    _warning(
                        "unmatched_member",
                        f"Unmatched braces for member {owner.name}.{site.name}",
                        site.offset,
                        index,
                        site.name,
                    )
                )
                continue

            members.append(self._build_member(text, lines, index, site, brace, body_close))
            resume_at = body_close
        return members

    @staticmethod
    def _build_member(
        text: str,
        lines: Sequence[str],
        index: LineIndex,
        site: MemberSite,
        brace: int,
        body_close: int,
    ) -> MemberDeclaration:
        start_line = index.line_of(site.offset)
        end_line = index.line_of(body_close - 1)
        full_text = "\n".join(lines[start_line - 1 : end_line])

        column = site.offset - index.line_start(start_line)
        signature_end = full_text.find(OPEN_BRACE, max(column, 0))
        if signature_end == -1:
            signature_end = len(full_text)
        signature = full_text[:signature_end].strip()

        return MemberDeclaration(
            name=site.name,
            signature=signature,
            body=text[brace:body_close],
            full_text=full_text,
            is_exposed=is_exposed(signature),
            start_line=start_line,
            end_line=end_line,
        )


def _nested_spans(
    text: str, sites: Sequence[TypeSite], window_start: int, window_end: int
) -> List[Tuple[int, int]]:
    """Offsets covered by resolvable type declarations strictly inside the window."""
    spans: List[Tuple[int, int]] = []
    for site in sites:
        if not window_start < site.offset < window_end:
            continue
        brace = text.find(OPEN_BRACE, site.offset, window_end)
        if brace == -1:
            continue
        close = match_block(text, brace, window_end)
        if close is not None:
            spans.append((site.offset, close))
    return spans


def _warning(
    kind: str, message: str, offset: int, index: LineIndex, name: str
) -> ExtractionWarning:
    return ExtractionWarning(
        kind=kind, message=message, offset=offset, line=index.line_of(offset), name=name
    )


__all__ = [
    "StructuralExtractor",
    "classify_visibility",
    "extract_namespace",
    "extract_using_directives",
    "is_exposed",
]
