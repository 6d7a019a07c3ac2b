"""Lexical extraction of types and members from source text."""

from __future__ import annotations

from .blocks import match_block
from .extractor import StructuralExtractor, classify_visibility
from .lines import LineIndex, split_lines
from .scanner import DeclarationScanner, MemberSite, TypeSite

__all__ = [
    "DeclarationScanner",
    "LineIndex",
    "MemberSite",
    "StructuralExtractor",
    "TypeSite",
    "classify_visibility",
    "match_block",
    "split_lines",
]
