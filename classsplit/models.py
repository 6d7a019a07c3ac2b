"""Core data models shared across classsplit components."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

VISIBILITY_KEYWORDS: Tuple[str, ...] = ("public", "private", "protected")
DEFAULT_VISIBILITY = "internal"


@dataclass(frozen=True)
class MemberDeclaration:
    """A method or accessor-bearing property carved out of a type body.

    ``full_text`` is rebuilt from whole source lines ``start_line`` through
    ``end_line``; ``signature`` and ``body`` are the parts of that text
    before and from the first opening brace.
    """

    name: str
    signature: str
    body: str
    full_text: str
    is_exposed: bool
    start_line: int
    end_line: int

    @property
    def is_hidden(self) -> bool:
        return not self.is_exposed


@dataclass(frozen=True)
class TypeDeclaration:
    """A type discovered by the structural extractor."""

    name: str
    namespace: str
    visibility: str
    header: str
    members: Tuple[MemberDeclaration, ...]
    start_line: int
    end_line: int
    keyword: str = "class"
    using_directives: Tuple[str, ...] = ()

    @property
    def member_names(self) -> List[str]:
        return [member.name for member in self.members]


@dataclass(frozen=True)
class SourceFile:
    """Immutable view of one input file and everything extracted from it."""

    text: str
    lines: Tuple[str, ...]
    namespace: str
    using_directives: Tuple[str, ...]
    types: Tuple[TypeDeclaration, ...] = ()
    path: Optional[Path] = None


@dataclass(frozen=True)
class ExtractionWarning:
    """Recoverable failure recorded while carving a type or member."""

    kind: str
    message: str
    offset: int
    line: int
    name: str = ""


@dataclass(frozen=True)
class ExtractionResult:
    """Accepted structure plus the ordered recoverable failures behind it."""

    source: SourceFile
    warnings: Tuple[ExtractionWarning, ...] = ()

    @property
    def types(self) -> Tuple[TypeDeclaration, ...]:
        return self.source.types


@dataclass(frozen=True)
class MemberGroup:
    """Ordered, non-empty slice of one type's members destined for one output file."""

    members: Tuple[MemberDeclaration, ...]

    def __iter__(self) -> Iterator[MemberDeclaration]:
        return iter(self.members)

    def __len__(self) -> int:
        return len(self.members)

    @property
    def names(self) -> List[str]:
        return [member.name for member in self.members]

    @property
    def exposed_count(self) -> int:
        return sum(1 for member in self.members if member.is_exposed)

    @property
    def hidden_count(self) -> int:
        return len(self.members) - self.exposed_count


@dataclass(frozen=True)
class SplitRequest:
    """What the caller asked for: one input file split into an output directory."""

    source_path: Path
    output_dir: Path
    split_count: Optional[int] = None
    type_name: Optional[str] = None
    dry_run: bool = False

    def __post_init__(self) -> None:
        if self.split_count is not None:
            if isinstance(self.split_count, bool) or not isinstance(self.split_count, int):
                raise ValueError("split_count must be an integer")
            if self.split_count < 1:
                raise ValueError("split_count must be a positive integer")

    @property
    def policy(self) -> str:
        return "round_robin" if self.split_count is not None else "visibility"


@dataclass(frozen=True)
class RenderedDocument:
    """One partial-type file ready to hand to the write collaborator."""

    type_name: str
    part: int
    file_name: str
    lines: Tuple[str, ...]


@dataclass
class GroupSummary:
    file_name: str
    member_names: List[str]
    exposed: Optional[int] = None
    hidden: Optional[int] = None

    @property
    def member_count(self) -> int:
        return len(self.member_names)


@dataclass
class TypeSummary:
    name: str
    member_count: int
    groups: List[GroupSummary] = field(default_factory=list)

    @property
    def group_count(self) -> int:
        return len(self.groups)


@dataclass
class SplitSummary:
    """Structured outcome of a split run, rendered by :mod:`classsplit.report`."""

    source_path: str
    output_dir: str
    policy: str
    split_count: Optional[int] = None
    type_filter: Optional[str] = None
    dry_run: bool = False
    types: List[TypeSummary] = field(default_factory=list)
    written: List[str] = field(default_factory=list)
    warnings: List[ExtractionWarning] = field(default_factory=list)
