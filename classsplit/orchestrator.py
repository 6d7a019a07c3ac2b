"""Pipeline orchestration: read, extract, group, render and write partial files."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from .config import SplitConfig, default_config
from .filesystem import FileSystem, LocalFileSystem
from .logging import ProgressSink, get_logger, progress_sink
from .models import (
    ExtractionResult,
    GroupSummary,
    RenderedDocument,
    SplitRequest,
    SplitSummary,
    TypeDeclaration,
    TypeSummary,
)
from .parsing import DeclarationScanner, StructuralExtractor
from .splitting import OutputRenderer, group_members

_BYTES_PER_MB = 1024 * 1024


class SplitError(RuntimeError):
    """Base class for failures that abort the whole run."""


class SourceNotFoundError(SplitError):
    """Raised when the input file does not exist."""


class SourceTooLargeError(SplitError):
    """Raised when the input file exceeds the configured size limit."""


class TypeNotFoundError(SplitError):
    """Raised when a requested type name matches none of the extracted types."""


class OutputError(SplitError):
    """Raised when the output directory cannot be created or a file cannot be written."""


@dataclass
class SplitOutcome:
    """Everything a split run produced."""

    summary: SplitSummary
    extraction: ExtractionResult
    documents: List[RenderedDocument] = field(default_factory=list)


class SplitOrchestrator:
    """Ties extraction, grouping and rendering together for one input file."""

    def __init__(
        self,
        config: SplitConfig | None = None,
        *,
        filesystem: FileSystem | None = None,
        extractor: StructuralExtractor | None = None,
        renderer: OutputRenderer | None = None,
        progress: ProgressSink | None = None,
    ) -> None:
        self.config = config or default_config()
        self.filesystem = filesystem or LocalFileSystem()
        self.logger = get_logger("orchestrator")
        self.extractor = extractor or StructuralExtractor(
            DeclarationScanner(
                self.config.parsing.type_keywords,
                include_properties=self.config.parsing.include_properties,
            ),
            include_constructors=self.config.parsing.include_constructors,
        )
        self._renderer_override = renderer
        self.progress = progress or progress_sink(self.logger)

    def parse(self, source_path: Path) -> ExtractionResult:
        """Read ``source_path`` and extract its structure, surfacing recoverable warnings."""
        self._check_source(source_path)
        self.progress(f"Reading {source_path}")
        try:
            text = self.filesystem.read_all_text(source_path)
            lines = self.filesystem.read_all_lines(source_path)
        except FileNotFoundError as exc:
            raise SourceNotFoundError(f"File not found: {source_path}") from exc
        self.logger.debug("Read %d lines from %s", len(lines), source_path)

        result = self.extractor.extract(text, lines, path=source_path)
        for warning in result.warnings:
            self.logger.warning("Line %d: %s", warning.line, warning.message)
        self.progress(
            f"Found {len(result.types)} types"
            + (f" ({len(result.warnings)} sites skipped)" if result.warnings else "")
        )
        return result

    def run(self, request: SplitRequest) -> SplitOutcome:
        """Split the requested file and write one file per member group."""
        extraction = self.parse(request.source_path)
        selected = self.select_types(extraction.types, request.type_name)
        split_count = self._effective_split_count(request)
        policy = "round_robin" if split_count is not None else "visibility"
        renderer = self._renderer_for(request.source_path)

        summary = SplitSummary(
            source_path=str(request.source_path),
            output_dir=str(request.output_dir),
            policy=policy,
            split_count=split_count,
            type_filter=request.type_name,
            dry_run=request.dry_run,
            warnings=list(extraction.warnings),
        )
        outcome = SplitOutcome(summary=summary, extraction=extraction)

        for declaration in selected:
            documents, type_summary = self.split_type(
                declaration,
                extraction.source.using_directives,
                split_count,
                renderer=renderer,
            )
            summary.types.append(type_summary)
            outcome.documents.extend(documents)

        if request.dry_run:
            summary.written = [
                str(request.output_dir / document.file_name) for document in outcome.documents
            ]
            self.progress(f"Dry run: {len(outcome.documents)} files would be written")
            return outcome

        if outcome.documents:
            self._ensure_directory(request.output_dir)
        for document in outcome.documents:
            target = request.output_dir / document.file_name
            try:
                self.filesystem.write_all_lines(target, document.lines)
            except OSError as exc:
                raise OutputError(f"Could not write {target}: {exc}") from exc
            summary.written.append(str(target))
            self.logger.debug("Wrote %s (%d lines)", target, len(document.lines))

        self.progress(f"Wrote {len(summary.written)} files to {request.output_dir}")
        return outcome

    def select_types(
        self, types: Sequence[TypeDeclaration], type_name: Optional[str]
    ) -> List[TypeDeclaration]:
        """Return all types, or the single one whose name matches ``type_name`` ignoring case."""
        if not type_name:
            return list(types)
        wanted = type_name.strip().casefold()
        for declaration in types:
            if declaration.name.casefold() == wanted:
                return [declaration]
        raise TypeNotFoundError(f"Type '{type_name}' not found in the file.")

    def split_type(
        self,
        declaration: TypeDeclaration,
        directives: Sequence[str],
        split_count: Optional[int],
        *,
        renderer: OutputRenderer | None = None,
    ) -> tuple[List[RenderedDocument], TypeSummary]:
        """Group and render one type without writing anything."""
        renderer = renderer or self._renderer_override or self._default_renderer(".cs")
        groups = group_members(declaration.members, split_count)
        type_summary = TypeSummary(name=declaration.name, member_count=len(declaration.members))
        if not groups:
            self.progress(f"{declaration.name}: no members, nothing to split")
            return [], type_summary

        documents: List[RenderedDocument] = []
        for part, group in enumerate(groups, start=1):
            document = renderer.render_document(declaration, directives, group, part)
            documents.append(document)
            type_summary.groups.append(
                GroupSummary(
                    file_name=document.file_name,
                    member_names=group.names,
                    exposed=group.exposed_count if split_count is None else None,
                    hidden=group.hidden_count if split_count is None else None,
                )
            )
        self.progress(
            f"{declaration.name}: {len(declaration.members)} members into {len(groups)} files"
        )
        return documents, type_summary

    def _effective_split_count(self, request: SplitRequest) -> Optional[int]:
        if request.split_count is not None:
            return request.split_count
        return self.config.split.default_count

    def _check_source(self, source_path: Path) -> None:
        if not self.filesystem.exists(source_path):
            raise SourceNotFoundError(f"File not found: {source_path}")

        suffix = source_path.suffix.lower()
        supported = [ext.lower() for ext in self.config.input.supported_extensions]
        if supported and suffix not in supported:
            self.logger.warning(
                "File extension '%s' is not in the supported extensions list (%s)",
                suffix or "(none)",
                ", ".join(supported),
            )

        size_mb = self.filesystem.file_size(source_path) / _BYTES_PER_MB
        limit = self.config.input.max_file_size_mb
        if size_mb > limit:
            raise SourceTooLargeError(
                f"File size ({size_mb:.2f} MB) exceeds maximum allowed size ({limit:g} MB)"
            )

    def _ensure_directory(self, directory: Path) -> None:
        if self.filesystem.directory_exists(directory):
            return
        if not self.config.output.create_directories:
            raise OutputError(f"Output directory does not exist: {directory}")
        self.progress(f"Creating output directory {directory}")
        try:
            self.filesystem.create_directory(directory)
        except OSError as exc:
            raise OutputError(f"Could not create output directory {directory}: {exc}") from exc

    def _renderer_for(self, source_path: Path) -> OutputRenderer:
        if self._renderer_override is not None:
            return self._renderer_override
        return self._default_renderer(source_path.suffix or ".cs")

    def _default_renderer(self, extension: str) -> OutputRenderer:
        return OutputRenderer(
            indent_unit=self.config.output.indent_unit,
            file_pattern=self.config.output.file_pattern,
            extension=extension,
        )


__all__ = [
    "OutputError",
    "SourceNotFoundError",
    "SourceTooLargeError",
    "SplitError",
    "SplitOrchestrator",
    "SplitOutcome",
    "TypeNotFoundError",
]
