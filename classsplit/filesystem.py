"""File-system collaborators used by the split pipeline."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Sequence

from .parsing.lines import split_lines


class FileSystem(ABC):
    """Narrow I/O contract the orchestrator calls through.

    Implementations raise :class:`FileNotFoundError` for missing inputs and
    :class:`OSError` for failed writes or directory creation.
    """

    @abstractmethod
    def exists(self, path: Path) -> bool:
        """Return True when ``path`` names an existing file."""

    @abstractmethod
    def file_size(self, path: Path) -> int:
        """Return the size of ``path`` in bytes."""

    @abstractmethod
    def read_all_text(self, path: Path) -> str:
        """Return the full text of ``path``."""

    @abstractmethod
    def read_all_lines(self, path: Path) -> List[str]:
        """Return ``path`` split into lines without terminators."""

    @abstractmethod
    def write_all_lines(self, path: Path, lines: Sequence[str]) -> None:
        """Write ``lines`` to ``path``, each followed by a newline."""

    @abstractmethod
    def directory_exists(self, path: Path) -> bool:
        """Return True when ``path`` is an existing directory."""

    @abstractmethod
    def create_directory(self, path: Path) -> None:
        """Create ``path`` and any missing parents."""


class LocalFileSystem(FileSystem):
    """UTF-8 text I/O against the real disk."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def exists(self, path: Path) -> bool:
        return path.is_file()

    def file_size(self, path: Path) -> int:
        return path.stat().st_size

    def read_all_text(self, path: Path) -> str:
        # utf-8-sig drops a leading BOM so the first using line still matches.
        encoding = "utf-8-sig" if self.encoding.lower() == "utf-8" else self.encoding
        return path.read_text(encoding=encoding)

    def read_all_lines(self, path: Path) -> List[str]:
        return split_lines(self.read_all_text(path))

    def write_all_lines(self, path: Path, lines: Sequence[str]) -> None:
        content = "".join(f"{line}\n" for line in lines)
        path.write_text(content, encoding=self.encoding)

    def directory_exists(self, path: Path) -> bool:
        return path.is_dir()

    def create_directory(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)


__all__ = ["FileSystem", "LocalFileSystem"]
