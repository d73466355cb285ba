"""Core markdownlint data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List

FRONTMATTER = "frontmatter"
LINK = "link"


@dataclass(slots=True)
class LintIssue:
    """A single problem found in a file."""

    path: str
    line: int
    kind: str
    message: str

    def __str__(self) -> str:
        if self.line:
            return f"{self.path}:{self.line}: {self.message}"
        return f"{self.path}: {self.message}"


@dataclass(slots=True)
class LinkReference:
    """A link target seen while scanning a source file."""

    source_file: str
    target: str
    line_number: int


@dataclass(slots=True)
class FileRecord:
    """Everything known about one discovered file during a run."""

    relative_path: str
    full_path: Path
    metadata: Dict[str, str] = field(default_factory=dict)
    format_error_count: int = 0
    link_error_count: int = 0
    issues: List[LintIssue] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return self.format_error_count + self.link_error_count

    def add_format_error(self, message: str, line: int = 0) -> None:
        self.format_error_count += 1
        self.issues.append(LintIssue(self.relative_path, line, FRONTMATTER, message))

    def add_link_error(self, ref: LinkReference, reason: str) -> None:
        self.link_error_count += 1
        self.issues.append(
            LintIssue(self.relative_path, ref.line_number, LINK, f"{ref.target} ({reason})")
        )


class FileIndex:
    """Mapping from relative path to FileRecord for a single run."""

    def __init__(self) -> None:
        self._records: Dict[str, FileRecord] = {}

    def add(self, relative_path: str, full_path: Path) -> FileRecord:
        if relative_path in self._records:
            raise ValueError(f"Duplicate file in index: {relative_path}")
        record = FileRecord(relative_path=relative_path, full_path=Path(full_path))
        self._records[relative_path] = record
        return record

    def get(self, relative_path: str) -> FileRecord | None:
        return self._records.get(relative_path)

    def __getitem__(self, relative_path: str) -> FileRecord:
        return self._records[relative_path]

    def __contains__(self, relative_path: object) -> bool:
        return relative_path in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[FileRecord]:
        for key in sorted(self._records):
            yield self._records[key]

    def matching(self, prefix: str = "") -> Iterator[FileRecord]:
        """Yield records whose key starts with ``prefix`` (all when empty)."""
        for record in self:
            if record.relative_path.startswith(prefix):
                yield record
