"""Lint pipeline: discovery, per-file checks and the final anchor pass."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from markdownlint.checks.frontmatter import FrontmatterError, check_frontmatter
from markdownlint.checks.links import LinkChecker
from markdownlint.config import LintConfig
from markdownlint.ingestion.reader import LineReader
from markdownlint.models import FileIndex, FileRecord
from markdownlint.utils.files import iter_files, relative_key

LOGGER = logging.getLogger(__name__)


class DiscoveryError(Exception):
    """Raised when the directory tree cannot be enumerated."""


@dataclass(slots=True)
class LintStats:
    checked: int = 0
    drafts: int = 0
    skipped: int = 0
    failed: int = 0
    external_links: int = 0
    processed_files: list[str] = field(default_factory=list)

    def increment(self, status: str, path: str) -> None:
        if status == "checked":
            self.checked += 1
        elif status == "draft":
            self.checked += 1
            self.drafts += 1
        elif status == "skipped":
            self.skipped += 1
        else:
            self.failed += 1
        self.processed_files.append(path)


class Linter:
    """Owns the file index for one run and drives every check over it."""

    def __init__(self, config: LintConfig | None = None) -> None:
        self.config = config or LintConfig()
        self.index = FileIndex()
        self.links = LinkChecker(self.index, self.config)

    def discover(self, root: Path, exclude: Path | None = None) -> FileIndex:
        """Index every file below ``root`` except ``exclude`` (the summary file)."""
        root = Path(root)
        skipped = Path(exclude).resolve() if exclude is not None else None
        try:
            for path in iter_files(root):
                key = relative_key(path, root)
                if skipped is not None and path.name == skipped.name and path.resolve() == skipped:
                    LOGGER.debug("EXCLUDED: %s", key)
                    continue
                LOGGER.debug("FOUND: %s", key)
                self.index.add(key, path)
        except OSError as exc:
            raise DiscoveryError(f"Failed to walk {root}: {exc}") from exc
        return self.index

    def lint(self, filter_prefix: str = "") -> LintStats:
        """Check every indexed Markdown file whose key starts with the filter."""
        stats = LintStats()
        for record in self.index:
            if not record.relative_path.startswith(filter_prefix):
                LOGGER.debug("FILTERED: %s", record.relative_path)
                continue
            if not self.config.is_markdown(record.relative_path):
                LOGGER.debug("SKIPPING: %s", record.relative_path)
                stats.increment("skipped", record.relative_path)
                continue
            LOGGER.info("opening: %s", record.relative_path)
            stats.increment(self._lint_single(record), record.relative_path)

        anchor_errors = self.links.test_links()
        if anchor_errors:
            LOGGER.info("Dangling anchors: %d", anchor_errors)
        stats.external_links = self.links.external_links
        return stats

    def _lint_single(self, record: FileRecord) -> str:
        try:
            reader = LineReader(record.full_path)
        except OSError as exc:
            LOGGER.error("ERROR opening %s: %s", record.relative_path, exc)
            record.add_format_error(f"cannot open file: {exc}")
            return "failed"

        with reader:
            try:
                return self._check_open(reader, record)
            except OSError as exc:
                LOGGER.error("ERROR reading %s: %s", record.relative_path, exc)
                record.add_format_error(f"read failed: {exc}", line=reader.line_number)
                return "failed"

    def _check_open(self, reader: LineReader, record: FileRecord) -> str:
        try:
            result = check_frontmatter(reader, record, self.config)
        except FrontmatterError as exc:
            LOGGER.error("ERROR frontmatter: %s", exc)
            return "checked"

        if result.draft:
            LOGGER.info("Draft: SKIPPING %s link check.", record.relative_path)
            return "draft"

        self.links.check(reader, record, start_line=result.body_start)
        return "checked"
