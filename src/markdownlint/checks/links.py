"""Link checking against the file index."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Set

from markdownlint.checks.frontmatter import skip_frontmatter
from markdownlint.config import LintConfig
from markdownlint.ingestion.reader import LineReader
from markdownlint.models import FileIndex, FileRecord, LinkReference
from markdownlint.utils.files import join_key
from markdownlint.utils.text import (
    HEADING_ID,
    HTML_ANCHOR,
    SETEXT_UNDERLINE,
    FenceTracker,
    heading_text,
    is_external,
    iter_link_targets,
    slugify,
    split_target,
)

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class PendingAnchor:
    ref: LinkReference
    target_key: str
    fragment: str


def collect_anchors(reader: LineReader, config: LintConfig) -> Set[str]:
    """Return every anchor a Markdown file defines.

    Covers ATX and setext headings, explicit ``{#id}`` attributes and HTML
    ``id``/``name`` attributes. Repeated heading slugs get numeric suffixes.
    """
    skip_frontmatter(reader, config)
    anchors: Set[str] = set()
    seen: Dict[str, int] = {}
    fences = FenceTracker()
    previous: str | None = None

    def add_heading(text: str) -> None:
        explicit = HEADING_ID.search(text)
        if explicit:
            anchors.add(explicit.group("id"))
            text = text[: explicit.start()]
        base = slugify(text)
        if not base:
            return
        count = seen.get(base, 0)
        seen[base] = count + 1
        anchors.add(base if count == 0 else f"{base}-{count}")

    for line in reader:
        if fences.in_code(line):
            previous = None
            continue
        anchors.update(match.group("id") for match in HTML_ANCHOR.finditer(line))
        text = heading_text(line)
        if text is not None:
            add_heading(text)
            previous = None
            continue
        if previous and SETEXT_UNDERLINE.match(line):
            add_heading(previous)
            previous = None
            continue
        previous = line if line.strip() else None
    return anchors


class LinkChecker:
    """Resolves link targets found in Markdown files against a FileIndex.

    File targets are checked while scanning. Fragments need the target's
    headings, so they are parked and checked once by ``test_links`` after
    every file has been scanned.
    """

    def __init__(self, index: FileIndex, config: LintConfig) -> None:
        self.index = index
        self.config = config
        self.external_links = 0
        self._pending: List[PendingAnchor] = []
        self._anchor_cache: Dict[str, Set[str] | None] = {}

    def resolve(self, source_key: str, path: str) -> str | None:
        """Index key a relative link path points at, or None when dangling."""
        if not path:
            return source_key
        candidate = join_key(source_key, path)
        if candidate is None:
            return None
        candidates = [candidate]
        if not path.endswith("/"):
            candidates.append(candidate + ".md")
        candidates.extend(
            name if candidate == "." else f"{candidate}/{name}" for name in self.config.index_names
        )
        for key in candidates:
            if key in self.index:
                return key
        return None

    def check(self, reader: LineReader, record: FileRecord, start_line: int = 0) -> int:
        """Scan the body of ``record`` for links; return how many were seen.

        Dangling links are recorded on ``record``. Errors from the reader
        itself propagate.
        """
        reader.reset()
        reader.skip(start_line)
        fences = FenceTracker()
        seen = 0
        for line in reader:
            if fences.in_code(line):
                continue
            for target in iter_link_targets(line):
                seen += 1
                self._check_target(record, LinkReference(record.relative_path, target, reader.line_number))
        return seen

    def _check_target(self, record: FileRecord, ref: LinkReference) -> None:
        if is_external(ref.target):
            self.external_links += 1
            LOGGER.debug("%s:%d: external, unchecked: %s", ref.source_file, ref.line_number, ref.target)
            return
        path, fragment = split_target(ref.target)
        key = self.resolve(record.relative_path, path)
        if key is None:
            LOGGER.debug("%s:%d: dangling link %s", ref.source_file, ref.line_number, ref.target)
            record.add_link_error(ref, "file not found")
            return
        if fragment:
            self._pending.append(PendingAnchor(ref, key, fragment))

    def anchors_for(self, key: str) -> Set[str] | None:
        """Anchors defined by indexed file ``key``; None if it cannot be read."""
        if key not in self._anchor_cache:
            try:
                with LineReader(self.index[key].full_path) as reader:
                    self._anchor_cache[key] = collect_anchors(reader, self.config)
            except OSError as exc:
                LOGGER.error("Failed to read anchors from %s: %s", key, exc)
                self._anchor_cache[key] = None
        return self._anchor_cache[key]

    def test_links(self) -> int:
        """Check parked fragments against target headings; return errors found."""
        errors = 0
        for pending in self._pending:
            if not self.config.is_markdown(pending.target_key):
                continue
            anchors = self.anchors_for(pending.target_key)
            source = self.index[pending.ref.source_file]
            if anchors is None:
                source.add_link_error(pending.ref, "target unreadable")
                errors += 1
                continue
            fragment = pending.fragment
            if fragment in anchors or fragment.lower() in anchors:
                continue
            source.add_link_error(pending.ref, "dangling anchor")
            errors += 1
        self._pending.clear()
        return errors
