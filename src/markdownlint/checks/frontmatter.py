"""Front matter parsing and required-key validation.

A front matter block opens on line one with a marker line (``---`` for
YAML, ``+++`` for TOML) and closes with the same marker. The block text is
parsed with PyYAML or tomllib; top-level values are stored as strings.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from typing import Any, Dict, List

import yaml

from markdownlint.config import LintConfig
from markdownlint.ingestion.reader import LineReader
from markdownlint.models import FileRecord

LOGGER = logging.getLogger(__name__)

BOM = "\ufeff"


class FrontmatterError(Exception):
    """Raised when a front matter block is opened but never closed."""


@dataclass(slots=True)
class FrontmatterResult:
    present: bool = False
    draft: bool = False
    body_start: int = 0


def _opening_marker(reader: LineReader, config: LintConfig) -> str | None:
    first = reader.read_line()
    if first is None:
        return None
    marker = first.lstrip(BOM).strip()
    return marker if marker in config.delimiters else None


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return yaml.safe_dump(value, default_flow_style=True, sort_keys=False).strip()
    return str(value)


def _parse_block(block: str, syntax: str) -> Dict[str, Any]:
    """Parse block text; raises ValueError with a 1-based line in args[1]."""
    if syntax == "toml":
        try:
            return tomllib.loads(block)
        except tomllib.TOMLDecodeError as exc:
            raise ValueError(f"invalid TOML front matter: {exc}", getattr(exc, "lineno", 0) or 0) from exc
    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as exc:
        line = 0
        mark = getattr(exc, "problem_mark", None)
        if mark is not None:
            line = mark.line + 1
        raise ValueError(f"invalid YAML front matter: {exc}", line) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"front matter is a {type(data).__name__}, not a mapping", 0)
    return data


def check_frontmatter(reader: LineReader, record: FileRecord, config: LintConfig) -> FrontmatterResult:
    """Parse the front matter at the top of ``reader`` into ``record``.

    Problems are recorded on the record. Raises FrontmatterError when the
    end of file is reached before the closing marker.
    """
    marker = _opening_marker(reader, config)
    if marker is None:
        record.add_format_error("missing front matter", line=1)
        return FrontmatterResult()

    lines: List[str] = []
    while True:
        line = reader.read_line()
        if line is None:
            record.add_format_error(f"front matter not closed with {marker}", line=reader.line_number)
            raise FrontmatterError(f"{record.relative_path}: front matter opened with {marker} is never closed")
        if line.strip() == marker:
            break
        lines.append(line)
    body_start = reader.line_number

    try:
        data = _parse_block("\n".join(lines), config.delimiters[marker])
    except ValueError as exc:
        message, line = exc.args
        # Block line 1 is file line 2
        record.add_format_error(message, line=line + 1 if line else 1)
        return FrontmatterResult(present=True, body_start=body_start)

    for key, value in data.items():
        record.metadata[str(key)] = _as_text(value)

    for key in config.required_keys:
        if not record.metadata.get(key):
            record.add_format_error(f"missing required front matter key '{key}'", line=1)

    draft = record.metadata.get(config.draft_key, "").lower() == "true"
    LOGGER.debug("%s: front matter keys %s", record.relative_path, sorted(record.metadata))
    return FrontmatterResult(present=True, draft=draft, body_start=body_start)


def skip_frontmatter(reader: LineReader, config: LintConfig) -> int:
    """Rewind ``reader`` and position it after the front matter block.

    Returns the number of lines consumed; nothing is recorded. An unclosed
    block is treated as absent.
    """
    reader.reset()
    marker = _opening_marker(reader, config)
    if marker is not None:
        for line in reader:
            if line.strip() == marker:
                return reader.line_number
    reader.reset()
    return 0
