"""Aggregate error counts into a human-readable summary."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Tuple

from markdownlint.models import FRONTMATTER, LINK, FileIndex

LOGGER = logging.getLogger(__name__)

MAX_EXIT_STATUS = 255


def _section(index: FileIndex, filter_prefix: str, kind: str, title: str) -> Tuple[int, str]:
    count = 0
    lines = []
    for record in index.matching(filter_prefix):
        count += record.format_error_count if kind == FRONTMATTER else record.link_error_count
        lines.extend(f"\t{issue}\n" for issue in record.issues if issue.kind == kind)
    return count, f"## {title}: {count}\n\n" + "".join(lines) + ("\n" if lines else "")


def front_summary(index: FileIndex, filter_prefix: str = "") -> Tuple[int, str]:
    """Front matter error total and listing for records matching the filter."""
    return _section(index, filter_prefix, FRONTMATTER, "Front matter errors")


def link_summary(index: FileIndex, filter_prefix: str = "") -> Tuple[int, str]:
    """Link error total and listing for records matching the filter."""
    return _section(index, filter_prefix, LINK, "Link errors")


def render_summary(index: FileIndex, filter_prefix: str = "") -> Tuple[int, str]:
    if filter_prefix:
        text = f"# Filtered ({filter_prefix}) Summary:\n\n"
    else:
        text = "# Summary:\n\n"
    front_count, front_text = front_summary(index, filter_prefix)
    link_count, link_text = link_summary(index, filter_prefix)
    total = front_count + link_count
    text += front_text + link_text
    text += f"\n\tFound: {len(index)} files\n"
    text += f"\tFound: {total} errors\n"
    return total, text


def write_summary(text: str, path: Path) -> bool:
    """Overwrite ``path`` with the summary; failures are logged, not raised."""
    try:
        Path(path).write_text(text, encoding="utf-8")
    except OSError as exc:
        LOGGER.warning("Could not write summary to %s: %s", path, exc)
        return False
    return True


def exit_status(total: int) -> int:
    """Process exit status for an error total, saturated at 255."""
    return min(max(total, 0), MAX_EXIT_STATUS)
