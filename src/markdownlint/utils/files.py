"""Utility helpers for working with files."""

from __future__ import annotations

import os
import posixpath
from pathlib import Path
from typing import Iterator


def _raise(error: OSError) -> None:
    raise error


def iter_files(root: Path) -> Iterator[Path]:
    """Yield every non-directory entry below root in sorted order.

    Symlinks are not followed. Enumeration errors propagate to the caller.
    """
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames.sort()
        for name in sorted(filenames):
            yield Path(dirpath) / name


def relative_key(path: Path, root: Path) -> str:
    """Index key for a path: relative to root, with forward slashes."""
    return Path(os.path.relpath(path, root)).as_posix()


def join_key(source_key: str, target: str) -> str | None:
    """Resolve a link target against the directory of ``source_key``.

    Targets starting with ``/`` are taken relative to the scan root.
    Returns None when the result escapes the root.
    """
    if target.startswith("/"):
        joined = target.lstrip("/")
    else:
        joined = posixpath.join(posixpath.dirname(source_key), target)
    normalized = posixpath.normpath(joined) if joined else "."
    if normalized == ".." or normalized.startswith("../"):
        return None
    return normalized
