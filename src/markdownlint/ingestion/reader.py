"""Restartable line-by-line access to a single file."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, TextIO

LOGGER = logging.getLogger(__name__)


class LineReader:
    """Sequential, read-only cursor over the lines of a file.

    ``reset`` rewinds to line one so several passes can scan the same file
    without reopening it. Use as a context manager so the handle is closed
    on every exit path.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._handle: TextIO | None = self.path.open("r", encoding="utf-8", errors="replace")
        self.line_number = 0

    def read_line(self) -> str | None:
        """Return the next line without its terminator, or None at end of file."""
        if self._handle is None:
            raise ValueError(f"Reader for {self.path} is closed")
        line = self._handle.readline()
        if not line:
            return None
        self.line_number += 1
        return line.rstrip("\r\n")

    def reset(self) -> None:
        if self._handle is None:
            raise ValueError(f"Reader for {self.path} is closed")
        self._handle.seek(0)
        self.line_number = 0

    def skip(self, count: int) -> None:
        """Advance past ``count`` lines (or to end of file)."""
        while self.line_number < count and self.read_line() is not None:
            pass

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None
            LOGGER.debug("Closed %s", self.path)

    @property
    def closed(self) -> bool:
        return self._handle is None

    def __iter__(self) -> Iterator[str]:
        while True:
            line = self.read_line()
            if line is None:
                return
            yield line

    def __enter__(self) -> "LineReader":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
