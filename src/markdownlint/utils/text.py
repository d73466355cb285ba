"""Markdown text helpers: link grammar, fences and heading slugs."""

from __future__ import annotations

import re
from typing import Iterator, Tuple
from urllib.parse import unquote

# [text](target "title"), ![alt](target), [text](<target with spaces>),
# [![badge](img.svg)](target) with one level of nested brackets in the text
INLINE_LINK = re.compile(
    r"!?\[(?P<text>(?:[^\[\]]|\[[^\[\]]*\](?:\([^)]*\))?)*)\]\(\s*(?P<target><[^>]*>|[^)\s]+)"
    r"(?:\s+(?:\"[^\"]*\"|'[^']*'|\([^)]*\)))?\s*\)"
)
# [label]: target
REFERENCE_DEFINITION = re.compile(r"^ {0,3}\[(?P<label>[^\]^][^\]]*)\]:\s*(?P<target><[^>]*>|\S+)")
INLINE_CODE = re.compile(r"(`+).+?\1")
SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")

ATX_HEADING = re.compile(r"^ {0,3}#{1,6}(?:\s+(?P<text>.*?))?\s*$")
SETEXT_UNDERLINE = re.compile(r"^ {0,3}(?:=+|-+)\s*$")
HEADING_ID = re.compile(r"\s*\{#(?P<id>[^}\s]+)[^}]*\}\s*$")
HTML_ANCHOR = re.compile(r"<[^>]*?\b(?:id|name)\s*=\s*[\"'](?P<id>[^\"']+)[\"']")
FENCE = re.compile(r"^ {0,3}(?P<fence>`{3,}|~{3,})")


def iter_link_targets(line: str) -> Iterator[str]:
    """Yield raw link targets found on a single line of Markdown."""
    visible = INLINE_CODE.sub("", line)
    definition = REFERENCE_DEFINITION.match(visible)
    if definition:
        yield definition.group("target")
        return
    for match in INLINE_LINK.finditer(visible):
        yield from (inner.group("target") for inner in INLINE_LINK.finditer(match.group("text")))
        yield match.group("target")


def is_external(target: str) -> bool:
    return bool(SCHEME.match(target)) or target.startswith("//")


def split_target(target: str) -> Tuple[str, str | None]:
    """Split a link target into (decoded path, fragment or None)."""
    target = target.strip()
    if target.startswith("<") and target.endswith(">"):
        target = target[1:-1].strip()
    path, sep, fragment = target.partition("#")
    path = path.split("?", 1)[0]
    return unquote(path), (unquote(fragment) if sep else None)


def slugify(heading: str) -> str:
    """GitHub style anchor for a heading text."""
    text = heading.strip().lower()
    text = INLINE_LINK.sub(lambda m: m.group("text"), text)
    text = re.sub(r"<[^>]+>", "", text)
    text = re.sub(r"[^\w\- ]", "", text)
    return text.replace(" ", "-")


def heading_text(line: str) -> str | None:
    """Text of an ATX heading line, without the closing hash sequence."""
    match = ATX_HEADING.match(line)
    if not match:
        return None
    text = match.group("text") or ""
    return re.sub(r"(?:^|\s+)#+$", "", text).strip()


class FenceTracker:
    """Tracks whether successive lines sit inside a fenced code block."""

    def __init__(self) -> None:
        self._open: str | None = None

    def in_code(self, line: str) -> bool:
        """Feed one line; True when the line belongs to a code block."""
        match = FENCE.match(line)
        if self._open is None:
            if match:
                self._open = match.group("fence")
                return True
            return False
        if match and match.group("fence").startswith(self._open) and not line.strip().lstrip(self._open[0]):
            self._open = None
        return True
