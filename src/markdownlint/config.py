"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Tuple

SUMMARY_FILENAME = "markdownlint.summary.txt"


def _default_delimiters() -> Dict[str, str]:
    # Marker line -> block syntax
    return {"---": "yaml", "+++": "toml"}


@dataclass(slots=True)
class LintConfig:
    required_keys: Tuple[str, ...] = ("title",)
    delimiters: Dict[str, str] = field(default_factory=_default_delimiters)
    markdown_suffixes: Tuple[str, ...] = (".md",)
    index_names: Tuple[str, ...] = ("index.md", "_index.md", "README.md")
    draft_key: str = "draft"
    summary_path: Path | None = None

    def __post_init__(self) -> None:
        if self.summary_path is None:
            self.summary_path = Path(SUMMARY_FILENAME)

    def is_markdown(self, relative_path: str) -> bool:
        return relative_path.lower().endswith(self.markdown_suffixes)

    def resolve_summary_path(self, base_dir: Path | None = None) -> Path:
        if self.summary_path is None:
            self.summary_path = Path(SUMMARY_FILENAME)
        if Path(self.summary_path).is_absolute() or base_dir is None:
            return Path(self.summary_path)
        return base_dir / self.summary_path
