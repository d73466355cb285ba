"""Tests for the link checker."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict

import pytest

from markdownlint.checks.links import LinkChecker, collect_anchors
from markdownlint.config import LintConfig
from markdownlint.ingestion.reader import LineReader
from markdownlint.models import FileIndex


def _index(root: Path) -> FileIndex:
    index = FileIndex()
    for path in sorted(p for p in root.rglob("*") if p.is_file()):
        index.add(path.relative_to(root).as_posix(), path)
    return index


def _scan(checker: LinkChecker, key: str) -> int:
    record = checker.index[key]
    with LineReader(record.full_path) as reader:
        return checker.check(reader, record)


class TestResolve:
    """Test LinkChecker.resolve."""

    @pytest.fixture
    def checker(self, make_tree: Callable[[Dict[str, str]], Path]) -> LinkChecker:
        root = make_tree(
            {
                "index.md": "",
                "guide/intro.md": "",
                "guide/setup.md": "",
                "ref/_index.md": "",
                "img/logo.png": "",
            }
        )
        return LinkChecker(_index(root), LintConfig())

    def test_sibling(self, checker: LinkChecker) -> None:
        assert checker.resolve("guide/intro.md", "setup.md") == "guide/setup.md"

    def test_parent_and_asset(self, checker: LinkChecker) -> None:
        assert checker.resolve("guide/intro.md", "../img/logo.png") == "img/logo.png"

    def test_extensionless(self, checker: LinkChecker) -> None:
        """Should accept pretty links without the .md suffix."""
        assert checker.resolve("guide/intro.md", "setup") == "guide/setup.md"

    def test_directory_index(self, checker: LinkChecker) -> None:
        assert checker.resolve("guide/intro.md", "../ref/") == "ref/_index.md"
        assert checker.resolve("guide/intro.md", "../") == "index.md"

    def test_root_relative(self, checker: LinkChecker) -> None:
        assert checker.resolve("guide/intro.md", "/img/logo.png") == "img/logo.png"

    def test_empty_path_is_source(self, checker: LinkChecker) -> None:
        assert checker.resolve("guide/intro.md", "") == "guide/intro.md"

    def test_missing(self, checker: LinkChecker) -> None:
        assert checker.resolve("guide/intro.md", "missing.md") is None
        assert checker.resolve("index.md", "../outside.md") is None


class TestCheck:
    """Test LinkChecker.check."""

    def test_existing_link_no_error(self, make_tree: Callable[[Dict[str, str]], Path]) -> None:
        root = make_tree({"a.md": "[see](b.md)\n", "b.md": "# B\n"})
        checker = LinkChecker(_index(root), LintConfig())

        assert _scan(checker, "a.md") == 1
        assert checker.index["a.md"].link_error_count == 0

    def test_missing_link_recorded(self, make_tree: Callable[[Dict[str, str]], Path]) -> None:
        root = make_tree({"a.md": "intro\n[see](missing.md)\n"})
        checker = LinkChecker(_index(root), LintConfig())

        _scan(checker, "a.md")

        record = checker.index["a.md"]
        assert record.link_error_count == 1
        assert record.issues[0].line == 2
        assert "missing.md" in record.issues[0].message

    def test_each_occurrence_counted(self, make_tree: Callable[[Dict[str, str]], Path]) -> None:
        """Should record one error per broken occurrence."""
        root = make_tree({"a.md": "[x](gone.md) [y](gone.md)\n[z](gone.md)\n"})
        checker = LinkChecker(_index(root), LintConfig())

        _scan(checker, "a.md")

        assert checker.index["a.md"].link_error_count == 3

    def test_external_skipped(self, make_tree: Callable[[Dict[str, str]], Path]) -> None:
        root = make_tree({"a.md": "[site](https://example.com/missing.md) [mail](mailto:x@y.z)\n"})
        checker = LinkChecker(_index(root), LintConfig())

        _scan(checker, "a.md")

        assert checker.external_links == 2
        assert checker.index["a.md"].link_error_count == 0

    def test_code_ignored(self, make_tree: Callable[[Dict[str, str]], Path]) -> None:
        root = make_tree({"a.md": "```\n[x](gone.md)\n```\n`[y](gone.md)`\n"})
        checker = LinkChecker(_index(root), LintConfig())

        assert _scan(checker, "a.md") == 0
        assert checker.index["a.md"].error_count == 0

    def test_start_line_skips_front_matter(self, make_tree: Callable[[Dict[str, str]], Path]) -> None:
        root = make_tree({"a.md": "---\nlink: [x](gone.md)\n---\n[ok](a.md)\n"})
        checker = LinkChecker(_index(root), LintConfig())
        record = checker.index["a.md"]

        with LineReader(record.full_path) as reader:
            reader.read_line()
            seen = checker.check(reader, record, start_line=3)

        assert seen == 1
        assert record.error_count == 0


class TestAnchors:
    """Test fragment checks in the final pass."""

    def test_anchor_into_other_file(self, make_tree: Callable[[Dict[str, str]], Path]) -> None:
        root = make_tree(
            {
                "a.md": "[ok](b.md#getting-started)\n[bad](b.md#nowhere)\n",
                "b.md": "---\ntitle: B\n---\n# Getting Started\n",
            }
        )
        checker = LinkChecker(_index(root), LintConfig())
        _scan(checker, "a.md")

        assert checker.index["a.md"].link_error_count == 0
        assert checker.test_links() == 1
        record = checker.index["a.md"]
        assert record.link_error_count == 1
        assert "dangling anchor" in record.issues[0].message
        assert record.issues[0].line == 2

    def test_same_file_anchor(self, make_tree: Callable[[Dict[str, str]], Path]) -> None:
        root = make_tree({"a.md": "# Top\n[up](#top)\n[down](#bottom)\n"})
        checker = LinkChecker(_index(root), LintConfig())
        _scan(checker, "a.md")

        assert checker.test_links() == 1

    def test_anchor_into_asset_accepted(self, make_tree: Callable[[Dict[str, str]], Path]) -> None:
        root = make_tree({"a.md": "[p](spec.html#section)\n", "spec.html": "<html></html>"})
        checker = LinkChecker(_index(root), LintConfig())
        _scan(checker, "a.md")

        assert checker.test_links() == 0

    def test_percent_encoded_anchor(self, make_tree: Callable[[Dict[str, str]], Path]) -> None:
        """Should decode escaped fragments before comparing with headings."""
        root = make_tree({"a.md": "# Caf\u00e9\n[x](#caf%C3%A9)\n"})
        checker = LinkChecker(_index(root), LintConfig())
        _scan(checker, "a.md")

        assert checker.test_links() == 0

    def test_unreadable_target(self, make_tree: Callable[[Dict[str, str]], Path]) -> None:
        """Should record a link error when the anchor target cannot be opened."""
        root = make_tree({"a.md": "[x](b.md#intro)\n", "b.md": "# Intro\n"})
        checker = LinkChecker(_index(root), LintConfig())
        _scan(checker, "a.md")
        (root / "b.md").unlink()

        assert checker.test_links() == 1
        record = checker.index["a.md"]
        assert record.link_error_count == 1
        assert "target unreadable" in record.issues[0].message

    def test_pending_cleared(self, make_tree: Callable[[Dict[str, str]], Path]) -> None:
        root = make_tree({"a.md": "[down](#bottom)\n"})
        checker = LinkChecker(_index(root), LintConfig())
        _scan(checker, "a.md")

        assert checker.test_links() == 1
        assert checker.test_links() == 0
        assert checker.index["a.md"].link_error_count == 1


class TestCollectAnchors:
    """Test collect_anchors function."""

    def _anchors(self, tmp_path: Path, text: str) -> set:
        path = tmp_path / "page.md"
        path.write_text(text, encoding="utf-8")
        with LineReader(path) as reader:
            return collect_anchors(reader, LintConfig())

    def test_atx_and_duplicates(self, tmp_path: Path) -> None:
        anchors = self._anchors(tmp_path, "# Intro\n## Usage\n## Usage\n### Usage\n")

        assert anchors == {"intro", "usage", "usage-1", "usage-2"}

    def test_setext(self, tmp_path: Path) -> None:
        anchors = self._anchors(tmp_path, "Main Title\n==========\n\nSub Title\n---------\n")

        assert anchors == {"main-title", "sub-title"}

    def test_front_matter_not_a_heading(self, tmp_path: Path) -> None:
        """Should not treat the closing --- as a setext underline."""
        anchors = self._anchors(tmp_path, "---\ntitle: T\n---\n# Body\n")

        assert anchors == {"body"}

    def test_explicit_id_and_html(self, tmp_path: Path) -> None:
        text = '## Install {#setup}\n<a name="legacy"></a>\n<div id="box"></div>\n'

        anchors = self._anchors(tmp_path, text)

        assert {"setup", "install", "legacy", "box"} <= anchors

    def test_headings_in_code_ignored(self, tmp_path: Path) -> None:
        anchors = self._anchors(tmp_path, "```bash\n# not a heading\n```\n# Real\n")

        assert anchors == {"real"}
