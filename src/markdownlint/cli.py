"""Command line interface for markdownlint."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from markdownlint.checks.runner import DiscoveryError, Linter
from markdownlint.config import LintConfig
from markdownlint.report.summary import exit_status, render_summary, write_summary


console = Console()
app = typer.Typer(help="markdownlint - front matter and link checks for Markdown trees")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s", stream=sys.stdout)


@app.command()
def lint(
    directory: Path = typer.Argument(
        ..., help="Directory to scan.", exists=True, file_okay=False, dir_okay=True
    ),
    filter_prefix: str = typer.Argument(
        "", metavar="[FILTER]", help="Only check files whose relative path starts with this prefix."
    ),
    require: Optional[List[str]] = typer.Option(
        None, "--require", "-r", help="Required front matter key (repeatable, default: title)."
    ),
    summary: Path = typer.Option(None, "--summary", help="Summary file path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Check front matter and links of every Markdown file under DIRECTORY."""
    _setup_logging(verbose)
    config = LintConfig(summary_path=summary)
    if require:
        config.required_keys = tuple(require)

    summary_path = config.resolve_summary_path(Path.cwd())
    linter = Linter(config)
    console.print("Finding files")
    try:
        linter.discover(directory, exclude=summary_path)
    except DiscoveryError as exc:
        console.print(f"ERROR: {exc}", markup=False)
        raise typer.Exit(code=1)

    stats = linter.lint(filter_prefix)
    console.print(
        f"Checked: {stats.checked}, drafts: {stats.drafts}, "
        f"failed: {stats.failed}, external links: {stats.external_links}",
        markup=False,
    )

    total, text = render_summary(linter.index, filter_prefix)
    if write_summary(text, summary_path):
        console.print(f"Also writing summary to {summary_path} :\n", markup=False)
    # Plain echo keeps the summary byte-identical to the file
    typer.echo(text, nl=False)
    raise typer.Exit(code=exit_status(total))
