#!/usr/bin/env python3
"""
querybuilder CLI - Typer-based command-line interface.

Provides commands for:
- Inspecting the regexes compiled from a search string
- Merging filters with the merge engine
- Building a canonical filter by ANDing filters together
"""

from __future__ import annotations

import logging
from typing import Any

import typer
from bson import json_util
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..config.settings import get_settings
from ..core.composition import FilterComposer
from ..core.merge import merge_many
from ..search.regex_compiler import search_query_to_regexps
from ..utils.data import is_json

# Initialize Typer app
app = typer.Typer(
    name="querybuilder",
    help="querybuilder - Efficient MongoDB filters from chained calls",
    add_completion=False,
)

# Rich console
console = Console()


def _configure_logging(level: str) -> None:
    logger = logging.getLogger("querybuilder")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        logger.addHandler(handler)


def _parse_filters(raw_filters: list[str]) -> list[dict[str, Any]]:
    """Parse JSON filter arguments, exiting with code 1 on bad input."""
    filters = []
    for raw in raw_filters:
        try:
            value = json_util.loads(raw)
        except ValueError as e:
            console.print(f"[red]Invalid JSON filter {escape(repr(raw))}: {escape(str(e))}[/red]")
            raise typer.Exit(1)
        if not is_json(value):
            console.print(f"[red]Filter must be a JSON object: {escape(repr(raw))}[/red]")
            raise typer.Exit(1)
        filters.append(value)
    return filters


def _dumps(value: Any) -> str:
    return json_util.dumps(value, indent=2)


def version_callback(value: bool):
    """Show version and exit."""
    if value:
        from .. import __version__

        console.print(f"querybuilder version: {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
):
    """
    querybuilder CLI - Inspect search regexes and canonical filters.

    Use 'querybuilder COMMAND --help' for command-specific help.
    """
    _configure_logging(get_settings().log_level)


@app.command()
def search(
    query: str = typer.Argument(..., help="Search string, e.g. 'hello wor*d \"exact phrase\"'"),
    within_words: bool | None = typer.Option(
        None,
        "--within-words/--word-start",
        help="Match tokens anywhere or only at word beginnings (default from settings)",
        show_default=False,
    ),
):
    """
    Show the token patterns and the all/any regexes for a search string.
    """
    settings = get_settings()
    if within_words is None:
        within_words = settings.match_within_words

    pattern = search_query_to_regexps(
        query,
        match_within_words=within_words,
        wildcard_pattern=settings.wildcard_pattern,
        word_start_prefix=settings.word_start_prefix,
    )
    if pattern is None:
        console.print("[yellow]No search tokens found, no filter would be applied.[/yellow]")
        return

    table = Table(title="Search Tokens")
    table.add_column("#", style="dim")
    table.add_column("Pattern", style="cyan")
    for idx, token in enumerate(pattern.tokens, 1):
        table.add_row(str(idx), escape(token))
    console.print(table)

    console.print(Panel(escape(pattern.all.pattern), title="all (every token)", style="green"))
    console.print(Panel(escape(pattern.any.pattern), title="any (at least one token)", style="blue"))


@app.command()
def merge(
    filters: list[str] = typer.Argument(..., help="Filters as JSON objects"),
):
    """
    Merge filters and show the merged filter and any residues.
    """
    result = merge_many(_parse_filters(filters))

    console.print(Panel(escape(_dumps(result[0])), title="Merged", style="green"))
    for idx, residue in enumerate(result[1:], 1):
        console.print(Panel(escape(_dumps(residue)), title=f"Residue {idx}", style="yellow"))


@app.command()
def build(
    filters: list[str] = typer.Argument(..., help="Filters as JSON objects"),
):
    """
    AND filters together and print the canonical filter as Extended JSON.
    """
    composer = FilterComposer()
    composer.and_fold(_parse_filters(filters))
    console.print(_dumps(composer.filter), markup=False, highlight=False)


def run_cli() -> None:
    """Run the querybuilder CLI."""
    app()


if __name__ == "__main__":
    run_cli()
