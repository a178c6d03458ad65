# Copyright (c) Syntropy Systems
"""Show command - render normalized run results in the terminal."""
from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from benchsheet.config import load_config
from benchsheet.errors import BenchsheetError
from benchsheet.models.result import read_results
from benchsheet.normalize import (
    FIXED_COLUMNS,
    TEST_COLUMN,
    MissingOutcome,
    PrimaryOutcome,
    iter_outcomes,
    outcome_row,
    parameter_names,
)

console = Console()

_ROW_STYLES = {
    PrimaryOutcome.kind: "cyan",
    MissingOutcome.kind: "dim",
}


def show(
    results: Path = typer.Argument(..., help="Run results file (.json)"),
    missing: bool = typer.Option(
        True,
        "--missing/--no-missing",
        help="Show placeholder rows for metrics a run does not carry",
    ),
) -> None:
    """Show run results as a normalized table.

    Example:
        benchsheet show results.json

    """
    config = load_config()

    try:
        runs = read_results(results)
    except BenchsheetError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc

    if not runs:
        console.print("[yellow]No results to show[/yellow]")
        raise typer.Exit(0)

    names = parameter_names(runs)
    table = Table(show_header=True, header_style="bold")
    for column in (TEST_COLUMN, *names, *FIXED_COLUMNS):
        table.add_column(column)

    try:
        for outcome in iter_outcomes(
            runs,
            missing_unit=config.missing_unit,
            missing_statistic=config.missing_statistic,
        ):
            if outcome.kind == MissingOutcome.kind and not missing:
                continue
            style = _ROW_STYLES.get(outcome.kind)
            cells = [escape(cell) for cell in outcome_row(outcome, names)]
            table.add_row(*cells, style=style)
    except BenchsheetError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc

    console.print(table)
    console.print(f"\n[dim]{len(runs)} run(s)[/dim]")
