# Copyright (c) Syntropy Systems
"""Export command - write normalized run results to CSV."""
from __future__ import annotations

import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from benchsheet.config import load_config
from benchsheet.errors import BenchsheetError
from benchsheet.export import write_csv
from benchsheet.models.result import read_results
from benchsheet.normalize import normalize

console = Console()


def export(
    results: Path = typer.Argument(..., help="Run results file (.json)"),
    output: Path = typer.Argument(..., help="Output file path (.csv), or - for stdout"),
) -> None:
    """Export run results as one normalized CSV table.

    Examples:
        benchsheet export results.json table.csv
        benchsheet export results.json -

    """
    to_stdout = str(output) == "-"
    if not to_stdout and output.suffix.lower() != ".csv":
        console.print("[red]Output must be .csv or -[/red]")
        raise typer.Exit(1)

    config = load_config()

    try:
        runs = read_results(results)
        table = normalize(runs, config)
    except BenchsheetError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc

    if not table:
        console.print("[yellow]No results to export[/yellow]")
        raise typer.Exit(0)

    if to_stdout:
        _ = write_csv(table, sys.stdout)
        return

    with output.open("w", newline="") as f:
        written = write_csv(table, f)

    console.print(
        f"[green]Exported {written} row(s) from {len(runs)} run(s) to {output}[/green]"
    )
