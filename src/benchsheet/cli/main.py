# Copyright (c) Syntropy Systems
"""Main CLI entry point for benchsheet."""

import logging

import typer
from rich.logging import RichHandler

from benchsheet.cli.export import export
from benchsheet.cli.heap import heap
from benchsheet.cli.show import show

app = typer.Typer(
    name="benchsheet",
    help=(
        "Benchmark result tables. Normalize runs into one CSV, "
        "sample heap usage while they run."
    ),
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging"
    ),
) -> None:
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


# Register commands
_ = app.command(name="export")(export)
_ = app.command()(show)
_ = app.command()(heap)


if __name__ == "__main__":
    app()
