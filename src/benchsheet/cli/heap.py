# Copyright (c) Syntropy Systems
"""Heap command - sample this process's heap for one measurement window."""
from __future__ import annotations

import time

import typer
from rich.console import Console
from rich.table import Table

from benchsheet.config import load_config
from benchsheet.profile.base import InternalProfiler
from benchsheet.profile.heap import HEAP_AVG_LABEL, HeapSizeProfiler

console = Console()


def heap(
    duration: float = typer.Option(
        1.0, "--duration", "-d", min=0.0, help="Window length in seconds"
    ),
    period: int | None = typer.Option(
        None, "--period", "-p", min=1, help="Sampling period in milliseconds"
    ),
    delay: int | None = typer.Option(
        None, "--delay", min=0, help="Delay before the first sample in milliseconds"
    ),
) -> None:
    """Sample heap usage for one window and print the observations.

    Example:
        benchsheet heap --duration 0.5 --period 50

    """
    config = load_config()
    if period is not None:
        config.sampling_period_ms = period
    if delay is not None:
        config.initial_delay_ms = delay

    profiler: InternalProfiler = HeapSizeProfiler.from_config(config)
    profiler.before_iteration()
    try:
        time.sleep(duration)
    finally:
        observations = profiler.after_iteration()

    samples = sum(1 for o in observations if o.label == HEAP_AVG_LABEL)
    if not observations:
        console.print("[yellow]No heap samples collected[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_column("Units")
    table.add_column("Statistic Type", style="dim")
    for observation in observations:
        table.add_row(
            observation.label,
            f"{observation.score:.0f}",
            observation.unit,
            str(observation.policy),
        )

    console.print(table)
    console.print(
        f"\n[dim]{samples} sample(s) every {config.sampling_period_ms}ms "
        f"after {config.initial_delay_ms}ms[/dim]"
    )
