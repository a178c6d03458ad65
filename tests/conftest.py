# Copyright (c) Syntropy Systems
"""Pytest fixtures for benchsheet tests."""

from __future__ import annotations

import math
import os
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from benchsheet.models.result import AggregationPolicy, Metric, Mode, RunResult

# Store original cwd at module load time
_original_cwd = Path.cwd()

RunFactory = Callable[..., RunResult]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def project_dir(temp_dir: Path) -> Generator[Path, None, None]:
    """Create a project directory with an empty .benchsheet config dir."""
    (temp_dir / ".benchsheet").mkdir()

    os.chdir(temp_dir)

    yield temp_dir

    # Always return to original cwd
    os.chdir(_original_cwd)


@pytest.fixture
def make_run() -> RunFactory:
    """Build RunResults with sensible defaults."""

    def _make_run(
        label: str = "bench.Sort.sort",
        params: dict[str, object] | None = None,
        secondaries: dict[str, float] | None = None,
        mode: Mode = Mode.THROUGHPUT,
        score: float = 100.0,
        score_error: float = 1.5,
    ) -> RunResult:
        primary = Metric(
            label=label,
            sample_count=5,
            score=score,
            score_error=score_error,
            unit="ops/s",
            policy=AggregationPolicy.AVG,
        )
        secondary_metrics = {
            name: Metric(
                label=name,
                sample_count=1,
                score=value,
                score_error=math.nan,
                unit="#",
                policy=AggregationPolicy.SUM,
            )
            for name, value in (secondaries or {}).items()
        }
        return RunResult(
            params=params or {},
            mode=mode,
            primary=primary,
            secondaries=secondary_metrics,
        )

    return _make_run
