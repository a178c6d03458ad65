# Copyright (c) Syntropy Systems
"""Normalize heterogeneous run results into one rectangular table.

Every run contributes one row for its primary metric, one row per secondary
metric it carries, and one placeholder row for every secondary metric that
some other run carries but it does not. Columns are the union of parameter
names across all runs plus a fixed block of metric columns.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Union

from typing_extensions import TypeAlias

from benchsheet.errors import MissingParameterError
from benchsheet.models.result import ResultRole

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from benchsheet.config import BenchsheetConfig
    from benchsheet.models.result import Metric, RunResult

logger = logging.getLogger(__name__)

TEST_COLUMN = "Test"
FIXED_COLUMNS = (
    "Benchmark Mode",
    "Metric",
    "Sample Size",
    "Statistic Type",
    "Statistic Value",
    "Statistical Margin of Error",
    "Units",
)
NOT_AVAILABLE = "NA"
MISSING_SENTINEL = "none"

_LEADING_NON_ALPHA = re.compile(r"^[^a-zA-Z]+")


def trim_punctuation(label: str) -> str:
    """Strip every leading non-alphabetic character from a metric label.

    >>> trim_punctuation("·gc.alloc.rate")
    'gc.alloc.rate'
    """
    return _LEADING_NON_ALPHA.sub("", label)


def format_float(value: float) -> str:
    """Render a score; NaN becomes ``NA`` so it never reads as a real zero."""
    if math.isnan(value):
        return NOT_AVAILABLE
    return str(value)


@dataclass(frozen=True)
class _MeasuredOutcome:
    run: RunResult
    metric: Metric

    @property
    def metric_name(self) -> str:
        raise NotImplementedError

    @property
    def role(self) -> ResultRole:
        return self.metric.role

    @property
    def sample_size(self) -> str:
        return str(self.metric.sample_count)

    @property
    def statistic_type(self) -> str:
        policy = self.metric.policy
        return "" if policy is None else str(policy)

    @property
    def statistic_value(self) -> str:
        return str(self.metric.score)

    @property
    def margin_of_error(self) -> str:
        return format_float(self.metric.score_error)

    @property
    def units(self) -> str:
        return self.metric.unit


@dataclass(frozen=True)
class PrimaryOutcome(_MeasuredOutcome):
    """Row for a run's primary metric, named after the run mode."""

    kind: ClassVar[str] = "primary"

    @property
    def metric_name(self) -> str:
        return self.run.mode.long_label

    @property
    def role(self) -> ResultRole:
        return ResultRole.PRIMARY


@dataclass(frozen=True)
class SecondaryOutcome(_MeasuredOutcome):
    """Row for a secondary metric actually present on the run."""

    kind: ClassVar[str] = "secondary"

    @property
    def metric_name(self) -> str:
        return trim_punctuation(self.metric.label)


@dataclass(frozen=True)
class MissingOutcome:
    """Placeholder row for a secondary metric the run does not carry."""

    run: RunResult
    name: str
    unit: str = MISSING_SENTINEL
    statistic: str = MISSING_SENTINEL

    kind: ClassVar[str] = "missing"

    @property
    def metric_name(self) -> str:
        return self.name

    @property
    def role(self) -> ResultRole:
        return ResultRole.OMITTED

    @property
    def sample_size(self) -> str:
        return "0"

    @property
    def statistic_type(self) -> str:
        return self.statistic

    @property
    def statistic_value(self) -> str:
        return "0"

    @property
    def margin_of_error(self) -> str:
        return NOT_AVAILABLE

    @property
    def units(self) -> str:
        return self.unit


Outcome: TypeAlias = Union[PrimaryOutcome, SecondaryOutcome, MissingOutcome]


@dataclass
class NormalizedTable:
    """Header plus data rows, all cells rendered as strings.

    An empty table (no header, no rows) means there was nothing to export.
    """

    header: list[str] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.header)

    def __len__(self) -> int:
        return len(self.rows)

    def records(self) -> Iterator[list[str]]:
        """Yield the header followed by every data row."""
        if not self.header:
            return
        yield self.header
        yield from self.rows

    def column(self, name: str) -> list[str]:
        """Return every data cell of one column."""
        idx = self.header.index(name)
        return [row[idx] for row in self.rows]


def parameter_names(runs: Iterable[RunResult]) -> list[str]:
    """Sorted union of parameter names over all runs."""
    names: set[str] = set()
    for run in runs:
        names.update(run.params.keys())
    return sorted(names)


def secondary_metric_names(runs: Iterable[RunResult]) -> list[str]:
    """Sorted union of trimmed secondary metric labels over all runs."""
    names: set[str] = set()
    for run in runs:
        names.update(trim_punctuation(m.label) for m in run.secondaries.values())
    return sorted(names)


def iter_outcomes(
    runs: list[RunResult],
    *,
    missing_unit: str = MISSING_SENTINEL,
    missing_statistic: str = MISSING_SENTINEL,
) -> Iterator[Outcome]:
    """Yield the outcomes of every run, in input order."""
    all_secondary = secondary_metric_names(runs)

    for run in runs:
        yield PrimaryOutcome(run, run.primary)

        written: set[str] = set()
        for metric in run.secondaries.values():
            outcome = SecondaryOutcome(run, metric)
            if outcome.metric_name in written:
                logger.warning(
                    "Run '%s' reports secondary metric '%s' more than once, "
                    "skipping label '%s'",
                    run.label,
                    outcome.metric_name,
                    metric.label,
                )
                continue
            written.add(outcome.metric_name)
            yield outcome

        for name in all_secondary:
            if name not in written:
                yield MissingOutcome(
                    run,
                    name,
                    unit=missing_unit,
                    statistic=missing_statistic,
                )


def outcome_row(outcome: Outcome, names: list[str]) -> list[str]:
    """Render one outcome as a table row for the given parameter columns."""
    run = outcome.run
    try:
        values = [run.params.get(name) for name in names]
    except MissingParameterError as exc:
        raise MissingParameterError(exc.name, run.label) from None

    return [
        run.label,
        *values,
        run.mode.short_label,
        outcome.metric_name,
        outcome.sample_size,
        outcome.statistic_type,
        outcome.statistic_value,
        outcome.margin_of_error,
        outcome.units,
    ]


def normalize(
    runs: Iterable[RunResult],
    config: BenchsheetConfig | None = None,
) -> NormalizedTable:
    """Build the normalized table for a collection of runs.

    Raises:
        MissingParameterError: if a run lacks a parameter another run has.

    """
    run_list = list(runs)
    if not run_list:
        return NormalizedTable()

    missing_unit = config.missing_unit if config else MISSING_SENTINEL
    missing_statistic = config.missing_statistic if config else MISSING_SENTINEL

    names = parameter_names(run_list)
    header = [TEST_COLUMN, *names, *FIXED_COLUMNS]
    rows = [
        outcome_row(outcome, names)
        for outcome in iter_outcomes(
            run_list,
            missing_unit=missing_unit,
            missing_statistic=missing_statistic,
        )
    ]

    logger.debug(
        "Normalized %d run(s) into %d row(s) x %d column(s)",
        len(run_list),
        len(rows),
        len(header),
    )
    return NormalizedTable(header=header, rows=rows)
