# Copyright (c) Syntropy Systems
"""Pydantic models for benchmark run results."""

from __future__ import annotations

import math
from enum import Enum
from typing import TYPE_CHECKING, cast

from pydantic import (
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_serializer,
    model_validator,
)

from benchsheet.errors import MissingParameterError, ResultsFileError

from .base import BenchsheetModel

if TYPE_CHECKING:
    from collections.abc import ItemsView, KeysView
    from pathlib import Path


class AggregationPolicy(str, Enum):
    """How several same-labeled observations are combined downstream."""

    AVG = "Average"
    SUM = "Sum"
    MAX = "Max"
    MIN = "Min"

    def __str__(self) -> str:
        return self.value


class ResultRole(str, Enum):
    """What part a metric plays within its run."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    OMITTED = "omitted"

    def __str__(self) -> str:
        return self.value


_MODE_LONG_LABELS = {
    "thrpt": "Throughput, ops/time",
    "avgt": "Average time, time/op",
    "sample": "Sampling time",
    "ss": "Single shot invocation time",
    "all": "All benchmark modes",
}


class Mode(str, Enum):
    """Benchmark mode, i.e. what the primary metric of a run represents.

    The enum value is the short label. Lookups also accept the long label
    or the member name, so result files may use any of the three.
    """

    THROUGHPUT = "thrpt"
    AVERAGE_TIME = "avgt"
    SAMPLE_TIME = "sample"
    SINGLE_SHOT_TIME = "ss"
    ALL = "all"

    @property
    def short_label(self) -> str:
        return self.value

    @property
    def long_label(self) -> str:
        return _MODE_LONG_LABELS[self.value]

    @classmethod
    def _missing_(cls, value: object) -> Mode | None:
        if not isinstance(value, str):
            return None
        for member in cls:
            if value in (member.long_label, member.name):
                return member
            if value.lower() == member.value:
                return member
        return None

    def __str__(self) -> str:
        return self.value


def _param_to_str(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ParameterSet(BenchsheetModel):
    """Ordered parameter name -> value mapping of one run."""

    values: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _wrap_values(cls, data: object) -> object:
        if isinstance(data, ParameterSet):
            return data
        if data is None:
            return {"values": {}}
        if isinstance(data, dict) and "values" not in data:
            raw = cast("dict[str, object]", data)
            return {"values": {k: _param_to_str(v) for k, v in raw.items()}}
        return cast("object", data)

    @model_serializer(mode="plain")
    def _serialize(self) -> dict[str, str]:
        return self.values

    def items(self) -> ItemsView[str, str]:
        """Return the mapping's items view."""
        return self.values.items()

    def keys(self) -> KeysView[str]:
        """Return the parameter names in insertion order."""
        return self.values.keys()

    def get(self, name: str) -> str:
        """Return the value of a parameter.

        Raises:
            MissingParameterError: if the set does not carry ``name``.

        """
        try:
            return self.values[name]
        except KeyError:
            raise MissingParameterError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self.values


class Metric(BenchsheetModel):
    """One measured metric of a run, with its already computed statistics.

    ``policy`` is metadata for the downstream aggregation step. It may be
    missing on partially described metrics.
    """

    label: str
    role: ResultRole = ResultRole.SECONDARY
    sample_count: int = Field(default=1, ge=0)
    score: float
    score_error: float = math.nan
    unit: str
    policy: AggregationPolicy | None = None

    @field_validator("score_error", mode="before")
    @classmethod
    def _null_error_is_nan(cls, value: object) -> object:
        # JSON has no NaN literal; null means "undefined" here
        if value is None:
            return math.nan
        return value


def scalar(
    label: str,
    value: float,
    unit: str,
    policy: AggregationPolicy = AggregationPolicy.AVG,
) -> Metric:
    """Build a single-observation metric, e.g. one profiler sample."""
    return Metric(
        label=label,
        role=ResultRole.SECONDARY,
        sample_count=1,
        score=float(value),
        score_error=math.nan,
        unit=unit,
        policy=policy,
    )


def _with_role(metric: Metric, role: ResultRole) -> Metric:
    if metric.role is role:
        return metric
    return metric.model_copy(update={"role": role})


class RunResult(BenchsheetModel):
    """One measured benchmark configuration."""

    params: ParameterSet = Field(default_factory=ParameterSet)
    mode: Mode
    primary: Metric
    secondaries: dict[str, Metric] = Field(default_factory=dict)

    @field_validator("primary")
    @classmethod
    def _mark_primary(cls, value: Metric) -> Metric:
        return _with_role(value, ResultRole.PRIMARY)

    @field_validator("secondaries")
    @classmethod
    def _mark_secondaries(cls, value: dict[str, Metric]) -> dict[str, Metric]:
        return {
            name: _with_role(metric, ResultRole.SECONDARY)
            for name, metric in value.items()
        }

    @property
    def label(self) -> str:
        """Stable identifier of the run: its primary metric label."""
        return self.primary.label


_RESULTS_ADAPTER = TypeAdapter(list[RunResult])


def read_results(results_path: Path) -> list[RunResult]:
    """Read run results from a JSON file holding a list of runs.

    Raises:
        ResultsFileError: if the file is missing or malformed.

    """
    try:
        raw = results_path.read_bytes()
    except OSError as exc:
        msg = f"Cannot read results file {results_path}: {exc}"
        raise ResultsFileError(msg) from exc

    if not raw.strip():
        return []

    try:
        return _RESULTS_ADAPTER.validate_json(raw)
    except ValidationError as exc:
        msg = f"Invalid results file {results_path}: {exc}"
        raise ResultsFileError(msg) from exc


def dump_results(runs: list[RunResult]) -> bytes:
    """Serialize run results to JSON (NaN errors become null)."""
    return _RESULTS_ADAPTER.dump_json(runs, indent=2)
