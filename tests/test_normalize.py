# Copyright (c) Syntropy Systems
"""Tests for the result table normalizer."""

from __future__ import annotations

import logging
import math

import pytest

from benchsheet.config import BenchsheetConfig
from benchsheet.errors import MissingParameterError
from benchsheet.models.result import Metric, Mode, ResultRole, RunResult
from benchsheet.normalize import (
    FIXED_COLUMNS,
    MissingOutcome,
    PrimaryOutcome,
    SecondaryOutcome,
    iter_outcomes,
    normalize,
    parameter_names,
    secondary_metric_names,
    trim_punctuation,
)


def _rows_by_metric(table, run_label: str) -> dict[str, list[str]]:
    metric_idx = table.header.index("Metric")
    return {
        row[metric_idx]: row
        for row in table.rows
        if row[0] == run_label
    }


class TestTrimPunctuation:
    """Tests for leading punctuation trimming."""

    def test_strips_leading_markers(self) -> None:
        """Test decorative prefixes are removed."""
        assert trim_punctuation("··gc.alloc") == "gc.alloc"
        assert trim_punctuation("·gc.count") == "gc.count"
        assert trim_punctuation("--42x") == "x"

    def test_keeps_inner_characters(self) -> None:
        """Test only leading characters are stripped."""
        assert trim_punctuation("a··b") == "a··b"
        assert trim_punctuation("gc.alloc.rate.norm") == "gc.alloc.rate.norm"

    def test_idempotent(self) -> None:
        """Test trimming twice equals trimming once."""
        for label in ["··gc.alloc", "a··b", "...", "", "9lives"]:
            once = trim_punctuation(label)
            assert trim_punctuation(once) == once

    def test_all_punctuation(self) -> None:
        """Test a label without letters trims to empty."""
        assert trim_punctuation("·:·") == ""


class TestNames:
    """Tests for parameter and secondary metric name unions."""

    def test_parameter_names_union_sorted(self, make_run) -> None:
        """Test the parameter union spans all runs."""
        runs = [
            make_run(params={"size": 1, "alpha": 2}),
            make_run(params={"size": 3, "mode": "x"}),
        ]
        assert parameter_names(runs) == ["alpha", "mode", "size"]

    def test_secondary_names_trimmed_union(self, make_run) -> None:
        """Test the secondary union is built from trimmed labels."""
        runs = [
            make_run(secondaries={"·gc.count": 1.0}),
            make_run(secondaries={"gc.count": 2.0, "··gc.time": 3.0}),
        ]
        assert secondary_metric_names(runs) == ["gc.count", "gc.time"]


class TestNormalize:
    """Tests for normalize()."""

    def test_empty_input(self) -> None:
        """Test that no runs yield an empty table."""
        table = normalize([])

        assert table.header == []
        assert table.rows == []
        assert not table
        assert list(table.records()) == []

    def test_header_layout(self, make_run) -> None:
        """Test the header columns and their order."""
        table = normalize([make_run(params={"size": 10, "alpha": "x"})])

        assert table.header == ["Test", "alpha", "size", *FIXED_COLUMNS]
        assert table.header[-6:] == [
            "Metric",
            "Sample Size",
            "Statistic Type",
            "Statistic Value",
            "Statistical Margin of Error",
            "Units",
        ]

    def test_two_run_scenario(self, make_run) -> None:
        """Test a run without secondaries gets a placeholder row."""
        run_a = make_run(
            label="bench.A",
            params={"size": 10},
            secondaries={"·gc.count": 3.0},
        )
        run_b = make_run(label="bench.B", params={"size": 20})

        table = normalize([run_a, run_b])

        assert "size" in table.header
        assert len(table.rows) == 4

        metric = table.column("Metric")
        tests = table.column("Test")
        assert tests == ["bench.A", "bench.A", "bench.B", "bench.B"]
        assert metric == [
            Mode.THROUGHPUT.long_label,
            "gc.count",
            Mode.THROUGHPUT.long_label,
            "gc.count",
        ]
        assert table.column("size") == ["10", "10", "20", "20"]

        missing = table.rows[3]
        row = dict(zip(table.header, missing))
        assert row["Sample Size"] == "0"
        assert row["Statistic Value"] == "0"
        assert row["Statistical Margin of Error"] == "NA"
        assert row["Units"] == "none"
        assert row["Statistic Type"] == "none"

    def test_rectangular(self, make_run) -> None:
        """Test every row is as long as the header."""
        runs = [
            make_run(params={"a": 1, "b": 2}, secondaries={"x": 1.0}),
            make_run(params={"a": 3, "b": 4}, secondaries={"y": 1.0, "z": 2.0}),
            make_run(params={"a": 5, "b": 6}),
        ]
        table = normalize(runs)

        assert len(table.header) == 1 + 2 + len(FIXED_COLUMNS)
        for row in table.rows:
            assert len(row) == len(table.header)

    def test_union_complete_per_run(self, make_run) -> None:
        """Test every run reports every secondary name exactly once."""
        runs = [
            make_run(label="r1", secondaries={"·x": 1.0}),
            make_run(label="r2", secondaries={"y": 1.0, "z": 2.0}),
            make_run(label="r3"),
        ]
        table = normalize(runs)
        metric_idx = table.header.index("Metric")
        primary_name = Mode.THROUGHPUT.long_label

        for label in ("r1", "r2", "r3"):
            names = [
                row[metric_idx]
                for row in table.rows
                if row[0] == label and row[metric_idx] != primary_name
            ]
            assert sorted(names) == ["x", "y", "z"]

    def test_primary_named_after_mode(self, make_run) -> None:
        """Test the primary row uses the mode's long label."""
        run = make_run(label="bench.Sort.sort", mode=Mode.AVERAGE_TIME)
        table = normalize([run])

        row = dict(zip(table.header, table.rows[0]))
        assert row["Metric"] == "Average time, time/op"
        assert row["Test"] == "bench.Sort.sort"
        assert row["Benchmark Mode"] == "avgt"

    def test_measured_row_values(self, make_run) -> None:
        """Test primary row cells come from the metric."""
        run = make_run(score=123.5, score_error=2.25)
        table = normalize([run])

        row = dict(zip(table.header, table.rows[0]))
        assert row["Sample Size"] == "5"
        assert row["Statistic Type"] == "Average"
        assert row["Statistic Value"] == "123.5"
        assert row["Statistical Margin of Error"] == "2.25"
        assert row["Units"] == "ops/s"

    def test_nan_error_renders_na(self, make_run) -> None:
        """Test an undefined score error renders as NA."""
        run = make_run(score_error=math.nan, secondaries={"gc": 1.0})
        table = normalize([run])

        assert table.column("Statistical Margin of Error") == ["NA", "NA"]

    def test_missing_policy_renders_empty(self) -> None:
        """Test a metric without a policy does not abort the export."""
        run = RunResult(
            mode=Mode.THROUGHPUT,
            primary=Metric(label="bench.a", score=1.0, unit="ops/s"),
        )
        table = normalize([run])

        assert table.column("Statistic Type") == [""]

    def test_missing_parameter_raises(self, make_run) -> None:
        """Test a run lacking a parameter other runs have fails loudly."""
        runs = [
            make_run(label="r1", params={"size": 1}),
            make_run(label="r2", params={}),
        ]

        with pytest.raises(MissingParameterError, match="'size'.*'r2'"):
            _ = normalize(runs)

    def test_duplicate_trimmed_secondary_reported_once(
        self,
        make_run,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Test labels trimming to the same name yield a single row per run."""
        runs = [
            make_run(label="r1", secondaries={"·gc.count": 1.0, "gc.count": 2.0}),
            make_run(label="r2"),
        ]

        with caplog.at_level(logging.WARNING, logger="benchsheet.normalize"):
            table = normalize(runs)

        metric_idx = table.header.index("Metric")
        primary_name = Mode.THROUGHPUT.long_label
        for label in ("r1", "r2"):
            names = [
                row[metric_idx]
                for row in table.rows
                if row[0] == label and row[metric_idx] != primary_name
            ]
            assert names == ["gc.count"]

        r1_row = _rows_by_metric(table, "r1")["gc.count"]
        assert dict(zip(table.header, r1_row))["Statistic Value"] == "1.0"
        assert "r1" in caplog.text
        assert "gc.count" in caplog.text

    def test_input_order_kept(self, make_run) -> None:
        """Test runs appear in input order."""
        runs = [make_run(label=f"r{i}") for i in (3, 1, 2)]
        table = normalize(runs)

        assert table.column("Test") == ["r3", "r1", "r2"]

    def test_config_placeholders(self, make_run) -> None:
        """Test placeholder sentinels follow the configuration."""
        config = BenchsheetConfig(missing_unit="n/a", missing_statistic="NONE")
        runs = [make_run(label="r1", secondaries={"x": 1.0}), make_run(label="r2")]

        table = normalize(runs, config)

        row = _rows_by_metric(table, "r2")["x"]
        cells = dict(zip(table.header, row))
        assert cells["Units"] == "n/a"
        assert cells["Statistic Type"] == "NONE"

    def test_deterministic(self, make_run) -> None:
        """Test repeated normalization prints identical tables."""
        runs = [
            make_run(params={"b": 1, "a": 2}, secondaries={"z": 1.0}),
            make_run(params={"a": 3, "b": 4}, secondaries={"y": 1.0}),
        ]

        first = normalize(runs)

        assert first == normalize(runs)
        assert first.header[:3] == ["Test", "a", "b"]


class TestOutcomes:
    """Tests for the outcome variants."""

    def test_variants_and_roles(self, make_run) -> None:
        """Test the outcome sequence of a two-run collection."""
        runs = [
            make_run(label="r1", secondaries={"x": 1.0}),
            make_run(label="r2"),
        ]

        outcomes = list(iter_outcomes(runs))

        assert [type(o) for o in outcomes] == [
            PrimaryOutcome,
            SecondaryOutcome,
            PrimaryOutcome,
            MissingOutcome,
        ]
        assert [o.kind for o in outcomes] == [
            "primary",
            "secondary",
            "primary",
            "missing",
        ]
        assert [o.role for o in outcomes] == [
            ResultRole.PRIMARY,
            ResultRole.SECONDARY,
            ResultRole.PRIMARY,
            ResultRole.OMITTED,
        ]
        assert outcomes[3].run is runs[1]
        assert outcomes[3].metric_name == "x"

    def test_missing_outcome_placeholders(self, make_run) -> None:
        """Test the placeholder contract holds for any run and name."""
        for run, name in [(make_run(label="a"), "x"), (make_run(label="b"), "y")]:
            outcome = MissingOutcome(run, name)
            assert outcome.sample_size == "0"
            assert outcome.statistic_value == "0"
            assert outcome.margin_of_error == "NA"
            assert outcome.units == "none"
            assert outcome.statistic_type == "none"
