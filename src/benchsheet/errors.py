# Copyright (c) Syntropy Systems
"""Exceptions raised by benchsheet."""

from __future__ import annotations


class BenchsheetError(Exception):
    """Base class for benchsheet errors."""


class MissingParameterError(BenchsheetError, ValueError):
    """A run lacks a parameter that other runs in the same export carry."""

    def __init__(self, name: str, run_label: str | None = None) -> None:
        self.name = name
        self.run_label = run_label
        msg = f"Parameter '{name}' is not set"
        if run_label is not None:
            msg = f"{msg} for run '{run_label}'"
        super().__init__(msg)


class ResultsFileError(BenchsheetError):
    """A results file could not be read or did not hold valid run results."""
