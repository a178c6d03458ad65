# Copyright (c) Syntropy Systems
"""CSV serialization of normalized result tables."""
from __future__ import annotations

import csv
from typing import TYPE_CHECKING, TextIO

from benchsheet.normalize import normalize

if TYPE_CHECKING:
    from collections.abc import Iterable

    from benchsheet.config import BenchsheetConfig
    from benchsheet.models.result import RunResult
    from benchsheet.normalize import NormalizedTable


def write_csv(table: NormalizedTable, out: TextIO) -> int:
    """Write a table as comma-separated records.

    Fields holding commas, quotes or line breaks are quoted. An empty table
    writes nothing.

    Returns:
        Number of data rows written

    """
    if not table:
        return 0

    writer = csv.writer(out, lineterminator="\r\n")
    writer.writerows(table.records())
    return len(table)


def write_normalized(
    runs: Iterable[RunResult],
    out: TextIO,
    config: BenchsheetConfig | None = None,
) -> int:
    """Normalize runs and write them to ``out`` as CSV."""
    return write_csv(normalize(runs, config), out)
