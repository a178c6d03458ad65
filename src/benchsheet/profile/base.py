# Copyright (c) Syntropy Systems
"""Interface between the iteration driver and profilers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from benchsheet.models.result import Metric


@runtime_checkable
class InternalProfiler(Protocol):
    """Profiler hooked into the begin and end of every measurement iteration.

    Iteration metadata is passed through but profilers are free to ignore it.
    """

    description: str

    def before_iteration(
        self,
        benchmark: object | None = None,
        iteration: object | None = None,
    ) -> None:
        ...

    def after_iteration(
        self,
        benchmark: object | None = None,
        iteration: object | None = None,
        result: object | None = None,
    ) -> list[Metric]:
        ...
