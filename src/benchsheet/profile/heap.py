# Copyright (c) Syntropy Systems
"""Periodic heap sampling during a measurement iteration."""
from __future__ import annotations

import logging
import math
import time
import tracemalloc
from contextlib import contextmanager
from threading import Event, Thread
from typing import TYPE_CHECKING

import psutil

from benchsheet.models.result import AggregationPolicy, scalar

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from benchsheet.config import BenchsheetConfig
    from benchsheet.models.result import Metric

logger = logging.getLogger(__name__)

HEAP_AVG_LABEL = "Heap-Avg"
HEAP_MAX_LABEL = "Heap-Max"
HEAP_UNIT = "bytes"

DEFAULT_PERIOD = 0.1
DEFAULT_INITIAL_DELAY = 0.01


def heap_in_use() -> int:
    """Approximate live heap of this process, in bytes.

    Uses the traced size while tracemalloc is active, otherwise the
    resident set size reported by psutil.
    """
    if tracemalloc.is_tracing():
        current, _peak = tracemalloc.get_traced_memory()
        return current
    mem = psutil.Process().memory_info()
    return int(mem.rss)


def heap_observations(samples: list[int]) -> list[Metric]:
    """Turn raw samples into scalar observations, two per sample.

    Reduction to a single average and maximum is left to the aggregation
    step, which combines observations according to their policy.
    """
    observations: list[Metric] = []
    for sample in samples:
        observations.append(
            scalar(HEAP_AVG_LABEL, sample, HEAP_UNIT, AggregationPolicy.AVG)
        )
        observations.append(
            scalar(HEAP_MAX_LABEL, sample, HEAP_UNIT, AggregationPolicy.MAX)
        )
    return observations


class HeapSampler:
    """Background sampler that records heap usage at a fixed rate.

    ``start`` arms a worker thread that takes the first sample after
    ``initial_delay`` seconds and then one sample every ``period`` seconds.
    ``stop`` blocks until the worker has exited, so the returned samples
    can no longer change.
    """

    _period: float
    _initial_delay: float
    _probe: Callable[[], int]
    _stop_event: Event
    _thread: Thread | None
    _samples: list[int]

    def __init__(
        self,
        period: float = DEFAULT_PERIOD,
        initial_delay: float = DEFAULT_INITIAL_DELAY,
        probe: Callable[[], int] | None = None,
    ) -> None:
        """Initialize sampler.

        Args:
            period: Seconds between samples
            initial_delay: Seconds before the first sample
            probe: Callable returning the current heap size in bytes

        """
        if period <= 0:
            msg = f"Sampling period must be positive, got {period}"
            raise ValueError(msg)
        if initial_delay < 0:
            msg = f"Initial delay must not be negative, got {initial_delay}"
            raise ValueError(msg)

        self._period = period
        self._initial_delay = initial_delay
        self._probe = probe if probe is not None else heap_in_use
        self._stop_event = Event()
        self._thread = None
        self._samples = []

    @property
    def sampling(self) -> bool:
        """Whether a worker is currently armed."""
        return self._thread is not None

    def start(self) -> None:
        """Start sampling into a fresh sample list."""
        if self._thread is not None:
            return

        # Each iteration gets its own event and list, nothing carries over
        self._samples = []
        self._stop_event = Event()
        thread = Thread(
            target=self._sampling_loop,
            args=(self._stop_event, self._samples),
            name="benchsheet-heap-sampler",
            daemon=True,
        )
        try:
            thread.start()
        except RuntimeError as exc:
            logger.exception(
                "Heap sampler could not start, iteration continues without heap data",
                exc_info=exc,
            )
            return
        self._thread = thread

    def stop(self) -> list[int]:
        """Stop sampling and return the samples of the current iteration.

        Stopping an idle sampler returns an empty list.
        """
        if self._thread is not None:
            self._stop_event.set()
            self._thread.join()
            self._thread = None

        samples = self._samples
        self._samples = []
        return samples

    def _sampling_loop(self, stop_event: Event, samples: list[int]) -> None:
        """Background sampling loop."""
        deadline = time.monotonic() + self._initial_delay
        while not stop_event.wait(timeout=max(0.0, deadline - time.monotonic())):
            try:
                samples.append(self._probe())
            except Exception as exc:
                logger.exception("Heap sampling failed", exc_info=exc)

            deadline += self._period
            now = time.monotonic()
            if deadline < now:
                # Overran one or more periods, drop the missed firings
                missed = math.ceil((now - deadline) / self._period)
                deadline += missed * self._period


class HeapSizeProfiler:
    """Iteration profiler reporting heap occupancy as Heap-Avg/Heap-Max."""

    description: str = "Naive heap average"

    def __init__(
        self,
        period: float = DEFAULT_PERIOD,
        initial_delay: float = DEFAULT_INITIAL_DELAY,
        probe: Callable[[], int] | None = None,
    ) -> None:
        self._sampler = HeapSampler(
            period=period,
            initial_delay=initial_delay,
            probe=probe,
        )

    @classmethod
    def from_config(
        cls,
        config: BenchsheetConfig,
        probe: Callable[[], int] | None = None,
    ) -> HeapSizeProfiler:
        """Build a profiler using the configured cadence."""
        return cls(
            period=config.sampling_period,
            initial_delay=config.initial_delay,
            probe=probe,
        )

    def before_iteration(
        self,
        benchmark: object | None = None,
        iteration: object | None = None,
    ) -> None:
        _ = benchmark, iteration
        self._sampler.start()

    def after_iteration(
        self,
        benchmark: object | None = None,
        iteration: object | None = None,
        result: object | None = None,
    ) -> list[Metric]:
        _ = benchmark, iteration, result
        samples = self._sampler.stop()
        logger.debug("Heap profiler collected %d sample(s)", len(samples))
        return heap_observations(samples)

    @contextmanager
    def measuring(self) -> Iterator[list[Metric]]:
        """Profile the enclosed block as one iteration.

        The yielded list is filled with observations when the block exits.

        Example:
            >>> with HeapSizeProfiler().measuring() as observations:
            ...     run_workload()

        """
        observations: list[Metric] = []
        self.before_iteration()
        try:
            yield observations
        finally:
            observations.extend(self.after_iteration())
