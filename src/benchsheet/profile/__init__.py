# Copyright (c) Syntropy Systems
"""Profilers that run alongside measurement iterations."""

from .base import InternalProfiler
from .heap import HeapSampler, HeapSizeProfiler, heap_in_use, heap_observations

__all__ = [
    "HeapSampler",
    "HeapSizeProfiler",
    "InternalProfiler",
    "heap_in_use",
    "heap_observations",
]
