"""
benchsheet - Benchmark result tables and heap sampling.

Flatten benchmark runs into one CSV-ready table, sample the heap while
they run.
"""

from benchsheet.normalize import NormalizedTable, normalize, trim_punctuation
from benchsheet.profile.heap import HeapSampler, HeapSizeProfiler

__version__ = "0.1.0"
__all__ = [
    "HeapSampler",
    "HeapSizeProfiler",
    "NormalizedTable",
    "__version__",
    "normalize",
    "trim_punctuation",
]
