"""
Benchmarking module for the fixed-size hash table.

This module measures operation time and probe counts as the table fills up,
with optional tombstones left behind by deletes.
"""

from .benchmark import (
    OPERATIONS,
    BenchmarkConfig,
    BenchmarkResult,
    BenchmarkRunner,
    create_probe_benchmark,
)

__all__ = [
    "OPERATIONS",
    "BenchmarkConfig",
    "BenchmarkResult",
    "BenchmarkRunner",
    "create_probe_benchmark",
]
