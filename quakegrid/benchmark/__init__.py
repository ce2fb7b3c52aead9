"""
quakegrid/benchmark: Equivalence and latency checks for the clustering passes.
"""

from .generator import DISTRIBUTIONS, REGIONS, generate_events
from .harness import (
    AlgorithmRun,
    BenchmarkComparison,
    compare,
    grouping_signature,
)
from .suite import CLUSTER_PARAMS, run_regression_test, run_suite

__all__ = [
    "AlgorithmRun",
    "BenchmarkComparison",
    "CLUSTER_PARAMS",
    "DISTRIBUTIONS",
    "REGIONS",
    "compare",
    "generate_events",
    "grouping_signature",
    "run_regression_test",
    "run_suite",
]
