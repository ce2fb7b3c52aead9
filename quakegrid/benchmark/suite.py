"""
Benchmark suite for the clustering passes.

Runs :func:`~quakegrid.benchmark.harness.compare` over a grid of dataset
sizes, spatial distributions and clustering parameters and collects the
results in a DataFrame. Run as a script to print the table::

    python -m quakegrid.benchmark.suite
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from .generator import generate_events
from .harness import compare


logger = logging.getLogger(__name__)


DATASET_SIZES = (100, 500, 1000, 2500, 5000)

SUITE_DISTRIBUTIONS = ("clustered", "scattered", "realistic")

CLUSTER_PARAMS: Dict[str, Dict[str, float]] = {
    "tight": {"max_distance_km": 50.0, "min_quakes": 3},
    "standard": {"max_distance_km": 100.0, "min_quakes": 3},
    "loose": {"max_distance_km": 200.0, "min_quakes": 2},
}

REGRESSION_CASE = {"distribution": "realistic", "max_distance_km": 100.0, "min_quakes": 3}

RESULT_COLUMNS = [
    "dataset_size",
    "distribution",
    "params",
    "max_distance_km",
    "min_quakes",
    "optimized_ms",
    "reference_ms",
    "speedup",
    "cluster_count",
    "total_earthquakes",
    "equivalent",
]


def run_suite(
    sizes: Sequence[int] = DATASET_SIZES,
    distributions: Sequence[str] = SUITE_DISTRIBUTIONS,
    params: Optional[Dict[str, Dict[str, float]]] = None,
    seed: int = 0,
) -> pd.DataFrame:
    """
    Benchmark every size x distribution x parameter combination.

    Each (size, distribution) pair gets its own seeded catalogue, shared by all
    parameter sets.

    Returns:
        DataFrame with one row per combination (see ``RESULT_COLUMNS``)
    """
    params = params if params is not None else CLUSTER_PARAMS

    rows: List[Dict[str, Any]] = []
    for size in sizes:
        for distribution in distributions:
            events = generate_events(size, distribution, seed=seed)

            for name, p in params.items():
                result = compare(events, p["max_distance_km"], int(p["min_quakes"]))
                rows.append(
                    {
                        "dataset_size": size,
                        "distribution": distribution,
                        "params": name,
                        "max_distance_km": p["max_distance_km"],
                        "min_quakes": int(p["min_quakes"]),
                        "optimized_ms": result.timings["optimized_ms"],
                        "reference_ms": result.timings["reference_ms"],
                        "speedup": result.timings["speedup"],
                        "cluster_count": result.optimized.cluster_count,
                        "total_earthquakes": result.optimized.total_earthquakes,
                        "equivalent": result.equivalent,
                    }
                )
                logger.info(
                    f"{size} {distribution} {name}: "
                    f"{result.timings['optimized_ms']:.1f}ms vs {result.timings['reference_ms']:.1f}ms"
                )

    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def run_regression_test(
    baseline_ms: Optional[float] = None,
    *,
    size: int = 1000,
    seed: int = 0,
) -> Dict[str, Any]:
    """
    Time the standard case (realistic catalogue, 100 km, 3 events).

    Args:
        baseline_ms: Earlier accelerated timing to compare against
        size: Catalogue size
        seed: Catalogue seed

    Returns:
        Dict with timings, ``equivalent`` and, given a baseline, a
        ``regression`` entry (``baseline_ms``, ``current_ms``,
        ``change_percent``, ``improved``).
    """
    events = generate_events(size, REGRESSION_CASE["distribution"], seed=seed)
    result = compare(events, REGRESSION_CASE["max_distance_km"], REGRESSION_CASE["min_quakes"])

    report: Dict[str, Any] = {
        "dataset_size": size,
        "optimized_ms": result.timings["optimized_ms"],
        "reference_ms": result.timings["reference_ms"],
        "cluster_count": result.optimized.cluster_count,
        "equivalent": result.equivalent,
    }

    if baseline_ms is not None and baseline_ms > 0:
        current = result.timings["optimized_ms"]
        change = (current - baseline_ms) / baseline_ms * 100.0
        report["regression"] = {
            "baseline_ms": baseline_ms,
            "current_ms": current,
            "change_percent": change,
            "improved": change < 0,
        }

    return report


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    table = run_suite(sizes=(100, 500, 1000, 2500))
    print(table.to_string(index=False))
