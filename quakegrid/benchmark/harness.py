"""
Side-by-side run of the reference and accelerated clustering passes.

Used by tests to assert that both variants agree, and by monitoring to check
that the accelerated pass stays within its latency budget.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, List, Sequence

from ..clustering.engine import (
    Cluster,
    find_clusters_accelerated,
    find_clusters_reference,
)
from ..spatial.events import Event, coerce_events
from ..spatial.grid_index import DEFAULT_TARGET_POINTS_PER_CELL


logger = logging.getLogger(__name__)


@dataclass
class AlgorithmRun:
    """Output and timing of one clustering variant."""

    clusters: List[Cluster]
    cluster_count: int
    total_earthquakes: int
    duration_ms: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cluster_count": self.cluster_count,
            "total_earthquakes": self.total_earthquakes,
            "duration_ms": self.duration_ms,
            "cluster_ids": [[e.id for e in cluster] for cluster in self.clusters],
        }


@dataclass
class BenchmarkComparison:
    """Both variants run on identical input."""

    optimized: AlgorithmRun
    reference: AlgorithmRun
    timings: Dict[str, float] = field(default_factory=dict)

    @property
    def equivalent(self) -> bool:
        """Whether the two variants produced the same grouping."""
        return grouping_signature(self.optimized.clusters) == grouping_signature(
            self.reference.clusters
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "optimized": self.optimized.to_dict(),
            "reference": self.reference.to_dict(),
            "timings": dict(self.timings),
            "equivalent": self.equivalent,
        }


def grouping_signature(clusters: Sequence[Sequence[Event]]) -> FrozenSet[FrozenSet[str]]:
    """Order-independent identity of a clustering: a set of id sets."""
    return frozenset(frozenset(e.id for e in cluster) for cluster in clusters)


def _timed_run(fn: Callable[[], List[Cluster]]) -> AlgorithmRun:
    start = time.perf_counter()
    clusters = fn()
    duration_ms = (time.perf_counter() - start) * 1000.0
    return AlgorithmRun(
        clusters=clusters,
        cluster_count=len(clusters),
        total_earthquakes=sum(len(c) for c in clusters),
        duration_ms=duration_ms,
    )


def compare(
    events: Any,
    max_distance_km: float,
    min_quakes: int,
    *,
    target_points_per_cell: float = DEFAULT_TARGET_POINTS_PER_CELL,
) -> BenchmarkComparison:
    """
    Run both clustering variants on the same events.

    Args:
        events: Events, GeoJSON-like features or an event DataFrame
        max_distance_km: Maximum distance from the anchor
        min_quakes: Minimum cluster size
        target_points_per_cell: Grid occupancy for the accelerated variant

    Returns:
        BenchmarkComparison with both outputs and wall-clock timings
        (``optimized_ms``, ``reference_ms``, ``speedup``).
    """
    snapshot = coerce_events(events)

    optimized = _timed_run(
        lambda: find_clusters_accelerated(
            snapshot,
            max_distance_km,
            min_quakes,
            target_points_per_cell=target_points_per_cell,
        )
    )
    reference = _timed_run(
        lambda: find_clusters_reference(snapshot, max_distance_km, min_quakes)
    )

    speedup = (
        reference.duration_ms / optimized.duration_ms if optimized.duration_ms > 0 else float("inf")
    )
    comparison = BenchmarkComparison(
        optimized=optimized,
        reference=reference,
        timings={
            "optimized_ms": optimized.duration_ms,
            "reference_ms": reference.duration_ms,
            "speedup": speedup,
        },
    )

    if not comparison.equivalent:
        logger.warning(
            f"Clustering variants disagree on {len(snapshot)} events: "
            f"{optimized.cluster_count} accelerated vs {reference.cluster_count} reference clusters"
        )
    elif logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"Benchmark timings for {len(snapshot)} events: {comparison.timings}")

    return comparison


__all__ = [
    "AlgorithmRun",
    "BenchmarkComparison",
    "compare",
    "grouping_signature",
]
