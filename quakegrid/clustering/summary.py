"""Per-cluster statistics for reporting and downstream consumers."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from ..spatial.events import Event, is_finite_number
from ..spatial.geo import distance_km_array


MS_PER_HOUR = 3_600_000

SUMMARY_COLUMNS = [
    "cluster_id",
    "anchor_id",
    "size",
    "max_magnitude",
    "min_magnitude",
    "mean_magnitude",
    "start_time",
    "end_time",
    "duration_hours",
    "centroid_lat",
    "centroid_lon",
    "max_distance_km",
    "min_depth",
    "max_depth",
    "event_ids",
]


@dataclass
class ClusterSummary:
    """Aggregate view of one cluster."""

    cluster_id: int
    anchor_id: str
    size: int
    centroid_lat: float
    centroid_lon: float
    max_distance_km: float
    """Distance from the anchor to its farthest member."""

    max_magnitude: Optional[float] = None
    min_magnitude: Optional[float] = None
    mean_magnitude: Optional[float] = None
    start_time: Optional[int] = None
    end_time: Optional[int] = None
    duration_hours: Optional[float] = None
    min_depth: Optional[float] = None
    max_depth: Optional[float] = None
    event_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _finite(values: Sequence[Any]) -> np.ndarray:
    return np.array([float(v) for v in values if is_finite_number(v)], dtype=float)


def summarize_cluster(cluster: Sequence[Event], cluster_id: int = 0) -> ClusterSummary:
    """
    Summarise ``cluster``; its first element is taken as the anchor.

    Magnitude, time and depth statistics only use numeric values and are None
    when a cluster has none.

    Raises:
        ValueError: If ``cluster`` is empty
    """
    if len(cluster) == 0:
        raise ValueError("Cannot summarise an empty cluster")

    anchor = cluster[0]
    lats = np.array([e.latitude for e in cluster], dtype=float)
    lons = np.array([e.longitude for e in cluster], dtype=float)
    distances = distance_km_array(anchor.latitude, anchor.longitude, lats, lons)

    summary = ClusterSummary(
        cluster_id=cluster_id,
        anchor_id=anchor.id,
        size=len(cluster),
        centroid_lat=float(lats.mean()),
        centroid_lon=float(lons.mean()),
        max_distance_km=float(distances.max()),
        event_ids=[e.id for e in cluster],
    )

    magnitudes = _finite([e.magnitude for e in cluster])
    if magnitudes.size:
        summary.max_magnitude = float(magnitudes.max())
        summary.min_magnitude = float(magnitudes.min())
        summary.mean_magnitude = float(magnitudes.mean())

    times = [int(e.timestamp) for e in cluster if is_finite_number(e.timestamp)]
    if times:
        summary.start_time = min(times)
        summary.end_time = max(times)
        summary.duration_hours = (summary.end_time - summary.start_time) / MS_PER_HOUR

    depths = _finite([e.depth for e in cluster])
    if depths.size:
        summary.min_depth = float(depths.min())
        summary.max_depth = float(depths.max())

    return summary


def summarize_clusters(clusters: Sequence[Sequence[Event]]) -> List[ClusterSummary]:
    """Summaries numbered by position in ``clusters``."""
    return [summarize_cluster(cluster, cluster_id=i) for i, cluster in enumerate(clusters)]


def clusters_to_dataframe(clusters: Sequence[Sequence[Event]]) -> pd.DataFrame:
    """One row per cluster; an empty frame keeps the summary columns."""
    summaries = summarize_clusters(clusters)
    if not summaries:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)
    return pd.DataFrame([s.to_dict() for s in summaries], columns=SUMMARY_COLUMNS)


__all__ = [
    "ClusterSummary",
    "SUMMARY_COLUMNS",
    "clusters_to_dataframe",
    "summarize_cluster",
    "summarize_clusters",
]
