"""
Anchor-greedy clustering of seismic events.

Both variants follow the same procedure:

1. Drop events without finite coordinates and bail out early on degenerate
   input (nothing left, fewer events than ``min_quakes``, bad distance).
2. Stable-sort by magnitude, strongest first (missing magnitude counts as 0).
3. Walk the sorted list. Each event not yet processed becomes the anchor of a
   candidate group that absorbs every unprocessed event within
   ``max_distance_km`` of it.
4. Anchor and members are marked processed whether or not the group is kept,
   so an absorbed event is never reconsidered for a later cluster.
5. Groups of at least ``min_quakes`` events are emitted, anchor first.

The reference variant compares each anchor against every remaining event
(O(n^2)). The accelerated variant asks a :class:`SpatialIndex` for the
anchor's neighbourhood instead. Members of an accelerated group are put back
into sorted-list order, so the two variants return identical cluster lists.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from ..spatial.events import Event, is_finite_number, valid_events
from ..spatial.geo import distance_km
from ..spatial.grid_index import DEFAULT_TARGET_POINTS_PER_CELL, SpatialIndex
from ..spatial.index_builder import build_index


logger = logging.getLogger(__name__)

Cluster = List[Event]


@dataclass
class ClusterConfig:
    """Parameters for a clustering pass."""

    max_distance_km: float = 100.0
    """Maximum anchor-to-member great-circle distance."""

    min_quakes: int = 3
    """Minimum group size (anchor included) for a cluster to be emitted."""

    target_points_per_cell: float = DEFAULT_TARGET_POINTS_PER_CELL
    """Average bucket occupancy for the accelerated variant's grid."""


def _sorted_candidates(
    events: Any,
    max_distance_km: float,
    min_quakes: int,
) -> Optional[List[Event]]:
    """Valid events, strongest first, or None when no cluster can be formed."""
    valid = valid_events(events)
    if not valid:
        return None

    if not is_finite_number(max_distance_km) or max_distance_km <= 0:
        logger.warning(f"Invalid max_distance_km={max_distance_km!r}; no clusters computed")
        return None

    if len(valid) < min_quakes:
        return None

    # sorted() is stable: ties keep their input order
    return sorted(valid, key=lambda e: e.sort_magnitude, reverse=True)


def find_clusters_reference(
    events: Any,
    max_distance_km: float,
    min_quakes: int,
) -> List[Cluster]:
    """
    Brute-force clustering; the behavioural reference for the grid version.

    Args:
        events: Events, GeoJSON-like features or an event DataFrame
        max_distance_km: Maximum distance from the anchor
        min_quakes: Minimum cluster size

    Returns:
        Clusters in anchor-selection order, each led by its anchor.
    """
    ordered = _sorted_candidates(events, max_distance_km, min_quakes)
    if ordered is None:
        return []

    processed = set()
    clusters: List[Cluster] = []

    for anchor in ordered:
        if anchor.id in processed:
            continue
        processed.add(anchor.id)

        group = [anchor]
        for other in ordered:
            if other.id in processed:
                continue
            d = distance_km(anchor.latitude, anchor.longitude, other.latitude, other.longitude)
            if d <= max_distance_km:
                group.append(other)
                processed.add(other.id)

        if len(group) >= min_quakes:
            clusters.append(group)

    return clusters


def find_clusters_accelerated(
    events: Any,
    max_distance_km: float,
    min_quakes: int,
    *,
    target_points_per_cell: float = DEFAULT_TARGET_POINTS_PER_CELL,
    index: Optional[SpatialIndex] = None,
) -> List[Cluster]:
    """
    Grid-accelerated clustering, equivalent to :func:`find_clusters_reference`.

    Args:
        events: Events, GeoJSON-like features or an event DataFrame
        max_distance_km: Maximum distance from the anchor
        min_quakes: Minimum cluster size
        target_points_per_cell: Grid occupancy used when building the index
        index: Pre-built index over the same events. Built on the fly if None.

    Returns:
        Clusters in anchor-selection order, each led by its anchor.
    """
    ordered = _sorted_candidates(events, max_distance_km, min_quakes)
    if ordered is None:
        return []

    if index is None:
        index = build_index(ordered, target_points_per_cell, max_distance_km=max_distance_km)
        if index is None:
            return []

    rank: Dict[str, int] = {}
    for position, event in enumerate(ordered):
        rank.setdefault(event.id, position)

    processed = set()
    clusters: List[Cluster] = []

    for anchor in ordered:
        if anchor.id in processed:
            continue
        processed.add(anchor.id)

        neighbours = index.find_within_radius(anchor.latitude, anchor.longitude, max_distance_km)
        matches = sorted(
            (n.event for n in neighbours if n.event.id not in processed),
            key=lambda e: rank.get(e.id, len(rank)),
        )

        group = [anchor]
        for other in matches:
            if other.id in processed:
                continue
            group.append(other)
            processed.add(other.id)

        if len(group) >= min_quakes:
            clusters.append(group)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            f"Accelerated clustering: {len(clusters)} clusters from {len(ordered)} events; "
            f"index stats {index.get_stats()}"
        )

    return clusters


def find_clusters(
    events: Any,
    config: Optional[ClusterConfig] = None,
    *,
    accelerated: bool = True,
) -> List[Cluster]:
    """Run a clustering pass with ``config`` (defaults if None)."""
    if config is None:
        config = ClusterConfig()

    if accelerated:
        return find_clusters_accelerated(
            events,
            config.max_distance_km,
            config.min_quakes,
            target_points_per_cell=config.target_points_per_cell,
        )
    return find_clusters_reference(events, config.max_distance_km, config.min_quakes)


def as_features(clusters: List[Cluster]) -> List[List[Mapping[str, Any]]]:
    """Clusters expressed in the records they were parsed from, anchor first."""
    return [[event.to_feature() for event in cluster] for cluster in clusters]


__all__ = [
    "Cluster",
    "ClusterConfig",
    "as_features",
    "find_clusters",
    "find_clusters_accelerated",
    "find_clusters_reference",
]
