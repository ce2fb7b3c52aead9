"""
quakegrid: Spatial indexing and clustering of seismic event snapshots.

Typical use::

    from quakegrid import find_clusters, ClusterConfig

    clusters = find_clusters(features, ClusterConfig(max_distance_km=50, min_quakes=3))
"""

from .clustering import (
    ClusterConfig,
    as_features,
    clusters_to_dataframe,
    find_clusters,
    find_clusters_accelerated,
    find_clusters_reference,
)
from .spatial import Bounds, Event, SpatialIndex, build_index, distance_km

__version__ = "0.1.0"

__all__ = [
    "Bounds",
    "ClusterConfig",
    "Event",
    "SpatialIndex",
    "as_features",
    "build_index",
    "clusters_to_dataframe",
    "distance_km",
    "find_clusters",
    "find_clusters_accelerated",
    "find_clusters_reference",
]
