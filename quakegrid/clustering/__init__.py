"""
quakegrid/clustering: Anchor-greedy clustering of seismic events.

This module provides the brute-force reference and the grid-accelerated
clustering passes, plus per-cluster summaries.
"""

from .engine import (
    Cluster,
    ClusterConfig,
    as_features,
    find_clusters,
    find_clusters_accelerated,
    find_clusters_reference,
)
from .summary import (
    ClusterSummary,
    clusters_to_dataframe,
    summarize_cluster,
    summarize_clusters,
)

__all__ = [
    "Cluster",
    "ClusterConfig",
    "ClusterSummary",
    "as_features",
    "clusters_to_dataframe",
    "find_clusters",
    "find_clusters_accelerated",
    "find_clusters_reference",
    "summarize_cluster",
    "summarize_clusters",
]
