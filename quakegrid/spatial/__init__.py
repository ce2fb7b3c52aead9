"""
quakegrid/spatial: Event records, great-circle math and the uniform-grid index.

This module provides the spatial building blocks used by the clustering engine.
"""

from .events import (
    Bounds,
    Event,
    coerce_events,
    is_finite_number,
    valid_events,
)
from .geo import (
    EARTH_RADIUS_KM,
    KM_PER_DEGREE,
    distance_km,
    distance_km_array,
    normalize_longitude,
    search_window,
)
from .grid_index import (
    DEFAULT_CELL_SIZE,
    DEFAULT_TARGET_POINTS_PER_CELL,
    IndexStats,
    Neighbor,
    SpatialIndex,
)
from .index_builder import build_index

__all__ = [
    # Records
    "Bounds",
    "Event",
    "coerce_events",
    "is_finite_number",
    "valid_events",

    # Geometry
    "EARTH_RADIUS_KM",
    "KM_PER_DEGREE",
    "distance_km",
    "distance_km_array",
    "normalize_longitude",
    "search_window",

    # Index
    "DEFAULT_CELL_SIZE",
    "DEFAULT_TARGET_POINTS_PER_CELL",
    "IndexStats",
    "Neighbor",
    "SpatialIndex",
    "build_index",
]
