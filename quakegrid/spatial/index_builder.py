"""Build a populated :class:`SpatialIndex` from a raw event collection."""

from __future__ import annotations

import logging
from typing import Any, Optional

from .events import Bounds, is_finite_number, valid_events
from .geo import KM_PER_DEGREE
from .grid_index import (
    DEFAULT_CELL_SIZE,
    DEFAULT_TARGET_POINTS_PER_CELL,
    SpatialIndex,
)


logger = logging.getLogger(__name__)


BOUNDS_BUFFER_FRACTION = 0.1
"""Proportional padding added around the events' bounding box."""

MIN_BOUNDS_BUFFER_DEG = 0.1
"""Minimum padding per side, so a single point still gets a usable box."""


def build_index(
    events: Any,
    target_points_per_cell: float = DEFAULT_TARGET_POINTS_PER_CELL,
    *,
    max_distance_km: Optional[float] = None,
) -> Optional[SpatialIndex]:
    """
    Filter, bound and index ``events``.

    Args:
        events: Events, GeoJSON-like features or an event DataFrame
        target_points_per_cell: Desired average bucket occupancy
        max_distance_km: Radius the index will be queried with. When given,
            cells are made at least that wide so a query scans a bounded
            neighbourhood of cells.

    Returns:
        The populated index, or None when no event has usable coordinates.
    """
    valid = valid_events(events)
    if not valid:
        return None

    bounds = Bounds.around(valid).expanded(BOUNDS_BUFFER_FRACTION, MIN_BOUNDS_BUFFER_DEG)
    if not bounds.is_valid:
        logger.warning(f"Cannot index {len(valid)} events: unusable bounds {bounds}")
        return None

    cell_size = SpatialIndex.calculate_optimal_cell_size(valid, target_points_per_cell)
    if not is_finite_number(cell_size) or cell_size <= 0:
        cell_size = DEFAULT_CELL_SIZE
    if is_finite_number(max_distance_km) and max_distance_km > 0:
        cell_size = max(cell_size, max_distance_km / KM_PER_DEGREE)

    index = SpatialIndex(bounds, cell_size)

    rejected = 0
    for event in valid:
        if not index.insert(event):
            rejected += 1

    if rejected:
        logger.warning(
            f"{rejected} of {len(valid)} events fell outside the index bounds and were skipped"
        )

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"Spatial index built: {index.get_stats()}")

    return index


__all__ = [
    "BOUNDS_BUFFER_FRACTION",
    "MIN_BOUNDS_BUFFER_DEG",
    "build_index",
]
