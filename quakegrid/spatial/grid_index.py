"""
Uniform-grid spatial index for earthquake epicentres.

The index partitions a bounding box into square cells of ``cell_size``
degrees. Each cell holds a bucket of :class:`~quakegrid.spatial.events.Event`
references, so a radius query only computes exact Haversine distances for
events in the few cells around the query point instead of the whole catalogue.

A grid is used rather than a tree because per-run event density is roughly
uniform inside the bounded region, insertion is O(1) and the neighbourhood of
cells a radius query scans is small and predictable.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Set, Tuple

from .events import Bounds, Event, coerce_events, is_finite_number
from .geo import distance_km, search_window


DEFAULT_CELL_SIZE = 1.0
"""Cell size (degrees) used when no better estimate is available."""

DEFAULT_TARGET_POINTS_PER_CELL = 8
"""Average bucket occupancy aimed for by :meth:`SpatialIndex.calculate_optimal_cell_size`."""

MIN_CELL_SIZE_DEG = 0.01
"""Smallest cell size the optimiser will return (~1.1 km)."""

CellKey = Tuple[int, int]


@dataclass
class IndexStats:
    """Usage counters owned by one index instance."""

    insertions: int = 0
    queries: int = 0
    distance_calculations_saved: int = 0


@dataclass(frozen=True)
class Neighbor:
    """Result of a radius query: an indexed event and its distance to the centre."""

    event: Event
    distance_km: float


class SpatialIndex:
    """
    Grid of event buckets over ``bounds``.

    The index only references events; callers keep ownership of the records.
    One instance serves a single clustering pass and must not be shared
    between concurrent passes.
    """

    def __init__(self, bounds: Bounds, cell_size: float = DEFAULT_CELL_SIZE):
        if not is_finite_number(cell_size) or cell_size <= 0:
            raise ValueError(f"cell_size must be a positive number, got {cell_size!r}")
        if not bounds.is_valid:
            raise ValueError(f"Invalid bounds: {bounds}")

        self.bounds = bounds
        self.cell_size = float(cell_size)
        self.earthquake_count = 0
        self.stats = IndexStats()
        self._buckets: Dict[CellKey, List[Event]] = {}
        self._max_x = self._cell_index(bounds.east, bounds.west)
        self._max_y = self._cell_index(bounds.north, bounds.south)

    def __len__(self) -> int:
        return self.earthquake_count

    def _cell_index(self, value: float, origin: float) -> int:
        return int(math.floor((value - origin) / self.cell_size))

    def cell_key(self, lat: float, lon: float) -> CellKey:
        """Integer ``(cell_x, cell_y)`` coordinate of a point."""
        return (
            self._cell_index(lon, self.bounds.west),
            self._cell_index(lat, self.bounds.south),
        )

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def insert(self, event: Event) -> bool:
        """
        Add ``event`` to its cell bucket.

        Returns False, leaving the index untouched, when the coordinates are not
        finite numbers or fall outside the index bounds.
        """
        lat = getattr(event, "latitude", None)
        lon = getattr(event, "longitude", None)
        if not (is_finite_number(lat) and is_finite_number(lon)):
            return False
        if not self.bounds.contains(lat, lon):
            return False

        self._buckets.setdefault(self.cell_key(lat, lon), []).append(event)
        self.earthquake_count += 1
        self.stats.insertions += 1
        return True

    def clear(self) -> None:
        """Drop every bucket and reset the counters."""
        self._buckets.clear()
        self.earthquake_count = 0
        self.stats = IndexStats()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _clip_x(self, lo: float, hi: float) -> Optional[Tuple[int, int]]:
        lo = max(lo, self.bounds.west)
        hi = min(hi, self.bounds.east)
        if lo > hi:
            return None
        return (
            max(0, self._cell_index(lo, self.bounds.west)),
            min(self._max_x, self._cell_index(hi, self.bounds.west)),
        )

    def _clip_y(self, lo: float, hi: float) -> Optional[Tuple[int, int]]:
        lo = max(lo, self.bounds.south)
        hi = min(hi, self.bounds.north)
        if lo > hi:
            return None
        return (
            max(0, self._cell_index(lo, self.bounds.south)),
            min(self._max_y, self._cell_index(hi, self.bounds.south)),
        )

    def _iter_cells(
        self,
        lon_ranges: Iterable[Tuple[float, float]],
        lat_range: Tuple[float, float],
    ) -> Iterator[Event]:
        """Yield every event stored in cells overlapping the given ranges."""
        rows = self._clip_y(*lat_range)
        if rows is None:
            return

        columns: Set[int] = set()
        for lo, hi in lon_ranges:
            clipped = self._clip_x(lo, hi)
            if clipped is not None:
                columns.update(range(clipped[0], clipped[1] + 1))
        if not columns:
            return

        y0, y1 = rows
        n_cells = len(columns) * (y1 - y0 + 1)

        # Sparse grids: walking the occupied buckets is cheaper than the range.
        if n_cells > len(self._buckets):
            for (x, y), bucket in self._buckets.items():
                if x in columns and y0 <= y <= y1:
                    yield from bucket
            return

        for x in sorted(columns):
            for y in range(y0, y1 + 1):
                bucket = self._buckets.get((x, y))
                if bucket:
                    yield from bucket

    def find_within_radius(self, lat: float, lon: float, radius_km: float) -> List[Neighbor]:
        """
        Return indexed events within ``radius_km`` (inclusive) of ``(lat, lon)``.

        Only the cells covering the query window are scanned; each candidate's
        exact Haversine distance decides membership. A window running past the
        antimeridian is continued on the other edge of the grid.
        """
        self.stats.queries += 1

        if not (is_finite_number(lat) and is_finite_number(lon)):
            return []
        if not is_finite_number(radius_km) or radius_km < 0:
            return []

        lat_span, lon_span = search_window(lat, radius_km)
        lat_range = (lat - lat_span, lat + lat_span)

        if lon_span >= 180.0:
            lon_ranges = [(-180.0, 180.0)]
        else:
            lo, hi = lon - lon_span, lon + lon_span
            lon_ranges = [(lo, hi)]
            if lo < -180.0:
                lon_ranges.append((lo + 360.0, 180.0))
            if hi > 180.0:
                lon_ranges.append((-180.0, hi - 360.0))

        results: List[Neighbor] = []
        examined = 0
        for event in self._iter_cells(lon_ranges, lat_range):
            examined += 1
            d = distance_km(lat, lon, event.latitude, event.longitude)
            if d <= radius_km:
                results.append(Neighbor(event=event, distance_km=d))

        self.stats.distance_calculations_saved += self.earthquake_count - examined
        return results

    def query(self, bbox: Bounds, exact: bool = False) -> List[Event]:
        """
        Events in every cell overlapping ``bbox``.

        The lookup is coarse: events sharing a cell with the box are returned
        even when they lie outside it, unless ``exact`` is set.
        """
        candidates = self._iter_cells([(bbox.west, bbox.east)], (bbox.south, bbox.north))
        if not exact:
            return list(candidates)
        return [e for e in candidates if bbox.contains(e.latitude, e.longitude)]

    def all_events(self) -> List[Event]:
        return [event for bucket in self._buckets.values() for event in bucket]

    def get_stats(self) -> Dict[str, Any]:
        """Usage and occupancy statistics."""
        grid_cells = len(self._buckets)
        return {
            "insertions": self.stats.insertions,
            "queries": self.stats.queries,
            "earthquake_count": self.earthquake_count,
            "grid_cells": grid_cells,
            "distance_calculations_saved": self.stats.distance_calculations_saved,
            "average_events_per_cell": self.earthquake_count / (grid_cells or 1),
            "cell_size": self.cell_size,
            "bounds": self.bounds.to_dict(),
        }

    # ------------------------------------------------------------------
    # Sizing
    # ------------------------------------------------------------------

    @staticmethod
    def calculate_optimal_cell_size(
        events: Any,
        target_points_per_cell: float = DEFAULT_TARGET_POINTS_PER_CELL,
    ) -> float:
        """
        Pick a cell size so buckets hold about ``target_points_per_cell`` events.

        The area of the events' bounding box is shared out evenly:
        ``cell_size = sqrt(area * target / n)``. Collinear data (zero area)
        falls back to the longer extent, and a single location or an empty
        collection gives :data:`DEFAULT_CELL_SIZE`.
        """
        valid = [e for e in coerce_events(events) if e.has_valid_coordinates]
        if not valid:
            return DEFAULT_CELL_SIZE

        if not is_finite_number(target_points_per_cell) or target_points_per_cell <= 0:
            target_points_per_cell = DEFAULT_TARGET_POINTS_PER_CELL

        box = Bounds.around(valid)
        lat_extent = box.north - box.south
        lon_extent = box.east - box.west
        n = len(valid)

        area = lat_extent * lon_extent
        if area > 0:
            cell_size = math.sqrt(area * target_points_per_cell / n)
        else:
            cell_size = max(lat_extent, lon_extent) * target_points_per_cell / n

        if not is_finite_number(cell_size) or cell_size <= 0:
            return DEFAULT_CELL_SIZE
        return max(MIN_CELL_SIZE_DEG, cell_size)


__all__ = [
    "DEFAULT_CELL_SIZE",
    "DEFAULT_TARGET_POINTS_PER_CELL",
    "MIN_CELL_SIZE_DEG",
    "IndexStats",
    "Neighbor",
    "SpatialIndex",
]
