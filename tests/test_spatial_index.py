"""
Unit Tests for the uniform-grid index (quakegrid.spatial.grid_index)

Tests insertion rules, radius and bounding-box queries, statistics and
cell sizing.
"""

import math

import pytest

from quakegrid.spatial import Bounds, Event, SpatialIndex
from quakegrid.spatial.geo import distance_km
from quakegrid.spatial.grid_index import DEFAULT_CELL_SIZE, MIN_CELL_SIZE_DEG


def _event(quake_id, lat, lon, mag=3.0):
    return Event(id=quake_id, latitude=lat, longitude=lon, magnitude=mag)


# ==============================================================================
# Construction and Insertion
# ==============================================================================

class TestInsert:
    """Test insertion rules."""

    def test_rejects_out_of_bounds_and_non_numeric(self, california_bounds):
        """Points outside the box or with non-numeric coordinates are refused."""
        index = SpatialIndex(california_bounds, 1.0)

        assert index.insert(_event("outside", 50.0, -100.0)) is False
        assert index.insert(_event("garbage", "invalid", -118.0)) is False
        assert index.insert(_event("garbage-lon", 35.0, "invalid")) is False

        stats = index.get_stats()
        assert stats["insertions"] == 0
        assert stats["earthquake_count"] == 0
        assert stats["grid_cells"] == 0

    def test_rejects_non_finite(self, california_bounds):
        """NaN and infinity are refused."""
        index = SpatialIndex(california_bounds, 1.0)

        assert index.insert(_event("nan", math.nan, -118.0)) is False
        assert index.insert(_event("inf", 35.0, math.inf)) is False
        assert len(index) == 0

    def test_accepts_inside_point(self, california_bounds):
        """A point inside the box lands in its cell."""
        index = SpatialIndex(california_bounds, 1.0)

        assert index.insert(_event("la", 34.05, -118.24)) is True
        assert len(index) == 1
        assert index.get_stats()["insertions"] == 1
        assert index.get_stats()["grid_cells"] == 1

    def test_bounds_are_inclusive(self, california_bounds):
        """Points exactly on an edge or corner are accepted."""
        index = SpatialIndex(california_bounds, 1.0)

        assert index.insert(_event("ne", 42.0, -114.0))
        assert index.insert(_event("sw", 32.0, -125.0))
        assert len(index) == 2

    def test_cell_key(self, california_bounds):
        """Cell coordinates count whole cells from the south-west corner."""
        index = SpatialIndex(california_bounds, 1.0)

        assert index.cell_key(33.5, -124.5) == (0, 1)
        assert index.cell_key(32.0, -125.0) == (0, 0)
        assert index.cell_key(41.99, -114.01) == (10, 9)

    def test_same_cell_shares_bucket(self, california_bounds):
        """Nearby points share one bucket."""
        index = SpatialIndex(california_bounds, 1.0)
        index.insert(_event("p1", 35.1, -118.1))
        index.insert(_event("p2", 35.2, -118.2))

        assert index.get_stats()["grid_cells"] == 1
        assert index.get_stats()["average_events_per_cell"] == 2.0

    @pytest.mark.parametrize("cell_size", [0, -1.0, math.nan, math.inf])
    def test_invalid_cell_size(self, california_bounds, cell_size):
        """Non-positive or non-finite cell sizes are a programming error."""
        with pytest.raises(ValueError):
            SpatialIndex(california_bounds, cell_size)

    def test_invalid_bounds(self):
        """Inverted bounds are a programming error."""
        with pytest.raises(ValueError):
            SpatialIndex(Bounds(north=30.0, south=40.0, east=-114.0, west=-125.0), 1.0)

    def test_clear(self, california_bounds):
        """Clearing drops events and resets counters."""
        index = SpatialIndex(california_bounds, 1.0)
        index.insert(_event("p1", 35.0, -118.0))
        index.find_within_radius(35.0, -118.0, 10.0)

        index.clear()

        stats = index.get_stats()
        assert stats["earthquake_count"] == 0
        assert stats["insertions"] == 0
        assert stats["queries"] == 0
        assert index.all_events() == []


# ==============================================================================
# Radius Queries
# ==============================================================================

class TestFindWithinRadius:
    """Test radius queries."""

    @pytest.fixture
    def index(self, california_bounds):
        index = SpatialIndex(california_bounds, 1.0)
        for event in [
            _event("center", 35.000, -118.000),
            _event("near", 35.050, -118.050),    # ~7 km
            _event("mid", 35.150, -118.000),     # ~17 km
            _event("far", 35.400, -118.000),     # ~44 km
            _event("distant", 41.500, -115.000),
        ]:
            index.insert(event)
        return index

    def test_filters_by_exact_distance(self, index):
        """Only events within the radius are returned, with their distance."""
        results = index.find_within_radius(35.0, -118.0, 20.0)
        found = {n.event.id: n.distance_km for n in results}

        assert set(found) == {"center", "near", "mid"}
        assert found["center"] == 0.0
        assert found["mid"] == pytest.approx(distance_km(35.0, -118.0, 35.15, -118.0))

    def test_boundary_is_inclusive(self, index):
        """An event exactly at the radius is included."""
        radius = distance_km(35.0, -118.0, 35.4, -118.0)
        found = {n.event.id for n in index.find_within_radius(35.0, -118.0, radius)}

        assert "far" in found

    def test_query_across_cells(self, index):
        """A wide radius collects events from neighbouring cells."""
        found = {n.event.id for n in index.find_within_radius(35.0, -118.0, 60.0)}
        assert found == {"center", "near", "mid", "far"}

    def test_invalid_query_returns_nothing(self, index):
        """Bad centres or radii give an empty result."""
        assert index.find_within_radius(math.nan, -118.0, 10.0) == []
        assert index.find_within_radius(35.0, -118.0, -1.0) == []
        assert index.find_within_radius(35.0, -118.0, math.nan) == []
        assert index.get_stats()["queries"] == 3

    def test_query_statistics(self, california_bounds):
        """Queries are counted and skipped distance calculations accumulate."""
        index = SpatialIndex(california_bounds, 1.0)
        for event in [
            _event("n1", 35.01, -118.01),
            _event("n2", 35.00, -118.00),
            _event("n3", 34.99, -117.99),
        ]:
            index.insert(event)
        for i in range(5):
            index.insert(_event(f"f{i}", 41.5, -115.0))

        results = index.find_within_radius(35.0, -118.0, 20.0)

        stats = index.get_stats()
        assert len(results) == 3
        assert stats["queries"] == 1
        assert stats["distance_calculations_saved"] == 5

    def test_antimeridian_wraparound(self):
        """Neighbours on the other side of 180 degrees are found."""
        index = SpatialIndex(Bounds(north=10.0, south=-10.0, east=180.0, west=-180.0), 1.0)
        index.insert(_event("east", 0.0, 179.95))
        index.insert(_event("west", 0.0, -179.95))

        from_east = {n.event.id for n in index.find_within_radius(0.0, 179.95, 20.0)}
        from_west = {n.event.id for n in index.find_within_radius(0.0, -179.95, 20.0)}

        assert from_east == {"east", "west"}
        assert from_west == {"east", "west"}

    def test_high_latitude_neighbours(self):
        """Longitude spans are widened near the poles."""
        index = SpatialIndex(Bounds(north=85.0, south=70.0, east=30.0, west=-30.0), 0.5)
        index.insert(_event("a", 80.0, 0.0))
        index.insert(_event("b", 80.0, 1.0))    # ~19 km east

        found = {n.event.id for n in index.find_within_radius(80.0, 0.0, 25.0)}
        assert found == {"a", "b"}


# ==============================================================================
# Bounding-Box Queries
# ==============================================================================

class TestBoundingBoxQuery:
    """Test coarse and exact bounding-box lookups."""

    @pytest.fixture
    def index(self, california_bounds):
        index = SpatialIndex(california_bounds, 1.0)
        index.insert(_event("inside", 35.2, -117.8))
        index.insert(_event("same-cell", 35.9, -117.1))
        index.insert(_event("elsewhere", 40.0, -122.0))
        return index

    def test_coarse_query_returns_whole_cells(self, index):
        """Events sharing a cell with the box are returned."""
        bbox = Bounds(north=35.5, south=35.0, east=-117.5, west=-118.0)
        found = {e.id for e in index.query(bbox)}

        assert found == {"inside", "same-cell"}

    def test_exact_query_filters_to_box(self, index):
        """exact=True keeps only events inside the box."""
        bbox = Bounds(north=35.5, south=35.0, east=-117.5, west=-118.0)
        found = {e.id for e in index.query(bbox, exact=True)}

        assert found == {"inside"}

    def test_box_outside_index(self, index):
        """A box that misses the grid returns nothing."""
        bbox = Bounds(north=60.0, south=50.0, east=10.0, west=0.0)
        assert index.query(bbox) == []


# ==============================================================================
# Cell Sizing
# ==============================================================================

class TestOptimalCellSize:
    """Test the cell-size heuristic."""

    def test_empty_input_uses_default(self):
        """No events gives the 1 degree default."""
        assert SpatialIndex.calculate_optimal_cell_size([], 5) == 1.0
        assert SpatialIndex.calculate_optimal_cell_size([], 5) == DEFAULT_CELL_SIZE

    def test_area_shared_by_target_occupancy(self):
        """Cell area times event count matches the target occupancy."""
        events = [
            _event(f"g{i}-{j}", float(i), float(j))
            for i in range(11)
            for j in range(11)
        ]
        size = SpatialIndex.calculate_optimal_cell_size(events, 4)

        assert size == pytest.approx(math.sqrt(100.0 * 4 / 121))

    def test_larger_target_gives_larger_cells(self):
        """More points per cell means bigger cells."""
        events = [_event(f"e{i}", i * 0.1, i * 0.2) for i in range(50)]

        small = SpatialIndex.calculate_optimal_cell_size(events, 2)
        large = SpatialIndex.calculate_optimal_cell_size(events, 20)
        assert large > small

    def test_collinear_points(self):
        """Zero-area sets use their longer extent."""
        events = [_event(f"e{i}", 0.0, float(i)) for i in range(11)]
        size = SpatialIndex.calculate_optimal_cell_size(events, 2)

        assert size == pytest.approx(10.0 * 2 / 11)

    def test_single_location_uses_default(self):
        """Events stacked on one point cannot be sized."""
        events = [_event(f"e{i}", 35.0, -118.0) for i in range(5)]
        assert SpatialIndex.calculate_optimal_cell_size(events, 4) == DEFAULT_CELL_SIZE

    def test_minimum_cell_size(self):
        """Very dense data is clamped to the minimum cell size."""
        events = [_event(f"e{i}", 35.0 + i * 1e-6, -118.0 + i * 1e-6) for i in range(100)]
        assert SpatialIndex.calculate_optimal_cell_size(events, 1) == MIN_CELL_SIZE_DEG

    def test_invalid_events_ignored(self):
        """Events without coordinates do not affect sizing."""
        events = [_event("bad", math.nan, math.nan)]
        assert SpatialIndex.calculate_optimal_cell_size(events, 4) == DEFAULT_CELL_SIZE
