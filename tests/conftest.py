"""
Pytest configuration and shared fixtures for quakegrid tests.

This file provides:
- A GeoJSON feature factory
- Hand-built scenario catalogues
- Seeded synthetic catalogues
"""

from typing import Any, Callable, Dict, List, Optional

import pytest

from quakegrid.benchmark import generate_events
from quakegrid.spatial import Bounds, Event


# ==============================================================================
# Feature Factory
# ==============================================================================

def make_feature(
    quake_id: str,
    lat: Any,
    lon: Any,
    mag: Optional[float] = 3.0,
    time: int = 1_700_000_000_000,
    depth: float = 10.0,
) -> Dict[str, Any]:
    """Build a USGS-style GeoJSON feature (coordinates are lon, lat, depth)."""
    return {
        "type": "Feature",
        "id": quake_id,
        "properties": {"mag": mag, "time": time, "place": f"Test location {quake_id}"},
        "geometry": {"type": "Point", "coordinates": [lon, lat, depth]},
    }


@pytest.fixture
def feature_factory() -> Callable[..., Dict[str, Any]]:
    """Factory for GeoJSON features."""
    return make_feature


# ==============================================================================
# Scenario Catalogues
# ==============================================================================

@pytest.fixture
def two_groups_features() -> List[Dict[str, Any]]:
    """
    Two tight groups (5 and 4 events, a few km wide) about 50 km apart,
    plus one strong isolated event far away.
    """
    group_a = [
        make_feature("a1", 35.000, -118.000, 4.5),
        make_feature("a2", 35.010, -117.990, 3.1),
        make_feature("a3", 34.990, -117.985, 2.8),
        make_feature("a4", 35.020, -118.010, 3.3),
        make_feature("a5", 34.985, -118.020, 2.5),
    ]
    group_b = [
        make_feature("b1", 35.450, -118.000, 4.0),
        make_feature("b2", 35.460, -118.000, 3.0),
        make_feature("b3", 35.450, -117.990, 2.9),
        make_feature("b4", 35.440, -118.010, 2.7),
    ]
    isolated = [make_feature("lonely", 36.500, -116.000, 5.0)]
    return group_a + group_b + isolated


@pytest.fixture
def colocated_features() -> List[Dict[str, Any]]:
    """Three events within 1 km; the strongest is not first in input order."""
    return [
        make_feature("m30", 35.000, -118.000, 3.0, time=1_700_000_000_000),
        make_feature("m60", 35.003, -118.002, 6.0, time=1_700_003_600_000),
        make_feature("m45", 35.005, -118.001, 4.5, time=1_700_007_200_000),
    ]


@pytest.fixture
def california_bounds() -> Bounds:
    """Rough bounding box of California."""
    return Bounds(north=42.0, south=32.0, east=-114.0, west=-125.0)


# ==============================================================================
# Synthetic Catalogues
# ==============================================================================

@pytest.fixture
def clustered_events() -> List[Event]:
    """Seeded California catalogue with three hot spots."""
    return generate_events(600, "clustered", seed=7, base_time_ms=1_700_000_000_000)


@pytest.fixture
def realistic_events() -> List[Event]:
    """Seeded global catalogue mixing hot spots and background events."""
    return generate_events(600, "realistic", seed=11, base_time_ms=1_700_000_000_000)

