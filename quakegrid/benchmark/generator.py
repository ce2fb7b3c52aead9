"""Synthetic earthquake catalogues for benchmarks and tests."""

from __future__ import annotations

import time
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..spatial.events import Event


DAY_MS = 24 * 60 * 60 * 1000

DISTRIBUTIONS = ("clustered", "scattered", "realistic")

# (lat range, lon range) per region
REGIONS: Dict[str, Tuple[Tuple[float, float], Tuple[float, float]]] = {
    "california": ((32.0, 42.0), (-125.0, -114.0)),
    "global": ((-90.0, 90.0), (-180.0, 180.0)),
    "japan": ((24.0, 46.0), (123.0, 146.0)),
    "mediterranean": ((30.0, 47.0), (-10.0, 45.0)),
}

HOT_SPOTS: Dict[str, List[Tuple[float, float]]] = {
    "california": [(34.0522, -118.2437), (37.7749, -122.4194), (36.7783, -119.4179)],
    "japan": [(35.6762, 139.6503), (38.2682, 140.8694), (33.5902, 130.4017)],
    "mediterranean": [(37.9838, 23.7275), (38.1157, 13.3615), (38.4237, 27.1428)],
}

HOT_SPOT_WIDTH_DEG = 0.5
CLUSTERED_SHARE = 0.7
REALISTIC_CLUSTERED_SHARE = 0.4
MAX_DEPTH_KM = 50.0


def _magnitude(rng: np.random.Generator) -> float:
    # Gutenberg-Richter style split: small events dominate
    draw = rng.random()
    if draw < 0.7:
        return 2.0 + rng.random() * 2.0
    if draw < 0.9:
        return 4.0 + rng.random()
    if draw < 0.98:
        return 5.0 + rng.random()
    return 6.0 + rng.random() * 2.0


def _uniform_in(rng: np.random.Generator, region: str) -> Tuple[float, float]:
    (lat0, lat1), (lon0, lon1) = REGIONS[region]
    return lat0 + rng.random() * (lat1 - lat0), lon0 + rng.random() * (lon1 - lon0)


def _clustered(rng: np.random.Generator, region: str) -> Tuple[float, float]:
    spots = HOT_SPOTS.get(region)
    if not spots or rng.random() >= CLUSTERED_SHARE:
        return _uniform_in(rng, region)

    lat, lon = spots[int(rng.integers(len(spots)))]
    return (
        lat + (rng.random() - 0.5) * HOT_SPOT_WIDTH_DEG,
        lon + (rng.random() - 0.5) * HOT_SPOT_WIDTH_DEG,
    )


def _coordinates(rng: np.random.Generator, distribution: str, region: str) -> Tuple[float, float]:
    if distribution == "clustered":
        return _clustered(rng, region)
    if distribution == "scattered":
        return _uniform_in(rng, "global")
    if rng.random() < REALISTIC_CLUSTERED_SHARE:
        return _clustered(rng, str(rng.choice(list(HOT_SPOTS))))
    return _uniform_in(rng, "global")


def generate_events(
    count: int,
    distribution: str = "realistic",
    *,
    region: str = "california",
    seed: Optional[int] = None,
    base_time_ms: Optional[int] = None,
) -> List[Event]:
    """
    Generate ``count`` mock events.

    Args:
        count: Number of events
        distribution: ``clustered`` (hot spots of ``region`` plus background),
            ``scattered`` (uniform over the globe) or ``realistic`` (a mix)
        region: Region used by the clustered distribution
        seed: Seed for :func:`numpy.random.default_rng`; same seed, same catalogue
        base_time_ms: Start of the 24 h window; defaults to 24 h ago

    Returns:
        Events with ids ``synthetic-<n>``

    Raises:
        ValueError: For an unknown distribution or region
    """
    if distribution not in DISTRIBUTIONS:
        raise ValueError(
            f"Unknown distribution '{distribution}'. Available: {', '.join(DISTRIBUTIONS)}"
        )
    if region not in REGIONS:
        raise ValueError(f"Unknown region '{region}'. Available: {', '.join(REGIONS)}")

    rng = np.random.default_rng(seed)
    if base_time_ms is None:
        base_time_ms = int(time.time() * 1000) - DAY_MS

    events = []
    for i in range(max(0, int(count))):
        lat, lon = _coordinates(rng, distribution, region)
        events.append(
            Event(
                id=f"synthetic-{i}",
                latitude=float(lat),
                longitude=float(lon),
                magnitude=round(_magnitude(rng), 2),
                depth=float(rng.random() * MAX_DEPTH_KM),
                timestamp=base_time_ms + int(rng.random() * DAY_MS),
            )
        )
    return events


__all__ = [
    "DISTRIBUTIONS",
    "HOT_SPOTS",
    "REGIONS",
    "generate_events",
]
