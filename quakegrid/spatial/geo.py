"""Great-circle helpers shared by the spatial index and the clustering engine."""

from __future__ import annotations

import math
from typing import Tuple

import numpy as np


EARTH_RADIUS_KM = 6371.0

# Length of one degree of arc on the Earth sphere (~111.19 km).
KM_PER_DEGREE = EARTH_RADIUS_KM * math.pi / 180.0

# Search windows are widened by this factor so rounding at the radius edge
# never drops a candidate cell.
WINDOW_MARGIN = 1.1

# Corrected longitude spans wider than this are replaced by the full globe.
MAX_CORRECTED_LON_SPAN_DEG = 35.0


def normalize_longitude(lon: float) -> float:
    """Wrap a longitude into [-180, 180]; values already in range are returned as is."""
    if -180.0 <= lon <= 180.0:
        return lon
    return (lon + 180.0) % 360.0 - 180.0


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Haversine distance between two points in kilometres.

    Symmetric in its arguments and 0.0 for identical points. NaN inputs
    propagate to a NaN result, so callers filter invalid coordinates first.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    a = min(1.0, a)
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def distance_km_array(
    lat: float,
    lon: float,
    lats: np.ndarray,
    lons: np.ndarray,
) -> np.ndarray:
    """Vectorised :func:`distance_km` from one point to many."""

    lats = np.asarray(lats, dtype=float)
    lons = np.asarray(lons, dtype=float)

    phi1 = np.radians(lat)
    phi2 = np.radians(lats)
    d_phi = np.radians(lats - lat)
    d_lambda = np.radians(lons - lon)

    a = np.sin(d_phi / 2) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(d_lambda / 2) ** 2
    a = np.minimum(1.0, a)
    return EARTH_RADIUS_KM * 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))


def search_window(lat: float, radius_km: float) -> Tuple[float, float]:
    """
    Return ``(lat_span, lon_span)`` half-widths in degrees around ``lat``.

    Every point within ``radius_km`` of any point on the parallel ``lat`` lies
    inside ``lat +/- lat_span`` and ``lon +/- lon_span``. The longitude span is
    divided by ``cos`` of the most poleward latitude the window reaches, so
    high-latitude queries are not under-scanned. A window touching a pole, or
    one whose corrected span gets too wide for the small-angle bound, gets a
    180 degree longitude span (the whole parallel).
    """
    lat_span = radius_km / KM_PER_DEGREE * WINDOW_MARGIN
    poleward = abs(lat) + lat_span
    if poleward >= 90.0:
        return lat_span, 180.0

    lon_span = lat_span / math.cos(math.radians(poleward))
    if lon_span > MAX_CORRECTED_LON_SPAN_DEG:
        return lat_span, 180.0
    return lat_span, lon_span


__all__ = [
    "EARTH_RADIUS_KM",
    "KM_PER_DEGREE",
    "distance_km",
    "distance_km_array",
    "normalize_longitude",
    "search_window",
]
