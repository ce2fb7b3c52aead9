"""
Explicit record types for seismic events and geographic bounds.

Upstream feeds deliver GeoJSON-like features (``properties.mag``,
``properties.time`` and ``geometry.coordinates = [lon, lat, depth]``) or
tabular data. Everything is converted to :class:`Event` once, at the boundary,
so the index and the clustering engine never deal with missing keys.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional

import pandas as pd

from .geo import normalize_longitude


def is_finite_number(value: Any) -> bool:
    """True for real, finite numbers. ``bool`` and numeric strings are rejected."""
    return (
        isinstance(value, numbers.Real)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _as_float(value: Any) -> float:
    return float(value) if is_finite_number(value) else math.nan


def _as_optional_float(value: Any) -> Optional[float]:
    return float(value) if is_finite_number(value) else None


@dataclass(frozen=True)
class Event:
    """A single seismic reading."""

    id: str
    """Identifier, unique within a batch."""

    latitude: float
    """Latitude in degrees."""

    longitude: float
    """Longitude in degrees."""

    magnitude: Optional[float] = None
    """Magnitude as reported (may be None)."""

    depth: Optional[float] = None
    """Depth in kilometres (not used for clustering)."""

    timestamp: Optional[int] = None
    """Origin time in epoch milliseconds."""

    feature: Optional[Mapping[str, Any]] = field(default=None, compare=False, repr=False)
    """Original record the event was parsed from."""

    @property
    def sort_magnitude(self) -> float:
        """Magnitude used for anchor ordering; missing values count as 0."""
        return float(self.magnitude) if is_finite_number(self.magnitude) else 0.0

    @property
    def has_valid_coordinates(self) -> bool:
        """Finite latitude in [-90, 90] and finite longitude in [-180, 180]."""
        return (
            is_finite_number(self.latitude)
            and is_finite_number(self.longitude)
            and -90.0 <= self.latitude <= 90.0
            and -180.0 <= self.longitude <= 180.0
        )

    @classmethod
    def from_feature(cls, feature: Mapping[str, Any], fallback_id: Optional[str] = None) -> "Event":
        """
        Parse a GeoJSON-like feature.

        Never raises for malformed content: coordinates that are missing or not
        numbers become NaN, which marks the event as invalid for indexing, and
        a ``properties`` member that is not a mapping is treated as empty.
        Longitudes are taken as given; :func:`coerce_events` wraps them.
        """
        properties = feature.get("properties")
        if not isinstance(properties, Mapping):
            properties = {}
        geometry = feature.get("geometry")
        coordinates = geometry.get("coordinates") if isinstance(geometry, Mapping) else None

        lon = lat = math.nan
        depth = None
        if isinstance(coordinates, (list, tuple)) and len(coordinates) >= 2:
            lon = _as_float(coordinates[0])
            lat = _as_float(coordinates[1])
            if len(coordinates) >= 3:
                depth = _as_optional_float(coordinates[2])

        raw_time = properties.get("time")
        timestamp = int(raw_time) if is_finite_number(raw_time) else None

        raw_id = feature.get("id")
        event_id = str(raw_id) if raw_id not in (None, "") else (fallback_id or "")

        return cls(
            id=event_id,
            latitude=lat,
            longitude=lon,
            magnitude=_as_optional_float(properties.get("mag")),
            depth=depth,
            timestamp=timestamp,
            feature=feature,
        )

    def to_feature(self) -> Mapping[str, Any]:
        """Return the original record, or a GeoJSON Feature built from this event."""
        if self.feature is not None:
            return self.feature

        coordinates: List[Any] = [self.longitude, self.latitude]
        if self.depth is not None:
            coordinates.append(self.depth)
        return {
            "type": "Feature",
            "id": self.id,
            "properties": {"mag": self.magnitude, "time": self.timestamp},
            "geometry": {"type": "Point", "coordinates": coordinates},
        }


@dataclass(frozen=True)
class Bounds:
    """Latitude/longitude rectangle in degrees. Never crosses the antimeridian."""

    north: float
    south: float
    east: float
    west: float

    @property
    def is_valid(self) -> bool:
        return (
            all(is_finite_number(v) for v in (self.north, self.south, self.east, self.west))
            and self.north > self.south
            and self.east > self.west
        )

    def contains(self, lat: float, lon: float) -> bool:
        """Inclusive on every edge."""
        return self.south <= lat <= self.north and self.west <= lon <= self.east

    @classmethod
    def around(cls, events: Iterable[Event]) -> Optional["Bounds"]:
        """Tight box around the valid events, or None if there are none."""
        lats: List[float] = []
        lons: List[float] = []
        for event in events:
            if event.has_valid_coordinates:
                lats.append(event.latitude)
                lons.append(event.longitude)

        if not lats:
            return None
        return cls(north=max(lats), south=min(lats), east=max(lons), west=min(lons))

    def expanded(self, fraction: float, minimum: float) -> "Bounds":
        """
        Grow each axis by ``fraction`` of its extent (at least ``minimum``
        degrees) on both sides, clamped to the globe.
        """
        lat_buffer = max(minimum, (self.north - self.south) * fraction)
        lon_buffer = max(minimum, (self.east - self.west) * fraction)
        return Bounds(
            north=min(90.0, self.north + lat_buffer),
            south=max(-90.0, self.south - lat_buffer),
            east=min(180.0, self.east + lon_buffer),
            west=max(-180.0, self.west - lon_buffer),
        )

    def to_dict(self) -> Dict[str, float]:
        return {"north": self.north, "south": self.south, "east": self.east, "west": self.west}


_FRAME_COLUMNS = ("id", "latitude", "longitude")


def _events_from_dataframe(df: pd.DataFrame) -> List[Event]:
    missing = [c for c in _FRAME_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Event frame is missing columns: {', '.join(missing)}")

    events = []
    for row in df.to_dict("records"):
        raw_time = row.get("timestamp")
        raw_id = row.get("id")
        events.append(
            Event(
                id=str(raw_id) if not pd.isna(raw_id) else "",
                latitude=_as_float(row.get("latitude")),
                longitude=_as_float(row.get("longitude")),
                magnitude=_as_optional_float(row.get("magnitude")),
                depth=_as_optional_float(row.get("depth")),
                timestamp=int(raw_time) if is_finite_number(raw_time) else None,
            )
        )
    return events


def _at_boundary(event: Event, position: int) -> Event:
    """Give ``event`` a positional id if it has none and wrap its longitude."""
    changes: Dict[str, Any] = {}
    if not event.id:
        changes["id"] = f"event-{position}"
    if is_finite_number(event.longitude):
        lon = normalize_longitude(event.longitude)
        if lon != event.longitude:
            changes["longitude"] = lon
    return replace(event, **changes) if changes else event


def coerce_events(records: Any) -> List[Event]:
    """
    Return ``records`` as a list of :class:`Event`.

    Accepts a :class:`~pandas.DataFrame` (columns ``id``, ``latitude``,
    ``longitude`` and optionally ``magnitude``, ``depth``, ``timestamp``) or
    any iterable of :class:`Event` objects and GeoJSON-like mappings. Records
    without an id, or with an empty one, get a positional ``event-<n>`` id.
    Longitudes outside [-180, 180] (0-360 feeds) are wrapped into range.
    Invalid coordinates are kept here; filtering happens in the index builder
    and the engine.
    """
    if records is None:
        return []
    if isinstance(records, pd.DataFrame):
        parsed = _events_from_dataframe(records)
    else:
        parsed = []
        for record in records:
            if isinstance(record, Event):
                parsed.append(record)
            elif isinstance(record, Mapping):
                parsed.append(Event.from_feature(record))

    return [_at_boundary(event, position) for position, event in enumerate(parsed)]


def valid_events(records: Any) -> List[Event]:
    """Coerce ``records`` and keep only events with usable coordinates."""
    return [event for event in coerce_events(records) if event.has_valid_coordinates]


__all__ = [
    "Bounds",
    "Event",
    "coerce_events",
    "is_finite_number",
    "valid_events",
]
