"""Great-circle distances and geofence checks.

Coordinates are WGS84 degrees. No bounds checking is done on coordinates:
out-of-range values still produce a number.
"""

import dataclasses
import math
from typing import Optional, TYPE_CHECKING


if TYPE_CHECKING:
    from schoolattend.model import school_mod


EARTH_RADIUS_METERS = 6371000.0


@dataclasses.dataclass(frozen=True)
class GeoFix:
    """A single position sample from the location source."""

    lat: float
    lng: float


@dataclasses.dataclass(frozen=True)
class Location:
    """Position captured with an attendance record, with distance to school."""

    lat: float
    lng: float
    distance: float

    def to_dict(self) -> dict[str, float]:
        """Convert to a JSON-serializable dictionary."""
        return {"lat": self.lat, "lng": self.lng, "distance": self.distance}

    @staticmethod
    def from_dict(data: dict[str, float]) -> "Location":
        return Location(
            lat=float(data["lat"]),
            lng=float(data["lng"]),
            distance=float(data["distance"]),
        )


def distance_meters(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Haversine distance between two points in meters."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lng / 2) ** 2
    )
    # Rounding can push a slightly above 1 for antipodal points.
    a = min(max(a, 0.0), 1.0)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def within_radius(distance: float, radius_limit: float) -> bool:
    """True if distance is inside the geofence. The boundary is inside."""
    return distance <= radius_limit


def format_distance(meters: float) -> str:
    """Display string: whole meters below 1 km, else km with one decimal."""
    if meters < 1000:
        # Halves round up.
        return f"{math.floor(meters + 0.5)}m"
    return f"{meters / 1000:.1f}km"


def locate(
    fix: Optional[GeoFix], school: "school_mod.SchoolConfig"
) -> Optional[Location]:
    """Measure a position sample against the school coordinates.

    Returns None when there is no sample.
    """
    if fix is None:
        return None
    distance = distance_meters(fix.lat, fix.lng, school.lat, school.lng)
    return Location(lat=fix.lat, lng=fix.lng, distance=distance)


class LocationFeed:
    """Holds the most recent sample from an external position source.

    The source pushes samples with `update`; readers only ever look at
    `latest`, which is None until a fix arrives or after the source reports
    that location is unavailable.
    """

    _latest: Optional[GeoFix]

    def __init__(self, initial: Optional[GeoFix] = None) -> None:
        self._latest = initial

    @property
    def latest(self) -> Optional[GeoFix]:
        """Most recent position sample, or None."""
        return self._latest

    def update(self, fix: Optional[GeoFix]) -> None:
        """Replace the latest sample. Pass None when the fix is lost."""
        self._latest = fix
