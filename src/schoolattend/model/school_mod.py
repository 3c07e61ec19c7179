"""School configuration: entrance time and geofence."""

import dataclasses
import datetime
import re
from typing import Any, ClassVar


@dataclasses.dataclass(frozen=True)
class SchoolConfig:
    """Entrance cutoff time and the circular area around the school.

    Present submissions are accepted only within radius_limit meters of
    (lat, lng). Submissions after entrance_time are recorded as late.
    """

    entrance_time: str
    lat: float
    lng: float
    radius_limit: float

    _time_pattern: ClassVar[re.Pattern] = re.compile(r"^(\d{1,2}):(\d{2})$")
    """Entrance time is HH:MM, 24-hour clock."""

    def __post_init__(self) -> None:
        """Validate fields."""
        self.parse_entrance_time(self.entrance_time)
        if not self.radius_limit > 0:
            raise ValueError(f"Radius limit must be positive, got {self.radius_limit}.")
        if not -90 <= self.lat <= 90:
            raise ValueError(f"Latitude {self.lat} is out of range.")
        if not -180 <= self.lng <= 180:
            raise ValueError(f"Longitude {self.lng} is out of range.")

    @classmethod
    def parse_entrance_time(cls, value: str) -> datetime.time:
        """Convert an HH:MM string to a datetime.time object."""
        match = cls._time_pattern.match(value.strip())
        if match is None:
            raise ValueError(f"Entrance time must be HH:MM, got '{value}'.")
        hour, minute = int(match.group(1)), int(match.group(2))
        if hour > 23 or minute > 59:
            raise ValueError(f"Entrance time '{value}' is not a valid time of day.")
        return datetime.time(hour=hour, minute=minute)

    @property
    def entrance(self) -> datetime.time:
        """Entrance cutoff as a datetime.time object."""
        return self.parse_entrance_time(self.entrance_time)

    def cutoff_on(self, when: datetime.datetime) -> datetime.datetime:
        """Entrance cutoff on the same day as `when`."""
        entrance = self.entrance
        return when.replace(
            hour=entrance.hour, minute=entrance.minute, second=0, microsecond=0
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "entrance_time": self.entrance_time,
            "coordinates": {"lat": self.lat, "lng": self.lng},
            "radius_limit": self.radius_limit,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "SchoolConfig":
        return SchoolConfig(
            entrance_time=data["entrance_time"],
            lat=float(data["coordinates"]["lat"]),
            lng=float(data["coordinates"]["lng"]),
            radius_limit=float(data["radius_limit"]),
        )


DEFAULT_SCHOOL_CONFIG = SchoolConfig(
    entrance_time="07:30",
    lat=-6.2000,
    lng=106.8166,
    radius_limit=100,
)
