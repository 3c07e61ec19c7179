"""Attendance records.

An attendance record is created each time a student's submission is
accepted. Records are never edited. They are only removed when the student
who owns them is deleted.
"""

import dataclasses
import datetime
import enum
import uuid
from typing import Any, Optional

from schoolattend.model import geo


class AttendanceStatus(enum.StrEnum):
    """Attendance classifications.

    Students request PRESENT, SICK, or PERMISSION. LATE is only produced by
    the resolver, and ABSENT is only inferred in daily recaps.
    """

    PRESENT = "present"
    LATE = "late"
    SICK = "sick"
    PERMISSION = "permission"
    ABSENT = "absent"

    @property
    def label(self) -> str:
        """Display name."""
        return self.value.title()


REQUESTABLE_STATUSES = (
    AttendanceStatus.PRESENT,
    AttendanceStatus.SICK,
    AttendanceStatus.PERMISSION,
)


def to_epoch_ms(timestamp: datetime.datetime) -> int:
    """Convert a datetime to milliseconds since the epoch."""
    return round(timestamp.timestamp() * 1000)


def from_epoch_ms(value: int | float | str) -> datetime.datetime:
    """Convert epoch milliseconds (or an ISO string) to a local naive datetime."""
    if isinstance(value, str):
        return datetime.datetime.fromisoformat(value)
    return datetime.datetime.fromtimestamp(value / 1000)


@dataclasses.dataclass(frozen=True)
class AttendanceRecord:
    """A resolved attendance submission."""

    record_id: str
    student_id: str
    status: AttendanceStatus
    timestamp: datetime.datetime
    note: Optional[str] = None
    location: Optional[geo.Location] = None

    @staticmethod
    def generate_record_id() -> str:
        """Generate a unique record ID."""
        return f"record-{uuid.uuid4().hex}"

    @property
    def event_date(self) -> datetime.date:
        """Date of the submission."""
        return self.timestamp.date()

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "record_id": self.record_id,
            "student_id": self.student_id,
            "status": self.status.value,
            "timestamp": to_epoch_ms(self.timestamp),
            "note": self.note,
            "location": None if self.location is None else self.location.to_dict(),
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "AttendanceRecord":
        location = data.get("location")
        return AttendanceRecord(
            record_id=data["record_id"],
            student_id=data["student_id"],
            status=AttendanceStatus(data["status"]),
            timestamp=from_epoch_ms(data["timestamp"]),
            note=data.get("note") or None,
            location=None if location is None else geo.Location.from_dict(location),
        )
