"""Decide what status an attendance submission is recorded with.

Resolution is all or nothing: either a new AttendanceRecord is produced or
the submission is rejected with an ErrorKind. Rejections are returned to the
caller as values so the user interface can show a precise message. Nothing
is persisted here.
"""

import dataclasses
import datetime
import enum
from typing import Optional

from schoolattend.model import geo, records_mod, school_mod
from schoolattend.model.records_mod import AttendanceStatus


class ErrorKind(enum.Enum):
    """Reasons a submission is rejected."""

    LOCATION_UNAVAILABLE = "location_unavailable"
    LOCATION_OUT_OF_RANGE = "location_out_of_range"
    MISSING_NOTE = "missing_note"


@dataclasses.dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a submission: a record or an error, never both."""

    record: Optional[records_mod.AttendanceRecord] = None
    error: Optional[ErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.record is not None

    def describe(self, school: school_mod.SchoolConfig) -> str:
        """Message for the student."""
        match self.error:
            case None:
                return f"Attendance recorded as {self.record.status.label}."
            case ErrorKind.LOCATION_UNAVAILABLE:
                return "Your location is not available yet. Enable location and retry."
            case ErrorKind.LOCATION_OUT_OF_RANGE:
                return (
                    f"You must be within {school.radius_limit:g}m of the school "
                    "to submit a present attendance."
                )
            case ErrorKind.MISSING_NOTE:
                return "Please explain your absence in the note."


def resolve(
    student_id: str,
    requested: AttendanceStatus,
    location: Optional[geo.Location],
    school: school_mod.SchoolConfig,
    now: datetime.datetime,
    note: Optional[str] = None,
) -> Resolution:
    """Resolve a requested status into a record or a rejection.

    Args:
        student_id: Submitting student.
        requested: PRESENT, SICK, or PERMISSION.
        location: Current position and distance to school, or None when the
            location is unavailable.
        school: Entrance time and geofence.
        now: Submission time.
        note: Explanation for sick or permission submissions.

    Raises:
        ValueError: If `requested` is LATE or ABSENT. Those statuses are never
            requested by students.
    """
    if requested not in records_mod.REQUESTABLE_STATUSES:
        raise ValueError(f"Status {requested} cannot be requested.")
    note = note.strip() if note else None
    status = requested
    if requested == AttendanceStatus.PRESENT:
        if location is None:
            return Resolution(error=ErrorKind.LOCATION_UNAVAILABLE)
        if not geo.within_radius(location.distance, school.radius_limit):
            return Resolution(error=ErrorKind.LOCATION_OUT_OF_RANGE)
        if now > school.cutoff_on(now):
            status = AttendanceStatus.LATE
    elif not note:
        return Resolution(error=ErrorKind.MISSING_NOTE)
    record = records_mod.AttendanceRecord(
        record_id=records_mod.AttendanceRecord.generate_record_id(),
        student_id=student_id,
        status=status,
        timestamp=now,
        note=note or None,
        location=location,
    )
    return Resolution(record=record)
