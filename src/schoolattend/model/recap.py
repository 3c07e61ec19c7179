"""Per-student attendance counts over daily, monthly, and semester windows."""

from collections.abc import Iterable, Sequence
import dataclasses
import datetime
import enum
import math

from schoolattend.model import records_mod, users_mod
from schoolattend.model.records_mod import AttendanceStatus


class ReportPeriod(enum.StrEnum):
    """Recap windows."""

    DAILY = "daily"
    MONTHLY = "monthly"
    SEMESTER = "semester"


def window_start(
    period: ReportPeriod,
    now: datetime.datetime,
    semester_start_months: tuple[int, int] = (1, 7),
) -> datetime.datetime:
    """Start of the reporting window that ends at `now`.

    Semesters begin on the first day of the two months in
    `semester_start_months`. With the default (1, 7), January through June is
    the first semester and July through December is the second.
    """
    match period:
        case ReportPeriod.DAILY:
            return now.replace(hour=0, minute=0, second=0, microsecond=0)
        case ReportPeriod.MONTHLY:
            return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        case ReportPeriod.SEMESTER:
            first, second = semester_start_months
            if now.month >= second:
                return datetime.datetime(now.year, second, 1)
            if now.month >= first:
                return datetime.datetime(now.year, first, 1)
            return datetime.datetime(now.year - 1, second, 1)
    raise ValueError(f"Unknown report period: {period}")


@dataclasses.dataclass(frozen=True)
class StudentRecap:
    """Counts for one student in one reporting window.

    `absent` is inferred, never counted from records, and `total` only counts
    actual records.
    """

    student_id: str
    name: str
    class_name: str
    present: int
    late: int
    sick: int
    permission: int
    absent: int
    total: int

    @property
    def counts(self) -> dict[AttendanceStatus, int]:
        return {
            AttendanceStatus.PRESENT: self.present,
            AttendanceStatus.LATE: self.late,
            AttendanceStatus.SICK: self.sick,
            AttendanceStatus.PERMISSION: self.permission,
            AttendanceStatus.ABSENT: self.absent,
        }


def aggregate(
    records: Iterable[records_mod.AttendanceRecord],
    students: Sequence[users_mod.User],
    period: ReportPeriod,
    now: datetime.datetime,
    semester_start_months: tuple[int, int] = (1, 7),
) -> list[StudentRecap]:
    """Count each student's records in the window, in student order.

    In the daily window a student without any record is counted as absent
    once. Monthly and semester windows never infer absences.
    """
    start = window_start(period, now, semester_start_months)
    by_student: dict[str, list[records_mod.AttendanceRecord]] = {
        student.user_id: [] for student in students
    }
    for record in records:
        if record.student_id in by_student and start <= record.timestamp <= now:
            by_student[record.student_id].append(record)
    recaps = []
    for student in students:
        student_records = by_student[student.user_id]
        statuses = [record.status for record in student_records]
        absent = 1 if period == ReportPeriod.DAILY and not student_records else 0
        recaps.append(
            StudentRecap(
                student_id=student.user_id,
                name=student.name,
                class_name=student.class_name,
                present=statuses.count(AttendanceStatus.PRESENT),
                late=statuses.count(AttendanceStatus.LATE),
                sick=statuses.count(AttendanceStatus.SICK),
                permission=statuses.count(AttendanceStatus.PERMISSION),
                absent=absent,
                total=len(student_records),
            )
        )
    return recaps


@dataclasses.dataclass(frozen=True)
class StudentStats:
    """All-time summary shown on a student's dashboard."""

    attended: int
    """Present and late records."""
    excused: int
    """Sick and permission records."""
    total: int
    percentage: int
    """Attended records as a whole-number percentage of all records."""


def student_stats(records: Sequence[records_mod.AttendanceRecord]) -> StudentStats:
    """Summarize one student's records."""
    attended = sum(
        record.status in (AttendanceStatus.PRESENT, AttendanceStatus.LATE)
        for record in records
    )
    excused = sum(
        record.status in (AttendanceStatus.SICK, AttendanceStatus.PERMISSION)
        for record in records
    )
    total = len(records)
    percentage = math.floor(attended * 100 / total + 0.5) if total else 0
    return StudentStats(
        attended=attended, excused=excused, total=total, percentage=percentage
    )
