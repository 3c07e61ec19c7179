"""Process a student's attendance submission from start to finish."""

import dataclasses
import datetime
from typing import Optional

from schoolattend.model import (
    database,
    gateway,
    geo,
    messages_mod,
    records_mod,
    resolver,
    state,
    users_mod,
)


@dataclasses.dataclass(frozen=True)
class Submission:
    """Resolution of a submission and the notification it produced."""

    resolution: resolver.Resolution
    queue_item: Optional[messages_mod.MessageQueueItem] = None
    save_error: Optional[database.DBaseError] = None
    """Set when the record or the notification is held in memory only."""


def resolve_submission(
    app_state: state.AppState,
    student: users_mod.User,
    requested: records_mod.AttendanceStatus,
    fix: Optional[geo.GeoFix],
    note: Optional[str] = None,
    now: Optional[datetime.datetime] = None,
) -> resolver.Resolution:
    """Measure the fix against the school and resolve the submission."""
    now = now or datetime.datetime.now()
    school = app_state.school
    location = geo.locate(fix, school)
    return resolver.resolve(student.user_id, requested, location, school, now, note)


async def submit_attendance(
    app_state: state.AppState,
    notifier: gateway.MessageQueueGateway,
    student: users_mod.User,
    requested: records_mod.AttendanceStatus,
    fix: Optional[geo.GeoFix],
    note: Optional[str] = None,
    now: Optional[datetime.datetime] = None,
) -> Submission:
    """Record attendance, then queue a parent notification.

    The record is stored before the notification is drafted, so a slow or
    failed text generator only affects the notification. Every accepted
    record gets a queue item, even when saving to the database fails. The
    failure is returned in `Submission.save_error`.
    """
    resolution = resolve_submission(app_state, student, requested, fix, note, now)
    if resolution.record is None:
        return Submission(resolution=resolution)
    save_error = None
    try:
        app_state.add_record(resolution.record)
    except database.DBaseError as err:
        save_error = err
    item = await notifier.draft(resolution.record, student)
    try:
        notifier.queue(item)
    except database.DBaseError as err:
        save_error = save_error or err
    return Submission(resolution=resolution, queue_item=item, save_error=save_error)
