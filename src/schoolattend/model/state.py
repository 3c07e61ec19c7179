"""Application state: users, attendance records, message queue, and school config.

AppState is the single owner of all data. Screens and services receive the
AppState object and change data only through its mutator methods. Each
mutator replaces a whole collection with a new tuple, then writes all four
snapshots to the database. If the write fails, the new in-memory value is
kept and DBaseError is raised so the caller can warn the user.
"""

import dataclasses
import datetime
from typing import Any, Optional

from schoolattend.model import (
    database,
    messages_mod,
    records_mod,
    school_mod,
    users_mod,
)


class AppState:
    """All application data plus the database that persists it."""

    dbase: Optional[database.DBase]
    """Durable store. State is kept in memory only when None."""
    _users: tuple[users_mod.User, ...]
    _records: tuple[records_mod.AttendanceRecord, ...]
    _queue: tuple[messages_mod.MessageQueueItem, ...]
    _school: school_mod.SchoolConfig

    def __init__(
        self,
        dbase: Optional[database.DBase] = None,
        users: tuple[users_mod.User, ...] = users_mod.DEFAULT_USERS,
        records: tuple[records_mod.AttendanceRecord, ...] = (),
        queue: tuple[messages_mod.MessageQueueItem, ...] = (),
        school: school_mod.SchoolConfig = school_mod.DEFAULT_SCHOOL_CONFIG,
    ) -> None:
        self.dbase = dbase
        self._users = tuple(users)
        self._records = tuple(records)
        self._queue = tuple(queue)
        self._school = school

    @classmethod
    def load(cls, dbase: database.DBase) -> "AppState":
        """Read all snapshots, using built-in defaults for missing keys."""
        users = dbase.read(database.USERS_KEY)
        records = dbase.read(database.RECORDS_KEY)
        school = dbase.read(database.SCHOOL_CONFIG_KEY)
        queue = dbase.read(database.MESSAGE_QUEUE_KEY)
        return cls(
            dbase=dbase,
            users=(
                users_mod.DEFAULT_USERS
                if users is None
                else tuple(users_mod.User.from_dict(user) for user in users)
            ),
            records=(
                ()
                if records is None
                else tuple(
                    records_mod.AttendanceRecord.from_dict(rec) for rec in records
                )
            ),
            queue=(
                ()
                if queue is None
                else tuple(
                    messages_mod.MessageQueueItem.from_dict(item) for item in queue
                )
            ),
            school=(
                school_mod.DEFAULT_SCHOOL_CONFIG
                if school is None
                else school_mod.SchoolConfig.from_dict(school)
            ),
        )

    @property
    def users(self) -> tuple[users_mod.User, ...]:
        return self._users

    @property
    def students(self) -> tuple[users_mod.User, ...]:
        """Student accounts in insertion order."""
        return tuple(user for user in self._users if user.is_student)

    @property
    def records(self) -> tuple[records_mod.AttendanceRecord, ...]:
        return self._records

    @property
    def queue(self) -> tuple[messages_mod.MessageQueueItem, ...]:
        """Pending notifications, most recent first."""
        return self._queue

    @property
    def school(self) -> school_mod.SchoolConfig:
        return self._school

    def find_user(self, user_id: str) -> Optional[users_mod.User]:
        for user in self._users:
            if user.user_id == user_id:
                return user
        return None

    def authenticate(self, username: str, password: str) -> Optional[users_mod.User]:
        """Return the user with matching credentials, or None."""
        for user in self._users:
            if user.username == username and user.password == password:
                return user
        return None

    def records_for(self, student_id: str) -> list[records_mod.AttendanceRecord]:
        """A student's records, newest first."""
        return sorted(
            (rec for rec in self._records if rec.student_id == student_id),
            key=lambda rec: rec.timestamp,
            reverse=True,
        )

    def has_submitted_today(self, student_id: str, now: datetime.datetime) -> bool:
        """True if the student has any record dated today."""
        today = now.date()
        return any(
            rec.student_id == student_id and rec.event_date == today
            for rec in self._records
        )

    def add_user(self, user: users_mod.User) -> None:
        """Add a new account. Usernames and IDs must be unique."""
        for existing in self._users:
            if existing.user_id == user.user_id:
                raise ValueError(f"User ID {user.user_id} already exists.")
            if existing.username == user.username:
                raise ValueError(f"Username '{user.username}' is already taken.")
        self._users = self._users + (user,)
        self._commit()

    def update_user(self, user: users_mod.User) -> None:
        """Replace the account with the same user ID."""
        if self.find_user(user.user_id) is None:
            raise KeyError(user.user_id)
        for existing in self._users:
            if existing.user_id != user.user_id and existing.username == user.username:
                raise ValueError(f"Username '{user.username}' is already taken.")
        self._users = tuple(
            user if existing.user_id == user.user_id else existing
            for existing in self._users
        )
        self._commit()

    def delete_user(self, user_id: str) -> None:
        """Delete an account with its attendance records and queued messages."""
        self._users = tuple(user for user in self._users if user.user_id != user_id)
        self._records = tuple(
            rec for rec in self._records if rec.student_id != user_id
        )
        self._queue = tuple(item for item in self._queue if item.student_id != user_id)
        self._commit()

    def add_record(self, record: records_mod.AttendanceRecord) -> None:
        """Add a resolved attendance record."""
        self._records = (record,) + self._records
        self._commit()

    def push_message(self, item: messages_mod.MessageQueueItem) -> bool:
        """Add a notification to the front of the queue.

        Items for students that no longer exist are dropped so the queue never
        references deleted users. Returns True if the item was queued.
        """
        if self.find_user(item.student_id) is None:
            return False
        self._queue = (item,) + self._queue
        self._commit()
        return True

    def remove_message(
        self, message_id: str
    ) -> Optional[messages_mod.MessageQueueItem]:
        """Remove a queue item. Removing an unknown ID does nothing.

        Returns the removed item or None.
        """
        removed = None
        for item in self._queue:
            if item.message_id == message_id:
                removed = item
                break
        if removed is None:
            return None
        self._queue = tuple(
            item for item in self._queue if item.message_id != message_id
        )
        self._commit()
        return removed

    def update_school(self, school: school_mod.SchoolConfig) -> None:
        """Replace the school configuration."""
        self._school = school
        self._commit()

    def update_school_fields(self, **changes: Any) -> school_mod.SchoolConfig:
        """Replace some school configuration fields, validating the result."""
        school = dataclasses.replace(self._school, **changes)
        self.update_school(school)
        return school

    def snapshot(self) -> dict[str, Any]:
        """JSON-serializable snapshot of every collection."""
        return {
            database.USERS_KEY: [user.to_dict() for user in self._users],
            database.RECORDS_KEY: [rec.to_dict() for rec in self._records],
            database.SCHOOL_CONFIG_KEY: self._school.to_dict(),
            database.MESSAGE_QUEUE_KEY: [item.to_dict() for item in self._queue],
        }

    def save(self) -> None:
        """Write all snapshots to the database."""
        if self.dbase is not None:
            self.dbase.write_snapshot(self.snapshot())

    def _commit(self) -> None:
        """Persist after a change."""
        self.save()
