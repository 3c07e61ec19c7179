"""Store application data as JSON snapshots in a Sqlite database.

The database holds a single key-value table. Each key holds a full snapshot
of one collection (users, attendance records, message queue) or of the
school configuration. Snapshots are overwritten in full on every write.
"""

from collections.abc import Mapping
import datetime
import json
import pathlib
import sqlite3
from typing import Any, Optional


USERS_KEY = "users"
RECORDS_KEY = "attendance_records"
SCHOOL_CONFIG_KEY = "school_config"
MESSAGE_QUEUE_KEY = "message_queue"
KEYS = (USERS_KEY, RECORDS_KEY, SCHOOL_CONFIG_KEY, MESSAGE_QUEUE_KEY)


STORE_TABLE_SCHEMA = """
CREATE TABLE IF NOT EXISTS store (
           key TEXT PRIMARY KEY,
         value TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


class DBaseError(Exception):
    """Error occurred when working with database."""


def adapt_datetime_iso(val: datetime.datetime | str) -> str:
    """Adapt datetime.datetime to timezone-naive ISO 8601 date."""
    if isinstance(val, datetime.datetime):
        return val.replace(tzinfo=None).isoformat()
    return val


# Python 3.12 deprecated Sqlite's default datetime adapter, so register one
#   explicitly.
sqlite3.register_adapter(datetime.datetime, adapt_datetime_iso)


class DBase:
    """Read and write snapshots in the database."""

    db_path: pathlib.Path
    """Path to Sqlite database."""

    def __init__(self, db_path: pathlib.Path, create_new: bool = False) -> None:
        """Set database path."""
        self.db_path = db_path
        if create_new:
            if self.db_path.exists():
                raise DBaseError(
                    f"Cannot create new database at {db_path}, file already exists."
                )
            else:
                self.create_tables()
        else:
            if not db_path.exists():
                raise DBaseError(f"Database file at {db_path} does not exist.")

    def get_db_connection(self) -> sqlite3.Connection:
        """Get connection to the SQLite database."""
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as err:
            raise DBaseError(f"Unable to open database at {self.db_path}.") from err
        conn.row_factory = sqlite3.Row
        return conn

    def create_tables(self) -> None:
        """Creates the database tables if they don't already exist."""
        conn = self.get_db_connection()
        try:
            with conn:
                conn.execute(STORE_TABLE_SCHEMA)
        except sqlite3.Error as err:
            raise DBaseError(f"Unable to create tables in {self.db_path}.") from err
        finally:
            conn.close()

    def read(self, key: str) -> Optional[Any]:
        """Get the decoded snapshot stored under key, or None if missing."""
        conn = self.get_db_connection()
        try:
            row = conn.execute(
                "SELECT value FROM store WHERE key = ?;", (key,)
            ).fetchone()
        except sqlite3.Error as err:
            raise DBaseError(f"Unable to read '{key}' from {self.db_path}.") from err
        finally:
            conn.close()
        if row is None:
            return None
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError as err:
            raise DBaseError(f"Stored value for '{key}' is not valid JSON.") from err

    def write_snapshot(self, snapshot: Mapping[str, Any]) -> None:
        """Overwrite the values of all keys in snapshot in one transaction."""
        query = """
                INSERT INTO store (key, value, updated_at)
                     VALUES (:key, :value, :updated_at)
                ON CONFLICT (key) DO UPDATE
                        SET value = excluded.value,
                            updated_at = excluded.updated_at;
        """
        updated_at = datetime.datetime.now()
        rows = [
            {"key": key, "value": json.dumps(value), "updated_at": updated_at}
            for key, value in snapshot.items()
        ]
        conn = self.get_db_connection()
        try:
            with conn:
                conn.executemany(query, rows)
        except sqlite3.Error as err:
            raise DBaseError(f"Unable to write to {self.db_path}.") from err
        finally:
            conn.close()

    def stored_keys(self) -> list[str]:
        """Keys that currently have a value."""
        conn = self.get_db_connection()
        try:
            keys = [row["key"] for row in conn.execute("SELECT key FROM store;")]
        except sqlite3.Error as err:
            raise DBaseError(f"Unable to read from {self.db_path}.") from err
        finally:
            conn.close()
        return sorted(keys)

    def to_dict(self) -> dict[str, Any]:
        """Get the contents of the database for a JSON backup.

        Returns:
            Decoded snapshots of every stored key. Format: {<key>: <value>}
        """
        return {key: self.read(key) for key in self.stored_keys()}

    def load_from_dict(self, db_data_dict: Mapping[str, Any]) -> None:
        """Import snapshots from a JSON backup, ignoring unknown keys."""
        self.write_snapshot(
            {key: value for key, value in db_data_dict.items() if key in KEYS}
        )
