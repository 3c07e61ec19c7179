"""Test the Sqlite snapshot store."""

import pathlib

import pytest

from schoolattend.model import database


def test_empty_database(empty_database: database.DBase) -> None:
    """A new database has a single, empty store table."""
    # Assert
    query = "SELECT name FROM sqlite_schema WHERE type = 'table';"
    with empty_database.get_db_connection() as conn:
        tables = set(row["name"] for row in conn.execute(query))
    conn.close()
    assert tables == {"store"}
    assert empty_database.stored_keys() == []
    # Must close connection or fixtures won't be able to delete Sqlite3 file when
    #   setting up for other tests.


def test_nonexistant_database_raises_error(empty_output_folder: pathlib.Path) -> None:
    """Raise an error if a database doesn't exist."""
    # Act, Assert
    with pytest.raises(database.DBaseError):
        database.DBase(empty_output_folder / "schoolattend.db")


def test_existing_database_raises_error_on_create_new(empty_database) -> None:
    """Raise an error if create_new = True and database file already exists."""
    # Act, Assert
    with pytest.raises(database.DBaseError):
        database.DBase(empty_database.db_path, create_new=True)


def test_read_missing_key(empty_database: database.DBase) -> None:
    """Missing keys read as None."""
    assert empty_database.read(database.USERS_KEY) is None


def test_write_and_read_snapshot(empty_database: database.DBase) -> None:
    """Snapshots are stored as JSON and overwritten on every write."""
    # Arrange
    first = {"entrance_time": "07:30", "radius_limit": 100}
    second = {"entrance_time": "08:00", "radius_limit": 50}
    # Act
    empty_database.write_snapshot({database.SCHOOL_CONFIG_KEY: first})
    empty_database.write_snapshot({database.SCHOOL_CONFIG_KEY: second})
    # Assert
    assert empty_database.read(database.SCHOOL_CONFIG_KEY) == second
    assert empty_database.stored_keys() == [database.SCHOOL_CONFIG_KEY]


def test_load_from_dict_ignores_unknown_keys(
    full_dbase: database.DBase, attendance_test_data: dict[str, list]
) -> None:
    """Only the four known keys are imported."""
    # Act
    stored = full_dbase.to_dict()
    # Assert
    assert sorted(stored) == sorted(database.KEYS)
    assert "backup_info" not in stored
    assert stored[database.USERS_KEY] == attendance_test_data["users"]
    assert len(stored[database.RECORDS_KEY]) == 5


def test_invalid_json_raises_error(empty_database: database.DBase) -> None:
    """A corrupt snapshot is reported as a database error."""
    # Arrange
    with empty_database.get_db_connection() as conn:
        conn.execute(
            "INSERT INTO store (key, value, updated_at) VALUES (?, ?, ?);",
            (database.USERS_KEY, "{not json", "2025-09-16T07:00:00"),
        )
    conn.close()
    # Act, Assert
    with pytest.raises(database.DBaseError):
        empty_database.read(database.USERS_KEY)
