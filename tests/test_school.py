"""Test school configuration, record serialization, and input validators."""

import datetime

import pytest

from schoolattend.features import validators
from schoolattend.model import geo, messages_mod, records_mod, school_mod
from schoolattend.model.records_mod import AttendanceStatus


@pytest.mark.parametrize(
    "changes",
    [
        {"radius_limit": 0},
        {"radius_limit": -5},
        {"lat": 91.0},
        {"lng": -180.5},
        {"entrance_time": "7.30"},
        {"entrance_time": "24:00"},
        {"entrance_time": "07:60"},
    ],
)
def test_invalid_school_config(changes: dict) -> None:
    """Bad values are rejected when a config is created."""
    # Arrange
    fields = school_mod.DEFAULT_SCHOOL_CONFIG.to_dict()
    values = {
        "entrance_time": fields["entrance_time"],
        "lat": fields["coordinates"]["lat"],
        "lng": fields["coordinates"]["lng"],
        "radius_limit": fields["radius_limit"],
    }
    values.update(changes)
    # Act, Assert
    with pytest.raises(ValueError):
        school_mod.SchoolConfig(**values)


def test_cutoff_on() -> None:
    """The cutoff falls on the same day as the given time."""
    # Arrange
    school = school_mod.SchoolConfig("7:05", 0.0, 0.0, 50)
    when = datetime.datetime(2025, 9, 16, 12, 34, 56, 789)
    # Act
    cutoff = school.cutoff_on(when)
    # Assert
    assert cutoff == datetime.datetime(2025, 9, 16, 7, 5)
    assert school.entrance == datetime.time(7, 5)


def test_school_config_dict_shape() -> None:
    """Coordinates are nested in the stored form."""
    # Act
    data = school_mod.DEFAULT_SCHOOL_CONFIG.to_dict()
    # Assert
    assert data == {
        "entrance_time": "07:30",
        "coordinates": {"lat": -6.2, "lng": 106.8166},
        "radius_limit": 100,
    }
    assert school_mod.SchoolConfig.from_dict(data) == school_mod.DEFAULT_SCHOOL_CONFIG


def test_record_timestamps_are_epoch_ms() -> None:
    """Records store timestamps as epoch milliseconds."""
    # Arrange
    when = datetime.datetime(2025, 9, 16, 7, 10, 0, 250000)
    record = records_mod.AttendanceRecord(
        record_id="record-1",
        student_id="student-1",
        status=AttendanceStatus.PRESENT,
        timestamp=when,
        location=geo.Location(-6.2, 106.8166, 3.5),
    )
    # Act
    data = record.to_dict()
    # Assert
    assert data["timestamp"] == round(when.timestamp() * 1000)
    assert data["location"] == {"lat": -6.2, "lng": 106.8166, "distance": 3.5}
    assert records_mod.AttendanceRecord.from_dict(data) == record


def test_queue_item_from_dict() -> None:
    """Queue items keep the student details copied at creation."""
    # Arrange
    data = {
        "message_id": "msg-1",
        "student_id": "student-1",
        "student_name": "Budi Santoso",
        "class_name": "12 IPA 1",
        "parent_contact": "6281234567890",
        "message": "Hello",
        "timestamp": "2025-09-16T07:42:10",
        "status": "late",
    }
    # Act
    item = messages_mod.MessageQueueItem.from_dict(data)
    # Assert
    assert item.status == AttendanceStatus.LATE
    assert item.timestamp == datetime.datetime(2025, 9, 16, 7, 42, 10)


@pytest.mark.parametrize(
    "validator, value, valid",
    [
        (validators.TimeOfDayValidator(), "07:30", True),
        (validators.TimeOfDayValidator(), "25:00", False),
        (validators.CoordinateValidator(90), "-6.2", True),
        (validators.CoordinateValidator(90), "106.8", False),
        (validators.CoordinateValidator(180), "east", False),
        (validators.PositiveNumber(), "100", True),
        (validators.PositiveNumber(), "0", False),
        (validators.NotEmpty(), "  ", False),
    ],
)
def test_validators(validator, value: str, valid: bool) -> None:
    """Input validators accept and reject values like the model does."""
    assert validator.validate(value).is_valid is valid
