"""Data entry validator classes."""

from textual import validation

from schoolattend.model import school_mod


class NotEmpty(validation.Validator):
    def validate(self, value: str) -> validation.ValidationResult:
        if not value.strip():
            return self.failure("Field cannot be empty.")
        return self.success()


class TimeOfDayValidator(validation.Validator):
    """Validate an HH:MM entrance time."""

    def validate(self, value: str) -> validation.ValidationResult:
        """Verify input is a valid 24-hour time."""
        try:
            school_mod.SchoolConfig.parse_entrance_time(value)
        except ValueError as err:
            return self.failure(str(err))
        return self.success()


class CoordinateValidator(validation.Validator):
    """Validate a latitude or longitude in degrees."""

    limit: float

    def __init__(self, limit: float) -> None:
        """Set limit to 90 for latitudes and 180 for longitudes."""
        super().__init__()
        self.limit = limit

    def validate(self, value: str) -> validation.ValidationResult:
        try:
            degrees = float(value)
        except ValueError:
            return self.failure("Must be a number of degrees.")
        if not -self.limit <= degrees <= self.limit:
            return self.failure(f"Must be between -{self.limit:g} and {self.limit:g}.")
        return self.success()


class PositiveNumber(validation.Validator):
    def validate(self, value: str) -> validation.ValidationResult:
        try:
            number = float(value)
        except ValueError:
            return self.failure("Must be a number.")
        if number <= 0:
            return self.failure("Must be greater than zero.")
        return self.success()
