"""Manage configuration settings for the school attendance application."""

import argparse
import dataclasses
import enum
import pathlib
import shutil
import tomllib
from typing import Optional


DB_FILE_NAME = "schoolattend.db"
CONFIG_FILE_NAME = "schoolattend.toml"


class ConfigError(Exception):
    """Errors when setting or accessing settings."""

    class ErrorType(enum.Enum):
        NOT_A_FILE = 1
        PATH_DOES_NOT_EXIST = 2
        INVALID_VALUE = 3

    error_type: ErrorType

    def __init__(self, message: str, error_type: ErrorType) -> None:
        """Set error type."""
        super().__init__(message)
        self.error_type = error_type


@dataclasses.dataclass
class Settings:
    """Configuration data for the schoolattend application.

    These are settings for the program itself. The school's entrance time,
    coordinates, and radius are edited by an administrator and stored in the
    database along with users and attendance records.
    """

    db_path: Optional[pathlib.Path] = None
    config_path: Optional[pathlib.Path] = None
    export_dir: Optional[pathlib.Path] = None
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash"
    message_language: str = "Indonesian"
    whatsapp_base_url: str = "https://wa.me"
    timestamp_format: str = "%d/%m/%Y %H:%M:%S"
    semester_start_months: tuple[int, int] = (1, 7)

    def update_from_args(self, args: argparse.Namespace) -> None:
        """Read settings.

        Values from the config file are applied first, so a database path
        given on the command line overrides the one in the file.
        """
        self.config_path = self._get_full_path(
            getattr(args, "config_path", None), CONFIG_FILE_NAME
        )
        if self.config_path is not None:
            self._read_config_file()
        if getattr(args, "db_path", None) is not None:
            self.db_path = self._convert_path_to_absolute(args.db_path)

    @staticmethod
    def _convert_path_to_absolute(path: pathlib.Path | str) -> pathlib.Path:
        """Convert relative paths to absolute paths."""
        if isinstance(path, str):
            path = pathlib.Path(path)
        return path if path.is_absolute() else pathlib.Path.cwd() / path

    @staticmethod
    def _get_full_path(
        path: Optional[pathlib.Path], default_file_name: str
    ) -> Optional[pathlib.Path]:
        """Convert path arg to full filesystem path.

        If path is None, looks for file in current working directory. Otherwise
        converts relative paths to absolute paths. Returns None if path does not
        point to an existing file.
        """
        cwd = pathlib.Path.cwd()
        full_path: Optional[pathlib.Path] = None
        if path is None:
            full_path = cwd / default_file_name
        elif path.is_absolute():
            full_path = path
        else:
            full_path = cwd / path
        if not full_path.is_file():
            full_path = None
        return full_path

    def _read_config_file(self) -> None:
        """Read TOML configuration file."""
        if self.config_path is None:
            return
        app_settings = dataclasses.asdict(self)
        with open(self.config_path, "rb") as toml_file:
            file_settings = tomllib.load(toml_file)
        for setting_name, value in file_settings.items():
            if setting_name not in app_settings:
                continue
            if isinstance(value, str) and value.lower() in ["", "none", "null"]:
                value = None
            if setting_name in ["db_path", "export_dir"] and value is not None:
                value = self._convert_path_to_absolute(value)
            elif setting_name == "semester_start_months":
                value = self._check_semester_months(value)
            setattr(self, setting_name, value)

    @staticmethod
    def _check_semester_months(value: list[int]) -> tuple[int, int]:
        """Semester start months must be two increasing month numbers."""
        if (
            not isinstance(value, list)
            or len(value) != 2
            or not all(isinstance(month, int) for month in value)
            or not 1 <= value[0] < value[1] <= 12
        ):
            raise ConfigError(
                f"semester_start_months must be two increasing months, got {value}",
                ConfigError.ErrorType.INVALID_VALUE,
            )
        return value[0], value[1]

    def create_new_config_file(self, config_path: pathlib.Path) -> None:
        """Create a new configuration file with default settings."""
        if not config_path.exists():
            shutil.copy(
                pathlib.Path(__file__).parent / "example-config.toml", config_path
            )


# Store settings in a module-level variable, which will be available from any
# other module that imports schoolattend.model.config. There is only a single
# instance of the Settings class.
settings = Settings()
