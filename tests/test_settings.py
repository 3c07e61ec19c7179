"""Test command-line args and settings."""

import argparse
import pathlib

import polars as pl
import pytest

from schoolattend import __main__
from schoolattend.model import config


DATA_PATH = pathlib.Path(__file__).parent / "data"


def test_read_config() -> None:
    """Read the configuration from a TOML file."""
    # Arrange
    settings = config.Settings()
    args = argparse.Namespace(config_path=DATA_PATH / "schoolattend.toml")
    # Act
    settings.update_from_args(args)
    # Assert
    assert settings.db_path is None
    assert settings.export_dir == pathlib.Path.cwd() / "exports"
    assert settings.gemini_api_key is None
    assert settings.gemini_model == "gemini-2.5-flash-lite"
    assert settings.message_language == "English"
    assert settings.timestamp_format == "%Y-%m-%d %H:%M"
    assert settings.semester_start_months == (2, 8)


def test_command_line_db_path_wins() -> None:
    """A database path on the command line overrides the config file."""
    # Arrange
    settings = config.Settings()
    args = argparse.Namespace(
        db_path=pathlib.Path("other.db"),
        config_path=DATA_PATH / "schoolattend.toml",
    )
    # Act
    settings.update_from_args(args)
    # Assert
    assert settings.db_path == pathlib.Path.cwd() / "other.db"


def test_missing_config_file_keeps_defaults() -> None:
    """A config path that is not a file is ignored."""
    # Arrange
    settings = config.Settings()
    args = argparse.Namespace(config_path=DATA_PATH / "missing.toml")
    # Act
    settings.update_from_args(args)
    # Assert
    assert settings.config_path is None
    assert settings.message_language == "Indonesian"


@pytest.mark.parametrize("months", ["[7, 1]", "[1]", "[0, 6]", "[1, 13]", '"jan"'])
def test_invalid_semester_months(months: str, empty_output_folder: pathlib.Path) -> None:
    """Semester start months must be two increasing month numbers."""
    # Arrange
    config_path = empty_output_folder / "bad.toml"
    config_path.write_text(f"semester_start_months = {months}\n")
    settings = config.Settings()
    # Act, Assert
    with pytest.raises(config.ConfigError) as excinfo:
        settings.update_from_args(argparse.Namespace(config_path=config_path))
    assert excinfo.value.error_type == config.ConfigError.ErrorType.INVALID_VALUE


def test_create_new_config_file(empty_output_folder: pathlib.Path) -> None:
    """The example config file is a valid config file."""
    # Arrange
    config_path = empty_output_folder / "new.toml"
    settings = config.Settings()
    # Act
    settings.create_new_config_file(config_path)
    settings.update_from_args(argparse.Namespace(config_path=config_path))
    # Assert
    assert settings.db_path == pathlib.Path.cwd() / config.DB_FILE_NAME
    assert settings.gemini_api_key is None
    assert settings.semester_start_months == (1, 7)


def test_parser() -> None:
    """Sub-commands map to their handler functions."""
    # Arrange
    parser = __main__.build_parser()
    # Act
    args = parser.parse_args(["recap", "school.db", "--period", "semester"])
    # Assert
    assert args.func is __main__.print_recap
    assert args.period == "semester"
    assert args.export is None


def test_init_and_recap_commands(
    empty_output_folder: pathlib.Path, capsys: pytest.CaptureFixture
) -> None:
    """Create a database and print its recap from the command line."""
    # Arrange
    db_path = empty_output_folder / "cli.db"
    export_path = empty_output_folder / "cli.csv"
    parser = __main__.build_parser()
    # Act
    __main__.init_database(parser.parse_args(["init", str(db_path)]))
    __main__.print_recap(
        parser.parse_args(
            [
                "recap",
                str(db_path),
                "--export",
                str(export_path),
                "--config_path",
                str(empty_output_folder / "missing.toml"),
            ]
        )
    )
    # Assert
    output = capsys.readouterr().out
    assert db_path.exists()
    assert "Attendance Recap" in output
    frame = pl.read_csv(export_path)
    assert frame["Student Name"].to_list() == ["Budi Santoso", "Siti Aminah"]
    assert frame["Absent"].to_list() == [1, 1]


def test_recap_of_missing_database(
    empty_output_folder: pathlib.Path, capsys: pytest.CaptureFixture
) -> None:
    """A missing database is reported without a traceback."""
    # Arrange
    parser = __main__.build_parser()
    args = parser.parse_args(
        [
            "recap",
            str(empty_output_folder / "missing.db"),
            "--config_path",
            str(empty_output_folder / "missing.toml"),
        ]
    )
    # Act
    __main__.print_recap(args)
    # Assert
    output = capsys.readouterr().out
    assert "missing.db" in output
    assert "Attendance Recap" not in output
