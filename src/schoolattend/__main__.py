"""Start the school attendance app."""

import argparse
import datetime
import pathlib
from typing import Optional

import rich
import rich.table

from schoolattend.model import (
    config,
    database,
    excel,
    gateway,
    geo,
    messenger,
    recap,
    state,
    textgen,
)
import schoolattend.view.main_app


def build_parser() -> argparse.ArgumentParser:
    """Define command line arguments."""
    parser = argparse.ArgumentParser(prog="schoolattend")
    parser.set_defaults(func=None)
    subparsers = parser.add_subparsers()
    app_parser = subparsers.add_parser(
        "app",
        help="Run the attendance application."
    )
    app_parser.set_defaults(func=run_app)
    app_parser.add_argument(
        "-d", "--db_path",
        help="Path to attendance database. Created if it does not exist.",
        type=pathlib.Path,
        default=None
    )
    app_parser.add_argument(
        "-c", "--config_path",
        help="Path to config file",
        type=pathlib.Path,
        default=None
    )

    init_parser = subparsers.add_parser(
        "init",
        help="Create a new database with the default accounts and settings."
    )
    init_parser.set_defaults(func=init_database)
    init_parser.add_argument(
        "db_path",
        type=pathlib.Path,
        help="Path to the new Sqlite file."
    )

    recap_parser = subparsers.add_parser(
        "recap",
        help="Print attendance counts for each student."
    )
    recap_parser.set_defaults(func=print_recap)
    recap_parser.add_argument(
        "db_path",
        type=pathlib.Path,
        help="Path to attendance Sqlite file."
    )
    recap_parser.add_argument(
        "-p", "--period",
        type=recap.ReportPeriod,
        choices=list(recap.ReportPeriod),
        default=recap.ReportPeriod.DAILY,
        help="Reporting window (default: daily).",
    )
    recap_parser.add_argument(
        "-e", "--export",
        type=pathlib.Path,
        default=None,
        help="Also write the recap to an .xlsx or .csv file.",
    )
    recap_parser.add_argument(
        "-c", "--config_path",
        help="Path to config file",
        type=pathlib.Path,
        default=None
    )
    return parser


def to_absolute_path(path: pathlib.Path) -> pathlib.Path:
    """Convert relative paths to absolute paths."""
    if not path.is_absolute():
        path = pathlib.Path.cwd() / path
    return path


def open_database(db_path: pathlib.Path) -> database.DBase:
    """Open the database, creating it with default data if missing."""
    if db_path.exists():
        return database.DBase(db_path)
    dbase = database.DBase(db_path, create_new=True)
    state.AppState(dbase).save()
    return dbase


def build_gateway(app_state: state.AppState) -> gateway.MessageQueueGateway:
    """Connect the message queue to Gemini if an API key is configured."""
    generator: Optional[textgen.TextGenerator] = None
    if config.settings.gemini_api_key:
        generator = textgen.GeminiTextGenerator(
            config.settings.gemini_api_key, config.settings.gemini_model
        )
    return gateway.MessageQueueGateway(
        app_state,
        generator,
        language=config.settings.message_language,
        timestamp_format=config.settings.timestamp_format,
    )


def run_app(args: argparse.Namespace) -> None:
    """Run the attendance TUI application."""
    config.settings.update_from_args(args)
    if config.settings.db_path is None:
        config.settings.db_path = pathlib.Path.cwd() / config.DB_FILE_NAME
    app_state = state.AppState.load(open_database(config.settings.db_path))
    app = schoolattend.view.main_app.SchoolAttend(
        app_state,
        build_gateway(app_state),
        messenger.WhatsAppMessenger(config.settings.whatsapp_base_url),
        geo.LocationFeed(),
    )
    app.run()


def init_database(args: argparse.Namespace) -> None:
    """Create a new database file."""
    db_path = to_absolute_path(args.db_path)
    try:
        dbase = database.DBase(db_path, create_new=True)
    except database.DBaseError as err:
        rich.print(f"[red]{err}[/]")
        return
    state.AppState(dbase).save()
    rich.print(f"[green]Created {db_path} with default accounts.[/]")


def print_recap(args: argparse.Namespace) -> None:
    """Print a recap table and optionally export it."""
    config.settings.update_from_args(args)
    try:
        app_state = state.AppState.load(
            database.DBase(to_absolute_path(args.db_path))
        )
    except database.DBaseError as err:
        rich.print(f"[red]{err}[/]")
        return
    now = datetime.datetime.now()
    rows = recap.aggregate(
        app_state.records,
        app_state.students,
        args.period,
        now,
        config.settings.semester_start_months,
    )
    table = rich.table.Table(title=f"{args.period.value.title()} Attendance Recap")
    for title, _ in excel.COLUMNS:
        justify = "left" if title in ("Student Name", "Class") else "right"
        table.add_column(title, justify=justify)
    for values in excel.recap_table(rows):
        table.add_row(*(str(value) for value in values.values()))
    rich.print(table)
    if args.export is not None:
        try:
            export_path = excel.export(rows, to_absolute_path(args.export))
        except (ValueError, OSError) as err:
            rich.print(f"[red]Unable to export: {err}[/]")
            return
        rich.print(f"Exported recap to {export_path}")


def main() -> None:
    """Function to run the app, used for the console script entry point."""
    parser = build_parser()
    args = parser.parse_args()
    if args.func is None:
        parser.print_help()
        return
    args.func(args)


if __name__ == "__main__":
    main()
