"""Export attendance recaps to Excel and CSV files."""

from collections.abc import Sequence
import datetime
import pathlib
from typing import Any

import polars as pl
import xlsxwriter

from schoolattend.model import recap


SHEET_NAME = "Attendance Recap"
COLUMNS = [
    ("No", 5),
    ("Student Name", 25),
    ("Class", 15),
    ("Present", 10),
    ("Late", 10),
    ("Permission", 10),
    ("Sick", 10),
    ("Absent", 10),
    ("Total", 15),
]
"""Column titles and widths in characters."""


def default_filename(period: recap.ReportPeriod, now: datetime.datetime) -> str:
    """File name for a recap export, e.g., attendance_report_MONTHLY_2025_9.xlsx"""
    return f"attendance_report_{period.value.upper()}_{now.year}_{now.month}.xlsx"


def recap_table(rows: Sequence[recap.StudentRecap]) -> list[dict[str, Any]]:
    """One dictionary per student, keyed by column title."""
    return [
        {
            "No": number,
            "Student Name": row.name,
            "Class": row.class_name,
            "Present": row.present,
            "Late": row.late,
            "Permission": row.permission,
            "Sick": row.sick,
            "Absent": row.absent,
            "Total": row.total,
        }
        for number, row in enumerate(rows, start=1)
    ]


def write_recap(
    rows: Sequence[recap.StudentRecap], excel_path: pathlib.Path
) -> pathlib.Path:
    """Write a recap to a Microsoft Excel file."""
    workbook = xlsxwriter.Workbook(excel_path)
    sheet = workbook.add_worksheet(SHEET_NAME)
    header_format = workbook.add_format({"bold": True})
    for col_number, (title, width) in enumerate(COLUMNS):
        sheet.set_column(col_number, col_number, width)
    sheet.write_row(
        row=0, col=0, data=[title for title, _ in COLUMNS], cell_format=header_format
    )
    for row_number, row_values in enumerate(recap_table(rows)):
        sheet.write_row(row=row_number + 1, col=0, data=list(row_values.values()))
    workbook.close()
    return excel_path


def write_recap_csv(
    rows: Sequence[recap.StudentRecap], csv_path: pathlib.Path
) -> pathlib.Path:
    """Write a recap to a CSV file."""
    schema = {
        title: (pl.String if title in ("Student Name", "Class") else pl.Int64)
        for title, _ in COLUMNS
    }
    pl.DataFrame(recap_table(rows), schema=schema).write_csv(csv_path)
    return csv_path


def export(
    rows: Sequence[recap.StudentRecap], export_path: pathlib.Path
) -> pathlib.Path:
    """Write the recap in the format given by the file suffix."""
    match export_path.suffix.lower():
        case ".xlsx":
            return write_recap(rows, export_path)
        case ".csv":
            return write_recap_csv(rows, export_path)
        case _:
            raise ValueError(f"Cannot export to '{export_path.suffix}' files.")
