"""Show attendance recaps, export them, and request a trend summary."""

import datetime
import pathlib

import textual
from textual import app, binding, containers, screen, widgets

from schoolattend.model import config, excel, gateway, recap, state
import schoolattend.view


class RecapScreen(screen.Screen):
    """Per-student attendance counts for the selected period."""

    CSS_PATH = schoolattend.view.CSS_FOLDER / "recap_screen.tcss"
    BINDINGS = [
        binding.Binding("escape", "app.pop_screen", "Back to Admin Menu", show=True),
    ]

    app_state: state.AppState
    notifier: gateway.MessageQueueGateway
    _rows: list[recap.StudentRecap]
    """Recap currently shown in the table."""

    def __init__(
        self, app_state: state.AppState, notifier: gateway.MessageQueueGateway
    ) -> None:
        super().__init__()
        self.app_state = app_state
        self.notifier = notifier
        self._rows = []

    def compose(self) -> app.ComposeResult:
        """Add the datatable and other controls to the screen."""
        yield widgets.Header()
        with containers.HorizontalGroup(id="recap-controls"):
            yield widgets.Select(
                [(period.value.title(), period) for period in recap.ReportPeriod],
                value=recap.ReportPeriod.DAILY,
                allow_blank=False,
                id="period-select",
            )
            yield widgets.Button("Export Excel", id="export-xlsx", variant="success")
            yield widgets.Button("Export CSV", id="export-csv")
            yield widgets.Button("AI Summary", id="ai-summary", variant="primary")
        yield widgets.DataTable(id="recap-table", zebra_stripes=True)
        yield widgets.Static("", id="ai-summary-text", markup=False)
        yield widgets.Static(id="status-message", classes="status")
        yield widgets.Footer()

    def on_mount(self) -> None:
        """Load data into the table."""
        table = self.query_one("#recap-table", widgets.DataTable)
        for title, key in [
            ("Student Name", "name"),
            ("Class", "class_name"),
            ("Present", "present"),
            ("Late", "late"),
            ("Permission", "permission"),
            ("Sick", "sick"),
            ("Absent", "absent"),
            ("Total", "total"),
        ]:
            table.add_column(title, key=key)
        self.load_table()

    @property
    def period(self) -> recap.ReportPeriod:
        value = self.query_one("#period-select", widgets.Select).value
        if isinstance(value, recap.ReportPeriod):
            return value
        return recap.ReportPeriod.DAILY

    def load_table(self) -> None:
        """Compute the recap for the selected period and show it."""
        self._rows = recap.aggregate(
            self.app_state.records,
            self.app_state.students,
            self.period,
            datetime.datetime.now(),
            config.settings.semester_start_months,
        )
        table = self.query_one("#recap-table", widgets.DataTable)
        table.clear()
        for row in self._rows:
            table.add_row(
                row.name,
                row.class_name,
                row.present,
                row.late,
                row.permission,
                row.sick,
                row.absent,
                row.total,
                key=row.student_id,
            )

    @textual.on(widgets.Select.Changed, "#period-select")
    def on_period_changed(self) -> None:
        self.load_table()

    @textual.on(widgets.Button.Pressed, "#export-xlsx")
    def export_excel(self) -> None:
        self._export(".xlsx")

    @textual.on(widgets.Button.Pressed, "#export-csv")
    def export_csv(self) -> None:
        self._export(".csv")

    def _export(self, suffix: str) -> None:
        """Write the table to a file in the export folder."""
        folder = config.settings.export_dir or pathlib.Path.cwd()
        filename = excel.default_filename(self.period, datetime.datetime.now())
        export_path = (folder / filename).with_suffix(suffix)
        try:
            excel.export(self._rows, export_path)
        except OSError as err:
            textual.log.error(f"Export failed: {err}")
            self.update_status(f"[ansi_bright_red]Unable to export: {err}[/]")
            return
        self.update_status(f"[ansi_bright_green]Exported recap to {export_path}[/]")

    @textual.on(widgets.Button.Pressed, "#ai-summary")
    def on_summary_pressed(self) -> None:
        self.query_one("#ai-summary", widgets.Button).disabled = True
        self.query_one("#ai-summary-text", widgets.Static).update("Analyzing...")
        self.generate_summary()

    @textual.work(exclusive=True)
    async def generate_summary(self) -> None:
        """Ask the text generator for a trend summary."""
        summary = await self.notifier.summarize(
            self.app_state.records, self.app_state.students
        )
        self.query_one("#ai-summary-text", widgets.Static).update(summary)
        self.query_one("#ai-summary", widgets.Button).disabled = False

    def update_status(self, message: str) -> None:
        """Update the text in the status widget."""
        self.query_one("#status-message", widgets.Static).update(message)
