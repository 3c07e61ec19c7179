"""Submit today's attendance and review past records."""

import datetime
from typing import Optional

import textual
from textual import app, binding, containers, screen, widgets

from schoolattend.features import validators
from schoolattend.model import (
    gateway,
    geo,
    recap,
    records_mod,
    state,
    submission,
    users_mod,
)
import schoolattend.view


def success(message: str) -> str:
    """Format a success message for display in the status widget."""
    return f"[ansi_bright_green]{message}[/]"


def error(message: str) -> str:
    """Format an error message for display in the status widget."""
    return f"[ansi_bright_red]{message}[/]"


class StudentScreen(screen.Screen):
    """A student's attendance form, statistics, and history."""

    CSS_PATH = schoolattend.view.CSS_FOLDER / "student_screen.tcss"
    BINDINGS = [
        binding.Binding("escape", "app.logout", "Log Out", show=True),
    ]

    student: users_mod.User
    """Logged-in student."""
    app_state: state.AppState
    notifier: gateway.MessageQueueGateway
    location_feed: geo.LocationFeed
    """Latest position sample. Read when the form is submitted."""

    def __init__(
        self,
        student: users_mod.User,
        app_state: state.AppState,
        notifier: gateway.MessageQueueGateway,
        location_feed: geo.LocationFeed,
    ) -> None:
        super().__init__()
        self.student = student
        self.app_state = app_state
        self.notifier = notifier
        self.location_feed = location_feed

    def compose(self) -> app.ComposeResult:
        """Build the student dashboard."""
        yield widgets.Header()
        with containers.Horizontal():
            with containers.Vertical(id="attendance-form"):
                yield widgets.Label("Today's Attendance", classes="emphasis")
                yield widgets.Static("", id="submitted-banner")
                yield widgets.Select(
                    [
                        (status.label, status)
                        for status in records_mod.REQUESTABLE_STATUSES
                    ],
                    prompt="Select attendance status",
                    id="status-select",
                )
                yield widgets.Label("Note (required for sick and permission):")
                yield widgets.TextArea(id="note-input")
                yield widgets.Label("Location", classes="emphasis")
                with containers.Horizontal(classes="location-row"):
                    yield widgets.Input(
                        placeholder="Latitude",
                        id="fix-lat",
                        validators=[validators.CoordinateValidator(90)],
                    )
                    yield widgets.Input(
                        placeholder="Longitude",
                        id="fix-lng",
                        validators=[validators.CoordinateValidator(180)],
                    )
                yield widgets.Button(
                    "Update Location",
                    id="update-location",
                    tooltip="Use the coordinates above as this device's position.",
                )
                yield widgets.Static("Location unavailable", id="distance-label")
                yield widgets.Button(
                    "Submit Attendance", variant="primary", id="submit-attendance"
                )
                yield widgets.Static(id="status-message", classes="status")
            with containers.Vertical(id="attendance-history"):
                yield widgets.Static("", id="student-stats")
                yield widgets.Label("Attendance History", classes="emphasis")
                yield widgets.DataTable(zebra_stripes=True, id="history-table")
        yield widgets.Footer()

    def on_mount(self) -> None:
        """Load records and start watching the location feed."""
        table = self.query_one("#history-table", widgets.DataTable)
        table.cursor_type = "row"
        table.add_columns("Date", "Time", "Status", "Distance", "Note")
        self.load_history()
        self.refresh_distance()
        self.set_interval(1.0, self.refresh_distance)

    def load_history(self) -> None:
        """Load the student's records, statistics, and today's status."""
        records = self.app_state.records_for(self.student.user_id)
        table = self.query_one("#history-table", widgets.DataTable)
        table.clear()
        for record in records:
            table.add_row(
                record.timestamp.strftime("%Y-%m-%d"),
                record.timestamp.strftime("%H:%M"),
                record.status.label,
                (
                    "-"
                    if record.location is None
                    else geo.format_distance(record.location.distance)
                ),
                record.note or "",
                key=record.record_id,
            )
        stats = recap.student_stats(records)
        self.query_one("#student-stats", widgets.Static).update(
            f"Attended: [bold]{stats.attended}[/]   "
            f"Sick/Permission: [bold]{stats.excused}[/]   "
            f"Percentage: [bold]{stats.percentage}%[/]"
        )
        submitted = self.app_state.has_submitted_today(
            self.student.user_id, datetime.datetime.now()
        )
        self.query_one("#submitted-banner", widgets.Static).update(
            success("Attendance recorded for today. A notification is queued.")
            if submitted
            else ""
        )
        self.query_one("#submit-attendance", widgets.Button).disabled = submitted

    def refresh_distance(self) -> None:
        """Show the distance from the latest location sample to school."""
        label = self.query_one("#distance-label", widgets.Static)
        school = self.app_state.school
        location = geo.locate(self.location_feed.latest, school)
        if location is None:
            label.update("Location unavailable")
            return
        text = f"Distance to school: {geo.format_distance(location.distance)}"
        if geo.within_radius(location.distance, school.radius_limit):
            label.update(success(text))
        else:
            label.update(error(f"{text} (outside {school.radius_limit:g}m)"))

    @textual.on(widgets.Button.Pressed, "#update-location")
    def update_location(self) -> None:
        """Push the entered coordinates to the location feed."""
        lat_input = self.query_one("#fix-lat", widgets.Input)
        lng_input = self.query_one("#fix-lng", widgets.Input)
        if not lat_input.value and not lng_input.value:
            self.location_feed.update(None)
        elif lat_input.is_valid and lng_input.is_valid:
            self.location_feed.update(
                geo.GeoFix(lat=float(lat_input.value), lng=float(lng_input.value))
            )
        else:
            self.update_status(error("Enter a valid latitude and longitude."))
            return
        self.refresh_distance()

    @textual.on(widgets.Button.Pressed, "#submit-attendance")
    def on_submit(self) -> None:
        status = self.query_one("#status-select", widgets.Select).value
        if not isinstance(status, records_mod.AttendanceStatus):
            self.update_status(error("Select an attendance status first."))
            return
        note = self.query_one("#note-input", widgets.TextArea).text
        self.query_one("#submit-attendance", widgets.Button).disabled = True
        self.update_status("Processing...")
        self.submit(status, note)

    @textual.work(exclusive=True)
    async def submit(
        self, status: records_mod.AttendanceStatus, note: Optional[str]
    ) -> None:
        """Record attendance, then queue the parent notification."""
        result = await submission.submit_attendance(
            self.app_state,
            self.notifier,
            self.student,
            status,
            self.location_feed.latest,
            note,
        )
        if result.save_error is not None:
            textual.log.error(f"Unable to save attendance: {result.save_error}")
            self.notify(f"Unable to save data: {result.save_error}", severity="error")
        message = result.resolution.describe(self.app_state.school)
        if result.resolution.ok:
            self.update_status(success(message))
            self.query_one("#status-select", widgets.Select).clear()
            self.query_one("#note-input", widgets.TextArea).load_text("")
        else:
            self.update_status(error(message))
        self.load_history()

    def update_status(self, message: str) -> None:
        """Update the text in the status widget."""
        self.query_one("#status-message", widgets.Static).update(message)
