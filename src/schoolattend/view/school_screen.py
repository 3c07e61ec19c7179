"""Edit the entrance time and the school geofence."""

import textual
from textual import app, binding, containers, screen, widgets

from schoolattend.features import validators
from schoolattend.model import database, geo, state
import schoolattend.view
from schoolattend.view import student_screen


class SchoolSettingsScreen(screen.Screen):
    """Entrance time, school coordinates, and radius."""

    CSS_PATH = schoolattend.view.CSS_FOLDER / "main.tcss"
    BINDINGS = [
        binding.Binding("escape", "app.pop_screen", "Back to Admin Menu", show=True),
    ]

    app_state: state.AppState
    location_feed: geo.LocationFeed

    def __init__(
        self, app_state: state.AppState, location_feed: geo.LocationFeed
    ) -> None:
        super().__init__()
        self.app_state = app_state
        self.location_feed = location_feed

    def compose(self) -> app.ComposeResult:
        school = self.app_state.school
        yield widgets.Header()
        with containers.VerticalGroup(classes="outer", id="school-settings"):
            yield widgets.Label("Entrance time (HH:MM):")
            yield widgets.Input(
                school.entrance_time,
                id="school-entrance",
                validators=[validators.TimeOfDayValidator()],
            )
            yield widgets.Label("School latitude:")
            yield widgets.Input(
                str(school.lat),
                id="school-lat",
                validators=[validators.CoordinateValidator(90)],
            )
            yield widgets.Label("School longitude:")
            yield widgets.Input(
                str(school.lng),
                id="school-lng",
                validators=[validators.CoordinateValidator(180)],
            )
            yield widgets.Label("Radius limit (meters):")
            yield widgets.Input(
                f"{school.radius_limit:g}",
                id="school-radius",
                validators=[validators.PositiveNumber()],
            )
            with containers.HorizontalGroup(classes="config"):
                yield widgets.Button("Save", variant="primary", id="save-school")
                yield widgets.Button(
                    "Use Current Location",
                    id="use-current-location",
                    tooltip="Copy this device's latest position into the form.",
                )
            yield widgets.Static(id="status-message", classes="status")
        yield widgets.Footer()

    @textual.on(widgets.Button.Pressed, "#use-current-location")
    def use_current_location(self) -> None:
        """Fill the coordinates from the latest location sample."""
        fix = self.location_feed.latest
        if fix is None:
            self.update_status(student_screen.error("No location fix available."))
            return
        self.query_one("#school-lat", widgets.Input).value = str(fix.lat)
        self.query_one("#school-lng", widgets.Input).value = str(fix.lng)
        self.update_status("Location copied. Press Save to keep it.")

    @textual.on(widgets.Button.Pressed, "#save-school")
    def save_school(self) -> None:
        inputs = [
            self.query_one(f"#school-{name}", widgets.Input)
            for name in ["entrance", "lat", "lng", "radius"]
        ]
        if not all(widget.is_valid for widget in inputs):
            self.update_status(student_screen.error("Fix the highlighted fields."))
            return
        entrance, lat, lng, radius = (widget.value.strip() for widget in inputs)
        try:
            school = self.app_state.update_school_fields(
                entrance_time=entrance,
                lat=float(lat),
                lng=float(lng),
                radius_limit=float(radius),
            )
        except ValueError as err:
            self.update_status(student_screen.error(str(err)))
            return
        except database.DBaseError as err:
            self.notify(f"Settings changed but not saved: {err}", severity="error")
            return
        textual.log(f"School configuration updated: {school}")
        self.update_status(student_screen.success("School settings saved."))

    def update_status(self, message: str) -> None:
        """Update the text in the status widget."""
        self.query_one("#status-message", widgets.Static).update(message)
