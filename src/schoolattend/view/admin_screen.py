"""Administrator menu."""

import textual
from textual import app, binding, containers, screen, widgets

from schoolattend.model import gateway, geo, messenger, state
import schoolattend.view
from schoolattend.view import queue_screen, recap_screen, roster_screen, school_screen


class AdminScreen(screen.Screen):
    """Links to the recap, roster, message queue, and settings screens."""

    CSS_PATH = schoolattend.view.CSS_FOLDER / "main.tcss"
    BINDINGS = [
        ("r", "view_recap", "Attendance Recap"),
        ("s", "manage_students", "Manage Students"),
        ("m", "message_queue", "Message Queue"),
        ("c", "school_settings", "School Settings"),
        binding.Binding("escape", "app.logout", "Log Out", show=True),
    ]

    app_state: state.AppState
    notifier: gateway.MessageQueueGateway
    outbox: messenger.Messenger
    location_feed: geo.LocationFeed

    def __init__(
        self,
        app_state: state.AppState,
        notifier: gateway.MessageQueueGateway,
        outbox: messenger.Messenger,
        location_feed: geo.LocationFeed,
    ) -> None:
        super().__init__()
        self.app_state = app_state
        self.notifier = notifier
        self.outbox = outbox
        self.location_feed = location_feed

    def compose(self) -> app.ComposeResult:
        """Add widgets to screen."""
        yield widgets.Header()
        with containers.HorizontalGroup(classes="outer", id="admin-top-menu"):
            yield widgets.Button(
                "Attendance Recap",
                id="admin-view-recap",
                tooltip="Daily, monthly, and semester attendance counts.",
            )
            yield widgets.Button(
                "Manage Students", id="admin-manage-students", classes="attend-main"
            )
            yield widgets.Button(
                "Message Queue", id="admin-message-queue", classes="attend-main"
            )
            yield widgets.Button(
                "School Settings", id="admin-school-settings", classes="attend-main"
            )
        with containers.VerticalGroup(classes="outer"):
            yield widgets.Static("", id="admin-summary")
        yield widgets.Footer()

    def on_mount(self) -> None:
        self.update_summary()

    def on_screen_resume(self) -> None:
        """Refresh counts when returning from another screen."""
        self.update_summary()

    def update_summary(self) -> None:
        school = self.app_state.school
        self.query_one("#admin-summary", widgets.Static).update(
            f"Students: [bold]{len(self.app_state.students)}[/]\n"
            f"Attendance records: [bold]{len(self.app_state.records)}[/]\n"
            f"Queued messages: [bold]{len(self.app_state.queue)}[/]\n"
            f"Entrance time: [bold]{school.entrance_time}[/]   "
            f"School location: [bold]{school.lat:.6f}, {school.lng:.6f}[/]   "
            f"Radius: [bold]{school.radius_limit:g}m[/]"
        )

    @textual.on(widgets.Button.Pressed, "#admin-view-recap")
    def action_view_recap(self) -> None:
        self.app.push_screen(recap_screen.RecapScreen(self.app_state, self.notifier))

    @textual.on(widgets.Button.Pressed, "#admin-manage-students")
    def action_manage_students(self) -> None:
        self.app.push_screen(roster_screen.RosterScreen(self.app_state))

    @textual.on(widgets.Button.Pressed, "#admin-message-queue")
    def action_message_queue(self) -> None:
        self.app.push_screen(
            queue_screen.QueueScreen(self.app_state, self.notifier, self.outbox)
        )

    @textual.on(widgets.Button.Pressed, "#admin-school-settings")
    def action_school_settings(self) -> None:
        self.app.push_screen(
            school_screen.SchoolSettingsScreen(self.app_state, self.location_feed)
        )
