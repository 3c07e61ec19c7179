"""Main entry point for the school attendance application."""

import textual
from textual import app, binding, containers, reactive, widgets

from schoolattend.model import config, gateway, geo, messenger, state, users_mod
import schoolattend.view
from schoolattend.view import admin_screen, login_dialog, student_screen


class SchoolAttend(app.App):
    """Main application and welcome screen."""

    CSS_PATH = schoolattend.view.CSS_FOLDER / "main.tcss"
    TITLE = "School Attendance System"
    BINDINGS = [
        binding.Binding("l", "login", "Log In"),
        binding.Binding("q", "quit", "Quit"),
    ]

    app_state: state.AppState
    """Users, attendance records, message queue, and school configuration."""
    notifier: gateway.MessageQueueGateway
    """Drafts and queues parent notifications."""
    outbox: messenger.Messenger
    """Opens notifications in an external messaging app."""
    location_feed: geo.LocationFeed
    """Latest position sample from this device."""
    current_user: reactive.reactive[users_mod.User | None] = reactive.reactive(None)

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
        with containers.VerticalGroup(classes="outer"):
            yield widgets.Label("Welcome", classes="emphasis")
            yield widgets.Static(
                "Log in to submit attendance or manage the school.",
                id="main-welcome",
            )
            with containers.HorizontalGroup():
                yield widgets.Label("Database: ", classes="config-row")
                yield widgets.Label(str(config.settings.db_path), id="main-db-path")
            yield widgets.Button("Log In", id="main-login", variant="primary")
        yield widgets.Footer()

    def on_mount(self) -> None:
        """Ask for credentials as soon as the app starts."""
        self.action_login()

    @textual.on(widgets.Button.Pressed, "#main-login")
    def action_login(self) -> None:
        """Show the login dialog and open the screen for the user's role."""

        def _open_dashboard(user: users_mod.User | None) -> None:
            if user is None:
                return
            self.current_user = user
            textual.log(f"Logged in as {user.username} ({user.role})")
            if user.role == users_mod.Role.ADMIN:
                self.push_screen(
                    admin_screen.AdminScreen(
                        self.app_state, self.notifier, self.outbox, self.location_feed
                    )
                )
            else:
                self.push_screen(
                    student_screen.StudentScreen(
                        user, self.app_state, self.notifier, self.location_feed
                    )
                )

        self.push_screen(
            login_dialog.LoginPrompt(self.app_state), callback=_open_dashboard
        )

    def action_logout(self) -> None:
        """Return to the welcome screen."""
        while len(self.screen_stack) > 1:
            self.pop_screen()
        self.current_user = None
        self.notify("Logged out.")

    def watch_current_user(self, user: users_mod.User | None) -> None:
        self.sub_title = "" if user is None else f"{user.name} ({user.role.value})"

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        """Only allow logging in from the welcome screen."""
        if action == "login":
            return len(self.screen_stack) == 1
        return True
