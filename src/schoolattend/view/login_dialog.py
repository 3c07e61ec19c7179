"""Prompt user for a username and password."""

from textual import app, containers, screen, widgets

import schoolattend.view
from schoolattend.model import state, users_mod


class LoginPrompt(screen.ModalScreen[users_mod.User | None]):
    """A modal screen that asks for credentials."""

    CSS_PATH = schoolattend.view.CSS_FOLDER / "dialogs.tcss"

    app_state: state.AppState
    """Holds the accounts to check credentials against."""

    def __init__(self, app_state: state.AppState) -> None:
        super().__init__()
        self.app_state = app_state

    def compose(self) -> app.ComposeResult:
        """Build the login dialog box."""
        with containers.Vertical(id="login-dialog", classes="modal-dialog"):
            yield widgets.Label("Log In", classes="emphasis")
            yield widgets.Input(placeholder="Username", id="login-username")
            yield widgets.Input(
                placeholder="Password", password=True, id="login-password"
            )
            yield widgets.Static("", id="login-error")
            with containers.Horizontal(classes="dialog-row"):
                yield widgets.Button("Log In", variant="primary", id="submit-login")
                yield widgets.Button("Cancel", id="cancel-login")

    def on_mount(self) -> None:
        """Put focus on the username box."""
        self.query_one("#login-username", widgets.Input).focus()

    def on_button_pressed(self, event: widgets.Button.Pressed) -> None:
        if event.button.id == "submit-login":
            self.check_credentials()
        elif event.button.id == "cancel-login":
            self.dismiss(None)

    def on_input_submitted(self, event: widgets.Input.Submitted) -> None:
        if event.input.id == "login-username":
            self.query_one("#login-password", widgets.Input).focus()
        else:
            self.check_credentials()

    def check_credentials(self) -> None:
        username = self.query_one("#login-username", widgets.Input).value.strip()
        password_input = self.query_one("#login-password", widgets.Input)
        user = self.app_state.authenticate(username, password_input.value)
        if user is None:
            self.query_one("#login-error", widgets.Static).update(
                "[bold red]Incorrect username or password[/]"
            )
            password_input.value = ""
        else:
            self.dismiss(user)
