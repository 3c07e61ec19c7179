"""Dialog for adding or editing a student account."""

from typing import Optional

from textual import app, containers, screen, widgets

import schoolattend.view
from schoolattend.features import validators
from schoolattend.model import users_mod


class UserDialog(screen.ModalScreen[Optional[dict[str, str]]]):
    """A dialog for adding or editing student details.

    Dismisses with the entered fields, or None if canceled. A blank password
    keeps the current password, or sets the default password for new
    students.
    """

    CSS_PATH = schoolattend.view.CSS_FOLDER / "dialogs.tcss"

    def __init__(self, student: users_mod.User | None = None) -> None:
        self.student = student
        super().__init__()

    def compose(self) -> app.ComposeResult:
        title = "Edit Student" if self.student else "Add New Student"
        with containers.Vertical(id="user-dialog", classes="modal-dialog"):
            yield widgets.Label(title, classes="emphasis")
            # Existing students show their read-only ID.
            if self.student:
                yield widgets.Label(f"Student ID: {self.student.user_id}")
            yield widgets.Input(
                value=self.student.name if self.student else "",
                placeholder="Full Name",
                id="u-name",
                validators=[validators.NotEmpty()],
            )
            yield widgets.Input(
                value=self.student.username if self.student else "",
                placeholder="Username",
                id="u-username",
                validators=[validators.NotEmpty()],
            )
            yield widgets.Input(
                placeholder=(
                    "Password (leave blank to keep current)"
                    if self.student
                    else f"Password (default {users_mod.DEFAULT_PASSWORD})"
                ),
                password=True,
                id="u-password",
            )
            yield widgets.Input(
                value=self.student.class_name if self.student else "",
                placeholder="Class, e.g., 12 IPA 1",
                id="u-class",
                validators=[validators.NotEmpty()],
            )
            yield widgets.Input(
                value=self.student.parent_contact if self.student else "",
                placeholder="Parent WhatsApp number, e.g., 6281234567890",
                id="u-contact",
                validators=[validators.NotEmpty()],
            )
            yield widgets.Static("", id="u-error")
            with containers.Horizontal(classes="dialog-row"):
                yield widgets.Button("Save", variant="primary", id="save-user")
                yield widgets.Button("Cancel", id="cancel-user")

    def on_mount(self) -> None:
        self.query_one("#u-name", widgets.Input).focus()

    def on_button_pressed(self, event: widgets.Button.Pressed) -> None:
        if event.button.id == "save-user":
            inputs = {
                "name": self.query_one("#u-name", widgets.Input),
                "username": self.query_one("#u-username", widgets.Input),
                "password": self.query_one("#u-password", widgets.Input),
                "class_name": self.query_one("#u-class", widgets.Input),
                "parent_contact": self.query_one("#u-contact", widgets.Input),
            }
            if not all(widget.is_valid for widget in inputs.values()):
                self.query_one("#u-error", widgets.Static).update(
                    "[bold red]Fill in every field except password.[/]"
                )
                return
            self.dismiss({field: widget.value for field, widget in inputs.items()})
        elif event.button.id == "cancel-user":
            self.dismiss(None)
