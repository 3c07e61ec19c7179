"""View the student roster and add, edit, or delete students."""

from typing import Optional

import textual
from textual import app, binding, containers, screen, widgets

from schoolattend.model import database, state, users_mod
import schoolattend.view
from schoolattend.view import confirm_dialogs, student_screen, user_dialog


class RosterScreen(screen.Screen):
    """Add, edit, and delete students."""

    app_state: state.AppState
    _selected_student_id: Optional[str]
    """Currently selected student."""
    _students: dict[str, users_mod.User]
    """Students currently loaded in the datatable."""

    CSS_PATH = schoolattend.view.CSS_FOLDER / "roster_screen.tcss"
    BINDINGS = [
        binding.Binding("escape", "app.pop_screen", "Back to Admin Menu", show=True),
    ]

    def __init__(self, app_state: state.AppState) -> None:
        super().__init__()
        self.app_state = app_state
        self._students = {}
        self._selected_student_id = None

    def compose(self) -> app.ComposeResult:
        """Build the roster screen's user interface."""
        yield widgets.Header()
        with containers.Horizontal():
            with containers.Vertical(id="student-list-container"):
                yield widgets.Input(
                    placeholder="Search name, class, or username...",
                    id="roster-search",
                )
                yield widgets.DataTable(zebra_stripes=True, id="student-table")
            with containers.Vertical(id="students-actions-container"):
                yield widgets.Label("Actions", classes="emphasis")
                with containers.ScrollableContainer():
                    yield widgets.Label("Sort by:")
                    yield widgets.Select(
                        [
                            (key.replace("_", " ").title(), key)
                            for key in users_mod.SORT_KEYS
                        ],
                        value="name",
                        allow_blank=False,
                        id="roster-sort-key",
                    )
                    with containers.Horizontal(id="roster-sort-toggle"):
                        yield widgets.Label("Descending:")
                        yield widgets.Switch(False, id="roster-descending-switch")
                    yield widgets.Static(
                        "No student selected",
                        id="students-selection-indicator",
                        classes="selection-info",
                    )
                    yield widgets.Static()
                    yield widgets.Button(
                        "Add Student",
                        variant="success",
                        id="add-student",
                        tooltip="Add a new student account.",
                    )
                    yield widgets.Button(
                        "Edit Selected",
                        id="edit-student",
                        disabled=True,
                        tooltip="Edit data for a student.",
                    )
                    yield widgets.Button(
                        "Delete Selected",
                        variant="error",
                        id="delete-student",
                        disabled=True,
                        tooltip="Delete a student with their records and messages.",
                    )
                    yield widgets.Static(id="status-message", classes="status")
        yield widgets.Footer()

    def on_mount(self) -> None:
        """Initialize the datatable widget."""
        table = self.query_one("#student-table", widgets.DataTable)
        table.cursor_type = "row"
        table.add_columns("Name", "Username", "Class", "Parent Contact", "ID")
        self.load_student_data()

    def load_student_data(self) -> None:
        """Load filtered and sorted students into the datatable widget."""
        search = self.query_one("#roster-search", widgets.Input).value
        sort_key = self.query_one("#roster-sort-key", widgets.Select).value
        descending = self.query_one("#roster-descending-switch", widgets.Switch).value
        students = users_mod.filter_and_sort(
            self.app_state.students,
            search,
            sort_key if isinstance(sort_key, str) else "name",
            descending,
        )
        table = self.query_one("#student-table", widgets.DataTable)
        table.clear()
        self._students = {student.user_id: student for student in students}
        for student in students:
            table.add_row(
                student.name,
                student.username,
                student.class_name,
                student.parent_contact,
                student.user_id,
                key=student.user_id,
            )
        textual.log(f"Loaded {len(students)} students, search='{search}'")

    def _clear_selection(self) -> None:
        self._selected_student_id = None
        self.query_one("#edit-student", widgets.Button).disabled = True
        self.query_one("#delete-student", widgets.Button).disabled = True
        self.update_selected("No student selected")

    @textual.on(widgets.Input.Changed, "#roster-search")
    @textual.on(widgets.Select.Changed, "#roster-sort-key")
    @textual.on(widgets.Switch.Changed, "#roster-descending-switch")
    def on_filter_changed(self) -> None:
        """Reload the table when the search or sort order changes."""
        self.load_student_data()
        self._clear_selection()

    def on_data_table_row_selected(self, event: widgets.DataTable.RowSelected) -> None:
        """Select a row in the datatable."""
        self._selected_student_id = event.row_key.value
        if self._selected_student_id is None:
            return
        student = self._students[self._selected_student_id]
        self.query_one("#edit-student", widgets.Button).disabled = False
        self.query_one("#delete-student", widgets.Button).disabled = False
        self.update_selected(
            f"[bold]Selected:[/bold]\n{student.name}\n"
            f"{student.class_name}\nID: {student.user_id}"
        )

    async def on_button_pressed(self, event: widgets.Button.Pressed) -> None:
        """Respond to button presses."""
        if event.button.id == "add-student":
            await self.action_add_student()
        elif event.button.id == "edit-student":
            await self.action_edit_student()
        elif event.button.id == "delete-student":
            await self.action_delete_student()

    async def action_add_student(self) -> None:
        """Show the user dialog and add a new student."""

        def on_dialog_closed(fields: dict[str, str] | None) -> None:
            if fields is None:
                return
            student = users_mod.User.new_student(**fields)
            try:
                self.app_state.add_user(student)
            except ValueError as err:
                self.update_status(student_screen.error(f"Error adding student: {err}"))
                return
            except database.DBaseError as err:
                self.notify(f"Student added but not saved: {err}", severity="error")
            self.load_student_data()
            self.update_status(
                student_screen.success(f"Student added. ID: {student.user_id}")
            )

        await self.app.push_screen(user_dialog.UserDialog(), callback=on_dialog_closed)

    async def action_edit_student(self) -> None:
        if self._selected_student_id is None:
            return
        student = self._students[self._selected_student_id]

        def on_dialog_closed(fields: dict[str, str] | None) -> None:
            if fields is None:
                return
            try:
                self.app_state.update_user(student.edited(**fields))
            except (KeyError, ValueError) as err:
                self.update_status(
                    student_screen.error(f"Error updating student: {err}")
                )
                return
            except database.DBaseError as err:
                self.notify(f"Student updated but not saved: {err}", severity="error")
            self.update_status(student_screen.success("Student updated successfully."))
            self.load_student_data()
            self._clear_selection()

        await self.app.push_screen(
            user_dialog.UserDialog(student=student), callback=on_dialog_closed
        )

    async def action_delete_student(self) -> None:
        if self._selected_student_id is None:
            return
        student = self._students[self._selected_student_id]

        def on_confirmed(confirmed: bool | None) -> None:
            if not confirmed:
                return
            try:
                self.app_state.delete_user(student.user_id)
            except database.DBaseError as err:
                self.notify(f"Student deleted but not saved: {err}", severity="error")
            self.update_status(student_screen.success(f"Deleted {student.name}."))
            self.load_student_data()
            self._clear_selection()

        await self.app.push_screen(
            confirm_dialogs.DeleteConfirmDialog(
                student.name,
                student.user_id,
                len(self.app_state.records_for(student.user_id)),
            ),
            callback=on_confirmed,
        )

    def update_status(self, message: str) -> None:
        """Update the text in the status widget."""
        self.query_one("#status-message", widgets.Static).update(message)

    def update_selected(self, message: str) -> None:
        self.query_one("#students-selection-indicator", widgets.Static).update(message)
