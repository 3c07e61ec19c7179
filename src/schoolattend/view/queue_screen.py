"""Review queued parent notifications and send or discard them."""

from typing import Optional

import textual
from textual import app, binding, containers, screen, widgets

from schoolattend.model import database, gateway, messenger, state
import schoolattend.view
from schoolattend.view import confirm_dialogs, student_screen


class QueueScreen(screen.Screen):
    """Pending notification drafts, most recent first."""

    CSS_PATH = schoolattend.view.CSS_FOLDER / "queue_screen.tcss"
    BINDINGS = [
        binding.Binding("escape", "app.pop_screen", "Back to Admin Menu", show=True),
        ("s", "send_selected", "Send"),
        ("d", "discard_selected", "Discard"),
    ]

    app_state: state.AppState
    notifier: gateway.MessageQueueGateway
    outbox: messenger.Messenger
    _selected_message_id: Optional[str]

    def __init__(
        self,
        app_state: state.AppState,
        notifier: gateway.MessageQueueGateway,
        outbox: messenger.Messenger,
    ) -> None:
        super().__init__()
        self.app_state = app_state
        self.notifier = notifier
        self.outbox = outbox
        self._selected_message_id = None

    def compose(self) -> app.ComposeResult:
        yield widgets.Header()
        with containers.Horizontal():
            with containers.Vertical(id="queue-list-container"):
                yield widgets.Label("Message Queue", classes="emphasis")
                yield widgets.DataTable(zebra_stripes=True, id="queue-table")
            with containers.Vertical(id="queue-actions-container"):
                yield widgets.Label("Message", classes="emphasis")
                yield widgets.Static(
                    "No message selected", id="queue-message-text", markup=False
                )
                with containers.Horizontal(classes="dialog-row"):
                    yield widgets.Button(
                        "Send via WhatsApp",
                        variant="success",
                        id="send-message",
                        disabled=True,
                    )
                    yield widgets.Button(
                        "Discard", variant="error", id="discard-message", disabled=True
                    )
                yield widgets.Static(id="status-message", classes="status")
        yield widgets.Footer()

    def on_mount(self) -> None:
        table = self.query_one("#queue-table", widgets.DataTable)
        table.cursor_type = "row"
        table.add_columns("Time", "Student", "Class", "Status", "Parent Contact")
        self.load_queue()

    def load_queue(self) -> None:
        """Load queued messages into the table."""
        table = self.query_one("#queue-table", widgets.DataTable)
        table.clear()
        for item in self.app_state.queue:
            table.add_row(
                self.notifier.format_time(item.timestamp),
                item.student_name,
                item.class_name,
                item.status.label,
                item.parent_contact,
                key=item.message_id,
            )
        self._select(None)

    def _select(self, message_id: Optional[str]) -> None:
        self._selected_message_id = message_id
        item = next(
            (item for item in self.app_state.queue if item.message_id == message_id),
            None,
        )
        self.query_one("#queue-message-text", widgets.Static).update(
            "No message selected" if item is None else item.message
        )
        self.query_one("#send-message", widgets.Button).disabled = item is None
        self.query_one("#discard-message", widgets.Button).disabled = item is None

    def on_data_table_row_highlighted(
        self, event: widgets.DataTable.RowHighlighted
    ) -> None:
        self._select(event.row_key.value)

    @textual.on(widgets.Button.Pressed, "#send-message")
    def action_send_selected(self) -> None:
        """Open the selected message in WhatsApp and remove it from the queue."""
        if self._selected_message_id is None:
            return
        try:
            item = self.notifier.send(self._selected_message_id, self.outbox)
        except database.DBaseError as err:
            self.notify(f"Queue change not saved: {err}", severity="error")
            item = None
        if item is not None:
            self.update_status(
                student_screen.success(f"Opened message to {item.parent_contact}.")
            )
        self.load_queue()

    @textual.on(widgets.Button.Pressed, "#discard-message")
    def action_discard_selected(self) -> None:
        """Remove the selected message without sending it."""
        message_id = self._selected_message_id
        if message_id is None:
            return

        def _discard(confirmed: bool | None) -> None:
            if not confirmed:
                return
            try:
                self.notifier.discard(message_id)
            except database.DBaseError as err:
                self.notify(f"Queue change not saved: {err}", severity="error")
            self.update_status(student_screen.success("Message discarded."))
            self.load_queue()

        self.app.push_screen(
            confirm_dialogs.GeneralConfirmDialog("discard this message", "Discard"),
            callback=_discard,
        )

    def update_status(self, message: str) -> None:
        """Update the text in the status widget."""
        self.query_one("#status-message", widgets.Static).update(message)
