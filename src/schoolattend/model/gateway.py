"""Turn resolved attendance records into queued parent notifications."""

from collections.abc import Sequence
import datetime
from typing import Optional

import textual

from schoolattend.model import (
    messages_mod,
    messenger,
    records_mod,
    state,
    textgen,
    users_mod,
)


SUMMARY_FALLBACK = "Report analysis is not available right now."


def fallback_message(
    student: users_mod.User,
    status: records_mod.AttendanceStatus,
    formatted_time: str,
) -> str:
    """Fixed notification text used when text generation fails."""
    return (
        f"Attendance report: {student.name} ({student.class_name}) "
        f"status {status.label} at {formatted_time}."
    )


class MessageQueueGateway:
    """Draft, queue, send, and discard parent notifications.

    The gateway never raises on text generation problems. A deterministic
    template replaces any failed or empty draft, so every resolved record
    yields exactly one queue item.
    """

    state: state.AppState
    generator: Optional[textgen.TextGenerator]
    """External text generator. Templates are used when None."""
    language: str
    """Language requested from the text generator."""
    timestamp_format: str
    """strftime format for times shown in messages."""

    def __init__(
        self,
        app_state: state.AppState,
        generator: Optional[textgen.TextGenerator] = None,
        language: str = "Indonesian",
        timestamp_format: str = "%d/%m/%Y %H:%M:%S",
    ) -> None:
        self.state = app_state
        self.generator = generator
        self.language = language
        self.timestamp_format = timestamp_format

    def format_time(self, timestamp: datetime.datetime) -> str:
        return timestamp.strftime(self.timestamp_format)

    async def _generate(self, prompt: str) -> textgen.GenerationResult:
        """Run the text generator. Any exception it raises becomes a failure."""
        if self.generator is None:
            return textgen.GenerationResult.failure("No text generator configured.")
        try:
            return await self.generator.generate(prompt)
        except Exception as err:
            textual.log.warning(f"Text generator raised {type(err).__name__}: {err}")
            return textgen.GenerationResult.failure(
                f"{type(err).__name__}: {err}"
            )

    async def compose(
        self, record: records_mod.AttendanceRecord, student: users_mod.User
    ) -> str:
        """Draft the notification text for a record."""
        formatted_time = self.format_time(record.timestamp)
        result = await self._generate(
            textgen.notification_prompt(
                student, record.status, formatted_time, record.note, self.language
            )
        )
        if result.ok:
            return result.text.strip()
        textual.log.warning(f"Using notification template: {result.error}")
        return fallback_message(student, record.status, formatted_time)

    async def draft(
        self, record: records_mod.AttendanceRecord, student: users_mod.User
    ) -> messages_mod.MessageQueueItem:
        """Build the queue item for a record without queueing it.

        Student details are copied before the draft is requested, so they
        reflect the student at submission time.
        """
        message_id = messages_mod.MessageQueueItem.generate_message_id()
        student_id = student.user_id
        student_name = student.name
        class_name = student.class_name
        parent_contact = student.parent_contact
        body = await self.compose(record, student)
        return messages_mod.MessageQueueItem(
            message_id=message_id,
            student_id=student_id,
            student_name=student_name,
            class_name=class_name,
            parent_contact=parent_contact,
            message=body,
            timestamp=record.timestamp,
            status=record.status,
        )

    def queue(self, item: messages_mod.MessageQueueItem) -> bool:
        """Put a drafted item at the front of the queue.

        Returns False if the student was deleted in the meantime.

        Raises:
            DBaseError: The item is queued in memory but was not saved.
        """
        if self.state.push_message(item):
            return True
        textual.log.warning(
            f"Student {item.student_id} was deleted, notification not queued."
        )
        return False

    async def enqueue(
        self, record: records_mod.AttendanceRecord, student: users_mod.User
    ) -> messages_mod.MessageQueueItem:
        """Draft a notification and put it at the front of the queue."""
        item = await self.draft(record, student)
        self.queue(item)
        return item


    def send(
        self, message_id: str, outbox: messenger.Messenger
    ) -> Optional[messages_mod.MessageQueueItem]:
        """Hand a queued message to the messenger and remove it from the queue.

        Unknown IDs are ignored. Returns the sent item or None.
        """
        item = next(
            (item for item in self.state.queue if item.message_id == message_id),
            None,
        )
        if item is None:
            return None
        outbox.open_compose(item.parent_contact, item.message)
        return self.state.remove_message(message_id)

    def discard(self, message_id: str) -> Optional[messages_mod.MessageQueueItem]:
        """Remove a queued message without sending it."""
        return self.state.remove_message(message_id)

    async def summarize(
        self,
        records: Sequence[records_mod.AttendanceRecord],
        students: Sequence[users_mod.User],
    ) -> str:
        """Short analysis of attendance trends for administrators."""
        result = await self._generate(
            textgen.summary_prompt(records, students, self.language)
        )
        if result.ok:
            return result.text.strip()
        textual.log.warning(f"Trend summary unavailable: {result.error}")
        return SUMMARY_FALLBACK
