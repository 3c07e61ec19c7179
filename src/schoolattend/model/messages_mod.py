"""Parent notification drafts waiting for an administrator.

Student name, class, and parent contact are copied into the item when it is
created. Later edits to the student do not change queued items.
"""

import dataclasses
import datetime
import uuid
from typing import Any

from schoolattend.model import records_mod


@dataclasses.dataclass(frozen=True)
class MessageQueueItem:
    """A notification draft for one attendance record."""

    message_id: str
    student_id: str
    student_name: str
    class_name: str
    parent_contact: str
    message: str
    timestamp: datetime.datetime
    status: records_mod.AttendanceStatus

    @staticmethod
    def generate_message_id() -> str:
        """Generate a unique queue item ID."""
        return f"msg-{uuid.uuid4().hex}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "message_id": self.message_id,
            "student_id": self.student_id,
            "student_name": self.student_name,
            "class_name": self.class_name,
            "parent_contact": self.parent_contact,
            "message": self.message,
            "timestamp": records_mod.to_epoch_ms(self.timestamp),
            "status": self.status.value,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "MessageQueueItem":
        return MessageQueueItem(
            message_id=data["message_id"],
            student_id=data["student_id"],
            student_name=data["student_name"],
            class_name=data["class_name"],
            parent_contact=data["parent_contact"],
            message=data["message"],
            timestamp=records_mod.from_epoch_ms(data["timestamp"]),
            status=records_mod.AttendanceStatus(data["status"]),
        )
