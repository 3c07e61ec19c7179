"""Test drafting, queueing, sending, and discarding parent notifications."""

import asyncio
import datetime
import types

from google.genai import errors as genai_errors
import httpx
import pytest

from schoolattend.model import (
    gateway,
    geo,
    messenger,
    records_mod,
    state,
    textgen,
)
from schoolattend.model.records_mod import AttendanceStatus

from conftest import FakeGenerator, FakeMessenger, gemini_with_stub_client


NOW = datetime.datetime(2025, 9, 16, 7, 45, 5)


def late_record(student_id: str) -> records_mod.AttendanceRecord:
    return records_mod.AttendanceRecord(
        record_id="record-late",
        student_id=student_id,
        status=AttendanceStatus.LATE,
        timestamp=NOW,
        location=geo.Location(-6.2, 106.8166, 0.0),
    )


def test_enqueue_with_generated_text(
    full_state: state.AppState,
    notifier: gateway.MessageQueueGateway,
    fake_generator: FakeGenerator,
) -> None:
    """A successful draft becomes one queue item at the front."""
    # Arrange
    student = full_state.find_user("student-3")
    # Act
    item = asyncio.run(notifier.enqueue(late_record(student.user_id), student))
    # Assert
    assert item.message == "Generated message."
    assert full_state.queue[0] == item
    assert len(full_state.queue) == 3
    assert item.student_name == "Andi Wijaya"
    assert item.parent_contact == "+62 812-5555-0101"
    assert item.status == AttendanceStatus.LATE
    assert item.timestamp == NOW
    assert "Andi Wijaya" in fake_generator.prompts[0]
    assert "Late" in fake_generator.prompts[0]


def test_enqueue_falls_back_to_template(
    full_state: state.AppState, failing_generator: FakeGenerator
) -> None:
    """A failed draft still yields exactly one item with the fixed text."""
    # Arrange
    notifier = gateway.MessageQueueGateway(full_state, failing_generator)
    student = full_state.find_user("student-1")
    # Act
    item = asyncio.run(notifier.enqueue(late_record(student.user_id), student))
    # Assert
    assert item.message == (
        "Attendance report: Budi Santoso (12 IPA 1) status Late at 16/09/2025 07:45:05."
    )
    assert [entry for entry in full_state.queue if entry.message_id == item.message_id]
    assert len(full_state.queue) == 3


def test_enqueue_without_generator(full_state: state.AppState) -> None:
    """Without a text generator the template is always used."""
    # Arrange
    notifier = gateway.MessageQueueGateway(
        full_state, None, timestamp_format="%H:%M"
    )
    student = full_state.find_user("student-2")
    # Act
    item = asyncio.run(notifier.enqueue(late_record(student.user_id), student))
    # Assert
    assert item.message == gateway.fallback_message(
        student, AttendanceStatus.LATE, "07:45"
    )


def test_enqueue_blank_text_uses_template(full_state: state.AppState) -> None:
    """Whitespace-only drafts count as failures."""
    # Arrange
    notifier = gateway.MessageQueueGateway(full_state, FakeGenerator(text="  \n"))
    student = full_state.find_user("student-1")
    # Act
    item = asyncio.run(notifier.enqueue(late_record(student.user_id), student))
    # Assert
    assert item.message.startswith("Attendance report: Budi Santoso")


def test_enqueue_for_student_deleted_during_draft(
    full_state: state.AppState,
) -> None:
    """The queue never references a student deleted while drafting."""

    # Arrange
    class DeletingGenerator:
        async def generate(self, prompt: str) -> textgen.GenerationResult:
            full_state.delete_user("student-1")
            return textgen.GenerationResult(text="Too late.")

    notifier = gateway.MessageQueueGateway(full_state, DeletingGenerator())
    student = full_state.find_user("student-1")
    # Act
    item = asyncio.run(notifier.enqueue(late_record(student.user_id), student))
    # Assert
    assert item.student_name == "Budi Santoso"
    assert all(entry.student_id != "student-1" for entry in full_state.queue)


def test_send_removes_item(
    full_state: state.AppState,
    notifier: gateway.MessageQueueGateway,
    fake_messenger: FakeMessenger,
) -> None:
    """Sending hands the message to the messenger and dequeues it."""
    # Act
    sent = notifier.send("msg-0001", fake_messenger)
    # Assert
    assert sent.message_id == "msg-0001"
    assert fake_messenger.sent == [
        ("6281234567890", "Budi Santoso arrived late today.")
    ]
    assert [item.message_id for item in full_state.queue] == ["msg-0002"]
    reloaded = state.AppState.load(full_state.dbase)
    assert [item.message_id for item in reloaded.queue] == ["msg-0002"]


def test_send_unknown_id(
    full_state: state.AppState,
    notifier: gateway.MessageQueueGateway,
    fake_messenger: FakeMessenger,
) -> None:
    """Unknown IDs are ignored."""
    # Act
    sent = notifier.send("msg-missing", fake_messenger)
    # Assert
    assert sent is None
    assert fake_messenger.sent == []
    assert len(full_state.queue) == 2


def test_discard_does_not_send(
    full_state: state.AppState,
    notifier: gateway.MessageQueueGateway,
    fake_messenger: FakeMessenger,
) -> None:
    """Discarded items are removed without contacting the messenger."""
    # Act
    discarded = notifier.discard("msg-0002")
    notifier.discard("msg-0002")
    # Assert
    assert discarded.message_id == "msg-0002"
    assert fake_messenger.sent == []
    assert [item.message_id for item in full_state.queue] == ["msg-0001"]


def test_summarize(
    full_state: state.AppState,
    notifier: gateway.MessageQueueGateway,
    fake_generator: FakeGenerator,
) -> None:
    """Summaries include the student count and omit locations."""
    # Act
    summary = asyncio.run(notifier.summarize(full_state.records, full_state.students))
    # Assert
    assert summary == "Generated message."
    prompt = fake_generator.prompts[0]
    assert "Total Students: 3" in prompt
    assert "record-0005" in prompt
    assert "distance" not in prompt


def test_summarize_fallback(
    full_state: state.AppState, failing_generator: FakeGenerator
) -> None:
    """A failed summary returns the fixed fallback text."""
    # Arrange
    notifier = gateway.MessageQueueGateway(full_state, failing_generator)
    # Act
    summary = asyncio.run(notifier.summarize(full_state.records, full_state.students))
    # Assert
    assert summary == gateway.SUMMARY_FALLBACK


def test_summary_prompt_samples_records(full_state: state.AppState) -> None:
    """At most SUMMARY_SAMPLE_SIZE records are sent."""
    # Arrange
    record = full_state.records[0]
    records = [record] * (textgen.SUMMARY_SAMPLE_SIZE + 10)
    # Act
    prompt = textgen.summary_prompt(
        records, full_state.students, "English", datetime.datetime(2025, 9, 16)
    )
    # Assert
    assert prompt.count(record.record_id) == textgen.SUMMARY_SAMPLE_SIZE
    assert "Date: 2025-09-16" in prompt
    assert "in English" in prompt


@pytest.mark.parametrize(
    "contact, number",
    [("6281234567890", "6281234567890"), ("+62 812-5555-0101", "6281255550101")],
)
def test_whatsapp_url(contact: str, number: str) -> None:
    """Only digits are kept from the contact and the text is URL encoded."""
    # Arrange
    outbox = messenger.WhatsAppMessenger("https://wa.me/")
    # Act
    url = outbox.compose_url(contact, "Budi hadir & tepat waktu")
    # Assert
    assert url == f"https://wa.me/{number}?text=Budi%20hadir%20%26%20tepat%20waktu"


def test_enqueue_when_generator_raises(full_state: state.AppState) -> None:
    """Exceptions from the generator fall back to the template."""

    # Arrange
    class RaisingGenerator:
        async def generate(self, prompt: str) -> textgen.GenerationResult:
            raise TimeoutError("slow")

    notifier = gateway.MessageQueueGateway(full_state, RaisingGenerator())
    student = full_state.find_user("student-1")
    # Act
    item = asyncio.run(notifier.enqueue(late_record(student.user_id), student))
    # Assert
    assert item.message.startswith("Attendance report: Budi Santoso")
    assert full_state.queue[0] == item
    assert len(full_state.queue) == 3


def test_summarize_when_generator_raises(full_state: state.AppState) -> None:
    """Summaries fall back when the Gemini client raises an unexpected error."""
    # Arrange
    notifier = gateway.MessageQueueGateway(
        full_state, gemini_with_stub_client(raises=RuntimeError("bad payload"))
    )
    # Act
    summary = asyncio.run(notifier.summarize(full_state.records, full_state.students))
    # Assert
    assert summary == gateway.SUMMARY_FALLBACK


def test_gemini_returns_response_text() -> None:
    """Response text is stripped."""
    # Arrange
    generator = gemini_with_stub_client(
        response=types.SimpleNamespace(text="  Halo, Bapak/Ibu.  ")
    )
    # Act
    result = asyncio.run(generator.generate("prompt"))
    # Assert
    assert result.ok
    assert result.text == "Halo, Bapak/Ibu."
    assert result.error is None


@pytest.mark.parametrize("text", [None, ""])
def test_gemini_empty_response(text: str | None) -> None:
    """An empty response is a failure."""
    # Arrange
    generator = gemini_with_stub_client(response=types.SimpleNamespace(text=text))
    # Act
    result = asyncio.run(generator.generate("prompt"))
    # Assert
    assert not result.ok
    assert "empty" in result.error


def test_gemini_api_error() -> None:
    """API errors are returned with their status code."""
    # Arrange
    err = genai_errors.APIError(
        429,
        {"error": {"code": 429, "message": "Quota", "status": "RESOURCE_EXHAUSTED"}},
    )
    generator = gemini_with_stub_client(raises=err)
    # Act
    result = asyncio.run(generator.generate("prompt"))
    # Assert
    assert not result.ok
    assert "429" in result.error


def test_gemini_network_error() -> None:
    """Transport errors are returned as failures."""
    # Arrange
    generator = gemini_with_stub_client(raises=httpx.ConnectError("refused"))
    # Act
    result = asyncio.run(generator.generate("prompt"))
    # Assert
    assert not result.ok
    assert "refused" in result.error
