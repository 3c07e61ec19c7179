"""Draft text with Google Gemini.

Text generation is best-effort. Every failure is returned as a
GenerationResult with an error message instead of being raised, and callers
fall back to fixed text.
"""

from collections.abc import Sequence
import dataclasses
import datetime
import json
from typing import Optional, Protocol

from google import genai
from google.genai import errors as genai_errors
import httpx

from schoolattend.model import records_mod, users_mod


SUMMARY_SAMPLE_SIZE = 50
"""Maximum number of records included in a trend summary prompt."""


@dataclasses.dataclass(frozen=True)
class GenerationResult:
    """Generated text or the reason generation failed."""

    text: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return bool(self.text and self.text.strip())

    @staticmethod
    def failure(error: str) -> "GenerationResult":
        return GenerationResult(error=error)


class TextGenerator(Protocol):
    """Anything that turns a prompt into text."""

    async def generate(self, prompt: str) -> GenerationResult: ...


class GeminiTextGenerator:
    """Generate text with the Gemini API."""

    model: str
    """Gemini model name, e.g., gemini-2.5-flash."""
    _client: genai.Client

    def __init__(self, api_key: str, model: str) -> None:
        self.model = model
        self._client = genai.Client(api_key=api_key)

    async def generate(self, prompt: str) -> GenerationResult:
        """Send the prompt to Gemini and return the response text."""
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model, contents=prompt
            )
        except genai_errors.APIError as err:
            return GenerationResult.failure(f"Gemini API error {err.code}: {err}")
        except httpx.HTTPError as err:
            return GenerationResult.failure(f"Unable to reach Gemini: {err}")
        if not response.text:
            return GenerationResult.failure("Gemini returned an empty response.")
        return GenerationResult(text=response.text.strip())


def notification_prompt(
    student: users_mod.User,
    status: records_mod.AttendanceStatus,
    when: str,
    note: Optional[str],
    language: str,
) -> str:
    """Prompt for a WhatsApp message telling a parent about attendance."""
    return (
        f"Compose a professional and polite WhatsApp message in {language} to a "
        "parent notifying them of their child's attendance.\n"
        f"Student Name: {student.name}\n"
        f"Class: {student.class_name}\n"
        f"Status: {status.label}\n"
        f"Time: {when}\n"
        f"Notes (if any): {note or 'None'}\n\n"
        "The tone should be formal yet informative. Keep it concise."
    )


def summary_prompt(
    records: Sequence[records_mod.AttendanceRecord],
    students: Sequence[users_mod.User],
    language: str,
    now: Optional[datetime.datetime] = None,
) -> str:
    """Prompt for a short analysis of attendance trends."""
    sample = [record.to_dict() for record in records[:SUMMARY_SAMPLE_SIZE]]
    for item in sample:
        item.pop("location", None)
    today = (now or datetime.datetime.now()).date().isoformat()
    return (
        "Analyze the following attendance data for a school and provide a short "
        f"summary in {language} (max 2 paragraphs).\n"
        f"Date: {today}\n"
        f"Total Students: {len(students)}\n"
        f"Records (timestamps are epoch milliseconds): {json.dumps(sample)}\n"
        "Identify any trends or concerns."
    )
