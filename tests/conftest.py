"""Pytest fixtures."""

import json
import pathlib
import shutil
import types
from typing import Any, Optional

import pytest

from schoolattend.model import (
    database,
    gateway,
    state,
    textgen,
)


TEST_FOLDER = pathlib.Path(__file__).parent
DATA_FOLDER = TEST_FOLDER / "data"
OUTPUT_FOLDER = TEST_FOLDER / "output"


class FakeGenerator:
    """Text generator that returns canned results and records prompts."""

    def __init__(self, text: str | None = "Generated message.", error: str = "offline"):
        self.text = text
        self.error = error
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> textgen.GenerationResult:
        self.prompts.append(prompt)
        if self.text is None:
            return textgen.GenerationResult.failure(self.error)
        return textgen.GenerationResult(text=self.text)


def gemini_with_stub_client(
    response: Any = None, raises: Optional[Exception] = None
) -> textgen.GeminiTextGenerator:
    """Gemini generator whose client returns `response` or raises `raises`."""

    async def generate_content(model: str, contents: str) -> Any:
        if raises is not None:
            raise raises
        return response

    generator = textgen.GeminiTextGenerator(api_key="test-key", model="test-model")
    generator._client = types.SimpleNamespace(
        aio=types.SimpleNamespace(
            models=types.SimpleNamespace(generate_content=generate_content)
        )
    )
    return generator


class FakeMessenger:
    """Messenger that remembers what it was asked to send."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []

    def open_compose(self, contact: str, body: str) -> None:
        self.sent.append((contact, body))


@pytest.fixture()
def empty_output_folder() -> pathlib.Path:
    """Create an empty output folder prior to each test."""
    if OUTPUT_FOLDER.exists():
        for item in OUTPUT_FOLDER.iterdir():
            if item.is_dir():
                shutil.rmtree(item, ignore_errors=True)
            else:
                item.unlink()
    else:
        OUTPUT_FOLDER.mkdir(parents=True)
    return OUTPUT_FOLDER


@pytest.fixture
def empty_database(empty_output_folder: pathlib.Path) -> database.DBase:
    """An empty database, with the store table created."""
    return database.DBase(OUTPUT_FOLDER / "testdatabase.db", create_new=True)


@pytest.fixture
def attendance_test_data() -> dict[str, list]:
    """Get test data as a dictionary keyed by store key."""
    with open(DATA_FOLDER / "testdata-full.json") as jfile:
        test_data = json.load(jfile)
    return test_data


@pytest.fixture
def full_dbase(
    empty_database: database.DBase, attendance_test_data: dict[str, list]
) -> database.DBase:
    """Database with users, records, queued messages, and school config."""
    empty_database.load_from_dict(attendance_test_data)
    return empty_database


@pytest.fixture
def full_state(full_dbase: database.DBase) -> state.AppState:
    """Application state loaded from the full test database."""
    return state.AppState.load(full_dbase)


@pytest.fixture
def fake_generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def failing_generator() -> FakeGenerator:
    return FakeGenerator(text=None)


@pytest.fixture
def fake_messenger() -> FakeMessenger:
    return FakeMessenger()


@pytest.fixture
def notifier(
    full_state: state.AppState, fake_generator: FakeGenerator
) -> gateway.MessageQueueGateway:
    """Gateway with a generator that always succeeds."""
    return gateway.MessageQueueGateway(full_state, fake_generator)
