import json
from typing import Any

import pytest

from anecdote.analytics import AnalyticsSink
from anecdote.launch import MappingLaunchParameters
from anecdote.llm.base import InlineImage, LLMClient
from anecdote.models import SubjectCategory, Suggestion
from anecdote.persistence import HistoryStore, MemoryKeyValueStore, SessionStore
from anecdote.services import ApplicationController, GenerationClient


def build_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "title": "The Falling Fruit",
        "story": (
            "In 1666, a young Isaac Newton sat in his mother's orchard at Woolsthorpe. "
            "Legend says an apple fell nearby, and he wondered why it fell straight down."
        ),
        "takeaway": "Curiosity about ordinary events can lead to universal laws.",
        "funFact": "Newton's apple tree still grows at Woolsthorpe Manor.",
        "topic": "Physics",
        "emoji": "🍎",
        "relatedTopics": ["Laws of Motion", "Kepler's Laws", "Calculus"],
        "toughWords": [
            {"word": "orchard", "definition": "a garden of fruit trees"},
            {"word": "legend", "definition": "a popular, unproven story"},
            {"word": "universal", "definition": "applying everywhere"},
        ],
        "ncertTopic": "Class 9 Science: Gravitation",
    }
    payload.update(overrides)
    return payload


class FakeLLM(LLMClient):
    """Scriptable provider. `payload` may be a dict, raw string, None, or callable(topic)."""

    def __init__(self) -> None:
        self.payload: Any = build_payload()
        self.text_error: Exception | None = None
        self.image_parts: list[InlineImage] = [InlineImage(mime_type="image/png", data="aGVsbG8=")]
        self.image_error: Exception | None = None
        self.text_calls: list[dict[str, Any]] = []
        self.image_calls: list[str] = []

    async def complete_json(self, messages, *, schema, schema_name, temperature=None):
        self.text_calls.append(
            {"messages": messages, "schema": schema, "schema_name": schema_name, "temperature": temperature}
        )
        if self.text_error:
            raise self.text_error
        payload = self.payload
        if callable(payload):
            payload = payload(messages[-1]["content"])
        if payload is None or isinstance(payload, str):
            return payload
        return json.dumps(payload)

    async def generate_image(self, prompt):
        self.image_calls.append(prompt)
        if self.image_error:
            raise self.image_error
        return self.image_parts


class RecordingAnalytics(AnalyticsSink):
    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def track(self, event_name, params=None):
        self.events.append((event_name, params or {}))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]


DEFAULTS = [
    Suggestion(label="Newton's Apple", category=SubjectCategory.SCIENCE),
    Suggestion(label="Pythagoras", category=SubjectCategory.MATH),
    Suggestion(label="The Trojan Horse", category=SubjectCategory.HISTORY),
    Suggestion(label="Shakespeare", category=SubjectCategory.LITERATURE),
    Suggestion(label="Discovery of Penicillin", category=SubjectCategory.SCIENCE),
    Suggestion(label="Leonardo da Vinci", category=SubjectCategory.ART),
]


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def make_payload():
    return build_payload


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def analytics():
    return RecordingAnalytics()


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
def launch_params():
    return MappingLaunchParameters()


@pytest.fixture
def make_controller(fake_llm, analytics, launch_params):
    def _make(store=None, **kwargs) -> ApplicationController:
        store = store if store is not None else MemoryKeyValueStore()
        kwargs.setdefault("launch_params", launch_params)
        kwargs.setdefault("analytics", analytics)
        kwargs.setdefault("default_suggestions", DEFAULTS)
        kwargs.setdefault("supported_languages", ["English", "Hindi", "French"])
        return ApplicationController(
            SessionStore(store),
            HistoryStore(store),
            GenerationClient(fake_llm),
            **kwargs,
        )

    return _make


@pytest.fixture
def controller(make_controller, kv):
    return make_controller(kv)
