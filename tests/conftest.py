"""
Shared fixtures and fakes for the test suite.

The search pipeline is assembled from fakes for the three external providers
and an in-memory store, so no test talks to Wikipedia, an LLM or Unsplash.
"""

from collections.abc import Callable

import pytest

from histline.exceptions import ExtractProviderError
from histline.schemas import ExtractResult, ProviderResult, TimelineImage
from histline.services.event_generator import TimelineEventGenerator
from histline.services.llm_interface import LLMInterface
from histline.services.timeline_search import TimelineSearchService
from histline.services.timeline_store import InMemoryTimelineStore

ROME_EXTRACT = "Rome is the capital city of Italy. The ancient city..."
ROME_EVENTS_RESPONSE = (
    "Here is the timeline you asked for:\n"
    '[{"date": "476", "summary": "Fall"}, {"date": "753 BC", "summary": "Founded"}]\n'
    "Let me know if you need more."
)


class FakeLLMClient(LLMInterface):
    provider_name = "fake"

    def __init__(self, response: str = "[]", error: Exception | None = None):
        self.response = response
        self.error = error
        self.prompts: list[str] = []

    async def generate_text(self, prompt, temperature=0.7, max_tokens=None, **kwargs):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response


class FakeExtractProvider:
    def __init__(
        self,
        text: str = ROME_EXTRACT,
        missing: bool = False,
        error: Exception | None = None,
    ):
        self.result = ExtractResult(text=text, missing=missing)
        self.error = error
        self.calls: list[str] = []

    async def fetch_extract(self, query: str) -> ExtractResult:
        self.calls.append(query)
        if self.error is not None:
            raise self.error
        return self.result


class FakeImageProvider:
    def __init__(self, images: list[TimelineImage] | None = None, degraded: bool = False):
        self.images = images if images is not None else [
            TimelineImage(src="https://images.example/rome.jpg", alt="Colosseum")
        ]
        self.degraded = degraded
        self.calls: list[str] = []

    async def fetch_images(self, query: str):
        self.calls.append(query)
        if self.degraded:
            return ProviderResult.degraded([], "Unsplash request failed: ConnectError")
        return ProviderResult.ok(list(self.images))


@pytest.fixture
def store() -> InMemoryTimelineStore:
    return InMemoryTimelineStore()


@pytest.fixture
def extract_provider() -> FakeExtractProvider:
    return FakeExtractProvider()


@pytest.fixture
def image_provider() -> FakeImageProvider:
    return FakeImageProvider()


@pytest.fixture
def llm_client() -> FakeLLMClient:
    return FakeLLMClient(response=ROME_EVENTS_RESPONSE)


@pytest.fixture
def make_service(
    store, extract_provider, image_provider, llm_client
) -> Callable[..., TimelineSearchService]:
    """Build a search service; any collaborator can be swapped per test."""

    def _make(**overrides) -> TimelineSearchService:
        return TimelineSearchService(
            store=overrides.get("store", store),
            extract_provider=overrides.get("extract_provider", extract_provider),
            event_generator=TimelineEventGenerator(
                overrides.get("llm_client", llm_client)
            ),
            image_provider=overrides.get("image_provider", image_provider),
            default_start_year=1900,
        )

    return _make


@pytest.fixture
def failing_extract_provider() -> FakeExtractProvider:
    return FakeExtractProvider(
        error=ExtractProviderError("Wikipedia request failed: timed out", query="Rome")
    )
