"""
LLM Validation Script: Timeline Event Generation

Sends a Wikipedia-style extract to the configured LLM provider and prints the
dated events it produces, in the order the search pipeline would cache them.
Skipped when no LLM provider key is configured; intended for qualitative
review of the model output rather than CI.
"""

import pytest

from histline.services.event_generator import TimelineEventGenerator
from histline.services.event_normalizer import normalize_events
from histline.services.llm_service import create_llm_client

TEST_INPUT_TEXT = """
Rome is the capital city of Italy. According to the founding myth of the city,
Rome was founded on 21 April 753 BC by the twins Romulus and Remus. The city
became the capital of the Roman Republic in 509 BC and later of the Roman
Empire, which was proclaimed when Augustus became the first emperor in 27 BC.
The Western Roman Empire fell in 476 when Odoacer deposed Romulus Augustulus.
Rome became the capital of the Kingdom of Italy in 1871, and the Treaty of
Rome establishing the European Economic Community was signed there in 1957.
"""


@pytest.fixture(scope="module")
def llm_client():
    client = create_llm_client()
    if client is None:
        pytest.skip("No LLM provider is configured.")
    return client


@pytest.mark.asyncio
async def test_llm_timeline_event_generation(llm_client):
    print(f"\n--- Testing timeline event generation with {llm_client.provider_name} ---")

    result = await TimelineEventGenerator(llm_client).generate_events(TEST_INPUT_TEXT)

    print(f"Status: {result.status.value} {result.reason or ''}")
    events = normalize_events(result.data)
    for event in events:
        print(f"  {event.date:>8}  {event.summary}")
    print(f"Dropped {len(result.data) - len(events)} events without a usable year.")

    assert not result.is_degraded, result.reason
    assert len(events) > 0, "The model should find at least one dated event."
    assert any(event.date.upper().endswith("BC") for event in events)
