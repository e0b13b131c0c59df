"""
Event generation: turns an extract into dated timeline events with an LLM.

Generation is best-effort. Client errors, unparseable output and malformed
elements all reduce to fewer (or zero) events; nothing here raises. Whether
the dates are actually usable years is decided later by the normalizer.
"""

from pydantic import ValidationError

from histline.config import settings
from histline.prompts import build_timeline_events_prompt
from histline.schemas import ProviderResult, TimelineEvent
from histline.services.llm_interface import LLMInterface
from histline.utils.json_parser import extract_json_array_from_llm_response
from histline.utils.logger import setup_logger

logger = setup_logger("event_generator")


def parse_timeline_events(raw_text: str | None) -> list[TimelineEvent] | None:
    """
    Parse the model output into events.

    Returns None if no JSON array could be recovered; elements that are not
    {date, summary} objects are skipped.
    """
    items = extract_json_array_from_llm_response(raw_text)
    if items is None:
        return None

    events = []
    for index, item in enumerate(items):
        try:
            events.append(TimelineEvent.model_validate(item))
        except ValidationError as e:
            logger.debug(f"Skipping malformed event at index {index}: {e.errors()}")
    if len(events) < len(items):
        logger.warning(
            f"Discarded {len(items) - len(events)} of {len(items)} generated events with an invalid shape"
        )
    return events


class TimelineEventGenerator:
    def __init__(
        self,
        llm_client: LLMInterface | None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ):
        self.llm_client = llm_client
        self.temperature = (
            settings.llm_event_generation_temperature
            if temperature is None
            else temperature
        )
        self.max_tokens = max_tokens or settings.llm_event_generation_max_tokens

    async def generate_events(self, text: str) -> ProviderResult[list[TimelineEvent]]:
        if self.llm_client is None:
            logger.error("No LLM client configured. Skipping event generation.")
            return ProviderResult.degraded([], "LLM client is not configured")

        prompt = build_timeline_events_prompt(text)
        try:
            raw_text = await self.llm_client.generate_text(
                prompt, temperature=self.temperature, max_tokens=self.max_tokens
            )
        except Exception as e:
            logger.error(
                f"Event generation failed with {self.llm_client.provider_name}: {type(e).__name__}: {e}",
                exc_info=True,
            )
            return ProviderResult.degraded([], f"LLM call failed: {type(e).__name__}")

        events = parse_timeline_events(raw_text)
        if events is None:
            logger.error(
                f"Could not find a JSON array in LLM response ({len(raw_text or '')} chars)"
            )
            logger.debug(f"Unparseable LLM response: {raw_text!r}")
            return ProviderResult.degraded([], "LLM response is not a JSON array")

        logger.info(f"LLM generated {len(events)} events")
        return ProviderResult.ok(events)
