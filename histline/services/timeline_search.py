"""
Timeline Search Service - cache-or-generate pipeline for one search request.

Flow for a query:
    cache hit  -> filter cached events by the requested range
    cache miss -> Wikipedia extract -> LLM events -> normalize -> Unsplash
                  images -> persist -> filter for the response
    not found  -> empty result, nothing persisted

Steps run strictly in that order with no retries. Event generation and image
search degrade to empty lists; extract and store failures propagate.

Two concurrent first-time searches for the same query may both run the miss
path; the second insert then fails with DuplicateTimelineError.
"""

import time
from datetime import date

from histline.config import settings
from histline.exceptions import InvalidSearchQueryError
from histline.schemas import (
    SearchSource,
    TimelineEvent,
    TimelineRecordData,
    TimelineSearchResponse,
    YearRange,
)
from histline.services.event_generator import TimelineEventGenerator
from histline.services.event_normalizer import (
    filter_events_by_year,
    normalize_events,
    resolve_year_range,
)
from histline.services.image_provider import UnsplashImageProvider
from histline.services.timeline_store import TimelineStore
from histline.services.wiki_extractor import WikipediaExtractProvider
from histline.utils.logger import setup_logger

logger = setup_logger("timeline_search")


def normalize_query(query: str) -> str:
    return query.lower()


def apply_year_range(
    events: list[TimelineEvent], year_range: YearRange
) -> list[TimelineEvent]:
    if not year_range.is_bounded:
        return list(events)
    return filter_events_by_year(events, year_range.start, year_range.end)


class TimelineSearchService:
    """Resolves search requests against the cache and the external providers."""

    def __init__(
        self,
        store: TimelineStore,
        extract_provider: WikipediaExtractProvider,
        event_generator: TimelineEventGenerator,
        image_provider: UnsplashImageProvider,
        default_start_year: int | None = None,
    ):
        self.store = store
        self.extract_provider = extract_provider
        self.event_generator = event_generator
        self.image_provider = image_provider
        self.default_start_year = (
            settings.default_range_start_year
            if default_start_year is None
            else default_start_year
        )

    async def search(
        self,
        query: str | None,
        start_year_input: str | None = None,
        end_year_input: str | None = None,
        today: date | None = None,
    ) -> TimelineSearchResponse:
        if not query or not query.strip():
            raise InvalidSearchQueryError('Query parameter "q" is required.')

        year_range = resolve_year_range(
            start_year_input,
            end_year_input,
            default_start_year=self.default_start_year,
            today=today,
        )
        normalized = normalize_query(query)

        cached = await self.store.get(normalized)
        if cached is not None:
            logger.info(f"Found '{query}' in cache.")
            return TimelineSearchResponse(
                extract=cached.full_text,
                timeline_events=apply_year_range(cached.timeline_events, year_range),
                images=cached.images,
                source=SearchSource.CACHE,
            )

        return await self._generate_timeline(query, normalized, year_range)

    async def _generate_timeline(
        self, query: str, normalized: str, year_range: YearRange
    ) -> TimelineSearchResponse:
        start_time = time.perf_counter()

        extract = await self.extract_provider.fetch_extract(query)
        if extract.missing:
            logger.info(f"No Wikipedia page for '{query}'; nothing will be cached.")
            return TimelineSearchResponse(
                extract=extract.text,
                timeline_events=[],
                images=[],
                source=SearchSource.NOT_FOUND,
            )

        generated = await self.event_generator.generate_events(extract.text)
        if generated.is_degraded:
            logger.warning(f"Event generation degraded for '{query}': {generated.reason}")
        timeline_events = normalize_events(generated.data)
        dropped = len(generated.data) - len(timeline_events)
        if dropped:
            logger.info(f"Dropped {dropped} generated events without a usable year.")

        image_result = await self.image_provider.fetch_images(query)
        if image_result.is_degraded:
            logger.warning(f"Image search degraded for '{query}': {image_result.reason}")

        record = await self.store.put(
            TimelineRecordData(
                query=normalized,
                full_text=extract.text,
                timeline_events=timeline_events,
                images=image_result.data,
            )
        )
        logger.info(
            f"Generated timeline for '{query}' with {len(record.timeline_events)} events "
            f"and {len(record.images)} images in {time.perf_counter() - start_time:.2f}s"
        )

        return TimelineSearchResponse(
            extract=record.full_text,
            timeline_events=apply_year_range(record.timeline_events, year_range),
            images=record.images,
            source=SearchSource.GENERATED,
        )
