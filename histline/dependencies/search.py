import httpx
from fastapi import HTTPException, Request, status

from histline.config import settings
from histline.services.dataset_search import (
    DatabaseDatasetSource,
    DatasetSearchService,
    DatasetSource,
    InMemoryDatasetSource,
)
from histline.services.event_generator import TimelineEventGenerator
from histline.services.image_provider import UnsplashImageProvider
from histline.services.llm_interface import LLMInterface
from histline.services.timeline_search import TimelineSearchService
from histline.services.timeline_store import (
    DatabaseTimelineStore,
    InMemoryTimelineStore,
    TimelineStore,
)
from histline.services.wiki_extractor import WikipediaExtractProvider
from histline.utils.logger import setup_logger

logger = setup_logger("dependencies")


def build_timeline_store(backend: str | None = None) -> TimelineStore:
    backend = backend or settings.timeline_store_backend
    if backend == "memory":
        logger.warning("Using in-memory timeline store; cached timelines are lost on restart.")
        return InMemoryTimelineStore()
    return DatabaseTimelineStore()


def build_timeline_search_service(
    http_client: httpx.AsyncClient,
    llm_client: LLMInterface | None,
    store: TimelineStore,
) -> TimelineSearchService:
    """Wire the search pipeline from collaborators created once at startup."""
    return TimelineSearchService(
        store=store,
        extract_provider=WikipediaExtractProvider(http_client),
        event_generator=TimelineEventGenerator(llm_client),
        image_provider=UnsplashImageProvider(http_client),
    )


def get_timeline_search_service(request: Request) -> TimelineSearchService:
    """FastAPI dependency returning the service built during application startup."""
    service = getattr(request.app.state, "timeline_search_service", None)
    if service is None:
        logger.critical(
            "Timeline search service requested, but it was not initialized at startup."
        )
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Timeline search service is not available.",
        )
    return service


def build_dataset_source(backend: str | None = None) -> DatasetSource:
    backend = backend or settings.timeline_store_backend
    if backend == "memory":
        return InMemoryDatasetSource()
    return DatabaseDatasetSource()


def get_dataset_search_service(request: Request) -> DatasetSearchService:
    service = getattr(request.app.state, "dataset_search_service", None)
    if service is None:
        logger.critical(
            "Dataset search service requested, but it was not initialized at startup."
        )
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Dataset search service is not available.",
        )
    return service
