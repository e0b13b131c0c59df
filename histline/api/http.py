"""
HTTP API Routes - timeline search, bubble dataset lookup and health check.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from histline.dependencies.search import (
    get_dataset_search_service,
    get_timeline_search_service,
)
from histline.exceptions import InvalidDatasetQueryError, InvalidSearchQueryError
from histline.schemas import MessageResponse, TimelineSearchResponse
from histline.services.dataset_search import DatasetSearchService
from histline.services.timeline_search import TimelineSearchService
from histline.utils.logger import setup_logger

logger = setup_logger("api")

router = APIRouter()


@router.get("/api/", response_model=MessageResponse)
async def read_root():
    """API health check endpoint."""
    return MessageResponse(message="Histline API is running!")


@router.get("/search", response_model=TimelineSearchResponse)
async def search_timeline(
    q: str | None = Query(None, description="Topic to search for"),
    start_year: str | None = Query(
        None, alias="startYear", description='Range start, e.g. "1900" or "500 BC"'
    ),
    end_year: str | None = Query(
        None, alias="endYear", description='Range end, e.g. "2000" or "44 BC"'
    ),
    service: TimelineSearchService = Depends(get_timeline_search_service),
):
    """
    Search a topic and return its extract, dated events and images.

    Served from the cache when the lower-cased query was searched before,
    otherwise generated from Wikipedia, the LLM and Unsplash and cached.
    startYear/endYear restrict the returned events; a lone startYear runs to
    the current year and a lone endYear starts at 1900.
    """
    try:
        return await service.search(q, start_year, end_year)
    except InvalidSearchQueryError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except OSError:
        # Connection-level failures are mapped to 503 by the application handler
        raise
    except Exception as e:
        logger.error(f"Error in /search for query '{q}': {e}", exc_info=True)
        raise HTTPException(
            status_code=500, detail=f"Failed to process search request: {str(e)}"
        ) from e


@router.get("/api/dataset", response_model=list[dict[str, Any]])
async def search_dataset(
    field: str | None = Query(
        None, alias="type", description='Field to match, e.g. "Title", "Country", "Year"'
    ),
    topic: str | None = Query(None, description="Value or pattern to look for"),
    service: DatasetSearchService = Depends(get_dataset_search_service),
):
    """
    Bubble timeline dataset lookup.

    type=Year matches the numeric year exactly; any other field is searched
    case-insensitively with topic as a regular expression.
    """
    try:
        return await service.search(field, topic)
    except InvalidDatasetQueryError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except OSError:
        raise
    except Exception as e:
        logger.error(f"Error in /api/dataset for {field}={topic!r}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error") from e
