"""
Wikipedia Extractor Service - plain-text extracts through the MediaWiki API.

The extract is the authoritative input of the pipeline, so unlike the
best-effort providers every transport or payload problem here is raised to
the caller as ExtractProviderError.
"""

import time

import httpx

from histline.config import settings
from histline.exceptions import ExtractProviderError
from histline.schemas import ExtractResult
from histline.utils.logger import setup_logger

logger = setup_logger("wiki_extractor")


def missing_page_text(query: str) -> str:
    return f'No exact match found on Wikipedia for "{query}".'


def empty_extract_text(query: str) -> str:
    return f'No extract available from Wikipedia for "{query}".'


class WikipediaExtractProvider:
    """Fetches the full plain-text extract of the Wikipedia page for a topic."""

    def __init__(self, http_client: httpx.AsyncClient, api_url: str | None = None):
        self.http_client = http_client
        self.api_url = api_url or settings.wiki_api_url

    async def fetch_extract(self, query: str) -> ExtractResult:
        params = {
            "action": "query",
            "format": "json",
            "formatversion": 2,
            "prop": "extracts",
            "titles": query,
            "explaintext": 1,
            "redirects": 1,
        }
        headers = {"User-Agent": settings.wiki_api_user_agent}

        logger.info(f"Fetching Wikipedia extract for '{query}'")
        start_time = time.perf_counter()
        try:
            response = await self.http_client.get(
                self.api_url, params=params, headers=headers
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.error(
                f"Wikipedia request failed for '{query}': {e!r}", exc_info=True
            )
            raise ExtractProviderError(
                f"Wikipedia request failed: {e}", query=query
            ) from e
        except ValueError as e:
            logger.error(f"Wikipedia returned invalid JSON for '{query}': {e}")
            raise ExtractProviderError(
                "Wikipedia returned an invalid JSON payload", query=query
            ) from e

        query_block = data.get("query") if isinstance(data, dict) else None
        pages = query_block.get("pages") if isinstance(query_block, dict) else None
        if not pages or not isinstance(pages, (list, dict)):
            logger.error(f"No pages in Wikipedia response for '{query}': {data}")
            raise ExtractProviderError(
                "Wikipedia response did not contain any pages", query=query
            )

        page = pages[0] if isinstance(pages, list) else next(iter(pages.values()))
        if not isinstance(page, dict):
            logger.error(f"Malformed page entry in Wikipedia response for '{query}': {page!r}")
            raise ExtractProviderError(
                "Wikipedia response contained a malformed page", query=query
            )
        duration = time.perf_counter() - start_time

        if "missing" in page or page.get("invalid"):
            logger.info(
                f"Page '{query}' is marked as missing by Wikipedia API ({duration:.3f}s)"
            )
            return ExtractResult(text=missing_page_text(query), missing=True)

        extract = page.get("extract") or ""
        if not isinstance(extract, str):
            logger.error(f"Non-text extract in Wikipedia response for '{query}': {extract!r}")
            raise ExtractProviderError(
                "Wikipedia response contained a malformed extract", query=query
            )
        extract = extract.strip()
        if not extract:
            logger.info(f"Page '{page.get('title', query)}' exists but has no extract")
            return ExtractResult(text=empty_extract_text(query), missing=False)

        logger.info(
            f"Fetched extract for '{query}' (title: '{page.get('title', query)}', {len(extract)} chars) in {duration:.3f}s"
        )
        return ExtractResult(text=extract, missing=False)
