"""
Image search through the Unsplash API.

Images are decoration: any failure is logged and turned into an empty,
degraded result so the search itself still succeeds.
"""

import httpx

from histline.config import settings
from histline.schemas import ProviderResult, TimelineImage
from histline.utils.logger import setup_logger

logger = setup_logger("image_provider")

MAX_IMAGES = 20


class UnsplashImageProvider:
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        access_key: str | None = None,
        api_url: str | None = None,
        per_page: int | None = None,
    ):
        self.http_client = http_client
        self.access_key = access_key if access_key is not None else settings.unsplash_access_key
        self.api_url = api_url or settings.unsplash_api_url
        self.per_page = min(per_page or settings.unsplash_per_page, MAX_IMAGES)

    async def fetch_images(self, query: str) -> ProviderResult[list[TimelineImage]]:
        if not self.access_key:
            logger.warning("Unsplash access key not configured. Returning no images.")
            return ProviderResult.degraded([], "Unsplash access key is not configured")

        params = {
            "query": query,
            "client_id": self.access_key,
            "per_page": self.per_page,
        }
        try:
            response = await self.http_client.get(self.api_url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Error fetching images from Unsplash for '{query}': {e!r}")
            return ProviderResult.degraded([], f"Unsplash request failed: {type(e).__name__}")
        except ValueError as e:
            logger.error(f"Unsplash returned invalid JSON for '{query}': {e}")
            return ProviderResult.degraded([], "Unsplash returned invalid JSON")

        if not isinstance(data, dict):
            logger.error(f"Unsplash payload for '{query}' is not a JSON object")
            return ProviderResult.degraded([], "Unsplash returned a malformed payload")

        results = data.get("results")
        if results is None or (isinstance(results, list) and not results):
            logger.info(f"No images found on Unsplash for '{query}'.")
            return ProviderResult.ok([])
        if not isinstance(results, list):
            logger.error(
                f"Unsplash 'results' for '{query}' is a {type(results).__name__}, expected a list"
            )
            return ProviderResult.degraded([], "Unsplash returned a malformed payload")

        images = []
        skipped = 0
        for item in results[: self.per_page]:
            urls = item.get("urls") if isinstance(item, dict) else None
            src = urls.get("small") if isinstance(urls, dict) else None
            if not isinstance(src, str) or not src:
                skipped += 1
                continue
            alt = item.get("alt_description")
            images.append(
                TimelineImage(
                    src=src,
                    alt=alt if isinstance(alt, str) and alt else f"Image of {query}",
                )
            )
        if skipped:
            logger.warning(f"Skipped {skipped} malformed Unsplash results for '{query}'.")

        if not images and skipped:
            return ProviderResult.degraded([], "Unsplash returned a malformed payload")

        logger.info(f"Fetched {len(images)} images from Unsplash for '{query}'.")
        return ProviderResult.ok(images)
