"""
HTTP client factory for the external providers (Wikipedia, Unsplash).

One AsyncClient is built at startup and shared by every provider adapter so
connections are pooled across requests. Redirects are followed because the
MediaWiki API and Unsplash CDN both answer with redirects for some titles.
"""

import httpx

from histline.utils.logger import setup_logger

logger = setup_logger("http_client")


def _get_settings():
    """Lazy import of settings to avoid circular import."""
    from histline.config import settings

    return settings


def create_provider_http_client() -> httpx.AsyncClient:
    """Create the pooled HTTP/2 client shared by provider adapters."""
    settings = _get_settings()
    connect_timeout, read_timeout = settings.wiki_api_timeout
    timeout_config = httpx.Timeout(
        connect=connect_timeout,
        read=read_timeout,
        write=10.0,
        pool=60.0,
    )

    limits_config = httpx.Limits(
        max_keepalive_connections=20, max_connections=50, keepalive_expiry=30.0
    )

    headers = {
        "User-Agent": settings.wiki_api_user_agent,
        "Accept-Encoding": "gzip, deflate",
        "Accept": "application/json",
    }

    logger.debug(
        f"Creating provider HTTP client (connect={connect_timeout}s, read={read_timeout}s)"
    )
    return httpx.AsyncClient(
        timeout=timeout_config,
        limits=limits_config,
        headers=headers,
        http2=True,
        follow_redirects=True,
    )
