"""
LLM client factory.

Builds the configured provider client once at application startup; the
result is injected into the event generator instead of being looked up from
a module-level registry.
"""

from typing import Any

from histline.config import settings
from histline.services.llm_interface import LLMInterface
from histline.services.llm_providers.gemini_client import GeminiClient
from histline.services.llm_providers.openai_client import OpenAIClient
from histline.utils.logger import setup_logger

logger = setup_logger("llm_service")

_client_constructors: dict[str, type[LLMInterface]] = {
    "gemini": GeminiClient,
    "openai": OpenAIClient,
}


def _get_client_config(provider_name: str) -> dict[str, Any]:
    if provider_name == "gemini":
        return {
            "api_key": settings.gemini_api_key,
            "default_model": settings.default_gemini_model,
        }
    if provider_name == "openai":
        return {
            "api_key": settings.openai_api_key,
            "base_url": settings.openai_base_url,
            "default_model": settings.default_openai_model,
        }
    return {}


def create_llm_client(provider_name: str | None = None) -> LLMInterface | None:
    """
    Build an LLM client for the given (or configured default) provider.

    Returns None if the provider is unknown or missing its API key; the event
    generator then degrades to producing no events.
    """
    provider_name = (provider_name or settings.default_llm_provider).lower()

    constructor = _client_constructors.get(provider_name)
    if constructor is None:
        logger.error(
            f"Unknown provider name: {provider_name}. Available providers: {list(_client_constructors.keys())}"
        )
        return None

    config = _get_client_config(provider_name)
    if not config.get("api_key"):
        logger.warning(
            f"{provider_name.capitalize()} API key not configured. Skipping client initialization."
        )
        return None

    constructor_args = {k: v for k, v in config.items() if v is not None}
    try:
        client = constructor(**constructor_args)
    except ValueError as ve:
        logger.error(f"Configuration error initializing {provider_name} client: {ve}")
        return None
    except Exception as e:
        logger.error(f"Failed to initialize {provider_name} client: {e}", exc_info=True)
        return None

    logger.info(f"{provider_name.capitalize()} client successfully initialized.")
    return client
