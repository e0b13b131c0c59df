from histline.services.llm_providers.gemini_client import GeminiClient
from histline.services.llm_providers.openai_client import OpenAIClient

__all__ = ["GeminiClient", "OpenAIClient"]
