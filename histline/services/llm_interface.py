"""
Abstract interface for Large Language Model (LLM) services.

Defines the standard interface that all LLM providers must implement so the
event generator can run against any of them, or against a fake in tests.
"""

from abc import ABC, abstractmethod
from typing import Any


class LLMInterface(ABC):
    """
    Abstract Base Class for Large Language Model services.
    """

    provider_name: str = "unknown"

    @abstractmethod
    async def generate_text(
        self,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any,
    ) -> str:
        """Generates text based on a given prompt."""

    async def close(self):
        """
        Optional method to close any underlying connections or clients.
        Providers that don't need explicit closing can keep this implementation.
        """
        return
