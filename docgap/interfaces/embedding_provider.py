"""Embedding Provider Interface for docgap."""

from abc import ABC, abstractmethod
from typing import Any


class EmbeddingProvider(ABC):
    """Abstract base class for embedding vendors.

    Implementations embed a single, already size-gated piece of text. Chunking
    and averaging of oversized input is handled by EmbeddingService.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name (e.g., 'openai', 'gemini')."""
        ...

    @property
    @abstractmethod
    def model(self) -> str:
        """Embedding model identifier."""
        ...

    @abstractmethod
    async def embed(self, text: str) -> list[float]:
        """
        Embed one piece of text.

        Args:
            text: Text within the model's input limit

        Returns:
            Embedding vector

        Raises:
            RuntimeError: On missing credentials or a failed vendor call
        """
        ...

    def get_usage_stats(self) -> dict[str, Any]:
        """Usage statistics; providers without tracking return an empty dict."""
        return {}
