"""Embedding providers for docgap."""

from .gemini_provider import GeminiEmbeddingProvider
from .openai_provider import OpenAIEmbeddingProvider

__all__ = [
    "GeminiEmbeddingProvider",
    "OpenAIEmbeddingProvider",
]
