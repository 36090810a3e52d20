"""Abstract provider interfaces."""

from .embedding_provider import EmbeddingProvider
from .llm_provider import LLMProvider, LLMResponse
from .vector_store import VectorStore

__all__ = [
    "EmbeddingProvider",
    "LLMProvider",
    "LLMResponse",
    "VectorStore",
]
