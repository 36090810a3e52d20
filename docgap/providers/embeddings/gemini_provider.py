"""Gemini embedding provider via Google's OpenAI-compatible endpoint."""

from docgap.core.config.llm_config import GEMINI_OPENAI_BASE_URL
from docgap.providers.embeddings.openai_provider import OpenAIEmbeddingProvider


class GeminiEmbeddingProvider(OpenAIEmbeddingProvider):
    DEFAULT_BASE_URL = GEMINI_OPENAI_BASE_URL

    @property
    def name(self) -> str:
        return "gemini"
