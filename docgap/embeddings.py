"""Embedding manager: selects the embedding provider once from config."""

from typing import Any

from loguru import logger

from docgap.interfaces.embedding_provider import EmbeddingProvider
from docgap.providers.embeddings.gemini_provider import GeminiEmbeddingProvider
from docgap.providers.embeddings.openai_provider import OpenAIEmbeddingProvider


class EmbeddingManager:
    """Builds and owns the configured embedding provider."""

    _providers: dict[str, type[EmbeddingProvider] | Any] = {
        "openai": OpenAIEmbeddingProvider,
        "gemini": GeminiEmbeddingProvider,
    }

    def __init__(self, provider_config: dict[str, Any]):
        provider_name = str(provider_config.get("provider", "openai")).strip().lower()
        provider_class = self._providers.get(provider_name)
        if provider_class is None:
            raise ValueError(
                f"Unsupported embedding provider {provider_name!r}; "
                f"expected one of {sorted(self._providers)}"
            )

        provider_kwargs = {
            key: value
            for key, value in provider_config.items()
            if key != "provider" and value is not None
        }
        try:
            self._provider: EmbeddingProvider = provider_class(**provider_kwargs)
        except Exception as exc:
            logger.error(
                f"Failed to initialize {provider_name} embedding provider: {exc}"
            )
            raise

        logger.info(
            f"Initialized embedding provider: {self._provider.name} "
            f"with model: {self._provider.model}"
        )

    def get_provider(self) -> EmbeddingProvider:
        return self._provider
