"""LLM manager: selects the outline-generation provider once from config."""

from typing import Any

from loguru import logger

from docgap.interfaces.llm_provider import LLMProvider
from docgap.providers.llm.gemini_llm_provider import GeminiLLMProvider
from docgap.providers.llm.openai_llm_provider import OpenAILLMProvider


class LLMManager:
    """Builds and owns the configured LLM provider.

    The vendor is resolved when the manager is constructed; callers only ever
    see the LLMProvider interface.
    """

    _providers: dict[str, type[LLMProvider] | Any] = {
        "openai": OpenAILLMProvider,
        "gemini": GeminiLLMProvider,
    }

    def __init__(self, provider_config: dict[str, Any]):
        self._provider_config = provider_config
        self._provider: LLMProvider | None = None
        self._initialize_provider()

    def _create_provider(self, config: dict[str, Any]) -> LLMProvider:
        provider_name = str(config.get("provider", "openai")).strip().lower()
        provider_class = self._providers.get(provider_name)
        if provider_class is None:
            raise ValueError(
                f"Unsupported LLM provider {provider_name!r}; "
                f"expected one of {sorted(self._providers)}"
            )

        provider_kwargs = {
            key: value
            for key, value in config.items()
            if key != "provider" and value is not None
        }
        try:
            return provider_class(**provider_kwargs)
        except Exception as exc:
            logger.error(f"Failed to initialize {provider_name} LLM provider: {exc}")
            raise

    def _initialize_provider(self) -> None:
        self._provider = self._create_provider(self._provider_config)
        logger.info(
            f"Initialized LLM provider: {self._provider.name} "
            f"with model: {self._provider.model}"
        )

    def get_provider(self) -> LLMProvider:
        if self._provider is None:
            raise ValueError("LLM provider not configured.")
        return self._provider

    def is_configured(self) -> bool:
        return self._provider is not None

    def list_providers(self) -> list[str]:
        return sorted(self._providers)

    async def health_check(self) -> dict[str, Any]:
        if self._provider is None:
            return {
                "status": "not_configured",
                "message": "LLM provider not configured",
            }
        return await self._provider.health_check()

    def get_usage_stats(self) -> dict[str, Any]:
        return self._provider.get_usage_stats() if self._provider else {}
