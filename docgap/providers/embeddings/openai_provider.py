"""OpenAI embedding provider implementation."""

from typing import Any

from loguru import logger
from openai import AsyncOpenAI

from docgap.core.exceptions import ProviderNotConfiguredError
from docgap.interfaces.embedding_provider import EmbeddingProvider


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """Embeddings through the OpenAI ``/v1/embeddings`` endpoint."""

    DEFAULT_BASE_URL: str | None = None

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "text-embedding-3-small",
        base_url: str | None = None,
        timeout: int = 30,
        max_retries: int = 3,
        client: Any | None = None,
    ):
        self._model = model

        if client is None:
            if not api_key or api_key.startswith("replace-"):
                raise ProviderNotConfiguredError(f"{self.name} embedding", ["api_key"])
            client_kwargs: dict[str, Any] = {
                "api_key": api_key,
                "timeout": timeout,
                "max_retries": max_retries,
            }
            resolved_base_url = base_url or self.DEFAULT_BASE_URL
            if resolved_base_url:
                client_kwargs["base_url"] = resolved_base_url
            client = AsyncOpenAI(**client_kwargs)
        self._client = client

        self._requests_made = 0
        self._tokens_used = 0

    @property
    def name(self) -> str:
        return "openai"

    @property
    def model(self) -> str:
        return self._model

    async def embed(self, text: str) -> list[float]:
        try:
            response = await self._client.embeddings.create(
                model=self._model, input=text
            )
        except Exception as e:
            logger.error(f"{self.name} embedding request failed: {e}")
            raise RuntimeError(f"Embedding request failed: {e}") from e

        self._requests_made += 1
        usage = getattr(response, "usage", None)
        if usage is not None:
            self._tokens_used += getattr(usage, "total_tokens", 0) or 0

        if not response.data or not isinstance(
            getattr(response.data[0], "embedding", None), list
        ):
            raise RuntimeError(f"Invalid embeddings response from {self.name}")

        return [float(x) for x in response.data[0].embedding]

    def get_usage_stats(self) -> dict[str, Any]:
        return {
            "requests_made": self._requests_made,
            "total_tokens": self._tokens_used,
        }
