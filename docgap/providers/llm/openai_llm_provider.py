"""OpenAI LLM provider implementation for docgap outline generation."""

from typing import Any

from loguru import logger
from openai import AsyncOpenAI

from docgap.core.exceptions import ProviderNotConfiguredError
from docgap.interfaces.llm_provider import LLMProvider, LLMResponse


class OpenAILLMProvider(LLMProvider):
    """OpenAI LLM provider using the Chat Completions API.

    Subclasses targeting OpenAI-compatible endpoints override ``name``,
    ``DEFAULT_BASE_URL`` and ``TOKEN_LIMIT_PARAM``.
    """

    DEFAULT_BASE_URL: str | None = None
    TOKEN_LIMIT_PARAM = "max_completion_tokens"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        timeout: int = 60,
        max_retries: int = 3,
        temperature: float = 0.2,
        max_completion_tokens: int = 500,
        client: Any | None = None,
    ):
        """Initialize OpenAI LLM provider.

        Args:
            api_key: API key for the endpoint
            model: Model name to use
            base_url: Base URL override (OpenAI-compatible endpoints)
            timeout: Request timeout in seconds
            max_retries: Number of SDK retry attempts for failed requests
            temperature: Sampling temperature
            max_completion_tokens: Default completion budget
            client: Pre-built async client (tests inject fakes here)

        Raises:
            ProviderNotConfiguredError: If no client is given and api_key is missing
        """
        self._model = model
        self._timeout = timeout
        self._temperature = temperature
        self._max_completion_tokens = max_completion_tokens

        if client is None:
            if not api_key or api_key.startswith("replace-"):
                raise ProviderNotConfiguredError(f"{self.name} LLM", ["api_key"])
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

        # Usage tracking
        self._requests_made = 0
        self._tokens_used = 0
        self._prompt_tokens = 0
        self._completion_tokens = 0

    @property
    def name(self) -> str:
        """Provider name."""
        return "openai"

    @property
    def model(self) -> str:
        """Model name."""
        return self._model

    async def complete(
        self,
        prompt: str,
        system: str | None = None,
        max_completion_tokens: int | None = None,
        timeout: int | None = None,
    ) -> LLMResponse:
        """Generate a completion for the given prompt.

        Args:
            prompt: The user prompt
            system: Optional system prompt
            max_completion_tokens: Maximum tokens to generate
            timeout: Optional timeout in seconds (overrides default)
        """
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        request_params: dict[str, Any] = {
            "model": self._model,
            "messages": messages,
            "temperature": self._temperature,
            "timeout": timeout if timeout is not None else self._timeout,
            self.TOKEN_LIMIT_PARAM: max_completion_tokens
            or self._max_completion_tokens,
        }

        try:
            response = await self._client.chat.completions.create(**request_params)

            self._requests_made += 1
            if response.usage:
                self._prompt_tokens += response.usage.prompt_tokens
                self._completion_tokens += response.usage.completion_tokens
                self._tokens_used += response.usage.total_tokens

            content = response.choices[0].message.content
            tokens = response.usage.total_tokens if response.usage else 0
            finish_reason = response.choices[0].finish_reason

            if content is None or not content.strip():
                logger.warning(
                    f"{self.name} returned empty content "
                    f"(finish_reason={finish_reason}, tokens={tokens})"
                )
                raise RuntimeError(
                    f"LLM returned empty response (finish_reason={finish_reason}). "
                    "This may indicate a content filter, API error, or model refusal."
                )

            if finish_reason not in ("stop", None):
                logger.warning(
                    f"Unexpected finish_reason: {finish_reason} "
                    f"(content_length={len(content)})"
                )

            return LLMResponse(
                content=content.strip(),
                tokens_used=tokens,
                model=self._model,
                finish_reason=finish_reason,
            )

        except Exception as e:
            logger.error(f"{self.name} completion failed: {e}")
            raise RuntimeError(f"LLM completion failed: {e}") from e

    async def health_check(self) -> dict[str, Any]:
        """Perform health check."""
        try:
            response = await self.complete("Say 'OK'", max_completion_tokens=10)
            return {
                "status": "healthy",
                "provider": self.name,
                "model": self._model,
                "test_response": response.content[:50],
            }
        except Exception as e:
            return {
                "status": "unhealthy",
                "provider": self.name,
                "error": str(e),
            }

    def get_usage_stats(self) -> dict[str, Any]:
        """Get usage statistics."""
        return {
            "requests_made": self._requests_made,
            "total_tokens": self._tokens_used,
            "prompt_tokens": self._prompt_tokens,
            "completion_tokens": self._completion_tokens,
        }
