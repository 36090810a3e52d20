"""Gemini LLM provider via Google's OpenAI-compatible endpoint."""

from docgap.core.config.llm_config import GEMINI_OPENAI_BASE_URL
from docgap.providers.llm.openai_llm_provider import OpenAILLMProvider


class GeminiLLMProvider(OpenAILLMProvider):
    """Gemini chat models through the Chat Completions compatibility layer."""

    DEFAULT_BASE_URL = GEMINI_OPENAI_BASE_URL
    # The compatibility layer accepts max_tokens, not max_completion_tokens
    TOKEN_LIMIT_PARAM = "max_tokens"

    @property
    def name(self) -> str:
        return "gemini"
