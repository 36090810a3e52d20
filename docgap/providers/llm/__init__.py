"""LLM providers for docgap outline generation."""

from .gemini_llm_provider import GeminiLLMProvider
from .openai_llm_provider import OpenAILLMProvider

__all__ = [
    "GeminiLLMProvider",
    "OpenAILLMProvider",
]
