"""Embedding provider configuration for docgap."""

import os
from typing import Any

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from docgap.core.config.llm_config import (
    GEMINI_OPENAI_BASE_URL,
    VENDOR_API_KEY_ENV,
    ProviderName,
    _is_placeholder_key,
)

DEFAULT_EMBEDDING_MODELS = {
    "openai": "text-embedding-3-small",
    "gemini": "gemini-embedding-001",
}

# text-embedding-3-small input limit; ~4 chars/token is accurate enough to gate.
DEFAULT_MAX_MODEL_TOKENS = 8_192
DEFAULT_CHARS_PER_TOKEN = 4


class EmbeddingConfig(BaseSettings):
    """Embedding configuration.

    Environment Variables:
        DOCGAP_EMBEDDING_PROVIDER=openai|gemini
        DOCGAP_EMBEDDING_MODEL=text-embedding-3-small
        DOCGAP_EMBEDDING_MAX_TOKENS=8192
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCGAP_EMBEDDING_",
        env_nested_delimiter="__",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    provider: ProviderName = Field(default="openai")
    model: str | None = Field(default=None)
    api_key: SecretStr | None = Field(default=None)
    base_url: str | None = Field(default=None)
    timeout: int = Field(default=30, ge=1)
    max_retries: int = Field(default=3, ge=0)

    max_tokens: int = Field(
        default=DEFAULT_MAX_MODEL_TOKENS,
        ge=1,
        description="Model input limit in tokens, used to derive the chunk budget",
    )
    chars_per_token: int = Field(
        default=DEFAULT_CHARS_PER_TOKEN,
        ge=1,
        description="Characters-per-token heuristic for the chunk budget",
    )

    @property
    def max_chars(self) -> int:
        """Character budget per embedding call."""
        return self.max_tokens * self.chars_per_token

    @model_validator(mode="after")
    def _apply_provider_defaults(self) -> "EmbeddingConfig":
        if self.model is None:
            self.model = DEFAULT_EMBEDDING_MODELS[self.provider]
        if self.api_key is None:
            vendor_key = os.getenv(VENDOR_API_KEY_ENV[self.provider])
            if vendor_key:
                self.api_key = SecretStr(vendor_key)
        if self.base_url is None and self.provider == "gemini":
            self.base_url = GEMINI_OPENAI_BASE_URL
        return self

    def get_provider_config(self) -> dict[str, Any]:
        config: dict[str, Any] = {
            "provider": self.provider,
            "model": self.model,
            "base_url": self.base_url,
            "timeout": self.timeout,
            "max_retries": self.max_retries,
        }
        if self.api_key:
            config["api_key"] = self.api_key.get_secret_value()
        return config

    def is_provider_configured(self) -> bool:
        return self.api_key is not None and not _is_placeholder_key(
            self.api_key.get_secret_value()
        )

    def get_missing_config(self) -> list[str]:
        if self.is_provider_configured():
            return []
        return [f"api_key (set {VENDOR_API_KEY_ENV[self.provider]})"]

    def __repr__(self) -> str:
        api_key_display = "***" if self.api_key else None
        return (
            f"EmbeddingConfig("
            f"provider={self.provider}, "
            f"model={self.model}, "
            f"api_key={api_key_display}, "
            f"max_chars={self.max_chars})"
        )
