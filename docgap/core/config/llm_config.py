"""LLM configuration for docgap outline generation.

Provider is selected once by name:
- openai: Chat Completions via api.openai.com (auth: OPENAI_API_KEY)
- gemini: Gemini through its OpenAI-compatible endpoint (auth: GEMINI_API_KEY)
"""

import os
from typing import Any, Literal

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"

DEFAULT_LLM_MODELS = {
    "openai": "gpt-4o-mini",
    "gemini": "gemini-2.0-flash",
}

# Vendor environment variables consulted when no DOCGAP_* key is set.
VENDOR_API_KEY_ENV = {
    "openai": "OPENAI_API_KEY",
    "gemini": "GEMINI_API_KEY",
}

ProviderName = Literal["openai", "gemini"]


def _is_placeholder_key(value: str) -> bool:
    return not value.strip() or value.startswith("replace-")


class LLMConfig(BaseSettings):
    """LLM configuration for outline generation.

    Environment Variables:
        DOCGAP_LLM_PROVIDER=openai|gemini
        DOCGAP_LLM_MODEL=gpt-4o-mini
        DOCGAP_LLM_API_KEY (falls back to OPENAI_API_KEY / GEMINI_API_KEY)
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCGAP_LLM_",
        env_nested_delimiter="__",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    provider: ProviderName = Field(
        default="openai", description="LLM vendor used for outline generation"
    )

    model: str | None = Field(
        default=None,
        description="Model identifier (defaults per provider when unset)",
    )

    api_key: SecretStr | None = Field(
        default=None, description="API key for the selected provider"
    )

    base_url: str | None = Field(
        default=None, description="Override the provider endpoint"
    )

    timeout: int = Field(default=60, ge=1, description="Request timeout in seconds")
    max_retries: int = Field(default=3, ge=0, description="SDK-level retries")
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    max_completion_tokens: int = Field(default=500, ge=16)

    @field_validator("base_url")
    def validate_base_url(cls, value: str | None) -> str | None:  # noqa: N805
        if value is None:
            return None
        normalized = value.strip()
        if not normalized.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL; received {value!r}")
        return normalized

    @model_validator(mode="after")
    def _apply_provider_defaults(self) -> "LLMConfig":
        if self.model is None:
            self.model = DEFAULT_LLM_MODELS[self.provider]
        if self.api_key is None:
            vendor_key = os.getenv(VENDOR_API_KEY_ENV[self.provider])
            if vendor_key:
                self.api_key = SecretStr(vendor_key)
        if self.base_url is None and self.provider == "gemini":
            self.base_url = GEMINI_OPENAI_BASE_URL
        return self

    def get_provider_config(self) -> dict[str, Any]:
        """Return the provider construction config consumed by LLMManager."""
        config: dict[str, Any] = {
            "provider": self.provider,
            "model": self.model,
            "base_url": self.base_url,
            "timeout": self.timeout,
            "max_retries": self.max_retries,
            "temperature": self.temperature,
            "max_completion_tokens": self.max_completion_tokens,
        }
        if self.api_key:
            config["api_key"] = self.api_key.get_secret_value()
        return config

    def is_provider_configured(self) -> bool:
        """Return True when a usable API key is available."""
        return self.api_key is not None and not _is_placeholder_key(
            self.api_key.get_secret_value()
        )

    def get_missing_config(self) -> list[str]:
        if self.is_provider_configured():
            return []
        return [f"api_key (set {VENDOR_API_KEY_ENV[self.provider]})"]

    def __repr__(self) -> str:
        """String representation hiding sensitive information."""
        api_key_display = "***" if self.api_key else None
        return (
            f"LLMConfig("
            f"provider={self.provider}, "
            f"model={self.model}, "
            f"api_key={api_key_display}, "
            f"base_url={self.base_url})"
        )
