"""Configuration models for docgap."""

from .analysis_config import AnalysisConfig
from .embedding_config import EmbeddingConfig
from .llm_config import LLMConfig

__all__ = [
    "AnalysisConfig",
    "EmbeddingConfig",
    "LLMConfig",
]
