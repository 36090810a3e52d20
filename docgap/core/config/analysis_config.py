"""
Analysis configuration for docgap content gap detection.

Configuration Sources (in order of precedence):
1. Explicit keyword arguments / per-call overrides
2. Environment variables (DOCGAP_ANALYSIS_*)
3. Default values

Environment Variables:
    DOCGAP_ANALYSIS_COVERAGE_THRESHOLD=0.8
    DOCGAP_ANALYSIS_CLUSTER_SIMILARITY_THRESHOLD=0.85
    DOCGAP_ANALYSIS_EMBEDDING_BATCH_SIZE=128
    DOCGAP_ANALYSIS_GAP_STORE_PATH=data/gap_analysis.json
"""

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Defaults shared with services that accept per-call overrides.
DEFAULT_COVERAGE_THRESHOLD = 0.8
DEFAULT_CLUSTER_SIMILARITY_THRESHOLD = 0.85
DEFAULT_FREQUENCY_WEIGHT = 0.7
DEFAULT_RECURRING_WEIGHT = 0.3
DEFAULT_EMBEDDING_BATCH_SIZE = 128
DEFAULT_EMBEDDING_CONCURRENCY = 8
DEFAULT_MAX_SAMPLE_QUESTIONS = 5


class AnalysisConfig(BaseSettings):
    """Thresholds, weights, fan-out limits and file locations for a run."""

    model_config = SettingsConfigDict(
        env_prefix="DOCGAP_ANALYSIS_",
        env_nested_delimiter="__",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    coverage_threshold: float = Field(
        default=DEFAULT_COVERAGE_THRESHOLD,
        ge=-1.0,
        le=1.0,
        description=(
            "Best documentation similarity below which a question cluster is "
            "flagged as a gap"
        ),
    )

    cluster_similarity_threshold: float = Field(
        default=DEFAULT_CLUSTER_SIMILARITY_THRESHOLD,
        ge=-1.0,
        le=1.0,
        description="Cosine similarity needed to join an existing question cluster",
    )

    frequency_weight: float = Field(
        default=DEFAULT_FREQUENCY_WEIGHT,
        ge=0.0,
        description="Weight of the normalised in-run frequency term",
    )

    recurring_weight: float = Field(
        default=DEFAULT_RECURRING_WEIGHT,
        ge=0.0,
        description="Weight of the cross-run recurrence term",
    )

    embedding_batch_size: int = Field(
        default=DEFAULT_EMBEDDING_BATCH_SIZE,
        ge=1,
        description="Questions embedded per sequential batch",
    )

    embedding_concurrency: int = Field(
        default=DEFAULT_EMBEDDING_CONCURRENCY,
        ge=1,
        description="Concurrent embedding calls within one batch",
    )

    max_sample_questions: int = Field(
        default=DEFAULT_MAX_SAMPLE_QUESTIONS,
        ge=1,
        le=20,
        description="Sample questions included in each outline prompt",
    )

    vector_store_path: Path = Field(
        default=Path("data") / "embeddings.json",
        description="JSON file backing the documentation vector store",
    )

    gap_store_path: Path = Field(
        default=Path("data") / "gap_analysis.json",
        description="JSON file backing recurring gap themes",
    )

    @model_validator(mode="after")
    def _validate_weights(self) -> "AnalysisConfig":
        if self.frequency_weight == 0 and self.recurring_weight == 0:
            raise ValueError("At least one priority weight must be non-zero")
        return self
