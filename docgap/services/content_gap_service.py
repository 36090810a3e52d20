"""Content gap analysis orchestrator.

Pipeline per run:
1. Extract candidate questions from conversation logs
2. Embed and greedily cluster them
3. Flag clusters whose centroid is poorly covered by the documentation index
4. For each gap: record the theme, draft an outline, score priority
5. Sort by priority (stable) and persist the gap themes once
"""

from collections.abc import Callable, Sequence
from typing import Any

from loguru import logger

from docgap.core.config.analysis_config import AnalysisConfig
from docgap.core.config.embedding_config import EmbeddingConfig
from docgap.core.config.llm_config import LLMConfig
from docgap.core.models import GapSuggestion, GapTheme, Question
from docgap.embeddings import EmbeddingManager
from docgap.llm_manager import LLMManager
from docgap.providers.database.file_vector_store import FileVectorStore
from docgap.providers.database.gap_theme_store import GapThemeStore
from docgap.services.clustering_service import ClusteringService
from docgap.services.embedding_service import EmbeddingService
from docgap.services.failure_tracker import FailureMetrics
from docgap.services.gap_detection import GapDetectionService
from docgap.services.outline_generator import OutlineGenerator
from docgap.services.priority import PriorityWeights, compute_priority, recurrence_score
from docgap.services.question_extractor import extract_questions
from docgap.utils.text import theme_id_for

QuestionExtractor = Callable[[Sequence[Any]], list[Question]]


class ContentGapService:
    """Turns conversation logs into ranked documentation suggestions."""

    def __init__(
        self,
        clustering_service: ClusteringService,
        gap_detection: GapDetectionService,
        outline_generator: OutlineGenerator,
        gap_store: GapThemeStore,
        config: AnalysisConfig | None = None,
        extractor: QuestionExtractor = extract_questions,
    ):
        """Initialize the orchestrator.

        Args:
            clustering_service: Embeds and clusters questions
            gap_detection: Matches clusters against documentation embeddings
            outline_generator: Drafts an outline per gap
            gap_store: Cross-run theme persistence
            config: Default thresholds and weights
            extractor: Question extraction function
        """
        self._clustering = clustering_service
        self._gap_detection = gap_detection
        self._outline_generator = outline_generator
        self._gap_store = gap_store
        self._config = config or AnalysisConfig()
        self._extractor = extractor
        self._last_run_failures = FailureMetrics()

    @classmethod
    def from_config(
        cls,
        analysis_config: AnalysisConfig | None = None,
        llm_config: LLMConfig | None = None,
        embedding_config: EmbeddingConfig | None = None,
    ) -> "ContentGapService":
        """Build every collaborator from configuration.

        Raises:
            ProviderNotConfiguredError: If a vendor API key is missing
        """
        analysis_config = analysis_config or AnalysisConfig()
        llm_config = llm_config or LLMConfig()
        embedding_config = embedding_config or EmbeddingConfig()

        embedding_provider = EmbeddingManager(
            embedding_config.get_provider_config()
        ).get_provider()
        llm_provider = LLMManager(llm_config.get_provider_config()).get_provider()

        embedding_service = EmbeddingService(
            embedding_provider, max_chars=embedding_config.max_chars
        )
        return cls(
            clustering_service=ClusteringService(
                embedding_service,
                batch_size=analysis_config.embedding_batch_size,
                concurrency=analysis_config.embedding_concurrency,
            ),
            gap_detection=GapDetectionService(
                FileVectorStore(analysis_config.vector_store_path)
            ),
            outline_generator=OutlineGenerator(
                llm_provider,
                max_sample_questions=analysis_config.max_sample_questions,
            ),
            gap_store=GapThemeStore(analysis_config.gap_store_path),
            config=analysis_config,
        )

    @property
    def last_run_failures(self) -> FailureMetrics:
        """Outline failures tolerated during the most recent run."""
        return self._last_run_failures

    async def analyse(
        self,
        logs: Sequence[Any],
        coverage_threshold: float | None = None,
        cluster_similarity_threshold: float | None = None,
        weights: PriorityWeights | None = None,
    ) -> list[GapSuggestion]:
        """Run one gap analysis over conversation logs.

        Args:
            logs: Conversations (flat message lists or ``{id, messages}``)
            coverage_threshold: Override for the configured coverage threshold
            cluster_similarity_threshold: Override for the clustering threshold
            weights: Override for the configured priority weights

        Returns:
            Suggestions sorted by priority, highest first

        Raises:
            TypeError: If logs is not a list of conversations
        """
        coverage = (
            coverage_threshold
            if coverage_threshold is not None
            else self._config.coverage_threshold
        )
        similarity = (
            cluster_similarity_threshold
            if cluster_similarity_threshold is not None
            else self._config.cluster_similarity_threshold
        )
        weights = weights or PriorityWeights(
            frequency=self._config.frequency_weight,
            recurring=self._config.recurring_weight,
        )
        self._last_run_failures = FailureMetrics()

        questions = self._extractor(logs)
        if not questions:
            logger.info("No questions found in conversation logs")
            return []
        logger.info(
            f"Extracted {len(questions)} questions from {len(logs)} conversations"
        )

        clusters = await self._clustering.cluster_questions(questions, similarity)
        max_frequency = max(c.size for c in clusters)

        gaps = await self._gap_detection.detect_gaps(clusters, coverage)

        suggestions: list[GapSuggestion] = []
        # A theme counts at most once per run even if several clusters map to it
        recorded: dict[str, GapTheme] = {}
        for gap in gaps:
            cluster = gap.cluster
            theme_id = theme_id_for(cluster.topic)
            theme = recorded.get(theme_id)
            if theme is None:
                theme = await self._gap_store.record_theme(theme_id, cluster.topic)
                recorded[theme_id] = theme

            doc_summary = None
            if gap.doc_match is not None:
                doc_summary = gap.doc_match.metadata.get("summary")

            outline = await self._outline_generator.generate(
                cluster.topic,
                cluster.question_texts(),
                doc_summary=doc_summary if isinstance(doc_summary, str) else None,
                failures=self._last_run_failures,
            )

            priority = compute_priority(
                cluster.size,
                max_frequency,
                # Count already includes this run's occurrence
                recurrence_score(theme.occurrences),
                weights,
            )
            suggestions.append(
                GapSuggestion(
                    topic=outline.topic or cluster.topic,
                    outline=outline.outline,
                    priority=priority,
                    frequency=cluster.size,
                    recurring=theme.occurrences,
                    theme_id=theme_id,
                    sample_questions=cluster.question_texts()[
                        : self._config.max_sample_questions
                    ],
                )
            )

        # sorted() is stable: equal priorities keep detection order
        suggestions = sorted(suggestions, key=lambda s: s.priority, reverse=True)

        await self._gap_store.save()

        if self._last_run_failures.failure_count:
            logger.warning(
                f"Outline generation fell back for "
                f"{self._last_run_failures.failure_count}/"
                f"{self._last_run_failures.total_operations} gaps: "
                f"{self._last_run_failures.to_dict().get('by_type')}"
            )
        logger.info(
            f"Content gap analysis complete: {len(suggestions)} suggestions "
            f"from {len(clusters)} clusters"
        )
        return suggestions

    @staticmethod
    def recurring_summary(suggestions: Sequence[GapSuggestion]) -> list[dict[str, Any]]:
        """Topic and recurrence pairs for reporting."""
        return [{"topic": s.topic, "recurring": s.recurring} for s in suggestions]
