"""Clustering service for grouping near-duplicate user questions.

Single-pass greedy incremental clustering: each question joins the first
existing cluster whose centroid is similar enough, otherwise it starts a new
one. Centroids are running means of member embeddings. Membership depends on
input order and earlier assignments are never revisited once centroids move;
this keeps the pass O(n * clusters) and reproducible for a fixed order.
"""

from collections.abc import Sequence

from loguru import logger

from docgap.core.config.analysis_config import (
    DEFAULT_CLUSTER_SIMILARITY_THRESHOLD,
    DEFAULT_EMBEDDING_BATCH_SIZE,
    DEFAULT_EMBEDDING_CONCURRENCY,
)
from docgap.core.models import Cluster, Question
from docgap.core.utils.vector_math import cosine_similarity, update_running_mean
from docgap.services.embedding_service import EmbeddingService


def pick_topic(questions: Sequence[Question]) -> str:
    """Shortest question text; ties go to the earliest member."""
    return min((q.text for q in questions), key=len, default="")


def greedy_cluster(
    questions: Sequence[Question],
    embeddings: Sequence[Sequence[float]],
    similarity_threshold: float = DEFAULT_CLUSTER_SIMILARITY_THRESHOLD,
) -> list[Cluster]:
    """Assign pre-embedded questions to clusters in input order.

    Args:
        questions: Questions in extraction order
        embeddings: One vector per question, same order
        similarity_threshold: Minimum cosine similarity to join a cluster

    Returns:
        Clusters in creation order, each with its topic set
    """
    if len(questions) != len(embeddings):
        raise ValueError(
            f"Got {len(embeddings)} embeddings for {len(questions)} questions"
        )

    clusters: list[Cluster] = []
    for question, vector in zip(questions, embeddings):
        for cluster in clusters:
            if cosine_similarity(vector, cluster.centroid) >= similarity_threshold:
                cluster.questions.append(question)
                cluster.centroid = update_running_mean(
                    cluster.centroid, vector, len(cluster.questions)
                )
                break
        else:
            clusters.append(Cluster(centroid=list(vector), questions=[question]))

    for cluster in clusters:
        cluster.topic = pick_topic(cluster.questions)

    return clusters


class ClusteringService:
    """Embeds questions and groups them with greedy incremental clustering."""

    def __init__(
        self,
        embedding_service: EmbeddingService,
        batch_size: int = DEFAULT_EMBEDDING_BATCH_SIZE,
        concurrency: int = DEFAULT_EMBEDDING_CONCURRENCY,
    ):
        """Initialize clustering service.

        Args:
            embedding_service: Service used to embed question text
            batch_size: Questions embedded per sequential batch
            concurrency: Concurrent embedding calls within a batch
        """
        self._embedding_service = embedding_service
        self._batch_size = batch_size
        self._concurrency = concurrency

    async def cluster_questions(
        self,
        questions: list[Question],
        similarity_threshold: float = DEFAULT_CLUSTER_SIMILARITY_THRESHOLD,
    ) -> list[Cluster]:
        """Cluster questions by embedding similarity.

        Raises:
            TypeError: If questions is not a list
        """
        if not isinstance(questions, list):
            raise TypeError("cluster_questions expects a list of questions")
        if not questions:
            return []

        logger.debug(f"Generating embeddings for {len(questions)} questions")
        embeddings = await self._embedding_service.embed_many(
            [q.text for q in questions],
            batch_size=self._batch_size,
            concurrency=self._concurrency,
        )

        clusters = greedy_cluster(questions, embeddings, similarity_threshold)

        largest = max(c.size for c in clusters)
        logger.info(
            f"Greedy clustering complete: {len(questions)} questions -> "
            f"{len(clusters)} clusters (largest {largest}, "
            f"threshold {similarity_threshold})"
        )
        return clusters
