"""Gap detection: flag question clusters the documentation index does not cover.

Each cluster centroid is matched against the documentation vector store; a
cluster with no neighbour, or whose best neighbour scores below the coverage
threshold, becomes a gap candidate.
"""

from loguru import logger

from docgap.core.config.analysis_config import DEFAULT_COVERAGE_THRESHOLD
from docgap.core.models import Cluster, GapCandidate
from docgap.interfaces.vector_store import VectorStore


class GapDetectionService:
    """Compares clusters against documentation embeddings."""

    def __init__(self, vector_store: VectorStore):
        self._vector_store = vector_store

    async def detect_gaps(
        self,
        clusters: list[Cluster],
        coverage_threshold: float = DEFAULT_COVERAGE_THRESHOLD,
    ) -> list[GapCandidate]:
        """Return gap candidates in cluster order."""
        gaps: list[GapCandidate] = []

        for cluster in clusters:
            nearest = await self._vector_store.query(cluster.centroid, 1)
            best = nearest[0] if nearest else None

            if best is not None and best.score >= coverage_threshold:
                logger.debug(
                    f"Covered: {cluster.topic!r} -> {best.key} ({best.score:.3f})"
                )
                continue

            gaps.append(GapCandidate(cluster=cluster, doc_match=best))

        logger.info(
            f"Gap detection: {len(gaps)}/{len(clusters)} clusters below "
            f"coverage threshold {coverage_threshold}"
        )
        return gaps
