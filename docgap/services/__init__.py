"""Gap analysis services: extraction, clustering, detection, outlines, scoring."""

from .clustering_service import ClusteringService
from .content_gap_service import ContentGapService
from .document_indexer import DocumentIndexer
from .embedding_service import EmbeddingService
from .failure_tracker import FailureMetrics
from .gap_detection import GapDetectionService
from .outline_generator import OutlineGenerator
from .priority import PriorityWeights, compute_priority, recurrence_score
from .question_extractor import extract_questions, is_question

__all__ = [
    "ClusteringService",
    "ContentGapService",
    "DocumentIndexer",
    "EmbeddingService",
    "FailureMetrics",
    "GapDetectionService",
    "OutlineGenerator",
    "PriorityWeights",
    "compute_priority",
    "extract_questions",
    "is_question",
    "recurrence_score",
]
