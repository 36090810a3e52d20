"""Data models for content gap analysis.

Key concepts:
- Question: candidate user question pulled from a conversation log
- Cluster: group of near-duplicate questions with a running-mean centroid
- VectorRecord / QueryMatch: persisted embedding and a k-NN result
- GapTheme: cross-run identity of a gap, persisted by the gap theme store
- GapCandidate: cluster flagged as poorly covered by documentation
- GapSuggestion: ranked output of one analysis run
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Question:
    """Candidate question extracted from a conversation."""

    text: str
    source_id: str  # Conversation identifier the question came from
    timestamp: str | None = None


@dataclass
class Cluster:
    """Near-duplicate questions grouped around a running-mean centroid."""

    centroid: list[float]
    questions: list[Question] = field(default_factory=list)
    topic: str = ""

    @property
    def size(self) -> int:
        return len(self.questions)

    def question_texts(self) -> list[str]:
        return [q.text for q in self.questions]


@dataclass
class VectorRecord:
    """Stored embedding with its caller-defined key and metadata."""

    key: str
    vector: list[float]
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class QueryMatch:
    """Single nearest-neighbour result from a vector store query."""

    key: str
    score: float  # Cosine similarity in [-1, 1]
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class GapTheme:
    """Persisted identity of a gap across analysis runs."""

    id: str
    topic: str
    occurrences: int
    last_seen: str  # ISO-8601 UTC timestamp
    first_seen: str | None = None

    @classmethod
    def from_record(cls, theme_id: str, record: dict[str, Any]) -> GapTheme:
        return cls(
            id=theme_id,
            topic=str(record.get("topic") or ""),
            occurrences=int(record.get("occurrences", 0)),
            last_seen=str(record.get("lastSeen") or ""),
            first_seen=record.get("firstSeen"),
        )


@dataclass
class GapCandidate:
    """Cluster whose best documentation match falls below coverage."""

    cluster: Cluster
    doc_match: QueryMatch | None = None

    @property
    def best_score(self) -> float:
        return self.doc_match.score if self.doc_match else 0.0


@dataclass
class Outline:
    """Documentation outline proposed for a gap."""

    topic: str
    outline: str
    fallback: bool = False  # True when the placeholder was substituted


@dataclass
class GapSuggestion:
    """Ranked documentation suggestion produced by one analysis run."""

    topic: str
    outline: str
    priority: int  # 0-100
    frequency: int  # Question count in the cluster
    recurring: int  # Theme occurrences including this run
    theme_id: str = ""
    sample_questions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation.

        Returns:
            JSON-ready dictionary with camelCase keys for downstream sheets/chat
        """
        return {
            "topic": self.topic,
            "outline": self.outline,
            "priority": self.priority,
            "frequency": self.frequency,
            "recurring": self.recurring,
            "themeId": self.theme_id,
            "sampleQuestions": list(self.sample_questions),
        }
