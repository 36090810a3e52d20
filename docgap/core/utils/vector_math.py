"""Vector helpers shared by clustering, gap detection and the vector store."""

from collections.abc import Sequence

import numpy as np


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two equal-length vectors.

    Returns 0.0 when either vector has zero magnitude.

    Raises:
        ValueError: If the vectors differ in length
    """
    va = np.asarray(a, dtype=float)
    vb = np.asarray(b, dtype=float)
    if va.shape != vb.shape:
        raise ValueError(f"Vector length mismatch: {va.shape[0]} != {vb.shape[0]}")

    denom = float(np.linalg.norm(va)) * float(np.linalg.norm(vb))
    if denom == 0.0:
        return 0.0
    score = float(np.dot(va, vb)) / denom
    # Rounding can push parallel vectors a hair outside [-1, 1]
    return max(-1.0, min(1.0, score))


def mean_vector(vectors: Sequence[Sequence[float]]) -> list[float]:
    """Element-wise arithmetic mean of equal-length vectors."""
    if not vectors:
        raise ValueError("Cannot average an empty list of vectors")
    return np.asarray(vectors, dtype=float).mean(axis=0).tolist()


def update_running_mean(
    centroid: list[float], vector: Sequence[float], count: int
) -> list[float]:
    """Fold one more member into a running-mean centroid.

    Args:
        centroid: Mean of the previous ``count - 1`` members
        vector: The new member
        count: Member count including the new vector

    Returns:
        ``(centroid * (count - 1) + vector) / count``
    """
    c = np.asarray(centroid, dtype=float)
    v = np.asarray(vector, dtype=float)
    return ((c * (count - 1) + v) / count).tolist()
