"""Priority scoring for documentation gap suggestions.

The score is a weighted combination of two 0-100 dimensions:
1. frequency: questions in the cluster, relative to the largest cluster of
   the current run
2. recurring: how often the theme has been seen across runs, 10 points per
   occurrence, capped at 100

The weighted sum is rounded and clamped to 0-100. Weights need not sum to 1.
"""

import math
from dataclasses import dataclass

from docgap.core.config.analysis_config import (
    DEFAULT_FREQUENCY_WEIGHT,
    DEFAULT_RECURRING_WEIGHT,
)

RECURRENCE_POINTS_PER_OCCURRENCE = 10
MAX_PRIORITY = 100


@dataclass(frozen=True)
class PriorityWeights:
    frequency: float = DEFAULT_FREQUENCY_WEIGHT
    recurring: float = DEFAULT_RECURRING_WEIGHT


def recurrence_score(occurrences: int) -> int:
    """Map a theme's occurrence count onto the 0-100 recurring scale."""
    return min(MAX_PRIORITY, max(0, occurrences) * RECURRENCE_POINTS_PER_OCCURRENCE)


def compute_priority(
    frequency: int,
    max_frequency: int,
    recurring: float,
    weights: PriorityWeights | None = None,
) -> int:
    """Compute a 0-100 priority score.

    Args:
        frequency: Question count of the gap cluster
        max_frequency: Largest cluster size in this run
        recurring: Recurrence score on the 0-100 scale
        weights: Term weights; defaults to 0.7 frequency / 0.3 recurring

    Raises:
        ValueError: If max_frequency is not positive
    """
    if max_frequency <= 0:
        raise ValueError("compute_priority: max_frequency must be a positive number")

    weights = weights or PriorityWeights()
    freq_norm = (frequency / max_frequency) * 100
    raw = freq_norm * weights.frequency + recurring * weights.recurring
    # Half-up rounding, clamped
    return max(0, min(MAX_PRIORITY, math.floor(raw + 0.5)))
