"""Failure tracking for tolerated per-gap errors.

Outline generation is allowed to fail for individual gaps without aborting a
run; those failures are categorised and collected here so callers can see how
many suggestions carry placeholder outlines and why.
"""

import asyncio
import json
from collections import Counter
from dataclasses import dataclass, field
from typing import Any


def categorize_error(exception: BaseException) -> str:
    """Categorize exception into standard error type.

    Returns:
        Error category: timeout, network, api_error, validation, or unknown
    """
    if isinstance(exception, (asyncio.TimeoutError, TimeoutError)):
        return "timeout"

    type_name = type(exception).__name__
    if any(
        marker in type_name
        for marker in ("ConnectionError", "HTTPError", "ConnectTimeout", "ReadTimeout")
    ):
        return "network"

    # API errors (rate limits, auth, quota)
    exc_str = str(exception).lower()
    if "rate limit" in exc_str or "429" in exc_str:
        return "api_error"
    if "unauthorized" in exc_str or "401" in exc_str or "403" in exc_str:
        return "api_error"
    if "api key" in exc_str or "api_key" in exc_str:
        return "api_error"
    if "quota" in exc_str:
        return "api_error"

    if isinstance(exception, (json.JSONDecodeError, ValueError, TypeError, KeyError)):
        return "validation"
    if "ValidationError" in type_name:
        return "validation"

    return "unknown"


@dataclass
class FailureInfo:
    """Information about a single failure."""

    item_description: str
    error_message: str
    error_type: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "item": self.item_description,
            "error": self.error_message,
            "type": self.error_type,
        }


@dataclass
class FailureMetrics:
    """Tracks failures across a batch of operations."""

    total_operations: int = 0
    failures: list[FailureInfo] = field(default_factory=list)

    def add_failure(self, item_description: str, exception: BaseException) -> None:
        """Record a failure with automatic error categorization.

        Args:
            item_description: Description of the failed item (e.g., gap topic)
            exception: The exception that occurred
        """
        self.failures.append(
            FailureInfo(
                item_description=item_description,
                error_message=f"{type(exception).__name__}: {exception}",
                error_type=categorize_error(exception),
            )
        )

    @property
    def success_count(self) -> int:
        return self.total_operations - len(self.failures)

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    @property
    def failure_rate(self) -> float:
        """Failure rate as a fraction (0.0 to 1.0)."""
        if self.total_operations == 0:
            return 0.0
        return len(self.failures) / self.total_operations

    def to_dict(self, max_items: int = 5) -> dict[str, Any]:
        """Structured summary: count, total, rate, and when failing by_type/items."""
        if not self.failures:
            return {
                "count": 0,
                "total": self.total_operations,
                "rate": 0.0,
            }

        type_counts = Counter(f.error_type for f in self.failures)
        return {
            "count": len(self.failures),
            "total": self.total_operations,
            "rate": self.failure_rate,
            "by_type": dict(type_counts),
            "items": [f.to_dict() for f in self.failures[:max_items]],
        }
