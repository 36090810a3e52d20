"""Vector Store Interface for docgap.

Keys are opaque caller-defined strings (e.g. ``siteId:pageId``). The shape is
kept small so a hosted index can replace the file-backed implementation.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from docgap.core.models import QueryMatch, VectorRecord


class VectorStore(ABC):
    """Abstract keyed store of embedding vectors with k-NN lookup."""

    @abstractmethod
    async def upsert(
        self,
        key: str,
        vector: Sequence[float],
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """Persist a vector and metadata, overwriting any record at ``key``."""
        ...

    @abstractmethod
    async def get(self, key: str) -> VectorRecord | None:
        """Return a copy of the record at ``key`` or None."""
        ...

    @abstractmethod
    async def query(self, vector: Sequence[float], k: int = 5) -> list[QueryMatch]:
        """Return the ``k`` nearest records by cosine similarity, best first."""
        ...
