"""JSON file-backed vector store with brute-force cosine k-NN.

Records are stored as a single JSON object:

    {
      "<key>": {"vector": [...], "metadata": {...}},
      ...
    }

Queries scan every record (O(n) per query), which is fine for corpora in the
low thousands. Larger corpora belong in a dedicated ANN index behind the same
VectorStore interface.
"""

import asyncio
import numbers
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from loguru import logger

from docgap.core.models import QueryMatch, VectorRecord
from docgap.core.utils.vector_math import cosine_similarity
from docgap.interfaces.vector_store import VectorStore
from docgap.providers.database.serial_writer import SerialJSONWriter, read_json_file

DEFAULT_VECTOR_STORE_PATH = Path("data") / "embeddings.json"


def _coerce_vector(vector: Any) -> list[float]:
    if isinstance(vector, (str, bytes)) or not isinstance(vector, Sequence):
        raise TypeError("vector must be a sequence of numbers")
    if not all(
        isinstance(x, numbers.Real) and not isinstance(x, bool) for x in vector
    ):
        raise TypeError("vector must contain only numbers")
    return [float(x) for x in vector]


class FileVectorStore(VectorStore):
    """Vector store persisted to one pretty-printed JSON file."""

    def __init__(self, path: str | Path = DEFAULT_VECTOR_STORE_PATH):
        self._path = Path(path)
        self._cache: dict[str, dict[str, Any]] | None = None
        self._load_lock = asyncio.Lock()
        self._writer = SerialJSONWriter(self._path)

    @property
    def path(self) -> Path:
        return self._path

    async def _load(self) -> dict[str, dict[str, Any]]:
        if self._cache is not None:
            return self._cache

        async with self._load_lock:
            if self._cache is None:
                data = await asyncio.to_thread(read_json_file, self._path)
                if data is None:
                    data = {}
                elif not isinstance(data, dict):
                    raise ValueError(
                        f"Vector store file {self._path} must contain a JSON object"
                    )
                self._cache = data
                logger.debug(f"Loaded {len(data)} vectors from {self._path}")
        return self._cache

    async def _commit(self, key: str, record: dict[str, Any] | None) -> None:
        """Set (or remove, when ``record`` is None) one entry and persist.

        The cache is rolled back when the write fails, so a record that cannot
        be serialized never poisons later writes.
        """
        store = await self._load()
        missing = object()
        previous = store.get(key, missing)
        if record is None:
            store.pop(key, None)
        else:
            store[key] = record

        try:
            await self._writer.write(store)
        except Exception:
            if previous is missing:
                store.pop(key, None)
            else:
                store[key] = previous
            raise

    async def upsert(
        self,
        key: str,
        vector: Sequence[float],
        metadata: dict[str, Any] | None = None,
    ) -> None:
        if not isinstance(key, str) or not key:
            raise TypeError("key must be a non-empty string")
        values = _coerce_vector(vector)

        await self._commit(key, {"vector": values, "metadata": dict(metadata or {})})

    async def get(self, key: str) -> VectorRecord | None:
        store = await self._load()
        record = store.get(key)
        if record is None:
            return None
        return VectorRecord(
            key=key,
            vector=list(record["vector"]),
            metadata=dict(record.get("metadata") or {}),
        )

    async def query(self, vector: Sequence[float], k: int = 5) -> list[QueryMatch]:
        query_vector = _coerce_vector(vector)
        if k <= 0:
            return []

        store = await self._load()
        matches = [
            QueryMatch(
                key=key,
                score=cosine_similarity(query_vector, record["vector"]),
                metadata=dict(record.get("metadata") or {}),
            )
            for key, record in store.items()
        ]

        # Higher score = closer; stable sort keeps insertion order on ties
        matches.sort(key=lambda match: match.score, reverse=True)
        return matches[:k]

    async def delete(self, key: str) -> bool:
        """Remove a record; returns False when the key was absent."""
        store = await self._load()
        if key not in store:
            return False
        await self._commit(key, None)
        return True

    async def count(self) -> int:
        return len(await self._load())

    async def keys(self) -> list[str]:
        return list(await self._load())
