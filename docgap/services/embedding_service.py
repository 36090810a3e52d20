"""Embedding service: arbitrary-length text to one fixed-size vector.

Oversized input is split on paragraph boundaries into chunks under the
provider's character budget, each chunk is embedded independently and the
chunk vectors are averaged element-wise.
"""

import asyncio
from collections.abc import Sequence

from loguru import logger

from docgap.core.config.embedding_config import (
    DEFAULT_CHARS_PER_TOKEN,
    DEFAULT_MAX_MODEL_TOKENS,
)
from docgap.core.exceptions import EmbeddingDimensionMismatchError, InvalidInputError
from docgap.core.utils.embedding_utils import chunk_text_for_embedding
from docgap.core.utils.vector_math import mean_vector
from docgap.interfaces.embedding_provider import EmbeddingProvider

DEFAULT_BATCH_SIZE = 128
DEFAULT_CONCURRENCY = 8


class EmbeddingService:
    """Chunking, averaging and rate-bounded fan-out over an EmbeddingProvider."""

    def __init__(
        self,
        provider: EmbeddingProvider,
        max_chars: int = DEFAULT_MAX_MODEL_TOKENS * DEFAULT_CHARS_PER_TOKEN,
    ):
        """Initialize embedding service.

        Args:
            provider: Vendor embedding provider
            max_chars: Character budget per provider call
        """
        if max_chars < 1:
            raise ValueError("max_chars must be at least 1")
        self._provider = provider
        self._max_chars = max_chars

    @property
    def max_chars(self) -> int:
        return self._max_chars

    async def embed(self, text: str) -> list[float]:
        """Embed text of any length.

        Raises:
            InvalidInputError: If text is not a string or is blank
            EmbeddingDimensionMismatchError: If chunk vectors differ in size
        """
        return await self._embed(text, None)

    async def _embed(
        self, text: str, semaphore: asyncio.Semaphore | None
    ) -> list[float]:
        if not isinstance(text, str) or not text.strip():
            raise InvalidInputError("embed() requires a non-empty string")

        async def embed_chunk(chunk: str) -> list[float]:
            if semaphore is None:
                return await self._provider.embed(chunk)
            async with semaphore:
                return await self._provider.embed(chunk)

        chunks = chunk_text_for_embedding(text, self._max_chars)
        vectors = await asyncio.gather(*(embed_chunk(c) for c in chunks))

        if len(vectors) == 1:
            return vectors[0]

        logger.debug(
            f"Averaging {len(vectors)} chunk embeddings for {len(text):,} chars"
        )
        dims = len(vectors[0])
        for vec in vectors[1:]:
            if len(vec) != dims:
                raise EmbeddingDimensionMismatchError(dims, len(vec))
        return mean_vector(vectors)

    async def embed_many(
        self,
        texts: Sequence[str],
        batch_size: int = DEFAULT_BATCH_SIZE,
        concurrency: int = DEFAULT_CONCURRENCY,
    ) -> list[list[float]]:
        """Embed many texts without bursting upstream rate limits.

        Texts are processed in sequential fixed-size batches; within a batch at
        most ``concurrency`` provider calls are in flight, counting every chunk
        of an oversized text. Output order matches input order. The first
        failure propagates.
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")

        semaphore = asyncio.Semaphore(concurrency)

        vectors: list[list[float]] = []
        for start in range(0, len(texts), batch_size):
            batch = texts[start : start + batch_size]
            vectors.extend(
                await asyncio.gather(*(self._embed(t, semaphore) for t in batch))
            )
            logger.debug(
                f"Embedded batch {start // batch_size + 1} "
                f"({start + len(batch)}/{len(texts)} texts)"
            )
        return vectors
