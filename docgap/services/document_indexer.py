"""Document indexer: populates the documentation vector store.

Pages are embedded through the EmbeddingService and upserted under a
site-namespaced key (``<site_id>:<page_id>``) so several documentation sites
can share one store. Fetching and cleaning HTML is the caller's job; the
indexer takes plain text.
"""

from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from loguru import logger

from docgap.interfaces.vector_store import VectorStore
from docgap.services.embedding_service import EmbeddingService
from docgap.utils.text import truncate

DEFAULT_SITE_ID = "default"

# Used when the caller supplies no summary of its own
SUMMARY_FALLBACK_CHARS = 500


def page_key(page_id: str, site_id: str = DEFAULT_SITE_ID) -> str:
    return f"{site_id}:{page_id}"


class DocumentIndexer:
    """Embeds documentation pages and stores them for gap detection."""

    def __init__(self, embedding_service: EmbeddingService, vector_store: VectorStore):
        self._embedding_service = embedding_service
        self._vector_store = vector_store

    async def index_page(
        self,
        page_id: str,
        text: str,
        url: str | None = None,
        summary: str | None = None,
        site_id: str = DEFAULT_SITE_ID,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        """Embed one page and upsert it.

        Args:
            page_id: Stable page identifier (slug or path)
            text: Cleaned page text
            url: Absolute page URL, kept in metadata
            summary: Short page summary; defaults to the head of ``text``
            site_id: Documentation site namespace
            metadata: Extra metadata merged over the defaults

        Returns:
            The vector store key the page was written under
        """
        vector = await self._embedding_service.embed(text)

        key = page_key(page_id, site_id)
        record_metadata: dict[str, Any] = {
            "url": url,
            "summary": summary
            if summary is not None
            else truncate(text.strip(), SUMMARY_FALLBACK_CHARS),
            "siteId": site_id,
            "updatedAt": datetime.now(timezone.utc).isoformat(),
        }
        if metadata:
            record_metadata.update(metadata)

        await self._vector_store.upsert(key, vector, record_metadata)
        logger.debug(f"Indexed page {key} ({len(text):,} chars)")
        return key

    async def index_pages(
        self,
        pages: Iterable[dict[str, Any]],
        site_id: str = DEFAULT_SITE_ID,
    ) -> list[str]:
        """Index pages sequentially.

        Each page is a mapping with ``id`` and ``text`` and optional ``url``,
        ``summary`` and ``metadata``. The first failure propagates.
        """
        keys: list[str] = []
        for page in pages:
            keys.append(
                await self.index_page(
                    page["id"],
                    page["text"],
                    url=page.get("url"),
                    summary=page.get("summary"),
                    site_id=site_id,
                    metadata=page.get("metadata"),
                )
            )
        logger.info(f"Indexed {len(keys)} documentation pages for site {site_id!r}")
        return keys

    async def get_summary(
        self, page_id: str, site_id: str = DEFAULT_SITE_ID
    ) -> str | None:
        """Stored summary for a page, or None when the page is not indexed."""
        record = await self._vector_store.get(page_key(page_id, site_id))
        if record is None:
            return None
        summary = record.metadata.get("summary")
        return summary if isinstance(summary, str) else None
