import os
import tempfile
import unittest
from pathlib import Path

from docgap.core.config import AnalysisConfig, EmbeddingConfig, LLMConfig
from docgap.core.exceptions import ProviderNotConfiguredError
from docgap.core.models import Cluster, Question
from docgap.interfaces.embedding_provider import EmbeddingProvider
from docgap.providers.database.file_vector_store import FileVectorStore
from docgap.services.content_gap_service import ContentGapService
from docgap.services.document_indexer import DocumentIndexer
from docgap.services.embedding_service import EmbeddingService
from docgap.services.gap_detection import GapDetectionService


class _AxisProvider(EmbeddingProvider):
    @property
    def name(self) -> str:
        return "axis"

    @property
    def model(self) -> str:
        return "axis"

    async def embed(self, text: str) -> list[float]:
        return [1.0, 0.0] if "theme" in text.lower() else [0.0, 1.0]


class DocumentIndexerTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.store = FileVectorStore(Path(self._tmp.name) / "embeddings.json")
        self.indexer = DocumentIndexer(EmbeddingService(_AxisProvider()), self.store)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    async def test_index_page_namespaces_key_and_sets_metadata(self) -> None:
        key = await self.indexer.index_page(
            "appearance",
            "Theme settings\n\nPick light or dark.",
            url="https://docs.example.com/appearance",
            site_id="docs",
        )

        self.assertEqual(key, "docs:appearance")
        record = await self.store.get(key)
        assert record is not None
        self.assertEqual(record.vector, [1.0, 0.0])
        self.assertEqual(record.metadata["url"], "https://docs.example.com/appearance")
        self.assertEqual(record.metadata["siteId"], "docs")
        self.assertTrue(record.metadata["summary"].startswith("Theme settings"))
        self.assertIn("updatedAt", record.metadata)

    async def test_index_pages_and_get_summary(self) -> None:
        keys = await self.indexer.index_pages(
            [
                {"id": "themes", "text": "Theme guide", "summary": "All about themes"},
                {"id": "billing", "text": "Invoices and plans"},
            ]
        )

        self.assertEqual(keys, ["default:themes", "default:billing"])
        self.assertEqual(await self.indexer.get_summary("themes"), "All about themes")
        self.assertIsNone(await self.indexer.get_summary("missing"))

    async def test_indexed_pages_cover_matching_clusters(self) -> None:
        await self.indexer.index_page("themes", "Theme guide")
        detector = GapDetectionService(self.store)
        covered = Cluster(centroid=[1.0, 0.0], questions=[Question("Which theme?", "c")])
        uncovered = Cluster(centroid=[0.0, 1.0], questions=[Question("Refunds?", "c")])

        gaps = await detector.detect_gaps([covered, uncovered], coverage_threshold=0.8)

        self.assertEqual([g.cluster for g in gaps], [uncovered])
        self.assertIsNotNone(gaps[0].doc_match)
        self.assertEqual(gaps[0].best_score, 0.0)

    async def test_empty_store_flags_every_cluster(self) -> None:
        detector = GapDetectionService(self.store)
        cluster = Cluster(centroid=[1.0, 0.0], questions=[Question("Which theme?", "c")])

        (gap,) = await detector.detect_gaps([cluster])

        self.assertIsNone(gap.doc_match)


class FromConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self._saved = {k: os.environ.pop(k, None) for k in ("OPENAI_API_KEY", "GEMINI_API_KEY")}

    def tearDown(self) -> None:
        self._tmp.cleanup()
        for key, value in self._saved.items():
            if value is not None:
                os.environ[key] = value

    def _analysis_config(self) -> AnalysisConfig:
        return AnalysisConfig(
            vector_store_path=Path(self._tmp.name) / "embeddings.json",
            gap_store_path=Path(self._tmp.name) / "gap_analysis.json",
        )

    def test_builds_with_keys(self) -> None:
        service = ContentGapService.from_config(
            self._analysis_config(),
            LLMConfig(provider="gemini", api_key="g-test"),
            EmbeddingConfig(api_key="sk-test"),
        )
        self.assertIsInstance(service, ContentGapService)
        self.assertEqual(service.last_run_failures.total_operations, 0)

    def test_missing_key_raises(self) -> None:
        with self.assertRaises(ProviderNotConfiguredError):
            ContentGapService.from_config(
                self._analysis_config(), LLMConfig(), EmbeddingConfig(api_key="sk-test")
            )


if __name__ == "__main__":
    unittest.main()
