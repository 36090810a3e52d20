import json
import tempfile
import unittest
from pathlib import Path

from docgap.providers.database.gap_theme_store import GapThemeStore


class GapThemeStoreTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "gap_analysis.json"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    async def test_record_is_in_memory_until_save(self) -> None:
        store = GapThemeStore(self.path)

        theme = await store.record_theme("dark-mode", "How do I enable dark mode?")

        self.assertEqual(theme.occurrences, 1)
        self.assertEqual(theme.first_seen, theme.last_seen)
        self.assertTrue(theme.last_seen.endswith("Z"))
        self.assertFalse(self.path.exists())

        await store.save()
        on_disk = json.loads(self.path.read_text(encoding="utf-8"))
        self.assertEqual(on_disk["dark-mode"]["occurrences"], 1)
        self.assertEqual(on_disk["dark-mode"]["topic"], "How do I enable dark mode?")
        self.assertIn("lastSeen", on_disk["dark-mode"])
        self.assertIn("firstSeen", on_disk["dark-mode"])

    async def test_occurrences_accumulate_across_saved_runs(self) -> None:
        for _ in range(3):
            store = GapThemeStore(self.path)
            await store.record_theme("dark-mode", "How do I enable dark mode?")
            await store.save()

        theme = await GapThemeStore(self.path).get("dark-mode")
        assert theme is not None
        self.assertEqual(theme.occurrences, 3)

    async def test_first_seen_kept_and_topic_preserved_without_override(self) -> None:
        store = GapThemeStore(self.path)
        first = await store.record_theme("t", "Original topic")
        second = await store.record_theme("t")

        self.assertEqual(second.first_seen, first.first_seen)
        self.assertEqual(second.topic, "Original topic")
        self.assertEqual(second.occurrences, 2)

    async def test_get_unknown_returns_none(self) -> None:
        self.assertIsNone(await GapThemeStore(self.path).get("missing"))

    async def test_invalid_theme_id(self) -> None:
        store = GapThemeStore(self.path)
        for bad in ("", None, 12):
            with self.assertRaises(TypeError):
                await store.record_theme(bad)  # type: ignore[arg-type]

    async def test_corrupt_file_quarantined_and_store_starts_empty(self) -> None:
        self.path.write_text("{ this is not json", encoding="utf-8")

        store = GapThemeStore(self.path)
        self.assertIsNone(await store.get("anything"))

        backups = list(Path(self._tmp.name).glob("gap_analysis.json.corrupt_*"))
        self.assertEqual(len(backups), 1)
        self.assertEqual(backups[0].read_text(encoding="utf-8"), "{ this is not json")

        await store.record_theme("fresh", "Fresh topic")
        await store.save()
        self.assertEqual(list(json.loads(self.path.read_text(encoding="utf-8"))), ["fresh"])

    async def test_invalid_utf8_file_quarantined(self) -> None:
        self.path.write_bytes(b'{"a": \xff')

        store = GapThemeStore(self.path)
        self.assertEqual(await store.list_themes(), [])

        backups = list(Path(self._tmp.name).glob("gap_analysis.json.corrupt_*"))
        self.assertEqual(len(backups), 1)
        self.assertEqual(backups[0].read_bytes(), b'{"a": \xff')

    async def test_malformed_entries_dropped(self) -> None:
        self.path.write_text(
            json.dumps(
                {
                    "bad": {"topic": "Bad", "occurrences": "many"},
                    "negative": {"topic": "Negative", "occurrences": -2},
                    "ok": {"topic": "Ok", "occurrences": 2},
                }
            ),
            encoding="utf-8",
        )

        store = GapThemeStore(self.path)
        self.assertEqual([t.id for t in await store.list_themes()], ["ok"])

        theme = await store.record_theme("ok")
        self.assertEqual(theme.occurrences, 3)

    async def test_non_object_top_level_quarantined(self) -> None:
        self.path.write_text("[1, 2, 3]", encoding="utf-8")

        store = GapThemeStore(self.path)
        self.assertEqual(await store.list_themes(), [])
        self.assertEqual(
            len(list(Path(self._tmp.name).glob("gap_analysis.json.corrupt_*"))), 1
        )

    async def test_list_themes_sorted_by_occurrences(self) -> None:
        store = GapThemeStore(self.path)
        await store.record_theme("once", "Once")
        for _ in range(3):
            await store.record_theme("thrice", "Thrice")
        for _ in range(2):
            await store.record_theme("twice", "Twice")

        themes = await store.list_themes()
        self.assertEqual([t.id for t in themes], ["thrice", "twice", "once"])

    async def test_save_without_records_writes_empty_object(self) -> None:
        await GapThemeStore(self.path).save()
        self.assertEqual(json.loads(self.path.read_text(encoding="utf-8")), {})


if __name__ == "__main__":
    unittest.main()
