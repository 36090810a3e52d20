"""Persistent store of recurring gap themes.

Themes are keyed by a stable slug of the normalised topic so that the same
gap detected in different runs collapses into one record whose occurrence
counter and ``lastSeen`` timestamp advance:

    {
      "how-do-i-enable-dark-mode": {
        "topic": "How do I enable dark mode?",
        "occurrences": 3,
        "lastSeen": "2025-07-24T11:01:05.987Z",
        "firstSeen": "2025-07-20T09:12:44.001Z"
      }
    }

Mutation is two-phase: ``record_theme`` updates memory only, ``save`` flushes
the whole cache once per analysis run.
"""

import asyncio
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from loguru import logger

from docgap.core.models import GapTheme
from docgap.providers.database.serial_writer import (
    SerialJSONWriter,
    quarantine_file,
    read_json_file,
)

DEFAULT_GAP_STORE_PATH = Path("data") / "gap_analysis.json"


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and ``Z`` suffix."""
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def _is_theme_record(value: Any) -> bool:
    """Object entry whose ``occurrences``, when present, is a non-negative int."""
    if not isinstance(value, dict):
        return False
    occurrences = value.get("occurrences", 0)
    return (
        isinstance(occurrences, int)
        and not isinstance(occurrences, bool)
        and occurrences >= 0
    )


class GapThemeStore:
    """JSON-backed occurrence tracking for gap themes."""

    def __init__(self, path: str | Path = DEFAULT_GAP_STORE_PATH):
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
                self._cache = await self._read_or_recover()
        return self._cache

    async def _read_or_recover(self) -> dict[str, dict[str, Any]]:
        try:
            data = await asyncio.to_thread(read_json_file, self._path)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            reason = f"invalid JSON: {e}"
        else:
            if data is None:
                return {}
            if isinstance(data, dict):
                themes = {k: v for k, v in data.items() if _is_theme_record(v)}
                if len(themes) != len(data):
                    logger.warning(
                        f"Dropped {len(data) - len(themes)} malformed theme entries "
                        f"from {self._path}"
                    )
                return themes
            reason = f"top-level {type(data).__name__}, expected object"

        # Corrupted file: move it aside and start over
        backup = await asyncio.to_thread(quarantine_file, self._path)
        logger.warning(
            f"Gap store {self._path} was unreadable ({reason}); "
            f"moved to {backup.name} and starting empty"
        )
        return {}

    async def record_theme(self, theme_id: str, topic: str | None = None) -> GapTheme:
        """Count one more occurrence of a theme in memory.

        Call ``save()`` after the run's mutations to persist them.

        Args:
            theme_id: Stable slug identifying the theme
            topic: Representative topic text; keeps the stored topic when None

        Returns:
            Copy of the updated theme
        """
        if not isinstance(theme_id, str) or not theme_id:
            raise TypeError("theme_id must be a non-empty string")

        store = await self._load()
        now = utc_now_iso()
        record = store.get(theme_id)
        if record is None:
            record = {"topic": topic or "", "occurrences": 0, "firstSeen": now}
            store[theme_id] = record

        record["occurrences"] = int(record.get("occurrences", 0)) + 1
        record["lastSeen"] = now
        if topic is not None:
            record["topic"] = topic

        return GapTheme.from_record(theme_id, record)

    async def save(self) -> None:
        """Flush the full in-memory cache to disk atomically."""
        store = await self._load()
        await self._writer.write(store)
        logger.debug(f"Saved {len(store)} gap themes to {self._path}")

    async def get(self, theme_id: str) -> GapTheme | None:
        store = await self._load()
        record = store.get(theme_id)
        return GapTheme.from_record(theme_id, record) if record is not None else None

    async def list_themes(self) -> list[GapTheme]:
        """All themes, most recurring first (ties: most recently seen first)."""
        store = await self._load()
        themes = [GapTheme.from_record(k, v) for k, v in store.items()]
        themes.sort(key=lambda t: (t.occurrences, t.last_seen), reverse=True)
        return themes
