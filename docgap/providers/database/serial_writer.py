"""Serialized, atomic JSON persistence for the file-backed stores.

Every store owns exactly one backing file and one SerialJSONWriter. Writes are
queued behind an asyncio.Lock so overlapping flushes from the same process
never interleave, and each write lands via temp file + os.replace so a crash
mid-write leaves the previous file intact. Blocking file I/O runs in a worker
thread.
"""

import asyncio
import json
import os
import time
from pathlib import Path
from typing import Any

from loguru import logger


def write_json_atomic(path: Path, payload: str) -> None:
    """Write ``payload`` to ``path`` through a same-directory temp file.

    The temp file lives next to the target so the final rename stays on one
    device, where POSIX guarantees atomic replacement.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_name(f"{path.name}.{os.getpid()}.{time.time_ns()}.tmp")
    try:
        temp_path.write_text(payload, encoding="utf-8")
        os.replace(temp_path, path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise


def read_json_file(path: Path) -> Any | None:
    """Read and decode a JSON file; None when the file does not exist.

    Raises:
        json.JSONDecodeError: If the file exists but is not valid JSON
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    return json.loads(raw)


def quarantine_file(path: Path) -> Path:
    """Move a corrupt file aside as ``<file>.corrupt_<epoch-ms>``."""
    target = path.with_name(f"{path.name}.corrupt_{int(time.time() * 1000)}")
    os.replace(path, target)
    return target


class SerialJSONWriter:
    """In-process write queue for one JSON file."""

    def __init__(self, path: Path):
        self._path = Path(path)
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    async def write(self, data: dict[str, Any]) -> None:
        """Persist a snapshot of ``data``; resolves once this write has landed.

        The snapshot is serialized before queueing, so later in-memory mutation
        cannot leak into a write that was already requested.
        """
        payload = json.dumps(data, indent=2, ensure_ascii=False)
        async with self._lock:
            await asyncio.to_thread(write_json_atomic, self._path, payload)
        logger.debug(f"Persisted {len(data)} records to {self._path}")
