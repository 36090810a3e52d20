"""File-backed persistence for documentation vectors and gap themes."""

from .file_vector_store import FileVectorStore
from .gap_theme_store import GapThemeStore
from .serial_writer import SerialJSONWriter

__all__ = [
    "FileVectorStore",
    "GapThemeStore",
    "SerialJSONWriter",
]
