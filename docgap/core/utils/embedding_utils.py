"""Utilities for embedding generation."""

import re

_PARAGRAPH_SPLIT = re.compile(r"\n+")


def approx_token_count(text: str, chars_per_token: int = 4) -> int:
    """Rough token estimate; within ~10% is enough for pre-flight gating."""
    return -(-len(text) // chars_per_token)


def chunk_text_for_embedding(text: str, max_chars: int) -> list[str]:
    """Split text into chunks that each fit the embedding character budget.

    Paragraph boundaries (runs of newlines) are respected where possible:
    paragraphs are greedily joined with a single newline while the result stays
    within ``max_chars``. A paragraph longer than the budget on its own is
    hard-sliced into ``max_chars`` pieces. No overlap is added between chunks.

    Args:
        text: Input text of arbitrary length.
        max_chars: Character budget per chunk.

    Returns:
        Ordered list of chunk strings.

    Examples:
        >>> chunk_text_for_embedding("short", 100)
        ['short']

        >>> chunk_text_for_embedding("aaaa\\nbbbb\\ncc", 9)
        ['aaaa\\nbbbb', 'cc']

        >>> chunk_text_for_embedding("abcdefgh", 3)
        ['abc', 'def', 'gh']
    """
    if max_chars < 1:
        raise ValueError("max_chars must be at least 1")
    if len(text) <= max_chars:
        return [text]

    chunks: list[str] = []
    current = ""

    for para in _PARAGRAPH_SPLIT.split(text):
        candidate = f"{current}\n{para}" if current else para
        if len(candidate) <= max_chars:
            current = candidate
            continue

        if current.strip():
            chunks.append(current.strip())

        if len(para) > max_chars:
            chunks.extend(
                para[i : i + max_chars] for i in range(0, len(para), max_chars)
            )
            current = ""
        else:
            current = para

    if current.strip():
        chunks.append(current.strip())

    return chunks
