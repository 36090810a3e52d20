from __future__ import annotations

import re

import xxhash

# Unicode-aware: keeps letters and digits of any script, drops underscores
_NON_WORD = re.compile(r"[^\w\s]|_")
_WHITESPACE = re.compile(r"\s+")

THEME_ID_MAX_LENGTH = 60
THEME_ID_DIGEST_LENGTH = 8


def normalize_question(text: str) -> str:
    """Lowercase, drop punctuation and collapse whitespace."""
    lowered = text.lower()
    return _WHITESPACE.sub(" ", _NON_WORD.sub("", lowered)).strip()


def slugify_kebab(
    text: str,
    *,
    fallback: str = "topic",
    max_length: int | None = None,
    ascii_only: bool = False,
) -> str:
    """Convert text into a lowercase dash-separated slug.

    Normalization:
    - Lowercases input.
    - Replaces any sequence of non-alphanumerics with a single dash.
    - Trims leading/trailing dashes.
    - Uses `fallback` when the slug would be empty.

    Args:
        text: Input text to normalize.
        fallback: Slug to use when the normalized result is empty.
        max_length: Optional maximum slug length.
        ascii_only: When True, only ASCII letters/digits are preserved.

    Returns:
        A key-friendly slug string.
    """
    normalized = text.strip().lower()
    slug_chars: list[str] = []
    prev_dash = False
    for ch in normalized:
        if ch.isalnum() and (not ascii_only or ch.isascii()):
            slug_chars.append(ch)
            prev_dash = False
            continue
        if not prev_dash:
            slug_chars.append("-")
            prev_dash = True

    slug = "".join(slug_chars).strip("-")
    if not slug:
        slug = fallback

    if max_length is not None and len(slug) > max_length:
        slug = slug[:max_length].rstrip("-")
        if not slug:
            slug = fallback

    return slug


def theme_id_for(topic: str) -> str:
    """Stable gap theme id: identical normalised topics map to the same id.

    Short topics become a plain kebab slug in any script. When the slug would
    be truncated or is empty, an xxHash3 digest of the full normalised topic
    is appended so distinct topics never share an id.
    """
    normalized = normalize_question(topic)
    slug = slugify_kebab(normalized, fallback="")
    if slug and len(slug) <= THEME_ID_MAX_LENGTH:
        return slug

    digest = xxhash.xxh3_64(
        (normalized or topic.strip()).encode("utf-8")
    ).hexdigest()[:THEME_ID_DIGEST_LENGTH]
    head = slug[: THEME_ID_MAX_LENGTH - THEME_ID_DIGEST_LENGTH - 1].rstrip("-")
    return f"{head or 'gap'}-{digest}"


def truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit]
