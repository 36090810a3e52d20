"""Heuristic extraction of candidate user questions from conversation logs.

Accepted conversation shapes:
- a flat list of message strings
- a mapping ``{"id": ..., "messages": [...], "timestamp"?: ...}``

Messages are strings or mappings with a ``text`` key (optional
``timestamp``). Author role is ignored; filtering to end-user messages is the
caller's job.
"""

import re
from collections.abc import Mapping, Sequence
from typing import Any

from docgap.core.models import Question

INTERROGATIVE_WORDS = frozenset(
    {"what", "how", "why", "when", "where", "is", "are", "do", "does", "can"}
)

_FIRST_WORD = re.compile(r"[A-Za-z]+\b")


def is_question(message: str) -> bool:
    """True when the message ends in '?' or opens with an interrogative word."""
    trimmed = message.strip()
    if not trimmed:
        return False
    if trimmed.endswith("?"):
        return True
    match = _FIRST_WORD.match(trimmed)
    return match is not None and match.group(0).lower() in INTERROGATIVE_WORDS


def _message_text(message: Any) -> tuple[str | None, str | None]:
    if isinstance(message, str):
        return message, None
    if isinstance(message, Mapping) and isinstance(message.get("text"), str):
        return message["text"], message.get("timestamp")
    return None, None


def _conversation_parts(
    conversation: Any, index: int
) -> tuple[str, Sequence[Any], str | None] | None:
    if isinstance(conversation, Mapping):
        messages = conversation.get("messages")
        if isinstance(messages, (str, bytes)) or not isinstance(messages, Sequence):
            return None
        conv_id = conversation.get("id")
        source_id = str(conv_id) if conv_id is not None else f"conv-{index}"
        return source_id, messages, conversation.get("timestamp")
    if isinstance(conversation, Sequence) and not isinstance(
        conversation, (str, bytes)
    ):
        return f"conv-{index}", conversation, None
    return None


def extract_questions(conversations: Sequence[Any]) -> list[Question]:
    """Pull candidate questions out of raw conversation logs.

    Args:
        conversations: List of conversations (see module docstring)

    Returns:
        Questions in log order

    Raises:
        TypeError: If ``conversations`` is not a list-like sequence
    """
    if isinstance(conversations, (str, bytes, Mapping)) or not isinstance(
        conversations, Sequence
    ):
        raise TypeError("extract_questions expects a list of conversations")

    questions: list[Question] = []
    for index, conversation in enumerate(conversations):
        parts = _conversation_parts(conversation, index)
        if parts is None:
            continue
        source_id, messages, conv_timestamp = parts

        for message in messages:
            text, timestamp = _message_text(message)
            if text is None or not is_question(text):
                continue
            questions.append(
                Question(
                    text=text.strip(),
                    source_id=source_id,
                    timestamp=timestamp or conv_timestamp,
                )
            )

    return questions
