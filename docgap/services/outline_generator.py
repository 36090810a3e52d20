"""Outline Generator: LLM-drafted documentation outlines for detected gaps.

One completion per gap. The model is asked for a small JSON object; anything
that cannot be parsed into a usable outline degrades to a placeholder so a
single bad response never aborts an analysis run.
"""

from __future__ import annotations

import json
import re
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from loguru import logger

from docgap.core.config.analysis_config import DEFAULT_MAX_SAMPLE_QUESTIONS
from docgap.core.models import Outline
from docgap.services.failure_tracker import FailureMetrics
from docgap.utils.text import truncate

if TYPE_CHECKING:
    from docgap.interfaces.llm_provider import LLMProvider

FALLBACK_OUTLINE = "- TBD"
FALLBACK_TOPIC_MAX_CHARS = 50

# Closest-page summaries can be long; only the head is useful as context
DOC_SUMMARY_MAX_CHARS = 1200

OUTLINE_SYSTEM = (
    "You are a technical writer. You propose documentation pages that answer "
    "questions users keep asking. Reply with JSON only."
)

OUTLINE_USER = """Users repeatedly asked about the following topic, and the existing documentation does not cover it well.

Topic: {topic}

Sample questions:
{questions}
{doc_context}
Propose a documentation page for this topic. Respond with a single JSON object:
{{"topic": "<short page title>", "outline": "<markdown bullet outline>"}}"""

OUTLINE_DOC_CONTEXT = """
Closest existing documentation (summary):
{summary}
"""

# Pattern to extract JSON from LLM response (may be wrapped in ```json ... ```)
_JSON_BLOCK_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)


class OutlineParseError(ValueError):
    """Raised when an LLM response does not contain a usable outline."""


def _extract_json_object(response: str) -> dict[str, Any]:
    """Extract the outline object from an LLM response.

    Tries the raw text, then a fenced code block, then the first ``{...}``
    span.

    Raises:
        OutlineParseError: If no attempt yields a JSON object
    """
    text = response.strip()
    candidates = [text]

    match = _JSON_BLOCK_PATTERN.search(text)
    if match:
        candidates.append(match.group(1).strip())

    brace_start = text.find("{")
    brace_end = text.rfind("}")
    if brace_start != -1 and brace_end > brace_start:
        candidates.append(text[brace_start : brace_end + 1])

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed

    raise OutlineParseError("LLM response did not contain a JSON object")


def parse_outline(response: str, fallback_topic: str) -> Outline:
    """Turn raw LLM text into an Outline.

    Raises:
        OutlineParseError: If the object has no non-empty ``outline`` string
    """
    data = _extract_json_object(response)

    outline = data.get("outline")
    if isinstance(outline, list):
        outline = "\n".join(str(item) for item in outline)
    if not isinstance(outline, str) or not outline.strip():
        raise OutlineParseError("LLM response has no outline")

    topic = data.get("topic")
    if not isinstance(topic, str) or not topic.strip():
        topic = fallback_topic

    return Outline(topic=topic.strip(), outline=outline.strip())


def fallback_outline(topic: str) -> Outline:
    return Outline(
        topic=topic[:FALLBACK_TOPIC_MAX_CHARS],
        outline=FALLBACK_OUTLINE,
        fallback=True,
    )


class OutlineGenerator:
    """Drafts outlines for gap topics through an LLMProvider."""

    def __init__(
        self,
        llm_provider: LLMProvider,
        max_sample_questions: int = DEFAULT_MAX_SAMPLE_QUESTIONS,
        max_completion_tokens: int | None = None,
    ):
        """Initialize outline generator.

        Args:
            llm_provider: Provider used for completions
            max_sample_questions: Questions quoted in the prompt per gap
            max_completion_tokens: Override for the provider's token limit
        """
        self._llm = llm_provider
        self._max_sample_questions = max_sample_questions
        self._max_completion_tokens = max_completion_tokens

    def build_prompt(
        self,
        topic: str,
        sample_questions: Sequence[str],
        doc_summary: str | None = None,
    ) -> str:
        samples = list(sample_questions)[: self._max_sample_questions]
        questions = "\n".join(f"- {q}" for q in samples) or "- (none)"

        doc_context = ""
        if doc_summary and doc_summary.strip():
            doc_context = OUTLINE_DOC_CONTEXT.format(
                summary=truncate(doc_summary.strip(), DOC_SUMMARY_MAX_CHARS)
            )

        return OUTLINE_USER.format(
            topic=topic, questions=questions, doc_context=doc_context
        )

    async def generate(
        self,
        topic: str,
        sample_questions: Sequence[str],
        doc_summary: str | None = None,
        failures: FailureMetrics | None = None,
    ) -> Outline:
        """Generate an outline, falling back to a placeholder on any failure.

        Args:
            topic: Representative question of the gap cluster
            sample_questions: Member questions, most representative first
            doc_summary: Summary of the closest documentation page, if any
            failures: Run-level tracker that receives tolerated failures

        Returns:
            Parsed Outline, or the placeholder with ``fallback=True``
        """
        if failures is not None:
            failures.total_operations += 1

        prompt = self.build_prompt(topic, sample_questions, doc_summary)

        try:
            response = await self._llm.complete(
                prompt,
                system=OUTLINE_SYSTEM,
                max_completion_tokens=self._max_completion_tokens,
            )
            outline = parse_outline(response.content, topic)
        except Exception as e:
            logger.warning(f"Outline generation failed for {topic!r}: {e}")
            if failures is not None:
                failures.add_failure(topic, e)
            return fallback_outline(topic)

        logger.debug(f"Outline generated for {topic!r} ({len(outline.outline)} chars)")
        return outline
