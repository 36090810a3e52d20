"""Tests for heuristic question extraction."""

import pytest

from docgap.services.question_extractor import extract_questions, is_question
from docgap.utils.text import normalize_question, theme_id_for


class TestIsQuestion:
    @pytest.mark.parametrize(
        "message",
        [
            "How do I enable dark mode?",
            "why is the export slow",
            "Can I rename a workspace",
            "  Does it support SSO  ",
            "the sync fails?",
        ],
    )
    def test_detected(self, message):
        assert is_question(message)

    @pytest.mark.parametrize(
        "message",
        ["Thanks!", "Random chatter", "", "   ", "Showcase the new theme", "I wonder how"],
    )
    def test_not_detected(self, message):
        assert not is_question(message)


class TestExtractQuestions:
    def test_mixed_conversation_shapes(self):
        logs = [
            ["How do I enable dark mode?"],
            {"id": "c1", "messages": ["How do I enable dark mode?", "Thanks!"]},
            ["Random chatter", "How do I enable dark mode?"],
        ]

        questions = extract_questions(logs)

        assert [q.text for q in questions] == ["How do I enable dark mode?"] * 3
        assert [q.source_id for q in questions] == ["conv-0", "c1", "conv-2"]

    def test_message_objects_and_timestamps(self):
        logs = [
            {
                "id": 7,
                "timestamp": "2024-01-01T00:00:00Z",
                "messages": [
                    {"text": "What is a workspace?", "timestamp": "2024-01-02T00:00:00Z"},
                    {"text": "where are exports stored"},
                    {"author": "bot"},
                ],
            }
        ]

        questions = extract_questions(logs)

        assert [q.text for q in questions] == [
            "What is a workspace?",
            "where are exports stored",
        ]
        assert questions[0].source_id == "7"
        assert questions[0].timestamp == "2024-01-02T00:00:00Z"
        assert questions[1].timestamp == "2024-01-01T00:00:00Z"

    def test_malformed_conversations_skipped(self):
        logs = [42, {"id": "x"}, {"messages": "not a list"}, ["Is this kept?"]]
        assert [q.text for q in extract_questions(logs)] == ["Is this kept?"]

    def test_empty_logs(self):
        assert extract_questions([]) == []

    @pytest.mark.parametrize("bad", ["How?", {"messages": []}, None, 3])
    def test_non_list_rejected(self, bad):
        with pytest.raises(TypeError):
            extract_questions(bad)


class TestThemeIds:
    def test_normalisation_collapses_variants(self):
        assert theme_id_for("How do I enable dark mode?") == theme_id_for(
            "  how do I enable   DARK mode "
        )
        assert theme_id_for("How do I enable dark mode?") == "how-do-i-enable-dark-mode"

    def test_length_capped(self):
        theme_id = theme_id_for("why " * 40)
        assert len(theme_id) <= 60
        assert not theme_id.endswith("-")

    def test_long_topics_sharing_a_prefix_stay_distinct(self):
        prefix = "how do i configure the notification settings for my team " * 2
        first = theme_id_for(prefix + "on mobile?")
        second = theme_id_for(prefix + "on desktop?")
        assert first != second
        assert len(first) <= 60 and len(second) <= 60
        assert first == theme_id_for(prefix + "on mobile?")

    def test_fallback_for_symbol_only_topic(self):
        assert theme_id_for("???").startswith("gap-")
        assert theme_id_for("???") != theme_id_for("!!!")

    def test_non_latin_topics_keep_their_letters(self):
        assert theme_id_for("Как включить тёмную тему?") == "как-включить-тёмную-тему"
        assert theme_id_for("Как включить тёмную тему?") != theme_id_for(
            "Как сбросить пароль?"
        )
        assert theme_id_for("如何重置密码？") != theme_id_for("如何导出数据？")

    def test_normalize_question(self):
        assert normalize_question("  What's   NEW?! ") == "whats new"
