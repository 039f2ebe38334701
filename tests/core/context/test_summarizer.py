"""Tests for KeywordSummarizer."""

import pytest

from chatgbt.core.context.summarizer import (
    SUMMARY_PREFIX,
    KeywordSummarizer,
    Summarizer,
    summary_message_text,
)
from chatgbt.core.interface.models import Message


class TestKeywordSummarizer:
    @pytest.fixture
    def summarizer(self) -> KeywordSummarizer:
        return KeywordSummarizer()

    def test_conforms_to_protocol(self, summarizer: KeywordSummarizer) -> None:
        assert isinstance(summarizer, Summarizer)

    def test_topics_in_first_appearance_order(self, summarizer: KeywordSummarizer) -> None:
        discarded = [
            Message.user("Write a story"),
            Message.assistant("Once upon a time"),
            Message.user("There is an error in my code"),
            Message.assistant("Let me see"),
            Message.user("Create another one"),
        ]
        assert (
            summarizer.summarize(discarded)
            == "Discussed content creation, code/debugging across 3 exchanges"
        )

    def test_general_when_no_topics(self, summarizer: KeywordSummarizer) -> None:
        discarded = [Message.user("hello"), Message.assistant("hi")]
        assert summarizer.summarize(discarded) == "General conversation with 1 exchanges"

    def test_ignores_assistant_content(self, summarizer: KeywordSummarizer) -> None:
        discarded = [Message.user("thanks"), Message.assistant("Here is how to debug code")]
        assert summarizer.summarize(discarded) == "General conversation with 1 exchanges"

    def test_deduplicates_topics(self, summarizer: KeywordSummarizer) -> None:
        discarded = [Message.user("debug this"), Message.user("another error")]
        assert summarizer.summarize(discarded) == "Discussed code/debugging across 2 exchanges"

    def test_single_message_multiple_topics(self, summarizer: KeywordSummarizer) -> None:
        discarded = [Message.user("Explain how to write code")]
        assert (
            summarizer.summarize(discarded)
            == "Discussed code/debugging, explanations, content creation across 1 exchanges"
        )

    def test_message_text(self) -> None:
        assert summary_message_text("x") == f"{SUMMARY_PREFIX} x"
        assert summary_message_text("x") == "Previous conversation summary: x"
