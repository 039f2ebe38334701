"""Summarizer — condenses discarded history into a one-line topic hint.

The summary is lossy on purpose: it tells the model roughly what was covered
before the retained window, not what was said.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from chatgbt.core.context.classifier import SUMMARY_TOPICS, KeywordClassifier

if TYPE_CHECKING:
    from collections.abc import Sequence

    from chatgbt.core.interface.models import Message

SUMMARY_PREFIX = "Previous conversation summary:"


@runtime_checkable
class Summarizer(Protocol):
    """Protocol for summarizing messages dropped by the pruner."""

    def summarize(self, discarded: Sequence[Message]) -> str:
        """Return a short text describing *discarded*."""
        ...


class KeywordSummarizer:
    """Buckets discarded user messages into topic tags.

    Only user-role content is classified; ``N`` in the output is the number of
    user messages in the discarded slice.
    """

    def __init__(self, classifier: KeywordClassifier = SUMMARY_TOPICS) -> None:
        self._classifier = classifier

    def summarize(self, discarded: Sequence[Message]) -> str:
        topics: list[str] = []
        user_count = 0

        for msg in discarded:
            if msg.role != "user":
                continue
            user_count += 1
            for tag in self._classifier.all_matches(msg.content):
                if tag not in topics:
                    topics.append(tag)

        if not topics:
            return f"General conversation with {user_count} exchanges"
        return f"Discussed {', '.join(topics)} across {user_count} exchanges"


def summary_message_text(summary: str) -> str:
    """Format *summary* as the content of the injected system message."""
    return f"{SUMMARY_PREFIX} {summary}"
