"""Context pruning — protocol and recent-window implementation.

Pruners shrink a conversation history that has outgrown its token budget,
keeping the leading system message and the most recent exchanges.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NamedTuple, Protocol, runtime_checkable

from chatgbt.core.context.summarizer import KeywordSummarizer, Summarizer, summary_message_text
from chatgbt.core.interface.models import ConversationHistory, Message
from chatgbt.errors import ConfigurationError

if TYPE_CHECKING:
    from chatgbt.core.context.counter import TokenCounter

logger = logging.getLogger(__name__)


class PruneResult(NamedTuple):
    """Outcome of a prune call: the new history and whether it changed."""

    messages: ConversationHistory
    pruned: bool


@runtime_checkable
class ContextPruner(Protocol):
    """Protocol for pruning a conversation history to fit a token budget."""

    def prune(
        self,
        messages: ConversationHistory,
        current_tokens: int,
        max_tokens: int,
        *,
        force: bool = False,
    ) -> PruneResult:
        """Return a pruned copy of *messages* (or *messages* itself if unchanged)."""
        ...


def should_prune(messages: ConversationHistory, max_tokens: int, counter: TokenCounter) -> bool:
    """Return ``True`` when the estimated size of *messages* exceeds *max_tokens*."""
    return counter.count_messages(messages) > max_tokens


class RecentWindowPruner:
    """Keeps the last *keep_recent* exchanges verbatim and drops the rest.

    An exchange is a user + assistant pair, so the retained tail is
    ``keep_recent * 2`` messages. When *summary_enabled* is set, the dropped
    slice is replaced by a single system message produced by *summarizer*.

    Pruning is all-or-nothing per call. The tail alone may still exceed the
    budget; no error is raised and the caller can prune again next turn.
    The input history is never mutated.
    """

    def __init__(
        self,
        keep_recent: int = 3,
        *,
        summary_enabled: bool = True,
        summarizer: Summarizer | None = None,
    ) -> None:
        if keep_recent < 0:
            msg = f"keep_recent must not be negative, got {keep_recent}"
            raise ConfigurationError(msg)
        self._keep_recent = keep_recent
        self._summary_enabled = summary_enabled
        self._summarizer = summarizer or KeywordSummarizer()

    @property
    def keep_recent(self) -> int:
        return self._keep_recent

    @property
    def summary_enabled(self) -> bool:
        return self._summary_enabled

    def prune(
        self,
        messages: ConversationHistory,
        current_tokens: int,
        max_tokens: int,
        *,
        force: bool = False,
    ) -> PruneResult:
        if not force and current_tokens <= max_tokens:
            return PruneResult(messages, False)

        system = messages.leading_system
        body = messages.body
        keep = self._keep_recent * 2

        # Not enough history to trim safely.
        if len(body) <= keep:
            return PruneResult(messages, False)

        recent_start = max(0, len(body) - keep)
        discarded = body[:recent_start]
        retained = body[recent_start:]

        rebuilt: list[Message] = []
        if system is not None:
            rebuilt.append(system)
        if self._summary_enabled and discarded:
            summary = self._summarizer.summarize(discarded)
            rebuilt.append(Message.system(summary_message_text(summary)))
        rebuilt.extend(retained)

        logger.info(
            "Pruned conversation: %d -> %d messages (%d discarded)",
            len(messages),
            len(rebuilt),
            len(discarded),
        )
        return PruneResult(ConversationHistory(messages=rebuilt), True)
