"""ContextManager — token-budget bookkeeping for one conversation.

Combines a :class:`TokenCounter` and a :class:`ContextPruner` around a single
``max_tokens`` budget and reports context statistics.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from chatgbt.core.context.counter import EstimatingCounter
from chatgbt.core.context.pruner import PruneResult, RecentWindowPruner
from chatgbt.errors import ConfigurationError

if TYPE_CHECKING:
    from chatgbt.core.context.counter import TokenCounter
    from chatgbt.core.context.pruner import ContextPruner
    from chatgbt.core.interface.models import ConversationHistory

DEFAULT_MAX_TOKENS = 8000
DEFAULT_KEEP_RECENT = 10


class ContextStats(BaseModel):
    """Snapshot of context usage for display."""

    total_messages: int
    user_messages: int
    assistant_messages: int
    system_messages: int
    estimated_tokens: int
    token_limit: int
    utilization_pct: float
    should_prune: bool


class ContextManager:
    """Decides when a history must be pruned and applies the pruner.

    The default pruner is a :class:`RecentWindowPruner` keeping
    *keep_recent* exchanges with keyword summaries enabled.
    """

    def __init__(
        self,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        keep_recent: int = DEFAULT_KEEP_RECENT,
        summary_enabled: bool = True,
        *,
        counter: TokenCounter | None = None,
        pruner: ContextPruner | None = None,
    ) -> None:
        if max_tokens <= 0:
            msg = f"max_tokens must be positive, got {max_tokens}"
            raise ConfigurationError(msg)
        if keep_recent < 0:
            msg = f"keep_recent must not be negative, got {keep_recent}"
            raise ConfigurationError(msg)
        self._max_tokens = max_tokens
        self._counter = counter or EstimatingCounter()
        self._pruner = pruner or RecentWindowPruner(keep_recent, summary_enabled=summary_enabled)
        self._keep_recent = (
            self._pruner.keep_recent if isinstance(self._pruner, RecentWindowPruner) else keep_recent
        )

    @property
    def max_tokens(self) -> int:
        return self._max_tokens

    @property
    def keep_recent(self) -> int:
        """Exchanges the pruner keeps verbatim."""
        return self._keep_recent

    def estimate(self, messages: ConversationHistory) -> int:
        """Return the estimated token count of *messages*."""
        return self._counter.count_messages(messages)

    def should_prune(self, messages: ConversationHistory) -> bool:
        return self.estimate(messages) > self._max_tokens

    def prune(self, messages: ConversationHistory, *, force: bool = False) -> PruneResult:
        """Prune *messages* against the budget.

        With *force* the estimate check is skipped and the recent window is
        applied regardless of size.
        """
        return self._pruner.prune(
            messages, self.estimate(messages), self._max_tokens, force=force
        )

    def stats(self, messages: ConversationHistory) -> ContextStats:
        estimated = self.estimate(messages)
        return ContextStats(
            total_messages=len(messages),
            user_messages=messages.count_role("user"),
            assistant_messages=messages.count_role("assistant"),
            system_messages=messages.count_role("system"),
            estimated_tokens=estimated,
            token_limit=self._max_tokens,
            utilization_pct=estimated / self._max_tokens * 100 if self._max_tokens else 0.0,
            should_prune=estimated > self._max_tokens,
        )
