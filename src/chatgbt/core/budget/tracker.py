"""BudgetTracker — cumulative token/cost accounting for one session.

In-memory counters are the source of truth and only ever grow. Each
interaction is also forwarded to an :class:`InteractionSink`; sink failures
are reported as :class:`PersistenceWarning` and never reach the caller.
"""

from __future__ import annotations

import logging
import warnings
from collections import Counter
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from chatgbt.core.budget.models import (
    COST_WARNING_THRESHOLD,
    BudgetConfig,
    BudgetStatus,
    InteractionRecord,
    SessionSummary,
)
from chatgbt.core.budget.sink import NullSink
from chatgbt.errors import PersistenceWarning

if TYPE_CHECKING:
    from chatgbt.core.budget.sink import InteractionSink
    from chatgbt.core.interface.models import TokenUsage

logger = logging.getLogger(__name__)


class BudgetTracker:
    """Accumulates usage across turns and compares it against a :class:`BudgetConfig`."""

    def __init__(
        self,
        session_id: str,
        config: BudgetConfig | None = None,
        *,
        conversation_type: str = "general",
        sink: InteractionSink | None = None,
    ) -> None:
        self.session_id = session_id
        self.config = config or BudgetConfig()
        self.conversation_type = conversation_type
        self._sink: InteractionSink = sink if sink is not None else NullSink()

        self.started_at = datetime.now(UTC)
        self.ended_at: datetime | None = None

        self.total_requests = 0
        self.successful_requests = 0
        self.failed_requests = 0
        self.total_tokens = 0
        self.prompt_tokens = 0
        self.completion_tokens = 0
        self.estimated_cost = 0.0
        self._interactions: list[InteractionRecord] = []

    @property
    def interactions(self) -> tuple[InteractionRecord, ...]:
        return tuple(self._interactions)

    def record_interaction(
        self,
        usage: TokenUsage | None,
        latency: float,
        *,
        success: bool,
        error_type: str = "",
        prompt_type: str = "",
    ) -> InteractionRecord:
        """Record one request outcome. *latency* is in seconds."""
        record = InteractionRecord(
            request_tokens=usage.prompt_tokens if usage else 0,
            response_tokens=usage.completion_tokens if usage else 0,
            total_tokens=usage.total_tokens if usage else 0,
            response_time_ms=int(latency * 1000),
            success=success,
            error_type=error_type,
            prompt_type=prompt_type,
        )

        if usage is not None:
            self.total_tokens += usage.total_tokens
            self.prompt_tokens += usage.prompt_tokens
            self.completion_tokens += usage.completion_tokens
            self.estimated_cost += usage.total_tokens * self.config.cost_per_token

        self.total_requests += 1
        if success:
            self.successful_requests += 1
        else:
            self.failed_requests += 1

        self._interactions.append(record)
        self._persist(record)
        return record

    def _persist(self, record: InteractionRecord) -> None:
        try:
            self._sink.write(record)
        except Exception as exc:
            logger.warning("Failed to persist interaction for session %s: %s", self.session_id, exc)
            warnings.warn(
                f"interaction log write failed: {exc}", PersistenceWarning, stacklevel=3
            )

    def budget_status(self) -> BudgetStatus:
        cfg = self.config
        status = BudgetStatus(
            session_tokens=self.total_tokens,
            session_cost=self.estimated_cost,
            session_limit=cfg.session_limit,
            daily_limit=cfg.daily_limit,
            should_prune=self.total_tokens > cfg.prune_threshold,
        )

        if cfg.session_limit > 0:
            usage_fraction = self.total_tokens / cfg.session_limit
            if usage_fraction > cfg.warn_threshold:
                status.warnings.append(
                    f"Session token usage at {usage_fraction * 100:.1f}% of limit "
                    f"({self.total_tokens}/{cfg.session_limit} tokens)"
                )
            if usage_fraction > 1.0:
                status.over_budget = True

        if self.estimated_cost > COST_WARNING_THRESHOLD:
            status.warnings.append(f"Session cost: ${self.estimated_cost:.3f}")

        return status

    def session_summary(self) -> SessionSummary:
        end = self.ended_at or datetime.now(UTC)

        avg_ms = 0
        if self._interactions:
            avg_ms = sum(r.response_time_ms for r in self._interactions) // len(self._interactions)

        # Zero requests reports a 0.0 success rate rather than dividing by zero.
        success_rate = (
            self.successful_requests / self.total_requests if self.total_requests else 0.0
        )

        return SessionSummary(
            session_id=self.session_id,
            duration=end - self.started_at,
            total_requests=self.total_requests,
            successful_requests=self.successful_requests,
            failed_requests=self.failed_requests,
            success_rate=success_rate,
            total_tokens=self.total_tokens,
            prompt_tokens=self.prompt_tokens,
            completion_tokens=self.completion_tokens,
            estimated_cost=self.estimated_cost,
            avg_response_time_ms=avg_ms,
            conversation_type=self.conversation_type,
            ended_at=self.ended_at,
        )

    def prompt_type_breakdown(self) -> dict[str, int]:
        return dict(Counter(r.prompt_type for r in self._interactions))

    def close(self) -> SessionSummary:
        """Stamp the end time, write the final summary and close the sink.

        Calling ``close`` again returns the same summary without touching the sink.
        """
        if self.ended_at is not None:
            return self.session_summary()
        self.ended_at = datetime.now(UTC)
        summary = self.session_summary()
        try:
            self._sink.close(summary)
        except Exception as exc:
            logger.warning("Failed to close interaction log for session %s: %s", self.session_id, exc)
            warnings.warn(
                f"interaction log close failed: {exc}", PersistenceWarning, stacklevel=2
            )
        return summary
