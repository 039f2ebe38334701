"""One-shot queries that bypass conversation history."""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING

from chatgbt.core.interface.config import DEFAULT_TIMEOUT
from chatgbt.core.interface.models import ConversationHistory, Message
from chatgbt.core.session.session import TurnResult, wrap_completion_error

if TYPE_CHECKING:
    from chatgbt.core.budget.tracker import BudgetTracker
    from chatgbt.core.interface.client import CompletionClient

DIRECT_PROMPT_TYPE = "user_query"


async def direct_query(
    client: CompletionClient,
    tracker: BudgetTracker,
    query: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
) -> TurnResult:
    """Send *query* as a lone user message and record the interaction.

    No system prompt, pruning or history is involved.
    """
    history = ConversationHistory(messages=[Message.user(query)])
    start = time.perf_counter()
    try:
        completion = await asyncio.wait_for(
            client.complete(history, timeout=timeout), timeout=timeout
        )
    except Exception as exc:
        latency = time.perf_counter() - start
        error = wrap_completion_error(exc, timeout)
        tracker.record_interaction(
            None,
            latency,
            success=False,
            error_type=error.error_type,
            prompt_type=DIRECT_PROMPT_TYPE,
        )
        if error is exc:
            raise
        raise error from exc

    latency = time.perf_counter() - start
    tracker.record_interaction(
        completion.usage, latency, success=True, prompt_type=DIRECT_PROMPT_TYPE
    )
    return TurnResult(
        content=completion.content,
        usage=completion.usage,
        latency=latency,
        warnings=tracker.budget_status().warnings,
        prompt_type=DIRECT_PROMPT_TYPE,
    )
