"""ChatSession — turn orchestration around context pruning and budgets.

Each turn runs ``Idle -> Pruning? -> Sending -> {Success, Failure}``:

1. Prune the pre-turn history if it is over the token budget or over the
   hard message ceiling.
2. Tentatively append the user message and classify it.
3. Send the history to the completion capability under a timeout.
4. On failure, record an unsuccessful interaction, roll the user message
   back and raise :class:`CompletionError`.
5. On success, record usage, append the reply and return it together with
   any budget warnings.

A session is not safe for concurrent turns; callers serialise access (see
:class:`~chatgbt.core.session.manager.SessionManager`).
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from chatgbt.core.budget.tracker import BudgetTracker
from chatgbt.core.context.classifier import classify_prompt
from chatgbt.core.context.manager import ContextManager
from chatgbt.core.interface.config import DEFAULT_TIMEOUT
from chatgbt.core.interface.models import ConversationHistory, TokenUsage
from chatgbt.core.session.state import ConversationState
from chatgbt.errors import CompletionError, CompletionTimeoutError, ConfigurationError
from chatgbt.utils.telemetry import (
    ATTR_ERROR_TYPE,
    ATTR_MESSAGE_COUNT,
    ATTR_PROMPT_TYPE,
    ATTR_PRUNED,
    ATTR_SESSION_ID,
    ATTR_SUCCESS,
    get_tracer,
)

if TYPE_CHECKING:
    from chatgbt.core.budget.models import BudgetConfig, BudgetStatus, SessionSummary
    from chatgbt.core.budget.sink import InteractionSink
    from chatgbt.core.context.manager import ContextStats
    from chatgbt.core.interface.client import CompletionClient

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

DEFAULT_HARD_MESSAGE_LIMIT = 1000


class TurnResult(BaseModel):
    """What a successful turn hands back to the CLI or web layer."""

    content: str
    usage: TokenUsage | None = None
    latency: float
    warnings: list[str] = []
    prompt_type: str
    pruned: bool = False


def classify_error(exc: BaseException) -> str:
    """Map an exception to a coarse error kind for metrics."""
    if isinstance(exc, CompletionError):
        return exc.error_type
    if isinstance(exc, TimeoutError):
        return "timeout_error"

    text = str(exc).lower()
    if "api" in text:
        return "api_error"
    if "network" in text or "timeout" in text:
        return "network_error"
    if "auth" in text or "unauthorized" in text:
        return "auth_error"
    if "quota" in text or "limit" in text:
        return "quota_error"
    return "unknown_error"


def wrap_completion_error(exc: Exception, timeout: float) -> CompletionError:
    """Return *exc* as a :class:`CompletionError`, keeping it if it already is one."""
    if isinstance(exc, CompletionError):
        return exc
    if isinstance(exc, TimeoutError):
        return CompletionTimeoutError(timeout)
    return CompletionError(str(exc), error_type=classify_error(exc))


class ChatSession:
    """One conversation: message store, context manager and budget tracker."""

    def __init__(
        self,
        session_id: str,
        client: CompletionClient,
        *,
        system_prompt: str | None = None,
        context: ContextManager | None = None,
        budget: BudgetConfig | None = None,
        conversation_type: str = "general",
        sink: InteractionSink | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        hard_message_limit: int = DEFAULT_HARD_MESSAGE_LIMIT,
    ) -> None:
        """Build a session.

        Raises:
            ConfigurationError: *timeout* or *hard_message_limit* is not
                positive, or the recent window kept by pruning would not fit
                under *hard_message_limit*.
        """
        context = context or ContextManager()
        if timeout <= 0:
            msg = f"timeout must be positive, got {timeout}"
            raise ConfigurationError(msg)
        if hard_message_limit <= 0:
            msg = f"hard_message_limit must be positive, got {hard_message_limit}"
            raise ConfigurationError(msg)
        if context.keep_recent * 2 >= hard_message_limit:
            msg = (
                f"keep_recent={context.keep_recent} retains {context.keep_recent * 2} messages, "
                f"which does not fit under hard_message_limit={hard_message_limit}"
            )
            raise ConfigurationError(msg)

        self.session_id = session_id
        self._client = client
        self._state = ConversationState(system_prompt)
        self._context = context
        self._tracker = BudgetTracker(
            session_id, budget, conversation_type=conversation_type, sink=sink
        )
        self._timeout = timeout
        self._hard_message_limit = hard_message_limit
        logger.debug("Session %s started (%s)", session_id, conversation_type)

    # -- accessors ---------------------------------------------------------

    @property
    def history(self) -> ConversationHistory:
        return self._state.history

    @property
    def system_prompt(self) -> str:
        return self._state.system_prompt

    @property
    def tracker(self) -> BudgetTracker:
        return self._tracker

    @property
    def context(self) -> ContextManager:
        return self._context

    # -- turn protocol -----------------------------------------------------

    async def process_turn(self, user_text: str) -> TurnResult:
        """Run one user turn and return the assistant's reply.

        Raises:
            CompletionError: The completion failed; history is unchanged.
            CompletionTimeoutError: The completion exceeded the session timeout.
        """
        with _tracer.start_as_current_span("session.turn") as span:
            span.set_attribute(ATTR_SESSION_ID, self.session_id)

            pruned = self._auto_prune()
            prompt_type = classify_prompt(user_text)
            span.set_attribute(ATTR_PRUNED, pruned)
            span.set_attribute(ATTR_PROMPT_TYPE, prompt_type)

            self._state.begin_turn(user_text)
            outgoing = ConversationHistory(messages=list(self._state.history.messages))
            span.set_attribute(ATTR_MESSAGE_COUNT, len(outgoing))

            start = time.perf_counter()
            try:
                completion = await asyncio.wait_for(
                    self._client.complete(outgoing, timeout=self._timeout),
                    timeout=self._timeout,
                )
            except asyncio.CancelledError:
                self._state.rollback()
                raise
            except Exception as exc:
                latency = time.perf_counter() - start
                error = wrap_completion_error(exc, self._timeout)
                try:
                    self._tracker.record_interaction(
                        None,
                        latency,
                        success=False,
                        error_type=error.error_type,
                        prompt_type=prompt_type,
                    )
                finally:
                    self._state.rollback()
                span.set_attribute(ATTR_SUCCESS, False)
                span.set_attribute(ATTR_ERROR_TYPE, error.error_type)
                logger.warning(
                    "Turn failed for session %s (%s): %s", self.session_id, error.error_type, exc
                )
                if error is exc:
                    raise
                raise error from exc

            latency = time.perf_counter() - start
            try:
                self._tracker.record_interaction(
                    completion.usage,
                    latency,
                    success=True,
                    prompt_type=prompt_type,
                )
            finally:
                self._state.commit(completion.content)
            span.set_attribute(ATTR_SUCCESS, True)

            return TurnResult(
                content=completion.content,
                usage=completion.usage,
                latency=latency,
                warnings=self._tracker.budget_status().warnings,
                prompt_type=prompt_type,
                pruned=pruned,
            )

    def _auto_prune(self) -> bool:
        pruned = False
        if self._context.should_prune(self._state.history):
            pruned = self._apply_prune(force=False)
        if len(self._state) > self._hard_message_limit:
            logger.info(
                "Session %s exceeded %d messages; forcing prune",
                self.session_id,
                self._hard_message_limit,
            )
            pruned = self._apply_prune(force=True) or pruned
        return pruned

    def _apply_prune(self, *, force: bool) -> bool:
        result = self._context.prune(self._state.history, force=force)
        if result.pruned:
            self._state.replace(result.messages)
        return result.pruned

    # -- consumer API ------------------------------------------------------

    def reset(self, system_prompt: str | None = None) -> None:
        """Replace the history with a single system message."""
        self._state.reset(system_prompt)
        logger.debug("Session %s reset", self.session_id)

    def update_system_prompt(self, system_prompt: str) -> None:
        self.reset(system_prompt)

    def manual_prune(self) -> bool:
        """Prune now instead of waiting for the next turn.

        The token estimate is still compared against ``max_tokens``, so this
        returns ``False`` when the history is within budget or too short to trim.
        """
        return self._apply_prune(force=False)

    def budget_status(self) -> BudgetStatus:
        return self._tracker.budget_status()

    def context_stats(self) -> ContextStats:
        return self._context.stats(self._state.history)

    def session_summary(self) -> SessionSummary:
        return self._tracker.session_summary()

    def prompt_type_breakdown(self) -> dict[str, int]:
        return self._tracker.prompt_type_breakdown()

    def close(self) -> SessionSummary:
        """Finalize metrics and close the interaction sink."""
        summary = self._tracker.close()
        logger.debug("Session %s closed", self.session_id)
        return summary

    async def __aenter__(self) -> ChatSession:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.close()
