"""ConversationState — the live message store for one session.

History changes in three ways only: committed appends, whole-sequence
replacement (prune, reset) and rollback of a tentative user turn. A user
message appended with :meth:`ConversationState.begin_turn` stays tentative
until :meth:`commit` or :meth:`rollback` resolves it.
"""

from __future__ import annotations

from chatgbt.core.interface.models import ConversationHistory, Message

DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant."


class TurnInProgressError(RuntimeError):
    """A second turn was started before the pending one was resolved."""


class ConversationState:
    """Owns the message history and the active system prompt."""

    def __init__(self, system_prompt: str | None = None) -> None:
        self.system_prompt = system_prompt or DEFAULT_SYSTEM_PROMPT
        self._history = ConversationHistory(messages=[Message.system(self.system_prompt)])
        self._pending_len: int | None = None

    @property
    def history(self) -> ConversationHistory:
        return self._history

    @property
    def pending(self) -> bool:
        return self._pending_len is not None

    def __len__(self) -> int:
        return len(self._history)

    def replace(self, history: ConversationHistory) -> None:
        """Swap in a new history (pruning). Not allowed mid-turn."""
        if self.pending:
            msg = "cannot replace history while a turn is pending"
            raise TurnInProgressError(msg)
        self._history = history

    def reset(self, system_prompt: str | None = None) -> None:
        """Start over with a single system message.

        ``None`` or an empty string keeps the current system prompt.
        """
        if self.pending:
            msg = "cannot reset while a turn is pending"
            raise TurnInProgressError(msg)
        if system_prompt:
            self.system_prompt = system_prompt
        self._history = ConversationHistory(messages=[Message.system(self.system_prompt)])

    def begin_turn(self, user_text: str) -> None:
        """Tentatively append a user message."""
        if self.pending:
            msg = "a turn is already pending"
            raise TurnInProgressError(msg)
        self._pending_len = len(self._history)
        self._history.append(Message.user(user_text))

    def commit(self, reply: str) -> None:
        """Make the pending user message permanent and append the reply."""
        if not self.pending:
            msg = "no pending turn to commit"
            raise TurnInProgressError(msg)
        self._history.append(Message.assistant(reply))
        self._pending_len = None

    def rollback(self) -> None:
        """Restore the history to exactly what it was before :meth:`begin_turn`."""
        if self._pending_len is None:
            return
        self._history = ConversationHistory(messages=self._history.messages[: self._pending_len])
        self._pending_len = None
