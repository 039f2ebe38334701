"""Conversation message schema — the internal message format for chatgbt.

Messages are plain role/content pairs. Provider-specific payloads are left to
LiteLLM, which accepts this OpenAI-style shape for every backend.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

Role = Literal["system", "user", "assistant"]

# ---------------------------------------------------------------------------
# Message: one role-tagged conversation turn
# ---------------------------------------------------------------------------


class Message(BaseModel):
    """A single conversation message.

    Messages are immutable once created; history changes happen by appending
    new messages or by replacing the whole sequence.
    """

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str = ""

    @classmethod
    def system(cls, content: str) -> "Message":
        """Create a system message."""
        return cls(role="system", content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        """Create a user message."""
        return cls(role="user", content=content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        """Create an assistant message."""
        return cls(role="assistant", content=content)

    def to_provider(self) -> dict[str, Any]:
        """Return the OpenAI-style dict LiteLLM expects."""
        return {"role": self.role, "content": self.content}


# ---------------------------------------------------------------------------
# Conversation History: ordered container of messages
# ---------------------------------------------------------------------------


class ConversationHistory(BaseModel):
    """An ordered sequence of messages forming a conversation."""

    messages: list[Message] = []

    def append(self, message: Message) -> None:
        """Append a message to the history."""
        self.messages.append(message)

    @property
    def leading_system(self) -> Message | None:
        """Return the first message if it is a system message."""
        if self.messages and self.messages[0].role == "system":
            return self.messages[0]
        return None

    @property
    def body(self) -> list[Message]:
        """Return every message after the leading system message (if any)."""
        start = 1 if self.leading_system is not None else 0
        return self.messages[start:]

    def count_role(self, role: Role) -> int:
        """Return how many messages carry *role*."""
        return sum(1 for m in self.messages if m.role == role)

    def to_provider(self) -> list[dict[str, Any]]:
        """Convert the history to a list of OpenAI-style message dicts."""
        return [m.to_provider() for m in self.messages]

    def __len__(self) -> int:
        return len(self.messages)

    def __iter__(self):  # type: ignore[override]
        return iter(self.messages)


# ---------------------------------------------------------------------------
# Completion: what the completion capability hands back
# ---------------------------------------------------------------------------


class TokenUsage(BaseModel):
    """Token accounting reported by the provider for one request."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class Completion(BaseModel):
    """An assistant reply plus optional usage metadata."""

    content: str = ""
    usage: TokenUsage | None = None
    model: str | None = None
    finish_reason: str | None = None
