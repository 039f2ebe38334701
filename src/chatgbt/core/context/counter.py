"""Token counting — protocol and the character-based estimator.

The estimate is a planning figure for pruning decisions, not a billing count.
Billing figures come from the provider's reported usage.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from chatgbt.core.interface.models import Message


@runtime_checkable
class TokenCounter(Protocol):
    """Protocol for estimating tokens in a message sequence."""

    def count_messages(self, messages: Iterable[Message]) -> int:
        """Return the approximate token count for *messages*."""
        ...


# Characters of JSON framing charged to every message.
_MSG_OVERHEAD_CHARS = 20
_CHARS_PER_TOKEN = 4


class EstimatingCounter:
    """Estimates ~4 characters per token over role, content and framing.

    Characters are summed across the whole sequence before dividing, so the
    result is ``sum(len(role) + len(content) + 20) // 4``.
    """

    def count_chars(self, messages: Iterable[Message]) -> int:
        return sum(len(m.role) + len(m.content) + _MSG_OVERHEAD_CHARS for m in messages)

    def count_messages(self, messages: Iterable[Message]) -> int:
        return self.count_chars(messages) // _CHARS_PER_TOKEN
