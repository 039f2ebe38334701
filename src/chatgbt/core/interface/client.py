"""ModelClient — async completion capability backed by LiteLLM.

Wraps LiteLLM behind a history-native interface so the rest of the system
only ever works with :class:`Message` and :class:`ConversationHistory`.
Retry policy, if any, belongs here and not in the session layer.
"""

from typing import Any, Protocol, runtime_checkable

import litellm

from chatgbt.core.interface.config import ModelConfig
from chatgbt.core.interface.models import Completion, ConversationHistory, TokenUsage
from chatgbt.utils.telemetry import (
    ATTR_FINISH_REASON,
    ATTR_MODEL,
    ATTR_PROVIDER,
    ATTR_TOKENS_COMPLETION,
    ATTR_TOKENS_PROMPT,
    ATTR_TOKENS_TOTAL,
    get_tracer,
)

_tracer = get_tracer(__name__)


@runtime_checkable
class CompletionClient(Protocol):
    """Protocol for anything that can turn a conversation into a reply."""

    async def complete(
        self,
        messages: ConversationHistory,
        *,
        timeout: float | None = None,
    ) -> Completion:
        """Send *messages* and return the assistant's reply."""
        ...


class ModelClient:
    """Async client for generating LLM replies via LiteLLM.

    Usage::

        config = ModelConfig(model="openai/gpt-4o")
        client = ModelClient(config)
        reply = await client.complete(history)
    """

    def __init__(self, config: ModelConfig) -> None:
        self.config = config

    async def complete(
        self,
        messages: ConversationHistory,
        *,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> Completion:
        """Generate a reply from the configured model.

        Args:
            messages: The conversation history to send.
            timeout: Per-request timeout in seconds; defaults to ``config.timeout``.
            **kwargs: Additional parameters passed to LiteLLM.

        Returns:
            A :class:`Completion` with the reply text and token usage.
        """
        with _tracer.start_as_current_span("model.complete") as span:
            span.set_attribute(ATTR_MODEL, self.config.model)
            span.set_attribute(ATTR_PROVIDER, self.config.provider)

            call_kwargs: dict[str, Any] = {
                "model": self.config.model,
                "messages": messages.to_provider(),
                "timeout": timeout if timeout is not None else self.config.timeout,
                **self.config.extra,
                **kwargs,
            }

            if self.config.api_key:
                call_kwargs["api_key"] = self.config.api_key
            if self.config.api_base:
                call_kwargs["api_base"] = self.config.api_base

            # Call LiteLLM (type stubs are incomplete)
            response = await litellm.acompletion(**call_kwargs)  # pyright: ignore[reportUnknownMemberType]

            result = self._parse_response(response)

            if result.usage is not None:
                span.set_attribute(ATTR_TOKENS_PROMPT, result.usage.prompt_tokens)
                span.set_attribute(ATTR_TOKENS_COMPLETION, result.usage.completion_tokens)
                span.set_attribute(ATTR_TOKENS_TOTAL, result.usage.total_tokens)
            if result.finish_reason is not None:
                span.set_attribute(ATTR_FINISH_REASON, result.finish_reason)

            return result

    def _parse_response(self, response: Any) -> Completion:
        """Convert a LiteLLM response to a :class:`Completion`.

        LiteLLM returns OpenAI-compatible response objects regardless of
        the underlying provider.
        """
        choice = response.choices[0]
        content = choice.message.content or ""

        usage: TokenUsage | None = None
        if getattr(response, "usage", None):
            usage = TokenUsage(
                prompt_tokens=int(response.usage.prompt_tokens or 0),
                completion_tokens=int(response.usage.completion_tokens or 0),
                total_tokens=int(response.usage.total_tokens or 0),
            )

        finish_reason = choice.finish_reason
        model = getattr(response, "model", None)
        return Completion(
            content=content,
            usage=usage,
            model=str(model) if model is not None else None,
            finish_reason=str(finish_reason) if finish_reason is not None else None,
        )
