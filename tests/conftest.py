"""Shared fixtures: a scripted completion client."""

from __future__ import annotations

from typing import Any

import pytest

from chatgbt.core.interface.models import Completion, ConversationHistory, TokenUsage


class ScriptedClient:
    """CompletionClient double that replays queued replies or errors."""

    def __init__(self) -> None:
        self.script: list[Completion | BaseException] = []
        self.calls: list[ConversationHistory] = []
        self.timeouts: list[float | None] = []

    def reply(self, content: str = "ok", total_tokens: int | None = 30) -> None:
        usage = None
        if total_tokens is not None:
            prompt = total_tokens // 3
            usage = TokenUsage(
                prompt_tokens=prompt,
                completion_tokens=total_tokens - prompt,
                total_tokens=total_tokens,
            )
        self.script.append(Completion(content=content, usage=usage))

    def fail(self, exc: BaseException) -> None:
        self.script.append(exc)

    async def complete(
        self, messages: ConversationHistory, *, timeout: float | None = None, **kwargs: Any
    ) -> Completion:
        self.calls.append(messages)
        self.timeouts.append(timeout)
        item = self.script.pop(0) if self.script else Completion(content="ok")
        if isinstance(item, BaseException):
            raise item
        return item


@pytest.fixture
def scripted_client() -> ScriptedClient:
    return ScriptedClient()
