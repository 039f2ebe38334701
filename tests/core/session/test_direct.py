"""Tests for direct_query — single-shot completions outside a conversation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from chatgbt.core.budget.tracker import BudgetTracker
from chatgbt.core.session.direct import DIRECT_PROMPT_TYPE, direct_query
from chatgbt.errors import CompletionError

if TYPE_CHECKING:
    from tests.conftest import ScriptedClient


async def test_sends_lone_user_message(scripted_client: ScriptedClient) -> None:
    scripted_client.reply("Paris", total_tokens=12)
    tracker = BudgetTracker("q")

    result = await direct_query(scripted_client, tracker, "Capital of France?", timeout=5.0)

    assert result.content == "Paris"
    assert result.prompt_type == DIRECT_PROMPT_TYPE
    sent = scripted_client.calls[0]
    assert [(m.role, m.content) for m in sent] == [("user", "Capital of France?")]
    assert scripted_client.timeouts == [5.0]
    assert tracker.total_tokens == 12
    assert tracker.interactions[0].prompt_type == "user_query"


async def test_failure_is_recorded(scripted_client: ScriptedClient) -> None:
    scripted_client.fail(RuntimeError("Unauthorized"))
    tracker = BudgetTracker("q")

    with pytest.raises(CompletionError) as excinfo:
        await direct_query(scripted_client, tracker, "hi")

    assert excinfo.value.error_type == "auth_error"
    assert tracker.failed_requests == 1
    assert tracker.interactions[0].success is False
