"""Tests for building sessions from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chatgbt.core.budget.sink import InMemorySink, JsonlFileSink
from chatgbt.core.interface.client import ModelClient
from chatgbt.factory import build_session, build_session_manager
from chatgbt.settings import AppSettings, ContextSettings

if TYPE_CHECKING:
    from pathlib import Path

    from tests.conftest import ScriptedClient


class TestBuildSession:
    def test_wires_settings(self, tmp_path: Path, scripted_client: ScriptedClient) -> None:
        settings = AppSettings(
            system_prompt="Be terse.",
            context=ContextSettings(max_tokens=1234, keep_recent=2),
            log_dir=tmp_path,
            timeout=9.0,
        )

        session = build_session(settings, session_id="abc", client=scripted_client)

        assert session.session_id == "abc"
        assert session.system_prompt == "Be terse."
        assert session.context.max_tokens == 1234
        assert session.tracker.conversation_type == "cli"
        assert session.tracker.config == settings.budget
        session.close()

    async def test_default_sink_writes_log(self, tmp_path: Path, scripted_client: ScriptedClient) -> None:
        session = build_session(
            AppSettings(log_dir=tmp_path), session_id="abc", client=scripted_client
        )
        await session.process_turn("hi")
        session.close()

        (log_file,) = tmp_path.glob("session_*_abc.jsonl")
        assert log_file.read_text().count("\n") == 2

    def test_system_prompt_override(self, scripted_client: ScriptedClient) -> None:
        session = build_session(
            AppSettings(),
            client=scripted_client,
            sink=InMemorySink(),
            system_prompt="Override",
        )
        assert session.system_prompt == "Override"

    def test_default_client(self, tmp_path: Path) -> None:
        session = build_session(AppSettings(log_dir=tmp_path), sink=InMemorySink())
        assert isinstance(session._client, ModelClient)

    def test_generates_session_id(self, scripted_client: ScriptedClient) -> None:
        session = build_session(AppSettings(), client=scripted_client, sink=InMemorySink())
        assert len(session.session_id) == 16


class TestBuildSessionManager:
    async def test_creates_web_sessions(self, tmp_path: Path, scripted_client: ScriptedClient) -> None:
        manager = build_session_manager(AppSettings(log_dir=tmp_path), client=scripted_client)

        session = await manager.create_session("user-1")
        result = await manager.run_turn(session.session_id, "hi")
        await manager.close_all()

        assert result.content == "ok"
        assert session.tracker.conversation_type == "web"
        assert isinstance(session.tracker._sink, JsonlFileSink)
