"""Tests for ``chatgbt chat`` CLI command."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import patch

from click.testing import CliRunner

from chatgbt.cli import main
from chatgbt.cli_commands.chat import handle_command
from chatgbt.core.budget.sink import InMemorySink
from chatgbt.core.session.session import ChatSession

if TYPE_CHECKING:
    from tests.conftest import ScriptedClient


def _run(session: ChatSession, user_input: str, *args: str):
    runner = CliRunner()
    with patch("chatgbt.cli_commands.chat.build_session", return_value=session) as build:
        result = runner.invoke(main, ["chat", *args], input=user_input)
    return result, build


class TestChatCommand:
    def test_single_turn(self, scripted_client: ScriptedClient) -> None:
        scripted_client.reply("pong")
        sink = InMemorySink()
        session = ChatSession("s1", scripted_client, sink=sink)

        result, _ = _run(session, "ping\n/quit\n")

        assert result.exit_code == 0
        assert "Assistant:" in result.output
        assert "pong" in result.output
        assert "Session Summary" in result.output
        assert sink.closed

    def test_turn_recorded_in_history(self, scripted_client: ScriptedClient) -> None:
        session = ChatSession("s1", scripted_client, sink=InMemorySink())

        result, _ = _run(session, "hello\n/exit\n")

        assert result.exit_code == 0
        assert len(session.history) == 3

    def test_error_keeps_looping(self, scripted_client: ScriptedClient) -> None:
        scripted_client.fail(RuntimeError("network unreachable"))
        scripted_client.reply("recovered")
        session = ChatSession("s1", scripted_client, sink=InMemorySink())

        result, _ = _run(session, "one\ntwo\n/quit\n")

        assert result.exit_code == 0
        assert "Error:" in result.output
        assert "recovered" in result.output
        assert session.session_summary().failed_requests == 1

    def test_system_option(self, scripted_client: ScriptedClient) -> None:
        session = ChatSession("s1", scripted_client, sink=InMemorySink())

        _, build = _run(session, "/quit\n", "--system", "Be brief.")

        assert build.call_args.kwargs["system_prompt"] == "Be brief."
        assert build.call_args.kwargs["conversation_type"] == "cli"


class TestSlashCommands:
    def test_quit(self, scripted_client: ScriptedClient) -> None:
        session = ChatSession("s1", scripted_client, sink=InMemorySink())
        assert handle_command(session, "/quit") is False
        assert handle_command(session, "/exit") is False

    def test_reset_with_prompt(self, scripted_client: ScriptedClient) -> None:
        session = ChatSession("s1", scripted_client, sink=InMemorySink())
        assert handle_command(session, "/reset Talk like a pirate") is True
        assert session.system_prompt == "Talk like a pirate"
        assert len(session.history) == 1

    def test_reports_via_console(self, scripted_client: ScriptedClient) -> None:
        session = ChatSession("s1", scripted_client, sink=InMemorySink())

        result, _ = _run(session, "/stats\n/budget\n/types\n/prune\n/help\n/bogus\n/quit\n")

        assert result.exit_code == 0
        assert "Context" in result.output
        assert "Budget" in result.output
        assert "Prompt Types" in result.output
        assert "Nothing to prune." in result.output
        assert "Commands:" in result.output
        assert "Unknown command: /bogus" in result.output
