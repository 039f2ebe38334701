"""Tests for settings loading — YAML file plus environment overrides."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from chatgbt.core.budget.models import BudgetConfig
from chatgbt.errors import ConfigurationError
from chatgbt.settings import AppSettings, load_settings

if TYPE_CHECKING:
    from pathlib import Path


class TestDefaults:
    def test_no_file_no_env(self) -> None:
        settings = load_settings(environ={})
        assert isinstance(settings, AppSettings)
        assert settings.model.model == "openai/gpt-3.5-turbo"
        assert settings.model.api_key is None
        assert settings.budget.session_limit == 10000
        assert settings.context.keep_recent == 10
        assert settings.context.hard_message_limit == 1000


class TestYamlFile:
    def test_loads_sections(self, tmp_path: Path) -> None:
        f = tmp_path / "chatgbt.yaml"
        f.write_text(
            "model:\n"
            "  model: anthropic/claude-3-haiku\n"
            "budget:\n"
            "  session_limit: 2000\n"
            "context:\n"
            "  max_tokens: 4000\n"
            "  summary_enabled: false\n"
            "system_prompt: Be terse.\n"
            "timeout: 12\n"
        )

        settings = load_settings(f, environ={})

        assert settings.model.model == "anthropic/claude-3-haiku"
        assert settings.budget.session_limit == 2000
        assert settings.context.max_tokens == 4000
        assert settings.context.summary_enabled is False
        assert settings.system_prompt == "Be terse."
        assert settings.timeout == 12.0

    def test_expands_env_vars(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CHATGBT_TEST_KEY", "sk-from-env")
        f = tmp_path / "chatgbt.yaml"
        f.write_text("model:\n  api_key: ${CHATGBT_TEST_KEY}\n")

        settings = load_settings(f, environ={})

        assert settings.model.api_key == "sk-from-env"

    def test_empty_file(self, tmp_path: Path) -> None:
        f = tmp_path / "empty.yaml"
        f.write_text("")
        assert load_settings(f, environ={}).budget.session_limit == 10000

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        f = tmp_path / "bad.yaml"
        f.write_text("model: [unclosed\n")
        with pytest.raises(ConfigurationError, match="YAML parse error"):
            load_settings(f, environ={})

    def test_non_mapping(self, tmp_path: Path) -> None:
        f = tmp_path / "list.yaml"
        f.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_settings(f, environ={})

    @pytest.mark.parametrize("body", ["model: gpt-4o\n", "budget: 500\n", "budget: [1, 2]\n"])
    def test_section_must_be_mapping(self, tmp_path: Path, body: str) -> None:
        f = tmp_path / "scalar.yaml"
        f.write_text(body)
        with pytest.raises(ConfigurationError, match="must be a mapping"):
            load_settings(f, environ={})

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_settings(tmp_path / "nope.yaml", environ={})

    @pytest.mark.parametrize(
        "body",
        [
            "budget:\n  session_limit: 0\n",
            "budget:\n  warn_threshold: 1.5\n",
            "budget:\n  cost_per_token: -1\n",
            "context:\n  max_tokens: 0\n",
            "context:\n  keep_recent: 5\n  hard_message_limit: 10\n",
            "timeout: 0\n",
        ],
    )
    def test_invalid_values(self, tmp_path: Path, body: str) -> None:
        f = tmp_path / "bad.yaml"
        f.write_text(body)
        with pytest.raises(ConfigurationError, match="Invalid (budget )?configuration"):
            load_settings(f, environ={})


class TestEnvironment:
    def test_model_and_provider(self) -> None:
        settings = load_settings(environ={"MODEL": "llama3", "LLM_PROVIDER": "ollama"})
        assert settings.model.model == "ollama/llama3"

    def test_qualified_model_ignores_provider(self) -> None:
        settings = load_settings(environ={"MODEL": "openai/gpt-4o", "LLM_PROVIDER": "anthropic"})
        assert settings.model.model == "openai/gpt-4o"

    def test_api_key(self) -> None:
        settings = load_settings(environ={"API_KEY": "sk-x"})
        assert settings.model.api_key == "sk-x"

    def test_token_budget(self) -> None:
        assert load_settings(environ={"TOKEN_BUDGET": "777"}).budget.session_limit == 777

    def test_cost_budget(self) -> None:
        settings = load_settings(environ={"COST_BUDGET": "0.5"})
        assert settings.budget.session_limit == int(0.5 / BudgetConfig().cost_per_token)

    @pytest.mark.parametrize(
        "env",
        [
            {"TOKEN_BUDGET": "lots"},
            {"TOKEN_BUDGET": "-3"},
            {"COST_BUDGET": "cheap"},
            {"COST_BUDGET": "0"},
        ],
    )
    def test_invalid_override_ignored(
        self, env: dict[str, str], caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="chatgbt.settings"):
            settings = load_settings(environ=env)

        assert settings.budget.session_limit == 10000
        assert caplog.records

    def test_env_overrides_file(self, tmp_path: Path) -> None:
        f = tmp_path / "chatgbt.yaml"
        f.write_text("budget:\n  session_limit: 2000\n")
        settings = load_settings(f, environ={"TOKEN_BUDGET": "3000"})
        assert settings.budget.session_limit == 3000
