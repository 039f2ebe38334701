"""Application settings — YAML file plus environment overrides.

Only this module reads the environment; the core receives fully validated
:class:`AppSettings` values.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from chatgbt.core.budget.models import BudgetConfig
from chatgbt.core.context.manager import DEFAULT_KEEP_RECENT, DEFAULT_MAX_TOKENS
from chatgbt.core.interface.config import DEFAULT_TIMEOUT, ModelConfig
from chatgbt.core.session.session import DEFAULT_HARD_MESSAGE_LIMIT
from chatgbt.core.session.state import DEFAULT_SYSTEM_PROMPT
from chatgbt.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_MODEL_NAME = "gpt-3.5-turbo"
DEFAULT_PROVIDER = "openai"


class ContextSettings(BaseModel):
    """Context window budget and pruning behaviour."""

    max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, gt=0)
    keep_recent: int = Field(default=DEFAULT_KEEP_RECENT, ge=0)
    summary_enabled: bool = True
    hard_message_limit: int = Field(default=DEFAULT_HARD_MESSAGE_LIMIT, gt=0)

    @model_validator(mode="after")
    def _window_fits_limit(self) -> ContextSettings:
        if self.keep_recent * 2 >= self.hard_message_limit:
            msg = (
                f"keep_recent={self.keep_recent} must retain fewer than "
                f"hard_message_limit={self.hard_message_limit} messages"
            )
            raise ValueError(msg)
        return self


class AppSettings(BaseModel):
    """Everything needed to build a :class:`~chatgbt.core.session.ChatSession`."""

    model: ModelConfig = Field(
        default_factory=lambda: ModelConfig(model=f"{DEFAULT_PROVIDER}/{DEFAULT_MODEL_NAME}")
    )
    budget: BudgetConfig = Field(default_factory=BudgetConfig)
    context: ContextSettings = Field(default_factory=ContextSettings)
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    log_dir: Path = Path("logs")
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)


def load_settings(
    path: Path | None = None,
    environ: dict[str, str] | None = None,
) -> AppSettings:
    """Load settings from an optional YAML file and the environment.

    Environment variables in the YAML (``${VAR}`` / ``$VAR``) are expanded
    before parsing. Recognised overrides: ``API_KEY``, ``MODEL``,
    ``LLM_PROVIDER``, ``TOKEN_BUDGET``, ``COST_BUDGET``. Invalid override
    values are logged and ignored.

    Raises:
        ConfigurationError: On unreadable files, YAML errors or invalid values.
    """
    env = dict(os.environ) if environ is None else environ
    data: dict[str, Any] = _read_yaml(path) if path is not None else {}

    _apply_model_env(data, env)
    _apply_budget_env(data, env)

    try:
        return AppSettings.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read {path}: {exc}") from exc

    try:
        data: Any = yaml.safe_load(os.path.expandvars(raw))
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"YAML parse error: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"Top-level YAML must be a mapping, got {type(data).__name__}"
        raise ConfigurationError(msg)
    return data


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        msg = f"'{key}' must be a mapping, got {type(value).__name__}"
        raise ConfigurationError(msg)
    return dict(value)


def _apply_model_env(data: dict[str, Any], env: dict[str, str]) -> None:
    model = _section(data, "model")

    name = str(env.get("MODEL") or model.get("model") or DEFAULT_MODEL_NAME)
    provider = env.get("LLM_PROVIDER") or DEFAULT_PROVIDER
    if "/" not in name:
        name = f"{provider}/{name}"
    model["model"] = name

    if env.get("API_KEY"):
        model["api_key"] = env["API_KEY"]

    data["model"] = model


def _apply_budget_env(data: dict[str, Any], env: dict[str, str]) -> None:
    budget = _section(data, "budget")

    token_budget = env.get("TOKEN_BUDGET")
    if token_budget:
        try:
            value = int(token_budget)
        except ValueError:
            logger.warning("Invalid TOKEN_BUDGET value %r, using default", token_budget)
        else:
            if value > 0:
                budget["session_limit"] = value
            else:
                logger.warning("TOKEN_BUDGET must be positive, got %d, using default", value)

    cost_budget = env.get("COST_BUDGET")
    if cost_budget:
        try:
            cost = float(cost_budget)
        except ValueError:
            logger.warning("Invalid COST_BUDGET value %r, using default", cost_budget)
        else:
            cost_per_token = float(budget.get("cost_per_token", BudgetConfig().cost_per_token))
            if cost <= 0:
                logger.warning("COST_BUDGET must be positive, got %.4f, using default", cost)
            elif cost_per_token <= 0:
                logger.warning("COST_BUDGET ignored: cost_per_token is %s", cost_per_token)
            else:
                budget["session_limit"] = int(cost / cost_per_token)

    data["budget"] = budget
