"""Pydantic models for token budgeting and interaction metrics."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from chatgbt.errors import ConfigurationError

# Cost above which every budget check warns, independent of configuration.
COST_WARNING_THRESHOLD = 1.0


class BudgetConfig(BaseModel):
    """Token usage limits and cost rate for one session.

    Defaults: 50k tokens/day, 10k tokens/session, warn at 80%, prune hint at
    8k session tokens, $0.000002 per token.
    Invalid values raise :class:`ConfigurationError` however the config is built.
    """

    model_config = ConfigDict(frozen=True)

    daily_limit: int = 50_000
    session_limit: int = 10_000
    warn_threshold: float = 0.8
    prune_threshold: int = 8_000
    cost_per_token: float = 0.000002

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid budget configuration: {exc}") from exc

    @model_validator(mode="after")
    def _validate_limits(self) -> BudgetConfig:
        if self.session_limit <= 0:
            msg = f"session limit must be positive, got {self.session_limit}"
            raise ValueError(msg)
        if self.daily_limit < 0:
            msg = f"daily limit must not be negative, got {self.daily_limit}"
            raise ValueError(msg)
        if not 0 < self.warn_threshold <= 1:
            msg = f"warn threshold must be in (0, 1], got {self.warn_threshold}"
            raise ValueError(msg)
        if self.prune_threshold < 0:
            msg = f"prune threshold must not be negative, got {self.prune_threshold}"
            raise ValueError(msg)
        if self.cost_per_token < 0:
            msg = f"cost per token must not be negative, got {self.cost_per_token}"
            raise ValueError(msg)
        return self

    @classmethod
    def create(cls, **values: object) -> BudgetConfig:
        """Build a config, raising :class:`ConfigurationError` when invalid."""
        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid budget configuration: {exc}") from exc


class InteractionRecord(BaseModel):
    """One request/response cycle. Append-only; never mutated."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    request_tokens: int = 0
    response_tokens: int = 0
    total_tokens: int = 0
    response_time_ms: int = 0
    success: bool
    error_type: str = ""
    prompt_type: str = ""


class BudgetStatus(BaseModel):
    """Current budget position plus human-readable warnings."""

    session_tokens: int
    session_cost: float
    session_limit: int
    daily_limit: int
    warnings: list[str] = []
    over_budget: bool = False
    should_prune: bool = False


class SessionSummary(BaseModel):
    """Aggregate metrics for a session so far."""

    session_id: str
    duration: timedelta
    total_requests: int
    successful_requests: int
    failed_requests: int
    success_rate: float
    total_tokens: int
    prompt_tokens: int
    completion_tokens: int
    estimated_cost: float
    avg_response_time_ms: int
    conversation_type: str
    ended_at: datetime | None = None
