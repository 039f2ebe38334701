"""Model configuration — provider, model name, request timeout."""

from typing import Any

from pydantic import BaseModel, Field

DEFAULT_MODEL = "openai/gpt-3.5-turbo"
DEFAULT_TIMEOUT = 30.0


class ModelConfig(BaseModel):
    """Configuration for a specific model/provider combination.

    The ``model`` field uses LiteLLM's naming convention:
    ``provider/model_name`` (e.g. ``openai/gpt-4o``, ``anthropic/claude-3-opus``).
    """

    model: str = DEFAULT_MODEL
    api_key: str | None = None
    api_base: str | None = None
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    extra: dict[str, Any] = Field(default_factory=lambda: dict[str, Any]())

    @property
    def provider(self) -> str:
        """Extract the provider prefix from the model string."""
        if "/" in self.model:
            return self.model.split("/", 1)[0]
        return "openai"
