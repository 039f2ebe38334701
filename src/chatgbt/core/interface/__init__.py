"""Model interface — message schema, model configuration, completion client."""

from chatgbt.core.interface.client import CompletionClient, ModelClient
from chatgbt.core.interface.config import ModelConfig
from chatgbt.core.interface.models import (
    Completion,
    ConversationHistory,
    Message,
    Role,
    TokenUsage,
)

__all__ = [
    "Completion",
    "CompletionClient",
    "ConversationHistory",
    "Message",
    "ModelClient",
    "ModelConfig",
    "Role",
    "TokenUsage",
]
