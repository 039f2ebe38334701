"""Context management — token estimation, keyword summaries, pruning."""

from chatgbt.core.context.classifier import (
    PROMPT_TYPES,
    SUMMARY_TOPICS,
    KeywordClassifier,
    KeywordRule,
    classify_prompt,
)
from chatgbt.core.context.counter import EstimatingCounter, TokenCounter
from chatgbt.core.context.manager import ContextManager, ContextStats
from chatgbt.core.context.pruner import ContextPruner, PruneResult, RecentWindowPruner, should_prune
from chatgbt.core.context.summarizer import KeywordSummarizer, Summarizer

__all__ = [
    "PROMPT_TYPES",
    "SUMMARY_TOPICS",
    "ContextManager",
    "ContextPruner",
    "ContextStats",
    "EstimatingCounter",
    "KeywordClassifier",
    "KeywordRule",
    "KeywordSummarizer",
    "PruneResult",
    "RecentWindowPruner",
    "Summarizer",
    "TokenCounter",
    "classify_prompt",
    "should_prune",
]
