"""Budget tracking — token/cost accounting, warnings, interaction logs."""

from chatgbt.core.budget.models import (
    BudgetConfig,
    BudgetStatus,
    InteractionRecord,
    SessionSummary,
)
from chatgbt.core.budget.sink import InMemorySink, InteractionSink, JsonlFileSink, NullSink
from chatgbt.core.budget.tracker import BudgetTracker

__all__ = [
    "BudgetConfig",
    "BudgetStatus",
    "BudgetTracker",
    "InMemorySink",
    "InteractionRecord",
    "InteractionSink",
    "JsonlFileSink",
    "NullSink",
    "SessionSummary",
]
