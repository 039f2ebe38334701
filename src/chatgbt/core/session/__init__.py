"""Session orchestration — conversation state, turns, session registry."""

from chatgbt.core.session.direct import direct_query
from chatgbt.core.session.manager import SessionManager, generate_session_id
from chatgbt.core.session.session import ChatSession, TurnResult, classify_error
from chatgbt.core.session.state import ConversationState, TurnInProgressError

__all__ = [
    "ChatSession",
    "ConversationState",
    "SessionManager",
    "TurnInProgressError",
    "TurnResult",
    "classify_error",
    "direct_query",
    "generate_session_id",
]
