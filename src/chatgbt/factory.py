"""Build configured sessions from :class:`AppSettings`."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chatgbt.core.budget.sink import JsonlFileSink
from chatgbt.core.context.manager import ContextManager
from chatgbt.core.interface.client import ModelClient
from chatgbt.core.session.manager import SessionManager, generate_session_id
from chatgbt.core.session.session import ChatSession

if TYPE_CHECKING:
    from chatgbt.core.budget.sink import InteractionSink
    from chatgbt.core.interface.client import CompletionClient
    from chatgbt.settings import AppSettings


def build_session(
    settings: AppSettings,
    *,
    session_id: str | None = None,
    conversation_type: str = "cli",
    client: CompletionClient | None = None,
    sink: InteractionSink | None = None,
    system_prompt: str | None = None,
) -> ChatSession:
    """Create a :class:`ChatSession` wired from *settings*.

    A :class:`JsonlFileSink` under ``settings.log_dir`` is used unless *sink*
    is given; a LiteLLM :class:`ModelClient` unless *client* is given.
    """
    sid = session_id or generate_session_id()
    ctx = settings.context
    return ChatSession(
        sid,
        client or ModelClient(settings.model),
        system_prompt=system_prompt or settings.system_prompt,
        context=ContextManager(ctx.max_tokens, ctx.keep_recent, ctx.summary_enabled),
        budget=settings.budget,
        conversation_type=conversation_type,
        sink=sink if sink is not None else JsonlFileSink.for_session(settings.log_dir, sid),
        timeout=settings.timeout,
        hard_message_limit=ctx.hard_message_limit,
    )


def build_session_manager(
    settings: AppSettings,
    *,
    client: CompletionClient | None = None,
    max_age: float = 3600.0,
) -> SessionManager:
    """Return a :class:`SessionManager` creating ``web`` sessions from *settings*."""
    shared = client or ModelClient(settings.model)

    def factory(session_id: str) -> ChatSession:
        return build_session(
            settings, session_id=session_id, conversation_type="web", client=shared
        )

    return SessionManager(factory, max_age=max_age)
