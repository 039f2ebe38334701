"""SessionManager — in-memory registry of chat sessions.

Turns for one session are serialised by that session's own
:class:`asyncio.Lock`; the registry lock only guards the dictionaries and is
never held while a completion is in flight.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import uuid4

from chatgbt.errors import SessionNotFoundError

if TYPE_CHECKING:
    from chatgbt.core.budget.models import SessionSummary
    from chatgbt.core.session.session import ChatSession, TurnResult

logger = logging.getLogger(__name__)

SessionFactory = Callable[[str], "ChatSession"]


def generate_session_id(user_id: str = "") -> str:
    """Return a short unique id, salted with *user_id* when given."""
    raw = f"{user_id}:{uuid4().hex}:{time.time_ns()}"
    return hashlib.sha256(raw.encode()).hexdigest()[:16]


@dataclass
class _Entry:
    session: ChatSession
    last_access: float
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)


class SessionManager:
    """Creates, looks up, expires and closes :class:`ChatSession` objects.

    *factory* builds a fully configured session for a given id, so this class
    stays free of model and budget settings.
    """

    def __init__(
        self,
        factory: SessionFactory,
        *,
        max_age: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._factory = factory
        self._max_age = max_age
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._registry_lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._entries

    async def create_session(self, user_id: str = "") -> ChatSession:
        session_id = generate_session_id(user_id)
        session = self._factory(session_id)
        async with self._registry_lock:
            self._entries[session_id] = _Entry(session=session, last_access=self._clock())
        logger.debug("Created session %s", session_id)
        return session

    async def get_session(self, session_id: str) -> ChatSession:
        """Return the session and refresh its last-access time."""
        async with self._registry_lock:
            entry = self._lookup(session_id)
            entry.last_access = self._clock()
            return entry.session

    async def run_turn(self, session_id: str, user_text: str) -> TurnResult:
        """Process one turn while holding only this session's lock."""
        async with self._registry_lock:
            entry = self._lookup(session_id)
            entry.last_access = self._clock()
        async with entry.lock:
            return await entry.session.process_turn(user_text)

    async def close_session(self, session_id: str) -> SessionSummary:
        async with self._registry_lock:
            entry = self._lookup(session_id)
            del self._entries[session_id]
        async with entry.lock:
            return entry.session.close()

    async def cleanup_expired(self) -> int:
        """Close sessions idle longer than ``max_age``. Busy sessions are skipped."""
        now = self._clock()
        async with self._registry_lock:
            expired = [
                (sid, entry)
                for sid, entry in self._entries.items()
                if now - entry.last_access > self._max_age and not entry.lock.locked()
            ]
            for sid, _ in expired:
                del self._entries[sid]

        for sid, entry in expired:
            entry.session.close()
            logger.debug("Expired session %s", sid)
        return len(expired)

    async def close_all(self) -> None:
        async with self._registry_lock:
            entries = list(self._entries.values())
            self._entries.clear()
        for entry in entries:
            async with entry.lock:
                entry.session.close()

    def _lookup(self, session_id: str) -> _Entry:
        entry = self._entries.get(session_id)
        if entry is None:
            raise SessionNotFoundError(session_id)
        return entry
