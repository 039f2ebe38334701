"""Interaction log sinks.

:class:`InteractionSink` defines the append-only protocol the budget tracker
writes to. :class:`JsonlFileSink` appends one JSON object per line to a
session file. :class:`NullSink` is the tracker default and :class:`InMemorySink`
serves tests.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import IO, TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from chatgbt.core.budget.models import InteractionRecord, SessionSummary

logger = logging.getLogger(__name__)

SUMMARY_LINE_PREFIX = "SESSION_SUMMARY: "


@runtime_checkable
class InteractionSink(Protocol):
    """Append-only destination for interaction records."""

    def write(self, record: InteractionRecord) -> None:
        """Durably append *record*. May raise ``OSError``."""
        ...

    def close(self, summary: SessionSummary | None = None) -> None:
        """Write the final *summary* (if given) and release resources."""
        ...


class NullSink:
    """Discards everything; the tracker already keeps records in memory."""

    def write(self, record: InteractionRecord) -> None:
        pass

    def close(self, summary: SessionSummary | None = None) -> None:
        pass


class InMemorySink:
    """List-backed :class:`InteractionSink` implementation."""

    def __init__(self) -> None:
        self.records: list[InteractionRecord] = []
        self.summary: SessionSummary | None = None
        self.closed = False

    def write(self, record: InteractionRecord) -> None:
        self.records.append(record)

    def close(self, summary: SessionSummary | None = None) -> None:
        self.summary = summary
        self.closed = True


class JsonlFileSink:
    """Appends records to a ``.jsonl`` file, one JSON object per line.

    The file is opened on construction and closed by :meth:`close`; closing
    twice is a no-op. Every write is flushed so a crash loses at most the
    record being written.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._fh: IO[str] | None = self._path.open("a", encoding="utf-8")

    @classmethod
    def for_session(
        cls,
        log_dir: Path,
        session_id: str,
        *,
        now: datetime | None = None,
    ) -> JsonlFileSink:
        """Open ``session_{date}_{session_id}.jsonl`` under *log_dir*."""
        stamp = (now or datetime.now(UTC)).strftime("%Y-%m-%d")
        return cls(log_dir / f"session_{stamp}_{session_id}.jsonl")

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._fh is None

    def write(self, record: InteractionRecord) -> None:
        if self._fh is None:
            msg = f"sink already closed: {self._path}"
            raise OSError(msg)
        self._fh.write(record.model_dump_json() + "\n")
        self._fh.flush()

    def close(self, summary: SessionSummary | None = None) -> None:
        if self._fh is None:
            return
        try:
            if summary is not None:
                self._fh.write(SUMMARY_LINE_PREFIX + summary.model_dump_json() + "\n")
        finally:
            self._fh.close()
            self._fh = None
            logger.debug("Closed interaction log %s", self._path)
