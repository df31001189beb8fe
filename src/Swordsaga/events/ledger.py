"""Bounded, most-recent-first roll history."""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Iterator

import structlog

from Swordsaga.metrics import inc_counter
from Swordsaga.rules.types import RollSummary

DEFAULT_LEDGER_CAPACITY = 30

log = structlog.get_logger()


class RollLedger:
    """Append-only audit log of roll summaries.

    Index 0 is the newest entry. Once ``capacity`` is reached every insert
    evicts the oldest entry. Stored summaries are immutable; a caller that
    escalates a summary and wants the ledger to reflect it must call
    :meth:`replace` itself.
    """

    def __init__(self, capacity: int = DEFAULT_LEDGER_CAPACITY):
        if capacity < 1:
            raise ValueError("ledger capacity must be at least 1")
        self.capacity = capacity
        self._entries: deque[RollSummary] = deque()
        self._lock = threading.Lock()

    def record(self, summary: RollSummary) -> RollSummary | None:
        """Insert at the front; return the evicted entry, if any."""
        evicted = None
        with self._lock:
            self._entries.appendleft(summary)
            if len(self._entries) > self.capacity:
                evicted = self._entries.pop()
        if evicted is not None:
            inc_counter("ledger.evicted")
            log.debug("ledger.evicted", summary_id=evicted.id)
        log.debug("ledger.recorded", summary_id=summary.id, size=len(self._entries))
        return evicted

    def replace(self, summary: RollSummary) -> bool:
        with self._lock:
            for i, existing in enumerate(self._entries):
                if existing.id == summary.id:
                    self._entries[i] = summary
                    return True
        return False

    def get(self, summary_id: str) -> RollSummary | None:
        with self._lock:
            return next((s for s in self._entries if s.id == summary_id), None)

    def latest(self) -> RollSummary | None:
        with self._lock:
            return self._entries[0] if self._entries else None

    def entries(self) -> list[RollSummary]:
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[RollSummary]:
        return iter(self.entries())

    def __getitem__(self, index: int) -> RollSummary:
        with self._lock:
            return self._entries[index]
