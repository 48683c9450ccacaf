"""Audit sink interface for validation outcomes."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Deque, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_MAX_PENDING = 10_000


@dataclass(frozen=True)
class ValidationEvent:
    """One validation attempt. Never carries token text or field values."""

    outcome: str
    token_fingerprint: str
    occurred_at: datetime
    shape: Optional[str] = None
    issued_at_ms: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.outcome == "ok"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class EventBuffer:
    """Thread-safe bounded queue of events; the oldest are dropped when full.

    A warning is logged on the first drop and then once per ``max_pending``
    further drops.
    """

    def __init__(self, max_pending: int = DEFAULT_MAX_PENDING) -> None:
        if max_pending <= 0:
            raise ValueError("max_pending must be positive.")
        self.max_pending = max_pending
        self.dropped = 0
        self._lock = threading.Lock()
        self._events: Deque[ValidationEvent] = deque(maxlen=max_pending)

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def append(self, event: ValidationEvent) -> None:
        with self._lock:
            full = len(self._events) == self.max_pending
            self._events.append(event)
            if full:
                self._note_drops(1)

    def snapshot(self) -> List[ValidationEvent]:
        with self._lock:
            return list(self._events)

    def drain(self) -> List[ValidationEvent]:
        with self._lock:
            batch = list(self._events)
            self._events.clear()
            return batch

    def requeue(self, batch: Iterable[ValidationEvent]) -> None:
        """Put ``batch`` back in front of events recorded since it was drained."""
        with self._lock:
            merged = [*batch, *self._events]
            overflow = max(0, len(merged) - self.max_pending)
            self._events = deque(merged[overflow:], maxlen=self.max_pending)
            if overflow:
                self._note_drops(overflow)

    def _note_drops(self, count: int) -> None:
        before = self.dropped
        self.dropped += count
        if before == 0 or before // self.max_pending != self.dropped // self.max_pending:
            logger.warning(
                "Audit buffer full (%d events); %d oldest event(s) dropped so far. Flush the sink more often.",
                self.max_pending,
                self.dropped,
            )


class AuditSink(ABC):
    """Collects validation events; persistence happens on ``flush``.

    The validator only calls ``record``. Whoever owns the sink is
    responsible for calling ``flush`` (or ``close``); buffered sinks hold at
    most ``max_pending`` events and drop the oldest beyond that.
    """

    @abstractmethod
    def record(self, event: ValidationEvent) -> None:
        """Buffer one event. Must not block on I/O."""

    @abstractmethod
    async def flush(self) -> None:
        """Persist buffered events."""

    async def close(self) -> None:
        """Flush and release resources if needed."""
        await self.flush()
