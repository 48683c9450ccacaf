"""In-memory audit sink."""

from __future__ import annotations

from typing import List

from .base import DEFAULT_MAX_PENDING, AuditSink, EventBuffer, ValidationEvent


class InMemoryAuditSink(AuditSink):
    """Keeps the most recent ``max_pending`` events; ``flush`` is a no-op."""

    def __init__(self, *, max_pending: int = DEFAULT_MAX_PENDING) -> None:
        self._buffer = EventBuffer(max_pending)

    def record(self, event: ValidationEvent) -> None:
        self._buffer.append(event)

    async def flush(self) -> None:
        return None

    @property
    def dropped(self) -> int:
        return self._buffer.dropped

    @property
    def events(self) -> List[ValidationEvent]:
        return self._buffer.snapshot()

    def outcomes(self) -> List[str]:
        return [event.outcome for event in self.events]
