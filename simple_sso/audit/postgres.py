"""PostgreSQL audit sink for validation events."""

from __future__ import annotations

import logging
from typing import Optional

import asyncpg

from .base import DEFAULT_MAX_PENDING, AuditSink, EventBuffer, ValidationEvent

logger = logging.getLogger(__name__)

INSERT_SQL = """
INSERT INTO sso_validation_events (
    outcome,
    token_fingerprint,
    shape,
    issued_at_ms,
    occurred_at
)
VALUES ($1, $2, $3, $4, $5)
"""


class PostgresAuditSink(AuditSink):
    """Buffers events in memory and writes them with ``asyncpg`` on flush.

    At most ``max_pending`` events are held between flushes; older ones are
    dropped with a warning.
    """

    def __init__(
        self,
        dsn: Optional[str] = None,
        *,
        pool: Optional[asyncpg.Pool] = None,
        min_size: int = 1,
        max_size: int = 4,
        max_pending: int = DEFAULT_MAX_PENDING,
    ) -> None:
        self._dsn = dsn
        self._pool = pool
        self._owns_pool = pool is None
        self._min_size = min_size
        self._max_size = max_size
        self._buffer = EventBuffer(max_pending)

    async def connect(self) -> None:
        """Initialize a connection pool if one was not supplied."""
        if self._pool is not None:
            return
        if not self._dsn:
            raise ValueError("Either `dsn` or `pool` must be provided for PostgresAuditSink.")

        self._pool = await asyncpg.create_pool(
            dsn=self._dsn,
            min_size=self._min_size,
            max_size=self._max_size,
        )

    def record(self, event: ValidationEvent) -> None:
        self._buffer.append(event)

    @property
    def pending(self) -> int:
        return len(self._buffer)

    @property
    def dropped(self) -> int:
        return self._buffer.dropped

    async def flush(self) -> None:
        """Insert buffered events; on failure they stay queued for the next flush."""
        batch = self._buffer.drain()
        if not batch:
            return

        try:
            await self.connect()
            assert self._pool is not None
            async with self._pool.acquire() as conn:
                await conn.executemany(
                    INSERT_SQL,
                    [
                        (e.outcome, e.token_fingerprint, e.shape, e.issued_at_ms, e.occurred_at)
                        for e in batch
                    ],
                )
        except Exception:
            self._buffer.requeue(batch)
            raise
        logger.debug("Flushed %d validation event(s)", len(batch))

    async def close(self) -> None:
        """Flush, then close the pool if this sink created it."""
        try:
            await self.flush()
        finally:
            if self._pool is not None and self._owns_pool:
                await self._pool.close()
                self._pool = None
