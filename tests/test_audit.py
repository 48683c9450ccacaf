import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from simple_sso import SimpleSSO
from simple_sso.audit import InMemoryAuditSink, create_audit_sink_from_env
from simple_sso.audit.base import ValidationEvent
from simple_sso.audit.postgres import INSERT_SQL, PostgresAuditSink


class FakeConn:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.batches = []

    async def executemany(self, sql, rows):
        if self.fail:
            raise ConnectionError("database unavailable")
        self.batches.append((sql, list(rows)))


class FakeAcquire:
    def __init__(self, conn: FakeConn) -> None:
        self.conn = conn

    async def __aenter__(self) -> FakeConn:
        return self.conn

    async def __aexit__(self, *exc) -> None:
        return None


class FakePool:
    def __init__(self, conn: FakeConn) -> None:
        self.conn = conn
        self.closed = False

    def acquire(self) -> FakeAcquire:
        return FakeAcquire(self.conn)

    async def close(self) -> None:
        self.closed = True


def make_event(outcome: str = "ok") -> ValidationEvent:
    return ValidationEvent(
        outcome=outcome,
        token_fingerprint="0123456789abcdef",
        occurred_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        shape="sign_only",
        issued_at_ms=1_767_225_600_000,
    )


def test_validator_records_every_outcome() -> None:
    now = [datetime(2026, 1, 1, tzinfo=timezone.utc)]
    sink = InMemoryAuditSink()
    sso = SimpleSSO.from_passphrase("s3cr3t", clock=lambda: now[0], audit_sink=sink)
    token = sso.create_token("jhondoe", "jhondoe@example.com")

    sso.validate(token)
    assert sso.is_valid(token[:-2] + ("00" if token[-2:] != "00" else "11")) is False
    assert sso.decode_data("garbage:") == []
    now[0] += timedelta(minutes=10)
    assert sso.is_valid(token) is False

    assert sink.outcomes() == ["ok", "signature_mismatch", "invalid_input", "expired"]
    first = sink.events[0]
    assert first.ok is True
    assert first.shape == "sign_only"
    assert first.issued_at_ms is not None
    assert sink.events[1].shape == "sign_only"
    assert sink.events[2].shape is None


def test_audit_events_do_not_leak_token_contents() -> None:
    sink = InMemoryAuditSink()
    sso = SimpleSSO.from_passphrase("s3cr3t", audit_sink=sink)
    token = sso.create_token("jhondoe", "jhondoe@example.com")
    sso.validate(token)

    dumped = str(sink.events[0].to_dict())
    assert "jhondoe" not in dumped
    assert token not in dumped
    assert len(sink.events[0].token_fingerprint) == 16


def test_postgres_sink_flushes_buffered_events() -> None:
    async def run() -> None:
        conn = FakeConn()
        pool = FakePool(conn)
        sink = PostgresAuditSink(pool=pool)
        sink.record(make_event("ok"))
        sink.record(make_event("expired"))
        assert sink.pending == 2

        await sink.flush()

        assert sink.pending == 0
        sql, rows = conn.batches[0]
        assert sql == INSERT_SQL
        assert [row[0] for row in rows] == ["ok", "expired"]
        assert rows[0][1:4] == ("0123456789abcdef", "sign_only", 1_767_225_600_000)

        await sink.flush()
        assert len(conn.batches) == 1

        await sink.close()
        assert pool.closed is False

    asyncio.run(run())


def test_postgres_sink_keeps_events_when_flush_fails() -> None:
    async def run() -> None:
        conn = FakeConn(fail=True)
        sink = PostgresAuditSink(pool=FakePool(conn))
        sink.record(make_event())

        with pytest.raises(ConnectionError):
            await sink.flush()
        assert sink.pending == 1

        conn.fail = False
        await sink.flush()
        assert sink.pending == 0
        assert len(conn.batches) == 1

    asyncio.run(run())


def test_postgres_sink_requires_dsn_or_pool() -> None:
    async def run() -> None:
        sink = PostgresAuditSink()
        sink.record(make_event())
        with pytest.raises(ValueError):
            await sink.flush()

    asyncio.run(run())


def test_create_audit_sink_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SIMPLE_SSO_AUDIT_DSN", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    assert isinstance(create_audit_sink_from_env(), InMemoryAuditSink)

    monkeypatch.setenv("SIMPLE_SSO_AUDIT_DSN", "postgresql://localhost/sso")
    assert isinstance(create_audit_sink_from_env(), PostgresAuditSink)


def test_in_memory_sink_stays_bounded(caplog: pytest.LogCaptureFixture) -> None:
    sink = InMemoryAuditSink(max_pending=100)
    sso = SimpleSSO.from_passphrase("s3cr3t", audit_sink=sink)

    with caplog.at_level("WARNING", logger="simple_sso.audit.base"):
        for _ in range(1_000):
            sso.is_valid("garbage:")

    assert len(sink.events) == 100
    assert sink.dropped == 900
    warnings = [r for r in caplog.records if r.levelname == "WARNING"]
    assert 1 <= len(warnings) <= 10


def test_postgres_sink_pending_stays_bounded() -> None:
    sink = PostgresAuditSink(dsn="postgresql://localhost/sso", max_pending=50)
    sso = SimpleSSO.from_passphrase("s3cr3t", audit_sink=sink)

    for _ in range(5_000):
        sso.is_valid("garbage:")

    assert sink.pending == 50
    assert sink.dropped == 4_950


def test_requeue_after_failed_flush_keeps_newest_events() -> None:
    async def run() -> None:
        conn = FakeConn(fail=True)
        sink = PostgresAuditSink(pool=FakePool(conn), max_pending=3)
        sink.record(make_event("a"))
        sink.record(make_event("b"))

        async def record_during_flush(sql, rows):
            sink.record(make_event("c"))
            sink.record(make_event("d"))
            raise ConnectionError("database unavailable")

        conn.executemany = record_during_flush
        with pytest.raises(ConnectionError):
            await sink.flush()

        assert sink.pending == 3
        assert sink.dropped == 1

        outcomes = []

        async def capture(sql, rows):
            outcomes.extend(row[0] for row in rows)

        conn.executemany = capture
        await sink.flush()
        assert outcomes == ["b", "c", "d"]

    asyncio.run(run())


def test_max_pending_must_be_positive() -> None:
    with pytest.raises(ValueError):
        InMemoryAuditSink(max_pending=0)
