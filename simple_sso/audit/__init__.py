"""Audit trail for token validation outcomes."""

from __future__ import annotations

import os

from .base import AuditSink, ValidationEvent
from .memory import InMemoryAuditSink

__all__ = [
    "AuditSink",
    "ValidationEvent",
    "InMemoryAuditSink",
    "PostgresAuditSink",
    "create_audit_sink_from_env",
]


def __getattr__(name: str):
    if name == "PostgresAuditSink":
        from .postgres import PostgresAuditSink

        return PostgresAuditSink
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def create_audit_sink_from_env() -> AuditSink:
    """Create a Postgres sink if env configured, otherwise in-memory."""
    dsn = os.getenv("SIMPLE_SSO_AUDIT_DSN") or os.getenv("DATABASE_URL")
    if dsn:
        from .postgres import PostgresAuditSink

        return PostgresAuditSink(dsn=dsn)
    return InMemoryAuditSink()
