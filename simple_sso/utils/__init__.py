"""Utility helpers for hashing and time operations."""

from .hashing import sha256_hex, token_fingerprint
from .time import epoch_millis, utc_now

__all__ = ["sha256_hex", "token_fingerprint", "epoch_millis", "utc_now"]
