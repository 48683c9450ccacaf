"""Issuance stamping and lifetime enforcement."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from .errors import Expired
from .utils.time import epoch_millis, utc_now

Clock = Callable[[], datetime]


def is_expired(timestamp_ms: int, now_ms: int, lifetime_ms: int) -> bool:
    """A token is expired once its age exceeds the lifetime."""
    return now_ms - lifetime_ms > timestamp_ms


class ExpiryPolicy:
    """Fixed-lifetime policy; there is no sliding renewal."""

    def __init__(self, lifetime_ms: int, clock: Optional[Clock] = None) -> None:
        if lifetime_ms <= 0:
            raise ValueError("lifetime_ms must be positive.")
        self.lifetime_ms = lifetime_ms
        self._clock = clock or utc_now

    def now(self) -> datetime:
        return self._clock()

    def now_ms(self) -> int:
        return epoch_millis(self.now())

    def stamp(self) -> int:
        """Issuance timestamp for a new token."""
        return self.now_ms()

    def check(self, timestamp_ms: int) -> None:
        now_ms = self.now_ms()
        if is_expired(timestamp_ms, now_ms, self.lifetime_ms):
            raise Expired(f"Token issued at {timestamp_ms} is older than {self.lifetime_ms}ms.")
