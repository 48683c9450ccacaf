"""Signature engine wrapping a keyed-hash capability."""

from __future__ import annotations

import hashlib
import hmac
from abc import ABC, abstractmethod


class Signer(ABC):
    """Produces fixed-length signatures over byte strings.

    Implementations are shared across threads by the builder and validator.
    Each ``sign`` call must use its own hashing context, or the
    implementation must document that callers synchronize externally.
    """

    @property
    @abstractmethod
    def digest_size(self) -> int:
        """Length in bytes of every signature this signer produces."""

    @abstractmethod
    def sign(self, message: bytes) -> bytes:
        """Return the signature of ``message``."""

    def verify(self, message: bytes, signature: bytes) -> bool:
        """Recompute the signature and compare in constant time."""
        return hmac.compare_digest(self.sign(message), signature)


class HmacSigner(Signer):
    """HMAC signer; a fresh ``hmac`` object is created for every call."""

    def __init__(self, key: bytes, digestmod: str = "sha256") -> None:
        if not key:
            raise ValueError("HMAC key must not be empty.")
        self._key = bytes(key)
        self.digestmod = digestmod
        self._digest_size = hashlib.new(digestmod).digest_size

    @classmethod
    def from_passphrase(cls, passphrase: str, *, encoding: str = "utf-8", digestmod: str = "sha256") -> "HmacSigner":
        """Key an HMAC signer from a text passphrase."""
        return cls(passphrase.encode(encoding), digestmod=digestmod)

    @property
    def digest_size(self) -> int:
        return self._digest_size

    def sign(self, message: bytes) -> bytes:
        return hmac.new(self._key, message, self.digestmod).digest()

    def __repr__(self) -> str:
        return f"HmacSigner(digestmod={self.digestmod!r})"
