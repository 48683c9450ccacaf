"""Token configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .codec import TextEncoding
from .signing import HmacSigner, Signer

DEFAULT_LIFETIME_MS = 5 * 60 * 1000

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class SSOConfig:
    """Immutable settings shared by the builder and validator.

    ``encode_everything`` selects the wire shape: when False the plaintext
    message travels in the clear followed by the encoded signature, when True
    message and signature are concatenated and encoded as one blob.
    """

    signer: Signer
    charset: str = "utf-8"
    encode_everything: bool = False
    text_encoding: TextEncoding = TextEncoding.HEX
    lifetime_ms: int = DEFAULT_LIFETIME_MS

    def __post_init__(self) -> None:
        if self.lifetime_ms <= 0:
            raise ValueError("lifetime_ms must be positive.")
        try:
            "".encode(self.charset)
            b"".decode(self.charset)
        except LookupError as exc:
            raise ValueError(f"Unknown character encoding '{self.charset}'.") from exc
        try:
            object.__setattr__(self, "text_encoding", TextEncoding(self.text_encoding))
        except ValueError:
            expected = ", ".join(e.value for e in TextEncoding)
            raise ValueError(f"Unknown text encoding '{self.text_encoding}'. Expected one of: {expected}.") from None

    @classmethod
    def from_passphrase(
        cls,
        passphrase: str,
        *,
        charset: str = "utf-8",
        encode_everything: bool = False,
        text_encoding: TextEncoding | str = TextEncoding.HEX,
        lifetime_ms: int = DEFAULT_LIFETIME_MS,
    ) -> "SSOConfig":
        """HMAC-SHA-256 keyed from ``passphrase``; sign-only, hex, five minutes by default."""
        if not passphrase:
            raise ValueError("passphrase must not be empty.")
        return cls(
            signer=HmacSigner.from_passphrase(passphrase),
            charset=charset,
            encode_everything=encode_everything,
            text_encoding=text_encoding,
            lifetime_ms=lifetime_ms,
        )


def load_config_from_env() -> SSOConfig:
    """Build a configuration from ``SIMPLE_SSO_*`` environment variables."""
    secret = os.getenv("SIMPLE_SSO_SECRET")
    if not secret:
        raise ValueError("SIMPLE_SSO_SECRET must be set.")
    lifetime_ms = int(os.getenv("SIMPLE_SSO_LIFETIME_MS", str(DEFAULT_LIFETIME_MS)))
    text_encoding = os.getenv("SIMPLE_SSO_TEXT_ENCODING", TextEncoding.HEX.value).strip().lower()
    encode_everything = os.getenv("SIMPLE_SSO_ENCODE_EVERYTHING", "").strip().lower() in _TRUTHY
    charset = os.getenv("SIMPLE_SSO_CHARSET", "utf-8")
    return SSOConfig.from_passphrase(
        secret,
        charset=charset,
        encode_everything=encode_everything,
        text_encoding=text_encoding,
        lifetime_ms=lifetime_ms,
    )
