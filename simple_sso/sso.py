"""Issuer/verifier facade over one shared configuration."""

from __future__ import annotations

from typing import Any, List, Optional

from .audit.base import AuditSink
from .config import SSOConfig, load_config_from_env
from .expiry import Clock, ExpiryPolicy
from .token.builder import TokenBuilder
from .token.types import TokenPayload
from .token.validator import TokenValidator


class SimpleSSO:
    """Create and validate signed, short-lived identity tokens.

    One instance may be shared across threads: it holds only the immutable
    configuration and stateless collaborators.
    """

    def __init__(
        self,
        config: SSOConfig,
        *,
        clock: Optional[Clock] = None,
        audit_sink: Optional[AuditSink] = None,
    ) -> None:
        self.config = config
        self.expiry = ExpiryPolicy(config.lifetime_ms, clock=clock)
        self.builder = TokenBuilder(config, self.expiry)
        self.validator = TokenValidator(config, self.expiry, audit_sink=audit_sink)

    @classmethod
    def from_passphrase(
        cls,
        passphrase: str,
        *,
        clock: Optional[Clock] = None,
        audit_sink: Optional[AuditSink] = None,
        **overrides: Any,
    ) -> "SimpleSSO":
        """UTF-8, HMAC-SHA-256, sign-only, hex and a five-minute lifetime unless overridden."""
        return cls(SSOConfig.from_passphrase(passphrase, **overrides), clock=clock, audit_sink=audit_sink)

    @classmethod
    def from_env(cls, *, clock: Optional[Clock] = None, audit_sink: Optional[AuditSink] = None) -> "SimpleSSO":
        return cls(load_config_from_env(), clock=clock, audit_sink=audit_sink)

    def create_token(self, primary: str, *fields: str) -> str:
        return self.builder.build(primary, *fields)

    def create_token_parts(self, primary: str, *fields: str) -> List[str]:
        return self.builder.build_parts(primary, *fields)

    def validate(self, token: str, *parts: str) -> TokenPayload:
        return self.validator.validate(token, *parts)

    def is_valid(self, token: str, *parts: str) -> bool:
        return self.validator.is_valid(token, *parts)

    def decode_data(self, token: str, *parts: str) -> List[str]:
        return self.validator.decode_data(token, *parts)
