"""Error taxonomy for token creation and validation."""

from __future__ import annotations


class SSOError(ValueError):
    """Base class for every token failure."""

    reason = "sso_error"


class InvalidInput(SSOError):
    """Missing argument, bad part count or malformed token structure."""

    reason = "invalid_input"


class DecodeError(SSOError):
    """Malformed hex/base64 text or undecodable message bytes."""

    reason = "decode_error"


class SignatureMismatch(SSOError):
    """Recomputed signature differs from the presented one."""

    reason = "signature_mismatch"


class Expired(SSOError):
    """Token age exceeds the configured lifetime."""

    reason = "expired"
