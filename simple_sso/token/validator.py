"""Token parsing and verification."""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from ..audit.base import AuditSink, ValidationEvent
from ..codec import SEPARATOR, codec_for, join_fields, split_fields
from ..config import SSOConfig
from ..errors import DecodeError, InvalidInput, SignatureMismatch, SSOError
from ..expiry import ExpiryPolicy
from ..utils.hashing import token_fingerprint
from .types import ParsedToken, TokenPayload, WireShape

logger = logging.getLogger(__name__)

_TIMESTAMP_RE = re.compile(r"[0-9]+")


class TokenValidator:
    """Verify tokens in either wire shape and return the vouched fields.

    A token may be passed whole, or already split by the caller: then
    ``token`` and every extra part except the last are plaintext fields and
    the last part is the encoded signature.
    """

    def __init__(self, config: SSOConfig, expiry: ExpiryPolicy, *, audit_sink: Optional[AuditSink] = None) -> None:
        self.config = config
        self.expiry = expiry
        self.audit_sink = audit_sink
        self._codec = codec_for(config.text_encoding)

    def validate(self, token: str, *parts: str) -> TokenPayload:
        parsed: Optional[ParsedToken] = None
        try:
            parsed = self.parse(token, *parts)
            payload = self._verify(parsed)
        except SSOError as exc:
            fingerprint = _fingerprint(token, parts)
            logger.debug("Token %s rejected: %s (%s)", fingerprint, exc.reason, exc)
            self._audit(exc.reason, fingerprint, parsed.shape if parsed else None, None)
            raise

        fingerprint = _fingerprint(token, parts)
        logger.debug("Token %s accepted, issued at %d", fingerprint, payload.issued_at_ms)
        self._audit("ok", fingerprint, payload.shape, payload.issued_at_ms)
        return payload

    def is_valid(self, token: str, *parts: str) -> bool:
        try:
            self.validate(token, *parts)
        except SSOError:
            return False
        return True

    def decode_data(self, token: str, *parts: str) -> List[str]:
        """Vouched fields, or an empty list for any kind of failure."""
        try:
            return list(self.validate(token, *parts).fields)
        except SSOError:
            return []

    def parse(self, token: str, *parts: str) -> ParsedToken:
        """Determine the wire shape and separate message from signature."""
        if not isinstance(token, str) or not token:
            raise InvalidInput("A non-empty token is required.")
        if len(parts) == 1:
            raise InvalidInput("A single extra part is ambiguous; pass the whole token or every part of it.")
        if parts:
            if not all(isinstance(part, str) for part in parts):
                raise InvalidInput("Token parts must be strings.")
            if not parts[-1]:
                raise InvalidInput("No signature present.")
            return self._parse_signed(join_fields(token, *parts[:-1]), parts[-1])

        cut = token.rfind(SEPARATOR)
        if cut == len(token) - 1:
            raise InvalidInput("No signature present.")
        if cut == -1:
            return self._parse_blob(token)
        if cut == 0:
            return self._parse_blob(token[1:])
        return self._parse_signed(token[:cut], token[cut + 1 :])

    def _parse_signed(self, message: str, sig_text: str) -> ParsedToken:
        signature = self._codec.decode(sig_text)
        if len(signature) != self.config.signer.digest_size:
            raise InvalidInput(
                f"Signature is {len(signature)} bytes, expected {self.config.signer.digest_size}."
            )
        try:
            signed_bytes = message.encode(self.config.charset)
        except UnicodeEncodeError as exc:
            raise InvalidInput(f"Token data cannot be represented in {self.config.charset}.") from exc
        return ParsedToken(WireShape.SIGN_ONLY, message, signed_bytes, signature)

    def _parse_blob(self, blob: str) -> ParsedToken:
        raw = self._codec.decode(blob)
        sig_len = self.config.signer.digest_size
        if len(raw) <= sig_len:
            raise InvalidInput("Encoded token is too short to carry data and a signature.")
        signed_bytes, signature = raw[:-sig_len], raw[-sig_len:]
        try:
            message = signed_bytes.decode(self.config.charset)
        except UnicodeDecodeError as exc:
            raise DecodeError(f"Token data is not valid {self.config.charset}.") from exc
        return ParsedToken(WireShape.ENCODE_EVERYTHING, message, signed_bytes, signature)

    def _verify(self, parsed: ParsedToken) -> TokenPayload:
        if not self.config.signer.verify(parsed.signed_bytes, parsed.signature):
            raise SignatureMismatch("Token signature does not match.")

        head, sep, stamp = parsed.message.rpartition(SEPARATOR)
        if not sep or not _TIMESTAMP_RE.fullmatch(stamp):
            raise InvalidInput("Token timestamp is missing or not numeric.")
        issued_at = int(stamp)
        self.expiry.check(issued_at)
        return TokenPayload(tuple(split_fields(head)), issued_at, parsed.shape)

    def _audit(self, outcome: str, fingerprint: str, shape: Optional[WireShape], issued_at_ms: Optional[int]) -> None:
        if self.audit_sink is None:
            return
        self.audit_sink.record(
            ValidationEvent(
                outcome=outcome,
                token_fingerprint=fingerprint,
                occurred_at=self.expiry.now(),
                shape=shape.value if shape else None,
                issued_at_ms=issued_at_ms,
            )
        )


def _fingerprint(token: object, parts: tuple) -> str:
    if not isinstance(token, str) or not all(isinstance(part, str) for part in parts):
        return "-"
    return token_fingerprint(join_fields(token, *parts))
