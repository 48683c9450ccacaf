"""Token construction."""

from __future__ import annotations

import logging
from typing import List

from ..codec import codec_for, join_fields, split_fields
from ..config import SSOConfig
from ..errors import InvalidInput
from ..expiry import ExpiryPolicy

logger = logging.getLogger(__name__)


class TokenBuilder:
    """Flatten fields plus a timestamp, sign, and encode into a wire token."""

    def __init__(self, config: SSOConfig, expiry: ExpiryPolicy) -> None:
        self.config = config
        self.expiry = expiry
        self._codec = codec_for(config.text_encoding)

    def build(self, primary: str, *fields: str) -> str:
        if not isinstance(primary, str) or not primary:
            raise InvalidInput("The primary field must be a non-empty string.")
        if not all(isinstance(field, str) for field in fields):
            raise InvalidInput("Token fields must be strings.")

        issued_at = self.expiry.stamp()
        message = join_fields(primary, *fields, str(issued_at))
        try:
            message_raw = message.encode(self.config.charset)
        except UnicodeEncodeError as exc:
            raise InvalidInput(f"Token fields cannot be represented in {self.config.charset}.") from exc
        sig = self.config.signer.sign(message_raw)

        if self.config.encode_everything:
            token = self._codec.encode(message_raw + sig)
        else:
            token = join_fields(message, self._codec.encode(sig))
        logger.debug("Issued token with %d field(s) at %d", len(fields) + 1, issued_at)
        return token

    def build_parts(self, primary: str, *fields: str) -> List[str]:
        """Sign-only token already split on the separator."""
        if self.config.encode_everything:
            raise InvalidInput("Token parts are only available for sign-only tokens.")
        return split_fields(self.build(primary, *fields))
