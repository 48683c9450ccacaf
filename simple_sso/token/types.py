"""Token datatypes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple


class WireShape(str, Enum):
    """How a token lays out message and signature."""

    SIGN_ONLY = "sign_only"
    ENCODE_EVERYTHING = "encode_everything"


@dataclass(frozen=True)
class ParsedToken:
    """Result of the structural parse, before signature and expiry checks."""

    shape: WireShape
    message: str
    signed_bytes: bytes
    signature: bytes


@dataclass(frozen=True)
class TokenPayload:
    """Fields vouched for by a valid token.

    ``fields`` excludes the trailing issuance timestamp, which is exposed as
    ``issued_at_ms``. ``parts`` returns the full message fields including it.
    """

    fields: Tuple[str, ...]
    issued_at_ms: int
    shape: WireShape

    @property
    def primary(self) -> str:
        return self.fields[0]

    @property
    def parts(self) -> List[str]:
        return [*self.fields, str(self.issued_at_ms)]
