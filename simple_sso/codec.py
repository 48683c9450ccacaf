"""Text encodings for signature bytes and the flattened field message."""

from __future__ import annotations

import base64
import binascii
import re
from abc import ABC, abstractmethod
from enum import Enum
from typing import List

from .errors import DecodeError

SEPARATOR = ":"

_HEX_RE = re.compile(r"[0-9a-fA-F]*")
_B64_RE = re.compile(r"[A-Za-z0-9+/]*={0,2}")


class TextEncoding(str, Enum):
    """Binary-to-text scheme used on the wire."""

    HEX = "hex"
    BASE64 = "base64"


class TextCodec(ABC):
    """Converts bytes to ASCII text and back."""

    encoding: TextEncoding

    @abstractmethod
    def encode(self, data: bytes) -> str:
        """Encode ``data`` as text."""

    @abstractmethod
    def decode(self, text: str) -> bytes:
        """Decode ``text``; raise ``DecodeError`` when malformed."""


class HexCodec(TextCodec):
    """Lowercase hex, two digits per byte."""

    encoding = TextEncoding.HEX

    def encode(self, data: bytes) -> str:
        return data.hex()

    def decode(self, text: str) -> bytes:
        if len(text) % 2:
            raise DecodeError("Hex text has odd length.")
        if not _HEX_RE.fullmatch(text):
            raise DecodeError("Hex text contains non-hex characters.")
        return bytes(
            _nibble(text[i]) << 4 | _nibble(text[i + 1])
            for i in range(0, len(text), 2)
        )


class Base64Codec(TextCodec):
    """Standard-alphabet base64 with padding."""

    encoding = TextEncoding.BASE64

    def encode(self, data: bytes) -> str:
        return base64.b64encode(data).decode("ascii")

    def decode(self, text: str) -> bytes:
        if not _B64_RE.fullmatch(text):
            raise DecodeError("Base64 text contains characters outside the standard alphabet.")
        try:
            return base64.b64decode(text, validate=True)
        except binascii.Error as exc:
            raise DecodeError("Malformed base64 padding.") from exc


def _nibble(char: str) -> int:
    code = ord(char)
    if code <= ord("9"):
        return code - ord("0")
    return (code | 0x20) - ord("a") + 10


_CODECS = {
    TextEncoding.HEX: HexCodec(),
    TextEncoding.BASE64: Base64Codec(),
}


def codec_for(encoding: TextEncoding | str) -> TextCodec:
    """Return the shared codec instance for a text encoding."""
    try:
        return _CODECS[TextEncoding(encoding)]
    except ValueError:
        expected = ", ".join(e.value for e in TextEncoding)
        raise ValueError(f"Unknown text encoding '{encoding}'. Expected one of: {expected}.") from None


def join_fields(*fields: str) -> str:
    """Flatten fields into one separator-joined message."""
    return SEPARATOR.join(fields)


def split_fields(message: str) -> List[str]:
    """Split a flattened message back into its fields."""
    return message.split(SEPARATOR)
