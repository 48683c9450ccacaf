"""Token construction and validation."""

from .builder import TokenBuilder
from .types import ParsedToken, TokenPayload, WireShape
from .validator import TokenValidator

__all__ = ["TokenBuilder", "TokenValidator", "TokenPayload", "ParsedToken", "WireShape"]
