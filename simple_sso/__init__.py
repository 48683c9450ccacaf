"""SimpleSSO package.

Short-lived, HMAC-signed identity tokens for point-to-point trust between
two services that share a secret.
"""

from .codec import SEPARATOR, TextEncoding
from .config import SSOConfig, load_config_from_env
from .errors import DecodeError, Expired, InvalidInput, SignatureMismatch, SSOError
from .signing import HmacSigner, Signer
from .sso import SimpleSSO
from .token import TokenPayload, WireShape

__all__ = [
    "SimpleSSO",
    "SSOConfig",
    "load_config_from_env",
    "Signer",
    "HmacSigner",
    "TextEncoding",
    "SEPARATOR",
    "TokenPayload",
    "WireShape",
    "SSOError",
    "InvalidInput",
    "DecodeError",
    "SignatureMismatch",
    "Expired",
]
