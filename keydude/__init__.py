"""Keydude — passphrase-wrapped keys and authenticated JSON envelopes.

Security Note (Threat Model):
    Data keys live unencrypted in process memory while in use, and wrapping
    keys are derived from a single SHA-256 of the passphrase, so passphrase
    strength bounds the protection of every wrapped key.
"""

from .api import (
    Keydude,
    configure,
    get_keydude,
    generate_iv,
    generate_encryption_decryption_key,
    wrap_key,
    unwrap_key,
    encrypt,
    decrypt,
)
from .config import KeydudeConfig
from .engine import CryptoEngine, SoftwareEngine
from .keys import CryptoKey
from .exceptions import (
    KeydudeError,
    FormatError,
    ParseError,
    SerializationError,
    CryptoError,
    AuthenticationError,
    CryptoUnavailableError,
    KeyUsageError,
)
from .version import __version__

__all__ = [
    "Keydude",
    "configure",
    "get_keydude",
    "generate_iv",
    "generate_encryption_decryption_key",
    "wrap_key",
    "unwrap_key",
    "encrypt",
    "decrypt",
    "KeydudeConfig",
    "CryptoEngine",
    "SoftwareEngine",
    "CryptoKey",
    "KeydudeError",
    "FormatError",
    "ParseError",
    "SerializationError",
    "CryptoError",
    "AuthenticationError",
    "CryptoUnavailableError",
    "KeyUsageError",
    "__version__",
]
