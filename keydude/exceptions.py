"""
Keydude exceptions.

Every error raised by keydude derives from :class:`KeydudeError`, so callers
can catch the whole family at one place. Cryptographic failures are never
retried or masked: they signal either a defect or tampering.
"""


class KeydudeError(Exception):
    """Base class for all keydude errors."""


class FormatError(KeydudeError, ValueError):
    """Malformed base64, wrong-length IV or truncated envelope."""


class ParseError(KeydudeError, ValueError):
    """Decrypted bytes are not valid text or JSON."""


class SerializationError(KeydudeError, TypeError):
    """A value handed to ``encrypt`` cannot be serialized as JSON."""


class CryptoError(KeydudeError):
    """Invalid key or algorithm state."""


class AuthenticationError(CryptoError):
    """Authentication tag verification failed.

    Raised for a wrong key, a wrong IV or tampered ciphertext; the three
    cases are indistinguishable by design of the cipher mode.
    """


class CryptoUnavailableError(CryptoError):
    """The crypto engine or its randomness source is missing or misconfigured."""


class KeyUsageError(CryptoError):
    """A key was used outside its allowed usages, or exported while non-extractable."""
