"""
Keydude — public API.

- ``generate_iv()`` — random 12-byte IV, base64
- ``generate_encryption_decryption_key()`` — new data key {encrypt, decrypt}
- ``wrap_key(passphrase, passphrase_iv, key)`` — protect a data key for storage
- ``unwrap_key(passphrase, passphrase_iv, wrapped)`` — recover a data key
- ``encrypt(value, key)`` / ``decrypt(envelope, key)`` — JSON values in envelopes

Every call is a pure function of its arguments plus one draw from the
engine's randomness source. Nothing is persisted.
"""
import logging
from typing import Any

from .config import IV_SIZE, KeydudeConfig
from .crypto import (
    generate_wrapping_key,
    encrypt_raw,
    decrypt_raw,
    serialize_value,
    deserialize_value,
)
from .engine import CryptoEngine, SoftwareEngine
from .envelope import b64encode, pack, unpack
from .exceptions import AuthenticationError, CryptoError, KeyUsageError
from .keys import CryptoKey, DATA_USAGES

logger = logging.getLogger("keydude")


def _require_key(key: Any) -> CryptoKey:
    if not isinstance(key, CryptoKey):
        raise TypeError(f"Expected a CryptoKey, got {type(key).__name__}")
    return key


class Keydude:
    """Passphrase-wrapped keys and authenticated JSON envelopes.

    Args:
        engine: Crypto engine; defaults to :class:`SoftwareEngine`.
        config: Compatibility settings; defaults to ``KeydudeConfig()``.
    """

    def __init__(
        self,
        engine: CryptoEngine | None = None,
        config: KeydudeConfig | None = None,
    ):
        self._engine = engine if engine is not None else SoftwareEngine()
        self._config = config if config is not None else KeydudeConfig()

    @property
    def engine(self) -> CryptoEngine:
        return self._engine

    @property
    def config(self) -> KeydudeConfig:
        return self._config

    def __repr__(self) -> str:
        return (
            f"<Keydude engine={self._engine.name} "
            f"text_codec={self._config.text_codec} "
            f"bind_passphrase_iv={self._config.bind_passphrase_iv}>"
        )

    def _raw_iv(self) -> bytes:
        iv = self._engine.random_bytes(IV_SIZE)
        if len(iv) != IV_SIZE:
            raise CryptoError(
                f"Engine returned a {len(iv)} byte IV (expected {IV_SIZE})"
            )
        return iv

    # ------------------------------------------------------------------
    # IVs and keys
    # ------------------------------------------------------------------

    def generate_iv(self) -> str:
        """Generate a secure 96-bit IV.

        Returns:
            Base64-encoded 12-byte IV (16 characters).
        """
        return b64encode(self._raw_iv())

    def generate_encryption_decryption_key(self) -> CryptoKey:
        """Generate a new extractable data key restricted to encrypt/decrypt.

        Wrap it with :meth:`wrap_key` before storing it anywhere.
        """
        key = self._engine.generate_key(DATA_USAGES, extractable=True)
        logger.debug("Generated %r", key)
        return key

    def wrap_key(self, passphrase: str, passphrase_iv: str, key_to_wrap: CryptoKey) -> str:
        """Wrap a data key with a key derived from ``passphrase``.

        Args:
            passphrase: Passphrase used to derive the wrapping key.
            passphrase_iv: Base64 passphrase IV; keep it, unwrapping needs it.
            key_to_wrap: Extractable data key.

        Returns:
            Base64 envelope: [iv 12B][wrapped key + tag].

        Raises:
            FormatError: If ``passphrase_iv`` is not a base64 12-byte IV.
            KeyUsageError: If ``key_to_wrap`` is not an extractable data key.
        """
        key_to_wrap = _require_key(key_to_wrap)
        if key_to_wrap.usages != DATA_USAGES:
            raise KeyUsageError(f"Only data keys can be wrapped, got {key_to_wrap!r}")
        wrapping_key = generate_wrapping_key(
            self._engine, passphrase, passphrase_iv, self._config,
        )
        iv = self._raw_iv()
        wrapped = self._engine.wrap_key(key_to_wrap, wrapping_key, iv)
        logger.debug("Wrapped data key (%d byte envelope)", IV_SIZE + len(wrapped))
        return pack(iv, wrapped)

    def unwrap_key(
        self,
        passphrase: str,
        passphrase_iv: str,
        wrapped_key: str,
        extractable: bool = False,
    ) -> CryptoKey:
        """Recover a data key produced by :meth:`wrap_key`.

        The passphrase and passphrase IV must be the ones used at wrap time.

        Args:
            passphrase: Passphrase used to derive the unwrapping key.
            passphrase_iv: Base64 passphrase IV used at wrap time.
            wrapped_key: Base64 envelope returned by :meth:`wrap_key`.
            extractable: Whether the recovered key may be exported/re-wrapped.

        Returns:
            Data key restricted to encrypt/decrypt.

        Raises:
            FormatError: On a malformed passphrase IV or envelope.
            AuthenticationError: Wrong passphrase, passphrase IV or tampering.
        """
        unwrapping_key = generate_wrapping_key(
            self._engine, passphrase, passphrase_iv, self._config,
        )
        iv, wrapped = unpack(wrapped_key)
        try:
            key = self._engine.unwrap_key(
                wrapped, unwrapping_key, iv, DATA_USAGES, extractable=extractable,
            )
        except AuthenticationError:
            logger.warning("Key unwrap failed authentication")
            raise
        logger.debug("Unwrapped %r", key)
        return key

    # ------------------------------------------------------------------
    # Data envelopes
    # ------------------------------------------------------------------

    def encrypt(self, value: Any, key: CryptoKey) -> str:
        """Serialize ``value`` to JSON and encrypt it.

        Returns:
            Base64 envelope: [iv 12B][ciphertext + tag].

        Raises:
            SerializationError: If ``value`` is not JSON-serializable.
            KeyUsageError: If ``key`` is not allowed to encrypt.
        """
        key = _require_key(key)
        plaintext = serialize_value(value, self._config.text_codec)
        iv = self._raw_iv()
        ciphertext = encrypt_raw(self._engine, key, iv, plaintext)
        logger.debug("Encrypted %d byte payload", len(plaintext))
        return pack(iv, ciphertext)

    def decrypt(self, envelope: str, key: CryptoKey) -> Any:
        """Decrypt an envelope produced by :meth:`encrypt`.

        Raises:
            FormatError: On a malformed or truncated envelope.
            AuthenticationError: Wrong key or tampered envelope.
            ParseError: If the decrypted bytes are not valid JSON.
        """
        key = _require_key(key)
        iv, ciphertext = unpack(envelope)
        plaintext = decrypt_raw(self._engine, key, iv, ciphertext)
        return deserialize_value(plaintext, self._config.text_codec)


# ---------------------------------------------------------------------------
# Module-level default instance
# ---------------------------------------------------------------------------

_default: Keydude | None = None


def get_keydude() -> Keydude:
    """Return the default instance, configured from the environment on first use."""
    global _default
    if _default is None:
        _default = Keydude(config=KeydudeConfig.from_env())
    return _default


def configure(
    engine: CryptoEngine | None = None,
    config: KeydudeConfig | None = None,
) -> Keydude:
    """Replace the default instance used by the module-level functions."""
    global _default
    _default = Keydude(engine=engine, config=config)
    return _default


def generate_iv() -> str:
    return get_keydude().generate_iv()


def generate_encryption_decryption_key() -> CryptoKey:
    return get_keydude().generate_encryption_decryption_key()


def wrap_key(passphrase: str, passphrase_iv: str, key_to_wrap: CryptoKey) -> str:
    return get_keydude().wrap_key(passphrase, passphrase_iv, key_to_wrap)


def unwrap_key(
    passphrase: str,
    passphrase_iv: str,
    wrapped_key: str,
    extractable: bool = False,
) -> CryptoKey:
    return get_keydude().unwrap_key(
        passphrase, passphrase_iv, wrapped_key, extractable=extractable,
    )


def encrypt(value: Any, key: CryptoKey) -> str:
    return get_keydude().encrypt(value, key)


def decrypt(envelope: str, key: CryptoKey) -> Any:
    return get_keydude().decrypt(envelope, key)
