"""
Keydude Crypto Core — Key derivation, raw encryption/decryption, and serialization.

- Wrapping key: SHA-256(passphrase) imported as an AES-256-GCM key limited to
  wrap/unwrap, scoped to the caller's passphrase IV (bound as GCM associated
  data).
- Raw cipher: AES-GCM with a caller-supplied 12-byte IV; the 16-byte tag is
  appended to the ciphertext.
- Values: orjson-encoded JSON text converted to bytes with the configured
  text codec.

Security Note:
    Never log plaintext, ciphertext, passphrases or key material.
"""
import logging
from typing import Any

import orjson

from .config import IV_SIZE, KeydudeConfig
from .engine import CryptoEngine
from .envelope import b64decode, text_to_bytes, bytes_to_text
from .exceptions import AuthenticationError, FormatError, ParseError, SerializationError
from .keys import CryptoKey, WRAPPING_USAGES

logger = logging.getLogger("keydude")


# ---------------------------------------------------------------------------
# Key derivation
# ---------------------------------------------------------------------------

def decode_iv(iv_b64: str, what: str = "IV") -> bytes:
    """Decode a base64 IV and check it is exactly 12 bytes.

    Raises:
        FormatError: On malformed base64 or a wrong length.
    """
    iv = b64decode(iv_b64, what)
    if len(iv) != IV_SIZE:
        raise FormatError(
            f"{what} must decode to exactly {IV_SIZE} bytes, got {len(iv)}"
        )
    return iv


def generate_wrapping_key(
    engine: CryptoEngine,
    passphrase: str | bytes,
    passphrase_iv: str,
    config: KeydudeConfig,
) -> CryptoKey:
    """Build a wrap/unwrap-only key from a passphrase and its IV.

    Args:
        engine: Crypto engine used for the digest and key import.
        passphrase: Passphrase text (bytes are used as-is).
        passphrase_iv: Base64-encoded 12-byte passphrase IV.
        config: Selects the passphrase codec and whether the IV is bound.

    Returns:
        Non-extractable wrapping key.

    Raises:
        FormatError: If ``passphrase_iv`` does not decode to 12 bytes.
    """
    iv = decode_iv(passphrase_iv, "passphrase IV")
    if isinstance(passphrase, str):
        passphrase = text_to_bytes(passphrase, config.text_codec)
    digest = engine.digest(passphrase)
    return engine.import_key(
        digest,
        WRAPPING_USAGES,
        extractable=False,
        associated_data=iv if config.bind_passphrase_iv else None,
    )


# ---------------------------------------------------------------------------
# Raw cipher
# ---------------------------------------------------------------------------

def encrypt_raw(engine: CryptoEngine, key: CryptoKey, iv: bytes, plaintext: bytes) -> bytes:
    """Encrypt ``plaintext`` under ``key``; returns ciphertext + tag."""
    return engine.encrypt(key, iv, plaintext)


def decrypt_raw(engine: CryptoEngine, key: CryptoKey, iv: bytes, ciphertext: bytes) -> bytes:
    """Verify and decrypt ``ciphertext`` (tag appended).

    Raises:
        AuthenticationError: Wrong key, wrong IV or tampered data.
    """
    try:
        return engine.decrypt(key, iv, ciphertext)
    except AuthenticationError:
        logger.warning(
            "Decryption failed authentication (%d byte payload)", len(ciphertext),
        )
        raise


# ---------------------------------------------------------------------------
# Value serialization
# ---------------------------------------------------------------------------

def serialize_value(value: Any, codec: str = "utf-8") -> bytes:
    """Serialize a JSON value to bytes for encryption.

    Supports: dict (str keys), list, tuple, str, int, float, bool, None and
    the extra types orjson serializes natively (datetime, UUID, dataclass).

    Raises:
        SerializationError: If ``value`` cannot be encoded as JSON.
    """
    try:
        data = orjson.dumps(value)
    except orjson.JSONEncodeError as err:
        raise SerializationError(f"value is not JSON-serializable: {err}") from err
    if codec == "utf-8":
        return data
    return text_to_bytes(data.decode("utf-8"), codec)


def deserialize_value(data: bytes, codec: str = "utf-8") -> Any:
    """Deserialize decrypted bytes back to a JSON value.

    Raises:
        ParseError: If ``data`` is not valid text or JSON.
    """
    text = bytes_to_text(data, codec)
    try:
        return orjson.loads(text)
    except orjson.JSONDecodeError as err:
        raise ParseError(f"decrypted data is not valid JSON: {err}") from err
