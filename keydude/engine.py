"""
Crypto Engine — the primitive operations keydude is built on.

:class:`CryptoEngine` is the capability interface the public API talks to:
random bytes, SHA-256 digests, AES-256-GCM key generation/import,
encrypt/decrypt and wrap/unwrap. :class:`SoftwareEngine` implements it with
the ``cryptography`` package, so keydude needs no platform crypto provider.

Engines hold no per-call state; one instance may be shared between threads.

Security Note:
    Never log plaintext, ciphertext or key material.
    IVs are random 96-bit; every wrap/encrypt draws a fresh one.
"""
import os
import abc
from collections.abc import Iterable

from cryptography.exceptions import InvalidTag, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .config import IV_SIZE, KEY_LENGTH
from .exceptions import AuthenticationError, CryptoError, CryptoUnavailableError
from .keys import (
    CryptoKey,
    DATA_USAGES,
    ENCRYPT,
    DECRYPT,
    WRAP_KEY,
    UNWRAP_KEY,
)


class CryptoEngine(abc.ABC):
    """Abstract crypto engine.

    Implementations must raise :class:`AuthenticationError` when a tag does
    not verify and :class:`CryptoUnavailableError` when the underlying
    provider or randomness source is missing.
    """

    name: str = "abstract"

    @abc.abstractmethod
    def random_bytes(self, size: int) -> bytes:
        """Return ``size`` cryptographically secure random bytes."""

    @abc.abstractmethod
    def digest(self, data: bytes) -> bytes:
        """Return the SHA-256 digest of ``data``."""

    @abc.abstractmethod
    def generate_key(
        self, usages: Iterable[str] = DATA_USAGES, extractable: bool = True
    ) -> CryptoKey:
        """Generate a new random AES-256-GCM key."""

    @abc.abstractmethod
    def import_key(
        self,
        material: bytes,
        usages: Iterable[str],
        extractable: bool = False,
        associated_data: bytes | None = None,
    ) -> CryptoKey:
        """Import raw key material as a key restricted to ``usages``."""

    @abc.abstractmethod
    def encrypt(self, key: CryptoKey, iv: bytes, data: bytes) -> bytes:
        """Encrypt ``data``; returns ciphertext with the tag appended."""

    @abc.abstractmethod
    def decrypt(self, key: CryptoKey, iv: bytes, data: bytes) -> bytes:
        """Verify and decrypt ``data`` (ciphertext with tag appended)."""

    @abc.abstractmethod
    def wrap_key(self, key: CryptoKey, wrapping_key: CryptoKey, iv: bytes) -> bytes:
        """Encrypt the raw bytes of ``key`` under ``wrapping_key``."""

    @abc.abstractmethod
    def unwrap_key(
        self,
        wrapped: bytes,
        unwrapping_key: CryptoKey,
        iv: bytes,
        usages: Iterable[str] = DATA_USAGES,
        extractable: bool = False,
    ) -> CryptoKey:
        """Decrypt ``wrapped`` and import the result as a new key."""


def _check_iv(iv: bytes) -> None:
    if len(iv) != IV_SIZE:
        raise CryptoError(f"IV must be {IV_SIZE} bytes, got {len(iv)}")


class SoftwareEngine(CryptoEngine):
    """CryptoEngine backed by ``cryptography``'s AESGCM and SHA-256."""

    name = "software"

    def __init__(self):
        try:
            AESGCM(bytes(KEY_LENGTH))
        except UnsupportedAlgorithm as err:
            raise CryptoUnavailableError(
                f"AES-GCM is not supported by the cryptography backend: {err}"
            ) from err

    # ------------------------------------------------------------------
    # Randomness and digests
    # ------------------------------------------------------------------

    def random_bytes(self, size: int) -> bytes:
        try:
            return os.urandom(size)
        except NotImplementedError as err:
            raise CryptoUnavailableError(
                "No secure randomness source available"
            ) from err

    def digest(self, data: bytes) -> bytes:
        h = hashes.Hash(hashes.SHA256())
        h.update(data)
        return h.finalize()

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def generate_key(
        self, usages: Iterable[str] = DATA_USAGES, extractable: bool = True
    ) -> CryptoKey:
        return CryptoKey(
            self.random_bytes(KEY_LENGTH), usages, extractable=extractable,
        )

    def import_key(
        self,
        material: bytes,
        usages: Iterable[str],
        extractable: bool = False,
        associated_data: bytes | None = None,
    ) -> CryptoKey:
        return CryptoKey(
            material,
            usages,
            extractable=extractable,
            associated_data=associated_data,
        )

    # ------------------------------------------------------------------
    # AES-GCM
    # ------------------------------------------------------------------

    def _seal(self, material: bytes, iv: bytes, data: bytes, aad: bytes | None) -> bytes:
        _check_iv(iv)
        try:
            return AESGCM(material).encrypt(iv, data, aad)
        except UnsupportedAlgorithm as err:
            raise CryptoUnavailableError(str(err)) from err

    def _open(self, material: bytes, iv: bytes, data: bytes, aad: bytes | None) -> bytes:
        _check_iv(iv)
        try:
            return AESGCM(material).decrypt(iv, data, aad)
        except InvalidTag as err:
            raise AuthenticationError(
                "Authentication tag verification failed"
            ) from err
        except UnsupportedAlgorithm as err:
            raise CryptoUnavailableError(str(err)) from err

    def encrypt(self, key: CryptoKey, iv: bytes, data: bytes) -> bytes:
        return self._seal(key.material_for(ENCRYPT), iv, data, key.associated_data)

    def decrypt(self, key: CryptoKey, iv: bytes, data: bytes) -> bytes:
        return self._open(key.material_for(DECRYPT), iv, data, key.associated_data)

    def wrap_key(self, key: CryptoKey, wrapping_key: CryptoKey, iv: bytes) -> bytes:
        material = wrapping_key.material_for(WRAP_KEY)
        return self._seal(material, iv, key.export(), wrapping_key.associated_data)

    def unwrap_key(
        self,
        wrapped: bytes,
        unwrapping_key: CryptoKey,
        iv: bytes,
        usages: Iterable[str] = DATA_USAGES,
        extractable: bool = False,
    ) -> CryptoKey:
        material = unwrapping_key.material_for(UNWRAP_KEY)
        raw = self._open(material, iv, wrapped, unwrapping_key.associated_data)
        return self.import_key(raw, usages, extractable=extractable)
