"""
Capability-restricted key handles.

A :class:`CryptoKey` pairs raw AES-256 key material with a frozen set of
allowed usages. Data keys carry ``{"encrypt", "decrypt"}``, wrapping keys
carry ``{"wrapKey", "unwrapKey"}``; a key can never hold usages from both
sets, and every engine operation checks the usage before touching the
material.
"""
from collections.abc import Iterable

from .config import ALGORITHM, KEY_LENGTH
from .exceptions import CryptoError, KeyUsageError

ENCRYPT = "encrypt"
DECRYPT = "decrypt"
WRAP_KEY = "wrapKey"
UNWRAP_KEY = "unwrapKey"

DATA_USAGES = frozenset({ENCRYPT, DECRYPT})
WRAPPING_USAGES = frozenset({WRAP_KEY, UNWRAP_KEY})


class CryptoKey:
    """Opaque AES-256-GCM key with an allowed-usage set.

    Args:
        material: Raw 32-byte key.
        usages: Allowed usages, all from either DATA_USAGES or WRAPPING_USAGES.
        extractable: Whether :meth:`export` may return the raw material.
        associated_data: Bytes bound as GCM associated data to every
            operation done with this key (the passphrase IV of a wrapping key).
    """

    __slots__ = ("_material", "_usages", "_extractable", "_associated_data")

    def __init__(
        self,
        material: bytes,
        usages: Iterable[str],
        extractable: bool = False,
        associated_data: bytes | None = None,
    ):
        usages = frozenset(usages)
        if not usages:
            raise KeyUsageError("A key needs at least one usage")
        unknown = usages - DATA_USAGES - WRAPPING_USAGES
        if unknown:
            raise KeyUsageError(f"Unknown key usage(s): {sorted(unknown)}")
        if usages & DATA_USAGES and usages & WRAPPING_USAGES:
            raise KeyUsageError(
                "A key cannot be both a data key and a wrapping key"
            )
        if len(material) != KEY_LENGTH:
            raise CryptoError(
                f"{ALGORITHM} key must be {KEY_LENGTH} bytes, got {len(material)}"
            )
        self._material = bytes(material)
        self._usages = usages
        self._extractable = bool(extractable)
        self._associated_data = associated_data

    @property
    def algorithm(self) -> str:
        return ALGORITHM

    @property
    def length(self) -> int:
        """Key length in bits."""
        return KEY_LENGTH * 8

    @property
    def usages(self) -> frozenset[str]:
        return self._usages

    @property
    def extractable(self) -> bool:
        return self._extractable

    @property
    def associated_data(self) -> bytes | None:
        return self._associated_data

    @property
    def kind(self) -> str:
        """``"wrapping"`` or ``"data"``."""
        return "wrapping" if self._usages & WRAPPING_USAGES else "data"

    def allows(self, usage: str) -> bool:
        return usage in self._usages

    def material_for(self, usage: str) -> bytes:
        """Return the raw material for ``usage``.

        Raises:
            KeyUsageError: If ``usage`` is not in the allowed set.
        """
        if usage not in self._usages:
            raise KeyUsageError(
                f"{self.kind.capitalize()} key does not allow '{usage}' "
                f"(allowed: {sorted(self._usages)})"
            )
        return self._material

    def export(self) -> bytes:
        """Return the raw key bytes of an extractable key.

        Raises:
            KeyUsageError: If the key is not extractable.
        """
        if not self._extractable:
            raise KeyUsageError("Key is not extractable")
        return self._material

    def __repr__(self) -> str:
        return (
            f"<CryptoKey {self.algorithm}-{self.length} {self.kind} "
            f"usages={sorted(self._usages)} extractable={self._extractable}>"
        )
