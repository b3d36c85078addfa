"""
Keydude Configuration — fixed algorithm parameters and validated settings.

Algorithm parameters (cipher, digest, IV size, key length) are fixed module
constants. The only tunable settings deal with compatibility:

    KEYDUDE_TEXT_CODEC = utf-8 | legacy
    KEYDUDE_BIND_PASSPHRASE_IV = true | false

Security Note:
    Never log passphrases or key material. Only log sizes and usages.
"""
import os
import logging

from pydantic import BaseModel, field_validator

logger = logging.getLogger("keydude")

ALGORITHM = "AES-GCM"
DIGEST_ALGORITHM = "SHA-256"
IV_SIZE = 12  # 96-bit nonce
TAG_SIZE = 16  # GCM tag appended to every ciphertext
KEY_LENGTH = 32  # AES-256

TEXT_CODECS = ("utf-8", "legacy")


class KeydudeConfig(BaseModel):
    """Validated keydude configuration.

    ``text_codec`` selects how JSON text and passphrases become bytes:
    ``"utf-8"`` (default) or ``"legacy"``, which keeps one byte per UTF-16
    code unit as envelopes written by earlier releases expect.

    ``bind_passphrase_iv`` binds the passphrase IV to every wrap/unwrap as
    GCM associated data. Disable it only to read wrapped keys produced by
    earlier releases, where the passphrase IV had no effect.
    """

    text_codec: str = "utf-8"
    bind_passphrase_iv: bool = True

    model_config = {"frozen": True}

    @field_validator("text_codec")
    @classmethod
    def validate_codec(cls, v: str) -> str:
        """Validate the text codec is supported."""
        v = v.lower()
        if v not in TEXT_CODECS:
            raise ValueError(f"Unsupported text codec: {v}")
        return v

    @classmethod
    def legacy(cls) -> "KeydudeConfig":
        """Return the profile compatible with envelopes from earlier releases."""
        return cls(text_codec="legacy", bind_passphrase_iv=False)

    @classmethod
    def from_env(cls) -> "KeydudeConfig":
        """Create KeydudeConfig by loading values from environment.

        Unset variables fall back to the field defaults.

        Returns:
            Populated KeydudeConfig instance.
        """
        values = {}
        codec = os.environ.get("KEYDUDE_TEXT_CODEC")
        if codec is not None:
            values["text_codec"] = codec
        bind = os.environ.get("KEYDUDE_BIND_PASSPHRASE_IV")
        if bind is not None:
            values["bind_passphrase_iv"] = bind
        config = cls(**values)
        logger.debug(
            "Loaded keydude config: text_codec=%s bind_passphrase_iv=%s",
            config.text_codec, config.bind_passphrase_iv,
        )
        return config
