"""
Envelope codec.

Format: base64( [iv 12B][ciphertext + GCM tag 16B] ), standard alphabet,
padded. Wrapped keys and encrypted data share the same layout; only the
payload differs.

Also holds the text/bytes codecs used for passphrases and JSON text.
"""
import base64

from .config import IV_SIZE, TAG_SIZE
from .exceptions import FormatError, ParseError

MIN_ENVELOPE_SIZE = IV_SIZE + TAG_SIZE


def b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def b64decode(text: str | bytes, what: str = "value") -> bytes:
    """Strictly decode standard, padded base64.

    Raises:
        FormatError: If ``text`` is not valid base64.
    """
    try:
        return base64.b64decode(text, validate=True)
    except (ValueError, TypeError) as err:
        raise FormatError(f"{what} is not valid base64: {err}") from err


def pack(iv: bytes, payload: bytes) -> str:
    """Concatenate ``iv`` and ``payload`` and base64-encode the result."""
    if len(iv) != IV_SIZE:
        raise FormatError(f"IV must be {IV_SIZE} bytes, got {len(iv)}")
    return b64encode(iv + payload)


def unpack(envelope: str | bytes) -> tuple[bytes, bytes]:
    """Split a base64 envelope into ``(iv, payload)``.

    Raises:
        FormatError: On malformed base64 or an envelope too short to hold
            an IV and a tag.
    """
    raw = b64decode(envelope, "envelope")
    if len(raw) < MIN_ENVELOPE_SIZE:
        raise FormatError(
            f"envelope too short: {len(raw)} bytes "
            f"(minimum {MIN_ENVELOPE_SIZE})"
        )
    return raw[:IV_SIZE], raw[IV_SIZE:]


# ---------------------------------------------------------------------------
# Text codecs
# ---------------------------------------------------------------------------

def text_to_bytes(text: str, codec: str = "utf-8") -> bytes:
    """Convert text to bytes.

    ``legacy`` keeps the low byte of every UTF-16 code unit, which is lossy
    for anything outside Latin-1 but matches envelopes from earlier releases.
    """
    if codec == "utf-8":
        return text.encode("utf-8")
    if codec == "legacy":
        return text.encode("utf-16-le", "surrogatepass")[::2]
    raise ValueError(f"Unsupported text codec: {codec}")


def bytes_to_text(data: bytes, codec: str = "utf-8") -> str:
    """Convert decrypted bytes back to text.

    Raises:
        ParseError: If ``data`` is not valid for ``codec``.
    """
    if codec == "utf-8":
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as err:
            raise ParseError(f"decrypted data is not valid UTF-8: {err}") from err
    if codec == "legacy":
        return data.decode("latin-1")
    raise ValueError(f"Unsupported text codec: {codec}")
