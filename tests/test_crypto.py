"""
Tests for key derivation, raw cipher helpers and value serialization.
"""
import base64
import datetime
import hashlib
import logging

import pytest

from keydude import KeydudeConfig
from keydude.crypto import (
    decode_iv,
    decrypt_raw,
    deserialize_value,
    encrypt_raw,
    generate_wrapping_key,
    serialize_value,
)
from keydude.exceptions import (
    AuthenticationError,
    FormatError,
    ParseError,
    SerializationError,
)
from keydude.keys import WRAPPING_USAGES

PASSPHRASE_IV = base64.b64encode(b"\x05" * 12).decode("ascii")


# --- Test key derivation ---

class TestWrappingKey:
    """Tests for generate_wrapping_key."""

    def test_wrapping_key_shape(self, engine):
        key = generate_wrapping_key(engine, "123456", PASSPHRASE_IV, KeydudeConfig())
        assert key.usages == WRAPPING_USAGES
        assert key.extractable is False
        assert key.associated_data == b"\x05" * 12

    def test_material_is_sha256(self, engine):
        key = generate_wrapping_key(engine, "pässword", PASSPHRASE_IV, KeydudeConfig())
        expected = hashlib.sha256("pässword".encode("utf-8")).digest()
        assert key.material_for("wrapKey") == expected

    def test_legacy_passphrase_bytes(self, engine):
        key = generate_wrapping_key(engine, "pässword", PASSPHRASE_IV, KeydudeConfig.legacy())
        expected = hashlib.sha256("pässword".encode("latin-1")).digest()
        assert key.material_for("wrapKey") == expected
        assert key.associated_data is None

    def test_bytes_passphrase(self, engine):
        key = generate_wrapping_key(engine, b"raw", PASSPHRASE_IV, KeydudeConfig())
        assert key.material_for("unwrapKey") == hashlib.sha256(b"raw").digest()

    def test_deterministic(self, engine):
        a = generate_wrapping_key(engine, "p", PASSPHRASE_IV, KeydudeConfig())
        b = generate_wrapping_key(engine, "p", PASSPHRASE_IV, KeydudeConfig())
        assert a.material_for("wrapKey") == b.material_for("wrapKey")
        assert a.associated_data == b.associated_data

    @pytest.mark.parametrize("size", [0, 11, 13, 16])
    def test_wrong_iv_length(self, engine, size):
        iv = base64.b64encode(b"\x01" * size).decode("ascii")
        with pytest.raises(FormatError, match="exactly 12 bytes"):
            generate_wrapping_key(engine, "p", iv, KeydudeConfig())

    def test_malformed_iv(self, engine):
        with pytest.raises(FormatError):
            generate_wrapping_key(engine, "p", "not base64!", KeydudeConfig())

    def test_decode_iv(self):
        assert decode_iv(PASSPHRASE_IV) == b"\x05" * 12


# --- Test raw cipher ---

class TestRawCipher:
    """Tests for encrypt_raw/decrypt_raw."""

    def test_roundtrip(self, engine, data_key):
        iv = engine.random_bytes(12)
        ct = encrypt_raw(engine, data_key, iv, b"payload")
        assert decrypt_raw(engine, data_key, iv, ct) == b"payload"

    def test_failure_is_logged_without_content(self, engine, data_key, caplog):
        iv = engine.random_bytes(12)
        ct = bytearray(encrypt_raw(engine, data_key, iv, b"top secret"))
        ct[-1] ^= 0xFF
        with caplog.at_level(logging.WARNING, logger="keydude"):
            with pytest.raises(AuthenticationError):
                decrypt_raw(engine, data_key, iv, bytes(ct))
        assert "failed authentication" in caplog.text
        assert "top secret" not in caplog.text


# --- Test value serialization ---

class TestSerialization:
    """Tests for serialize_value/deserialize_value."""

    @pytest.mark.parametrize("value", [
        {"a": 1, "b": [True, None, 1.5]},
        ["x", 2, {"nested": {"deep": []}}],
        "plain string",
        42,
        3.25,
        True,
        None,
        {"unicode": "zoë ☕ 𝄞"},
    ])
    def test_roundtrip(self, value):
        assert deserialize_value(serialize_value(value)) == value

    def test_compact_json(self):
        assert serialize_value({"a": 1, "b": [1, 2]}) == b'{"a":1,"b":[1,2]}'

    def test_utf8_bytes(self):
        assert serialize_value("é") == b'"\xc3\xa9"'

    def test_legacy_bytes(self):
        assert serialize_value("é", "legacy") == b'"\xe9"'
        assert deserialize_value(b'"\xe9"', "legacy") == "é"

    def test_tuple_becomes_list(self):
        assert deserialize_value(serialize_value((1, 2))) == [1, 2]

    def test_datetime_is_serialized_as_text(self):
        value = datetime.datetime(2024, 1, 2, 3, 4, 5)
        assert deserialize_value(serialize_value(value)) == "2024-01-02T03:04:05"

    @pytest.mark.parametrize("value", [object(), {1: "int key"}, {"s": {1, 2}}, b"bytes"])
    def test_unserializable(self, value):
        with pytest.raises(SerializationError):
            serialize_value(value)

    def test_serialization_error_is_type_error(self):
        with pytest.raises(TypeError):
            serialize_value(object())

    @pytest.mark.parametrize("data", [b"not json", b"{", b"", b"\xff\xfe"])
    def test_parse_error(self, data):
        with pytest.raises(ParseError):
            deserialize_value(data)
