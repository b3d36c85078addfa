"""Shared fixtures for keydude tests."""
import pytest

import keydude.api
from keydude import Keydude, KeydudeConfig, SoftwareEngine


# Envelopes written by the default profile (UTF-8, passphrase IV bound).
PASSPHRASE = "123456"
PASSPHRASE_IV = "mociLmLYz/WcZbdu"
WRAPPED_KEY = (
    "K9dSXN9+ez6BxiBmDEISq3tFDGq07zN8IzTpV1mhC3AuQeTSZ4t4yk1yPmGUvmXXiXSJWqi26yjR0RLF"
)
ENCRYPTED_DATA = (
    "ardKtipa/aur00u1TLD4cVcNheJPYF4WuMbMByA0rLdfkPTJVbTz2QAPdqgRqCIzmAFU6wYs"
    "Ce8taj8DiTePnrfVcEO0xh9YszNb2dVWP4G378D9mNanTs+L197cMZgGkVsi4P1Bdt1wpNha"
    "rcm/k+/O3xczca2btg=="
)
DECRYPTED_OBJECT = {
    "user": "zoë",
    "tags": ["café", "☕", "𝄞"],
    "limits": {"max": 42, "ratio": 0.25},
    "active": False,
}

# Envelopes written by earlier releases (legacy codec, passphrase IV unbound).
LEGACY_PASSPHRASE_IV = "PCK7wZZgfhky82KN"
LEGACY_WRAPPED_KEY = (
    "X/artvVwN2Naqi2Zko6TRetovh/yxEaBESo/jMl5uCGtpwcr9d0E7NshGsWEnCQtz8lkbIhqapNOvIs2"
)
LEGACY_ENCRYPTED_DATA = (
    "8tVeIJfrULtEbbQXjDMGJpX3FvNVMyiCnQogr7pGcmx2xkuUVKKftm9pvT00vzW8+4jzDYET"
    "HWKOuDpUGp+Bp2hnQ9OgJbgGDJB9qkEulCh16hC3D5J/vZdOt7VXAHv7nCppHjf3YKfgYRr5"
    "xMeNKdmQPbM4"
)
LEGACY_DECRYPTED_OBJECT = {
    "name": "keydude",
    "secrets": [1, 2, 3],
    "nested": {"enabled": True, "ratio": 0.5, "missing": None},
}


class ScriptedEngine(SoftwareEngine):
    """SoftwareEngine whose random_bytes returns queued values first."""

    def __init__(self, *values: bytes):
        super().__init__()
        self.queue = list(values)
        self.draws: list[int] = []

    def random_bytes(self, size: int) -> bytes:
        self.draws.append(size)
        if self.queue:
            return self.queue.pop(0)
        return super().random_bytes(size)


@pytest.fixture(autouse=True)
def reset_default(monkeypatch):
    """Start every test without a cached default instance."""
    monkeypatch.setattr(keydude.api, "_default", None)
    monkeypatch.delenv("KEYDUDE_TEXT_CODEC", raising=False)
    monkeypatch.delenv("KEYDUDE_BIND_PASSPHRASE_IV", raising=False)


@pytest.fixture
def kd():
    """Keydude with the default profile."""
    return Keydude()


@pytest.fixture
def legacy_kd():
    """Keydude with the legacy compatibility profile."""
    return Keydude(config=KeydudeConfig.legacy())


@pytest.fixture
def engine():
    return SoftwareEngine()


@pytest.fixture
def data_key(kd):
    return kd.generate_encryption_decryption_key()


@pytest.fixture
def passphrase_iv(kd):
    return kd.generate_iv()
