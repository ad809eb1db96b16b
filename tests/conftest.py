"""
Pytest configuration and fixtures for cryptoutils tests.
"""

from __future__ import annotations

from typing import Iterator

import pytest

from cryptoutils import (
    CryptoConfig,
    DiffieHellman,
    DiffieHellmanParams,
    KeyPair,
    RandomSource,
    generate_key_pair,
    reset_config,
    set_config,
)

TEXT = b"Hello, world!"


class FixedRandomSource(RandomSource):
    """Deterministic source: repeats a seed pattern, identical on every call."""

    def __init__(self, seed: bytes = bytes(range(256))) -> None:
        self._seed = seed

    def random_bytes(self, size: int) -> bytes:
        repeats = size // len(self._seed) + 1
        return (self._seed * repeats)[:size]


@pytest.fixture(autouse=True)
def default_config() -> Iterator[CryptoConfig]:
    """Pin library defaults so a local .env cannot change test vectors."""
    config = CryptoConfig()
    set_config(config)
    yield config
    reset_config()


@pytest.fixture
def fixed_random() -> FixedRandomSource:
    """Create a deterministic random source."""
    return FixedRandomSource()


@pytest.fixture(scope="session")
def rsa_key_pair() -> KeyPair:
    """Generate one 2048-bit RSA key pair for the session."""
    return generate_key_pair(2048, "RSA")


@pytest.fixture(scope="session")
def dh() -> DiffieHellman:
    return DiffieHellman()


@pytest.fixture(scope="session")
def alice(dh: DiffieHellman) -> DiffieHellmanParams:
    """First DH party with a fresh 512-bit domain (small to keep generation fast)."""
    return dh.create_diffie_hellman(512)


@pytest.fixture(scope="session")
def bob(dh: DiffieHellman, alice: DiffieHellmanParams) -> DiffieHellmanParams:
    """Second DH party over alice's domain."""
    return dh.get_diffie_hellman(alice.prime, alice.generator)
