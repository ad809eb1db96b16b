"""
Tests for digests and PBKDF2 password hashing.
"""

from __future__ import annotations

import pytest

from conftest import TEXT
from cryptoutils import (
    Digest,
    InvalidArgumentError,
    Pbkdf2Digest,
    UnsupportedAlgorithmError,
    generate_bytes,
    hex_to_bytes,
)

PASSWORD = "password"
SALT = hex_to_bytes("70617373776f726470617373776f7264")
ORIGINAL_HASH = hex_to_bytes(
    "000186a0000001000000001070617373776f726470617373776f7264"
    "232bcb7cf7cd99463bfa3688a2c33569bb372ecece343ada89e9861afb18d036"
)


@pytest.mark.parametrize(
    "algorithm,expected",
    [
        ("MD5", "6cd3556deb0da54bca060b4c39479839"),
        ("SHA-1", "943a702d06f34599aee1f8da8ef9f7296031d699"),
        ("SHA-256", "315f5bdb76d078c43b8ac0064e4a0164612b1fce77c869345bfc94c75894edd3"),
        (
            "SHA-512",
            "c1527cd893c124773d811911970c8fe6e857d6df5dc9226bd8a160614c0cd963"
            "a4ddea2b94bb7d36021ef9d865d5cea294a82dd49a0bb269f51f6e7a57f79421",
        ),
    ],
)
def test_digest(algorithm: str, expected: str) -> None:
    original_hash = hex_to_bytes(expected)

    assert Digest.hash(TEXT, algorithm) == original_hash
    assert Digest.verify(TEXT, original_hash, algorithm)


def test_digest_verify_mismatch() -> None:
    original_hash = Digest.hash(TEXT, "SHA-256")

    assert not Digest.verify(b"Hello, world?", original_hash, "SHA-256")
    assert not Digest.verify(TEXT, original_hash[:-1], "SHA-256")


def test_digest_unknown_algorithm() -> None:
    with pytest.raises(UnsupportedAlgorithmError):
        Digest.hash(TEXT, "WHIRLPOOL")


def test_pbkdf2_hash() -> None:
    assert Pbkdf2Digest().hash(PASSWORD, SALT) == ORIGINAL_HASH


def test_pbkdf2_verify() -> None:
    digest = Pbkdf2Digest()

    assert digest.verify(ORIGINAL_HASH, PASSWORD)
    assert not digest.verify(ORIGINAL_HASH, "Password")


def test_pbkdf2_hash_is_deterministic() -> None:
    digest = Pbkdf2Digest("PBKDF2WithHmacSHA512")
    salt = generate_bytes(16)

    assert digest.hash(PASSWORD, salt, 1000) == digest.hash(PASSWORD, salt, 1000)
    assert digest.hash(PASSWORD, salt, 1000) != digest.hash(PASSWORD, salt, 1001)


def test_pbkdf2_layout() -> None:
    salt = bytes(range(12))
    encoded = Pbkdf2Digest("PBKDF2WithHmacSHA512", key_length=512).hash(PASSWORD, salt, 10)

    assert encoded[:12] == hex_to_bytes("0000000a 00000200 0000000c")
    assert encoded[12:24] == salt
    assert len(encoded) == 12 + 12 + 64


def test_pbkdf2_verify_round_trip() -> None:
    digest = Pbkdf2Digest("PBKDF2WithHmacSHA1", key_length=160)
    encoded = digest.hash(PASSWORD, generate_bytes(16), 500)

    assert digest.verify(encoded, PASSWORD)


@pytest.mark.parametrize("blob", [b"", b"\x00" * 11, ORIGINAL_HASH[:-1], b"\x00" * 12])
def test_pbkdf2_verify_malformed_blob(blob: bytes) -> None:
    assert not Pbkdf2Digest().verify(blob, PASSWORD)


def test_pbkdf2_rejects_non_pbkdf2_algorithm() -> None:
    with pytest.raises(InvalidArgumentError):
        Pbkdf2Digest("HmacSHA256")


def test_pbkdf2_rejects_zero_iterations() -> None:
    with pytest.raises(InvalidArgumentError):
        Pbkdf2Digest().hash(PASSWORD, SALT, 0)
