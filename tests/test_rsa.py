"""
Tests for RSA encryption and signatures.
"""

from __future__ import annotations

import pytest

from conftest import TEXT
from cryptoutils import (
    DecryptionError,
    DiffieHellmanParams,
    InvalidArgumentError,
    KeyPair,
    RsaCipher,
    RsaPadding,
    RsaSign,
    UnsupportedAlgorithmError,
    hex_to_bytes,
    restore_private_key,
    restore_public_key,
)

PUBLIC_KEY = restore_public_key(
    hex_to_bytes(
        "305c300d06092a864886f70d0101010500034b003048024100aa0d4be11c61ba049e624090b2e4c2ef5230"
        "32508847daed7f0dbb10bb0eadae204e227016a1fc65f7578fb3396d04a1d6a83cbb7d181ac2f96a160c11"
        "a2f9150203010001"
    )
)
PRIVATE_KEY = restore_private_key(
    hex_to_bytes(
        "30820153020100300d06092a864886f70d01010105000482013d30820139020100024100aa0d4be11c61ba"
        "049e624090b2e4c2ef523032508847daed7f0dbb10bb0eadae204e227016a1fc65f7578fb3396d04a1d6a8"
        "3cbb7d181ac2f96a160c11a2f915020301000102402696cdd94faf7d9efeb21d24b8f3e0a89e660184f4e8"
        "196e3b9eca0c89e652d30a1f7af8b444f4cda974a981e3cb92fce5019de0fdf65c38463916fb92ec6b2102"
        "2100d1499860d93b51fb612a7a3cf7b25d2c1f996161b24368f7f0248270dce81e53022100d001d5cbc699"
        "52ed2a08f40612202a8cd9a602d402e3aacb21c2a9f8f3de8df7022018f829d8ec31fa9efe41be21c5ff9e"
        "c423e4fdcc55235bc3b0fffa1c130f128702204006e0956a1b55f054c90ebc33a61d12e007fec4dde2d076"
        "d87c802f7679a1ff0220452d27776cbf457996378611fce22e755d71f1cffa0ef2eb882e20d67428dc3f"
    )
)
SIGNED = hex_to_bytes(
    "6d77726c3e672b0405c055f825ae591f699624241e60caa6f2141898be454087"
    "f96e51d3f3ed61fed0ede390de4fc48f6b18b5ba530deadc30fdb8e9fc41f445"
)


# =============================================================================
# Signatures
# =============================================================================


def test_rsa_sign() -> None:
    assert RsaSign().sign(TEXT, PRIVATE_KEY) == SIGNED


def test_rsa_sign_verify() -> None:
    assert RsaSign().verify(SIGNED, TEXT, PUBLIC_KEY)


def test_rsa_sign_verify_rejects_tampering() -> None:
    sign = RsaSign()
    tampered = bytearray(SIGNED)
    tampered[-1] ^= 0x01

    assert not sign.verify(bytes(tampered), TEXT, PUBLIC_KEY)
    assert not sign.verify(SIGNED, b"Hello, world?", PUBLIC_KEY)


def test_rsa_sign_default_algorithm() -> None:
    assert str(RsaSign().algorithm) == "SHA256withRSA"


@pytest.mark.parametrize("algorithm", ["SHA1withRSA", "SHA384withRSA", "SHA512withRSA"])
def test_rsa_sign_round_trip(rsa_key_pair: KeyPair, algorithm: str) -> None:
    sign = RsaSign(algorithm)
    signature = sign.sign(TEXT, rsa_key_pair.private)

    assert len(signature) == 256
    assert sign.verify(signature, TEXT, rsa_key_pair.public)
    assert not RsaSign("SHA256withRSA").verify(signature, TEXT, rsa_key_pair.public)


def test_rsa_sign_rejects_non_rsa_algorithm() -> None:
    with pytest.raises(InvalidArgumentError):
        RsaSign("MD5withRSA")


def test_rsa_sign_rejects_unknown_digest() -> None:
    with pytest.raises(UnsupportedAlgorithmError):
        RsaSign("SHA3withRSA")


def test_rsa_sign_rejects_dh_key(alice: DiffieHellmanParams) -> None:
    with pytest.raises(InvalidArgumentError):
        RsaSign().sign(TEXT, alice.private_key)


# =============================================================================
# Encryption
# =============================================================================


@pytest.mark.parametrize("rsa_padding", ["PKCS1Padding", "OAEPWithSHA-1AndMGF1Padding", RsaPadding.OAEP_SHA256])
def test_rsa_cipher_round_trip(rsa_key_pair: KeyPair, rsa_padding: str) -> None:
    cipher = RsaCipher(rsa_padding)
    encrypted = cipher.encrypt(TEXT, rsa_key_pair.public)

    assert len(encrypted) == 256
    assert cipher.decrypt(encrypted, rsa_key_pair.private) == TEXT


def test_rsa_cipher_max_plaintext(rsa_key_pair: KeyPair) -> None:
    cipher = RsaCipher()
    src = bytes(245)

    assert cipher.max_plaintext_size(rsa_key_pair.public) == 245
    assert cipher.decrypt(cipher.encrypt(src, rsa_key_pair.public), rsa_key_pair.private) == src
    with pytest.raises(InvalidArgumentError):
        cipher.encrypt(bytes(246), rsa_key_pair.public)


def test_rsa_cipher_oaep_max_plaintext(rsa_key_pair: KeyPair) -> None:
    assert RsaCipher(RsaPadding.OAEP_SHA256).max_plaintext_size(rsa_key_pair.public) == 190


def test_rsa_cipher_decrypt_garbage(rsa_key_pair: KeyPair) -> None:
    with pytest.raises(DecryptionError):
        RsaCipher(RsaPadding.OAEP_SHA256).decrypt(b"\x00" * 256, rsa_key_pair.private)


def test_rsa_cipher_rejects_dh_key(alice: DiffieHellmanParams) -> None:
    with pytest.raises(InvalidArgumentError):
        RsaCipher().encrypt(TEXT, alice.public_key)


def test_rsa_cipher_rejects_unknown_padding() -> None:
    with pytest.raises(UnsupportedAlgorithmError):
        RsaCipher("NoPadding")
