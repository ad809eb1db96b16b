"""
RSA encryption and signatures.

This module provides:
- RsaCipher: Public key encryption / private key decryption
- RsaSign: PKCS#1 v1.5 signatures (``SHA256withRSA`` and friends)
"""

from __future__ import annotations

import logging
from typing import Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from .algorithms import RsaPadding, SignatureAlgorithm
from .config import get_config
from .errors import DecryptionError, InvalidArgumentError
from .keys import PrivateKey, PublicKey

logger = logging.getLogger(__name__)

PKCS1_OVERHEAD: int = 11


def _rsa_public(key: PublicKey) -> rsa.RSAPublicKey:
    if not isinstance(key.key, rsa.RSAPublicKey):
        raise InvalidArgumentError(f"RSA public key required, got {key.algorithm}")
    return key.key


def _rsa_private(key: PrivateKey) -> rsa.RSAPrivateKey:
    if not isinstance(key.key, rsa.RSAPrivateKey):
        raise InvalidArgumentError(f"RSA private key required, got {key.algorithm}")
    return key.key


class RsaCipher:
    """RSA encryption (``RSA/ECB/PKCS1Padding`` by default, OAEP optional)."""

    def __init__(self, rsa_padding: Union[str, RsaPadding] = RsaPadding.PKCS1) -> None:
        self._padding = RsaPadding.from_name(rsa_padding)

    @property
    def padding(self) -> RsaPadding:
        return self._padding

    def _provider_padding(self) -> padding.AsymmetricPadding:
        digest = self._padding.digest
        if digest is None:
            return padding.PKCS1v15()
        return padding.OAEP(
            mgf=padding.MGF1(algorithm=digest.hash_algorithm()),
            algorithm=digest.hash_algorithm(),
            label=None,
        )

    def max_plaintext_size(self, key: Union[PublicKey, PrivateKey]) -> int:
        """Largest plaintext in bytes that fits the key's modulus."""
        modulus_bytes = (key.key.key_size + 7) // 8
        digest = self._padding.digest
        if digest is None:
            return modulus_bytes - PKCS1_OVERHEAD
        return modulus_bytes - 2 * digest.digest_size - 2

    def encrypt(self, src: bytes, public_key: PublicKey) -> bytes:
        """
        Encrypt with an RSA public key.

        Raises:
            InvalidArgumentError: If the key is not RSA or ``src`` exceeds
                the modulus capacity
        """
        key = _rsa_public(public_key)
        limit = self.max_plaintext_size(public_key)
        if len(src) > limit:
            raise InvalidArgumentError(
                f"Plaintext too long for {key.key_size}-bit key: {len(src)} > {limit} bytes"
            )
        return key.encrypt(src, self._provider_padding())

    def decrypt(self, src: bytes, private_key: PrivateKey) -> bytes:
        """
        Decrypt with an RSA private key.

        Raises:
            DecryptionError: If decryption fails
        """
        key = _rsa_private(private_key)
        try:
            return key.decrypt(src, self._provider_padding())
        except ValueError as e:
            raise DecryptionError("Decryption failed") from e


class RsaSign:
    """RSA PKCS#1 v1.5 signatures."""

    def __init__(self, algorithm: Union[str, SignatureAlgorithm, None] = None) -> None:
        """
        Args:
            algorithm: Signature algorithm, e.g. ``SHA256withRSA`` (defaults
                from config)

        Raises:
            InvalidArgumentError: If the name is not a digest-with-RSA algorithm
        """
        self._algorithm = SignatureAlgorithm.from_name(
            algorithm if algorithm is not None else get_config().signature_algorithm
        )

    @property
    def algorithm(self) -> SignatureAlgorithm:
        return self._algorithm

    def sign(self, src: bytes, private_key: PrivateKey) -> bytes:
        signature = _rsa_private(private_key).sign(
            src, padding.PKCS1v15(), self._algorithm.digest.hash_algorithm()
        )
        logger.debug("Signed %d bytes with %s", len(src), self._algorithm)
        return signature

    def verify(self, signature: bytes, src: bytes, public_key: PublicKey) -> bool:
        """True if ``signature`` is a valid signature of ``src``."""
        try:
            _rsa_public(public_key).verify(
                signature, src, padding.PKCS1v15(), self._algorithm.digest.hash_algorithm()
            )
        except InvalidSignature:
            return False
        return True
