"""
Message digests and PBKDF2 password hashing.

This module provides:
- Digest: One-shot hash and verification
- Pbkdf2Digest: Self-describing PBKDF2 password hashes

Pbkdf2Digest blob layout (all integers u32 big endian):

    iterations || key_length_bits || salt_length || salt || derived_key
"""

from __future__ import annotations

import logging
import struct
from typing import Optional, Union

from cryptography.hazmat.primitives import constant_time, hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .algorithms import DigestAlgorithm, Pbkdf2Algorithm
from .config import get_config
from .errors import InvalidArgumentError
from .envelope import int_to_bytes

logger = logging.getLogger(__name__)

DEFAULT_PBKDF2_KEY_LENGTH: int = 256  # bits
_HEADER = struct.Struct(">III")


class Digest:
    """One-shot message digests."""

    @staticmethod
    def hash(src: bytes, algorithm: Union[str, DigestAlgorithm] = DigestAlgorithm.SHA256) -> bytes:
        """
        Hash ``src``.

        Raises:
            UnsupportedAlgorithmError: If the digest is unknown
        """
        h = hashes.Hash(DigestAlgorithm.from_name(algorithm).hash_algorithm())
        h.update(src)
        return h.finalize()

    @staticmethod
    def verify(
        src: bytes,
        expected_hash: bytes,
        algorithm: Union[str, DigestAlgorithm] = DigestAlgorithm.SHA256,
    ) -> bool:
        """Recompute the digest of ``src`` and compare it with ``expected_hash``."""
        return constant_time.bytes_eq(expected_hash, Digest.hash(src, algorithm))


class Pbkdf2Digest:
    """
    PBKDF2 password hashing.

    The output embeds iteration count, key length and salt so ``verify`` only
    needs the password.
    """

    def __init__(
        self,
        algorithm: Union[str, Pbkdf2Algorithm] = Pbkdf2Algorithm.PBKDF2_HMAC_SHA256,
        key_length: int = DEFAULT_PBKDF2_KEY_LENGTH,
    ) -> None:
        """
        Args:
            algorithm: PBKDF2 variant
            key_length: Derived key length in bits (multiple of 8)

        Raises:
            InvalidArgumentError: If the algorithm is not PBKDF2 or the key
                length is invalid
        """
        self._algorithm = Pbkdf2Algorithm.from_name(algorithm)
        if key_length <= 0 or key_length % 8:
            raise InvalidArgumentError(f"Key length must be a positive multiple of 8 bits, got {key_length}")
        self._key_length = key_length

    @property
    def algorithm(self) -> Pbkdf2Algorithm:
        return self._algorithm

    def _derive(self, password: str, salt: bytes, iterations: int, key_length: int) -> bytes:
        kdf = PBKDF2HMAC(
            algorithm=self._algorithm.prf.hash_algorithm(),
            length=key_length // 8,
            salt=salt,
            iterations=iterations,
        )
        return kdf.derive(password.encode("utf-8"))

    def hash(self, password: str, salt: bytes, iterations: Optional[int] = None) -> bytes:
        """
        Hash a password.

        Args:
            password: Password
            salt: Salt (16 bytes or more recommended)
            iterations: Iteration count (defaults from config)

        Returns:
            Encoded hash blob
        """
        if iterations is None:
            iterations = get_config().pbkdf2_iterations
        if iterations < 1:
            raise InvalidArgumentError(f"Iteration count must be >= 1, got {iterations}")

        derived = self._derive(password, salt, iterations, self._key_length)
        logger.debug("%s hash: %d iterations, %d byte salt", self._algorithm, iterations, len(salt))
        return (
            int_to_bytes(iterations)
            + int_to_bytes(self._key_length)
            + int_to_bytes(len(salt))
            + salt
            + derived
        )

    def verify(self, encoded_hash: bytes, password: str) -> bool:
        """
        Check a password against an encoded hash.

        Returns False for a wrong password and for blobs that cannot be parsed.
        """
        if len(encoded_hash) < _HEADER.size:
            return False
        iterations, key_length, salt_length = _HEADER.unpack_from(encoded_hash)
        salt_end = _HEADER.size + salt_length
        expected = encoded_hash[salt_end:]
        if iterations < 1 or key_length <= 0 or key_length % 8 or len(expected) != key_length // 8:
            return False

        salt = encoded_hash[_HEADER.size : salt_end]
        return constant_time.bytes_eq(expected, self._derive(password, salt, iterations, key_length))
