"""
HMAC message authentication.
"""

from __future__ import annotations

from cryptography.hazmat.primitives import constant_time, hmac

from .algorithms import HmacAlgorithm
from .keys import SecretKey


class Hmac:
    """HMAC with the hash selected by the key's algorithm (e.g. ``HmacSHA256``)."""

    @staticmethod
    def mac(src: bytes, key: SecretKey) -> bytes:
        """
        Compute the tag of ``src``.

        Raises:
            InvalidArgumentError: If the key is not an HMAC key
        """
        algorithm = HmacAlgorithm.from_name(key.algorithm)
        h = hmac.HMAC(key.encoded, algorithm.digest.hash_algorithm())
        h.update(src)
        return h.finalize()

    @staticmethod
    def verify(original_mac: bytes, src: bytes, key: SecretKey) -> bool:
        """Recompute the tag of ``src`` and compare it with ``original_mac``."""
        return constant_time.bytes_eq(original_mac, Hmac.mac(src, key))
