"""
Exception classes for cryptographic utility operations.

Validation errors (InvalidArgumentError, MalformedInputError, MalformedKeyError)
are raised before any cryptographic work is attempted. Provider failures are
translated into AuthenticationError or DecryptionError.
"""

from __future__ import annotations


class CryptoError(Exception):
    """Base exception for all cryptoutils operations."""

    pass


class UnsupportedAlgorithmError(CryptoError):
    """Requested algorithm is not available."""

    pass


class InvalidArgumentError(CryptoError):
    """Argument fails validation (algorithm family, size, iteration count)."""

    pass


class MalformedInputError(CryptoError):
    """Encoded input (hex, PEM, envelope, algorithm parameters) is malformed."""

    pass


class MalformedKeyError(CryptoError):
    """Encoded key bytes cannot be parsed into the expected key structure."""

    pass


class AuthenticationError(CryptoError):
    """Authenticated decryption failed (GCM tag, PBE parameter mismatch)."""

    pass


class DecryptionError(CryptoError):
    """Decryption failed (invalid padding, wrong key or password)."""

    pass


class ConfigError(CryptoError):
    """Configuration error."""

    pass
