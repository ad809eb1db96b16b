"""
Random byte sources.

Components that draw randomness (keys, IVs, salts) accept a RandomSource so
callers can substitute a deterministic source in tests or a hardware RNG in
production. SYSTEM_RANDOM is the process-wide default.
"""

from __future__ import annotations

import secrets
from abc import ABC, abstractmethod
from typing import Optional

from .errors import InvalidArgumentError


class RandomSource(ABC):
    """Source of random bytes."""

    @abstractmethod
    def random_bytes(self, size: int) -> bytes:
        """Return exactly ``size`` random bytes."""
        ...


class SystemRandomSource(RandomSource):
    """
    Operating system CSPRNG.

    Backed by ``secrets``, which reads from the kernel and is safe for
    concurrent use from multiple threads.
    """

    def random_bytes(self, size: int) -> bytes:
        if size < 0:
            raise InvalidArgumentError(f"Random byte count must be >= 0, got {size}")
        return secrets.token_bytes(size)

    def __repr__(self) -> str:
        return "SystemRandomSource()"


SYSTEM_RANDOM: RandomSource = SystemRandomSource()


def generate_random_bytes(length: int, source: Optional[RandomSource] = None) -> bytes:
    """
    Generate cryptographically secure random bytes.

    Args:
        length: Number of bytes to generate
        source: Random source (defaults to SYSTEM_RANDOM)

    Returns:
        Random bytes of specified length
    """
    return (source or SYSTEM_RANDOM).random_bytes(length)
