"""
Diffie-Hellman key agreement.

This module provides:
- DiffieHellmanParams: One party's key pair and domain values (p, g, y)
- DiffieHellman: Party creation and shared secret computation

Two parties that generated their key pairs over the same (p, g) compute the
same secret from each other's public key, whether the peer key is passed as a
key object or as its (p, g, y) values.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from cryptography.hazmat.primitives.asymmetric import dh

from .algorithms import KeyPairAlgorithm
from .config import get_config
from .errors import InvalidArgumentError
from .keys import KeyPair, PrivateKey, PublicKey, SecretKey, generate_key_pair

logger = logging.getLogger(__name__)

SECRET_ALGORITHM: str = KeyPairAlgorithm.DH.value


@dataclass(frozen=True)
class DiffieHellmanParams:
    """One party of a Diffie-Hellman exchange."""

    key: KeyPair
    private_key: PrivateKey
    public_key: PublicKey
    prime: int
    generator: int
    y: int

    @classmethod
    def from_key_pair(cls, key_pair: KeyPair) -> DiffieHellmanParams:
        public_numbers = _dh_public(key_pair.public).public_numbers()
        return cls(
            key=key_pair,
            private_key=key_pair.private,
            public_key=key_pair.public,
            prime=public_numbers.parameter_numbers.p,
            generator=public_numbers.parameter_numbers.g,
            y=public_numbers.y,
        )

    def __repr__(self) -> str:
        return f"DiffieHellmanParams(prime={self.prime.bit_length()} bits, generator={self.generator})"


def _dh_public(key: PublicKey) -> dh.DHPublicKey:
    if not isinstance(key.key, dh.DHPublicKey):
        raise InvalidArgumentError(f"DH public key required, got {key.algorithm}")
    return key.key


def _dh_private(key: PrivateKey) -> dh.DHPrivateKey:
    if not isinstance(key.key, dh.DHPrivateKey):
        raise InvalidArgumentError(f"DH private key required, got {key.algorithm}")
    return key.key


def _parameter_numbers(prime: int, generator: int) -> dh.DHParameterNumbers:
    try:
        return dh.DHParameterNumbers(prime, generator)
    except (ValueError, TypeError) as e:
        raise InvalidArgumentError(f"Invalid DH domain parameters: {e}") from e


class DiffieHellman:
    """Diffie-Hellman party management and agreement."""

    def create_diffie_hellman(self, prime_length: Optional[int] = None) -> DiffieHellmanParams:
        """
        Generate a fresh (p, g) domain and a key pair in it.

        Args:
            prime_length: Prime size in bits (defaults from config); domain
                generation is slow for large primes

        Returns:
            The first party
        """
        if prime_length is None:
            prime_length = get_config().dh_prime_length
        party = DiffieHellmanParams.from_key_pair(generate_key_pair(prime_length, KeyPairAlgorithm.DH))
        logger.debug("Created DH domain (%d-bit prime)", party.prime.bit_length())
        return party

    def get_diffie_hellman(self, prime: int, generator: int) -> DiffieHellmanParams:
        """
        Generate a key pair in an existing (p, g) domain.

        Raises:
            InvalidArgumentError: If the domain parameters are rejected
        """
        try:
            parameters = _parameter_numbers(prime, generator).parameters()
        except ValueError as e:
            raise InvalidArgumentError(f"Invalid DH domain parameters: {e}") from e
        private = parameters.generate_private_key()
        key_pair = KeyPair(
            public=PublicKey(private.public_key(), KeyPairAlgorithm.DH),
            private=PrivateKey(private, KeyPairAlgorithm.DH),
        )
        return DiffieHellmanParams.from_key_pair(key_pair)

    def public_key_from_values(self, prime: int, generator: int, y: int) -> PublicKey:
        """
        Rebuild a peer public key from its domain values and public value y.

        Raises:
            InvalidArgumentError: If the values do not form a valid key
        """
        numbers = dh.DHPublicNumbers(y, _parameter_numbers(prime, generator))
        try:
            return PublicKey(numbers.public_key(), KeyPairAlgorithm.DH)
        except ValueError as e:
            raise InvalidArgumentError(f"Invalid DH public value: {e}") from e

    def compute_secret(self, others_public_key: PublicKey, key: PrivateKey) -> SecretKey:
        """
        Compute the shared secret with a peer.

        Args:
            others_public_key: Peer public key
            key: Own private key

        Returns:
            SecretKey tagged ``DH`` holding the agreed value

        Raises:
            InvalidArgumentError: If the keys are not DH keys of the same domain
        """
        peer = _dh_public(others_public_key)
        own = _dh_private(key)
        if peer.parameters().parameter_numbers() != own.parameters().parameter_numbers():
            raise InvalidArgumentError("DH keys belong to different (p, g) domains")
        try:
            secret = own.exchange(peer)
        except ValueError as e:
            raise InvalidArgumentError(f"DH key agreement failed: {e}") from e
        return SecretKey(secret, SECRET_ALGORITHM)

    def compute_secret_from_values(
        self, prime: int, generator: int, others_y: int, key: PrivateKey
    ) -> SecretKey:
        """Compute the shared secret from the peer's (p, g, y) values."""
        return self.compute_secret(self.public_key_from_values(prime, generator, others_y), key)
