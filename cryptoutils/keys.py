"""
Key material: generation and restoration of symmetric keys and key pairs.

This module provides:
- SecretKey: Immutable symmetric key (AES, Camellia, HMAC, DH shared secret)
- PbeKey: Password based encryption key
- PublicKey / PrivateKey: Provider key objects with X.509 / PKCS#8 encodings
- KeyPair: Public and private key of one algorithm
- generate_* / restore_* functions
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import constant_time, serialization
from cryptography.hazmat.primitives.asymmetric import dh, rsa

from .algorithms import (
    HmacAlgorithm,
    KeyPairAlgorithm,
    PbeAlgorithm,
    SymmetricAlgorithm,
)
from .config import get_config
from .errors import InvalidArgumentError, MalformedKeyError
from .random_source import RandomSource, generate_random_bytes

logger = logging.getLogger(__name__)

DEFAULT_BYTES_SIZE: int = 8
DEFAULT_IV_SIZE: int = 16
RSA_PUBLIC_EXPONENT: int = 65537
DH_GENERATOR: int = 2

PublicKeyTypes = Union[rsa.RSAPublicKey, dh.DHPublicKey]
PrivateKeyTypes = Union[rsa.RSAPrivateKey, dh.DHPrivateKey]
SecretKeyAlgorithm = Union[SymmetricAlgorithm, HmacAlgorithm]


class SecretKey:
    """
    Immutable symmetric key with an algorithm tag.

    Key bytes live in a bytearray that is zeroed on deletion. As with any
    Python object this is best effort: the garbage collector decides when
    it happens and copies returned by ``encoded`` are not tracked.
    """

    __slots__ = ("_bytes", "_algorithm")

    def __init__(self, key_bytes: Union[bytes, bytearray], algorithm: str) -> None:
        if not isinstance(key_bytes, (bytes, bytearray)):
            raise InvalidArgumentError("Key must be bytes or bytearray")
        self._bytes = bytearray(key_bytes)
        self._algorithm = str(algorithm)

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def format(self) -> str:
        return "RAW"

    @property
    def encoded(self) -> bytes:
        return bytes(self._bytes)

    def __len__(self) -> int:
        return len(self._bytes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SecretKey):
            return NotImplemented
        return self._algorithm.lower() == other._algorithm.lower() and constant_time.bytes_eq(
            bytes(self._bytes), bytes(other._bytes)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._algorithm}, [REDACTED])"

    def __del__(self) -> None:
        if hasattr(self, "_bytes"):
            for i in range(len(self._bytes)):
                self._bytes[i] = 0


class PbeKey(SecretKey):
    """
    Password based encryption key.

    Encodes to the UTF-8 password, like the provider's PBE keys. The salt and
    iteration count are the values the key was created with.
    """

    __slots__ = ("_pbe_algorithm", "_salt", "_iterations")

    def __init__(
        self,
        password: Union[bytes, bytearray],
        algorithm: PbeAlgorithm,
        salt: bytes,
        iterations: int,
    ) -> None:
        super().__init__(password, algorithm.value)
        self._pbe_algorithm = algorithm
        self._salt = bytes(salt)
        self._iterations = iterations

    @property
    def pbe_algorithm(self) -> PbeAlgorithm:
        return self._pbe_algorithm

    @property
    def salt(self) -> bytes:
        return self._salt

    @property
    def iterations(self) -> int:
        return self._iterations


class PublicKey:
    """Public key wrapper exposing the X.509 SubjectPublicKeyInfo encoding."""

    __slots__ = ("_key", "_algorithm")

    def __init__(self, key: PublicKeyTypes, algorithm: KeyPairAlgorithm) -> None:
        self._key = key
        self._algorithm = algorithm

    @property
    def algorithm(self) -> str:
        return self._algorithm.value

    @property
    def format(self) -> str:
        return "X.509"

    @property
    def encoded(self) -> bytes:
        return self._key.public_bytes(
            serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo
        )

    @property
    def key(self) -> PublicKeyTypes:
        """Underlying provider key."""
        return self._key

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self.encoded == other.encoded

    def __hash__(self) -> int:
        return hash(self.encoded)

    def __repr__(self) -> str:
        return f"PublicKey({self.algorithm}, {self._key.key_size} bits)"


class PrivateKey:
    """Private key wrapper exposing the PKCS#8 encoding. Never printed."""

    __slots__ = ("_key", "_algorithm")

    def __init__(self, key: PrivateKeyTypes, algorithm: KeyPairAlgorithm) -> None:
        self._key = key
        self._algorithm = algorithm

    @property
    def algorithm(self) -> str:
        return self._algorithm.value

    @property
    def format(self) -> str:
        return "PKCS#8"

    @property
    def encoded(self) -> bytes:
        return self._key.private_bytes(
            serialization.Encoding.DER,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )

    @property
    def key(self) -> PrivateKeyTypes:
        """Underlying provider key."""
        return self._key

    def public_key(self) -> PublicKey:
        return PublicKey(self._key.public_key(), self._algorithm)

    def __repr__(self) -> str:
        return f"PrivateKey({self.algorithm}, [REDACTED])"


@dataclass(frozen=True)
class KeyPair:
    """Public and private key of one algorithm."""

    public: PublicKey
    private: PrivateKey

    def __post_init__(self) -> None:
        if self.public.algorithm != self.private.algorithm:
            raise InvalidArgumentError(
                f"Key pair algorithms differ: {self.public.algorithm} / {self.private.algorithm}"
            )


# =============================================================================
# Random bytes
# =============================================================================


def generate_bytes(size: int = DEFAULT_BYTES_SIZE, source: Optional[RandomSource] = None) -> bytes:
    """Generate ``size`` cryptographically secure random bytes."""
    return generate_random_bytes(size, source)


def generate_iv(size: int = DEFAULT_IV_SIZE, source: Optional[RandomSource] = None) -> bytes:
    """Generate a random IV (16 bytes by default, the AES block size)."""
    return generate_random_bytes(size, source)


# =============================================================================
# Secret keys
# =============================================================================


def _secret_key_algorithm(algorithm: Union[str, SecretKeyAlgorithm]) -> SecretKeyAlgorithm:
    if isinstance(algorithm, (SymmetricAlgorithm, HmacAlgorithm)):
        return algorithm
    if isinstance(algorithm, str) and algorithm.lower().startswith("hmac"):
        return HmacAlgorithm.from_name(algorithm)
    return SymmetricAlgorithm.from_name(algorithm)


def _check_key_size(algorithm: SecretKeyAlgorithm, bits: int) -> None:
    if isinstance(algorithm, SymmetricAlgorithm):
        if bits not in algorithm.key_sizes:
            raise InvalidArgumentError(
                f"Invalid {algorithm} key size: {bits} bits, expected one of {algorithm.key_sizes}"
            )
    elif bits <= 0 or bits % 8:
        raise InvalidArgumentError(f"Invalid {algorithm} key size: {bits} bits")


def generate_key(
    size: int = 128,
    algorithm: Union[str, SecretKeyAlgorithm] = SymmetricAlgorithm.AES,
    source: Optional[RandomSource] = None,
) -> SecretKey:
    """
    Generate a random secret key.

    Args:
        size: Key size in bits; 0 selects the algorithm default
        algorithm: Block cipher or HMAC algorithm
        source: Random source (defaults to the system CSPRNG)

    Returns:
        SecretKey tagged with the algorithm name

    Raises:
        InvalidArgumentError: If the size is not valid for the algorithm
        UnsupportedAlgorithmError: If the algorithm is unknown
    """
    alg = _secret_key_algorithm(algorithm)
    if size < 0:
        raise InvalidArgumentError(f"Key size must be >= 0 bits, got {size}")
    bits = size or alg.default_key_size
    _check_key_size(alg, bits)
    logger.debug("Generating %s key (%d bits)", alg, bits)
    return SecretKey(generate_random_bytes(bits // 8, source), alg.value)


def generate_hmac_key(
    algorithm: Union[str, HmacAlgorithm] = HmacAlgorithm.HMAC_SHA256,
    source: Optional[RandomSource] = None,
) -> SecretKey:
    """
    Generate an HMAC key of the algorithm's default size.

    Raises:
        InvalidArgumentError: If the algorithm is not an HMAC algorithm
    """
    return generate_key(0, HmacAlgorithm.from_name(algorithm), source)


def generate_pbe_key(
    password: str,
    salt: bytes,
    iterations: int,
    algorithm: Union[str, PbeAlgorithm, None] = None,
) -> PbeKey:
    """
    Create a password based encryption key.

    The temporary password buffer is cleared once the key holds its own copy.

    Args:
        password: Password text
        salt: PBKDF2 salt
        iterations: PBKDF2 iteration count (>= 1)
        algorithm: PBE scheme (defaults to the configured scheme)

    Returns:
        PbeKey whose encoded form is the UTF-8 password

    Raises:
        InvalidArgumentError: If the algorithm is not a PBE algorithm or the
            iteration count is below 1
        UnsupportedAlgorithmError: If the PBE scheme is unknown
    """
    alg = PbeAlgorithm.from_name(algorithm if algorithm is not None else get_config().pbe_algorithm)
    if iterations < 1:
        raise InvalidArgumentError(f"Iteration count must be >= 1, got {iterations}")

    buffer = bytearray(password.encode("utf-8"))
    try:
        return PbeKey(buffer, alg, salt, iterations)
    finally:
        for i in range(len(buffer)):
            buffer[i] = 0


def restore_key(
    src: bytes,
    algorithm: Union[str, SecretKeyAlgorithm] = SymmetricAlgorithm.AES,
) -> SecretKey:
    """
    Wrap raw bytes as a secret key.

    Only the key length is checked for block ciphers; key strength is not.

    Raises:
        InvalidArgumentError: If the length is not valid for the algorithm
    """
    alg = _secret_key_algorithm(algorithm)
    _check_key_size(alg, len(src) * 8)
    return SecretKey(src, alg.value)


# =============================================================================
# Key pairs
# =============================================================================


def generate_key_pair(
    size: Optional[int] = None,
    algorithm: Union[str, KeyPairAlgorithm] = KeyPairAlgorithm.RSA,
) -> KeyPair:
    """
    Generate an RSA or DH key pair.

    For DH a fresh (p, g) domain of ``size`` bits is generated, which is slow
    for large primes.

    Args:
        size: Modulus/prime size in bits (defaults from config)
        algorithm: RSA or DH

    Returns:
        KeyPair

    Raises:
        InvalidArgumentError: If the provider rejects the size
    """
    alg = KeyPairAlgorithm.from_name(algorithm)
    config = get_config()
    if size is None:
        size = config.rsa_key_size if alg is KeyPairAlgorithm.RSA else config.dh_prime_length

    logger.debug("Generating %s key pair (%d bits)", alg, size)
    try:
        private: PrivateKeyTypes
        if alg is KeyPairAlgorithm.RSA:
            private = rsa.generate_private_key(public_exponent=RSA_PUBLIC_EXPONENT, key_size=size)
        else:
            parameters = dh.generate_parameters(generator=DH_GENERATOR, key_size=size)
            private = parameters.generate_private_key()
    except ValueError as e:
        raise InvalidArgumentError(f"Cannot generate {alg} key pair of {size} bits: {e}") from e

    return KeyPair(public=PublicKey(private.public_key(), alg), private=PrivateKey(private, alg))


_PUBLIC_TYPES = {KeyPairAlgorithm.RSA: rsa.RSAPublicKey, KeyPairAlgorithm.DH: dh.DHPublicKey}
_PRIVATE_TYPES = {KeyPairAlgorithm.RSA: rsa.RSAPrivateKey, KeyPairAlgorithm.DH: dh.DHPrivateKey}


def restore_public_key(
    src: bytes,
    algorithm: Union[str, KeyPairAlgorithm] = KeyPairAlgorithm.RSA,
) -> PublicKey:
    """
    Restore a public key from its X.509 SubjectPublicKeyInfo DER encoding.

    Raises:
        MalformedKeyError: If the bytes are not a public key of the algorithm
    """
    alg = KeyPairAlgorithm.from_name(algorithm)
    try:
        key = serialization.load_der_public_key(src)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise MalformedKeyError(f"Invalid X.509 {alg} public key: {e}") from e
    if not isinstance(key, _PUBLIC_TYPES[alg]):
        raise MalformedKeyError(f"Encoded key is not a {alg} public key")
    return PublicKey(key, alg)


def restore_private_key(
    src: bytes,
    algorithm: Union[str, KeyPairAlgorithm] = KeyPairAlgorithm.RSA,
) -> PrivateKey:
    """
    Restore a private key from its PKCS#8 DER encoding.

    Raises:
        MalformedKeyError: If the bytes are not a private key of the algorithm
    """
    alg = KeyPairAlgorithm.from_name(algorithm)
    try:
        key = serialization.load_der_private_key(src, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise MalformedKeyError(f"Invalid PKCS#8 {alg} private key: {e}") from e
    if not isinstance(key, _PRIVATE_TYPES[alg]):
        raise MalformedKeyError(f"Encoded key is not a {alg} private key")
    return PrivateKey(key, alg)
