"""
Algorithm identifiers.

Each operation family has a closed set of algorithms. Names follow the JCA
standard names (``AES``, ``HmacSHA256``, ``PBEWithHmacSHA256AndAES_128``,
``SHA256withRSA``...) so encoded keys and parameters stay interchangeable with
JCA based peers.

Strings are accepted at the API boundary and parsed with ``from_name``:

- a name outside the family raises InvalidArgumentError
- a name inside the family that is not supported raises UnsupportedAlgorithmError
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Dict, Optional, Pattern, Tuple, Type, TypeVar, Union

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers import BlockCipherAlgorithm, algorithms

from .errors import InvalidArgumentError, UnsupportedAlgorithmError

_E = TypeVar("_E", bound="_NamedAlgorithm")


class _NamedAlgorithm(Enum):
    """Enum base with case-insensitive lookup by standard name."""

    def __str__(self) -> str:
        return self.value

    @classmethod
    def _family(cls) -> str:
        return cls.__name__

    @classmethod
    def _pattern(cls) -> Optional[Pattern[str]]:
        return None

    @classmethod
    def from_name(cls: Type[_E], name: Union[str, _E]) -> _E:
        """
        Parse an algorithm name.

        Args:
            name: Standard algorithm name or an existing member

        Returns:
            Enum member

        Raises:
            InvalidArgumentError: If the name does not belong to this family
            UnsupportedAlgorithmError: If the name is not a supported member
        """
        if isinstance(name, cls):
            return name
        if not isinstance(name, str):
            raise InvalidArgumentError(f"Algorithm name must be a string, got {type(name).__name__}")

        pattern = cls._pattern()
        if pattern is not None and not pattern.fullmatch(name.lower()):
            raise InvalidArgumentError(f"{name} is not a {cls._family()} algorithm")

        for member in cls:
            if member.value.lower() == name.lower():
                return member
        raise UnsupportedAlgorithmError(f"Unsupported {cls._family()} algorithm: {name}")


# =============================================================================
# Digests
# =============================================================================


class DigestAlgorithm(_NamedAlgorithm):
    """Message digest algorithms."""

    MD5 = "MD5"
    SHA1 = "SHA-1"
    SHA224 = "SHA-224"
    SHA256 = "SHA-256"
    SHA384 = "SHA-384"
    SHA512 = "SHA-512"
    SHA3_256 = "SHA3-256"
    SHA3_512 = "SHA3-512"

    @classmethod
    def _family(cls) -> str:
        return "digest"

    def hash_algorithm(self) -> hashes.HashAlgorithm:
        """Return a provider hash instance."""
        return _HASHES[self]()

    @property
    def digest_size(self) -> int:
        return _HASHES[self].digest_size


_HASHES: Dict[DigestAlgorithm, Type[hashes.HashAlgorithm]] = {
    DigestAlgorithm.MD5: hashes.MD5,
    DigestAlgorithm.SHA1: hashes.SHA1,
    DigestAlgorithm.SHA224: hashes.SHA224,
    DigestAlgorithm.SHA256: hashes.SHA256,
    DigestAlgorithm.SHA384: hashes.SHA384,
    DigestAlgorithm.SHA512: hashes.SHA512,
    DigestAlgorithm.SHA3_256: hashes.SHA3_256,
    DigestAlgorithm.SHA3_512: hashes.SHA3_512,
}


# =============================================================================
# Symmetric ciphers and MACs
# =============================================================================


class SymmetricAlgorithm(_NamedAlgorithm):
    """Block ciphers usable for secret key generation and CBC/GCM."""

    AES = "AES"
    CAMELLIA = "Camellia"

    @classmethod
    def _family(cls) -> str:
        return "symmetric cipher"

    @property
    def key_sizes(self) -> Tuple[int, ...]:
        """Accepted key sizes in bits."""
        return (128, 192, 256)

    @property
    def default_key_size(self) -> int:
        return 128

    def cipher_algorithm(self, key: bytes) -> BlockCipherAlgorithm:
        if self is SymmetricAlgorithm.CAMELLIA:
            return algorithms.Camellia(key)
        return algorithms.AES(key)


class HmacAlgorithm(_NamedAlgorithm):
    """HMAC algorithms."""

    HMAC_MD5 = "HmacMD5"
    HMAC_SHA1 = "HmacSHA1"
    HMAC_SHA224 = "HmacSHA224"
    HMAC_SHA256 = "HmacSHA256"
    HMAC_SHA384 = "HmacSHA384"
    HMAC_SHA512 = "HmacSHA512"

    @classmethod
    def _family(cls) -> str:
        return "HMAC"

    @classmethod
    def _pattern(cls) -> Optional[Pattern[str]]:
        return _HMAC_PATTERN

    @property
    def digest(self) -> DigestAlgorithm:
        return DigestAlgorithm.from_name(self.value[len("Hmac"):].replace("SHA", "SHA-"))

    @property
    def default_key_size(self) -> int:
        """Default generated key size in bits (one hash block for MD5/SHA-1)."""
        if self in (HmacAlgorithm.HMAC_MD5, HmacAlgorithm.HMAC_SHA1):
            return 512
        return self.digest.digest_size * 8


_HMAC_PATTERN = re.compile(r"hmac.*")


# =============================================================================
# Password based algorithms
# =============================================================================


class PbeAlgorithm(_NamedAlgorithm):
    """PBES2 password based encryption schemes (PBKDF2 + AES-CBC)."""

    PBE_HMAC_SHA1_AES_128 = "PBEWithHmacSHA1AndAES_128"
    PBE_HMAC_SHA224_AES_128 = "PBEWithHmacSHA224AndAES_128"
    PBE_HMAC_SHA256_AES_128 = "PBEWithHmacSHA256AndAES_128"
    PBE_HMAC_SHA384_AES_128 = "PBEWithHmacSHA384AndAES_128"
    PBE_HMAC_SHA512_AES_128 = "PBEWithHmacSHA512AndAES_128"
    PBE_HMAC_SHA1_AES_256 = "PBEWithHmacSHA1AndAES_256"
    PBE_HMAC_SHA224_AES_256 = "PBEWithHmacSHA224AndAES_256"
    PBE_HMAC_SHA256_AES_256 = "PBEWithHmacSHA256AndAES_256"
    PBE_HMAC_SHA384_AES_256 = "PBEWithHmacSHA384AndAES_256"
    PBE_HMAC_SHA512_AES_256 = "PBEWithHmacSHA512AndAES_256"

    @classmethod
    def _family(cls) -> str:
        return "PBE"

    @classmethod
    def _pattern(cls) -> Optional[Pattern[str]]:
        return _PBE_PATTERN

    @property
    def prf(self) -> DigestAlgorithm:
        """Digest of the PBKDF2 pseudo random function."""
        return _PBE_SCHEMES[self][0]

    @property
    def key_length(self) -> int:
        """AES key length in bytes."""
        return _PBE_SCHEMES[self][1]


_PBE_PATTERN = re.compile(r"pbewith.*")
_PBES2_NAME = re.compile(r"PBEWithHmacSHA(\d+)AndAES_(\d+)")


def _parse_pbe_scheme(name: str) -> Tuple[DigestAlgorithm, int]:
    match = _PBES2_NAME.fullmatch(name)
    if match is None:
        raise UnsupportedAlgorithmError(f"Not a PBES2 scheme name: {name}")
    return DigestAlgorithm.from_name("SHA-" + match.group(1)), int(match.group(2)) // 8


# PRF and AES key length in bytes per scheme
_PBE_SCHEMES: Dict[PbeAlgorithm, Tuple[DigestAlgorithm, int]] = {
    member: _parse_pbe_scheme(member.value) for member in PbeAlgorithm
}


class Pbkdf2Algorithm(_NamedAlgorithm):
    """PBKDF2 key derivation functions."""

    PBKDF2_HMAC_SHA1 = "PBKDF2WithHmacSHA1"
    PBKDF2_HMAC_SHA224 = "PBKDF2WithHmacSHA224"
    PBKDF2_HMAC_SHA256 = "PBKDF2WithHmacSHA256"
    PBKDF2_HMAC_SHA384 = "PBKDF2WithHmacSHA384"
    PBKDF2_HMAC_SHA512 = "PBKDF2WithHmacSHA512"

    @classmethod
    def _family(cls) -> str:
        return "PBKDF2"

    @classmethod
    def _pattern(cls) -> Optional[Pattern[str]]:
        return _PBKDF2_PATTERN

    @property
    def prf(self) -> DigestAlgorithm:
        return DigestAlgorithm.from_name(self.value[len("PBKDF2WithHmac"):].replace("SHA", "SHA-"))


_PBKDF2_PATTERN = re.compile(r"pbkdf2with.*")


# =============================================================================
# Asymmetric algorithms
# =============================================================================


class KeyPairAlgorithm(_NamedAlgorithm):
    """Key pair algorithms."""

    RSA = "RSA"
    DH = "DH"

    @classmethod
    def _family(cls) -> str:
        return "key pair"


class SignatureAlgorithm(_NamedAlgorithm):
    """RSA PKCS#1 v1.5 signature algorithms."""

    SHA1_WITH_RSA = "SHA1withRSA"
    SHA224_WITH_RSA = "SHA224withRSA"
    SHA256_WITH_RSA = "SHA256withRSA"
    SHA384_WITH_RSA = "SHA384withRSA"
    SHA512_WITH_RSA = "SHA512withRSA"

    @classmethod
    def _family(cls) -> str:
        return "digest-with-RSA signature"

    @classmethod
    def _pattern(cls) -> Optional[Pattern[str]]:
        return _SIGNATURE_PATTERN

    @property
    def digest(self) -> DigestAlgorithm:
        return DigestAlgorithm.from_name(self.value[: -len("withRSA")].replace("SHA", "SHA-"))


_SIGNATURE_PATTERN = re.compile(r"sha.*withrsa")


class RsaPadding(_NamedAlgorithm):
    """RSA encryption paddings."""

    PKCS1 = "PKCS1Padding"
    OAEP_SHA1 = "OAEPWithSHA-1AndMGF1Padding"
    OAEP_SHA256 = "OAEPWithSHA-256AndMGF1Padding"

    @classmethod
    def _family(cls) -> str:
        return "RSA padding"

    @property
    def digest(self) -> Optional[DigestAlgorithm]:
        """OAEP digest; None for PKCS#1 v1.5."""
        if self is RsaPadding.OAEP_SHA1:
            return DigestAlgorithm.SHA1
        if self is RsaPadding.OAEP_SHA256:
            return DigestAlgorithm.SHA256
        return None
