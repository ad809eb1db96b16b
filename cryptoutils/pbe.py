"""
Password based encryption parameters.

PBE ciphertext carries its PBES2 parameters (PKCS#5 v2.1, RFC 8018) in the
envelope: PBKDF2 salt, iteration count, key length and PRF, plus the AES-CBC
IV. The DER encoding is the one JCA providers produce for
``PBEWithHmac<PRF>AndAES_<bits>`` ``AlgorithmParameters``, so envelopes are
interchangeable with JVM peers.

This module provides:
- PbeParameters: Decoded PBES2 parameters and key derivation
- new_parameters: Parameters for a PbeKey with a fresh IV
- get_algorithm_parameters: The same parameters DER encoded
- placeholder_key: Key used only to carry password and scheme on decryption
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Union

from asn1crypto import algos, core
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .algorithms import DigestAlgorithm, PbeAlgorithm
from .errors import InvalidArgumentError, MalformedInputError, UnsupportedAlgorithmError
from .keys import DEFAULT_IV_SIZE, PbeKey, generate_iv, generate_pbe_key
from .random_source import RandomSource

logger = logging.getLogger(__name__)

PLACEHOLDER_SALT: bytes = bytes(8)
PLACEHOLDER_ITERATIONS: int = 1

_PRF_NAMES: Dict[DigestAlgorithm, str] = {
    DigestAlgorithm.SHA1: "sha1",
    DigestAlgorithm.SHA224: "sha224",
    DigestAlgorithm.SHA256: "sha256",
    DigestAlgorithm.SHA384: "sha384",
    DigestAlgorithm.SHA512: "sha512",
}
_PRFS: Dict[str, DigestAlgorithm] = {name: digest for digest, name in _PRF_NAMES.items()}

_CIPHER_NAMES: Dict[int, str] = {16: "aes128_cbc", 24: "aes192_cbc", 32: "aes256_cbc"}
_CIPHER_KEY_LENGTHS: Dict[str, int] = {name: length for length, name in _CIPHER_NAMES.items()}


@dataclass(frozen=True)
class PbeParameters:
    """PBES2 parameters: PBKDF2 settings and the AES-CBC IV."""

    prf: DigestAlgorithm
    key_length: int  # AES key length in bytes
    salt: bytes
    iterations: int
    iv: bytes

    def __post_init__(self) -> None:
        if self.prf not in _PRF_NAMES:
            raise UnsupportedAlgorithmError(f"Unsupported PBKDF2 PRF: {self.prf}")
        if self.key_length not in _CIPHER_NAMES:
            raise UnsupportedAlgorithmError(f"Unsupported AES key length: {self.key_length} bytes")
        if self.iterations < 1:
            raise InvalidArgumentError(f"Iteration count must be >= 1, got {self.iterations}")
        if len(self.iv) != DEFAULT_IV_SIZE:
            raise InvalidArgumentError(f"Invalid IV size: expected {DEFAULT_IV_SIZE}, got {len(self.iv)}")

    @classmethod
    def for_algorithm(
        cls, algorithm: PbeAlgorithm, salt: bytes, iterations: int, iv: bytes
    ) -> PbeParameters:
        return cls(
            prf=algorithm.prf,
            key_length=algorithm.key_length,
            salt=bytes(salt),
            iterations=iterations,
            iv=bytes(iv),
        )

    def matches(self, algorithm: PbeAlgorithm) -> bool:
        """True if these parameters belong to the given PBE scheme."""
        return self.prf is algorithm.prf and self.key_length == algorithm.key_length

    def derive_key(self, password: bytes) -> bytes:
        """Run PBKDF2 over the password with these parameters."""
        kdf = PBKDF2HMAC(
            algorithm=self.prf.hash_algorithm(),
            length=self.key_length,
            salt=self.salt,
            iterations=self.iterations,
        )
        return kdf.derive(password)

    def encode(self) -> bytes:
        """DER encode as PBES2-params."""
        kdf_params = algos.Pbkdf2Params(
            {
                "salt": algos.Pbkdf2Salt(name="specified", value=self.salt),
                "iteration_count": self.iterations,
                "key_length": self.key_length,
                "prf": algos.HmacAlgorithm(
                    {"algorithm": _PRF_NAMES[self.prf], "parameters": core.Null()}
                ),
            }
        )
        params = algos.Pbes2Params(
            {
                "key_derivation_func": algos.KdfAlgorithm(
                    {"algorithm": "pbkdf2", "parameters": kdf_params}
                ),
                "encryption_scheme": algos.EncryptionAlgorithm(
                    {
                        "algorithm": _CIPHER_NAMES[self.key_length],
                        "parameters": core.OctetString(self.iv),
                    }
                ),
            }
        )
        return params.dump()

    @classmethod
    def decode(cls, encoded: bytes) -> PbeParameters:
        """
        Decode DER PBES2-params.

        Raises:
            MalformedInputError: If the bytes are not valid PBES2 parameters
            UnsupportedAlgorithmError: If the KDF, PRF or cipher is not supported
        """
        try:
            params = algos.Pbes2Params.load(encoded, strict=True)
            kdf = params["key_derivation_func"]
            kdf_name = kdf["algorithm"].native
            if kdf_name != "pbkdf2":
                raise UnsupportedAlgorithmError(f"Unsupported key derivation function: {kdf_name}")

            kdf_params = kdf["parameters"]
            salt = kdf_params["salt"].native
            iterations = kdf_params["iteration_count"].native
            declared_length = kdf_params["key_length"].native
            prf_name = kdf_params["prf"]["algorithm"].native

            scheme = params["encryption_scheme"]
            cipher_name = scheme["algorithm"].native
            if cipher_name not in _CIPHER_KEY_LENGTHS:
                raise UnsupportedAlgorithmError(f"Unsupported PBES2 cipher: {cipher_name}")
            iv = scheme["parameters"].native
        except (ValueError, TypeError, KeyError) as e:
            raise MalformedInputError(f"Invalid PBES2 parameters: {e}") from e

        if not isinstance(salt, bytes):
            raise UnsupportedAlgorithmError("Only explicitly specified PBKDF2 salts are supported")
        if not isinstance(iv, bytes):
            raise MalformedInputError("PBES2 cipher parameters must be an IV octet string")
        if prf_name not in _PRFS:
            raise UnsupportedAlgorithmError(f"Unsupported PBKDF2 PRF: {prf_name}")

        key_length = _CIPHER_KEY_LENGTHS[cipher_name]
        if declared_length is not None and declared_length != key_length:
            raise MalformedInputError(
                f"PBKDF2 key length {declared_length} does not match {cipher_name}"
            )
        try:
            return cls(prf=_PRFS[prf_name], key_length=key_length, salt=salt, iterations=iterations, iv=iv)
        except InvalidArgumentError as e:
            raise MalformedInputError(f"Invalid PBES2 parameters: {e}") from e


def new_parameters(key: PbeKey, source: Optional[RandomSource] = None) -> PbeParameters:
    """Parameters for encrypting with ``key``: its salt and iteration count with a fresh random IV."""
    params = PbeParameters.for_algorithm(
        key.pbe_algorithm, key.salt, key.iterations, generate_iv(DEFAULT_IV_SIZE, source)
    )
    logger.debug(
        "PBE parameters for %s: %d byte salt, %d iterations",
        key.pbe_algorithm,
        len(params.salt),
        params.iterations,
    )
    return params


def get_algorithm_parameters(key: PbeKey, source: Optional[RandomSource] = None) -> bytes:
    """
    Encoded algorithm parameters for encrypting with ``key``.

    Uses the key's salt and iteration count with a fresh random IV.
    """
    return new_parameters(key, source).encode()


def placeholder_key(password: str, algorithm: Union[str, PbeAlgorithm, None] = None) -> PbeKey:
    """
    Key used on the decryption side of PBE.

    Decryption only needs the password and the scheme from the key: the real
    salt and iteration count come from the parameters embedded in the
    envelope. This key is therefore built with a fixed placeholder salt
    (8 zero bytes) and iteration count (1). Those values are never used for
    key derivation; callers must not read ``salt`` or ``iterations`` from it.
    """
    return generate_pbe_key(password, PLACEHOLDER_SALT, PLACEHOLDER_ITERATIONS, algorithm)
