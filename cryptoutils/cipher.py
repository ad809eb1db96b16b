"""
Symmetric encryption with self-describing envelopes.

This module provides:
- AesCipher: CBC (PKCS#7 padding), GCM (128-bit tag, optional AAD) and
  password based encryption (PBES2: PBKDF2 + AES-CBC)

Every ciphertext is framed as ``u32_be(len(params)) || params || payload`` so
decryption needs only the key (or password).
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import BlockCipherAlgorithm, Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .algorithms import PbeAlgorithm, SymmetricAlgorithm
from .errors import (
    AuthenticationError,
    DecryptionError,
    InvalidArgumentError,
    MalformedInputError,
    UnsupportedAlgorithmError,
)
from .envelope import deserialize, serialize
from .keys import PbeKey, SecretKey, generate_pbe_key
from .pbe import PbeParameters, new_parameters, placeholder_key
from .random_source import RandomSource

logger = logging.getLogger(__name__)

BLOCK_SIZE: int = 16  # bytes, AES and Camellia
CBC_IV_SIZE: int = 16
GCM_IV_SIZES: Tuple[int, ...] = (12, 16)
GCM_TAG_SIZE: int = 16  # 128 bits


def _check_iv(iv: bytes, sizes: Tuple[int, ...], mode: str) -> None:
    if len(iv) not in sizes:
        raise InvalidArgumentError(f"Invalid {mode} IV size: expected {sizes}, got {len(iv)}")


def _check_envelope_iv(iv: bytes, sizes: Tuple[int, ...], mode: str) -> None:
    if len(iv) not in sizes:
        raise MalformedInputError(f"Envelope carries a {len(iv)} byte {mode} IV, expected {sizes}")


def _pad(data: bytes) -> bytes:
    padder = padding.PKCS7(BLOCK_SIZE * 8).padder()
    return padder.update(data) + padder.finalize()


def _unpad(data: bytes) -> bytes:
    unpadder = padding.PKCS7(BLOCK_SIZE * 8).unpadder()
    try:
        return unpadder.update(data) + unpadder.finalize()
    except ValueError as e:
        raise DecryptionError("Decryption failed: invalid padding") from e


def _cbc_encrypt(cipher_algorithm: BlockCipherAlgorithm, iv: bytes, data: bytes) -> bytes:
    encryptor = Cipher(cipher_algorithm, modes.CBC(iv)).encryptor()
    return encryptor.update(_pad(data)) + encryptor.finalize()


def _cbc_decrypt(cipher_algorithm: BlockCipherAlgorithm, iv: bytes, data: bytes) -> bytes:
    if not data or len(data) % BLOCK_SIZE:
        raise DecryptionError(
            f"Decryption failed: ciphertext length {len(data)} is not a positive multiple of {BLOCK_SIZE}"
        )
    decryptor = Cipher(cipher_algorithm, modes.CBC(iv)).decryptor()
    return _unpad(decryptor.update(data) + decryptor.finalize())


class AesCipher:
    """
    Block cipher operations framed with the envelope codec.

    CBC accepts AES and Camellia keys; GCM and PBE use AES.
    """

    def __init__(self, source: Optional[RandomSource] = None) -> None:
        """
        Args:
            source: Random source for PBE IVs (defaults to the system CSPRNG)
        """
        self._source = source

    # -------------------------------------------------------------------------
    # CBC
    # -------------------------------------------------------------------------

    @staticmethod
    def _block_cipher(key: SecretKey) -> BlockCipherAlgorithm:
        try:
            algorithm = SymmetricAlgorithm.from_name(key.algorithm)
        except UnsupportedAlgorithmError as e:
            raise InvalidArgumentError(f"{key.algorithm} key cannot be used for block encryption") from e
        try:
            return algorithm.cipher_algorithm(key.encoded)
        except ValueError as e:
            raise InvalidArgumentError(f"Invalid {algorithm} key: {e}") from e

    def encrypt(self, src: bytes, key: SecretKey, iv: bytes) -> bytes:
        """
        Encrypt with CBC and PKCS#7 padding.

        Args:
            src: Plaintext
            key: AES or Camellia key
            iv: 16-byte IV

        Returns:
            ``serialize(iv) || ciphertext``

        Raises:
            InvalidArgumentError: If the key or IV is invalid
        """
        _check_iv(iv, (CBC_IV_SIZE,), "CBC")
        ciphertext = _cbc_encrypt(self._block_cipher(key), iv, src)
        logger.debug("CBC encrypted %d bytes with %s", len(src), key.algorithm)
        return serialize(iv) + ciphertext

    def decrypt(self, src: bytes, key: SecretKey) -> bytes:
        """
        Decrypt a CBC envelope.

        Raises:
            MalformedInputError: If the envelope framing or its IV is invalid
            DecryptionError: If the padding is invalid (wrong key or corrupt data)
        """
        iv, ciphertext = deserialize(src)
        _check_envelope_iv(iv, (CBC_IV_SIZE,), "CBC")
        return _cbc_decrypt(self._block_cipher(key), iv, ciphertext)

    # -------------------------------------------------------------------------
    # GCM
    # -------------------------------------------------------------------------

    @staticmethod
    def _aesgcm(key: SecretKey) -> AESGCM:
        if key.algorithm.upper() != SymmetricAlgorithm.AES.value:
            raise InvalidArgumentError(f"GCM requires an AES key, got {key.algorithm}")
        try:
            return AESGCM(key.encoded)
        except ValueError as e:
            raise InvalidArgumentError(f"Invalid AES key: {e}") from e

    def gcm_encrypt(
        self,
        src: bytes,
        key: SecretKey,
        iv: bytes,
        aad: Optional[bytes] = None,
    ) -> bytes:
        """
        Encrypt with AES-GCM.

        Args:
            src: Plaintext
            key: AES key
            iv: 12 or 16-byte nonce; never reuse one with the same key
            aad: Optional Additional Authenticated Data

        Returns:
            ``serialize(iv) || ciphertext || tag``
        """
        _check_iv(iv, GCM_IV_SIZES, "GCM")
        ciphertext = self._aesgcm(key).encrypt(iv, src, aad)
        logger.debug("GCM encrypted %d bytes (aad: %s)", len(src), aad is not None)
        return serialize(iv) + ciphertext

    def gcm_decrypt(
        self,
        src: bytes,
        key: SecretKey,
        aad: Optional[bytes] = None,
    ) -> bytes:
        """
        Decrypt an AES-GCM envelope.

        Raises:
            MalformedInputError: If the envelope framing or its IV is invalid
            AuthenticationError: If the tag does not verify (tampered data,
                wrong key or AAD mismatch)
        """
        iv, ciphertext = deserialize(src)
        _check_envelope_iv(iv, GCM_IV_SIZES, "GCM")
        try:
            return self._aesgcm(key).decrypt(iv, ciphertext, aad)
        except InvalidTag as e:
            # Generic error to prevent oracle attacks
            raise AuthenticationError("Decryption failed") from e

    # -------------------------------------------------------------------------
    # Password based encryption
    # -------------------------------------------------------------------------

    @staticmethod
    def _pb_transform(key: PbeKey, params: PbeParameters, data: bytes, encrypt: bool) -> bytes:
        if not params.matches(key.pbe_algorithm):
            raise AuthenticationError(f"PBE parameters do not match {key.pbe_algorithm}")
        cipher_algorithm = algorithms.AES(params.derive_key(key.encoded))
        if encrypt:
            return _cbc_encrypt(cipher_algorithm, params.iv, data)
        return _cbc_decrypt(cipher_algorithm, params.iv, data)

    def pb_encrypt(
        self,
        src: bytes,
        password: str,
        salt: bytes,
        iterations: int,
        algorithm: Union[str, PbeAlgorithm, None] = None,
    ) -> bytes:
        """
        Encrypt with a password.

        Args:
            src: Plaintext
            password: Password
            salt: PBKDF2 salt, stored in the envelope
            iterations: PBKDF2 iteration count (>= 1), stored in the envelope
            algorithm: PBE scheme (defaults to the configured scheme)

        Returns:
            ``serialize(pbes2_params) || ciphertext``

        Raises:
            InvalidArgumentError: If the algorithm is not a PBE scheme or the
                iteration count is below 1
        """
        key = generate_pbe_key(password, salt, iterations, algorithm)
        params = new_parameters(key, self._source)
        ciphertext = self._pb_transform(key, params, src, encrypt=True)
        logger.debug("PBE encrypted %d bytes with %s", len(src), key.pbe_algorithm)
        return serialize(params.encode()) + ciphertext

    def pb_decrypt(
        self,
        src: bytes,
        password: str,
        algorithm: Union[str, PbeAlgorithm, None] = None,
    ) -> bytes:
        """
        Decrypt a password based envelope.

        Salt and iteration count are read from the embedded parameters.

        Raises:
            MalformedInputError: If the envelope or its parameters are malformed
            AuthenticationError: If the embedded parameters do not belong to
                the algorithm
            DecryptionError: If the password is wrong or the data is corrupt
        """
        key = placeholder_key(password, algorithm)
        encoded_params, ciphertext = deserialize(src)
        params = PbeParameters.decode(encoded_params)
        return self._pb_transform(key, params, ciphertext, encrypt=False)
