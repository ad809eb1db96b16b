"""
Length-prefixed envelope framing.

Every symmetric operation emits ``u32_be(len(params)) || params || payload`` so
the ciphertext carries the non-secret parameters (IV, PBE parameters) needed
to decrypt it:

- CBC: params = 16-byte IV
- GCM: params = 12 or 16-byte IV, payload = ciphertext || 16-byte tag
- PBE: params = DER encoded PBES2 parameters
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Tuple

from .errors import InvalidArgumentError, MalformedInputError

LENGTH_PREFIX_SIZE: int = 4
_MAX_LENGTH: int = 0xFFFFFFFF
_LENGTH = struct.Struct(">I")


def int_to_bytes(value: int) -> bytes:
    """Encode a 32-bit unsigned integer big endian."""
    if not 0 <= value <= _MAX_LENGTH:
        raise InvalidArgumentError(f"Value out of u32 range: {value}")
    return _LENGTH.pack(value)


def serialize(params: bytes) -> bytes:
    """Prefix ``params`` with its 4-byte big-endian length."""
    return int_to_bytes(len(params)) + params


def deserialize(framed: bytes) -> Tuple[bytes, bytes]:
    """
    Split framed bytes into parameters and payload.

    Args:
        framed: Envelope bytes

    Returns:
        (params, payload) tuple; payload is every byte after the params

    Raises:
        MalformedInputError: If the prefix is missing or the declared length
            exceeds the available bytes
    """
    if len(framed) < LENGTH_PREFIX_SIZE:
        raise MalformedInputError(
            f"Envelope too small: expected at least {LENGTH_PREFIX_SIZE} bytes, got {len(framed)}"
        )
    (length,) = _LENGTH.unpack_from(framed)
    end = LENGTH_PREFIX_SIZE + length
    if end > len(framed):
        raise MalformedInputError(
            f"Envelope declares {length} parameter bytes, only {len(framed) - LENGTH_PREFIX_SIZE} available"
        )
    return bytes(framed[LENGTH_PREFIX_SIZE:end]), bytes(framed[end:])


@dataclass(frozen=True)
class Envelope:
    """Parameters and payload of a framed ciphertext."""

    params: bytes
    payload: bytes

    def to_bytes(self) -> bytes:
        return serialize(self.params) + self.payload

    @classmethod
    def from_bytes(cls, framed: bytes) -> Envelope:
        """
        Parse framed bytes.

        Raises:
            MalformedInputError: If the framing is invalid
        """
        params, payload = deserialize(framed)
        return cls(params=params, payload=payload)
