"""
Text encodings for binary data and keys: hex, Base64 and PEM.
"""

from __future__ import annotations

import base64
import binascii
import os
import re
from typing import Union

from .errors import MalformedInputError
from .keys import PrivateKey, PublicKey

PEM_LINE_LENGTH: int = 64

_HEX_PATTERN = re.compile(r"([a-fA-F0-9]{2} ?)*")
_PEM_PATTERN = re.compile(
    r"-----BEGIN .*-----(\n|\r|\r\n)"
    r"([0-9a-zA-Z+/=]{64}(\n|\r|\r\n))*"
    r"([0-9a-zA-Z+/=]{1,63}(\n|\r|\r\n))?"
    r"-----END .*-----(\n|\r|\r\n)?"
)
_PEM_MARKER = re.compile(r"-----.*-----")
_LINE_BREAK = re.compile(r"\r\n|\n|\r")


def to_hex(data: bytes) -> str:
    """Lowercase hex string without separators."""
    return data.hex()


def hex_to_bytes(hex_string: str) -> bytes:
    """
    Decode hex pairs, optionally separated by single spaces.

    Raises:
        MalformedInputError: If the string is not made of hex pairs
    """
    if not _HEX_PATTERN.fullmatch(hex_string):
        raise MalformedInputError(f"Invalid hex string: {hex_string[:32]!r}")
    return bytes.fromhex(hex_string.replace(" ", ""))


def to_base64(data: bytes) -> str:
    """Encode as base64 string."""
    return base64.standard_b64encode(data).decode("ascii")


def base64_enc(src: Union[str, bytes]) -> bytes:
    """Base64-encode text (UTF-8) or bytes, returning the encoded bytes."""
    if isinstance(src, str):
        src = src.encode("utf-8")
    return base64.standard_b64encode(src)


def base64_dec(src: Union[str, bytes]) -> bytes:
    """
    Decode base64 text or bytes.

    Raises:
        MalformedInputError: If decoding fails
    """
    if isinstance(src, str):
        src = src.encode("ascii")
    try:
        return base64.standard_b64decode(src)
    except (binascii.Error, ValueError) as e:
        raise MalformedInputError(f"Base64 decode error: {e}") from e


def pem_encode(der: bytes, label: str) -> str:
    """
    Wrap DER bytes in PEM armor.

    Args:
        der: DER encoded structure
        label: PEM label, e.g. ``PUBLIC KEY``

    Returns:
        PEM text using the host line separator, terminated by a separator
    """
    body = to_base64(der)
    lines = [f"-----BEGIN {label}-----"]
    lines.extend(body[i : i + PEM_LINE_LENGTH] for i in range(0, len(body), PEM_LINE_LENGTH))
    lines.append(f"-----END {label}-----")
    return os.linesep.join(lines) + os.linesep


def to_pem(key: Union[PublicKey, PrivateKey]) -> str:
    """
    Encode a PublicKey or PrivateKey as PEM.

    The label follows the key type: ``PUBLIC KEY`` (X.509) or
    ``PRIVATE KEY`` (PKCS#8).
    """
    if isinstance(key, PublicKey):
        return pem_encode(key.encoded, "PUBLIC KEY")
    if isinstance(key, PrivateKey):
        return pem_encode(key.encoded, "PRIVATE KEY")
    raise MalformedInputError(f"Cannot PEM encode {type(key).__name__}")


def pem_to_bytes(pem: str) -> bytes:
    """
    Extract the DER bytes from PEM text.

    Raises:
        MalformedInputError: If the text is not a single PEM block
    """
    if not _PEM_PATTERN.fullmatch(pem):
        raise MalformedInputError("Invalid PEM structure")
    return base64_dec(_LINE_BREAK.sub("", _PEM_MARKER.sub("", pem)))
