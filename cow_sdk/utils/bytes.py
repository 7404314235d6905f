"""
Byte plumbing shared by the CID and EIP-712 code: 0x-hex conversion, ABI
words and the unsigned varints found in protobuf fields and CID prefixes.
"""

from __future__ import annotations

import re
from typing import Tuple, Union

BytesLike = Union[bytes, bytearray, memoryview]

_WORD = 32
_VARINT_MAX_BITS = 64
_HEX_DIGITS = re.compile(r"[0-9a-fA-F]*")


def from_hex(text: str) -> bytes:
    """Decode hex text. A leading ``0x``/``0X`` is optional; case does not matter."""
    if not isinstance(text, str):
        raise TypeError(f"expected hex text, got {type(text).__name__}")
    digits = text[2:] if text[:2] in ("0x", "0X") else text
    # bytes.fromhex would skip embedded whitespace
    if not _HEX_DIGITS.fullmatch(digits):
        raise ValueError(f"not a hex string: {text!r}")
    if len(digits) & 1:
        raise ValueError(f"odd number of hex digits in {text!r}")
    return bytes.fromhex(digits)


def ensure_bytes(value: Union[BytesLike, str]) -> bytes:
    # Strings are always read as hex, never as UTF-8.
    if isinstance(value, str):
        return from_hex(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"cannot interpret {type(value).__name__} as bytes")


def to_hex(raw: BytesLike, prefix: bool = True) -> str:
    """Lowercase hex, ``0x``-prefixed unless *prefix* is False."""
    digits = bytes(raw).hex()
    return "0x" + digits if prefix else digits


def uint_to_word(value: int) -> bytes:
    """Big-endian 32-byte ABI word for a ``uint256``."""
    if value < 0 or value.bit_length() > _WORD * 8:
        raise ValueError(f"{value} is not a uint256")
    return value.to_bytes(_WORD, "big")


def uvarint_encode(value: int) -> bytes:
    """Seven bits per byte, least significant group first, high bit = more follows."""
    if value < 0:
        raise ValueError("varints are unsigned")
    groups = bytearray([value & 0x7F])
    value >>= 7
    while value:
        groups[-1] |= 0x80
        groups.append(value & 0x7F)
        value >>= 7
    return bytes(groups)


def uvarint_decode(data: BytesLike, *, offset: int = 0) -> Tuple[int, int]:
    """
    Read one varint from *data* at *offset*.

    Returns ``(value, n)`` where ``n`` is how many bytes were read. Inputs
    that run out before a terminating byte, or that need more than 64 bits,
    are rejected with ``ValueError``.
    """
    view = memoryview(data)
    value = 0
    for n, byte in enumerate(view[offset:], start=1):
        shift = 7 * (n - 1)
        if shift >= _VARINT_MAX_BITS:
            raise ValueError("varint longer than 64 bits")
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return value, n
    raise ValueError("varint is truncated")


__all__ = [
    "BytesLike",
    "ensure_bytes",
    "to_hex",
    "from_hex",
    "uint_to_word",
    "uvarint_encode",
    "uvarint_decode",
]
