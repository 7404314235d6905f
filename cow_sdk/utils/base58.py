"""
Base58btc codec (the alphabet used by Bitcoin and IPFS CIDv0).

This module provides a tiny self-contained implementation so the SDK doesn't
depend on external base58 libraries. Leading zero bytes are preserved as
leading '1' characters, so encode/decode are exact inverses.

Typical usage
-------------
>>> encode(bytes.fromhex("00010203"))
'1Ldp'
>>> decode("1Ldp").hex()
'00010203'
"""

from __future__ import annotations

__all__ = [
    "ALPHABET",
    "encode",
    "decode",
    "Base58Error",
]

ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
ALPHABET_REV = {c: i for i, c in enumerate(ALPHABET)}


class Base58Error(ValueError):
    pass


def encode(data: bytes) -> str:
    """Encode bytes to a base58btc string."""
    raw = bytes(data)
    n = int.from_bytes(raw, "big")
    out = []
    while n:
        n, rem = divmod(n, 58)
        out.append(ALPHABET[rem])
    pad = len(raw) - len(raw.lstrip(b"\x00"))
    return "1" * pad + "".join(reversed(out))


def decode(text: str) -> bytes:
    """
    Decode a base58btc string. Raises Base58Error on characters outside the
    alphabet (0, O, I and l are not part of it).
    """
    if not isinstance(text, str):
        raise Base58Error("base58 input must be a string")
    n = 0
    for pos, ch in enumerate(text):
        try:
            n = n * 58 + ALPHABET_REV[ch]
        except KeyError:
            raise Base58Error(f"Non-base58 character {ch!r} at position {pos}") from None
    body = n.to_bytes((n.bit_length() + 7) // 8, "big") if n else b""
    pad = len(text) - len(text.lstrip("1"))
    return b"\x00" * pad + body
