"""
The two digests this SDK needs: Keccak-256 for EIP-712 and SHA2-256 for the
multihash inside CIDv0.
"""

from __future__ import annotations

import hashlib

from Crypto.Hash import keccak as _keccak

from .bytes import BytesLike, ensure_bytes


def keccak256(data: BytesLike) -> bytes:
    # Original Keccak padding; hashlib.sha3_256 is the NIST variant.
    return _keccak.new(data=ensure_bytes(data), digest_bits=256).digest()


def keccak256_text(text: str) -> bytes:
    """EIP-712 ``string`` member hash: Keccak-256 of the UTF-8 encoding."""
    return keccak256(text.encode("utf-8"))


def sha256(data: BytesLike) -> bytes:
    return hashlib.sha256(ensure_bytes(data)).digest()


__all__ = ["keccak256", "keccak256_text", "sha256"]
