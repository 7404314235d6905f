"""
Utility helpers for the Python SDK.

Re-exports:
- bytes: hex helpers, 32-byte words and uvarint encode/decode
- hash: SHA2-256 / Keccak-256
- base58: base58btc codec used by CIDv0
"""

from .base58 import decode as base58_decode
from .base58 import encode as base58_encode
from .bytes import (ensure_bytes, from_hex, to_hex, uint_to_word,
                    uvarint_decode, uvarint_encode)
from .hash import keccak256, keccak256_text, sha256

__all__ = [
    # bytes
    "to_hex",
    "from_hex",
    "ensure_bytes",
    "uint_to_word",
    "uvarint_encode",
    "uvarint_decode",
    # hash
    "sha256",
    "keccak256",
    "keccak256_text",
    # base58
    "base58_encode",
    "base58_decode",
]
