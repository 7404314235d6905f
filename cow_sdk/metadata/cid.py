"""
cow_sdk.metadata.cid
====================

Content addressing for app data documents.

A document is stored on IPFS and referenced on chain by the 32-byte SHA2-256
digest inside its CID. This module converts between the three forms:

    bytes  --address_bytes-->  ContentIdentifier (CIDv0, "Qm...")
    ContentIdentifier  --identifier_to_onchain_hash-->  "0x" + 64 hex chars
    "0x..." --onchain_hash_to_identifier-->  ContentIdentifier

Framing
-------
The digest is not the SHA2-256 of the raw bytes. The bytes are first wrapped
the way ``ipfs add --cid-version 0`` wraps a file:

* the content is cut into 262144-byte chunks
* each chunk becomes a dag-pb node whose ``Data`` is a UnixFS ``File``
  message ``{Type: File, Data: chunk, filesize: len(chunk)}``
* a single chunk is its own root; otherwise chunks are grouped into parents
  of at most 174 links (balanced layout) until one root remains

The CIDv0 is ``base58btc(0x12 || 0x20 || sha256(root_node))``: multihash code
for sha2-256, digest length, digest. The dag-pb codec is implicit in v0.

Going from the on-chain hash back to the CID is a re-framing of the digest
(no access to the original bytes is needed).
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import List, Sequence, Union

from ..errors import MalformedIdentifierError
from ..utils import base58
from ..utils.bytes import from_hex, to_hex, uvarint_decode, uvarint_encode
from ..utils.hash import sha256

# multicodec table entries we need
SHA2_256 = 0x12
DIGEST_LENGTH = 32
DAG_PB = 0x70
RAW = 0x55

CIDV0_TEXT_LENGTH = 46
MULTIHASH_LENGTH = 2 + DIGEST_LENGTH

CHUNK_SIZE = 262144
MAX_CHILDREN_PER_NODE = 174

_UNIXFS_FILE = 2
_CODEC_NAMES = {DAG_PB: "dag-pb", RAW: "raw"}

OnchainHash = str


@dataclass(frozen=True, slots=True)
class ContentIdentifier:
    """A parsed/derived CID. `text` is what you would paste into an IPFS gateway."""

    multihash: bytes
    text: str
    version: int = 0
    codec: str = "dag-pb"
    digest_algorithm: str = "sha2-256"

    @property
    def digest(self) -> bytes:
        return self.multihash[2:]

    @classmethod
    def from_digest(cls, digest: bytes) -> "ContentIdentifier":
        """CIDv0 for a raw 32-byte sha2-256 digest."""
        if len(digest) != DIGEST_LENGTH:
            raise MalformedIdentifierError(
                f"Incorrect length: expected {DIGEST_LENGTH} bytes, got {len(digest)}"
            )
        mh = bytes([SHA2_256, DIGEST_LENGTH]) + bytes(digest)
        return cls(multihash=mh, text=base58.encode(mh))

    def __str__(self) -> str:
        return self.text


# -----------------------------------------------------------------------------
# Protobuf / UnixFS / dag-pb framing
# -----------------------------------------------------------------------------


def _pb_varint(field: int, value: int) -> bytes:
    return uvarint_encode(field << 3) + uvarint_encode(value)


def _pb_bytes(field: int, payload: bytes) -> bytes:
    return uvarint_encode((field << 3) | 2) + uvarint_encode(len(payload)) + payload


def _unixfs_file(data: bytes, filesize: int, blocksizes: Sequence[int] = ()) -> bytes:
    out = _pb_varint(1, _UNIXFS_FILE)
    if data:
        out += _pb_bytes(2, data)
    out += _pb_varint(3, filesize)
    for size in blocksizes:
        out += _pb_varint(4, size)
    return out


@dataclass(frozen=True, slots=True)
class _DagNode:
    multihash: bytes
    tsize: int  # encoded size of this node plus everything below it
    filesize: int  # content bytes below this node


def _dag_pb_node(unixfs: bytes, links: Sequence[_DagNode]) -> bytes:
    # dag-pb canonical form: Links (field 2) first, then Data (field 1).
    out = b""
    for link in links:
        body = _pb_bytes(1, link.multihash) + _pb_bytes(2, b"") + _pb_varint(3, link.tsize)
        out += _pb_bytes(2, body)
    return out + _pb_bytes(1, unixfs)


def _leaf(chunk: bytes) -> _DagNode:
    block = _dag_pb_node(_unixfs_file(chunk, len(chunk)), ())
    return _DagNode(
        multihash=bytes([SHA2_256, DIGEST_LENGTH]) + sha256(block),
        tsize=len(block),
        filesize=len(chunk),
    )


def _parent(children: Sequence[_DagNode]) -> _DagNode:
    blocksizes = [c.filesize for c in children]
    block = _dag_pb_node(_unixfs_file(b"", sum(blocksizes), blocksizes), children)
    return _DagNode(
        multihash=bytes([SHA2_256, DIGEST_LENGTH]) + sha256(block),
        tsize=len(block) + sum(c.tsize for c in children),
        filesize=sum(blocksizes),
    )


def _chunks(data: bytes) -> List[bytes]:
    if not data:
        return [b""]
    return [data[i : i + CHUNK_SIZE] for i in range(0, len(data), CHUNK_SIZE)]


def _root(data: bytes) -> _DagNode:
    nodes = [_leaf(c) for c in _chunks(data)]
    if len(nodes) == 1:
        return nodes[0]
    while True:
        nodes = [
            _parent(nodes[i : i + MAX_CHILDREN_PER_NODE])
            for i in range(0, len(nodes), MAX_CHILDREN_PER_NODE)
        ]
        if len(nodes) == 1:
            return nodes[0]


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------


def address_bytes(data: Union[bytes, bytearray, memoryview]) -> ContentIdentifier:
    """CIDv0 that IPFS assigns to *data* added as a file."""
    root = _root(bytes(data))
    return ContentIdentifier(multihash=root.multihash, text=base58.encode(root.multihash))


def _parse_multihash(mh: bytes, text: str) -> bytes:
    if len(mh) != MULTIHASH_LENGTH:
        raise MalformedIdentifierError(
            f"Incorrect length: expected a {MULTIHASH_LENGTH}-byte multihash, got {len(mh)}",
            value=text,
        )
    if mh[0] != SHA2_256:
        raise MalformedIdentifierError(
            f"Unsupported multihash code 0x{mh[0]:02x} (only sha2-256 is supported)",
            value=text,
        )
    if mh[1] != DIGEST_LENGTH:
        raise MalformedIdentifierError(
            f"Incorrect length: multihash declares a {mh[1]}-byte digest", value=text
        )
    return mh


def _parse_v1(text: str) -> ContentIdentifier:
    body = text[1:].upper()
    try:
        raw = base64.b32decode(body + "=" * (-len(body) % 8))
    except binascii.Error as e:
        raise MalformedIdentifierError(f"Invalid base32 CID: {e}", value=text) from e
    try:
        version, n1 = uvarint_decode(raw)
        codec, n2 = uvarint_decode(raw, offset=n1)
    except ValueError as e:
        raise MalformedIdentifierError(f"Invalid CID header: {e}", value=text) from e
    if version != 1:
        raise MalformedIdentifierError(f"Unsupported CID version {version}", value=text)
    if codec != DAG_PB:
        # a raw block digest has no CIDv0 form
        name = _CODEC_NAMES.get(codec, f"0x{codec:x}")
        raise MalformedIdentifierError(f"Unsupported codec {name} (only dag-pb)", value=text)
    mh = _parse_multihash(raw[n1 + n2 :], text)
    return ContentIdentifier(multihash=mh, text=text, version=1)


def parse_identifier(text: str) -> ContentIdentifier:
    """
    Parse a CID string. CIDv0 (base58btc, "Qm...") and CIDv1 in the default
    base32 multibase ("b...", dag-pb codec) are accepted; the multihash must
    be sha2-256.
    """
    if not isinstance(text, str):
        raise MalformedIdentifierError(f"identifier must be a string, got {type(text).__name__}")
    s = text.strip()
    if s.startswith("b"):
        return _parse_v1(s)
    if len(s) != CIDV0_TEXT_LENGTH:
        raise MalformedIdentifierError(
            f"Incorrect length: expected {CIDV0_TEXT_LENGTH} characters, got {len(s)}",
            value=text,
        )
    try:
        mh = base58.decode(s)
    except base58.Base58Error as e:
        raise MalformedIdentifierError(str(e), value=text) from e
    return ContentIdentifier(multihash=_parse_multihash(mh, text), text=s)


def identifier_to_onchain_hash(identifier: Union[str, ContentIdentifier]) -> OnchainHash:
    """Extract the sha2-256 digest of a CID as a 0x-prefixed 32-byte hex string."""
    cid = identifier if isinstance(identifier, ContentIdentifier) else parse_identifier(identifier)
    return to_hex(cid.digest)


def onchain_hash_to_identifier(onchain_hash: Union[str, bytes]) -> ContentIdentifier:
    """Re-frame a 32-byte on-chain app data hash as its CIDv0."""
    if isinstance(onchain_hash, (bytes, bytearray, memoryview)):
        return ContentIdentifier.from_digest(bytes(onchain_hash))
    if not isinstance(onchain_hash, str):
        raise MalformedIdentifierError(
            f"on-chain hash must be hex or bytes, got {type(onchain_hash).__name__}"
        )
    s = onchain_hash.strip()
    hex_part = s[2:] if s.startswith(("0x", "0X")) else s
    if len(hex_part) != 2 * DIGEST_LENGTH:
        raise MalformedIdentifierError(
            f"Incorrect length: expected {DIGEST_LENGTH} bytes "
            f"({2 * DIGEST_LENGTH} hex chars), got {len(hex_part)} hex chars",
            value=onchain_hash,
        )
    try:
        digest = from_hex(hex_part)
    except ValueError as e:
        raise MalformedIdentifierError(f"Invalid hex: {e}", value=onchain_hash) from e
    return ContentIdentifier.from_digest(digest)


__all__ = [
    "ContentIdentifier",
    "OnchainHash",
    "address_bytes",
    "parse_identifier",
    "identifier_to_onchain_hash",
    "onchain_hash_to_identifier",
    "CHUNK_SIZE",
    "MAX_CHILDREN_PER_NODE",
]
