"""
cow_sdk.order_signing.eip712
============================

EIP-712 hashing for GPv2 orders and order cancellations.

This module provides:
- `gpv2_domain(chain_id)` / `domain_separator(domain)` → the "Gnosis Protocol" v2 domain
- `hash_order_struct(order)` → struct hash of an `Order`
- `digest_order(order, chain_id)` → the 32 bytes an ECDSA signer signs
- `digest_cancellation(uid, chain_id)` / `digest_cancellations(uids, chain_id)`
- `compute_order_uid(digest, owner, valid_to)` / `extract_order_uid_params(uid)`
- `order_typed_data(order, chain_id)` → JSON-able payload for ``eth_signTypedData_v4``

Design notes
------------
* digest = keccak256(0x19 || 0x01 || domainSeparator || structHash)
* `string` members (kind, balances) are hashed; a missing receiver encodes
  as the zero address; `bool` is a 0/1 word.
* Every field is validated before anything is hashed; failures raise
  `InvalidOrderFieldsError` naming the field.

Compatibility
-------------
Orders may be `UnsignedOrder` instances or camelCase mappings as returned by
the quote endpoint.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from ..config import SETTLEMENT_CONTRACT_ADDRESS
from ..errors import InvalidOrderFieldsError
from ..utils.bytes import BytesLike, from_hex, to_hex, uint_to_word
from ..utils.hash import keccak256, keccak256_text
from .types import (OrderBalance, OrderKind, TypedDataDomain, UnsignedOrder,
                    as_unsigned_order)

DOMAIN_NAME = "Gnosis Protocol"
DOMAIN_VERSION = "v2"

EIP712_DOMAIN_TYPE = (
    "EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
)
ORDER_TYPE = (
    "Order("
    "address sellToken,"
    "address buyToken,"
    "address receiver,"
    "uint256 sellAmount,"
    "uint256 buyAmount,"
    "uint32 validTo,"
    "bytes32 appData,"
    "uint256 feeAmount,"
    "string kind,"
    "bool partiallyFillable,"
    "string sellTokenBalance,"
    "string buyTokenBalance"
    ")"
)
CANCELLATION_TYPE = "OrderCancellation(bytes orderUid)"
CANCELLATIONS_TYPE = "OrderCancellations(bytes[] orderUids)"

EIP712_DOMAIN_TYPE_HASH = keccak256_text(EIP712_DOMAIN_TYPE)
ORDER_TYPE_HASH = keccak256_text(ORDER_TYPE)
CANCELLATION_TYPE_HASH = keccak256_text(CANCELLATION_TYPE)
CANCELLATIONS_TYPE_HASH = keccak256_text(CANCELLATIONS_TYPE)

ZERO_ADDRESS = "0x" + "00" * 20
ORDER_UID_LENGTH = 56

_UINT256_MAX = (1 << 256) - 1
_UINT32_MAX = (1 << 32) - 1
_DEC_RE = re.compile(r"^[0-9]+$")
_HEX_RE = re.compile(r"^0[xX][0-9a-fA-F]+$")

# (name, EIP-712 type) in Order member order, used for typed-data payloads
ORDER_FIELDS = (
    ("sellToken", "address"),
    ("buyToken", "address"),
    ("receiver", "address"),
    ("sellAmount", "uint256"),
    ("buyAmount", "uint256"),
    ("validTo", "uint32"),
    ("appData", "bytes32"),
    ("feeAmount", "uint256"),
    ("kind", "string"),
    ("partiallyFillable", "bool"),
    ("sellTokenBalance", "string"),
    ("buyTokenBalance", "string"),
)

OrderLike = Union[UnsignedOrder, Mapping[str, Any]]


# -----------------------------------------------------------------------------
# Field validation
# -----------------------------------------------------------------------------


def _uint(value: Any, field: str, maximum: int = _UINT256_MAX) -> int:
    if isinstance(value, bool):
        raise InvalidOrderFieldsError("expected an integer, got a bool", field=field, value=value)
    if isinstance(value, int):
        n = value
    elif isinstance(value, str) and _DEC_RE.match(value.strip()):
        n = int(value.strip(), 10)
    elif isinstance(value, str) and _HEX_RE.match(value.strip()):
        n = int(value.strip(), 16)
    else:
        raise InvalidOrderFieldsError(
            "expected a non-negative integer or decimal string", field=field, value=value
        )
    if n < 0 or n > maximum:
        raise InvalidOrderFieldsError(
            f"value out of range [0, {maximum}]", field=field, value=value
        )
    return n


def _fixed_bytes(value: Any, field: str, length: int) -> bytes:
    if isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
    elif isinstance(value, str):
        try:
            raw = from_hex(value)
        except ValueError:
            raise InvalidOrderFieldsError("invalid hex", field=field, value=value) from None
    else:
        raise InvalidOrderFieldsError(
            f"expected {length} bytes as hex or bytes", field=field, value=value
        )
    if len(raw) != length:
        raise InvalidOrderFieldsError(
            f"expected {length} bytes, got {len(raw)}", field=field, value=value
        )
    return raw


def _address(value: Any, field: str) -> bytes:
    return _fixed_bytes(value, field, 20)


def _choice(value: Any, field: str, enum: type) -> str:
    try:
        return enum(value).value
    except ValueError:
        allowed = ", ".join(m.value for m in enum)
        raise InvalidOrderFieldsError(
            f"expected one of: {allowed}", field=field, value=value
        ) from None


@dataclass(frozen=True, slots=True)
class _EncodedOrder:
    sell_token: bytes
    buy_token: bytes
    receiver: bytes
    sell_amount: int
    buy_amount: int
    valid_to: int
    app_data: bytes
    fee_amount: int
    kind: str
    partially_fillable: bool
    sell_token_balance: str
    buy_token_balance: str


def _normalize(order: OrderLike) -> _EncodedOrder:
    o = as_unsigned_order(order)
    if not isinstance(o.partially_fillable, bool):
        raise InvalidOrderFieldsError(
            "expected a bool", field="partiallyFillable", value=o.partially_fillable
        )
    return _EncodedOrder(
        sell_token=_address(o.sell_token, "sellToken"),
        buy_token=_address(o.buy_token, "buyToken"),
        receiver=_address(o.receiver if o.receiver is not None else ZERO_ADDRESS, "receiver"),
        sell_amount=_uint(o.sell_amount, "sellAmount"),
        buy_amount=_uint(o.buy_amount, "buyAmount"),
        valid_to=_uint(o.valid_to, "validTo", _UINT32_MAX),
        app_data=_fixed_bytes(o.app_data, "appData", 32),
        fee_amount=_uint(o.fee_amount, "feeAmount"),
        kind=_choice(o.kind, "kind", OrderKind),
        partially_fillable=o.partially_fillable,
        sell_token_balance=_choice(o.sell_token_balance, "sellTokenBalance", OrderBalance),
        buy_token_balance=_choice(o.buy_token_balance, "buyTokenBalance", OrderBalance),
    )


# -----------------------------------------------------------------------------
# Domain
# -----------------------------------------------------------------------------


def gpv2_domain(chain_id: int, verifying_contract: Optional[str] = None) -> TypedDataDomain:
    """The GPv2 signing domain for *chain_id*."""
    return TypedDataDomain(
        name=DOMAIN_NAME,
        version=DOMAIN_VERSION,
        chain_id=_uint(chain_id, "chainId"),
        verifying_contract=verifying_contract or SETTLEMENT_CONTRACT_ADDRESS,
    )


def domain_separator(
    domain: Union[TypedDataDomain, int], verifying_contract: Optional[str] = None
) -> bytes:
    """EIP-712 ``hashStruct(EIP712Domain)`` for a domain or a chain id."""
    d = domain if isinstance(domain, TypedDataDomain) else gpv2_domain(domain, verifying_contract)
    return keccak256(
        EIP712_DOMAIN_TYPE_HASH
        + keccak256_text(d.name)
        + keccak256_text(d.version)
        + uint_to_word(d.chain_id)
        + _address(d.verifying_contract, "verifyingContract").rjust(32, b"\x00")
    )


def _typed_digest(separator: bytes, struct_hash: bytes) -> bytes:
    return keccak256(b"\x19\x01" + separator + struct_hash)


# -----------------------------------------------------------------------------
# Orders
# -----------------------------------------------------------------------------


def hash_order_struct(order: OrderLike) -> bytes:
    """EIP-712 ``hashStruct(Order)``."""
    e = _normalize(order)
    return keccak256(
        ORDER_TYPE_HASH
        + e.sell_token.rjust(32, b"\x00")
        + e.buy_token.rjust(32, b"\x00")
        + e.receiver.rjust(32, b"\x00")
        + uint_to_word(e.sell_amount)
        + uint_to_word(e.buy_amount)
        + uint_to_word(e.valid_to)
        + e.app_data
        + uint_to_word(e.fee_amount)
        + keccak256_text(e.kind)
        + uint_to_word(1 if e.partially_fillable else 0)
        + keccak256_text(e.sell_token_balance)
        + keccak256_text(e.buy_token_balance)
    )


def digest_order(
    order: OrderLike, chain_id: int, verifying_contract: Optional[str] = None
) -> bytes:
    """The 32-byte digest that identifies *order* on *chain_id* and gets signed."""
    return _typed_digest(domain_separator(chain_id, verifying_contract), hash_order_struct(order))


def order_typed_data(
    order: OrderLike, chain_id: int, verifying_contract: Optional[str] = None
) -> Dict[str, Any]:
    """
    Full EIP-712 payload for wallets that sign typed data themselves
    (``eth_signTypedData_v4``). Amounts are decimal strings.
    """
    e = _normalize(order)
    return {
        "types": {
            "EIP712Domain": [
                {"name": "name", "type": "string"},
                {"name": "version", "type": "string"},
                {"name": "chainId", "type": "uint256"},
                {"name": "verifyingContract", "type": "address"},
            ],
            "Order": [{"name": n, "type": t} for n, t in ORDER_FIELDS],
        },
        "primaryType": "Order",
        "domain": gpv2_domain(chain_id, verifying_contract).to_dict(),
        "message": {
            "sellToken": to_hex(e.sell_token),
            "buyToken": to_hex(e.buy_token),
            "receiver": to_hex(e.receiver),
            "sellAmount": str(e.sell_amount),
            "buyAmount": str(e.buy_amount),
            "validTo": e.valid_to,
            "appData": to_hex(e.app_data),
            "feeAmount": str(e.fee_amount),
            "kind": e.kind,
            "partiallyFillable": e.partially_fillable,
            "sellTokenBalance": e.sell_token_balance,
            "buyTokenBalance": e.buy_token_balance,
        },
    }


# -----------------------------------------------------------------------------
# Cancellations
# -----------------------------------------------------------------------------


def _uid_bytes(uid: Union[str, BytesLike], field: str = "orderUid") -> bytes:
    return _fixed_bytes(uid, field, ORDER_UID_LENGTH)


def digest_cancellation(
    order_uid: Union[str, BytesLike], chain_id: int, verifying_contract: Optional[str] = None
) -> bytes:
    struct_hash = keccak256(CANCELLATION_TYPE_HASH + keccak256(_uid_bytes(order_uid)))
    return _typed_digest(domain_separator(chain_id, verifying_contract), struct_hash)


def digest_cancellations(
    order_uids: Iterable[Union[str, BytesLike]],
    chain_id: int,
    verifying_contract: Optional[str] = None,
) -> bytes:
    """Digest for cancelling several orders with one signature (``bytes[]`` member)."""
    if isinstance(order_uids, (str, bytes, bytearray, memoryview)):
        raise InvalidOrderFieldsError("expected a list of order uids", field="orderUids")
    hashed: List[bytes] = [
        keccak256(_uid_bytes(uid, f"orderUids[{i}]")) for i, uid in enumerate(order_uids)
    ]
    struct_hash = keccak256(CANCELLATIONS_TYPE_HASH + keccak256(b"".join(hashed)))
    return _typed_digest(domain_separator(chain_id, verifying_contract), struct_hash)


# -----------------------------------------------------------------------------
# Order UIDs
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class OrderUidParams:
    order_digest: str
    owner: str
    valid_to: int


def compute_order_uid(digest: Union[str, BytesLike], owner: str, valid_to: int) -> str:
    """
    ``orderDigest (32) || owner (20) || validTo (uint32 big-endian)``, 56 bytes,
    as returned by the order book when an order is accepted.
    """
    raw = (
        _fixed_bytes(digest, "orderDigest", 32)
        + _address(owner, "owner")
        + _uint(valid_to, "validTo", _UINT32_MAX).to_bytes(4, "big")
    )
    return to_hex(raw)


def extract_order_uid_params(order_uid: Union[str, BytesLike]) -> OrderUidParams:
    raw = _uid_bytes(order_uid)
    return OrderUidParams(
        order_digest=to_hex(raw[:32]),
        owner=to_hex(raw[32:52]),
        valid_to=int.from_bytes(raw[52:], "big"),
    )


__all__ = [
    "DOMAIN_NAME",
    "DOMAIN_VERSION",
    "ORDER_TYPE",
    "ORDER_TYPE_HASH",
    "CANCELLATION_TYPE",
    "CANCELLATION_TYPE_HASH",
    "CANCELLATIONS_TYPE",
    "CANCELLATIONS_TYPE_HASH",
    "ZERO_ADDRESS",
    "ORDER_UID_LENGTH",
    "OrderLike",
    "OrderUidParams",
    "gpv2_domain",
    "domain_separator",
    "hash_order_struct",
    "digest_order",
    "order_typed_data",
    "digest_cancellation",
    "digest_cancellations",
    "compute_order_uid",
    "extract_order_uid_params",
]
