"""
Order signing types.

- `UnsignedOrder`: the order fields that are EIP-712 signed. Build it
  directly (snake_case) or from the camelCase wire shape with `from_dict`.
- `SigningScheme` / `SigningResult`: what a signature is and how the
  order-book API expects to receive it.
- `TypedDataDomain`: the EIP-712 domain (name, version, chain, contract).

Nothing here performs hashing or I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, TypedDict, Union

from ..errors import InvalidOrderFieldsError
from ..utils.bytes import to_hex

Address = str  # 0x-prefixed, 20 bytes
UID = str  # 0x-prefixed, 56 bytes
Amount = Union[int, str]  # uint256, decimal string on the wire


class OrderKind(str, Enum):
    SELL = "sell"
    BUY = "buy"


class OrderBalance(str, Enum):
    ERC20 = "erc20"
    EXTERNAL = "external"
    INTERNAL = "internal"


class SigningScheme(str, Enum):
    EIP712 = "eip712"
    ETHSIGN = "ethsign"
    PRESIGN = "presign"


ECDSA_SCHEMES = (SigningScheme.EIP712, SigningScheme.ETHSIGN)


class UnsignedOrderDict(TypedDict, total=False):
    sellToken: Address
    buyToken: Address
    receiver: Optional[Address]
    sellAmount: str
    buyAmount: str
    validTo: int
    appData: str
    feeAmount: str
    kind: str
    partiallyFillable: bool
    sellTokenBalance: str
    buyTokenBalance: str


@dataclass(frozen=True, slots=True)
class TypedDataDomain:
    name: str
    version: str
    chain_id: int
    verifying_contract: Address

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "chainId": int(self.chain_id),
            "verifyingContract": self.verifying_contract,
        }


_REQUIRED = (
    ("sellToken", "sell_token"),
    ("buyToken", "buy_token"),
    ("sellAmount", "sell_amount"),
    ("buyAmount", "buy_amount"),
    ("validTo", "valid_to"),
    ("appData", "app_data"),
    ("feeAmount", "fee_amount"),
    ("kind", "kind"),
)


@dataclass(frozen=True, slots=True)
class UnsignedOrder:
    sell_token: Address
    buy_token: Address
    sell_amount: Amount
    buy_amount: Amount
    valid_to: int
    app_data: str
    fee_amount: Amount
    kind: Union[OrderKind, str]
    partially_fillable: bool = False
    receiver: Optional[Address] = None
    sell_token_balance: Union[OrderBalance, str] = OrderBalance.ERC20
    buy_token_balance: Union[OrderBalance, str] = OrderBalance.ERC20

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "UnsignedOrder":
        """Build from the camelCase wire shape; snake_case keys are accepted too."""
        values: Dict[str, Any] = {}
        for camel, snake in _REQUIRED:
            if camel in d and d[camel] is not None:
                values[snake] = d[camel]
            elif snake in d and d[snake] is not None:
                values[snake] = d[snake]
            else:
                raise InvalidOrderFieldsError("missing required order field", field=camel)

        def _opt(camel: str, snake: str, default: Any) -> Any:
            v = d.get(camel, d.get(snake))
            return default if v is None else v

        return cls(
            **values,
            partially_fillable=_opt("partiallyFillable", "partially_fillable", False),
            receiver=_opt("receiver", "receiver", None),
            sell_token_balance=_opt("sellTokenBalance", "sell_token_balance", OrderBalance.ERC20),
            buy_token_balance=_opt("buyTokenBalance", "buy_token_balance", OrderBalance.ERC20),
        )

    def to_dict(self) -> UnsignedOrderDict:
        return {
            "sellToken": self.sell_token,
            "buyToken": self.buy_token,
            "receiver": self.receiver,
            "sellAmount": str(self.sell_amount),
            "buyAmount": str(self.buy_amount),
            "validTo": int(self.valid_to),
            "appData": self.app_data,
            "feeAmount": str(self.fee_amount),
            "kind": OrderKind(self.kind).value,
            "partiallyFillable": self.partially_fillable,
            "sellTokenBalance": OrderBalance(self.sell_token_balance).value,
            "buyTokenBalance": OrderBalance(self.buy_token_balance).value,
        }


@dataclass(frozen=True, slots=True)
class SigningResult:
    """
    Outcome of signing. `signature` is None for `presign`: the owner must
    then call ``setPreSignature(uid, true)`` on the settlement contract.
    """

    scheme: SigningScheme
    signature: Optional[bytes] = None

    @property
    def is_presign(self) -> bool:
        return self.scheme is SigningScheme.PRESIGN

    def to_api_dict(self) -> Dict[str, Any]:
        return {
            "signature": to_hex(self.signature) if self.signature is not None else None,
            "signingScheme": self.scheme.value,
        }


def as_unsigned_order(order: Union[UnsignedOrder, Mapping[str, Any]]) -> UnsignedOrder:
    if isinstance(order, UnsignedOrder):
        return order
    if isinstance(order, Mapping):
        return UnsignedOrder.from_dict(order)
    raise InvalidOrderFieldsError(
        f"expected UnsignedOrder or mapping, got {type(order).__name__}"
    )


__all__ = [
    "Address",
    "UID",
    "Amount",
    "OrderKind",
    "OrderBalance",
    "SigningScheme",
    "ECDSA_SCHEMES",
    "UnsignedOrderDict",
    "TypedDataDomain",
    "UnsignedOrder",
    "SigningResult",
    "as_unsigned_order",
]
