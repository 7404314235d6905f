"""
Normalization of order records returned by the order book.

`transform_order` adds ``totalFee`` and rewrites native-token ("eth-flow")
orders so they read like the order the user actually placed:

* ``owner``     := ``onchainUser`` (the user, not the eth-flow contract)
* ``validTo``   := ``ethflowData.userValidTo``
* ``sellToken`` := `BUY_ETH_ADDRESS`

Regular orders only gain ``totalFee``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, TypedDict

BUY_ETH_ADDRESS = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"


class EthflowData(TypedDict, total=False):
    userValidTo: int
    isRefunded: bool


class Order(TypedDict, total=False):
    uid: str
    owner: str
    sellToken: str
    buyToken: str
    receiver: Optional[str]
    sellAmount: str
    buyAmount: str
    validTo: int
    appData: str
    feeAmount: str
    kind: str
    partiallyFillable: bool
    sellTokenBalance: str
    buyTokenBalance: str
    signingScheme: str
    signature: str
    creationDate: str
    status: str
    executedSellAmount: str
    executedBuyAmount: str
    executedFeeAmount: str
    executedSurplusFee: Optional[str]
    invalidated: bool
    onchainUser: str
    ethflowData: EthflowData


class EnrichedOrder(Order, total=False):
    totalFee: Optional[str]


def _with_total_fee(order: Dict[str, Any]) -> Dict[str, Any]:
    # executedSurplusFee is the fee actually charged, whatever fee was signed.
    surplus_fee = order.get("executedSurplusFee")
    order["totalFee"] = surplus_fee if surplus_fee is not None else order.get("executedFeeAmount")
    return order


def _with_ethflow_fields(order: Dict[str, Any]) -> Dict[str, Any]:
    ethflow = order.get("ethflowData")
    if not ethflow:
        return order
    order["owner"] = order.get("onchainUser") or order.get("owner")
    if ethflow.get("userValidTo") is not None:
        order["validTo"] = ethflow["userValidTo"]
    order["sellToken"] = BUY_ETH_ADDRESS
    return order


def transform_order(order: Mapping[str, Any]) -> EnrichedOrder:
    """Return an enriched copy of *order*; the input is left untouched."""
    return _with_ethflow_fields(_with_total_fee(dict(order)))  # type: ignore[return-value]


def transform_orders(orders: List[Mapping[str, Any]]) -> List[EnrichedOrder]:
    return [transform_order(o) for o in orders]


__all__ = [
    "BUY_ETH_ADDRESS",
    "EthflowData",
    "Order",
    "EnrichedOrder",
    "transform_order",
    "transform_orders",
]
