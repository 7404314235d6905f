"""
Order book: REST client for the CoW Protocol API and normalization of the
order records it returns.
"""

from .api import ORDER_NOT_FOUND, OrderBookApi
from .transform import (BUY_ETH_ADDRESS, EnrichedOrder, transform_order,
                        transform_orders)

__all__ = [
    "OrderBookApi",
    "ORDER_NOT_FOUND",
    "BUY_ETH_ADDRESS",
    "EnrichedOrder",
    "transform_order",
    "transform_orders",
]
