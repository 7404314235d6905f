"""
cow_sdk.order_book.api
======================

Client for the CoW Protocol order-book REST API.

- **GET    /api/v1/trades?owner=…|orderUid=…**: trades of an owner or an order
- **GET    /api/v1/account/{owner}/orders**: orders of an owner (paged)
- **GET    /api/v1/transactions/{txHash}/orders**: orders settled in a transaction
- **GET    /api/v1/orders/{uid}**: one order
- **POST   /api/v1/quote**: price an order
- **POST   /api/v1/orders**: submit a signed order, returns its UID
- **DELETE /api/v1/orders/{uid}**: cancel one order (signed)
- **DELETE /api/v1/orders**: cancel several orders with one signature

Typical usage
-------------
    from cow_sdk.order_book.api import OrderBookApi

    api = OrderBookApi(chain_id=100)
    orders = api.get_orders("0x...")
    api.get_order_link(orders[0]["uid"])

Design notes
------------
* Order records are passed through `transform_order` before being returned.
* Non-2xx answers raise `OrderBookApiError` carrying the HTTP status and the
  API's ``errorType`` / ``description`` when the body has them.
* One request per call: no retries.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Union
from urllib.parse import quote, urljoin

import requests

from ..config import CowConfig, Env, order_book_url
from ..errors import CowError, OrderBookApiError
from ..order_signing.types import SigningResult
from ..version import __version__
from .transform import EnrichedOrder, transform_order, transform_orders

log = logging.getLogger(__name__)

JsonDict = Dict[str, Any]

ORDER_NOT_FOUND = "Order was not found"

# Endpoint-specific messages for well-known statuses.
_GET_ORDER_ERRORS = {404: ORDER_NOT_FOUND}
_CANCEL_ERRORS = {400: "Malformed signature", 401: "Invalid signature", 404: ORDER_NOT_FOUND}
_QUOTE_ERRORS = {400: "Error quoting an order", 403: "Forbidden, your account is deny-listed"}


def _seg(value: str) -> str:
    return quote(str(value), safe="")


class OrderBookApi:
    """
    Parameters
    ----------
    chain_id : int
        1 (mainnet), 5 (goerli) or 100 (gnosis chain).
    env : "prod" | "staging"
        API environment (``api.cow.fi`` or ``barn.api.cow.fi``).
    base_url : str | None
        Override the API root (tests, self-hosted services).
    timeout_s : float
        Default timeout for HTTP operations.
    session : requests.Session | None
        Optional custom session. If not provided, a new session is created.
    """

    def __init__(
        self,
        chain_id: int = 1,
        env: Env = "prod",
        *,
        base_url: Optional[str] = None,
        timeout_s: float = 30.0,
        session: Optional[requests.Session] = None,
        user_agent: Optional[str] = None,
    ) -> None:
        self.chain_id = int(chain_id)
        self.env = env
        self._base_url = (base_url or order_book_url(chain_id, env)).rstrip("/")
        self._timeout = float(timeout_s)
        self._http = session or requests.Session()
        self._headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": user_agent or f"cow-sdk-py/{__version__}",
        }

    @classmethod
    def from_config(
        cls, config: CowConfig, *, session: Optional[requests.Session] = None
    ) -> "OrderBookApi":
        return cls(
            config.chain_id,
            config.env,
            timeout_s=config.request_timeout,
            session=session,
            user_agent=config.user_agent,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    # ---- Helpers -------------------------------------------------------------

    def _abs(self, path: str) -> str:
        return urljoin(self._base_url + "/", path.lstrip("/"))

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        body: Optional[Any] = None,
        errors: Optional[Mapping[int, str]] = None,
        prefer_error_type: bool = False,
    ) -> Any:
        url = self._abs(path)
        log.debug("%s %s", method, url)
        try:
            resp = self._http.request(
                method,
                url,
                params=params,
                json=body,
                headers=self._headers,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise OrderBookApiError(f"{method} {url} failed: {e}", url=url) from e

        if resp.status_code // 100 != 2:
            raise self._error(resp, url, errors or {}, prefer_error_type)
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise OrderBookApiError(
                f"{method} {url}: expected JSON response", http_status=resp.status_code, url=url
            ) from e

    @staticmethod
    def _error(
        resp: requests.Response, url: str, errors: Mapping[int, str], prefer_error_type: bool
    ) -> OrderBookApiError:
        error_type = description = None
        try:
            payload = resp.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            error_type = payload.get("errorType")
            description = payload.get("description")

        if prefer_error_type and error_type:
            message = str(error_type)
        else:
            message = errors.get(resp.status_code) or resp.reason or f"HTTP {resp.status_code}"
        log.debug("%s -> %s %s", url, resp.status_code, error_type or "")
        return OrderBookApiError(
            message,
            http_status=resp.status_code,
            error_type=error_type,
            description=description,
            url=url,
        )

    # ---- Public API ----------------------------------------------------------

    def get_trades(
        self, owner: Optional[str] = None, order_uid: Optional[str] = None
    ) -> List[JsonDict]:
        """Trades of *owner* or of one order (not both)."""
        if owner and order_uid:
            raise CowError("Cannot specify both owner and orderId")
        params: Dict[str, str] = {}
        if owner:
            params["owner"] = owner
        if order_uid:
            params["orderUid"] = order_uid
        return self._request("GET", "/api/v1/trades", params=params) or []

    def get_orders(self, owner: str, offset: int = 0, limit: int = 1000) -> List[EnrichedOrder]:
        orders = self._request(
            "GET",
            f"/api/v1/account/{_seg(owner)}/orders",
            params={"offset": int(offset), "limit": int(limit)},
        )
        return transform_orders(orders or [])

    def get_tx_orders(self, tx_hash: str) -> List[EnrichedOrder]:
        orders = self._request("GET", f"/api/v1/transactions/{_seg(tx_hash)}/orders")
        return transform_orders(orders or [])

    def get_order(self, uid: str) -> EnrichedOrder:
        order = self._request("GET", f"/api/v1/orders/{_seg(uid)}", errors=_GET_ORDER_ERRORS)
        return transform_order(order)

    def get_quote(self, request: Mapping[str, Any]) -> JsonDict:
        return self._request("POST", "/api/v1/quote", body=dict(request), errors=_QUOTE_ERRORS)

    def send_order(self, order_creation: Mapping[str, Any]) -> str:
        """Submit a signed order; returns the order UID assigned by the API."""
        uid = self._request(
            "POST", "/api/v1/orders", body=dict(order_creation), prefer_error_type=True
        )
        if not isinstance(uid, str):
            raise OrderBookApiError("POST /api/v1/orders: expected an order UID string")
        log.debug("order accepted: %s", uid)
        return uid

    def send_signed_order_cancellation(
        self, uid: str, body: Union[SigningResult, Mapping[str, Any]]
    ) -> None:
        """
        Cancel one order. *body* is ``{"signature", "signingScheme"}``, e.g.
        the result of `OrderSigningUtils.sign_order_cancellation`.
        """
        payload = body.to_api_dict() if isinstance(body, SigningResult) else dict(body)
        self._request("DELETE", f"/api/v1/orders/{_seg(uid)}", body=payload, errors=_CANCEL_ERRORS)

    def send_signed_order_cancellations(self, body: Mapping[str, Any]) -> None:
        """Cancel several orders: ``{"orderUids": [...], "signature", "signingScheme"}``."""
        self._request("DELETE", "/api/v1/orders", body=dict(body), errors=_CANCEL_ERRORS)

    def get_order_link(self, uid: str) -> str:
        return f"{self._base_url}/api/v1/orders/{uid}"


__all__ = ["OrderBookApi", "ORDER_NOT_FOUND"]
