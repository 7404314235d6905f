import pytest

from cow_sdk.config import CowConfig
from cow_sdk.errors import CowError, OrderBookApiError
from cow_sdk.order_book.api import OrderBookApi
from cow_sdk.order_book.transform import BUY_ETH_ADDRESS
from cow_sdk.order_signing.types import SigningResult, SigningScheme

UID = "0x59920c85de0162e9e55df8d396e75f3b6b7c2dfdb535f03e5c807731c31585eaff714b8b0e2700303ec912bd40496c3997ceea2b616d6710"
OWNER = "0xff714b8b0e2700303ec912bd40496c3997ceea2b"
TX = "0xd51f28edffcaaa76be4a22f6375ad289272c037f3cc072345676e88d92ced8b5"

ORDER = {
    "uid": UID,
    "owner": OWNER,
    "sellToken": "0x6810e776880c02933d47db1b9fc05908e5386b96",
    "validTo": 1634810800,
    "executedFeeAmount": "3",
    "executedSurplusFee": "5",
}

NOT_FOUND = {"errorType": "NotFound", "description": "You've passed an invalid URL"}


def _api(session, chain_id=1, env="prod"):
    return OrderBookApi(chain_id, env, session=session, timeout_s=7)


@pytest.mark.parametrize(
    "chain_id, env, base",
    [
        (1, "prod", "https://api.cow.fi/mainnet"),
        (5, "prod", "https://api.cow.fi/goerli"),
        (100, "prod", "https://api.cow.fi/xdai"),
        (1, "staging", "https://barn.api.cow.fi/mainnet"),
        (100, "staging", "https://barn.api.cow.fi/xdai"),
    ],
)
def test_base_urls(session, chain_id, env, base):
    api = _api(session, chain_id, env)
    assert api.base_url == base
    assert api.get_order_link(UID) == f"{base}/api/v1/orders/{UID}"


def test_unsupported_chain(session):
    with pytest.raises(ValueError):
        _api(session, chain_id=137)


def test_get_order(session):
    session.reply(200, ORDER)
    order = _api(session).get_order(UID)

    method, url, kw = session.last
    assert method == "GET"
    assert url == f"https://api.cow.fi/mainnet/api/v1/orders/{UID}"
    assert kw["timeout"] == 7.0
    assert order["totalFee"] == "5"


def test_get_order_not_found(session):
    session.reply(404, NOT_FOUND, reason="Not Found")
    with pytest.raises(OrderBookApiError) as ei:
        _api(session).get_order(UID)
    err = ei.value
    assert err.message == "Order was not found"
    assert err.http_status == 404
    assert err.error_type == "NotFound"
    assert err.description == "You've passed an invalid URL"


def test_get_orders_pages_and_transforms(session):
    ethflow = {**ORDER, "onchainUser": OWNER, "ethflowData": {"userValidTo": 1}}
    session.reply(200, [ORDER, ethflow])
    orders = _api(session, 100).get_orders(OWNER, offset=10, limit=5)

    method, url, kw = session.last
    assert url == f"https://api.cow.fi/xdai/api/v1/account/{OWNER}/orders"
    assert kw["params"] == {"offset": 10, "limit": 5}
    assert [o["totalFee"] for o in orders] == ["5", "5"]
    assert orders[1]["sellToken"] == BUY_ETH_ADDRESS


def test_get_orders_default_paging(session):
    session.reply(200, [])
    assert _api(session).get_orders(OWNER) == []
    assert session.last[2]["params"] == {"offset": 0, "limit": 1000}


def test_get_orders_error_uses_reason(session):
    session.reply(404, NOT_FOUND, reason="Not Found")
    with pytest.raises(OrderBookApiError) as ei:
        _api(session).get_orders(OWNER)
    assert ei.value.message == "Not Found"


def test_get_tx_orders(session):
    session.reply(200, [ORDER])
    orders = _api(session).get_tx_orders(TX)
    assert session.last[1] == f"https://api.cow.fi/mainnet/api/v1/transactions/{TX}/orders"
    assert orders[0]["totalFee"] == "5"


def test_get_trades_by_owner_or_order(session):
    session.reply(200, [{"orderUid": UID}]).reply(200, [])
    api = _api(session)

    assert api.get_trades(owner=OWNER) == [{"orderUid": UID}]
    assert session.last[1] == "https://api.cow.fi/mainnet/api/v1/trades"
    assert session.last[2]["params"] == {"owner": OWNER}

    assert api.get_trades(order_uid=UID) == []
    assert session.last[2]["params"] == {"orderUid": UID}


def test_get_trades_rejects_both_filters(session):
    with pytest.raises(CowError):
        _api(session).get_trades(owner=OWNER, order_uid=UID)
    assert session.calls == []


def test_get_quote(session):
    quote = {"quote": {"sellAmount": "1", "buyAmount": "2"}, "expiration": "2030-01-01T00:00:00Z"}
    session.reply(200, quote)
    request = {"sellToken": "0x1", "buyToken": "0x2", "from": OWNER, "kind": "sell"}
    assert _api(session).get_quote(request) == quote
    method, url, kw = session.last
    assert (method, url) == ("POST", "https://api.cow.fi/mainnet/api/v1/quote")
    assert kw["json"] == request


def test_send_order_returns_uid(session):
    session.reply(201, UID)
    body = {"sellToken": "0x1", "signature": "0x" + "11" * 65, "signingScheme": "eip712"}
    assert _api(session).send_order(body) == UID
    assert session.last[:2] == ("POST", "https://api.cow.fi/mainnet/api/v1/orders")
    assert session.last[2]["json"] == body


def test_send_order_error_type_is_the_message(session):
    session.reply(400, {"errorType": "DuplicateOrder", "description": "order already exists"})
    with pytest.raises(OrderBookApiError) as ei:
        _api(session).send_order({})
    assert ei.value.message == "DuplicateOrder"
    assert ei.value.description == "order already exists"


def test_send_signed_order_cancellation(session):
    session.reply(200, "Cancelled")
    result = SigningResult(SigningScheme.EIP712, b"\x11" * 65)
    assert _api(session).send_signed_order_cancellation(UID, result) is None

    method, url, kw = session.last
    assert (method, url) == ("DELETE", f"https://api.cow.fi/mainnet/api/v1/orders/{UID}")
    assert kw["json"] == {"signature": "0x" + "11" * 65, "signingScheme": "eip712"}


def test_send_signed_order_cancellation_not_found(session):
    session.reply(404, NOT_FOUND)
    with pytest.raises(OrderBookApiError) as ei:
        _api(session).send_signed_order_cancellation(UID, {"signature": "0x", "signingScheme": "eip712"})
    assert ei.value.message == "Order was not found"


def test_send_signed_order_cancellations(session):
    session.reply(200, "Cancelled")
    body = {"orderUids": [UID], "signature": "0x" + "22" * 65, "signingScheme": "ethsign"}
    _api(session).send_signed_order_cancellations(body)
    method, url, kw = session.last
    assert (method, url) == ("DELETE", "https://api.cow.fi/mainnet/api/v1/orders")
    assert kw["json"] == body


def test_from_config(session):
    config = CowConfig(chain_id=100, env="staging", request_timeout=3.0, user_agent="ua/1")
    session.reply(200, ORDER)
    api = OrderBookApi.from_config(config, session=session)
    api.get_order(UID)
    _, url, kw = session.last
    assert url.startswith("https://barn.api.cow.fi/xdai/")
    assert kw["timeout"] == 3.0
    assert kw["headers"]["User-Agent"] == "ua/1"
