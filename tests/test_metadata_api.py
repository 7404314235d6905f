import pytest

from cow_sdk.config import IpfsConfig
from cow_sdk.errors import (AppDataDecodeError, EncodingError,
                            HashDerivationError, IpfsError)
from cow_sdk.metadata.api import IpfsHashInfo, MetadataApi
from cow_sdk.metadata.ipfs import IpfsClient

EMPTY_DOC = {"version": "0.5.0", "appCode": "CowSwap", "metadata": {}}
EMPTY_DOC_CID = "QmYNdAx6V62cUiHGBujwzeaB5FumAKCmPVeaV8DUvrU97F"
EMPTY_DOC_HASH = "0x95164af4bca0ce893339efb678065e705e16e2dc4e6d9c22fcb9d6e54efab8b2"


class FakeIpfs:
    """In-memory stand-in for `IpfsClient`."""

    def __init__(self, store=None, fail=None):
        self.store = dict(store or {})
        self.fail = fail
        self.puts = []

    def put(self, data, name="appData"):
        self.puts.append((data, name))
        if self.fail:
            raise self.fail
        return EMPTY_DOC_CID

    def get(self, cid):
        if self.fail:
            raise self.fail
        return self.store[str(cid)]


def test_generate_app_data_doc_default():
    assert MetadataApi().generate_app_data_doc() == EMPTY_DOC


def test_generate_uses_configured_app_code():
    doc = MetadataApi(app_code="MyApp").generate_app_data_doc(
        {"environment": "staging"}, {"quoteParams": {"slippageBips": "50"}}
    )
    assert doc["appCode"] == "MyApp"
    assert doc["environment"] == "staging"
    assert doc["metadata"]["quote"] == {"slippageBips": "50", "version": "0.2.0"}


def test_calculate_app_data_hash():
    info = MetadataApi().calculate_app_data_hash(EMPTY_DOC)
    assert info == IpfsHashInfo(cid_v0=EMPTY_DOC_CID, app_data_hash=EMPTY_DOC_HASH)


def test_calculate_app_data_hash_wraps_errors():
    with pytest.raises(HashDerivationError) as ei:
        MetadataApi().calculate_app_data_hash({"metadata": {"slippage": 0.5}})
    assert str(ei.value).startswith("Failed to calculate appDataHash")
    # wrapped exactly once, around the encoder failure
    assert isinstance(ei.value.cause, EncodingError)


def test_hex_cid_conversions():
    api = MetadataApi()
    assert api.cid_to_app_data_hex(EMPTY_DOC_CID) == EMPTY_DOC_HASH
    assert api.app_data_hex_to_cid(EMPTY_DOC_HASH) == EMPTY_DOC_CID


def test_decode_app_data():
    ipfs = FakeIpfs({EMPTY_DOC_CID: b'{"version":"0.5.0","appCode":"CowSwap","metadata":{}}'})
    assert MetadataApi(ipfs).decode_app_data(EMPTY_DOC_HASH) == EMPTY_DOC


def test_decode_app_data_wraps_errors():
    api = MetadataApi(FakeIpfs(fail=IpfsError("boom", http_status=500)))
    with pytest.raises(AppDataDecodeError) as ei:
        api.decode_app_data(EMPTY_DOC_HASH)
    assert str(ei.value).startswith("Error decoding AppData:")
    assert isinstance(ei.value.cause, IpfsError)


def test_decode_app_data_bad_hash():
    with pytest.raises(AppDataDecodeError) as ei:
        MetadataApi(FakeIpfs()).decode_app_data("0x1234")
    assert "Incorrect length" in str(ei.value)


def test_upload_returns_app_data_hash():
    ipfs = FakeIpfs()
    assert MetadataApi(ipfs).upload_metadata_doc_to_ipfs(EMPTY_DOC) == EMPTY_DOC_HASH
    assert ipfs.puts == [(b'{"version":"0.5.0","appCode":"CowSwap","metadata":{}}', "appData")]


def test_upload_with_explicit_config_and_no_credentials():
    with pytest.raises(IpfsError) as ei:
        MetadataApi().upload_metadata_doc_to_ipfs(EMPTY_DOC, IpfsConfig())
    assert "credentials" in str(ei.value)


def test_upload_through_real_client(session):
    session.reply(200, {"IpfsHash": EMPTY_DOC_CID})
    ipfs = IpfsClient(
        IpfsConfig(pinata_api_key="k", pinata_api_secret="s"), session=session
    )
    assert MetadataApi(ipfs).upload_metadata_doc_to_ipfs(EMPTY_DOC) == EMPTY_DOC_HASH


def test_from_config(session):
    from cow_sdk.config import CowConfig

    config = CowConfig(
        app_code="MyApp",
        request_timeout=4.0,
        ipfs=IpfsConfig(read_uri="https://gw.test/ipfs"),
    )
    session.reply(200, content=b'{"version":"0.5.0","appCode":"MyApp","metadata":{}}')
    api = MetadataApi.from_config(config, session=session)

    assert api.generate_app_data_doc()["appCode"] == "MyApp"
    doc = api.decode_app_data(EMPTY_DOC_HASH)
    assert doc["appCode"] == "MyApp"
    _, url, kw = session.last
    assert url == f"https://gw.test/ipfs/{EMPTY_DOC_CID}"
    assert kw["timeout"] == 4.0
