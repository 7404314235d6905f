import pytest

from cow_sdk.errors import MalformedIdentifierError
from cow_sdk.metadata import cid as cid_module
from cow_sdk.metadata.cid import (CHUNK_SIZE, ContentIdentifier, address_bytes,
                                  identifier_to_onchain_hash,
                                  onchain_hash_to_identifier, parse_identifier)
from cow_sdk.metadata.encoding import encode_document

EMPTY_DOC = {"version": "0.5.0", "appCode": "CowSwap", "metadata": {}}
EMPTY_DOC_CID = "QmYNdAx6V62cUiHGBujwzeaB5FumAKCmPVeaV8DUvrU97F"
EMPTY_DOC_HASH = "0x95164af4bca0ce893339efb678065e705e16e2dc4e6d9c22fcb9d6e54efab8b2"
EMPTY_DOC_CID_V1 = "bafybeievczfpjpfaz2etgoppwz4amxtqlylofxconwocf7fz23su56vywi"
HELLO_WORLD_RAW_CID_V1 = "bafkreifzjut3te2nhyekklss27nh3k72ysco7y32koao5eei66wof36n5e"


def test_app_data_document_vector():
    cid = address_bytes(encode_document(EMPTY_DOC))
    assert cid.text == EMPTY_DOC_CID
    assert identifier_to_onchain_hash(cid) == EMPTY_DOC_HASH


@pytest.mark.parametrize(
    "data, expected",
    [
        (b"hello world", "Qmf412jQZiuVUtdgnB36FXFX7xg5V6KEbSJ4dpQuhkLyfD"),
        (b"hello world\n", "QmT78zSuBmuS4z925WZfrqQ1qHaJ56DQaTfyMUF7F8ff5o"),
        (b"", "QmbFMke1KXqnYyBBWxB74N4c5SBnJMVAiMNRcGu6x1AwQH"),
    ],
)
def test_well_known_file_cids(data, expected):
    assert address_bytes(data).text == expected


def test_identifier_shape():
    cid = address_bytes(b"anything")
    assert cid.text.startswith("Qm") and len(cid.text) == 46
    assert cid.multihash[:2] == b"\x12\x20"
    assert len(cid.digest) == 32
    assert cid.version == 0 and cid.codec == "dag-pb"
    assert str(cid) == cid.text


def test_hash_to_identifier_round_trip():
    cid = onchain_hash_to_identifier(EMPTY_DOC_HASH)
    assert cid.text == EMPTY_DOC_CID
    assert identifier_to_onchain_hash(cid.text) == EMPTY_DOC_HASH


def test_hash_accepts_bytes_and_uppercase():
    raw = bytes.fromhex(EMPTY_DOC_HASH[2:])
    assert onchain_hash_to_identifier(raw).text == EMPTY_DOC_CID
    assert onchain_hash_to_identifier("0x" + EMPTY_DOC_HASH[2:].upper()).text == EMPTY_DOC_CID


def test_cid_v1_parses_to_same_hash():
    cid = parse_identifier(EMPTY_DOC_CID_V1)
    assert cid.version == 1
    assert cid.codec == "dag-pb"
    assert identifier_to_onchain_hash(EMPTY_DOC_CID_V1) == EMPTY_DOC_HASH


def test_from_digest():
    cid = ContentIdentifier.from_digest(bytes.fromhex(EMPTY_DOC_HASH[2:]))
    assert cid.text == EMPTY_DOC_CID


@pytest.mark.parametrize(
    "bad, needle",
    [
        ("QmYNdAx6V62cUiHGBujwzeaB5FumAKCmPVeaV8DUvrU97", "Incorrect length"),
        ("QmYNdAx6V62cUiHGBujwzeaB5FumAKCmPVeaV8DUvrU970", "Non-base58 character"),
        ("", "Incorrect length"),
    ],
)
def test_malformed_identifiers(bad, needle):
    with pytest.raises(MalformedIdentifierError) as ei:
        identifier_to_onchain_hash(bad)
    assert needle in str(ei.value)


def test_non_sha256_multihash_rejected():
    from cow_sdk.utils import base58

    # identity multihash (code 0x00) of 32 bytes, base58 length is still 46
    text = base58.encode(bytes([0x00, 0x20]) + b"\x01" * 32)
    with pytest.raises(MalformedIdentifierError) as ei:
        parse_identifier(text)
    assert "Unsupported multihash code" in str(ei.value)


@pytest.mark.parametrize("bad", ["0x1234", "0x" + "00" * 33, "0x" + "zz" * 32])
def test_malformed_onchain_hash(bad):
    with pytest.raises(MalformedIdentifierError):
        onchain_hash_to_identifier(bad)


def test_wrong_digest_length_message():
    with pytest.raises(MalformedIdentifierError) as ei:
        onchain_hash_to_identifier(b"\x00" * 31)
    assert "Incorrect length" in str(ei.value)


def test_addressing_is_deterministic_and_content_sensitive():
    a = address_bytes(b'{"a":1}')
    assert a == address_bytes(b'{"a":1}')
    assert a != address_bytes(b'{"a":2}')


def test_large_content_is_chunked():
    one_chunk = b"a" * CHUNK_SIZE
    assert address_bytes(one_chunk) != address_bytes(one_chunk + b"a")


def _pattern(n):
    return bytes(i % 251 for i in range(n))


def test_two_chunk_file_vector():
    # root has two links: a full 262144-byte leaf and a 1-byte leaf
    data = _pattern(CHUNK_SIZE + 1)
    assert address_bytes(data).text == "QmUSjGawaz4ptvREcMKSMJneWCa5j8dAz2wSAAvHtW2rnB"
    assert cid_module._root(data).tsize == 262267


@pytest.mark.parametrize(
    "chunks, expected",
    [
        (174, "QmTNpQ2L7Ge3RaZZkotTkcbxMyQYhJRSmgaEUjo7VCG4Do"),
        # one link past the fan-out limit adds a level
        (175, "QmRZFDKw6ZGbamyLDwJXtT2moAHGGZVfjVVtNNqkwwVssH"),
    ],
)
def test_balanced_layout_vectors(monkeypatch, chunks, expected):
    monkeypatch.setattr(cid_module, "CHUNK_SIZE", 4)
    assert address_bytes(_pattern(4 * chunks)).text == expected


def test_raw_codec_cid_v1_rejected():
    with pytest.raises(MalformedIdentifierError) as ei:
        identifier_to_onchain_hash(HELLO_WORLD_RAW_CID_V1)
    assert "Unsupported codec raw" in str(ei.value)


def test_onchain_hash_with_embedded_whitespace_rejected():
    # right number of characters, but two of them are spaces
    spaced = EMPTY_DOC_HASH[:34] + "  " + EMPTY_DOC_HASH[36:]
    with pytest.raises(MalformedIdentifierError) as ei:
        onchain_hash_to_identifier(spaced)
    assert ei.value.message.startswith("Invalid hex")


def test_invalid_hash_text_reports_incorrect_length():
    with pytest.raises(MalformedIdentifierError) as ei:
        identifier_to_onchain_hash("invalidHash")
    assert "Incorrect length" in ei.value.message
