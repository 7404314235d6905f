from collections import OrderedDict

import pytest

from cow_sdk.errors import EncodingError
from cow_sdk.metadata.encoding import decode_document, encode_document


def test_compact_and_in_order():
    doc = {"version": "0.5.0", "appCode": "CowSwap", "metadata": {}}
    assert encode_document(doc) == b'{"version":"0.5.0","appCode":"CowSwap","metadata":{}}'


def test_no_trailing_newline():
    assert not encode_document({"a": 1}).endswith(b"\n")


def test_key_order_is_preserved_not_sorted():
    assert encode_document({"b": 1, "a": 2}) == b'{"b":1,"a":2}'


def test_non_ascii_is_utf8():
    out = encode_document({"appCode": "Café ☕"})
    assert out == '{"appCode":"Café ☕"}'.encode("utf-8")
    assert b"\\u" not in out


def test_nested_mappings_and_tuples():
    doc = OrderedDict(a=OrderedDict(b=(1, True, None)))
    assert encode_document(doc) == b'{"a":{"b":[1,true,null]}}'


@pytest.mark.parametrize(
    "doc, path, type_name",
    [
        ({"x": 1.5}, "$.x", "float"),
        ({"x": [b"raw"]}, "$.x[0]", "bytes"),
        ({"x": {"y": {1, 2}}}, "$.x.y", "set"),
        ({"x": object()}, "$.x", "object"),
    ],
)
def test_unsupported_values_are_rejected(doc, path, type_name):
    with pytest.raises(EncodingError) as ei:
        encode_document(doc)
    assert ei.value.path == path
    assert ei.value.value_type == type_name


def test_non_string_key_rejected():
    with pytest.raises(EncodingError) as ei:
        encode_document({"metadata": {1: "x"}})
    assert ei.value.path == "$.metadata"
    assert ei.value.value_type == "int"


def test_top_level_must_be_object():
    with pytest.raises(EncodingError):
        encode_document(["not", "a", "doc"])  # type: ignore[arg-type]


def test_decode_preserves_order():
    raw = b'{"version":"0.5.0","appCode":"X","metadata":{"quote":{"slippageBips":"5"}}}'
    doc = decode_document(raw)
    assert list(doc) == ["version", "appCode", "metadata"]
    assert encode_document(doc) == raw


def test_decode_rejects_garbage():
    with pytest.raises(EncodingError):
        decode_document(b"\xff\xfe")
    with pytest.raises(EncodingError):
        decode_document(b"[1,2]")
