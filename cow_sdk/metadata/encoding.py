"""
Canonical JSON encoder for app data documents
=============================================

The bytes produced here are what gets hashed into the CID and, through it,
into the on-chain `appData` field, so they must be a pure function of the
document:

- compact separators (``,`` and ``:``), no whitespace
- keys emitted in insertion order (the document builder fixes that order)
- non-ASCII text kept as UTF-8, not ``\\uXXXX`` escaped
- **no trailing newline**

Because of the last point ``ipfs add file.json`` of the same content (which normally
ends with a newline) yields a *different* CID. Callers that need parity with
a file upload must append ``b"\\n"`` themselves.

Only the JSON subset below is accepted; everything else raises
`EncodingError` before any byte is produced:

- None, bool, int, str
- list/tuple of allowed values
- dict with str keys and allowed values

Floats are not part of the subset.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Union

from ..errors import EncodingError

JsonValue = Union[None, bool, int, str, list, tuple, dict]

_MAX_DEPTH = 256


def _plain(x: Any, *, path: str = "$", _depth: int = 0) -> Any:
    """Validate *x* and return a copy made of plain dict/list/scalars."""
    if _depth > _MAX_DEPTH:
        raise EncodingError("maximum nesting exceeded", path=path)
    if x is None or isinstance(x, (bool, int, str)):
        return x
    if isinstance(x, (list, tuple)):
        return [_plain(item, path=f"{path}[{i}]", _depth=_depth + 1) for i, item in enumerate(x)]
    if isinstance(x, Mapping):
        out: Dict[str, Any] = {}
        for k, v in x.items():
            if not isinstance(k, str):
                raise EncodingError(
                    "unsupported map key type", path=path, value_type=type(k).__name__
                )
            out[k] = _plain(v, path=f"{path}.{k}", _depth=_depth + 1)
        return out
    raise EncodingError("unsupported value type", path=path, value_type=type(x).__name__)


def encode_document(doc: Mapping[str, Any]) -> bytes:
    """Serialize an app data document to its canonical byte form."""
    if not isinstance(doc, Mapping):
        raise EncodingError(
            "document must be a JSON object", path="$", value_type=type(doc).__name__
        )
    text = json.dumps(
        _plain(doc),
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )
    return text.encode("utf-8")


def decode_document(data: bytes) -> Dict[str, Any]:
    """Parse bytes fetched from IPFS back into a document (key order preserved)."""
    try:
        obj = json.loads(bytes(data).decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise EncodingError(f"document is not valid UTF-8 JSON: {e}") from e
    if not isinstance(obj, dict):
        raise EncodingError(
            "document must be a JSON object", path="$", value_type=type(obj).__name__
        )
    return obj


__all__ = ["JsonValue", "encode_document", "decode_document"]
