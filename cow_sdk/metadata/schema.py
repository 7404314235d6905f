"""
App data document schema (latest version: 0.5.0).

Example of a generated document:

    {
      "version": "0.5.0",
      "appCode": "CowSwap",
      "environment": "local",
      "metadata": {
        "quote": {"slippageBips": "50", "version": "0.2.0"},
        "orderClass": {"orderClass": "market", "version": "0.1.0"}
      }
    }

The document version and every section version come from the table below,
never from the caller, so that the same parameters always hash to the same
CID. Bump a version here only together with a schema change.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple, TypedDict

from ..config import DEFAULT_APP_CODE

APP_DATA_VERSION = "0.5.0"
REFERRER_VERSION = "0.1.0"
QUOTE_VERSION = "0.2.0"
ORDER_CLASS_VERSION = "0.1.0"

# (section name in the document, params key, section version), in document order
METADATA_SECTIONS: Tuple[Tuple[str, str, str], ...] = (
    ("referrer", "referrerParams", REFERRER_VERSION),
    ("quote", "quoteParams", QUOTE_VERSION),
    ("orderClass", "orderClassParams", ORDER_CLASS_VERSION),
)


class AppDataParams(TypedDict, total=False):
    appCode: str
    environment: str


class ReferrerParams(TypedDict):
    address: str


class QuoteParams(TypedDict):
    slippageBips: str


class OrderClassParams(TypedDict):
    orderClass: str  # "market" | "limit" | "liquidity"


class MetadataParams(TypedDict, total=False):
    referrerParams: ReferrerParams
    quoteParams: QuoteParams
    orderClassParams: OrderClassParams


class AppDataDoc(TypedDict, total=False):
    version: str
    appCode: str
    environment: str
    metadata: Dict[str, Dict[str, Any]]


def _section(params: Mapping[str, Any], version: str) -> Dict[str, Any]:
    # A caller-supplied "version" keeps its position but takes our value.
    return {**dict(params), "version": version}


def build_app_data_doc(
    app_params: Optional[Mapping[str, Any]] = None,
    metadata_params: Optional[Mapping[str, Any]] = None,
    *,
    default_app_code: str = DEFAULT_APP_CODE,
) -> AppDataDoc:
    """
    Create an app data document with the latest version format.

    Without params this is the minimal document
    ``{"version": "0.5.0", "appCode": "CowSwap", "metadata": {}}``.
    Sections are included only for params that were passed (and are not
    None); there are no null or empty placeholders.

    The combined call shape ``build_app_data_doc({"appDataParams": ...,
    "metadataParams": ...})`` is accepted as well.
    """
    if metadata_params is None and app_params and (
        "appDataParams" in app_params or "metadataParams" in app_params
    ):
        combined = app_params
        app_params = combined.get("appDataParams")
        metadata_params = combined.get("metadataParams")

    app_params = app_params or {}
    metadata_params = metadata_params or {}

    metadata: Dict[str, Dict[str, Any]] = {}
    for name, params_key, version in METADATA_SECTIONS:
        params = metadata_params.get(params_key)
        if params is not None:
            metadata[name] = _section(params, version)

    doc: AppDataDoc = {
        "version": APP_DATA_VERSION,
        "appCode": app_params.get("appCode") or default_app_code,
    }
    if app_params.get("environment") is not None:
        doc["environment"] = app_params["environment"]
    doc["metadata"] = metadata
    return doc


__all__ = [
    "APP_DATA_VERSION",
    "REFERRER_VERSION",
    "QUOTE_VERSION",
    "ORDER_CLASS_VERSION",
    "METADATA_SECTIONS",
    "AppDataParams",
    "MetadataParams",
    "ReferrerParams",
    "QuoteParams",
    "OrderClassParams",
    "AppDataDoc",
    "build_app_data_doc",
]
