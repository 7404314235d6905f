"""
cow_sdk.metadata.ipfs
=====================

Client for the IPFS pinning (Pinata) and retrieval (gateway) services that
store app data documents.

- **POST {write_uri}/pinning/pinJSONToIPFS**: pin a JSON document, returns
  ``{"IpfsHash": "<CIDv0>", ...}``
- **GET  {read_uri}/{cid}**: fetch the raw document bytes

Typical usage
-------------
    from cow_sdk.config import IpfsConfig
    from cow_sdk.metadata.ipfs import IpfsClient

    ipfs = IpfsClient(IpfsConfig(pinata_api_key="...", pinata_api_secret="..."))
    cid = ipfs.put(doc_bytes)
    raw = ipfs.get(cid)

Design notes
------------
* `put` takes the canonical document *bytes* and splices them verbatim into
  the request body as ``pinataContent``. The body is therefore byte-for-byte
  ``{"pinataContent":<doc>,"pinataMetadata":{"name":"appData"}}`` and the
  pinned CID matches the one computed locally by `address_bytes`.
* One request per call: no retries, no backoff. Timeouts come from the
  config; callers own retry policy.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Union
from urllib.parse import quote

import requests

from ..config import IpfsConfig
from ..errors import IpfsError
from ..version import __version__
from .cid import ContentIdentifier

log = logging.getLogger(__name__)

PIN_JSON_PATH = "/pinning/pinJSONToIPFS"
DEFAULT_PIN_NAME = "appData"


def _error_detail(resp: requests.Response) -> str:
    """Best-effort extraction of Pinata's ``{"error": {"details": ...}}`` body."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text or resp.reason or f"HTTP {resp.status_code}"
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict):
            return str(err.get("details") or err.get("reason") or err)
        if isinstance(err, str):
            return err
    return resp.reason or f"HTTP {resp.status_code}"


class IpfsClient:
    """
    Pinning/retrieval collaborator.

    Parameters
    ----------
    config : IpfsConfig | None
        Endpoints and Pinata credentials. Reads work without credentials.
    timeout_s : float
        Default timeout for HTTP operations.
    session : requests.Session | None
        Optional custom session. If not provided, a new session is created.
    """

    def __init__(
        self,
        config: Optional[IpfsConfig] = None,
        *,
        timeout_s: float = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._config = config or IpfsConfig()
        self._timeout = float(timeout_s)
        self._http = session or requests.Session()

    @property
    def config(self) -> IpfsConfig:
        return self._config

    # ---- Public API ----------------------------------------------------------

    def put(self, data: bytes, name: str = DEFAULT_PIN_NAME) -> str:
        """
        Pin a canonical JSON document and return the CID text reported by the
        pinning service.
        """
        if not self._config.has_credentials:
            raise IpfsError("You need to pass IPFS api credentials.")

        meta = json.dumps({"name": name}, separators=(",", ":"), ensure_ascii=False)
        body = (
            b'{"pinataContent":' + bytes(data) + b',"pinataMetadata":' + meta.encode("utf-8") + b"}"
        )
        headers = {
            "Content-Type": "application/json",
            "User-Agent": f"cow-sdk-py/{__version__}",
            "pinata_api_key": str(self._config.pinata_api_key),
            "pinata_secret_api_key": str(self._config.pinata_api_secret),
        }
        url = self._config.write_uri.rstrip("/") + PIN_JSON_PATH
        log.debug("pinning %d bytes to %s as %r", len(data), url, name)
        try:
            resp = self._http.post(url, data=body, headers=headers, timeout=self._timeout)
        except requests.RequestException as e:
            raise IpfsError(f"POST {url} failed: {e}", url=url) from e

        if resp.status_code // 100 != 2:
            raise IpfsError(_error_detail(resp), url=url, http_status=resp.status_code)
        try:
            payload: Dict[str, Any] = resp.json()
        except ValueError as e:
            raise IpfsError("IPFS pin: expected JSON response", url=url) from e

        cid = payload.get("IpfsHash") if isinstance(payload, dict) else None
        if not isinstance(cid, str) or not cid:
            raise IpfsError("IPFS pin: response did not include an IpfsHash", url=url)
        log.debug("pinned %s", cid)
        return cid

    def get(self, cid: Union[str, ContentIdentifier]) -> bytes:
        """Fetch the raw bytes stored under *cid* from the gateway."""
        cid_text = str(cid)
        url = f"{self._config.read_uri.rstrip('/')}/{quote(cid_text, safe='')}"
        log.debug("fetching %s", url)
        try:
            resp = self._http.get(url, timeout=self._timeout)
        except requests.RequestException as e:
            raise IpfsError(f"GET {url} failed: {e}", url=url) from e
        if resp.status_code // 100 != 2:
            raise IpfsError(_error_detail(resp), url=url, http_status=resp.status_code)
        return resp.content


__all__ = ["IpfsClient", "PIN_JSON_PATH", "DEFAULT_PIN_NAME"]
