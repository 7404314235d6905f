"""
cow_sdk.metadata.api
====================

High-level helpers around app data documents: build them, hash them the way
IPFS does, pin them, and resolve an on-chain `appData` hash back to the
document.

Typical usage
-------------
    from cow_sdk.metadata.api import MetadataApi

    api = MetadataApi()
    doc = api.generate_app_data_doc(metadata_params={"quoteParams": {"slippageBips": "50"}})
    info = api.calculate_app_data_hash(doc)
    info.cid_v0, info.app_data_hash
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import requests

from ..config import DEFAULT_APP_CODE, CowConfig, IpfsConfig
from ..errors import AppDataDecodeError, CowError, HashDerivationError
from .cid import (ContentIdentifier, address_bytes, identifier_to_onchain_hash,
                  onchain_hash_to_identifier)
from .encoding import decode_document, encode_document
from .ipfs import IpfsClient
from .schema import AppDataDoc, build_app_data_doc

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IpfsHashInfo:
    cid_v0: str
    app_data_hash: str


class MetadataApi:
    """
    Parameters
    ----------
    ipfs : IpfsClient | None
        Pinning/retrieval collaborator. Created lazily with default endpoints
        when a method needs it and none was given.
    app_code : str
        Default ``appCode`` for generated documents.
    """

    def __init__(self, ipfs: Optional[IpfsClient] = None, *, app_code: str = DEFAULT_APP_CODE) -> None:
        self._ipfs = ipfs
        self._app_code = app_code

    @classmethod
    def from_config(
        cls, config: CowConfig, *, session: Optional[requests.Session] = None
    ) -> "MetadataApi":
        ipfs = IpfsClient(config.ipfs, timeout_s=config.request_timeout, session=session)
        return cls(ipfs, app_code=config.app_code)

    def _client(self, ipfs_config: Optional[IpfsConfig] = None) -> IpfsClient:
        if ipfs_config is not None:
            return IpfsClient(ipfs_config)
        if self._ipfs is None:
            self._ipfs = IpfsClient()
        return self._ipfs

    # ---- Documents -----------------------------------------------------------

    def generate_app_data_doc(
        self,
        app_data_params: Optional[Mapping[str, Any]] = None,
        metadata_params: Optional[Mapping[str, Any]] = None,
    ) -> AppDataDoc:
        """Create an app data document with the latest version format."""
        return build_app_data_doc(
            app_data_params, metadata_params, default_app_code=self._app_code
        )

    # ---- Hashes --------------------------------------------------------------

    def cid_to_app_data_hex(self, cid: str) -> str:
        return identifier_to_onchain_hash(cid)

    def app_data_hex_to_cid(self, app_data_hash: str) -> str:
        return onchain_hash_to_identifier(app_data_hash).text

    def calculate_app_data_hash(self, doc: Mapping[str, Any]) -> IpfsHashInfo:
        """
        Calculate the CIDv0 and the on-chain appData hash WITHOUT publishing
        the document to IPFS. Pinning the same document later yields the same
        CID.

        The document is hashed without a trailing newline. ``ipfs add`` of a
        file with the same content will usually give a different CID, e.g.
        for the content ``hello world``:

        * ``ipfs add file`` (with line ending): QmT78zSuBmuS4z925WZfrqQ1qHaJ56DQaTfyMUF7F8ff5o
        * this method: Qmf412jQZiuVUtdgnB36FXFX7xg5V6KEbSJ4dpQuhkLyfD
        """
        try:
            cid = address_bytes(encode_document(doc))
            app_data_hash = self.cid_to_app_data_hex(cid.text)
        except CowError as e:
            raise HashDerivationError("Failed to calculate appDataHash", cause=e) from e
        log.debug("app data %s -> %s", cid.text, app_data_hash)
        return IpfsHashInfo(cid_v0=cid.text, app_data_hash=app_data_hash)

    # ---- IPFS round-trips ----------------------------------------------------

    def decode_app_data(self, app_data_hash: str) -> Dict[str, Any]:
        """Resolve an on-chain appData hash to the document stored on IPFS."""
        try:
            cid: ContentIdentifier = onchain_hash_to_identifier(app_data_hash)
            return decode_document(self._client().get(cid))
        except CowError as e:
            log.debug("decoding app data %r failed: %s", app_data_hash, e)
            raise AppDataDecodeError(str(e), cause=e) from e

    def upload_metadata_doc_to_ipfs(
        self, doc: Mapping[str, Any], ipfs_config: Optional[IpfsConfig] = None
    ) -> str:
        """Pin *doc* and return its on-chain appData hash."""
        cid = self._client(ipfs_config).put(encode_document(doc))
        return self.cid_to_app_data_hex(cid)


__all__ = ["IpfsHashInfo", "MetadataApi"]
