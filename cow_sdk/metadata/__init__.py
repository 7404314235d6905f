"""
App data (order metadata) documents: schema, canonical encoding, content
addressing and the IPFS pinning/retrieval client.
"""

from .api import IpfsHashInfo, MetadataApi
from .cid import (ContentIdentifier, address_bytes, identifier_to_onchain_hash,
                  onchain_hash_to_identifier, parse_identifier)
from .encoding import decode_document, encode_document
from .ipfs import IpfsClient
from .schema import APP_DATA_VERSION, AppDataDoc, build_app_data_doc

__all__ = [
    "MetadataApi",
    "IpfsHashInfo",
    "IpfsClient",
    "ContentIdentifier",
    "address_bytes",
    "parse_identifier",
    "identifier_to_onchain_hash",
    "onchain_hash_to_identifier",
    "encode_document",
    "decode_document",
    "build_app_data_doc",
    "AppDataDoc",
    "APP_DATA_VERSION",
]
