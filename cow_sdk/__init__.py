"""
CoW Protocol SDK for Python
Convenience exports for the most common client APIs.
"""

from .version import __version__  # noqa: F401

# Core config & errors
from .config import (  # noqa: F401
    CowConfig,
    IpfsConfig,
    SupportedChainId,
    SETTLEMENT_CONTRACT_ADDRESS,
)
from .errors import (  # noqa: F401
    CowError,
    EncodingError,
    MalformedIdentifierError,
    HashDerivationError,
    AppDataDecodeError,
    InvalidOrderFieldsError,
    SigningRejectedError,
    IpfsError,
    OrderBookApiError,
)

# App data
from .metadata import (  # noqa: F401
    MetadataApi,
    IpfsClient,
    IpfsHashInfo,
    address_bytes,
    identifier_to_onchain_hash,
    onchain_hash_to_identifier,
    encode_document,
    build_app_data_doc,
)

# Order signing
from .order_signing import (  # noqa: F401
    OrderSigningUtils,
    LocalAccountSigner,
    SigningScheme,
    SigningResult,
    UnsignedOrder,
    digest_order,
    digest_cancellation,
    sign,
    verify,
)

# Order book
from .order_book import OrderBookApi, transform_order  # noqa: F401

__all__ = [
    "__version__",
    # Core
    "CowConfig", "IpfsConfig", "SupportedChainId", "SETTLEMENT_CONTRACT_ADDRESS",
    "CowError", "EncodingError", "MalformedIdentifierError", "HashDerivationError",
    "AppDataDecodeError", "InvalidOrderFieldsError", "SigningRejectedError",
    "IpfsError", "OrderBookApiError",
    # App data
    "MetadataApi", "IpfsClient", "IpfsHashInfo",
    "address_bytes", "identifier_to_onchain_hash", "onchain_hash_to_identifier",
    "encode_document", "build_app_data_doc",
    # Order signing
    "OrderSigningUtils", "LocalAccountSigner", "SigningScheme", "SigningResult",
    "UnsignedOrder", "digest_order", "digest_cancellation", "sign", "verify",
    # Order book
    "OrderBookApi", "transform_order",
]
