"""
Order signing: EIP-712 digests for GPv2 orders and cancellations, order UIDs,
and signing/verification through a caller-provided signer.
"""

from .eip712 import (CANCELLATION_TYPE_HASH, CANCELLATIONS_TYPE_HASH,
                     ORDER_TYPE_HASH, OrderUidParams, compute_order_uid,
                     digest_cancellation, digest_cancellations, digest_order,
                     domain_separator, extract_order_uid_params, gpv2_domain,
                     hash_order_struct, order_typed_data)
from .signer import LocalAccountSigner, SignerCapability
from .types import (OrderBalance, OrderKind, SigningResult, SigningScheme,
                    TypedDataDomain, UnsignedOrder)
from .utils import OrderSigningUtils, recover_signer, sign, verify

__all__ = [
    # types
    "OrderKind",
    "OrderBalance",
    "SigningScheme",
    "SigningResult",
    "TypedDataDomain",
    "UnsignedOrder",
    # hashing
    "ORDER_TYPE_HASH",
    "CANCELLATION_TYPE_HASH",
    "CANCELLATIONS_TYPE_HASH",
    "gpv2_domain",
    "domain_separator",
    "hash_order_struct",
    "digest_order",
    "order_typed_data",
    "digest_cancellation",
    "digest_cancellations",
    "compute_order_uid",
    "extract_order_uid_params",
    "OrderUidParams",
    # signing
    "SignerCapability",
    "LocalAccountSigner",
    "sign",
    "verify",
    "recover_signer",
    "OrderSigningUtils",
]
