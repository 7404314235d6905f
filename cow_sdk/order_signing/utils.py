"""
cow_sdk.order_signing.utils
===========================

Sign and verify order / cancellation digests.

Typical usage
-------------
    from cow_sdk.order_signing import LocalAccountSigner, OrderSigningUtils

    signer = LocalAccountSigner.from_key(PRIVATE_KEY)
    result = OrderSigningUtils.sign_order(order, chain_id=1, signer=signer)
    result.to_api_dict()   # {"signature": "0x...", "signingScheme": "eip712"}
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple, Union

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_keys.exceptions import BadSignature, ValidationError

from ..errors import SigningRejectedError
from ..utils.bytes import BytesLike, ensure_bytes, to_hex
from .eip712 import (OrderLike, compute_order_uid, digest_cancellation,
                     digest_cancellations, digest_order, domain_separator,
                     gpv2_domain)
from .signer import SignerCapability
from .types import (ECDSA_SCHEMES, SigningResult, SigningScheme,
                    TypedDataDomain, as_unsigned_order)

log = logging.getLogger(__name__)

SIGNATURE_LENGTH = 65


def _digest_bytes(digest: Union[str, BytesLike]) -> bytes:
    raw = ensure_bytes(digest)
    if len(raw) != 32:
        raise ValueError(f"digest must be 32 bytes, got {len(raw)}")
    return raw


def _normalize_v(signature: bytes) -> bytes:
    # Some signers return the recovery id (0/1) instead of v (27/28).
    v = signature[64]
    if v in (0, 1):
        return signature[:64] + bytes([v + 27])
    return signature


def sign(
    digest: Union[str, BytesLike],
    scheme: Union[SigningScheme, str],
    signer: Optional[SignerCapability],
    domain: Optional[TypedDataDomain] = None,
) -> SigningResult:
    """
    Sign *digest* with *scheme*.

    ``presign`` needs no signature: the result carries ``signature=None`` and
    the signer is not called. For the ECDSA schemes any failure of the signer,
    or a result that is not a 65-byte signature, raises `SigningRejectedError`.
    """
    scheme = SigningScheme(scheme)
    if scheme is SigningScheme.PRESIGN:
        return SigningResult(scheme=scheme, signature=None)

    raw = _digest_bytes(digest)
    if signer is None:
        raise SigningRejectedError("no signer given", scheme=scheme.value)
    try:
        out = signer.sign_digest(raw, scheme=scheme, domain=domain)
    except Exception as e:
        raise SigningRejectedError("signer failed", scheme=scheme.value, cause=e) from e

    if not isinstance(out, (bytes, bytearray, memoryview)):
        try:
            out = ensure_bytes(out)
        except (TypeError, ValueError) as e:
            raise SigningRejectedError(
                f"signer returned {type(out).__name__}, expected bytes",
                scheme=scheme.value,
                cause=e,
            ) from e
    sig = bytes(out)
    if len(sig) != SIGNATURE_LENGTH:
        raise SigningRejectedError(
            f"expected a {SIGNATURE_LENGTH}-byte signature, got {len(sig)} bytes",
            scheme=scheme.value,
        )
    sig = _normalize_v(sig)
    log.debug("signed %s with %s", to_hex(raw), scheme.value)
    return SigningResult(scheme=scheme, signature=sig)


def recover_signer(
    digest: Union[str, BytesLike],
    signature: Union[str, BytesLike],
    scheme: Union[SigningScheme, str] = SigningScheme.EIP712,
) -> str:
    """Recover the address that produced *signature* over *digest*."""
    scheme = SigningScheme(scheme)
    if scheme not in ECDSA_SCHEMES:
        raise ValueError(
            f"{scheme.value} orders carry no signature; check the settlement "
            "contract's preSignature(uid) on chain instead"
        )
    raw = _digest_bytes(digest)
    sig = ensure_bytes(signature)
    if len(sig) != SIGNATURE_LENGTH:
        raise ValueError(f"expected a {SIGNATURE_LENGTH}-byte signature, got {len(sig)}")
    sig = _normalize_v(sig)
    if scheme is SigningScheme.EIP712:
        return Account._recover_hash(raw, signature=sig)
    return Account.recover_message(encode_defunct(primitive=raw), signature=sig)


def verify(
    digest: Union[str, BytesLike],
    signature: Union[str, BytesLike],
    expected_signer: str,
    scheme: Union[SigningScheme, str] = SigningScheme.EIP712,
) -> bool:
    """
    True when *signature* over *digest* recovers to *expected_signer*
    (addresses compared case-insensitively). Signatures that cannot be
    recovered verify as False. ``presign`` raises `ValueError`.
    """
    if SigningScheme(scheme) is SigningScheme.PRESIGN:
        raise ValueError(
            "presign orders carry no signature; check the settlement "
            "contract's preSignature(uid) on chain instead"
        )
    try:
        recovered = recover_signer(digest, signature, scheme)
    except (ValueError, BadSignature, ValidationError) as e:
        log.debug("signature did not recover: %s", e)
        return False
    return recovered.lower() == str(expected_signer).lower()


class OrderSigningUtils:
    """Order-level helpers: hash with the GPv2 domain of a chain, then `sign`."""

    @staticmethod
    def get_domain(chain_id: int) -> TypedDataDomain:
        return gpv2_domain(chain_id)

    @staticmethod
    def get_domain_separator(chain_id: int) -> str:
        return to_hex(domain_separator(chain_id))

    @staticmethod
    def sign_order(
        order: OrderLike,
        chain_id: int,
        signer: Optional[SignerCapability],
        scheme: Union[SigningScheme, str] = SigningScheme.EIP712,
    ) -> SigningResult:
        return sign(digest_order(order, chain_id), scheme, signer, gpv2_domain(chain_id))

    @staticmethod
    def sign_order_cancellation(
        order_uid: Union[str, BytesLike],
        chain_id: int,
        signer: Optional[SignerCapability],
        scheme: Union[SigningScheme, str] = SigningScheme.EIP712,
    ) -> SigningResult:
        return sign(digest_cancellation(order_uid, chain_id), scheme, signer, gpv2_domain(chain_id))

    @staticmethod
    def sign_order_cancellations(
        order_uids: Iterable[Union[str, BytesLike]],
        chain_id: int,
        signer: Optional[SignerCapability],
        scheme: Union[SigningScheme, str] = SigningScheme.EIP712,
    ) -> SigningResult:
        return sign(
            digest_cancellations(order_uids, chain_id), scheme, signer, gpv2_domain(chain_id)
        )

    @staticmethod
    def generate_order_id(chain_id: int, order: OrderLike, owner: str) -> Tuple[str, str]:
        """Return ``(order_uid, order_digest)`` as 0x-hex strings."""
        o = as_unsigned_order(order)
        digest = digest_order(o, chain_id)
        return compute_order_uid(digest, owner, o.valid_to), to_hex(digest)


__all__ = [
    "SIGNATURE_LENGTH",
    "sign",
    "recover_signer",
    "verify",
    "OrderSigningUtils",
]
