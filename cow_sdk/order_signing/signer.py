"""
cow_sdk.order_signing.signer
============================

Signer capability used by the signing helpers, plus an adapter over
`eth_account` local accounts.

The SDK never sees key material: anything with an ``address`` and a
``sign_digest(digest, *, scheme, domain)`` method can sign orders (hardware
wallets, remote signers, a web3 provider bridge, ...).

Notes
-----
- ``eip712``: the signer signs the 32-byte EIP-712 digest directly.
- ``ethsign``: the signer signs the digest as an EIP-191 personal message
  (``"\\x19Ethereum Signed Message:\\n32" || digest``).
- Signatures are 65 bytes ``r || s || v``.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount

from .types import SigningScheme, TypedDataDomain

__all__ = ["SignerCapability", "LocalAccountSigner"]


@runtime_checkable
class SignerCapability(Protocol):
    @property
    def address(self) -> str: ...

    def sign_digest(
        self,
        digest: bytes,
        *,
        scheme: SigningScheme,
        domain: Optional[TypedDataDomain] = None,
    ) -> bytes: ...


class LocalAccountSigner:
    """
    `SignerCapability` backed by an ``eth_account`` `LocalAccount`.

    Example
    -------
    >>> signer = LocalAccountSigner.from_key("0x" + "11" * 32)
    >>> signer.address.startswith("0x")
    True
    """

    def __init__(self, account: LocalAccount) -> None:
        self._account = account

    @classmethod
    def from_key(cls, private_key: str | bytes) -> "LocalAccountSigner":
        return cls(Account.from_key(private_key))

    @property
    def address(self) -> str:
        return self._account.address

    def sign_digest(
        self,
        digest: bytes,
        *,
        scheme: SigningScheme,
        domain: Optional[TypedDataDomain] = None,
    ) -> bytes:
        scheme = SigningScheme(scheme)
        if scheme is SigningScheme.EIP712:
            signed = self._account.unsafe_sign_hash(digest)
        elif scheme is SigningScheme.ETHSIGN:
            signed = self._account.sign_message(encode_defunct(primitive=digest))
        else:
            raise ValueError(f"{scheme.value} is not an ECDSA signing scheme")
        return bytes(signed.signature)

    def __repr__(self) -> str:
        return f"LocalAccountSigner(address={self.address})"
