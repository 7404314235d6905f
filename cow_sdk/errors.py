"""
Typed error classes for the Python SDK.

These are raised by the metadata (app data) helpers, the order signing
helpers and the HTTP collaborators so callers can catch specific failure
modes while still being able to catch the base `CowError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

__all__ = [
    "CowError",
    "EncodingError",
    "MalformedIdentifierError",
    "HashDerivationError",
    "AppDataDecodeError",
    "InvalidOrderFieldsError",
    "SigningRejectedError",
    "IpfsError",
    "OrderBookApiError",
]


class CowError(Exception):
    """Base class for all SDK errors."""


@dataclass(slots=True)
class EncodingError(CowError):
    """
    Raised when a metadata document holds a value the canonical encoder
    does not support (floats, bytes, sets, arbitrary objects, non-string keys).
    """

    message: str
    path: Optional[str] = None
    value_type: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        where = f" at {self.path}" if self.path else ""
        what = f" ({self.value_type})" if self.value_type else ""
        return f"EncodingError{where}{what}: {self.message}"


@dataclass(slots=True)
class MalformedIdentifierError(CowError):
    """
    Raised when a content identifier or on-chain hash cannot be parsed.

    `message` carries the underlying parse failure (e.g. "Incorrect length").
    """

    message: str
    value: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.value is None:
            return self.message
        return f"{self.message} (input={self.value!r})"


@dataclass(slots=True)
class HashDerivationError(CowError):
    """Wraps any failure of the document -> identifier -> on-chain hash pipeline."""

    message: str
    cause: Optional[BaseException] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.cause is None:
            return self.message
        return f"{self.message}: {self.cause}"


@dataclass(slots=True)
class AppDataDecodeError(CowError):
    """Raised when an on-chain app data hash cannot be resolved to its document."""

    message: str
    cause: Optional[BaseException] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.cause is None:
            return f"Error decoding AppData: {self.message}"
        return f"Error decoding AppData: {self.cause}"


@dataclass(slots=True)
class InvalidOrderFieldsError(CowError):
    """
    Raised when an order (or cancellation) cannot be EIP-712 encoded.

    Typical causes: missing amounts, non-integer values, values that do not
    fit the fixed-width type, malformed addresses or app data hashes.
    """

    message: str
    field: Optional[str] = None
    value: Optional[Any] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        where = f" [field={self.field}]" if self.field else ""
        got = f" got={self.value!r}" if self.value is not None else ""
        return f"InvalidOrderFieldsError{where}: {self.message}{got}"


@dataclass(slots=True)
class SigningRejectedError(CowError):
    """Raised when the external signer declines, errors or returns garbage."""

    message: str
    scheme: Optional[str] = None
    cause: Optional[BaseException] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        scheme = f" scheme={self.scheme}" if self.scheme else ""
        cause = f": {self.cause}" if self.cause is not None else ""
        return f"SigningRejectedError{scheme}: {self.message}{cause}"


@dataclass(slots=True)
class IpfsError(CowError):
    """Raised by the pinning/retrieval client."""

    message: str
    url: Optional[str] = None
    http_status: Optional[int] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        parts = [self.message]
        if self.url:
            parts.append(f"url={self.url}")
        if self.http_status is not None:
            parts.append(f"http={self.http_status}")
        return " ".join(parts)


@dataclass(slots=True)
class OrderBookApiError(CowError):
    """Raised when the order-book REST API answers with a non-2xx status."""

    message: str
    http_status: Optional[int] = None
    error_type: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        parts = [self.message]
        if self.error_type:
            parts.append(f"errorType={self.error_type}")
        if self.description:
            parts.append(f"description={self.description!r}")
        if self.http_status is not None:
            parts.append(f"http={self.http_status}")
        return " ".join(parts)
