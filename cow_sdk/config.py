"""
SDK configuration: supported chains, order-book endpoints, IPFS endpoints and
the app code stamped into metadata documents.

- Loads sane defaults and supports overrides via environment variables (COW_*).
- Provides helpers for building HTTP headers and validating endpoints.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Literal, Optional

from .version import __version__

Env = Literal["prod", "staging"]


class SupportedChainId(IntEnum):
    MAINNET = 1
    GOERLI = 5
    GNOSIS_CHAIN = 100


# Path segment used by the order-book API for each chain
_CHAIN_SLUG: Dict[int, str] = {
    SupportedChainId.MAINNET: "mainnet",
    SupportedChainId.GOERLI: "goerli",
    SupportedChainId.GNOSIS_CHAIN: "xdai",
}

_API_BASE: Dict[str, str] = {
    "prod": "https://api.cow.fi",
    "staging": "https://barn.api.cow.fi",
}

# GPv2Settlement is deployed at the same address on every supported chain.
SETTLEMENT_CONTRACT_ADDRESS = "0x9008D19f58AAbD9eD0D60971565AA8510560ab41"

DEFAULT_APP_CODE = "CowSwap"
DEFAULT_IPFS_READ_URI = "https://gnosis.mypinata.cloud/ipfs"
DEFAULT_IPFS_WRITE_URI = "https://api.pinata.cloud"

_HEX_RE = re.compile(r"^0x[0-9a-fA-F]+$")


def _parse_chain_id(val: Any, default: int = SupportedChainId.MAINNET) -> int:
    """
    Accepts int, decimal str, or 0x-hex str and returns a supported chain id.
    """
    if val is None or val == "":
        return int(default)
    if isinstance(val, int):
        chain_id = val
    else:
        s = str(val).strip()
        chain_id = int(s, 16) if _HEX_RE.match(s) else int(s, 10)
    try:
        return int(SupportedChainId(chain_id))
    except ValueError:
        raise ValueError(f"Unsupported chain id: {chain_id}") from None


def _parse_env(val: Optional[str], default: Env = "prod") -> Env:
    if not val:
        return default
    v = val.strip().lower()
    if v not in _API_BASE:
        raise ValueError(f"env must be one of {tuple(_API_BASE)}, got: {val!r}")
    return v  # type: ignore[return-value]


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v is not None else default


def _ensure_scheme(url: Optional[str], allowed: tuple[str, ...]) -> Optional[str]:
    if not url:
        return url
    lower = url.lower()
    if not any(lower.startswith(f"{sch}://") for sch in allowed):
        raise ValueError(f"URL must start with {allowed}, got: {url!r}")
    return url


def order_book_url(chain_id: int, env: Env = "prod") -> str:
    """Base URL of the order-book API for a chain, e.g. https://api.cow.fi/xdai."""
    slug = _CHAIN_SLUG[_parse_chain_id(chain_id)]
    return f"{_API_BASE[_parse_env(env)]}/{slug}"


@dataclass(slots=True)
class IpfsConfig:
    """Endpoints and Pinata credentials used by the pinning/retrieval client."""

    read_uri: str = DEFAULT_IPFS_READ_URI
    write_uri: str = DEFAULT_IPFS_WRITE_URI
    pinata_api_key: Optional[str] = None
    pinata_api_secret: Optional[str] = None

    @property
    def has_credentials(self) -> bool:
        return bool(self.pinata_api_key and self.pinata_api_secret)


@dataclass(slots=True)
class CowConfig:
    # Core
    chain_id: int = field(default_factory=lambda: _parse_chain_id(None))
    env: Env = "prod"
    app_code: str = DEFAULT_APP_CODE
    # HTTP behavior
    request_timeout: float = 30.0
    user_agent: str = field(default_factory=lambda: f"cow-sdk-py/{__version__}")
    ipfs: IpfsConfig = field(default_factory=IpfsConfig)

    @classmethod
    def from_env(cls, prefix: str = "COW_") -> "CowConfig":
        """
        Create config from environment variables:

        COW_CHAIN_ID            (int or 0x-hex; 1, 5 or 100)
        COW_ENV                 (prod | staging)
        COW_APP_CODE            (str)
        COW_TIMEOUT             (float seconds, HTTP)
        COW_USER_AGENT          (str)
        COW_IPFS_READ_URI       (http/https)
        COW_IPFS_WRITE_URI      (http/https)
        COW_PINATA_API_KEY      (str)
        COW_PINATA_API_SECRET   (str)
        """
        chain_id = _parse_chain_id(_env(f"{prefix}CHAIN_ID", None))
        env = _parse_env(_env(f"{prefix}ENV", None))
        app_code = _env(f"{prefix}APP_CODE", DEFAULT_APP_CODE)
        timeout = float(_env(f"{prefix}TIMEOUT", "30.0"))
        ua = _env(f"{prefix}USER_AGENT", f"cow-sdk-py/{__version__}")
        read_uri = _env(f"{prefix}IPFS_READ_URI", DEFAULT_IPFS_READ_URI)
        write_uri = _env(f"{prefix}IPFS_WRITE_URI", DEFAULT_IPFS_WRITE_URI)

        _ensure_scheme(read_uri, ("http", "https"))
        _ensure_scheme(write_uri, ("http", "https"))

        return cls(
            chain_id=chain_id,
            env=env,
            app_code=app_code or DEFAULT_APP_CODE,
            request_timeout=timeout,
            user_agent=ua or f"cow-sdk-py/{__version__}",
            ipfs=IpfsConfig(
                read_uri=read_uri or DEFAULT_IPFS_READ_URI,
                write_uri=write_uri or DEFAULT_IPFS_WRITE_URI,
                pinata_api_key=_env(f"{prefix}PINATA_API_KEY"),
                pinata_api_secret=_env(f"{prefix}PINATA_API_SECRET"),
            ),
        )

    @classmethod
    def with_overrides(cls, base: Optional["CowConfig"] = None, **overrides: Any) -> "CowConfig":
        """
        Build from an existing config plus keyword overrides.
        Unknown keys are ignored; IPFS settings are carried over from *base*.
        """
        base = base or cls.from_env()
        data: Dict[str, Any] = {
            "chain_id": base.chain_id,
            "env": base.env,
            "app_code": base.app_code,
            "request_timeout": base.request_timeout,
            "user_agent": base.user_agent,
        }
        data.update({k: v for k, v in overrides.items() if k in data})
        if "chain_id" in overrides:
            data["chain_id"] = _parse_chain_id(overrides["chain_id"], base.chain_id)
        if "env" in overrides:
            data["env"] = _parse_env(overrides["env"], base.env)
        return cls(ipfs=base.ipfs, **data)

    @property
    def order_book_url(self) -> str:
        return order_book_url(self.chain_id, self.env)

    def http_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }

    def to_dict(self) -> Dict[str, Any]:
        # No credentials here.
        return {
            "chain_id": int(self.chain_id),
            "env": self.env,
            "app_code": self.app_code,
            "request_timeout": float(self.request_timeout),
            "user_agent": self.user_agent,
            "ipfs_read_uri": self.ipfs.read_uri,
            "ipfs_write_uri": self.ipfs.write_uri,
        }


__all__ = [
    "Env",
    "SupportedChainId",
    "SETTLEMENT_CONTRACT_ADDRESS",
    "DEFAULT_APP_CODE",
    "DEFAULT_IPFS_READ_URI",
    "DEFAULT_IPFS_WRITE_URI",
    "IpfsConfig",
    "CowConfig",
    "order_book_url",
]
