"""
Release version of ``cow_sdk`` (PEP 440). The HTTP clients put it in their
default ``User-Agent`` (``cow-sdk-py/<version>``).
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
