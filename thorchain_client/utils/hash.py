"""
Hash helpers used for Cosmos-style account addresses.

- sha256       : hashlib
- ripemd160    : pycryptodome (OpenSSL 3 builds of hashlib often lack it)
- hash160      : ripemd160(sha256(data)), the 20-byte account address payload
"""

from __future__ import annotations

import hashlib
from typing import Union

from Crypto.Hash import RIPEMD160

BytesLike = Union[bytes, bytearray, memoryview]

__all__ = ["sha256", "sha256_hex", "ripemd160", "hash160"]


def _b(data: BytesLike) -> bytes:
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"expected bytes-like, got {type(data).__name__}")


def sha256(data: BytesLike) -> bytes:
    return hashlib.sha256(_b(data)).digest()


def sha256_hex(data: BytesLike, *, upper: bool = False) -> str:
    h = hashlib.sha256(_b(data)).hexdigest()
    return h.upper() if upper else h


def ripemd160(data: BytesLike) -> bytes:
    return RIPEMD160.new(_b(data)).digest()


def hash160(data: BytesLike) -> bytes:
    """Return ripemd160(sha256(data))."""
    return ripemd160(sha256(data))
