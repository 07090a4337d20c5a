"""
thorchain_client.address
========================

Address encoding and validation for Thorchain (Cosmos-SDK) accounts.

Format
------
Addresses are classic Bech32 with a network HRP (``thor`` on mainnet,
``tthor`` on testnet). The data payload is:

    payload = ripemd160(sha256(compressed_secp256k1_pubkey))    # 20 bytes

32-byte payloads (module / contract accounts) are accepted by the codec too.

This module provides:
- encode(prefix, payload) -> str
- decode(address, known_prefixes=...) -> (prefix, payload)
- validate(address, expected_prefix) -> bool
- from_public_key(public_key, prefix) -> str
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

from .config import all_known_prefixes
from .errors import DecodingError, EncodingError
from .utils import bech32
from .utils.hash import hash160

__all__ = [
    "PAYLOAD_LENGTHS",
    "encode",
    "decode",
    "validate",
    "from_public_key",
]

PAYLOAD_LENGTHS = (20, 32)


def encode(prefix: str, payload: bytes) -> str:
    """
    Encode a binary payload to a Bech32 address with the given prefix.
    """
    if not isinstance(payload, (bytes, bytearray)):
        raise EncodingError("payload must be bytes")
    if len(payload) not in PAYLOAD_LENGTHS:
        raise EncodingError(
            f"payload must be {' or '.join(map(str, PAYLOAD_LENGTHS))} bytes, got {len(payload)}"
        )
    return bech32.encode_bytes(prefix, bytes(payload))


def decode(address: str, known_prefixes: Optional[Iterable[str]] = None) -> Tuple[str, bytes]:
    """
    Decode a Bech32 address into (prefix, payload_bytes).

    `known_prefixes` defaults to the full Thorchain prefix family of both
    networks; pass an explicit collection to narrow or widen it.
    """
    prefix, payload = bech32.decode_bytes(address)
    known = tuple(known_prefixes) if known_prefixes is not None else all_known_prefixes()
    if prefix not in known:
        raise DecodingError(f"unknown prefix {prefix!r}")
    if len(payload) not in PAYLOAD_LENGTHS:
        raise DecodingError(f"invalid payload length {len(payload)}")
    return prefix, payload


def validate(address: str, expected_prefix: str) -> bool:
    """
    True iff `address` carries `expected_prefix`, decodes, and re-encodes to
    exactly the same string. Never raises.
    """
    if not isinstance(address, str) or not isinstance(expected_prefix, str):
        return False
    if not address.startswith(expected_prefix):
        return False
    try:
        prefix, payload = decode(address, known_prefixes=(expected_prefix,))
        return encode(prefix, payload) == address
    except (DecodingError, EncodingError):
        return False


def from_public_key(public_key: bytes, prefix: str) -> str:
    """
    Derive an account address from a 33-byte compressed secp256k1 public key.
    """
    if not isinstance(public_key, (bytes, bytearray)) or len(public_key) != 33:
        raise EncodingError("public_key must be 33 bytes (compressed secp256k1)")
    return encode(prefix, hash160(bytes(public_key)))
