"""
Bech32 codec (BIP-0173), the address format of Cosmos-SDK chains.

Self-contained implementation so the client's address layer has no hidden
behaviour. Only the classic Bech32 checksum constant is accepted; Bech32m
strings are rejected as checksum failures.

Typical usage
-------------
>>> payload = bytes(20)
>>> addr = encode_bytes("thor", payload)
>>> hrp, out = decode_bytes(addr)
>>> assert hrp == "thor" and out == payload

Helpers
-------
- encode(hrp, data5) -> string (data must be 5-bit ints 0..31)
- decode(addr) -> (hrp, data5)   (data5 is list[int])
- encode_bytes(hrp, payload) -> string (8->5 convertbits)
- decode_bytes(addr) -> (hrp, payload: bytes)

Notes
-----
- HRP is validated to be lowercase alphanumeric on encode.
- Decode accepts all-upper or all-lower input and rejects mixed case;
  callers needing canonical form compare against the re-encoded string.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from ..errors import DecodingError, EncodingError

__all__ = [
    "encode",
    "decode",
    "encode_bytes",
    "decode_bytes",
    "convertbits",
    "CHARSET",
    "MAX_LENGTH",
]

CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
CHARSET_REV = {c: i for i, c in enumerate(CHARSET)}

MAX_LENGTH = 90
_BECH32_CONST = 1


def _polymod(values: Sequence[int]) -> int:
    """Internal bech32 polymod checksum."""
    GENERATORS = (0x3b6a57b2, 0x26508e6d, 0x1ea119fa, 0x3d4233dd, 0x2a1462b3)
    chk = 1
    for v in values:
        b = (chk >> 25) & 0xFF
        chk = ((chk & 0x1FFFFFF) << 5) ^ v
        for i in range(5):
            chk ^= GENERATORS[i] if ((b >> i) & 1) else 0
    return chk


def _hrp_expand(hrp: str) -> List[int]:
    return [ord(x) >> 5 for x in hrp] + [0] + [ord(x) & 31 for x in hrp]


def _create_checksum(hrp: str, data: Sequence[int]) -> List[int]:
    values = _hrp_expand(hrp) + list(data)
    pm = _polymod(values + [0, 0, 0, 0, 0, 0]) ^ _BECH32_CONST
    return [(pm >> 5 * (5 - i)) & 31 for i in range(6)]


def _verify_checksum(hrp: str, data: Sequence[int]) -> bool:
    return _polymod(_hrp_expand(hrp) + list(data)) == _BECH32_CONST


def _valid_hrp(hrp: str) -> bool:
    return bool(hrp) and all("a" <= c <= "z" or "0" <= c <= "9" for c in hrp)


def encode(hrp: str, data5: Iterable[int]) -> str:
    """
    Encode to bech32. `data5` must be 5-bit integers (0..31).
    """
    if not isinstance(hrp, str) or not _valid_hrp(hrp):
        raise EncodingError(f"invalid HRP {hrp!r} (must be lowercase alphanumeric)")
    data5 = list(data5)
    if any((v < 0 or v > 31) for v in data5):
        raise EncodingError("data5 values must be in 0..31")
    checksum = _create_checksum(hrp, data5)
    encoded = hrp + "1" + "".join(CHARSET[d] for d in (data5 + checksum))
    if len(encoded) > MAX_LENGTH:
        raise EncodingError(f"encoded string exceeds {MAX_LENGTH} characters")
    return encoded


def decode(addr: str) -> Tuple[str, List[int]]:
    """
    Decode a bech32 string. Returns (hrp, data5) with the HRP lower-cased.
    Raises DecodingError on failure.
    """
    if not isinstance(addr, str) or not addr:
        raise DecodingError("address must be a non-empty string")
    if any(ord(x) < 33 or ord(x) > 126 for x in addr):
        raise DecodingError("invalid characters")
    if len(addr) > MAX_LENGTH:
        raise DecodingError(f"string exceeds {MAX_LENGTH} characters")
    if addr.lower() != addr and addr.upper() != addr:
        raise DecodingError("mixed case not allowed")
    addr = addr.lower()
    pos = addr.rfind("1")
    if pos < 1:
        raise DecodingError("missing separator '1' or empty HRP")
    hrp, rest = addr[:pos], addr[pos + 1 :]
    if not _valid_hrp(hrp):
        raise DecodingError(f"invalid HRP {hrp!r}")
    if len(rest) < 6:
        raise DecodingError("too short data/checksum")
    try:
        data = [CHARSET_REV[c] for c in rest]
    except KeyError:
        raise DecodingError("invalid charset") from None
    if not _verify_checksum(hrp, data):
        raise DecodingError("invalid checksum")
    return hrp, data[:-6]


def convertbits(data: Iterable[int], from_bits: int, to_bits: int, *, pad: bool = True) -> List[int]:
    """
    General power-of-two base conversion (e.g., 8->5 or 5->8).
    Returns list of integers in the target base. Raises ValueError on bad input.
    """
    acc = 0
    bits = 0
    ret: List[int] = []
    maxv = (1 << to_bits) - 1
    max_acc = (1 << (from_bits + to_bits - 1)) - 1
    for value in data:
        if value < 0 or value >> from_bits:
            raise ValueError("invalid value for convertbits")
        acc = ((acc << from_bits) | value) & max_acc
        bits += from_bits
        while bits >= to_bits:
            bits -= to_bits
            ret.append((acc >> bits) & maxv)
    if pad:
        if bits:
            ret.append((acc << (to_bits - bits)) & maxv)
    else:
        if bits >= from_bits or ((acc << (to_bits - bits)) & maxv):
            raise ValueError("non-zero padding")
    return ret


def encode_bytes(hrp: str, payload: bytes) -> str:
    """
    Convenience: 8-bit payload -> Bech32 string via 8->5 conversion.
    """
    if not isinstance(payload, (bytes, bytearray)):
        raise EncodingError("payload must be bytes")
    return encode(hrp, convertbits(bytes(payload), 8, 5, pad=True))


def decode_bytes(addr: str) -> Tuple[str, bytes]:
    """
    Decode a string produced by `encode_bytes`. Returns (hrp, payload_bytes).
    """
    hrp, data5 = decode(addr)
    try:
        data8 = convertbits(data5, 5, 8, pad=False)
    except ValueError as e:
        raise DecodingError(str(e)) from None
    return hrp, bytes(data8)
