"""
thorchain_client.tx.encode
==========================

Canonical JSON encodings for Thorchain (Cosmos legacy amino-JSON) transactions.

This module provides:
- `sign_doc(unsigned)` -> the StdSignDoc dictionary
- `sign_bytes(unsigned)` -> bytes to sign (canonical JSON of the sign doc)
- `std_tx(signed)` -> the wire StdTx dictionary
- `broadcast_body(signed, mode)` -> body for `POST /txs`
- `canonical_json(obj)` -> the canonical serializer itself

Canonical form
--------------
* keys sorted at every level, separators `,` and `:` with no whitespace
* integers carried as decimal strings
* `<`, `>` and `&` escaped as \\u003c, \\u003e and \\u0026, matching Go's
  encoding/json output that nodes recompute when verifying
"""

from __future__ import annotations

import base64
import json
from typing import Any, Dict

from ..types.core import PUBKEY_TYPE, SignedTx, StdSignature, UnsignedTx

__all__ = [
    "canonical_json",
    "sign_doc",
    "sign_bytes",
    "signature_json",
    "std_tx",
    "broadcast_body",
]

_GO_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def canonical_json(obj: Any) -> bytes:
    text = json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    for raw, esc in _GO_ESCAPES.items():
        text = text.replace(raw, esc)
    return text.encode("utf-8")


def sign_doc(unsigned: UnsignedTx) -> Dict[str, Any]:
    return {
        "account_number": str(unsigned.account_number),
        "chain_id": unsigned.chain_id,
        "fee": unsigned.fee.to_dict(),
        "memo": unsigned.memo,
        "msgs": [m.to_amino() for m in unsigned.messages],
        "sequence": str(unsigned.sequence),
    }


def sign_bytes(unsigned: UnsignedTx) -> bytes:
    """Exact bytes the signer hashes and signs."""
    return canonical_json(sign_doc(unsigned))


def _b64(b: bytes) -> str:
    return base64.b64encode(bytes(b)).decode("ascii")


def signature_json(sig: StdSignature) -> Dict[str, Any]:
    return {
        "pub_key": {"type": PUBKEY_TYPE, "value": _b64(sig.pub_key)},
        "signature": _b64(sig.signature),
    }


def std_tx(signed: SignedTx) -> Dict[str, Any]:
    u = signed.unsigned
    return {
        "msg": [m.to_amino() for m in u.messages],
        "fee": u.fee.to_dict(),
        "signatures": [signature_json(s) for s in signed.signatures],
        "memo": u.memo,
    }


def broadcast_body(signed: SignedTx, mode: str = "sync") -> Dict[str, Any]:
    return {"tx": std_tx(signed), "mode": mode}
