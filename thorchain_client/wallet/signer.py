"""
thorchain_client.wallet.signer
==============================

secp256k1 signer for Thorchain transactions.

A thin facade over `ecdsa`:

- RFC-6979 deterministic ECDSA over sha256(sign_bytes)
- 64-byte `r || s` signatures with low-S normalisation, as Cosmos nodes require
- `sign(unsigned, private_key, account_number, sequence)` produces an
  immutable `SignedTx` and verifies its own signature before returning it

The exact sign bytes are kept on the `SignedTx` so a signature can always be
re-checked against the payload it was made over.
"""

from __future__ import annotations

import hashlib

from ecdsa import BadSignatureError
from ecdsa.util import sigdecode_string, sigencode_string_canonize

from ..errors import SigningInvariantViolation
from ..tx.encode import sign_bytes
from ..types.core import SignedTx, StdSignature, UnsignedTx
from .keys import PrivateKey, PublicKey

__all__ = [
    "Secp256k1Signer",
    "sign",
    "verify",
]


class Secp256k1Signer:
    """
    Stateless signer bound to one private key.
    """

    def __init__(self, private_key: PrivateKey) -> None:
        self._sk = private_key.signing_key()
        self._pub = private_key.public_key()

    @property
    def public_key(self) -> PublicKey:
        return self._pub

    def sign(self, message: bytes) -> bytes:
        return self._sk.sign_deterministic(
            message,
            hashfunc=hashlib.sha256,
            sigencode=sigencode_string_canonize,
        )

    def verify(self, message: bytes, signature: bytes) -> bool:
        return verify(self._pub, message, signature)


def verify(public_key: PublicKey, message: bytes, signature: bytes) -> bool:
    """Check a 64-byte `r || s` signature over sha256(message). Never raises on a bad signature."""
    try:
        return bool(
            public_key.verifying_key().verify(
                signature,
                message,
                hashfunc=hashlib.sha256,
                sigdecode=sigdecode_string,
            )
        )
    except BadSignatureError:
        return False


def sign(
    unsigned: UnsignedTx,
    private_key: PrivateKey,
    account_number: int,
    sequence: int,
) -> SignedTx:
    """
    Sign `unsigned` and attach a single StdSignature.

    Raises
    ------
    SigningInvariantViolation
        If `account_number`/`sequence` disagree with the values embedded in
        `unsigned`, or the fresh signature does not verify.
    """
    if unsigned.account_number != account_number or unsigned.sequence != sequence:
        raise SigningInvariantViolation(
            f"signing account_number/sequence {account_number}/{sequence} do not match "
            f"unsigned tx {unsigned.account_number}/{unsigned.sequence}"
        )

    payload = sign_bytes(unsigned)
    signer = Secp256k1Signer(private_key)
    sig = signer.sign(payload)
    if len(sig) != 64 or not signer.verify(payload, sig):
        raise SigningInvariantViolation("signature failed self-verification")

    return SignedTx(
        unsigned=unsigned,
        signatures=(
            StdSignature(
                pub_key=signer.public_key.to_bytes(),
                signature=sig,
                account_number=account_number,
                sequence=sequence,
            ),
        ),
        sign_bytes=payload,
    )
