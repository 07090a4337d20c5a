"""
thorchain_client.wallet.keys
============================

secp256k1 key material for Thorchain accounts.

    mnemonic --BIP-39--> seed --BIP-32 m/44'/931'/0'/0/0--> PrivateKey
    PrivateKey --> PublicKey (33-byte compressed) --> hash160 --> bech32 address

Derivation is pure and deterministic: the same phrase always yields the same
key, in this process or any other.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from bip_utils import Bip32Slip10Secp256k1
from ecdsa import SECP256k1, SigningKey, VerifyingKey

from .. import address as address_codec
from ..config import DEFAULT_HD_PATH
from .mnemonic import phrase_to_seed

__all__ = [
    "PrivateKey",
    "PublicKey",
    "derive_private_key",
    "derive_address",
]


@dataclass(frozen=True)
class PublicKey:
    """Compressed secp256k1 public key."""

    data: bytes

    def __post_init__(self) -> None:
        if len(self.data) != 33 or self.data[0] not in (2, 3):
            raise ValueError("public key must be 33 bytes in compressed SEC1 form")

    def to_bytes(self) -> bytes:
        return bytes(self.data)

    def verifying_key(self) -> VerifyingKey:
        return VerifyingKey.from_string(self.data, curve=SECP256k1)

    def address(self, prefix: str) -> str:
        return address_codec.from_public_key(self.data, prefix)


@dataclass(frozen=True)
class PrivateKey:
    """
    Raw 32-byte secp256k1 secret. The repr never shows the secret.
    """

    secret: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if len(self.secret) != 32:
            raise ValueError("private key must be 32 bytes")

    def signing_key(self) -> SigningKey:
        return SigningKey.from_string(self.secret, curve=SECP256k1)

    def public_key(self) -> PublicKey:
        vk = self.signing_key().get_verifying_key()
        return PublicKey(vk.to_string("compressed"))


def derive_private_key(mnemonic: str, path: str = DEFAULT_HD_PATH) -> PrivateKey:
    """
    Derive the account private key for `mnemonic` at BIP-32 `path`.

    Raises
    ------
    InvalidMnemonic
        If the phrase does not pass BIP-39 checksum validation.
    """
    seed = phrase_to_seed(mnemonic)
    ctx = Bip32Slip10Secp256k1.FromSeed(seed).DerivePath(path)
    return PrivateKey(ctx.PrivateKey().Raw().ToBytes())


def derive_address(private_key: PrivateKey, prefix: str) -> str:
    """Public key -> hash160 -> bech32 with `prefix`."""
    return private_key.public_key().address(prefix)
