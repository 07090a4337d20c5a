"""
thorchain_client.wallet
=======================

Convenience exports for wallet helpers:

- Mnemonic utilities (generate/validate, seed derivation).
- secp256k1 key derivation and addresses.
- Transaction signer.
"""

from .keys import PrivateKey, PublicKey, derive_address, derive_private_key
from .mnemonic import generate_phrase, phrase_to_seed, validate_phrase
from .signer import Secp256k1Signer, sign

__all__ = [
    # mnemonic
    "generate_phrase",
    "phrase_to_seed",
    "validate_phrase",
    # keys
    "PrivateKey",
    "PublicKey",
    "derive_private_key",
    "derive_address",
    # signing
    "Secp256k1Signer",
    "sign",
]
