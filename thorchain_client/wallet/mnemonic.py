"""
Mnemonic helpers (BIP-39) -> deterministic 64-byte seed.

Design notes
------------
- Generation and checksum validation use the `mnemonic` (Trezor) package with
  the English word list. Validation is strict: unknown words or a bad
  checksum reject the phrase.

- Seed derivation is standard BIP-39:
    PBKDF2-HMAC-SHA512(
        password = NFKD(mnemonic),
        salt     = b"mnemonic" + NFKD(passphrase),
        iter     = 2048,
        dkLen    = 64
    )  -> 64-byte seed

  The seed feeds BIP-32 secp256k1 derivation in `wallet.keys`. Keeping to the
  standard means a phrase restores the same account in any Cosmos wallet that
  uses the same HD path.
"""

from __future__ import annotations

from mnemonic import Mnemonic

from ..errors import InvalidMnemonic

_WORDS_TO_STRENGTH = {12: 128, 15: 160, 18: 192, 21: 224, 24: 256}

_english = Mnemonic("english")


def generate_phrase(num_words: int = 24) -> str:
    """
    Create a new BIP-39 English mnemonic (12, 15, 18, 21 or 24 words).
    """
    try:
        strength = _WORDS_TO_STRENGTH[num_words]
    except KeyError:
        raise ValueError(f"num_words must be one of {sorted(_WORDS_TO_STRENGTH)}") from None
    return _english.generate(strength=strength)


def normalize_phrase(phrase: str) -> str:
    """Collapse whitespace so equivalent phrases compare equal."""
    return " ".join(w for w in phrase.strip().split() if w)


def validate_phrase(phrase: str) -> bool:
    """
    Validate a mnemonic phrase against the English word list and checksum.
    """
    if not isinstance(phrase, str):
        return False
    words = normalize_phrase(phrase)
    if len(words.split(" ")) not in _WORDS_TO_STRENGTH:
        return False
    try:
        return bool(_english.check(words))
    except (ValueError, LookupError):
        return False


def phrase_to_seed(phrase: str, passphrase: str = "") -> bytes:
    """
    Convert a validated mnemonic phrase to its 64-byte BIP-39 seed.

    Raises
    ------
    InvalidMnemonic
        If the phrase does not pass checksum validation.
    """
    if not validate_phrase(phrase):
        raise InvalidMnemonic()
    return Mnemonic.to_seed(normalize_phrase(phrase), passphrase=passphrase)


__all__ = [
    "generate_phrase",
    "normalize_phrase",
    "validate_phrase",
    "phrase_to_seed",
]
