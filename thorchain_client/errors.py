"""
Typed error classes for the Thorchain client.

Validation failures (bad mnemonic, bad address, missing sender) are raised
before any network call. Transport failures are `TransportError`; a missing
on-chain account is `AccountNotFound`, which callers must not retry. A chain
rejecting a broadcast transaction is *not* an error: it comes back as a
`BroadcastResult` whose `raw_log` explains the rejection.

Every class derives from `ThorchainClientError` so callers can catch the
whole family at once.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

__all__ = [
    "ThorchainClientError",
    "InvalidMnemonic",
    "InvalidAddress",
    "EncodingError",
    "DecodingError",
    "AccountNotFound",
    "TransportError",
    "MissingFromAddress",
    "MissingPrivateKey",
    "SigningInvariantViolation",
    "InvalidTxParams",
]


class ThorchainClientError(Exception):
    """Base class for all client errors."""


class InvalidMnemonic(ThorchainClientError, ValueError):
    """The phrase does not pass BIP-39 word list and checksum validation."""

    def __init__(self, message: str = "Invalid BIP39 phrase") -> None:
        super().__init__(message)


@dataclass(eq=False)
class InvalidAddress(ThorchainClientError, ValueError):
    """An address failed bech32 validation against the active network prefix."""

    address: str
    expected_prefix: Optional[str] = None
    field: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        where = f" ({self.field})" if self.field else ""
        want = f", expected prefix {self.expected_prefix!r}" if self.expected_prefix else ""
        return f"invalid address{where}: {self.address!r}{want}"


class EncodingError(ThorchainClientError, ValueError):
    """Raised when a payload or prefix cannot be bech32-encoded."""


class DecodingError(ThorchainClientError, ValueError):
    """Raised on malformed checksum, unknown prefix or invalid characters."""


@dataclass(eq=False)
class AccountNotFound(ThorchainClientError):
    """The address has no on-chain account record. Never retried."""

    address: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"account not found: {self.address}"


@dataclass(eq=False)
class TransportError(ThorchainClientError):
    """
    Network-level failure: connection error, timeout, retriable HTTP status or
    an unparseable response body.

    Fields:
      - message: human-readable description
      - url: request URL if known
      - http_status: HTTP status code if a response was received
      - data: optional extra context (truncated body, underlying error text)
    """

    message: str
    url: Optional[str] = None
    http_status: Optional[int] = None
    data: Optional[Any] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        parts = [f"TransportError: {self.message}"]
        if self.url:
            parts.append(f"url={self.url}")
        if self.http_status is not None:
            parts.append(f"http={self.http_status}")
        if self.data is not None:
            parts.append(f"data={self.data!r}")
        return " ".join(parts)


class MissingFromAddress(ThorchainClientError):
    def __init__(self) -> None:
        super().__init__(
            "Parameter `address_from` has to be set. Or set a phrase by calling "
            "`set_phrase` before to use an address of an imported key."
        )


class MissingPrivateKey(ThorchainClientError):
    def __init__(self) -> None:
        super().__init__(
            "Set privkey by calling `set_phrase` before to use an address of an imported key."
        )


class SigningInvariantViolation(ThorchainClientError):
    """Internal bug signal: a freshly produced signature failed self-checks."""


class InvalidTxParams(ThorchainClientError, ValueError):
    """Malformed transfer parameters: amount, denom or memo."""
