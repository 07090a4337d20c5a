"""
Thorchain client for Python.
Convenience exports for the most common client APIs.
"""

from .version import __version__  # noqa: F401

# Core config & errors
from .config import Network, NetworkConfig, SDKConfig  # noqa: F401
from .errors import (  # noqa: F401
    AccountNotFound,
    DecodingError,
    EncodingError,
    InvalidAddress,
    InvalidMnemonic,
    InvalidTxParams,
    MissingFromAddress,
    MissingPrivateKey,
    SigningInvariantViolation,
    ThorchainClientError,
    TransportError,
)

# Client
from .client import Client  # noqa: F401

# Types
from .types.core import (  # noqa: F401
    BroadcastResult,
    Coin,
    NormalTxParams,
    PaginatedTxs,
    TxFilter,
    VaultTxParams,
)

__all__ = [
    "__version__",
    # Core
    "Network", "NetworkConfig", "SDKConfig",
    "ThorchainClientError", "InvalidMnemonic", "InvalidAddress",
    "EncodingError", "DecodingError", "AccountNotFound", "TransportError",
    "MissingFromAddress", "MissingPrivateKey", "SigningInvariantViolation",
    "InvalidTxParams",
    # Client
    "Client",
    # Types
    "BroadcastResult", "Coin", "NormalTxParams", "PaginatedTxs", "TxFilter", "VaultTxParams",
]
