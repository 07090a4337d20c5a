"""
thorchain_client.types
======================

Data types shared across the client. Everything lives in :mod:`.core`:

    from thorchain_client.types import Coin, UnsignedTx
"""

from __future__ import annotations

from .core import (
    Account,
    Address,
    BroadcastResult,
    Coin,
    Fee,
    NormalTxParams,
    PaginatedTxs,
    ReadOutcome,
    SendMessage,
    SignedTx,
    StdSignature,
    TxFilter,
    TxRecord,
    TxResult,
    UnsignedTx,
    VaultTxParams,
)

__all__ = [
    "Account",
    "Address",
    "BroadcastResult",
    "Coin",
    "Fee",
    "NormalTxParams",
    "PaginatedTxs",
    "ReadOutcome",
    "SendMessage",
    "SignedTx",
    "StdSignature",
    "TxFilter",
    "TxRecord",
    "TxResult",
    "UnsignedTx",
    "VaultTxParams",
]
